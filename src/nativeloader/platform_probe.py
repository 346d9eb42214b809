"""Host operating system detection.

Callers use these queries to choose which bundled artifact to extract
(``libfoo.so`` on Linux, ``libfoo.dylib`` on macOS, ``foo.dll`` on Windows).
"""

from __future__ import annotations

import platform
from enum import Enum
from functools import lru_cache
from typing import Optional


class OSFamily(str, Enum):
    """Operating system families with distinct shared-library conventions."""

    MACOS = "macos"
    LINUX = "linux"
    WINDOWS = "windows"
    OTHER = "other"


_SYSTEM_TO_FAMILY = {
    "darwin": OSFamily.MACOS,
    "linux": OSFamily.LINUX,
    "windows": OSFamily.WINDOWS,
}

_SUFFIXES = {
    OSFamily.MACOS: ".dylib",
    OSFamily.LINUX: ".so",
    OSFamily.WINDOWS: ".dll",
    OSFamily.OTHER: ".so",
}


def _family_for(system: str) -> OSFamily:
    """Map a ``platform.system()`` value to an :class:`OSFamily`."""
    return _SYSTEM_TO_FAMILY.get(system.strip().lower(), OSFamily.OTHER)


@lru_cache(maxsize=1)
def detect_os_family() -> OSFamily:
    """Return the host OS family, computed once per process."""
    return _family_for(platform.system())


def running_on_mac() -> bool:
    """Return True when the host is macOS."""
    return detect_os_family() is OSFamily.MACOS


def running_on_linux() -> bool:
    """Return True when the host is Linux."""
    return detect_os_family() is OSFamily.LINUX


def running_on_windows() -> bool:
    return detect_os_family() is OSFamily.WINDOWS


def shared_library_suffix(family: Optional[OSFamily] = None) -> str:
    """File suffix the host dynamic loader expects for shared libraries."""
    return _SUFFIXES[family or detect_os_family()]


def shared_library_name(name: str, family: Optional[OSFamily] = None) -> str:
    """Build the platform file name for a bare library name.

    Args:
        name: Library name without prefix or suffix (e.g. ``"foo"``).
        family: Target family; defaults to the host.

    Returns:
        ``libfoo.so``, ``libfoo.dylib`` or ``foo.dll``.
    """
    if not name:
        raise ValueError("library name must not be empty")
    family = family or detect_os_family()
    prefix = "" if family is OSFamily.WINDOWS else "lib"
    return f"{prefix}{name}{_SUFFIXES[family]}"
