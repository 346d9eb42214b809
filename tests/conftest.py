"""Shared fixtures: throw-away packages on sys.path and state resets."""

import logging
import sys
import uuid
import zipfile
from pathlib import Path
from typing import Callable, Iterator, Optional

import pytest

from nativeloader.platform_probe import detect_os_family

MakePackage = Callable[..., str]


@pytest.fixture
def make_package(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Iterator[MakePackage]:
    """Build an importable package holding the given resource files.

    The returned factory takes ``files`` (relative path → bytes) and
    ``zipped``; it returns the package name. With ``zipped=True`` the
    package lives inside a zip archive placed on sys.path.
    """
    created: list[str] = []

    def _make(
        files: dict[str, bytes],
        zipped: bool = False,
        name: Optional[str] = None,
    ) -> str:
        name = name or f"nl_pkg_{uuid.uuid4().hex[:10]}"
        contents = {f"{name}/__init__.py": b""}
        contents.update({f"{name}/{rel}": data for rel, data in files.items()})

        if zipped:
            archive = tmp_path / f"{name}.zip"
            with zipfile.ZipFile(archive, "w") as zf:
                for member, data in contents.items():
                    zf.writestr(member, data)
            monkeypatch.syspath_prepend(str(archive))
        else:
            root = tmp_path / f"site_{name}"
            for member, data in contents.items():
                target = root / member
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_bytes(data)
            monkeypatch.syspath_prepend(str(root))

        created.append(name)
        return name

    yield _make

    for name in created:
        for module in list(sys.modules):
            if module == name or module.startswith(name + "."):
                del sys.modules[module]


@pytest.fixture
def reset_os_family() -> Iterator[None]:
    """Clear the cached OS family before and after a test."""
    detect_os_family.cache_clear()
    yield
    detect_os_family.cache_clear()


@pytest.fixture
def restore_root_logger() -> Iterator[None]:
    """Put the root logger back the way the test found it."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    propagate = root.propagate
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    root.propagate = propagate
