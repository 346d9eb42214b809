"""Resource lookup and materialization.

Resources are looked up through ``importlib.resources`` and the entries of
``sys.path``, so the same code works for packages installed as plain
directories, wheels unpacked into site-packages, zip-apps and zip-imported
archives.
"""

from __future__ import annotations

import importlib
import importlib.resources
import importlib.util
import logging
import os
import shutil
import sys
import tempfile
import zipfile
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from types import ModuleType
from typing import Any, BinaryIO, Optional, Union

from nativeloader.cleanup import CleanupRegistry, default_registry
from nativeloader.config import DEFAULT_TEMP_PREFIX, LoaderConfig
from nativeloader.exceptions import (
    ResourceCopyError,
    ResourceNotFoundError,
    TempDirCreationError,
)
from nativeloader.utils.logging import configure_module_logger

logger = configure_module_logger(__name__, level=logging.INFO)

Anchor = Union[str, ModuleType, type]

# importlib.resources.abc.Traversable; zipfile.Path and pathlib.Path both qualify
Traversable = Any


def _split(path: str) -> list[str]:
    return [part for part in path.split("/") if part and part != "."]


def _reject_parent_segments(path: str) -> None:
    if ".." in path.split("/"):
        raise ValueError(f"Resource path must not contain '..' segments: {path}")


@dataclass(frozen=True)
class Absolute:
    """Resolve *path* against the roots of the bundled resource namespace.

    ``/libfoo.so`` is looked up at the top of every ``sys.path`` entry,
    ``/mypkg/native/libfoo.so`` inside the importable package ``mypkg``.
    """

    path: str

    def __post_init__(self) -> None:
        _reject_parent_segments(self.path)

    def locate(self) -> Optional[Traversable]:
        parts = _split(self.path)
        if not parts:
            return None

        for entry in sys.path:
            found = _find_in_path_entry(entry, parts)
            if found is not None:
                return found

        # Packages served by custom loaders (frozen apps) are only reachable
        # through importlib.resources.
        if len(parts) < 2 or not parts[0].isidentifier():
            return None
        spec = importlib.util.find_spec(parts[0])
        if spec is not None and spec.submodule_search_locations is not None:
            candidate = importlib.resources.files(parts[0]).joinpath(*parts[1:])
            if candidate.is_file():
                return candidate
        return None

    def describe(self) -> str:
        return self.path


@dataclass(frozen=True)
class RelativeTo:
    """Resolve *path* inside the package that contains *anchor*."""

    anchor: Anchor
    path: str

    def __post_init__(self) -> None:
        if self.path.startswith("/"):
            raise ValueError(
                f"Relative resource path must not start with '/': {self.path}"
            )
        _reject_parent_segments(self.path)

    def locate(self) -> Optional[Traversable]:
        parts = _split(self.path)
        if not parts:
            return None
        candidate = _anchor_root(self.anchor).joinpath(*parts)
        return candidate if candidate.is_file() else None

    def describe(self) -> str:
        return f"{self.path} (relative to {_anchor_name(self.anchor)})"


Resolution = Union[Absolute, RelativeTo]


def resolution_for(path: str, anchor: Optional[Anchor] = None) -> Resolution:
    """Pick the lookup strategy for *path*: absolute unless an anchor is given."""
    if anchor is None:
        return Absolute(path)
    return RelativeTo(anchor, path)


def _find_in_path_entry(entry: str, parts: list[str]) -> Optional[Traversable]:
    root = Path(entry or os.getcwd())
    if root.is_dir():
        candidate = root.joinpath(*parts)
        return candidate if candidate.is_file() else None
    if root.is_file() and zipfile.is_zipfile(root):
        member = zipfile.Path(root, at="/".join(parts))
        return member if member.is_file() else None
    return None


def _anchor_name(anchor: Anchor) -> str:
    if isinstance(anchor, str):
        return anchor
    if isinstance(anchor, ModuleType):
        return anchor.__name__
    return f"{anchor.__module__}.{anchor.__qualname__}"


def _anchor_module(anchor: Anchor) -> ModuleType:
    if isinstance(anchor, ModuleType):
        return anchor
    if isinstance(anchor, str):
        if anchor.startswith("."):
            raise ModuleNotFoundError(
                f"Anchor must be an absolute module name: {anchor}"
            )
        return importlib.import_module(anchor)
    return importlib.import_module(anchor.__module__)


def _anchor_root(anchor: Anchor) -> Traversable:
    """Directory-like root of the package holding *anchor*."""
    module = _anchor_module(anchor)
    if hasattr(module, "__path__"):
        return importlib.resources.files(module.__name__)

    package = module.__spec__.parent if module.__spec__ is not None else ""
    if package:
        return importlib.resources.files(package)
    module_file = getattr(module, "__file__", None)
    if module_file is None:
        raise ModuleNotFoundError(f"{module.__name__} has no location on disk")
    return Path(module_file).resolve().parent


class Resource:
    """A bundled resource addressed by path and an optional anchor.

    Args:
        path: Slash separated resource path.
        anchor: Package name, module or class the path is relative to.
            Without an anchor the path is absolute.
    """

    def __init__(self, path: str, anchor: Optional[Anchor] = None) -> None:
        if not PurePosixPath(path).name:
            raise ValueError(f"Resource path does not name a file: {path!r}")
        self.path = path
        self.anchor = anchor
        self.strategy = resolution_for(path, anchor)

    def __repr__(self) -> str:
        return f"Resource({self.strategy.describe()})"

    @property
    def base_name(self) -> str:
        return PurePosixPath(self.path).stem

    @property
    def extension(self) -> str:
        """Final suffix including the dot, or an empty string."""
        return PurePosixPath(self.path).suffix

    def _not_found(self, cause: Optional[str] = None) -> ResourceNotFoundError:
        if self.anchor is None:
            message = f"Resource not found: {self.path}"
        else:
            message = (
                f"Resource not found relative to {_anchor_name(self.anchor)}: "
                f"{self.path}"
            )
        if cause:
            message = f"{message} ({cause})"
        return ResourceNotFoundError(message, path=self.path, anchor=self.anchor)

    def resolve(self) -> Traversable:
        """Locate the resource.

        Raises:
            ResourceNotFoundError: If nothing matches, or the anchor cannot
                be imported.
        """
        try:
            found = self.strategy.locate()
        except ImportError as exc:
            raise self._not_found(str(exc)) from exc
        if found is None:
            raise self._not_found()
        return found

    def open_stream(self) -> BinaryIO:
        """Open the resource for binary reading; the caller must close it."""
        source = self.resolve()
        try:
            stream: BinaryIO = source.open("rb")
        except (OSError, zipfile.BadZipFile) as exc:
            raise ResourceCopyError(
                f"Unable to open resource '{self.path}': {exc}",
                path=self.path,
                destination=None,
            ) from exc
        return stream

    def write_to(self, destination: Union[str, Path]) -> Path:
        """Copy the resource bytes verbatim into *destination*.

        Raises:
            ResourceNotFoundError: If the resource does not exist.
            ResourceCopyError: On any I/O error while opening or copying.
        """
        target = Path(destination)
        source = self.resolve()
        try:
            with source.open("rb") as stream, open(target, "wb") as sink:
                shutil.copyfileobj(stream, sink)
        except (OSError, zipfile.BadZipFile) as exc:
            # zip members report a bad CRC only once they are read to the end
            raise ResourceCopyError(
                f"Unable to copy resource '{self.path}' to '{target}': {exc}",
                path=self.path,
                destination=str(target),
            ) from exc
        return target


def create_temp_directory(
    prefix: str = DEFAULT_TEMP_PREFIX,
    registry: Optional[CleanupRegistry] = None,
    root: Optional[Union[str, Path]] = None,
) -> Path:
    """Create a uniquely named scratch directory registered for cleanup.

    Args:
        prefix: Directory name prefix.
        registry: Registry that owns the directory; defaults to the
            process-wide registry.
        root: Parent directory; defaults to the system temp directory.

    Returns:
        Absolute, normalized path of the new directory.

    Raises:
        TempDirCreationError: If the directory cannot be created.
    """
    registry = registry if registry is not None else default_registry()
    try:
        created = tempfile.mkdtemp(prefix=prefix, dir=root)
    except OSError as exc:
        raise TempDirCreationError(f"Bad tmp dir: {exc}", prefix=prefix) from exc
    return registry.register(Path(os.path.normpath(os.path.abspath(created))))


def materialize_resource(
    path: str,
    anchor: Optional[Anchor] = None,
    registry: Optional[CleanupRegistry] = None,
    config: Optional[LoaderConfig] = None,
) -> Path:
    """Extract a bundled resource to a fresh temporary file.

    The resource is resolved before anything is created on disk, so a
    missing resource leaves no temp entries behind. The scratch directory and
    the file are registered for cleanup as soon as they exist, before any
    byte is copied.

    Args:
        path: Resource path (absolute unless *anchor* is given).
        anchor: Optional package, module or class to resolve against.
        registry: Cleanup owner; defaults to the process-wide registry.
        config: Loader settings; defaults to ``LoaderConfig()``.

    Returns:
        Path of the temp file, named ``<base><random><ext>``.
    """
    config = config if config is not None else LoaderConfig()
    registry = registry if registry is not None else default_registry()

    resource = Resource(path, anchor)
    resource.resolve()
    logger.debug(f"Resolved resource [bold]{resource.strategy.describe()}[/bold]")

    scratch = create_temp_directory(
        config.temp_prefix, registry=registry, root=config.temp_root
    )
    logger.debug(f"Scratch directory created: {scratch}")

    try:
        fd, name = tempfile.mkstemp(
            prefix=resource.base_name, suffix=resource.extension, dir=scratch
        )
    except OSError as exc:
        raise ResourceCopyError(
            f"Unable to create temp file for '{path}' in '{scratch}'",
            path=path,
            destination=str(scratch),
        ) from exc
    os.close(fd)
    target = registry.register(name)
    logger.debug(f"Temp file created: {target}")

    resource.write_to(target)
    logger.debug(f"Extracted [bold]{path}[/bold] to {target}")
    return target
