"""Extract bundled shared libraries and load them with ctypes.

Extraction problems (missing resource, I/O errors) mean the deployment is
broken and propagate as exceptions. A library the host loader rejects
(wrong architecture, missing dependency, corrupt file) is an expected,
platform-dependent outcome and is reported as :class:`LoadFailed`, so the
caller can fall back to a pure-Python code path.
"""

from __future__ import annotations

import ctypes
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Union

from nativeloader.cleanup import CleanupRegistry, default_registry
from nativeloader.cleanup import logger as cleanup_logger
from nativeloader.config import LoaderConfig, load_config
from nativeloader.platform_probe import shared_library_name
from nativeloader.resources import Anchor, materialize_resource
from nativeloader.resources import logger as resources_logger
from nativeloader.utils.logging import configure_module_logger

logger = configure_module_logger(__name__, level=logging.INFO)


@dataclass(frozen=True)
class Loaded:
    """The library was loaded; ``handle`` exposes its symbols."""

    path: Path
    handle: ctypes.CDLL

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class LoadFailed:
    """The host loader rejected the library."""

    path: Path
    reason: str

    @property
    def ok(self) -> bool:
        return False


LoadResult = Union[Loaded, LoadFailed]


def load_native_library(
    path: Union[str, Path], mode: Optional[int] = None
) -> LoadResult:
    """Load the shared library at *path* into the current process.

    Args:
        path: Path of a materialized library file.
        mode: ``dlopen`` flags; defaults to ``ctypes.DEFAULT_MODE``.

    Returns:
        ``Loaded`` with the ctypes handle, or ``LoadFailed`` with the loader's
        message. The loader's ``OSError`` never escapes.
    """
    target = Path(path).absolute()
    logger.debug(f"Attempting to load: {target}")
    try:
        handle = ctypes.CDLL(
            str(target), mode=ctypes.DEFAULT_MODE if mode is None else mode
        )
    except OSError as exc:
        logger.warning(f"[yellow]⚠[/yellow] Could not load {target}: {exc}")
        return LoadFailed(path=target, reason=str(exc))

    logger.info(f"[green]✓[/green] Loaded native library [bold]{target.name}[/bold]")
    return Loaded(path=target, handle=handle)


class NativeLibraryLoader:
    """Extracts bundled native libraries and loads them into the process.

    Every call gets its own scratch directory, so loaders can be shared
    between threads. Loaded libraries are never unloaded, and loading the
    same library twice is left to the host loader.

    Args:
        config: Loader settings; defaults to ``LoaderConfig()``.
        registry: Owner of the temp files; defaults to the process-wide
            registry drained at interpreter exit.
    """

    def __init__(
        self,
        config: Optional[LoaderConfig] = None,
        registry: Optional[CleanupRegistry] = None,
    ) -> None:
        self.config = config if config is not None else LoaderConfig()
        self.registry = registry if registry is not None else default_registry()

    @contextmanager
    def _step_logging(self) -> Iterator[None]:
        """Log every step at DEBUG for the duration of one call when verbose."""
        if not self.config.verbose:
            yield
            return

        step_loggers = (logger, resources_logger, cleanup_logger)
        previous = [step_logger.level for step_logger in step_loggers]
        for step_logger in step_loggers:
            step_logger.setLevel(logging.DEBUG)
        try:
            yield
        finally:
            for step_logger, level in zip(step_loggers, previous):
                step_logger.setLevel(level)

    def materialize(self, path: str, anchor: Optional[Anchor] = None) -> Path:
        """Extract *path* to a temp file owned by this loader's registry."""
        with self._step_logging():
            return materialize_resource(
                path, anchor=anchor, registry=self.registry, config=self.config
            )

    def load(self, library_path: str, anchor: Optional[Anchor] = None) -> LoadResult:
        """Extract *library_path* and load it.

        Raises:
            ResourceNotFoundError: If the library is not bundled.
            ResourceCopyError: If it cannot be written to disk.
            TempDirCreationError: If no scratch directory can be created.
        """
        with self._step_logging():
            extracted = self.materialize(library_path, anchor=anchor)
            return load_native_library(extracted)

    def load_library_from_resources(self, library_path: str) -> bool:
        """Extract and load a library by its absolute resource path.

        Returns:
            True when the library was loaded, False when the host loader
            rejected it. Extraction errors propagate.
        """
        return self.load(library_path).ok

    def load_platform_library(
        self, package: Anchor, name: str, subdir: str = ""
    ) -> LoadResult:
        """Load the host's build of *name* from inside *package*.

        ``load_platform_library("mypkg", "foo", "native")`` loads
        ``native/libfoo.so`` on Linux and ``native/libfoo.dylib`` on macOS.
        """
        filename = shared_library_name(name)
        relative = f"{subdir.strip('/')}/{filename}" if subdir.strip("/") else filename
        return self.load(relative, anchor=package)


_DEFAULT_LOADER: Optional[NativeLibraryLoader] = None


def get_loader() -> NativeLibraryLoader:
    """Return the shared loader built from ``load_config()``."""
    global _DEFAULT_LOADER

    if _DEFAULT_LOADER is None:
        _DEFAULT_LOADER = NativeLibraryLoader(config=load_config())
    return _DEFAULT_LOADER


def load_library_from_resources(library_path: str) -> bool:
    """Extract and load a bundled library with the shared loader.

    Args:
        library_path: Absolute resource path, e.g. ``/mypkg/native/libfoo.so``.

    Returns:
        True if extraction and load succeeded, False if the host loader
        rejected the library.
    """
    return get_loader().load_library_from_resources(library_path)
