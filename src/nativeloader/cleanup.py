"""Registry of temporary paths to delete at a well-defined shutdown point.

Applications that own their lifecycle create a :class:`CleanupRegistry` and
use it as a context manager. Code that has no such owner falls back to
:func:`default_registry`, which is drained once when the interpreter exits.
"""

from __future__ import annotations

import atexit
import logging
import shutil
import threading
from pathlib import Path
from types import TracebackType
from typing import Optional, Union

from nativeloader.utils.logging import configure_module_logger

logger = configure_module_logger(__name__, level=logging.INFO)

PathLike = Union[str, Path]


class CleanupRegistry:
    """Append-only list of files and directories owned by this process.

    Entries are removed in reverse registration order, so a temp file is
    deleted before the scratch directory that holds it.

    Example::

        with CleanupRegistry() as registry:
            path = materialize_resource("/mypkg/native/libfoo.so", registry=registry)
            ...
        # path and its scratch directory are gone here
    """

    def __init__(self) -> None:
        self._paths: list[Path] = []
        self._lock = threading.Lock()

    def register(self, path: PathLike) -> Path:
        """Schedule *path* for deletion and return it as a Path."""
        entry = Path(path)
        with self._lock:
            self._paths.append(entry)
        logger.debug(f"Registered [bold]{entry}[/bold] for cleanup")
        return entry

    @property
    def paths(self) -> tuple[Path, ...]:
        with self._lock:
            return tuple(self._paths)

    def __len__(self) -> int:
        with self._lock:
            return len(self._paths)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, Path)):
            return False
        with self._lock:
            return Path(path) in self._paths

    def drain(self) -> list[Path]:
        """Delete every registered path, newest first.

        Deletion is best effort: a path that is already gone or cannot be
        removed is logged and skipped.

        Returns:
            The paths that were actually removed.
        """
        with self._lock:
            pending = list(reversed(self._paths))
            self._paths.clear()

        removed: list[Path] = []
        for path in pending:
            try:
                if path.is_dir() and not path.is_symlink():
                    shutil.rmtree(path)
                elif path.exists() or path.is_symlink():
                    path.unlink()
                else:
                    continue
            except OSError as exc:
                logger.debug(f"Could not remove {path}: {exc}")
                continue
            removed.append(path)

        if removed:
            logger.debug(f"Cleanup removed {len(removed)} path(s)")
        return removed

    def __enter__(self) -> CleanupRegistry:
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.drain()


_DEFAULT_REGISTRY: Optional[CleanupRegistry] = None
_DEFAULT_LOCK = threading.Lock()


def default_registry() -> CleanupRegistry:
    """Return the process-wide registry, drained at interpreter exit."""
    global _DEFAULT_REGISTRY

    with _DEFAULT_LOCK:
        if _DEFAULT_REGISTRY is None:
            _DEFAULT_REGISTRY = CleanupRegistry()
            atexit.register(_DEFAULT_REGISTRY.drain)
        return _DEFAULT_REGISTRY
