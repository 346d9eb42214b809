"""Exception types raised while extracting bundled native libraries.

A failed *load* is not an exception: it is reported through
:class:`nativeloader.loader.LoadFailed`. Everything here signals a broken
deployment (missing or unreadable artifact, unusable temp directory) and is
meant to propagate to the caller.
"""

from __future__ import annotations

from typing import Any, Optional


class NativeLoaderError(Exception):
    """Base class for all nativeloader errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ResourceNotFoundError(NativeLoaderError):
    """Raised when a resource cannot be found in the bundled packages.

    Args:
        message: Human readable description.
        path: Resource path that was looked up.
        anchor: Anchor the lookup was relative to, if any.
    """

    def __init__(self, message: str, path: str, anchor: Optional[Any] = None) -> None:
        super().__init__(message)
        self.path = path
        self.anchor = anchor


class ResourceCopyError(NativeLoaderError):
    """Raised when a resource cannot be streamed to its destination file."""

    def __init__(self, message: str, path: str, destination: Optional[str]) -> None:
        super().__init__(message)
        self.path = path
        self.destination = destination


class TempDirCreationError(NativeLoaderError):
    """Raised when the scratch directory cannot be created."""

    def __init__(self, message: str, prefix: str) -> None:
        super().__init__(message)
        self.prefix = prefix
