"""Extract native libraries bundled in Python packages and load them.

Example::

    import nativeloader

    if nativeloader.load_library_from_resources("/mypkg/native/libfoo.so"):
        ...  # use the native code path
    else:
        ...  # fall back to pure Python
"""

from nativeloader._version import __version__
from nativeloader.cleanup import CleanupRegistry, default_registry
from nativeloader.config import LoaderConfig, load_config
from nativeloader.exceptions import (
    NativeLoaderError,
    ResourceCopyError,
    ResourceNotFoundError,
    TempDirCreationError,
)
from nativeloader.loader import (
    Loaded,
    LoadFailed,
    LoadResult,
    NativeLibraryLoader,
    get_loader,
    load_library_from_resources,
    load_native_library,
)
from nativeloader.platform_probe import (
    OSFamily,
    detect_os_family,
    running_on_linux,
    running_on_mac,
    running_on_windows,
    shared_library_name,
    shared_library_suffix,
)
from nativeloader.resources import (
    Absolute,
    RelativeTo,
    Resource,
    create_temp_directory,
    materialize_resource,
    resolution_for,
)

__all__ = [
    "__version__",
    "Absolute",
    "CleanupRegistry",
    "LoadFailed",
    "LoadResult",
    "Loaded",
    "LoaderConfig",
    "NativeLibraryLoader",
    "NativeLoaderError",
    "OSFamily",
    "RelativeTo",
    "Resource",
    "ResourceCopyError",
    "ResourceNotFoundError",
    "TempDirCreationError",
    "create_temp_directory",
    "default_registry",
    "detect_os_family",
    "get_loader",
    "load_config",
    "load_library_from_resources",
    "load_native_library",
    "materialize_resource",
    "resolution_for",
    "running_on_linux",
    "running_on_mac",
    "running_on_windows",
    "shared_library_name",
    "shared_library_suffix",
]
