"""End-to-end loading of real shared objects bundled in packages."""

import sys
from pathlib import Path
from typing import Any

import pytest

from nativeloader import (
    CleanupRegistry,
    LoaderConfig,
    Loaded,
    NativeLibraryLoader,
    ResourceNotFoundError,
    running_on_linux,
    running_on_mac,
)

pytestmark = pytest.mark.skipif(
    sys.platform == "win32", reason="uses a POSIX extension module as the library"
)


def _real_shared_object() -> bytes:
    """Bytes of a shared object that is known to load on this host."""
    import _ctypes

    location = getattr(_ctypes, "__file__", None)
    if not location:
        pytest.skip("_ctypes is built into the interpreter")
    return Path(location).read_bytes()


@pytest.fixture
def loader(tmp_path: Path) -> Any:
    with CleanupRegistry() as registry:
        yield NativeLibraryLoader(
            config=LoaderConfig(temp_root=tmp_path), registry=registry
        )


def test_bundled_library_loads_and_exposes_symbols(
    loader: NativeLibraryLoader, make_package: Any
) -> None:
    pkg = make_package({"libfoo.so": _real_shared_object()})

    assert loader.load_library_from_resources(f"/{pkg}/libfoo.so") is True

    result = loader.load(f"/{pkg}/libfoo.so")
    assert isinstance(result, Loaded)
    assert hasattr(result.handle, "PyInit__ctypes")


def test_library_inside_zip_archive_loads(
    loader: NativeLibraryLoader, make_package: Any
) -> None:
    pkg = make_package({"native/libfoo.so": _real_shared_object()}, zipped=True)

    assert loader.load_library_from_resources(f"/{pkg}/native/libfoo.so") is True


def test_foreign_artifact_reports_false(
    loader: NativeLibraryLoader, make_package: Any
) -> None:
    garbage = b"\x7fELF\x02\x01\x01" + b"\x00" * 9 + b"not a real library" * 8
    pkg = make_package({"libforeign.so": garbage})

    assert loader.load_library_from_resources(f"/{pkg}/libforeign.so") is False


def test_missing_library_raises(loader: NativeLibraryLoader) -> None:
    with pytest.raises(ResourceNotFoundError) as excinfo:
        loader.load_library_from_resources("/does-not-exist.so")

    assert "/does-not-exist.so" in str(excinfo.value)


def test_registry_drain_removes_extracted_copies(
    tmp_path: Path, make_package: Any
) -> None:
    pkg = make_package({"libfoo.so": _real_shared_object()})
    registry = CleanupRegistry()
    loader = NativeLibraryLoader(
        config=LoaderConfig(temp_root=tmp_path / "scratch"), registry=registry
    )
    (tmp_path / "scratch").mkdir()

    loader.load(f"/{pkg}/libfoo.so")
    registry.drain()

    assert list((tmp_path / "scratch").iterdir()) == []


def test_host_is_not_both_mac_and_linux() -> None:
    assert not (running_on_mac() and running_on_linux())
