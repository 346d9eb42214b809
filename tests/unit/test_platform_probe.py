"""Tests for host OS detection."""

from unittest.mock import MagicMock, patch

import pytest

from nativeloader.platform_probe import (
    OSFamily,
    detect_os_family,
    running_on_linux,
    running_on_mac,
    running_on_windows,
    shared_library_name,
    shared_library_suffix,
)

pytestmark = pytest.mark.usefixtures("reset_os_family")


class TestDetectOsFamily:
    """Tests for detect_os_family."""

    @pytest.mark.parametrize(
        "system, family",
        [
            ("Darwin", OSFamily.MACOS),
            ("Linux", OSFamily.LINUX),
            ("Windows", OSFamily.WINDOWS),
            ("FreeBSD", OSFamily.OTHER),
            ("", OSFamily.OTHER),
        ],
    )
    def test_mapping(self, system: str, family: OSFamily) -> None:
        with patch("nativeloader.platform_probe.platform.system", return_value=system):
            assert detect_os_family() is family

    @patch("nativeloader.platform_probe.platform.system", return_value="Linux")
    def test_resolved_once(self, mock_system: MagicMock) -> None:
        detect_os_family()
        detect_os_family()
        running_on_linux()

        mock_system.assert_called_once()


class TestRunningOn:
    """Tests for the boolean probes."""

    @pytest.mark.parametrize(
        "system, mac, linux, windows",
        [
            ("Darwin", True, False, False),
            ("Linux", False, True, False),
            ("Windows", False, False, True),
            ("SunOS", False, False, False),
        ],
    )
    def test_probes(self, system: str, mac: bool, linux: bool, windows: bool) -> None:
        with patch("nativeloader.platform_probe.platform.system", return_value=system):
            assert running_on_mac() is mac
            assert running_on_linux() is linux
            assert running_on_windows() is windows

    def test_mac_and_linux_are_exclusive_on_this_host(self) -> None:
        assert not (running_on_mac() and running_on_linux())


class TestSharedLibraryNaming:
    """Tests for shared_library_suffix and shared_library_name."""

    @pytest.mark.parametrize(
        "family, suffix, name",
        [
            (OSFamily.MACOS, ".dylib", "libfoo.dylib"),
            (OSFamily.LINUX, ".so", "libfoo.so"),
            (OSFamily.WINDOWS, ".dll", "foo.dll"),
            (OSFamily.OTHER, ".so", "libfoo.so"),
        ],
    )
    def test_explicit_family(self, family: OSFamily, suffix: str, name: str) -> None:
        assert shared_library_suffix(family) == suffix
        assert shared_library_name("foo", family) == name

    @patch("nativeloader.platform_probe.platform.system", return_value="Darwin")
    def test_defaults_to_host(self, _mock: MagicMock) -> None:
        assert shared_library_name("foo") == "libfoo.dylib"

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValueError, match="must not be empty"):
            shared_library_name("")
