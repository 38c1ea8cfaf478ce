"""Tests for scopeflat.paths."""

import pytest

from scopeflat.paths import is_absolute_pattern, to_native_path, to_posix


class TestToNativePath:
    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("/mnt/c/Users/me/project", "C:\\Users\\me\\project"),
            ("/mnt/d/data/file.txt", "D:\\data\\file.txt"),
            ("/mnt/c/", "C:\\"),
            # already Windows style
            ("C:\\Users\\me", "C:\\Users\\me"),
            # not a drive mount
            ("/mnt/cdrom/file", "/mnt/cdrom/file"),
            ("/home/me/project", "/home/me/project"),
            ("relative/path", "relative/path"),
        ],
    )
    def test_windows_target(self, path: str, expected: str) -> None:
        assert to_native_path(path, platform="win32") == expected

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("C:\\Users\\me\\project", "/mnt/c/Users/me/project"),
            ("d:\\data\\file.txt", "/mnt/d/data/file.txt"),
            ("E:\\", "/mnt/e/"),
            # already POSIX style
            ("/mnt/c/Users/me", "/mnt/c/Users/me"),
            ("/home/me/project", "/home/me/project"),
            # drive letter without backslash is left alone
            ("C:/Users/me", "C:/Users/me"),
            ("relative\\path", "relative\\path"),
        ],
    )
    @pytest.mark.parametrize("platform", ["linux", "darwin"])
    def test_posix_target(self, path: str, expected: str, platform: str) -> None:
        assert to_native_path(path, platform=platform) == expected

    def test_round_trip_between_platforms(self) -> None:
        windows = "C:\\work\\src\\app.js"
        mounted = to_native_path(windows, platform="linux")
        assert mounted == "/mnt/c/work/src/app.js"
        assert to_native_path(mounted, platform="win32") == windows

    def test_defaults_to_current_platform(self) -> None:
        assert to_native_path("plain/relative") == "plain/relative"


class TestIsAbsolutePattern:
    @pytest.mark.parametrize(
        ("pattern", "expected"),
        [
            ("/home/me/src", True),
            ("C:\\proj\\src", True),
            ("c:\\proj", True),
            ("./src", False),
            ("src/*.js", False),
            ("**/*.test.js", False),
        ],
    )
    def test_detects_rooted_patterns(self, pattern: str, expected: bool) -> None:
        assert is_absolute_pattern(pattern) is expected


def test_to_posix() -> None:
    assert to_posix("C:\\a\\b.txt") == "C:/a/b.txt"
    assert to_posix("a/b") == "a/b"
