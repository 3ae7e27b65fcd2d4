"""Unit tests for platform folder conventions."""

import os
import pytest
from pathlib import Path

from hostbridge.errors import SettingsUnavailableError
from hostbridge.platform import paths


class TestHomeDir:
    """Tests for home directory resolution."""

    def test_home_dir_is_absolute(self):
        home = paths.get_home_dir()
        assert home.is_absolute()
        assert str(home) != ""

    def test_home_dir_follows_home_variable(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.setenv("USERPROFILE", str(tmp_path))
        assert paths.get_home_dir() == tmp_path

    def test_unknown_home_raises(self, monkeypatch):
        monkeypatch.setattr(paths.os.path, "expanduser", lambda p: p)
        with pytest.raises(SettingsUnavailableError, match="settings"):
            paths.get_home_dir("settings")

    def test_home_subfolder(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.setenv("USERPROFILE", str(tmp_path))
        assert paths.home_subfolder(".processing", "settings") == tmp_path / ".processing"

    def test_macos_library_dir(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.setenv("USERPROFILE", str(tmp_path))
        assert paths.macos_library_dir("settings") == tmp_path / "Library"


class TestNativeFolders:
    """Tests for OS convention lookups."""

    def test_roaming_data_dir_ends_with_app_name(self):
        result = paths.roaming_data_dir("Processing", "settings")
        assert result.is_absolute()
        assert result.name.lower() == "processing"

    def test_documents_dir_is_absolute(self):
        assert paths.documents_dir("document").is_absolute()

    def test_lookup_failure_raises(self, monkeypatch):
        def broken():
            raise KeyError("USERPROFILE")

        monkeypatch.setattr(paths.platformdirs, "user_documents_dir", broken)
        with pytest.raises(SettingsUnavailableError, match="document"):
            paths.documents_dir("document")


class TestEnsureAbsolute:
    """Tests for the absolute-path check."""

    def test_accepts_absolute(self, tmp_path):
        assert paths.ensure_absolute(str(tmp_path), "settings") == tmp_path

    def test_rejects_empty(self):
        with pytest.raises(SettingsUnavailableError):
            paths.ensure_absolute("", "settings")

    def test_rejects_relative(self):
        with pytest.raises(SettingsUnavailableError, match="unusable"):
            paths.ensure_absolute("relative/dir", "settings")


class TestPathUtilities:
    """Tests for path utility functions."""

    def test_exists_counts_broken_symlink(self, tmp_path):
        link = tmp_path / "link"
        try:
            os.symlink(tmp_path / "missing", link)
        except (OSError, NotImplementedError):
            pytest.skip("symlinks not permitted")
        assert paths.exists(link)

    def test_is_dir_ignores_symlinked_dir(self, tmp_path):
        target = tmp_path / "real"
        target.mkdir()
        link = tmp_path / "link"
        try:
            os.symlink(target, link, target_is_directory=True)
        except (OSError, NotImplementedError):
            pytest.skip("symlinks not permitted")
        assert paths.is_dir(target)
        assert not paths.is_dir(link)

    def test_abspath(self):
        assert os.path.isabs(paths.abspath("foo"))
