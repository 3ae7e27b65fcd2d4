"""
Cross-platform folder conventions.

Resolves the per-user locations the platform service hands out. Every
function here returns an absolute path or raises SettingsUnavailableError.
"""

import os
from pathlib import Path
from typing import Union

import platformdirs

from hostbridge.errors import SettingsUnavailableError


PathLike = Union[str, os.PathLike[str]]


def get_home_dir(folder: str = "home") -> Path:
    """
    Get current user's home directory.

    os.path.expanduser returns "~" unchanged when HOME (or USERPROFILE)
    is unset and the password database has no entry.
    """
    home = os.path.expanduser("~")
    if not home or home == "~" or not os.path.isabs(home):
        raise SettingsUnavailableError(folder, "home directory is not known")
    return Path(home)


def home_subfolder(name: str, folder: str) -> Path:
    """Folder ``name`` directly under the home directory."""
    return get_home_dir(folder) / name


def macos_library_dir(folder: str) -> Path:
    """The per-user ``~/Library`` folder."""
    return get_home_dir(folder) / "Library"


def roaming_data_dir(app_name: str, folder: str) -> Path:
    """
    Per-user roaming application data folder.

    %APPDATA%\\<app_name> on Windows.
    """
    return _require(
        folder,
        lambda: platformdirs.user_data_dir(app_name, appauthor=False, roaming=True),
    )


def documents_dir(folder: str) -> Path:
    """The user's Documents folder (My Documents on Windows)."""
    return _require(folder, platformdirs.user_documents_dir)


def _require(folder: str, resolve) -> Path:
    try:
        value = resolve()
    except (OSError, KeyError, ValueError) as e:
        raise SettingsUnavailableError(folder, "OS lookup failed", str(e)) from e
    return ensure_absolute(value, folder)


def ensure_absolute(path: PathLike, folder: str) -> Path:
    """Check that path is a usable absolute location."""
    value = os.fspath(path)
    if not value or not os.path.isabs(value):
        raise SettingsUnavailableError(folder, f"resolved to unusable path {value!r}")
    return Path(value)


def exists(path: PathLike) -> bool:
    """Check if a path exists (broken symlinks count as existing)."""
    return os.path.lexists(os.fspath(path))


def is_dir(path: PathLike) -> bool:
    """Check if path is a real directory, not a link to one."""
    return os.path.isdir(os.fspath(path)) and not os.path.islink(os.fspath(path))


def abspath(path: PathLike) -> str:
    """Get absolute path."""
    return os.path.abspath(os.fspath(path))
