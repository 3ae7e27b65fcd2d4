# Copyright (c) 2024 Hostbridge Contributors
# MIT License

"""
Hostbridge Platform Service

The one object through which the desktop application reaches OS-specific
behavior: settings and document folders, opening URLs and folders, moving
files to the trash and the process environment.

Each operation is looked up in the active variant's override table first and
in the shared default table otherwise, so a variant only lists what it does
differently. The set of variants is closed; unknown systems use GENERIC.

Nothing here logs or shows messages. Failures are raised as the typed errors
in hostbridge.errors and presenting them is up to the caller.
"""

from __future__ import annotations

import os
import webbrowser
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import urlsplit

from hostbridge.config import HostConfig, get_config
from hostbridge.errors import (
    EnvFailureError,
    IOFailureError,
    LaunchFailedError,
    NotFoundError,
)
from hostbridge.platform import Variant, detect_variant
from hostbridge.platform import fs, paths, proc
from hostbridge.platform.envtable import EnvironmentTable, NativeEnvironment
from hostbridge.platform.paths import PathLike
from hostbridge.platform.trash import FreedesktopTrash, MacTrash, RecycleBin, Trash


LOOK_AND_FEEL_KEY = "editor.laf"
SYSTEM_LOOK_AND_FEEL = "system"

# Operations whose overrides are skipped under the "dotdir" folder policy
_FOLDER_OPERATIONS = frozenset({"settings_folder", "document_folder"})


class PlatformService:
    """
    OS-agnostic host integration for the desktop application.

    Args:
        variant: Platform variant to dispatch through (detected when omitted)
        config: Fixed configuration; the module-level config is read on
            every call when omitted
        environment: Environment table adapter (the native one by default)
    """

    def __init__(
        self,
        variant: Optional[Variant] = None,
        config: Optional[HostConfig] = None,
        environment: Optional[EnvironmentTable] = None,
    ) -> None:
        self._variant = variant if variant is not None else detect_variant()
        self._config = config
        self._environment = environment if environment is not None else NativeEnvironment()

    @property
    def variant(self) -> Variant:
        return self._variant

    @property
    def config(self) -> HostConfig:
        return self._config if self._config is not None else get_config()

    def _operation(self, name: str) -> Callable[..., Any]:
        overrides = _OVERRIDES[self._variant]
        if name in _FOLDER_OPERATIONS and not self.config.native_folders:
            return _DEFAULTS[name]
        return overrides.get(name, _DEFAULTS[name])

    # Folders

    def resolve_settings_folder(self) -> Path:
        """
        Per-user folder for the application's settings.

        Computed on every call. Raises SettingsUnavailableError instead of
        ever returning an empty path.
        """
        return self._operation("settings_folder")(self)

    def resolve_default_document_folder(self) -> Path:
        """Per-user default folder for sketches. Same contract as settings."""
        return self._operation("document_folder")(self)

    # Shell integration

    def open_url(self, url: str) -> None:
        """
        Open url with the OS default handler (usually the web browser).

        Raises:
            LaunchFailedError: If the URL is malformed or no handler could
                be launched
        """
        _check_url(url)
        launcher = self.config.launcher
        if launcher:
            self._launch([launcher, url], url)
            return
        self._operation("open_url")(self, url)

    def folder_open_supported(self) -> bool:
        """Check if open_folder can work in this OS session."""
        launcher = self.config.launcher
        if launcher:
            return proc.is_command_available(launcher)
        return self._operation("folder_open_supported")(self)

    def open_folder(self, path: PathLike) -> None:
        """
        Show path in the OS file manager.

        Raises:
            NotFoundError: If path does not exist
            LaunchFailedError: If no file manager is available or it could
                not be launched
        """
        if not paths.exists(path):
            raise NotFoundError(path)
        folder = paths.abspath(path)
        if not self.folder_open_supported():
            raise LaunchFailedError(folder, "no file manager is available in this session")

        launcher = self.config.launcher
        if launcher:
            self._launch([launcher, folder], folder)
            return
        self._operation("open_folder")(self, folder)

    def _launch(self, cmd: List[str], target: str) -> None:
        try:
            result = proc.run(cmd)
        except OSError as e:
            raise LaunchFailedError(target, str(e)) from e
        if result.failed:
            raise LaunchFailedError(
                target,
                f"{cmd[0]} exited with code {result.returncode}",
                result.stderr.strip() or None,
            )

    # Trash

    def trash_bin(self) -> Optional[Trash]:
        """
        The trash facility usable right now, or None.

        None when the variant has no trash, trash use is disabled in the
        config, or the facility cannot be used in this session.
        """
        if not self.config.use_trash:
            return None
        trash = self._operation("trash_bin")(self)
        if trash is None or not trash.available():
            return None
        return trash

    def delete_or_trash(self, path: PathLike) -> bool:
        """
        Move path to the trash, or delete it when there is no trash.

        Directories are removed with all their contents. Returns False when
        path does not exist (nothing was removed), True otherwise.

        Raises:
            IOFailureError: If moving or deleting fails. No rollback is
                attempted, so part of a directory may already be gone.
        """
        target = os.fspath(path)
        if not paths.exists(target):
            return False

        trash = self.trash_bin()
        try:
            if trash is not None:
                trash.move_to_trash(target)
                return True
            if paths.is_dir(target):
                fs.rmtree(target)
                return True
            return fs.remove(target)
        except OSError as e:
            raise IOFailureError.from_os_error(target, e) from e

    # Environment

    def get_env(self, name: str) -> Optional[str]:
        """
        Read an environment variable from the live process table.

        Returns None if it is not set. Sees every change made by set_env and
        unset_env in this process.
        """
        if _env_name_problem(name):
            return None
        return self._environment.get(name)

    def set_env(self, name: str, value: str) -> None:
        """
        Set (or overwrite) an environment variable.

        Child processes started afterwards inherit it.

        Raises:
            EnvFailureError: If the name or value is invalid or the OS
                rejects the change
        """
        problem = _env_name_problem(name)
        if problem:
            raise EnvFailureError(str(name), problem)
        if not isinstance(value, str):
            raise EnvFailureError(name, f"value must be a string, not {type(value).__name__}")
        if "\0" in value:
            raise EnvFailureError(name, "value contains a NUL character")
        try:
            self._environment.set(name, value)
        except (ValueError, OSError) as e:
            raise EnvFailureError(name, "rejected by the OS", str(e)) from e

    def unset_env(self, name: str) -> None:
        """
        Remove an environment variable. Removing an unset variable is fine.

        Raises:
            EnvFailureError: If the name is invalid or the OS rejects it
        """
        problem = _env_name_problem(name)
        if problem:
            raise EnvFailureError(str(name), problem)
        try:
            self._environment.unset(name)
        except (ValueError, OSError) as e:
            raise EnvFailureError(name, "rejected by the OS", str(e)) from e

    # Preferences

    def look_and_feel(self, preferences: Optional[Any] = None) -> str:
        """
        Name of the look-and-feel the host UI should install.

        preferences is any object with a ``get(key)`` method. The
        ``editor.laf`` entry wins when set; otherwise SYSTEM_LOOK_AND_FEEL
        asks the host for the OS default.
        """
        value = preferences.get(LOOK_AND_FEEL_KEY) if preferences is not None else None
        if isinstance(value, str) and value.strip():
            return value.strip()
        return SYSTEM_LOOK_AND_FEEL

    def __repr__(self) -> str:
        return f"PlatformService(variant={self._variant.value})"


def _check_url(url: str) -> None:
    if not isinstance(url, str) or not url.strip():
        raise LaunchFailedError(str(url), "empty URL")
    if any(c.isspace() or ord(c) < 0x20 for c in url):
        raise LaunchFailedError(url, "URL contains whitespace or control characters")
    try:
        parts = urlsplit(url)
    except ValueError as e:
        raise LaunchFailedError(url, "malformed URL", str(e)) from e
    if not parts.scheme or not (parts.netloc or parts.path):
        raise LaunchFailedError(url, "malformed URL", "a scheme and a location are required")


def _env_name_problem(name: str) -> Optional[str]:
    if not isinstance(name, str) or not name:
        return "name must be a non-empty string"
    if "=" in name:
        return "name contains '='"
    if "\0" in name:
        return "name contains a NUL character"
    return None


# Default operations


def _default_settings_folder(service: PlatformService) -> Path:
    return paths.home_subfolder(service.config.dotdir_name, "settings")


def _default_document_folder(service: PlatformService) -> Path:
    return paths.home_subfolder(service.config.document_folder_name, "document")


def _default_open_url(service: PlatformService, url: str) -> None:
    try:
        opened = webbrowser.open(url)
    except webbrowser.Error as e:
        raise LaunchFailedError(url, str(e)) from e
    if not opened:
        raise LaunchFailedError(url, "no web browser is available")


def _default_folder_open_supported(service: PlatformService) -> bool:
    return proc.has_desktop_session() and proc.find_linux_opener() is not None


def _default_open_folder(service: PlatformService, folder: str) -> None:
    opener = proc.find_linux_opener()
    if opener is None:
        raise LaunchFailedError(folder, "no desktop opener (xdg-open, gio, ...) is installed")
    service._launch(opener + [folder], folder)


def _no_trash(service: PlatformService) -> Optional[Trash]:
    return None


# macOS


def _macos_settings_folder(service: PlatformService) -> Path:
    return paths.macos_library_dir("settings") / service.config.app_name


def _native_document_folder(service: PlatformService) -> Path:
    return paths.documents_dir("document") / service.config.app_name


def _macos_open(service: PlatformService, target: str) -> None:
    service._launch(["open", target], target)


def _macos_folder_open_supported(service: PlatformService) -> bool:
    return proc.is_command_available("open")


# Windows


def _windows_settings_folder(service: PlatformService) -> Path:
    return paths.roaming_data_dir(service.config.app_name, "settings")


def _windows_start(service: PlatformService, target: str) -> None:
    try:
        proc.start_file(target)
    except OSError as e:
        raise LaunchFailedError(target, e.strerror or str(e)) from e


def _always(service: PlatformService) -> bool:
    return True


_DEFAULTS: Dict[str, Callable[..., Any]] = {
    "settings_folder": _default_settings_folder,
    "document_folder": _default_document_folder,
    "open_url": _default_open_url,
    "folder_open_supported": _default_folder_open_supported,
    "open_folder": _default_open_folder,
    "trash_bin": _no_trash,
}

_OVERRIDES: Dict[Variant, Dict[str, Callable[..., Any]]] = {
    Variant.GENERIC: {},
    Variant.MACOS: {
        "settings_folder": _macos_settings_folder,
        "document_folder": _native_document_folder,
        "open_url": _macos_open,
        "folder_open_supported": _macos_folder_open_supported,
        "open_folder": _macos_open,
        "trash_bin": lambda service: MacTrash(),
    },
    Variant.WINDOWS: {
        "settings_folder": _windows_settings_folder,
        "document_folder": _native_document_folder,
        "open_url": _windows_start,
        "folder_open_supported": _always,
        "open_folder": _windows_start,
        "trash_bin": lambda service: RecycleBin(),
    },
    Variant.LINUX: {
        "trash_bin": lambda service: FreedesktopTrash(),
    },
}


# Process-wide service
_service: Optional[PlatformService] = None


def init(
    variant: Optional[Variant] = None,
    config: Optional[HostConfig] = None,
) -> PlatformService:
    """
    Create the process-wide service.

    Called once at startup; calling it again replaces the service.
    """
    global _service
    _service = PlatformService(variant=variant, config=config)
    return _service


def get_service() -> PlatformService:
    """Get the process-wide service, creating a default one on first use."""
    if _service is None:
        return init()
    return _service
