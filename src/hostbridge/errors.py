# Copyright (c) 2024 Hostbridge Contributors
# MIT License

"""
Hostbridge Error Classes.

Every OS-level failure surfaced by the platform service is mapped to exactly
one of these exceptions. The layer never logs or shows them; the host
application decides how to present each kind.
"""

from __future__ import annotations

import enum
import os
from typing import Optional, Union


class ErrorKind(enum.Enum):
    """Failure kinds reported by the platform service."""

    SETTINGS_UNAVAILABLE = "settings_unavailable"
    LAUNCH_FAILED = "launch_failed"
    NOT_FOUND = "not_found"
    IO_FAILURE = "io_failure"
    ENV_FAILURE = "env_failure"


class HostBridgeError(Exception):
    """Base exception for all Hostbridge errors."""

    kind: ErrorKind = ErrorKind.IO_FAILURE

    def __init__(self, message: str, details: str | None = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}\n  Details: {self.details}"
        return self.message


class SettingsUnavailableError(HostBridgeError):
    """No usable settings or document folder could be determined."""

    kind: ErrorKind = ErrorKind.SETTINGS_UNAVAILABLE

    def __init__(
        self,
        folder: str,
        message: str,
        details: str | None = None,
    ) -> None:
        self.folder = folder
        super().__init__(f"Cannot determine {folder} folder: {message}", details)


class ConfigError(HostBridgeError):
    """Invalid configuration file or values."""

    kind: ErrorKind = ErrorKind.SETTINGS_UNAVAILABLE

    def __init__(self, message: str, file_path: str | None = None) -> None:
        self.reason = message
        self.file_path = file_path
        location = f" in {file_path}" if file_path else ""
        super().__init__(f"Config error{location}: {message}")


class LaunchFailedError(HostBridgeError):
    """The OS could not launch a handler for a URL or folder."""

    kind: ErrorKind = ErrorKind.LAUNCH_FAILED

    def __init__(
        self,
        target: str,
        message: str,
        details: str | None = None,
    ) -> None:
        self.target = target
        super().__init__(f"Could not open '{target}': {message}", details)


class NotFoundError(HostBridgeError):
    """Target path does not exist."""

    kind: ErrorKind = ErrorKind.NOT_FOUND

    def __init__(self, path: Union[str, "os.PathLike[str]"]) -> None:
        self.path = os.fspath(path)
        super().__init__(f"No such file or folder: {self.path}")


class IOFailureError(HostBridgeError):
    """Deleting or trashing a file failed."""

    kind: ErrorKind = ErrorKind.IO_FAILURE

    def __init__(
        self,
        path: Union[str, "os.PathLike[str]"],
        message: str,
        errno: Optional[int] = None,
    ) -> None:
        self.path = os.fspath(path)
        self.errno = errno
        details = f"errno={errno}" if errno is not None else None
        super().__init__(f"Could not remove {self.path}: {message}", details)

    @classmethod
    def from_os_error(
        cls,
        path: Union[str, "os.PathLike[str]"],
        exc: OSError,
    ) -> "IOFailureError":
        return cls(path, exc.strerror or str(exc), exc.errno)


class EnvFailureError(HostBridgeError):
    """An environment variable mutation was rejected."""

    kind: ErrorKind = ErrorKind.ENV_FAILURE

    def __init__(
        self,
        name: str,
        message: str,
        details: str | None = None,
    ) -> None:
        self.name = name
        super().__init__(f"Cannot change environment variable {name!r}: {message}", details)
