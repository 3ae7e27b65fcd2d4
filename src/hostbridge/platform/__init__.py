"""
Platform abstraction layer for host integration.

This package holds the OS adapters behind the platform service: folder
conventions, trash facilities, opener commands and the native environment
table. The set of platform variants is closed and chosen once at startup.
"""

import enum
import platform as _platform

# Detect current platform
IS_WINDOWS = _platform.system() == "Windows"
IS_LINUX = _platform.system() == "Linux"
IS_MACOS = _platform.system() == "Darwin"
IS_POSIX = not IS_WINDOWS

PLATFORM_NAME = _platform.system().lower()


class Variant(enum.Enum):
    """OS families with their own host-integration behavior."""

    GENERIC = "generic"
    MACOS = "macos"
    WINDOWS = "windows"
    LINUX = "linux"


_SYSTEM_VARIANTS = {
    "darwin": Variant.MACOS,
    "windows": Variant.WINDOWS,
    "linux": Variant.LINUX,
}


def detect_variant(system: str = PLATFORM_NAME) -> Variant:
    """
    Map an OS name (as reported by platform.system()) to its variant.

    Unknown systems use the generic variant.
    """
    return _SYSTEM_VARIANTS.get(system.lower(), Variant.GENERIC)
