"""
Hostbridge Configuration

Settings that shape how the platform service resolves folders and launches
handlers.
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from hostbridge.errors import ConfigError


FOLDER_POLICIES = ("native", "dotdir")

_TYPES: Dict[str, tuple] = {
    "app_name": (str,),
    "document_folder_name": (str,),
    "folder_policy": (str,),
    "launcher": (str, type(None)),
    "use_trash": (bool,),
}

# Names that become a single folder under home, Library or Documents
_FOLDER_NAME_FIELDS = ("app_name", "document_folder_name")


@dataclass
class HostConfig:
    """
    Configuration for the platform service.

    Attributes:
        app_name: Application name used for settings and document folders
        document_folder_name: Name of the default document folder under home
        folder_policy: "native" lets each OS use its own folder convention,
            "dotdir" always uses ``~/.<app_name>``
        launcher: Executable used to open URLs and folders instead of the
            OS default handler
        use_trash: Move deleted files to the OS trash when one is available
    """

    app_name: str = "Processing"
    document_folder_name: str = "sketchbook"
    folder_policy: str = "native"
    launcher: Optional[str] = None
    use_trash: bool = True

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, _TYPES[f.name]):
                raise ConfigError(f"{f.name} has wrong type {type(value).__name__}")

        for name in _FOLDER_NAME_FIELDS:
            value = getattr(self, name)
            if not value.strip():
                raise ConfigError(f"{name} must not be empty")
            if "/" in value or "\\" in value or value.strip() in (".", ".."):
                raise ConfigError(f"{name} must be a single folder name, got {value!r}")

        if self.folder_policy not in FOLDER_POLICIES:
            raise ConfigError(
                f"folder_policy must be one of {', '.join(FOLDER_POLICIES)}, "
                f"got {self.folder_policy!r}"
            )
        if self.launcher is not None and not self.launcher.strip():
            self.launcher = None

    @property
    def dotdir_name(self) -> str:
        """Name of the hidden settings folder, e.g. ``.processing``."""
        return "." + self.app_name.lower()

    @property
    def native_folders(self) -> bool:
        return self.folder_policy == "native"


def from_mapping(data: Dict[str, Any], file_path: Optional[str] = None) -> HostConfig:
    """Build a HostConfig from a plain mapping, validating keys and types."""
    known = {f.name for f in fields(HostConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"unknown setting(s): {', '.join(unknown)}", file_path)

    try:
        return HostConfig(**data)
    except ConfigError as e:
        raise ConfigError(e.reason, file_path) from e


def load_config(path: Union[str, Path]) -> HostConfig:
    """
    Load a HostConfig from a YAML file.

    An empty file yields the defaults.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigError("file not found", str(path)) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"cannot read file: {e}", str(path)) from e
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML: {e}", str(path)) from e

    if data is None:
        return HostConfig()
    if not isinstance(data, dict):
        raise ConfigError("top level must be a mapping", str(path))

    return from_mapping(data, str(path))


# Default configuration
_config = HostConfig()


def get_config() -> HostConfig:
    """Get the current configuration."""
    return _config


def set_config(config: HostConfig) -> None:
    """Set the configuration."""
    global _config
    _config = config


def configure(**kwargs) -> None:
    """Update individual settings of the current configuration."""
    global _config
    _config = from_mapping({**_as_dict(_config), **kwargs})


def reset_config() -> None:
    """Reset configuration to defaults."""
    global _config
    _config = HostConfig()


def _as_dict(config: HostConfig) -> Dict[str, Any]:
    return {f.name: getattr(config, f.name) for f in fields(config)}

