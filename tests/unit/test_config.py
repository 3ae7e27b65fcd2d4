"""Unit tests for Hostbridge configuration."""

import pytest

from hostbridge import config as config_module
from hostbridge.config import (
    HostConfig,
    configure,
    from_mapping,
    get_config,
    load_config,
    reset_config,
    set_config,
)
from hostbridge.errors import ConfigError, ErrorKind


@pytest.fixture(autouse=True)
def restore_config():
    yield
    reset_config()


class TestHostConfig:
    """Tests for the HostConfig dataclass."""

    def test_defaults(self):
        config = HostConfig()
        assert config.app_name == "Processing"
        assert config.document_folder_name == "sketchbook"
        assert config.folder_policy == "native"
        assert config.launcher is None
        assert config.use_trash is True

    def test_dotdir_name_is_lowercase(self):
        assert HostConfig(app_name="Processing").dotdir_name == ".processing"

    def test_native_folders(self):
        assert HostConfig().native_folders
        assert not HostConfig(folder_policy="dotdir").native_folders

    def test_invalid_policy(self):
        with pytest.raises(ConfigError, match="folder_policy"):
            HostConfig(folder_policy="registry")

    def test_empty_app_name(self):
        with pytest.raises(ConfigError, match="app_name"):
            HostConfig(app_name="  ")

    def test_blank_launcher_means_none(self):
        assert HostConfig(launcher="   ").launcher is None

    def test_config_error_kind(self):
        with pytest.raises(ConfigError) as excinfo:
            HostConfig(document_folder_name="")
        assert excinfo.value.kind is ErrorKind.SETTINGS_UNAVAILABLE

    def test_non_string_app_name(self):
        with pytest.raises(ConfigError, match="app_name has wrong type int"):
            HostConfig(app_name=1)

    def test_non_string_launcher(self):
        with pytest.raises(ConfigError, match="launcher has wrong type int"):
            HostConfig(launcher=5)

    def test_non_bool_use_trash(self):
        with pytest.raises(ConfigError, match="use_trash"):
            HostConfig(use_trash="no")

    @pytest.mark.parametrize("name", ["../x", "a/b", "a\\b", "..", "."])
    def test_app_name_must_be_single_folder(self, name):
        with pytest.raises(ConfigError, match="single folder name"):
            HostConfig(app_name=name)

    def test_document_folder_name_must_be_single_folder(self):
        with pytest.raises(ConfigError, match="document_folder_name"):
            HostConfig(document_folder_name="../../etc")


class TestFromMapping:
    """Tests for building configs from mappings."""

    def test_unknown_key(self):
        with pytest.raises(ConfigError, match="unknown setting"):
            from_mapping({"theme": "dark"})

    def test_wrong_type(self):
        with pytest.raises(ConfigError, match="use_trash has wrong type"):
            from_mapping({"use_trash": "yes"})


class TestLoadConfig:
    """Tests for YAML config files."""

    def test_load_full_file(self, tmp_path):
        path = tmp_path / "hostbridge.yml"
        path.write_text(
            "app_name: Sketcher\n"
            "document_folder_name: Sketches\n"
            "folder_policy: dotdir\n"
            "launcher: /usr/bin/firefox\n"
            "use_trash: false\n"
        )
        config = load_config(path)
        assert config == HostConfig(
            app_name="Sketcher",
            document_folder_name="Sketches",
            folder_policy="dotdir",
            launcher="/usr/bin/firefox",
            use_trash=False,
        )

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("")
        assert load_config(path) == HostConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="file not found"):
            load_config(tmp_path / "missing.yml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text("app_name: [unclosed\n")
        with pytest.raises(ConfigError, match="invalid YAML"):
            load_config(path)

    def test_top_level_list(self, tmp_path):
        path = tmp_path / "list.yml"
        path.write_text("- app_name\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)

    def test_invalid_value_reports_file(self, tmp_path):
        path = tmp_path / "policy.yml"
        path.write_text("folder_policy: registry\n")
        with pytest.raises(ConfigError) as excinfo:
            load_config(path)
        assert excinfo.value.file_path == str(path)
        assert "folder_policy" in str(excinfo.value)

    def test_directory_instead_of_file(self, tmp_path):
        with pytest.raises(ConfigError, match="cannot read file") as excinfo:
            load_config(tmp_path)
        assert excinfo.value.file_path == str(tmp_path)

    def test_unreadable_file(self, tmp_path, monkeypatch):
        path = tmp_path / "locked.yml"
        path.write_text("app_name: Sketcher\n")

        def denied(*args, **kwargs):
            raise PermissionError(13, "Permission denied", str(path))

        monkeypatch.setattr(config_module, "open", denied, raising=False)
        with pytest.raises(ConfigError, match="Permission denied"):
            load_config(path)

    def test_file_not_utf8(self, tmp_path):
        path = tmp_path / "latin1.yml"
        path.write_bytes(b"app_name: Sk\xe9tcher\xff\n")
        with pytest.raises(ConfigError, match="cannot read file"):
            load_config(path)

    def test_wrong_type_reports_file(self, tmp_path):
        path = tmp_path / "types.yml"
        path.write_text("app_name: 42\n")
        with pytest.raises(ConfigError, match="app_name has wrong type int") as excinfo:
            load_config(path)
        assert excinfo.value.file_path == str(path)


class TestModuleConfig:
    """Tests for the module-level configuration."""

    def test_configure_updates_fields(self):
        configure(launcher="xdg-open", use_trash=False)
        assert get_config().launcher == "xdg-open"
        assert get_config().use_trash is False
        assert get_config().app_name == "Processing"

    def test_configure_rejects_unknown(self):
        with pytest.raises(ConfigError):
            configure(colour="blue")

    def test_set_and_reset(self):
        custom = HostConfig(app_name="Sketcher")
        set_config(custom)
        assert get_config() is custom
        reset_config()
        assert get_config() == HostConfig()
        assert config_module.get_config() is get_config()
