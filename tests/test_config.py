"""
Tests for configuration loading and saving.
"""

import json

import pytest

from nodefs import config as config_module
from nodefs.config import (
    CLIConfig,
    NodeFSConfig,
    StorageConfig,
    ensure_config_exists,
    get_config_path,
    load_config,
    save_config,
    update_config,
)


@pytest.fixture(autouse=True)
def config_home(tmp_path, monkeypatch):
    """Point XDG_CONFIG_HOME at a temporary directory."""
    home = tmp_path / "xdg"
    home.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home))
    return home


class TestConfigPath:

    def test_uses_xdg_config_home(self, config_home):
        assert get_config_path() == config_home / "nodefs" / "config.json"

    def test_falls_back_to_dot_directory(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "does-not-exist"))
        monkeypatch.setattr(config_module.Path, "home", lambda: tmp_path)

        assert get_config_path() == tmp_path / ".nodefs" / "config.json"


class TestConfigDataclasses:

    def test_defaults(self):
        config = NodeFSConfig()

        assert config.storage.root is None
        assert config.storage.backend == "local"
        assert config.cli.verbose is False
        assert config.cli.color is True

    def test_dict_round_trip(self):
        config = NodeFSConfig(
            storage=StorageConfig(root="/data"),
            cli=CLIConfig(verbose=True, color=False),
        )

        assert NodeFSConfig.from_dict(config.to_dict()) == config

    def test_from_partial_dict(self):
        config = NodeFSConfig.from_dict({"cli": {"verbose": True}})

        assert config.cli.verbose is True
        assert config.storage == StorageConfig()


class TestLoadSave:

    def test_load_missing_returns_defaults(self):
        assert load_config() == NodeFSConfig()

    def test_save_then_load(self):
        config = NodeFSConfig(storage=StorageConfig(root="/srv/files"))

        path = save_config(config)

        assert path == get_config_path()
        assert json.loads(path.read_text())["storage"]["root"] == "/srv/files"
        assert load_config() == config

    def test_corrupt_file_returns_defaults(self):
        path = get_config_path()
        path.parent.mkdir(parents=True)
        path.write_text("{not json")

        assert load_config() == NodeFSConfig()

    def test_unknown_keys_return_defaults(self):
        path = get_config_path()
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps({"cli": {"colour": True}}))

        assert load_config() == NodeFSConfig()

    def test_ensure_config_exists(self):
        path = ensure_config_exists()

        assert path.exists()
        assert load_config() == NodeFSConfig()

    def test_update_changes_only_given_values(self):
        save_config(NodeFSConfig(storage=StorageConfig(root="/a")))

        updated = update_config(cli_verbose=True)

        assert updated.storage.root == "/a"
        assert updated.cli.verbose is True
        assert load_config() == updated
