"""Tests for config: defaults, settings.json, env and CLI priority."""

import json

import pytest

from pluginctl.core.config import DEFAULT_LOCK_TIMEOUT, Config, _apply_settings, load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for var in ("PLUGINCTL_HOME", "PLUGINCTL_PLUGINS_DIR", "PLUGINCTL_LOCK_TIMEOUT"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


class TestConfigDefaults:
    def test_paths_under_home(self, tmp_path):
        c = Config(home=tmp_path)
        assert c.plugins_root == tmp_path / "plugins"
        assert c.active_file == tmp_path / ".active-plugins"
        assert c.lock_path == tmp_path / "plugins" / ".plugins.lock"
        assert c.registry_index_path == tmp_path / "plugins" / "registry" / "index.json"

    def test_default_lock_timeout(self):
        assert Config().lock_timeout == DEFAULT_LOCK_TIMEOUT

    def test_plugins_dir_override(self, tmp_path):
        c = Config(home=tmp_path, plugins_dir=tmp_path / "elsewhere")
        assert c.plugins_root == tmp_path / "elsewhere"

    def test_lock_follows_plugins_root(self, tmp_path):
        shared = tmp_path / "shared"
        a = Config(home=tmp_path / "a", plugins_dir=shared)
        b = Config(home=tmp_path / "b", plugins_dir=shared)
        assert a.lock_path == b.lock_path == shared / ".plugins.lock"


class TestApplySettings:
    def test_relative_plugins_dir(self, tmp_path):
        (tmp_path / "settings.json").write_text(json.dumps({"plugins_dir": "addons"}))
        c = Config(home=tmp_path)
        _apply_settings(c, c.settings_path)
        assert c.plugins_root == tmp_path / "addons"

    def test_absolute_plugins_dir(self, tmp_path):
        target = tmp_path / "abs"
        (tmp_path / "settings.json").write_text(json.dumps({"plugins_dir": str(target)}))
        c = Config(home=tmp_path)
        _apply_settings(c, c.settings_path)
        assert c.plugins_root == target

    def test_lock_timeout(self, tmp_path):
        (tmp_path / "settings.json").write_text(json.dumps({"lock_timeout": 3}))
        c = Config(home=tmp_path)
        _apply_settings(c, c.settings_path)
        assert c.lock_timeout == 3.0

    def test_malformed_ignored(self, tmp_path):
        (tmp_path / "settings.json").write_text("{oops")
        c = Config(home=tmp_path)
        _apply_settings(c, c.settings_path)
        assert c.plugins_root == tmp_path / "plugins"

    def test_missing_ignored(self, tmp_path):
        c = Config(home=tmp_path)
        _apply_settings(c, tmp_path / "nope.json")
        assert c.lock_timeout == DEFAULT_LOCK_TIMEOUT


class TestLoadConfig:
    def test_explicit_home(self, tmp_path):
        c = load_config(home=tmp_path / "h")
        assert c.home == (tmp_path / "h").resolve()

    def test_env_home(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PLUGINCTL_HOME", str(tmp_path / "envhome"))
        assert load_config().home == (tmp_path / "envhome").resolve()

    def test_cli_home_beats_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PLUGINCTL_HOME", str(tmp_path / "envhome"))
        assert load_config(home=tmp_path / "cli").home == (tmp_path / "cli").resolve()

    def test_env_timeout_beats_settings(self, tmp_path, monkeypatch):
        (tmp_path / "settings.json").write_text(json.dumps({"lock_timeout": 3}))
        monkeypatch.setenv("PLUGINCTL_LOCK_TIMEOUT", "7.5")
        assert load_config(home=tmp_path).lock_timeout == 7.5

    def test_cli_plugins_dir_beats_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PLUGINCTL_PLUGINS_DIR", str(tmp_path / "env"))
        c = load_config(home=tmp_path, plugins_dir=tmp_path / "cli")
        assert c.plugins_root == (tmp_path / "cli").resolve()

    def test_verbose(self, tmp_path):
        assert load_config(home=tmp_path, verbose=True).verbose is True
