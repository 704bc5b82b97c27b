"""Tests for `init`: directory tree, templates, state files, registry index."""

import json
import re
from datetime import datetime, timezone

from pluginctl.commands import CATEGORIES, build_registry_index, init_plugin_system
from pluginctl.plugins import LifecycleController, PluginRegistry, PluginType


class TestInitPluginSystem:
    def test_creates_tree(self, config):
        created = init_plugin_system(config)
        root = config.plugins_root
        for sub in ("core", "extensions", "themes", "tools", "registry", "cache"):
            assert (root / sub).is_dir()
        for t in PluginType:
            assert (root / t.partition / "template" / "plugin.json").is_file()
        assert config.active_file.read_text() == ""
        assert "plugins/core/" in created
        assert ".active-plugins" in created
        assert "plugins/registry/index.json" in created

    def test_writes_settings(self, config):
        init_plugin_system(config)
        data = json.loads(config.settings_path.read_text())
        assert data["plugins_dir"] == "plugins"
        assert data["lock_timeout"] == config.lock_timeout

    def test_keeps_existing_settings(self, config):
        config.settings_path.write_text('{"lock_timeout": 1}\n')
        init_plugin_system(config)
        assert config.settings_path.read_text() == '{"lock_timeout": 1}\n'

    def test_idempotent(self, config):
        init_plugin_system(config)
        assert init_plugin_system(config) == []

    def test_keeps_templates_and_activation(self, initialized):
        c = LifecycleController(initialized)
        c.install("x", "tool")
        c.enable("x")
        tmpl = initialized.plugins_root / "tools" / "template" / "index.js"
        tmpl.write_text("// mine\n")
        init_plugin_system(initialized)
        assert tmpl.read_text() == "// mine\n"
        assert c.store.list() == ["x"]


class TestRegistryIndex:
    def test_index_document(self, initialized):
        data = json.loads(initialized.registry_index_path.read_text())
        assert data["version"] == "1.0.0"
        assert re.fullmatch(r"\d{4}-\d\d-\d\dT\d\d:\d\d:\d\dZ", data["last_updated"])
        assert data["plugins"] == {"core": [], "extensions": [], "themes": [], "tools": []}
        assert data["categories"] == CATEGORIES

    def test_snapshot_at_init_time(self, initialized):
        c = LifecycleController(initialized)
        c.install("x", "tool")
        data = json.loads(initialized.registry_index_path.read_text())
        assert data["plugins"]["tools"] == []
        init_plugin_system(initialized)
        data = json.loads(initialized.registry_index_path.read_text())
        assert data["plugins"]["tools"] == ["x"]

    def test_fixed_timestamp(self, initialized):
        now = datetime(2026, 1, 19, tzinfo=timezone.utc)
        index = build_registry_index(PluginRegistry(initialized.plugins_root), now=now)
        assert index["last_updated"] == "2026-01-19T00:00:00Z"
