"""Plugin system scaffolding: `pluginctl init`."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

from pluginctl.core.locking import exclusive_lock
from pluginctl.plugins import ActivationStore, PluginRegistry, TemplateEngine
from pluginctl.plugins.models import PARTITION_ORDER

if TYPE_CHECKING:
    from pluginctl.core.config import Config

REGISTRY_VERSION = "1.0.0"

CATEGORIES = {
    "core": "Core functionality plugins",
    "extensions": "Feature extensions",
    "themes": "UI/UX themes",
    "tools": "Development tools",
}

def build_registry_index(registry: PluginRegistry, now: datetime | None = None) -> dict:
    """Snapshot of installed names per category. Written once; not kept in sync."""
    now = now or datetime.now(timezone.utc)
    return {
        "version": REGISTRY_VERSION,
        "last_updated": now.strftime("%Y-%m-%dT%H:%M:%SZ"),
        "plugins": registry.names_by_partition(),
        "categories": dict(CATEGORIES),
    }


def init_plugin_system(config: Config) -> list[str]:
    """Create the plugin tree, templates and state files. Returns created paths."""
    root = config.plugins_root
    created: list[Path] = []

    with exclusive_lock(config.lock_path, config.lock_timeout):
        for d in [root / t.partition for t in PARTITION_ORDER] + [root / "registry", root / "cache"]:
            if not d.exists():
                d.mkdir(parents=True)
                created.append(d)

        if not config.settings_path.exists():
            settings = {
                "plugins_dir": _relative(root, config.home),
                "lock_timeout": config.lock_timeout,
            }
            config.settings_path.parent.mkdir(parents=True, exist_ok=True)
            config.settings_path.write_text(json.dumps(settings, indent=2) + "\n")
            created.append(config.settings_path)

        if ActivationStore(config.active_file).touch():
            created.append(config.active_file)

        created.extend(TemplateEngine(root).write_blueprints())

        index_path = config.registry_index_path
        if not index_path.exists():
            created.append(index_path)
        index = build_registry_index(PluginRegistry(root))
        index_path.write_text(json.dumps(index, indent=2) + "\n")

    return [_display(p, config.home) for p in created]


def _relative(path: Path, home: Path) -> str:
    try:
        return str(path.relative_to(home))
    except ValueError:
        return str(path)


def _display(path: Path, home: Path) -> str:
    rel = _relative(path, home)
    return rel + "/" if path.is_dir() else rel
