"""Plugin registry: the four type partitions on disk, nothing cached in memory."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING

from pluginctl.core.errors import ConflictError, NotFoundError
from pluginctl.core.utils import check_plugin_name

from .models import PARTITION_ORDER, TEMPLATE_DIR, Plugin, PluginType

if TYPE_CHECKING:
    from .templates import TemplateEngine

log = logging.getLogger(__name__)


class PluginRegistry:
    def __init__(self, plugins_root: Path):
        self.plugins_root = plugins_root

    def partition_dir(self, plugin_type: PluginType) -> Path:
        return self.plugins_root / plugin_type.partition

    def locate(self, name: str) -> Plugin | None:
        """Find *name* scanning partitions in core, extension, theme, tool order."""
        check_plugin_name(name)
        for plugin_type in PARTITION_ORDER:
            path = self.partition_dir(plugin_type) / name
            if path.is_dir():
                return Plugin(name=name, type=plugin_type, root=path)
        return None

    def get(self, name: str) -> Plugin:
        """Like locate(), but raises NotFoundError when the name is not installed."""
        plugin = self.locate(name)
        if plugin is None:
            raise NotFoundError("plugin", name)
        return plugin

    def exists(self, name: str) -> bool:
        return self.locate(name) is not None

    def iter_plugins(self) -> Iterator[Plugin]:
        """Yield every installed plugin, partition by partition, names sorted."""
        for plugin_type in PARTITION_ORDER:
            pdir = self.partition_dir(plugin_type)
            if not pdir.is_dir():
                continue
            for d in sorted(pdir.iterdir()):
                if d.is_dir() and d.name != TEMPLATE_DIR and not d.name.startswith("."):
                    yield Plugin(name=d.name, type=plugin_type, root=d)

    def names_by_partition(self) -> dict[str, list[str]]:
        result: dict[str, list[str]] = {t.partition: [] for t in PARTITION_ORDER}
        for p in self.iter_plugins():
            result[p.type.partition].append(p.name)
        return result

    def remove(self, name: str) -> Plugin:
        """Delete the plugin's directory."""
        plugin = self.get(name)
        shutil.rmtree(plugin.root)
        log.debug("removed %s", plugin.root)
        return plugin

    def install(
        self,
        name: str,
        plugin_type: PluginType | str,
        engine: TemplateEngine,
        version: str | None = None,
    ) -> Plugin:
        """Create *name* in its type's partition, with content from *engine*.

        Names are unique across all partitions, not just within one type.
        """
        existing = self.locate(name)
        if existing is not None:
            raise ConflictError(name, existing.root)
        return engine.instantiate(name, plugin_type, version=version)
