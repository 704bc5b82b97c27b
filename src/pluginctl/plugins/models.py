"""Plugin data models: PluginType, Compatibility, PluginManifest, Plugin."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from pluginctl.core.errors import ValidationError

MANIFEST_FILE = "plugin.json"
TEMPLATE_DIR = "template"


class PluginType(str, Enum):
    CORE = "core"
    EXTENSION = "extension"
    THEME = "theme"
    TOOL = "tool"

    @property
    def partition(self) -> str:
        """On-disk subdirectory holding plugins of this type."""
        return _PARTITIONS[self]

    @property
    def placeholder(self) -> str:
        """Name embedded in this type's template manifest."""
        return f"{self.value}-template"

    @classmethod
    def parse(cls, value: str | PluginType) -> PluginType:
        if isinstance(value, PluginType):
            return value
        key = str(value).strip().lower()
        for t in cls:
            if key in (t.value, t.partition):
                return t
        raise ValidationError(
            "type", "invalid", f"unknown plugin type: {value!r} (core, extension, theme, tool)"
        )


_PARTITIONS = {
    PluginType.CORE: "core",
    PluginType.EXTENSION: "extensions",
    PluginType.THEME: "themes",
    PluginType.TOOL: "tools",
}

# Lookup order used by the registry.
PARTITION_ORDER = (PluginType.CORE, PluginType.EXTENSION, PluginType.THEME, PluginType.TOOL)


@dataclass
class Compatibility:
    min_app_version: str = ""
    max_app_version: str = ""


@dataclass
class PluginManifest:
    """Parsed from plugin.json."""

    name: str
    version: str
    type: PluginType
    description: str
    main: str
    author: str = ""
    license: str = ""
    dependencies: dict[str, str] = field(default_factory=dict)
    permissions: set[str] = field(default_factory=set)
    hooks: dict[str, str] = field(default_factory=dict)
    compatibility: Compatibility = field(default_factory=Compatibility)
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class Plugin:
    """An installed plugin, resolved once by the registry and passed along."""

    name: str
    type: PluginType
    root: Path
    manifest: PluginManifest | None = None
    active: bool = False
    error: str = ""
