"""Commands: plugin system scaffolding."""

from .scaffold import CATEGORIES, build_registry_index, init_plugin_system

__all__ = [
    "CATEGORIES",
    "build_registry_index",
    "init_plugin_system",
]
