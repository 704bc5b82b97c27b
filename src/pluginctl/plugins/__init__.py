"""Plugins: manifest validation, templates, activation, registry, lifecycle."""

from .activation import ActivationStore
from .lifecycle import LifecycleController, StatusReport
from .models import Compatibility, Plugin, PluginManifest, PluginType
from .registry import PluginRegistry
from .templates import TemplateEngine
from .validator import validate_plugin

__all__ = [
    "ActivationStore",
    "Compatibility",
    "LifecycleController",
    "Plugin",
    "PluginManifest",
    "PluginRegistry",
    "PluginType",
    "StatusReport",
    "TemplateEngine",
    "validate_plugin",
]
