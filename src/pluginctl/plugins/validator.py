"""Manifest validation: the gate every plugin passes before activation.

Checks run in a fixed order and the first failure is raised:

1. ``plugin.json`` exists in the plugin directory (NotFoundError)
2. it parses as a JSON object (ValidationError ``manifest``/``malformed``)
3. required fields are present and non-null, in the order
   name, version, type, description, main
4. field shapes: ``type`` is a known plugin type, optional fields have the
   expected structure, ``main`` stays inside the plugin directory
5. the ``main`` file exists (EntryPointNotFoundError)

Validation only reads; it is safe to call any number of times.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pluginctl.core.errors import EntryPointNotFoundError, NotFoundError, ValidationError
from pluginctl.core.utils import safe_path

from .models import MANIFEST_FILE, Compatibility, PluginManifest, PluginType

log = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "version", "type", "description", "main")


def read_manifest(plugin_dir: Path) -> dict[str, Any]:
    """Load the raw manifest object, raising on a missing or malformed file."""
    path = plugin_dir / MANIFEST_FILE
    if not path.is_file():
        raise NotFoundError("manifest", path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError("manifest", "malformed", f"invalid JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError("manifest", "malformed", f"{path} must contain a JSON object")
    return data


def _string_map(data: dict[str, Any], key: str) -> dict[str, str]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in value.items()
    ):
        raise ValidationError(key, "must be a mapping of strings")
    return dict(value)


def _permissions(data: dict[str, Any]) -> set[str]:
    value = data.get("permissions")
    if value is None:
        return set()
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValidationError("permissions", "must be a list of strings")
    return set(value)


def _compatibility(data: dict[str, Any]) -> Compatibility:
    value = data.get("compatibility")
    if value is None:
        return Compatibility()
    if not isinstance(value, dict):
        raise ValidationError("compatibility", "must be an object")
    for key in ("min_app_version", "max_app_version"):
        if key in value and not isinstance(value[key], str):
            raise ValidationError(f"compatibility.{key}", "must be a string")
    return Compatibility(
        min_app_version=value.get("min_app_version", ""),
        max_app_version=value.get("max_app_version", ""),
    )


def _author(data: dict[str, Any]) -> str:
    value = data.get("author")
    if isinstance(value, dict):
        return str(value.get("name", ""))
    return str(value) if value else ""


def parse_manifest(data: dict[str, Any]) -> PluginManifest:
    """Check fields of an already-loaded manifest object and build the model."""
    for key in REQUIRED_FIELDS:
        if data.get(key) is None:
            raise ValidationError(key, "missing", f"missing required field: {key}")
    for key in REQUIRED_FIELDS:
        if not isinstance(data[key], str):
            raise ValidationError(key, "must be a string")

    if data["type"] not in {t.value for t in PluginType}:
        raise ValidationError(
            "type", "invalid", f"unknown plugin type: {data['type']!r} (core, extension, theme, tool)"
        )
    plugin_type = PluginType(data["type"])
    known = set(REQUIRED_FIELDS) | {
        "author",
        "license",
        "dependencies",
        "permissions",
        "hooks",
        "compatibility",
    }
    return PluginManifest(
        name=data["name"],
        version=data["version"],
        type=plugin_type,
        description=data["description"],
        main=data["main"],
        author=_author(data),
        license=str(data.get("license") or ""),
        dependencies=_string_map(data, "dependencies"),
        permissions=_permissions(data),
        hooks=_string_map(data, "hooks"),
        compatibility=_compatibility(data),
        extra={k: v for k, v in data.items() if k not in known},
    )


def validate_plugin(plugin_dir: Path) -> PluginManifest:
    """Validate the plugin in *plugin_dir*. Returns the parsed manifest."""
    manifest = parse_manifest(read_manifest(plugin_dir))
    try:
        main_path = safe_path(manifest.main, plugin_dir)
    except ValueError as e:
        raise ValidationError("main", "outside plugin directory", str(e)) from e
    if not main_path.is_file():
        raise EntryPointNotFoundError(main_path)
    log.debug("validation passed: %s", plugin_dir)
    return manifest
