"""Plugin templates: canonical blueprints and instantiation of new plugin trees."""

from __future__ import annotations

import json
import logging
import shutil
import tempfile
from collections.abc import Callable
from pathlib import Path

from pluginctl.core.errors import ConflictError, NotFoundError
from pluginctl.core.utils import check_plugin_name

from .models import MANIFEST_FILE, TEMPLATE_DIR, Plugin, PluginType
from .validator import parse_manifest, read_manifest

log = logging.getLogger(__name__)

_COMPATIBILITY = {"min_app_version": "1.0.0", "max_app_version": "2.0.0"}

_PERMISSIONS = {
    PluginType.CORE: ["core.access"],
    PluginType.EXTENSION: ["ui.access", "storage.read"],
    PluginType.THEME: ["ui.theme"],
    PluginType.TOOL: ["devtools.access", "fs.read"],
}

# Type-specific hook on top of onLoad/onUnload.
_EXTRA_HOOK = {
    PluginType.EXTENSION: "onUIReady",
    PluginType.THEME: "onThemeApply",
    PluginType.TOOL: "onDevToolsOpen",
}

_JS_STUB = """\
// {title} Plugin Template
class {cls} {{
  constructor() {{
    this.name = '{placeholder}';
    this.version = '1.0.0';
    this.loaded = false;
  }}

  async onLoad() {{
    this.loaded = true;
  }}

  async onUnload() {{
    this.loaded = false;
  }}
{extra}}}

module.exports = new {cls}();
"""

_JS_EXTRA_HOOK = """
  async {hook}() {{
    if (!this.loaded) {{
      throw new Error('Plugin not loaded');
    }}
  }}
"""

_THEME_CSS = """\
/* Theme Plugin Template */
:root {
  --theme-primary: #007aff;
  --theme-secondary: #5856d6;
  --theme-background: #ffffff;
  --theme-text: #1d1d1f;
  --theme-font-primary: "San Francisco", -apple-system, BlinkMacSystemFont, sans-serif;
  --theme-font-monospace: "SF Mono", Monaco, Consolas, monospace;
}

body {
  background-color: var(--theme-background);
  color: var(--theme-text);
  font-family: var(--theme-font-primary);
}
"""

_CORE_README = """\
# Core plugin template

- `plugin.json` - plugin manifest
- `index.js` - main plugin code

Core plugins have access to core application APIs and system-level
functions. They require special permissions and review.
"""


def _manifest(plugin_type: PluginType) -> dict:
    hooks = {"onLoad": "onLoad", "onUnload": "onUnload"}
    if extra := _EXTRA_HOOK.get(plugin_type):
        hooks[extra] = extra
    data = {
        "name": plugin_type.placeholder,
        "version": "1.0.0",
        "type": plugin_type.value,
        "description": f"{plugin_type.value.capitalize()} plugin template",
        "author": "",
        "license": "MIT",
        "main": "theme.css" if plugin_type is PluginType.THEME else "index.js",
        "dependencies": {},
        "permissions": list(_PERMISSIONS[plugin_type]),
        "hooks": hooks,
        "compatibility": dict(_COMPATIBILITY),
    }
    if plugin_type is PluginType.THEME:
        data["theme"] = {
            "name": "Template Theme",
            "colors": {
                "primary": "#007aff",
                "secondary": "#5856d6",
                "background": "#ffffff",
                "text": "#1d1d1f",
            },
            "fonts": {"primary": "San Francisco", "monospace": "SF Mono"},
        }
    return data


def blueprint_files(plugin_type: PluginType) -> dict[str, str]:
    """File name -> content for the canonical template of *plugin_type*."""
    manifest = _manifest(plugin_type)
    files = {MANIFEST_FILE: json.dumps(manifest, indent=2) + "\n"}
    if plugin_type is PluginType.THEME:
        files["theme.css"] = _THEME_CSS
        return files
    title = plugin_type.value.capitalize()
    extra = _EXTRA_HOOK.get(plugin_type)
    files["index.js"] = _JS_STUB.format(
        title=title,
        cls=f"{title}TemplatePlugin",
        placeholder=plugin_type.placeholder,
        extra=_JS_EXTRA_HOOK.format(hook=extra) if extra else "",
    )
    if plugin_type is PluginType.CORE:
        files["README.md"] = _CORE_README
    return files


class TemplateEngine:
    """Copies a type's template directory into a new plugin directory.

    The new tree is assembled in a hidden staging directory inside the
    target partition and moved into place with a single rename, so a
    failure at any point leaves no partial plugin behind.
    """

    def __init__(self, plugins_root: Path):
        self.plugins_root = plugins_root

    def template_dir(self, plugin_type: PluginType) -> Path:
        return self.plugins_root / plugin_type.partition / TEMPLATE_DIR

    def write_blueprints(self) -> list[Path]:
        """Create any missing canonical template. Existing templates are left alone."""
        created: list[Path] = []
        for plugin_type in PluginType:
            tdir = self.template_dir(plugin_type)
            if tdir.exists():
                continue
            tdir.mkdir(parents=True)
            for fname, content in blueprint_files(plugin_type).items():
                (tdir / fname).write_text(content, encoding="utf-8")
            created.append(tdir)
        return created

    def instantiate(
        self,
        name: str,
        plugin_type: PluginType | str,
        force: bool = False,
        version: str | None = None,
        before_commit: Callable[[], None] | None = None,
    ) -> Plugin:
        """Materialize plugin *name* from the template of *plugin_type*.

        With *force*, an existing directory of the same name in the target
        partition is deleted and replaced; anything customized there is lost.
        *before_commit* runs after staging succeeds and right before the move.
        """
        plugin_type = PluginType.parse(plugin_type)
        check_plugin_name(name)
        source = self.template_dir(plugin_type)
        if not (source / MANIFEST_FILE).is_file():
            raise NotFoundError("template", source)

        partition = self.plugins_root / plugin_type.partition
        target = partition / name
        if target.exists() and not force:
            raise ConflictError(name, target)

        with tempfile.TemporaryDirectory(prefix=f".staging-{name}-", dir=partition) as tmp:
            staged = Path(tmp) / name
            log.debug("staging %s from %s", staged, source)
            shutil.copytree(source, staged, symlinks=True)
            manifest = self._rewrite_manifest(staged, name, version)
            if before_commit is not None:
                before_commit()
            if target.exists():
                log.warning("replacing %s, previous contents are discarded", target)
                shutil.rmtree(target)
            staged.rename(target)

        log.info("created %s plugin %s at %s", plugin_type.value, name, target)
        return Plugin(name=name, type=plugin_type, root=target, manifest=manifest)

    def _rewrite_manifest(self, plugin_dir: Path, name: str, version: str | None):
        """Set the manifest's name (and optionally version) field, leaving the rest as is."""
        data = read_manifest(plugin_dir)
        data["name"] = name
        if version:
            data["version"] = version
        (plugin_dir / MANIFEST_FILE).write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        return parse_manifest(data)
