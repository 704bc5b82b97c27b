"""Plugin lifecycle: install, create, reinstall, enable, disable, uninstall, update, validate.

Per plugin there are three states: uninstalled, installed-inactive and
installed-active. Every mutating operation runs under one exclusive lock
so concurrent invocations cannot interleave their read-modify-write of
the activation file or race a directory move.
"""

from __future__ import annotations

import logging
import shutil
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pluginctl.core.errors import ConflictError, PluginError
from pluginctl.core.locking import exclusive_lock

from .activation import ActivationStore
from .models import Plugin, PluginManifest, PluginType
from .registry import PluginRegistry
from .templates import TemplateEngine
from .validator import parse_manifest, read_manifest, validate_plugin

if TYPE_CHECKING:
    from pluginctl.core.config import Config

log = logging.getLogger(__name__)


@dataclass
class StatusReport:
    installed: int = 0
    active: list[Plugin] = field(default_factory=list)
    # Names in the activation record with no installed plugin behind them.
    stale: list[str] = field(default_factory=list)


class LifecycleController:
    def __init__(self, config: Config):
        self.config = config
        self.registry = PluginRegistry(config.plugins_root)
        self.templates = TemplateEngine(config.plugins_root)
        self.store = ActivationStore(config.active_file)

    def _locked(self) -> AbstractContextManager[None]:
        return exclusive_lock(self.config.lock_path, self.config.lock_timeout)

    # ── Creation ────────────────────────────────────────────────────

    def install(
        self,
        name: str,
        plugin_type: PluginType | str | None = None,
        force: bool = False,
        version: str | None = None,
    ) -> Plugin:
        """Install *name* from its type's template (default type: extension).

        If the name is taken, raises ConflictError unless *force* is set, in
        which case this is a reinstall() and the old plugin is destroyed.
        """
        with self._locked():
            existing = self.registry.locate(name)
            if existing is not None:
                if not force:
                    raise ConflictError(name, existing.root)
                return self._reinstall(existing, plugin_type, version)
            return self.registry.install(
                name, plugin_type or PluginType.EXTENSION, self.templates, version=version
            )

    def create(
        self,
        name: str,
        plugin_type: PluginType | str | None = None,
        force: bool = False,
        version: str | None = None,
    ) -> Plugin:
        """Scaffold a new plugin. Same contract as install()."""
        return self.install(name, plugin_type, force=force, version=version)

    def reinstall(
        self,
        name: str,
        plugin_type: PluginType | str | None = None,
        version: str | None = None,
    ) -> Plugin:
        """Replace an installed plugin with a fresh copy of its template.

        Destructive and irreversible: the old directory, with any changes
        made to it, is deleted and the plugin ends up disabled. The type
        defaults to the plugin's current type.
        """
        with self._locked():
            return self._reinstall(self.registry.get(name), plugin_type, version)

    def _reinstall(
        self, existing: Plugin, plugin_type: PluginType | str | None, version: str | None
    ) -> Plugin:
        new_type = PluginType.parse(plugin_type) if plugin_type else existing.type
        log.warning("reinstalling %s: %s will be deleted", existing.name, existing.root)

        def _remove_old() -> None:
            self.store.disable(existing.name)
            shutil.rmtree(existing.root)

        return self.templates.instantiate(
            existing.name, new_type, force=True, version=version, before_commit=_remove_old
        )

    # ── Activation ──────────────────────────────────────────────────

    def enable(self, name: str) -> bool:
        """Activate an installed plugin. Returns False if it was already active."""
        with self._locked():
            plugin = self.registry.get(name)
            if self.store.is_active(name):
                log.warning("plugin already enabled: %s", name)
                return False
            plugin.manifest = validate_plugin(plugin.root)
            self.store.enable(name)
            log.info("enabled %s", name)
            return True

    def disable(self, name: str) -> bool:
        """Deactivate *name*. Returns False if it was not active.

        Only the activation record is touched, so this also works for a
        name that is no longer installed.
        """
        with self._locked():
            if not self.store.disable(name):
                log.warning("plugin already disabled: %s", name)
                return False
            log.info("disabled %s", name)
            return True

    # ── Removal ─────────────────────────────────────────────────────

    def uninstall(self, name: str) -> Plugin:
        """Disable, then delete the plugin directory."""
        with self._locked():
            plugin = self.registry.get(name)
            self.store.disable(name)
            self.registry.remove(name)
            log.info("uninstalled %s", name)
            return plugin

    # ── Read-only ───────────────────────────────────────────────────

    def update(self, name: str) -> Plugin:
        """Reserved. Checks the plugin exists and changes nothing."""
        plugin = self.registry.get(name)
        log.info("no update source for %s, nothing to do", name)
        return plugin

    def validate(self, name: str) -> PluginManifest:
        return validate_plugin(self.registry.get(name).root)

    def list_plugins(self) -> list[Plugin]:
        active = set(self.store.list())
        plugins: list[Plugin] = []
        for p in self.registry.iter_plugins():
            p.active = p.name in active
            try:
                p.manifest = parse_manifest(read_manifest(p.root))
            except PluginError as e:
                p.error = e.message
            plugins.append(p)
        return plugins

    def status(self) -> StatusReport:
        installed = {p.name: p for p in self.list_plugins()}
        report = StatusReport(installed=len(installed))
        for name in self.store.list():
            if name in installed:
                report.active.append(installed[name])
            else:
                report.stale.append(name)
        return report
