"""Error taxonomy for plugin lifecycle operations."""

from __future__ import annotations

from pathlib import Path
from typing import Any


class PluginError(Exception):
    """Base class for every failure a lifecycle operation can report."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFoundError(PluginError):
    """A plugin, manifest, template or entry-point file is missing."""

    def __init__(self, what: str, target: str | Path, message: str = ""):
        super().__init__(
            message or f"{what} not found: {target}",
            {"what": what, "target": str(target)},
        )
        self.what = what
        self.target = str(target)


class ValidationError(PluginError):
    """A manifest or argument failed a field-level check."""

    def __init__(self, field: str, reason: str, message: str = ""):
        super().__init__(
            message or f"invalid {field}: {reason}",
            {"field": field, "reason": reason},
        )
        self.field = field
        self.reason = reason


class EntryPointNotFoundError(NotFoundError, ValidationError):
    """The manifest's ``main`` file does not exist inside the plugin directory."""

    def __init__(self, path: Path):
        PluginError.__init__(
            self,
            f"main file not found: {path}",
            {"what": "main", "target": str(path), "field": "main", "reason": "not found"},
        )
        self.what = "main"
        self.target = str(path)
        self.field = "main"
        self.reason = "not found"


class ConflictError(PluginError):
    """The install target is already taken."""

    def __init__(self, name: str, location: Path):
        super().__init__(
            f"plugin already exists: {name} ({location}); use --force to reinstall",
            {"name": name, "location": str(location)},
        )
        self.name = name
        self.location = location


class LockTimeoutError(PluginError):
    """The exclusive lock could not be acquired within the bound."""

    def __init__(self, path: Path, timeout: float):
        super().__init__(
            f"could not acquire {path} within {timeout:g}s",
            {"path": str(path), "timeout": timeout},
        )
        self.path = path
        self.timeout = timeout
