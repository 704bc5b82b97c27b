"""Configuration: env, paths, lock timeout."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_LOCK_TIMEOUT = 10.0


@dataclass
class Config:
    home: Path = field(default_factory=Path.cwd)
    plugins_dir: Path | None = None  # explicit override; None = home/plugins
    lock_timeout: float = DEFAULT_LOCK_TIMEOUT
    verbose: bool = False

    @property
    def plugins_root(self) -> Path:
        if self.plugins_dir is not None:
            return self.plugins_dir
        return self.home / "plugins"

    @property
    def active_file(self) -> Path:
        return self.home / ".active-plugins"

    @property
    def lock_path(self) -> Path:
        return self.plugins_root / ".plugins.lock"

    @property
    def settings_path(self) -> Path:
        return self.home / "settings.json"

    @property
    def registry_index_path(self) -> Path:
        return self.plugins_root / "registry" / "index.json"


def _apply_settings(config: Config, path: Path) -> None:
    """Apply a settings.json file to config. Missing or malformed files are ignored."""
    if not path.exists():
        return
    try:
        data = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError):
        return
    if not isinstance(data, dict):
        return
    if plugins_dir := data.get("plugins_dir"):
        p = Path(plugins_dir).expanduser()
        config.plugins_dir = p if p.is_absolute() else config.home / p
    if "lock_timeout" in data:
        try:
            config.lock_timeout = float(data["lock_timeout"])
        except (TypeError, ValueError):
            pass


def load_config(
    home: Path | str | None = None,
    plugins_dir: Path | str | None = None,
    verbose: bool = False,
) -> Config:
    """Load config with priority: CLI args > env > .env > settings.json > defaults."""
    load_dotenv()

    if home is None and (env_home := os.getenv("PLUGINCTL_HOME")):
        home = env_home
    config = Config(home=Path(home).expanduser().resolve()) if home else Config()
    config.verbose = verbose

    _apply_settings(config, config.settings_path)

    if env_timeout := os.getenv("PLUGINCTL_LOCK_TIMEOUT"):
        try:
            config.lock_timeout = float(env_timeout)
        except ValueError:
            pass
    if env_plugins := os.getenv("PLUGINCTL_PLUGINS_DIR"):
        config.plugins_dir = Path(env_plugins).expanduser()

    if plugins_dir:
        config.plugins_dir = Path(plugins_dir).expanduser().resolve()

    return config
