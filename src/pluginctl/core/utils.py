"""Name checks, path safety, short path display."""

from __future__ import annotations

import re
from pathlib import Path

from .errors import ValidationError

RESERVED_NAMES = frozenset({"template"})

# One name per line in the activation file: no whitespace or control characters.
_NAME_RE = re.compile(r"[A-Za-z0-9][A-Za-z0-9._-]*")


def check_plugin_name(name: str) -> str:
    """Return *name* if it can be used as a plugin directory name."""
    if not name or not name.strip():
        raise ValidationError("name", "empty")
    if name in RESERVED_NAMES:
        raise ValidationError("name", "reserved", f"plugin name is reserved: {name!r}")
    if name.startswith("."):
        raise ValidationError("name", "hidden", f"plugin name must not start with '.': {name!r}")
    if "/" in name or "\\" in name or name in (".", ".."):
        raise ValidationError("name", "not a single path component", f"invalid plugin name: {name!r}")
    if not _NAME_RE.fullmatch(name):
        raise ValidationError(
            "name",
            "invalid characters",
            f"invalid characters in plugin name: {name!r}",
        )
    return name


def safe_path(path: str, cwd: Path) -> Path:
    """Resolve *path* relative to *cwd*, raising ValueError on traversal."""
    base = cwd.resolve()
    resolved = (base / path).resolve()
    if base not in resolved.parents and resolved != base:
        raise ValueError(f"Path traversal detected: {path!r} escapes {base}")
    return resolved


def short_path(p: Path, base: Path | None = None) -> str:
    """Return *p* relative to *base* (default: cwd), or home with ``~``, else absolute."""
    base = base or Path.cwd()
    try:
        return str(p.relative_to(base))
    except ValueError:
        pass
    try:
        rel = p.relative_to(Path.home())
        return f"~/{rel}" if str(rel) != "." else "~"
    except ValueError:
        return str(p)
