"""Activation store: the persisted, ordered set of enabled plugin names.

The file holds one name per line (UTF-8, no header). Every mutation loads
the whole file into an in-memory ordered set, applies the change and
rewrites the file through a temporary sibling plus ``os.replace``.
Callers serialize mutations with the lifecycle lock.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

log = logging.getLogger(__name__)


class ActivationStore:
    def __init__(self, path: Path):
        self.path = path

    def _load(self) -> dict[str, None]:
        if not self.path.exists():
            return {}
        names = (line.strip() for line in self.path.read_text(encoding="utf-8").splitlines())
        return dict.fromkeys(n for n in names if n)

    def _flush(self, names: dict[str, None]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text("".join(f"{n}\n" for n in names), encoding="utf-8")
        os.replace(tmp, self.path)

    @contextmanager
    def edit(self) -> Iterator[dict[str, None]]:
        """Load, let the caller mutate the ordered set, flush if it changed."""
        names = self._load()
        before = list(names)
        yield names
        if list(names) != before:
            self._flush(names)

    def is_active(self, name: str) -> bool:
        return name in self._load()

    def enable(self, name: str) -> bool:
        """Add *name*. Returns False (and writes nothing) if it was already active."""
        with self.edit() as names:
            if name in names:
                return False
            names[name] = None
        log.debug("activation record: +%s", name)
        return True

    def disable(self, name: str) -> bool:
        """Remove *name*. Returns False (and writes nothing) if it was not active."""
        with self.edit() as names:
            if name not in names:
                return False
            del names[name]
        log.debug("activation record: -%s", name)
        return True

    def list(self) -> list[str]:
        return list(self._load())

    def count(self) -> int:
        return len(self._load())

    def touch(self) -> bool:
        """Create an empty store file if none exists. Returns True if created."""
        if self.path.exists():
            return False
        self._flush({})
        return True
