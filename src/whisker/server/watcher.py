"""File watcher — feeds file changes to the HMR handler.

Watches the project root with watchfiles and yields one ``ChangeEvent``
per changed path, skipping ignored directories (VCS metadata, installed
dependencies, bytecode caches).
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from watchfiles import Change, awatch

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from whisker._types import ChangeKind
    from whisker.config import WhiskerConfig


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """A file change detected by the watcher.

    Attributes:
        path: Absolute path to the changed file.
        kind: Type of filesystem change.

    """

    path: Path
    kind: ChangeKind


# Mapping from watchfiles Change enum to our kind literals.
_CHANGE_KIND_MAP: dict[Change, ChangeKind] = {
    Change.added: "created",
    Change.modified: "modified",
    Change.deleted: "deleted",
}


def is_ignored(path: Path, config: WhiskerConfig) -> bool:
    """Whether a change to *path* should never be reported."""
    try:
        rel = path.relative_to(config.root)
    except ValueError:
        return True
    return any(part in config.ignore_dirs for part in rel.parts[:-1])


class FileWatcher:
    """Watches the project root and yields ``ChangeEvent`` objects.

    Args:
        config: Server configuration (root and ignored directories).
        debounce: Milliseconds watchfiles waits to group changes.

    """

    def __init__(self, config: WhiskerConfig, *, debounce: int = 50) -> None:
        self._config = config
        self._debounce = debounce
        self._stop_event = asyncio.Event()

    def stop(self) -> None:
        """Signal ``changes()`` to finish after the current batch."""
        self._stop_event.set()

    async def changes(self) -> AsyncIterator[ChangeEvent]:
        """Async iterator over file changes until ``stop()`` is called."""
        async for raw_changes in awatch(
            self._config.root,
            stop_event=self._stop_event,
            debounce=self._debounce,
            step=50,
        ):
            for change_type, path_str in sorted(raw_changes, key=lambda c: c[1]):
                path = Path(path_str)
                if is_ignored(path, self._config):
                    continue
                kind = _CHANGE_KIND_MAP.get(change_type, "modified")
                yield ChangeEvent(path=path, kind=kind)
