"""HMR handler — turns one file change into one client message.

Flow for a changed file:
    1. Config and env files are ignored (restarting is not handled here)
    2. HTML documents and the client runtime always reload the page
    3. The file's modules are looked up in the module graph
    4. Plugins may narrow or replace that module list, one after another
    5. Each module's change is propagated to its HMR boundaries
    6. One ``update`` payload, or a bare ``full-reload`` on any dead end

The caller must not run two invocations concurrently against the same
graph; ``DevServer`` feeds changes through a single consumer task.
"""

from __future__ import annotations

import inspect
import os
import time
from pathlib import Path
from typing import TYPE_CHECKING

from whisker.hmr.payload import FullReloadPayload, PrunePayload, Update, UpdatePayload
from whisker.hmr.propagate import UpdateBoundary, propagate_update

if TYPE_CHECKING:
    from collections.abc import Iterable

    from whisker.graph import ModuleNode
    from whisker.server.dev import DevServer


def _timestamp() -> int:
    """Millisecond wall-clock timestamp, as the client cache-busts with."""
    return int(time.time() * 1000)


async def handle_hmr_update(file: str | Path, server: DevServer) -> None:
    """Handle a change to *file* and notify clients.

    Exceptions raised by plugin hooks propagate unchanged.

    """
    file = Path(file)
    config = server.config
    collector = server.collector

    if config.is_config_file(file):
        if collector is not None:
            collector.record_change(str(file), "config")
        return

    if config.is_env_file(file):
        if collector is not None:
            collector.record_change(str(file), "env")
        return

    if collector is not None:
        collector.record_change(str(file), "file")

    # HTML files and the client itself cannot be hot updated.
    if config.requires_full_reload(file):
        path = "/" + Path(os.path.relpath(file, config.root)).as_posix()
        if collector is not None:
            collector.record_full_reload(str(file), path=path)
        server.ws.send(FullReloadPayload(path=path))
        return

    mods = server.module_graph.get_modules_by_file(file)
    if not mods:
        # Loaded but not in the module graph, probably not a module.
        if collector is not None:
            collector.record_change(str(file), "no-module")
        return

    filtered_mods = await _run_hot_update_hooks(file, list(mods), server)

    timestamp = _timestamp()
    updates: list[Update] = []

    for mod in filtered_mods:
        boundaries: list[UpdateBoundary] = []
        if propagate_update(mod, timestamp, boundaries):
            if collector is not None:
                collector.record_full_reload(str(file))
            server.ws.send(FullReloadPayload())
            return

        for b in boundaries:
            update_type = f"{b.boundary.type}-update"
            if collector is not None:
                collector.record_boundary(
                    str(file), update_type, b.boundary.url, b.accepted_via.url,
                )
            updates.append(
                Update(
                    type=update_type,
                    timestamp=timestamp,
                    path=b.boundary.url,
                    accepted_path=b.accepted_via.url,
                )
            )

    server.ws.send(UpdatePayload(updates=tuple(updates)))


async def _run_hot_update_hooks(
    file: Path,
    mods: list[ModuleNode],
    server: DevServer,
) -> list[ModuleNode]:
    """Reduce *mods* through every plugin's ``handle_hot_update`` hook.

    Hooks run in registration order and are awaited one at a time, each
    seeing the previous hook's result. An empty or None result keeps the
    current list.

    """
    for plugin in server.config.plugins:
        hook = getattr(plugin, "handle_hot_update", None)
        if hook is None:
            continue
        result = hook(file, mods, server)
        if inspect.isawaitable(result):
            result = await result
        if result:
            mods = list(result)
    return mods


def handle_pruned_modules(mods: Iterable[ModuleNode], server: DevServer) -> None:
    """Notify clients about modules that are no longer imported.

    Each module gets a fresh HMR timestamp: if it is imported again later,
    the browser must re-fetch and re-run it rather than reuse its cached copy.

    """
    mods = list(mods)
    t = _timestamp()
    for mod in mods:
        mod.last_hmr_timestamp = t
        if server.collector is not None:
            server.collector.record_prune(mod.url, str(mod.file) if mod.file else None)
    server.ws.send(PrunePayload(paths=tuple(m.url for m in mods)))
