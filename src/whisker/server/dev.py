"""Dev server core — owns the graph, the transport, and the change loop.

``DevServer`` is the context every HMR operation receives (and the third
argument of plugin ``handle_hot_update`` hooks). Its ``run`` loop consumes
watcher events strictly one at a time, so each file change is handled to
completion, plugin hooks included, before the next one touches the graph.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING

from whisker.config_loader import load_config
from whisker.graph import ModuleGraph
from whisker.hmr.handler import handle_hmr_update, handle_pruned_modules
from whisker.hmr.payload import error_payload
from whisker.server.broadcaster import Broadcaster
from whisker.server.watcher import FileWatcher

if TYPE_CHECKING:
    from whisker.config import WhiskerConfig
    from whisker.graph import ModuleNode
    from whisker.observability.collector import HmrCollector
    from whisker.server.watcher import ChangeEvent


class DevServer:
    """HMR context: configuration, module graph, client transport, tracer.

    Args:
        config: Server configuration.
        module_graph: Module graph to update against (a new one by default).
        ws: Client transport (a new ``Broadcaster`` by default).
        collector: Optional trace sink for HMR decisions.

    """

    def __init__(
        self,
        config: WhiskerConfig,
        *,
        module_graph: ModuleGraph | None = None,
        ws: Broadcaster | None = None,
        collector: HmrCollector | None = None,
    ) -> None:
        self.config = config
        self.module_graph = module_graph if module_graph is not None else ModuleGraph()
        self.ws = ws if ws is not None else Broadcaster()
        self.collector = collector

    async def run(self, watcher: FileWatcher | None = None) -> None:
        """Consume file changes until the watcher stops."""
        if watcher is None:
            watcher = FileWatcher(self.config)
        async for event in watcher.changes():
            await self.handle_change(event)

    async def handle_change(self, event: ChangeEvent) -> None:
        """Handle one watcher event; failures are reported to clients.

        An exception escaping the HMR handler (a failing plugin hook, for
        instance) becomes an ``error`` payload so the loop keeps running.

        """
        if event.kind != "modified":
            return
        self.module_graph.on_file_change(event.path)
        try:
            await handle_hmr_update(event.path, self)
        except Exception as exc:
            if self.collector is not None:
                self.collector.record_failure(str(event.path), exc)
            print(f"  HMR error: {event.path.name}: {exc}", file=sys.stderr)
            self.ws.send(error_payload(exc, str(event.path)))

    def update_module_info(
        self,
        mod: ModuleNode,
        imported_modules: set[ModuleNode],
        accepted_modules: set[ModuleNode],
        is_self_accepting: bool,
    ) -> None:
        """Record a re-transformed module's edges and prune orphaned imports."""
        pruned = self.module_graph.update_module_info(
            mod, imported_modules, accepted_modules, is_self_accepting
        )
        if pruned:
            handle_pruned_modules(pruned, self)

    def close(self) -> None:
        """Disconnect every client."""
        self.ws.close()


def create_server(
    root: str | Path = ".",
    /,
    *,
    collector: HmrCollector | None = None,
    **overrides: object,
) -> DevServer:
    """Load configuration from *root* and build a ``DevServer``.

    Args:
        root: Project root directory, positional only.
        collector: Optional trace sink for HMR decisions.
        **overrides: Override WhiskerConfig fields.

    """
    config = load_config(Path(root), **overrides)
    return DevServer(config, collector=collector)
