"""Tests for whisker.server.dev — the serialized change loop."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest
from conftest import RecordingTransport, link, make_server

from whisker._errors import ConfigError
from whisker.graph import ModuleGraph
from whisker.observability import HmrCollector, UpdateFailed
from whisker.server.broadcaster import Broadcaster
from whisker.server.dev import DevServer, create_server
from whisker.server.watcher import ChangeEvent


class _FakeWatcher:
    """Replays a fixed list of events."""

    def __init__(self, events: list[ChangeEvent]) -> None:
        self.events = events

    async def changes(self):  # noqa: ANN201
        for event in self.events:
            yield event


class _SlowPlugin:
    """Records hook entry/exit to detect overlapping updates."""

    def __init__(self) -> None:
        self.log: list[str] = []

    async def handle_hot_update(self, file, modules, server):  # noqa: ANN001, ANN201
        self.log.append(f"start {file.name}")
        await asyncio.sleep(0.01)
        self.log.append(f"end {file.name}")


class _Failing:
    async def handle_hot_update(self, file, modules, server):  # noqa: ANN001, ANN201
        msg = "plugin exploded"
        raise RuntimeError(msg)


def _modified(path: Path) -> ChangeEvent:
    return ChangeEvent(path=path, kind="modified")


class TestHandleChange:
    @pytest.mark.asyncio
    async def test_modified_file_is_hot_updated(
        self, root: Path, graph: ModuleGraph, server: DevServer,
        transport: RecordingTransport,
    ) -> None:
        mod = graph.ensure_entry("/src/a.js", root / "src" / "a.js")
        mod.is_self_accepting = True

        await server.handle_change(_modified(root / "src" / "a.js"))

        assert transport.messages[0]["type"] == "update"

    @pytest.mark.asyncio
    async def test_clears_transform_cache_of_all_variants(
        self, root: Path, graph: ModuleGraph, server: DevServer,
    ) -> None:
        file = root / "src" / "a.js"
        main = graph.ensure_entry("/src/main.js", root / "src" / "main.js")
        main.transform_result = "main code"
        variant = graph.ensure_entry("/src/a.js?url", file)
        variant.transform_result = "variant code"
        plain = graph.ensure_entry("/src/a.js", file)
        link(main, plain, accepts=True)
        link(main, variant, accepts=True)

        await server.handle_change(_modified(file))

        assert variant.transform_result is None
        assert plain.transform_result is None

    @pytest.mark.asyncio
    async def test_created_and_deleted_are_ignored(
        self, root: Path, graph: ModuleGraph, server: DevServer,
        transport: RecordingTransport,
    ) -> None:
        graph.ensure_entry("/src/a.js", root / "src" / "a.js")

        await server.handle_change(ChangeEvent(path=root / "src" / "a.js", kind="deleted"))
        await server.handle_change(ChangeEvent(path=root / "index.html", kind="created"))

        assert transport.sent == []

    @pytest.mark.asyncio
    async def test_failure_becomes_error_payload(
        self, root: Path, graph: ModuleGraph, transport: RecordingTransport,
        collector: HmrCollector, capsys: pytest.CaptureFixture[str],
    ) -> None:
        graph.ensure_entry("/src/a.js", root / "src" / "a.js")
        server = make_server(root, graph, transport, collector, plugins=(_Failing(),))

        await server.handle_change(_modified(root / "src" / "a.js"))

        (message,) = transport.messages
        assert message["type"] == "error"
        assert message["err"]["message"] == "plugin exploded"
        assert message["err"]["id"] == str(root / "src" / "a.js")
        (event,) = collector.log.query(event_type=UpdateFailed)
        assert event.error_type == "RuntimeError"
        assert "HMR error" in capsys.readouterr().err


class TestRun:
    @pytest.mark.asyncio
    async def test_events_processed_in_order_without_overlap(
        self, root: Path, graph: ModuleGraph, transport: RecordingTransport,
    ) -> None:
        plugin = _SlowPlugin()
        for name in ("a", "b"):
            graph.ensure_entry(f"/src/{name}.js", root / "src" / f"{name}.js").is_self_accepting = True
        server = make_server(root, graph, transport, plugins=(plugin,))
        watcher = _FakeWatcher([_modified(root / "src" / "a.js"), _modified(root / "src" / "b.js")])

        await server.run(watcher)  # type: ignore[arg-type]

        assert plugin.log == ["start a.js", "end a.js", "start b.js", "end b.js"]
        assert [m["updates"][0]["path"] for m in transport.messages] == ["/src/a.js", "/src/b.js"]

    @pytest.mark.asyncio
    async def test_loop_survives_failing_update(
        self, root: Path, graph: ModuleGraph, transport: RecordingTransport,
    ) -> None:
        graph.ensure_entry("/src/a.js", root / "src" / "a.js")
        server = make_server(root, graph, transport, plugins=(_Failing(),))
        watcher = _FakeWatcher([_modified(root / "src" / "a.js"), _modified(root / "index.html")])

        await server.run(watcher)  # type: ignore[arg-type]

        assert [m["type"] for m in transport.messages] == ["error", "full-reload"]


class TestUpdateModuleInfo:
    def test_prunes_orphaned_imports(
        self, graph: ModuleGraph, server: DevServer, transport: RecordingTransport,
    ) -> None:
        main = graph.ensure_entry("/src/main.js")
        dep = graph.ensure_entry("/src/dep.js")
        server.update_module_info(main, {dep}, set(), is_self_accepting=False)
        assert transport.sent == []

        server.update_module_info(main, set(), set(), is_self_accepting=False)

        assert transport.messages == [{"type": "prune", "paths": ["/src/dep.js"]}]
        assert dep.last_hmr_timestamp > 0


class TestCreateServer:
    def test_defaults(self, tmp_path: Path) -> None:
        server = create_server(tmp_path)
        assert server.config.root == tmp_path.resolve()
        assert isinstance(server.ws, Broadcaster)
        assert isinstance(server.module_graph, ModuleGraph)
        assert server.collector is None

    def test_loads_config_file(self, tmp_path: Path) -> None:
        (tmp_path / "whisker.yaml").write_text("env_suffix: .vars\n")
        server = create_server(tmp_path, collector=HmrCollector())
        assert server.config.env_suffix == ".vars"
        assert server.config.config_path == tmp_path.resolve() / "whisker.yaml"
        assert server.collector is not None

    def test_close(self, tmp_path: Path) -> None:
        server = create_server(tmp_path)
        server.ws.connect("c1")
        server.close()
        assert server.ws.client_count == 0

    def test_root_keyword_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="root"):
            create_server(tmp_path, root=tmp_path / "elsewhere")
