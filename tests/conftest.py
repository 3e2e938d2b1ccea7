"""Shared test fixtures for whisker."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from whisker.config import WhiskerConfig
from whisker.graph import ModuleGraph, ModuleNode
from whisker.observability import HmrCollector
from whisker.server.dev import DevServer


class RecordingTransport:
    """Stands in for the client transport; keeps every payload sent."""

    def __init__(self) -> None:
        self.sent: list[Any] = []

    def send(self, payload: Any) -> int:
        self.sent.append(payload)
        return 1

    def close(self) -> None:
        pass

    @property
    def messages(self) -> list[dict[str, Any]]:
        return [p.to_dict() for p in self.sent]


def link(importer: ModuleNode, dep: ModuleNode, *, accepts: bool = False) -> None:
    """Make *importer* import *dep*, optionally accepting its updates."""
    importer.imported_modules.add(dep)
    dep.importers.add(importer)
    if accepts:
        importer.accepted_hmr_deps.add(dep)


@pytest.fixture
def root(tmp_path: Path) -> Path:
    """A project root with a source directory."""
    (tmp_path / "src").mkdir()
    return tmp_path


@pytest.fixture
def graph() -> ModuleGraph:
    return ModuleGraph()


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def collector() -> HmrCollector:
    return HmrCollector()


def make_server(
    root: Path,
    graph: ModuleGraph,
    transport: RecordingTransport,
    collector: HmrCollector | None = None,
    **config: Any,
) -> DevServer:
    """Build a DevServer over an explicit graph and a recording transport."""
    return DevServer(
        WhiskerConfig(root=root, **config),
        module_graph=graph,
        ws=transport,  # type: ignore[arg-type]
        collector=collector,
    )


@pytest.fixture
def server(
    root: Path,
    graph: ModuleGraph,
    transport: RecordingTransport,
    collector: HmrCollector,
) -> DevServer:
    """A DevServer rooted at ``root`` with no plugins."""
    return make_server(root, graph, transport, collector)
