"""Module graph — the dev server's view of loaded modules.

Tracks every module the browser has requested, keyed by URL, along with
its import edges in both directions and what it declared through
``import.meta.hot``. The HMR layer only reads edges and stamps
``last_hmr_timestamp`` / ``transform_result``; creating nodes and
rewiring edges happens here, driven by the transform pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from whisker._types import ModuleKind, ModuleUrl

_CSS_SUFFIXES = (".css", ".less", ".sass", ".scss", ".styl", ".stylus", ".pcss", ".postcss")


def _kind_for(url: str) -> ModuleKind:
    path = url.split("?", 1)[0]
    return "css" if path.endswith(_CSS_SUFFIXES) else "js"


@dataclass(slots=True, eq=False)
class ModuleNode:
    """One resolved, hot-update-tracked module.

    Identity-hashed: two nodes are equal only if they are the same object,
    so nodes can live in each other's edge sets while mutable.

    Attributes:
        url: Public URL the browser imports (may carry a query suffix).
        file: Source file backing the module, if any.
        type: Module kind, labels emitted update records.
        is_self_accepting: Module calls ``import.meta.hot.accept()`` on itself.
        accepted_hmr_deps: Imported modules whose updates this module handles.
        importers: Modules importing this one (reverse edges).
        imported_modules: Modules this one imports.
        last_hmr_timestamp: Millisecond timestamp of the last hot update.
        transform_result: Cached transform output, None when invalidated.

    """

    url: ModuleUrl
    file: Path | None = None
    type: ModuleKind = "js"
    is_self_accepting: bool = False
    accepted_hmr_deps: set[ModuleNode] = field(default_factory=set)
    importers: set[ModuleNode] = field(default_factory=set)
    imported_modules: set[ModuleNode] = field(default_factory=set)
    last_hmr_timestamp: int = 0
    transform_result: Any = None

    def __repr__(self) -> str:
        return f"ModuleNode({self.url!r})"


class ModuleGraph:
    """In-memory module graph indexed by URL and by file."""

    def __init__(self) -> None:
        self.url_to_module: dict[str, ModuleNode] = {}
        self.file_to_modules: dict[Path, set[ModuleNode]] = {}

    def get_module_by_url(self, url: str) -> ModuleNode | None:
        return self.url_to_module.get(url)

    def get_modules_by_file(self, file: str | Path) -> set[ModuleNode] | None:
        return self.file_to_modules.get(Path(file))

    def ensure_entry(self, url: str, file: str | Path | None = None) -> ModuleNode:
        """Return the node for *url*, creating and indexing it if needed."""
        mod = self.url_to_module.get(url)
        if mod is not None:
            return mod
        mod = ModuleNode(url=url, type=_kind_for(url))
        self.url_to_module[url] = mod
        if file is not None:
            mod.file = Path(file)
            self.file_to_modules.setdefault(mod.file, set()).add(mod)
        return mod

    def on_file_change(self, file: str | Path) -> None:
        """Drop cached transform output for every module backed by *file*."""
        for mod in self.file_to_modules.get(Path(file), ()):
            mod.transform_result = None

    def update_module_info(
        self,
        mod: ModuleNode,
        imported_modules: set[ModuleNode],
        accepted_modules: set[ModuleNode],
        is_self_accepting: bool,
    ) -> set[ModuleNode] | None:
        """Replace a module's import edges after it was re-transformed.

        Returns the previously imported modules that no longer have any
        importer, or None when nothing was orphaned. The caller passes a
        non-empty result to ``handle_pruned_modules``.

        """
        mod.is_self_accepting = is_self_accepting
        prev_imports = mod.imported_modules
        mod.imported_modules = set(imported_modules)
        for dep in imported_modules:
            dep.importers.add(mod)

        no_longer_imported: set[ModuleNode] = set()
        for dep in prev_imports:
            if dep not in imported_modules:
                dep.importers.discard(mod)
                if not dep.importers:
                    no_longer_imported.add(dep)

        mod.accepted_hmr_deps = set(accepted_modules)
        return no_longer_imported or None
