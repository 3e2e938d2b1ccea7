"""Update propagation — finds the modules that can absorb a change.

Starting at the changed module, walks up the ``importers`` edges until
every path ends at an HMR boundary: a module that accepts itself, or one
that explicitly accepts the dependency the update arrived through. A path
that runs out of importers first is a dead end, and one dead end anywhere
means the page has to be reloaded.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from whisker.graph import ModuleNode


@dataclass(frozen=True, slots=True, eq=False)
class UpdateBoundary:
    """A module whose update must reach the client.

    Attributes:
        boundary: The module the client re-imports.
        accepted_via: The dependency edge the update was absorbed through.

    """

    boundary: ModuleNode
    accepted_via: ModuleNode


def propagate_update(
    node: ModuleNode,
    timestamp: int,
    boundaries: list[UpdateBoundary],
    chain: list[ModuleNode] | None = None,
) -> bool:
    """Collect the HMR boundaries for a change to *node*.

    Boundaries are appended to *boundaries* in discovery order and never
    deduplicated: the same module reached through two accepted edges
    yields two records. Every module on a path that ends at a boundary is
    invalidated with *timestamp*.

    Returns True on a dead end. Boundaries found on sibling branches before
    the dead end stay in *boundaries*; discarding them is up to the caller.

    """
    if chain is None:
        chain = [node]

    settled = _settle(node, chain, timestamp, boundaries)
    if settled is not None:
        return settled

    # Depth-first over importers; each frame is a module on the current
    # path, the path up to it, and its importers still to visit.
    stack = [(node, chain, iter(node.importers))]
    while stack:
        mod, path, importers = stack[-1]
        importer = next(importers, None)
        if importer is None:
            stack.pop()
            continue

        sub_chain = [*path, importer]
        if mod in importer.accepted_hmr_deps:
            boundaries.append(UpdateBoundary(importer, mod))
            invalidate_chain(sub_chain, timestamp)
            continue

        # Only the current path counts as a cycle.
        if importer in path:
            continue

        settled = _settle(importer, sub_chain, timestamp, boundaries)
        if settled:
            return True
        if settled is None:
            stack.append((importer, sub_chain, iter(importer.importers)))

    return False


def _settle(
    node: ModuleNode,
    chain: list[ModuleNode],
    timestamp: int,
    boundaries: list[UpdateBoundary],
) -> bool | None:
    """Decide *node* without looking at its importers.

    Returns False when it accepts itself, True when nothing imports it, and
    None when the walk has to continue upward.

    """
    if node.is_self_accepting:
        boundaries.append(UpdateBoundary(node, node))
        invalidate_chain(chain, timestamp)
        return False
    if not node.importers:
        return True
    return None


def invalidate_chain(chain: list[ModuleNode], timestamp: int) -> None:
    """Stamp every module in *chain* and drop its cached transform output."""
    for node in chain:
        node.last_hmr_timestamp = timestamp
        node.transform_result = None
