"""Hot module replacement — from a changed file to client update messages.

Propagates a change up the module graph to the modules that can absorb it,
decides between a hot update and a full reload, and lexes the
``import.meta.hot.accept()`` declarations that define those boundaries.
"""

from whisker.hmr.handler import handle_hmr_update, handle_pruned_modules
from whisker.hmr.lexer import AcceptedDeps, lex_accepted_hmr_deps, scan_accepted_deps
from whisker.hmr.payload import (
    ConnectedPayload,
    ErrorPayload,
    FullReloadPayload,
    HmrPayload,
    PrunePayload,
    Update,
    UpdatePayload,
    error_payload,
)
from whisker.hmr.propagate import UpdateBoundary, invalidate_chain, propagate_update

__all__ = [
    "AcceptedDeps",
    "ConnectedPayload",
    "ErrorPayload",
    "FullReloadPayload",
    "HmrPayload",
    "PrunePayload",
    "Update",
    "UpdateBoundary",
    "UpdatePayload",
    "error_payload",
    "handle_hmr_update",
    "handle_pruned_modules",
    "invalidate_chain",
    "lex_accepted_hmr_deps",
    "propagate_update",
    "scan_accepted_deps",
]
