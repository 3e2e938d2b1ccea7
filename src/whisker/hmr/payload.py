"""HMR payloads — the messages sent to connected clients.

Every payload is a frozen dataclass whose ``to_dict()`` returns the
JSON-serializable wire shape the client runtime expects.
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass
from typing import Any, TypeAlias

from whisker._errors import AcceptedDepsError


@dataclass(frozen=True, slots=True)
class ConnectedPayload:
    """First message on every new client connection."""

    def to_dict(self) -> dict[str, Any]:
        return {"type": "connected"}


@dataclass(frozen=True, slots=True)
class FullReloadPayload:
    """Tell clients to reload.

    Attributes:
        path: Root-relative page path (e.g. ``/index.html``). None asks
            every client to reload whatever it shows.

    """

    path: str | None = None

    def to_dict(self) -> dict[str, Any]:
        if self.path is None:
            return {"type": "full-reload"}
        return {"type": "full-reload", "path": self.path}


@dataclass(frozen=True, slots=True)
class Update:
    """One module the client must re-import.

    Attributes:
        type: ``"js-update"`` or ``"css-update"``.
        timestamp: Millisecond timestamp for cache-busting the re-import.
        path: URL of the boundary module.
        accepted_path: URL of the dependency the boundary accepted the
            update through (equal to ``path`` for self-accepting modules).

    """

    type: str
    timestamp: int
    path: str
    accepted_path: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "timestamp": self.timestamp,
            "path": self.path,
            "acceptedPath": self.accepted_path,
        }


@dataclass(frozen=True, slots=True)
class UpdatePayload:
    updates: tuple[Update, ...]

    def to_dict(self) -> dict[str, Any]:
        return {"type": "update", "updates": [u.to_dict() for u in self.updates]}


@dataclass(frozen=True, slots=True)
class PrunePayload:
    """Modules no longer imported by anything."""

    paths: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {"type": "prune", "paths": list(self.paths)}


@dataclass(frozen=True, slots=True)
class ErrorPayload:
    """A file change could not be handled; shown by the client overlay.

    Attributes:
        message: Exception message.
        stack: Formatted traceback.
        id: File whose change was being handled, if known.
        offset: Source offset of a lexer failure, if any.

    """

    message: str
    stack: str
    id: str | None = None
    offset: int | None = None

    def to_dict(self) -> dict[str, Any]:
        err: dict[str, Any] = {"message": self.message, "stack": self.stack}
        if self.id is not None:
            err["id"] = self.id
            if self.offset is not None:
                err["loc"] = {"file": self.id, "offset": self.offset}
        return {"type": "error", "err": err}


HmrPayload: TypeAlias = (
    ConnectedPayload
    | FullReloadPayload
    | UpdatePayload
    | PrunePayload
    | ErrorPayload
)


def error_payload(exc: BaseException, file: str | None = None) -> ErrorPayload:
    """Build an ``ErrorPayload`` for an exception raised while handling *file*."""
    stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    offset = exc.pos if isinstance(exc, AcceptedDepsError) else None
    return ErrorPayload(message=str(exc), stack=stack, id=file, offset=offset)
