"""HMR trace events.

Every branch the HMR layer takes is recorded as a frozen dataclass with a
monotonic nanosecond timestamp, giving a queryable history of why each
file change ended in an update, a reload, or nothing at all.

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass
from typing import Literal, TypeAlias


@dataclass(frozen=True, slots=True)
class ChangeDetected:
    """A file change reached the HMR handler.

    Attributes:
        trigger_path: Changed file path.
        category: How the change was classified. ``config`` and ``env``
            changes end here without a client message.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    trigger_path: str
    category: Literal["config", "env", "file", "no-module"]
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class FullReloadSent:
    """Clients were told to reload the page.

    Attributes:
        path: Page path sent with the reload, or None for a bare reload.
        trigger_path: File whose change caused the reload.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str | None
    trigger_path: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class BoundaryUpdated:
    """An update record was emitted for an HMR boundary.

    Attributes:
        trigger_path: File whose change reached the boundary.
        update_type: ``js-update`` or ``css-update``.
        url: Boundary module URL.
        accepted_url: URL of the module the boundary accepted.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    trigger_path: str
    update_type: str
    url: str
    accepted_url: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class ModulePruned:
    """A module lost its last importer and its HMR timestamp was refreshed."""

    url: str
    file: str | None
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class UpdateFailed:
    """Handling a file change raised.

    Attributes:
        trigger_path: File whose change was being handled.
        error_type: Exception class name.
        message: Exception message.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    trigger_path: str
    error_type: str
    message: str
    timestamp_ns: int


HmrEvent: TypeAlias = ChangeDetected | FullReloadSent | BoundaryUpdated | ModulePruned | UpdateFailed


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
