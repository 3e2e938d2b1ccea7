"""HMR trace log — a bounded history of HMR decisions.

Events are kept in arrival order in a ring buffer. Queries filter on the
fields HMR events carry: the file whose change triggered a decision, the
module URLs an update or prune touched, and the update kind.

Thread Safety:
    All methods are protected by a ``threading.Lock``.

"""

import threading
from collections import deque

from whisker.observability.events import (
    BoundaryUpdated,
    ChangeDetected,
    FullReloadSent,
    HmrEvent,
    ModulePruned,
    UpdateFailed,
)


def trigger_of(event: HmrEvent) -> str | None:
    """File whose change produced *event*, or None for prunes."""
    match event:
        case (
            ChangeDetected(trigger_path=path)
            | FullReloadSent(trigger_path=path)
            | BoundaryUpdated(trigger_path=path)
            | UpdateFailed(trigger_path=path)
        ):
            return path
    return None


def urls_of(event: HmrEvent) -> tuple[str, ...]:
    """Module URLs *event* refers to."""
    match event:
        case BoundaryUpdated(url=url, accepted_url=accepted_url):
            return (url, accepted_url)
        case ModulePruned(url=url):
            return (url,)
    return ()


class EventLog:
    """Bounded store of HMR trace events.

    When the buffer is full the oldest events are discarded.

    Args:
        max_events: Maximum number of events to retain.

    """

    __slots__ = ("_events", "_lock")

    def __init__(self, max_events: int = 10_000) -> None:
        self._events: deque[HmrEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def append(self, event: HmrEvent) -> None:
        with self._lock:
            self._events.append(event)

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def recent(self, n: int = 20) -> list[HmrEvent]:
        """Return the N most recent events, oldest first."""
        with self._lock:
            items = list(self._events)
        return items[-n:]

    def query(
        self,
        *,
        event_type: type | None = None,
        trigger_path: str | None = None,
        url: str | None = None,
        update_type: str | None = None,
        limit: int = 100,
    ) -> list[HmrEvent]:
        """Query events, most recent first.

        Args:
            event_type: Only events of this class.
            trigger_path: Only events caused by a change to this file.
            url: Only boundary updates naming this URL (as boundary or as
                accepted module) and prunes of it.
            update_type: Only boundary updates of this kind, e.g. ``css-update``.
            limit: Maximum number of events to return.

        """
        with self._lock:
            events = list(self._events)

        results: list[HmrEvent] = []
        for event in reversed(events):
            if len(results) >= limit:
                break
            if event_type is not None and not isinstance(event, event_type):
                continue
            if trigger_path is not None and trigger_of(event) != trigger_path:
                continue
            if url is not None and url not in urls_of(event):
                continue
            if update_type is not None and (
                not isinstance(event, BoundaryUpdated) or event.update_type != update_type
            ):
                continue
            results.append(event)
        return results

    def trace(self, trigger_path: str) -> list[HmrEvent]:
        """Events of the latest handling of *trigger_path*, oldest first.

        A handling starts with the ``ChangeDetected`` event that classified
        the file; a ``no-module`` follow-up belongs to the same handling.

        """
        with self._lock:
            events = list(self._events)

        trace: list[HmrEvent] = []
        for event in reversed(events):
            if trigger_of(event) != trigger_path:
                continue
            trace.append(event)
            if isinstance(event, ChangeDetected) and event.category != "no-module":
                break
        trace.reverse()
        return trace
