"""HMR collector — the debug trace sink of the HMR layer.

The handler calls one ``record_*`` method per decision it takes. The
collector is optional: a server without one simply skips tracing.

Thread Safety:
    The collector delegates to ``EventLog`` which is internally locked.

"""

from __future__ import annotations

from typing import Literal

from whisker.observability.events import (
    BoundaryUpdated,
    ChangeDetected,
    FullReloadSent,
    ModulePruned,
    UpdateFailed,
    now_ns,
)
from whisker.observability.log import EventLog


class HmrCollector:
    """Records HMR decisions into an ``EventLog``.

    Args:
        log: The EventLog to store events in.

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    def record_change(
        self,
        trigger_path: str,
        category: Literal["config", "env", "file", "no-module"],
    ) -> None:
        self._log.append(
            ChangeDetected(trigger_path=trigger_path, category=category, timestamp_ns=now_ns())
        )

    def record_full_reload(self, trigger_path: str, *, path: str | None = None) -> None:
        self._log.append(
            FullReloadSent(path=path, trigger_path=trigger_path, timestamp_ns=now_ns())
        )

    def record_boundary(
        self, trigger_path: str, update_type: str, url: str, accepted_url: str,
    ) -> None:
        self._log.append(
            BoundaryUpdated(
                trigger_path=trigger_path,
                update_type=update_type,
                url=url,
                accepted_url=accepted_url,
                timestamp_ns=now_ns(),
            )
        )

    def record_prune(self, url: str, file: str | None) -> None:
        self._log.append(ModulePruned(url=url, file=file, timestamp_ns=now_ns()))

    def record_failure(self, trigger_path: str, exc: BaseException) -> None:
        """Record an exception raised while handling a file change."""
        self._log.append(
            UpdateFailed(
                trigger_path=trigger_path,
                error_type=type(exc).__qualname__,
                message=str(exc),
                timestamp_ns=now_ns(),
            )
        )
