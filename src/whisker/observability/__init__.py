"""HMR observability — a queryable trace of every hot-update decision.

Quick Start:
    >>> from whisker.observability import EventLog, HmrCollector
    >>> collector = HmrCollector(EventLog())
    >>> # Pass collector to DevServer; handlers record via collector.record_*(...)
    >>> # collector.log.trace("/abs/src/app.js") then shows why that edit
    >>> # ended in an update, a full reload, or nothing.

"""

from whisker.observability.collector import HmrCollector
from whisker.observability.events import (
    BoundaryUpdated,
    ChangeDetected,
    FullReloadSent,
    HmrEvent,
    ModulePruned,
    UpdateFailed,
    now_ns,
)
from whisker.observability.log import EventLog

__all__ = [
    "BoundaryUpdated",
    "ChangeDetected",
    "EventLog",
    "FullReloadSent",
    "HmrCollector",
    "HmrEvent",
    "ModulePruned",
    "UpdateFailed",
    "now_ns",
]
