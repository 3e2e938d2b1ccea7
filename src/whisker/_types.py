"""Shared type definitions for whisker."""

from typing import Literal, TypeAlias

# Kind of module tracked by the graph; labels emitted update records
ModuleKind: TypeAlias = Literal["js", "css"]

# Public URL of a module node (e.g., "/src/main.js?v=1")
ModuleUrl: TypeAlias = str

# Filesystem change kind reported by the watcher
ChangeKind: TypeAlias = Literal["created", "modified", "deleted"]

# Client identifier on the HMR transport
ClientID: TypeAlias = str
