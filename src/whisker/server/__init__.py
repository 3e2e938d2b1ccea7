"""Dev server runtime — transport, file watching, and the change loop."""

from whisker.server.broadcaster import Broadcaster, ClientConnection
from whisker.server.dev import DevServer, create_server
from whisker.server.watcher import ChangeEvent, FileWatcher

__all__ = [
    "Broadcaster",
    "ChangeEvent",
    "ClientConnection",
    "DevServer",
    "FileWatcher",
    "create_server",
]
