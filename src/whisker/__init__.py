"""Whisker — hot module replacement for module-graph dev servers.

Given one changed file, Whisker decides which loaded modules can absorb
the change in place, which changes force a full page reload, and sends
the minimal set of update messages to connected browsers.

Quick start::

    import whisker

    server = whisker.create_server("my-app/")
    await server.run()            # watch files, push HMR payloads

Building blocks::

    whisker.handle_hmr_update(file, server)   # one change -> one payload
    whisker.scan_accepted_deps(source)        # lex import.meta.hot.accept()

"""

__version__ = "0.1.0-dev"
__all__ = [
    "DevServer",
    "ModuleGraph",
    "ModuleNode",
    "WhiskerConfig",
    "__version__",
    "create_server",
    "handle_hmr_update",
    "handle_pruned_modules",
    "scan_accepted_deps",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import whisker`` fast (watchfiles is only loaded when the
    server runtime is used).
    """
    if name == "WhiskerConfig":
        from whisker.config import WhiskerConfig

        return WhiskerConfig

    if name in ("ModuleGraph", "ModuleNode"):
        from whisker import graph

        return getattr(graph, name)

    if name in ("DevServer", "create_server"):
        from whisker.server import dev

        return getattr(dev, name)

    if name in ("handle_hmr_update", "handle_pruned_modules"):
        from whisker.hmr import handler

        return getattr(handler, name)

    if name == "scan_accepted_deps":
        from whisker.hmr.lexer import scan_accepted_deps

        return scan_accepted_deps

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
