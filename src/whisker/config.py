"""Whisker configuration.

WhiskerConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# Directory holding the browser-side HMR runtime served by the dev server.
# Files under it cannot be hot updated; a change always reloads the page.
CLIENT_DIR = Path(__file__).resolve().parent / "client"


@dataclass(frozen=True, slots=True)
class WhiskerConfig:
    """Configuration for a Whisker dev server.

    Attributes:
        root: Project root directory. Always resolved to an absolute path on
              construction.
        config_path: The config file this configuration was loaded from, or
            None when built in code. Changes to it are never hot updated.
        plugins: Plugins in registration order. Any object exposing an
            optional ``handle_hot_update(file, modules, server)`` hook.
        client_dir: Directory of the client runtime; changes under it force
            a full reload.
        env_suffix: Suffix identifying environment files (ignored on change).
        html_suffix: Suffix of HTML documents (always fully reloaded).
        ignore_dirs: Directory names the file watcher never reports from.

    """

    root: Path = field(default_factory=Path.cwd)
    config_path: Path | None = None
    plugins: tuple[Any, ...] = ()
    client_dir: Path = CLIENT_DIR
    env_suffix: str = ".env"
    html_suffix: str = ".html"
    ignore_dirs: frozenset[str] = frozenset({".git", "node_modules", "__pycache__"})

    def __post_init__(self) -> None:
        # Resolve root to absolute so that watchfiles (which returns
        # absolute paths) can be compared against it.
        if not self.root.is_absolute():
            object.__setattr__(self, "root", self.root.resolve())
        if self.config_path is not None and not self.config_path.is_absolute():
            object.__setattr__(self, "config_path", self.root / self.config_path)

    def is_config_file(self, file: Path) -> bool:
        """Whether *file* is the config file this configuration came from."""
        return self.config_path is not None and file == self.config_path

    def is_env_file(self, file: Path) -> bool:
        """Whether *file* is an environment file."""
        return str(file).endswith(self.env_suffix)

    def requires_full_reload(self, file: Path) -> bool:
        """Whether *file* can never be hot updated (HTML or client runtime)."""
        return str(file).endswith(self.html_suffix) or file.is_relative_to(self.client_dir)
