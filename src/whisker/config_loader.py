"""Load WhiskerConfig from whisker.yaml / whisker.toml if present.

Merges file config with keyword overrides. Overrides take precedence.
"""

from __future__ import annotations

import importlib
import importlib.util
import sys
import tomllib
from collections.abc import Collection
from pathlib import Path
from typing import Any

from whisker._errors import ConfigError
from whisker.config import WhiskerConfig

CONFIG_FILES = ("whisker.yaml", "whisker.yml", "whisker.toml")

_KNOWN_KEYS = frozenset({"plugins", "client_dir", "env_suffix", "html_suffix", "ignore_dirs"})


def load_config(root: Path, /, **overrides: object) -> WhiskerConfig:
    """Load WhiskerConfig from root, optionally merging a whisker config file.

    Looks for whisker.yaml, whisker.yml, or whisker.toml in root. If found,
    its path becomes ``config_path`` and its values are merged with
    overrides. The root itself is positional and cannot be overridden.
    """
    if "root" in overrides:
        msg = "root cannot be overridden; pass the project root positionally"
        raise ConfigError(msg)
    root = root.resolve()
    config_path = find_config_file(root)
    file_config = _read_config_file(config_path) if config_path is not None else {}
    merged: dict[str, Any] = {**file_config, **overrides}

    if "plugins" in merged:
        merged["plugins"] = tuple(
            _resolve_plugin(p, root) for p in _as_list("plugins", merged["plugins"])
        )
    if "client_dir" in merged and not isinstance(merged["client_dir"], Path):
        merged["client_dir"] = root / str(merged["client_dir"])
    if "ignore_dirs" in merged:
        merged["ignore_dirs"] = frozenset(_as_list("ignore_dirs", merged["ignore_dirs"]))
    merged.setdefault("config_path", config_path)
    return WhiskerConfig(root=root, **merged)


def find_config_file(root: Path) -> Path | None:
    """Return the first whisker config file present in root, if any."""
    for name in CONFIG_FILES:
        path = root / name
        if path.is_file():
            return path
    return None


def _as_list(key: str, value: object) -> Collection[Any]:
    if not isinstance(value, list | tuple | set | frozenset):
        msg = f"{key}: expected a list, got {type(value).__name__}"
        raise ConfigError(msg)
    return value


def _read_config_file(path: Path) -> dict[str, object]:
    if path.suffix == ".toml":
        try:
            data = tomllib.loads(path.read_text())
        except tomllib.TOMLDecodeError as exc:
            msg = f"{path.name}: {exc}"
            raise ConfigError(msg) from exc
    else:
        import yaml

        try:
            data = yaml.safe_load(path.read_text()) or {}
        except yaml.YAMLError as exc:
            msg = f"{path.name}: {exc}"
            raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"{path.name}: expected a mapping at the top level"
        raise ConfigError(msg)
    return _flatten_whisker_section(data)


def _flatten_whisker_section(data: dict[str, object]) -> dict[str, object]:
    """Extract whisker.* keys into top-level config."""
    result: dict[str, object] = {}
    section = data.get("whisker")
    if isinstance(section, dict):
        result.update(section)
    for k, v in data.items():
        if k != "whisker" and k in _KNOWN_KEYS:
            result[k] = v
    unknown = set(result) - _KNOWN_KEYS
    if unknown:
        msg = f"unknown config keys: {', '.join(sorted(unknown))}"
        raise ConfigError(msg)
    return result


def _resolve_plugin(ref: object, root: Path) -> object:
    """Resolve a ``module:attr`` plugin reference.

    The module is taken from ``root/<module>.py`` when that file exists,
    otherwise imported by name. Calling the attribute builds the plugin
    when it is a class or factory; plain objects are used as-is.
    Non-string entries are assumed to be plugin objects already.
    """
    if not isinstance(ref, str):
        return ref
    module_part, _, attr = ref.partition(":")
    if not module_part or not attr:
        msg = f"plugin {ref!r}: expected 'module:attr'"
        raise ConfigError(msg)

    py_file = root / f"{module_part}.py"
    if py_file.is_file():
        module_name = f"whisker_plugin_{module_part}"
        spec_obj = importlib.util.spec_from_file_location(module_name, py_file)
        if spec_obj is None or spec_obj.loader is None:
            msg = f"plugin {ref!r}: failed to load {py_file}"
            raise ConfigError(msg)
        module = importlib.util.module_from_spec(spec_obj)
        sys.modules[module_name] = module
        spec_obj.loader.exec_module(module)
    else:
        try:
            module = importlib.import_module(module_part)
        except ImportError as exc:
            msg = f"plugin {ref!r}: {exc}"
            raise ConfigError(msg) from exc

    obj = getattr(module, attr, None)
    if obj is None:
        msg = f"plugin {ref!r}: {attr} not found"
        raise ConfigError(msg)
    if isinstance(obj, type) or (callable(obj) and not hasattr(obj, "handle_hot_update")):
        return obj()
    return obj
