"""Tests for whisker.config."""

from pathlib import Path

import pytest

from whisker.config import CLIENT_DIR, WhiskerConfig


class TestWhiskerConfig:
    """WhiskerConfig — frozen dataclass with sensible defaults."""

    def test_defaults(self) -> None:
        config = WhiskerConfig()
        assert config.config_path is None
        assert config.plugins == ()
        assert config.client_dir == CLIENT_DIR
        assert config.env_suffix == ".env"
        assert config.html_suffix == ".html"
        assert "node_modules" in config.ignore_dirs

    def test_frozen(self) -> None:
        config = WhiskerConfig()
        with pytest.raises(AttributeError):
            config.env_suffix = ".environment"  # type: ignore[misc]

    def test_relative_root_resolved(self) -> None:
        assert WhiskerConfig(root=Path(".")).root.is_absolute()

    def test_relative_config_path_resolved_from_root(self, tmp_path: Path) -> None:
        config = WhiskerConfig(root=tmp_path, config_path=Path("whisker.yaml"))
        assert config.config_path == tmp_path / "whisker.yaml"


class TestClassification:
    def test_is_config_file(self, tmp_path: Path) -> None:
        config = WhiskerConfig(root=tmp_path, config_path=tmp_path / "whisker.yaml")
        assert config.is_config_file(tmp_path / "whisker.yaml") is True
        assert config.is_config_file(tmp_path / "other.yaml") is False

    def test_no_config_file(self, tmp_path: Path) -> None:
        assert WhiskerConfig(root=tmp_path).is_config_file(tmp_path / "whisker.yaml") is False

    def test_is_env_file(self, tmp_path: Path) -> None:
        config = WhiskerConfig(root=tmp_path)
        assert config.is_env_file(tmp_path / ".env") is True
        assert config.is_env_file(tmp_path / "src" / "env.js") is False

    def test_requires_full_reload(self, tmp_path: Path) -> None:
        config = WhiskerConfig(root=tmp_path, client_dir=tmp_path / "client")
        assert config.requires_full_reload(tmp_path / "index.html") is True
        assert config.requires_full_reload(tmp_path / "client" / "overlay.js") is True
        assert config.requires_full_reload(tmp_path / "src" / "main.js") is False
