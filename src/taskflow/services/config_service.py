"""Configuration service for TaskFlow.

This module provides the ConfigService class, the single source of truth for
configuration. It handles:

- Loading and saving config.json
- Config file initialization with defaults on first run
- Resolving where the board snapshot lives
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir

from taskflow.models.config_models import AppConfig

APP_NAME = "taskflow"


class ConfigService:
    """Load, save and reset the application configuration."""

    def __init__(self):
        self.config_dir = Path(user_config_dir(APP_NAME))
        self.config_path = self.config_dir / "config.json"
        self.data_dir = Path(user_data_dir(APP_NAME))

        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> AppConfig:
        """Load configuration from disk, creating defaults on first run."""
        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            # Expected on first run
            self._config = AppConfig()
            self.save_config()
        except Exception as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        return self._config

    def save_config(self):
        """Save the current configuration to disk."""
        if self._config is None:
            raise RuntimeError("No configuration to save")

        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self._config.model_dump_json(indent=4))
            self.config_path.chmod(0o600)
        except Exception as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def update_config(self, config: AppConfig) -> AppConfig:
        """Replace the configuration and persist it."""
        self._config = config
        self.save_config()
        return config

    def reset_config(self) -> AppConfig:
        """Reset configuration to defaults."""
        if self.config_path.exists():
            self.config_path.unlink()
        self._config = AppConfig()
        self.save_config()
        return self._config

    @property
    def snapshot_path(self) -> Path:
        """Board snapshot file: the configured path or ``<data dir>/boards.json``."""
        configured = self.config.storage.snapshot_path
        if configured:
            return Path(configured).expanduser()
        return self.data_dir / "boards.json"


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get a cached ConfigService instance."""
    config_service = ConfigService()
    config_service.load_config()
    return config_service
