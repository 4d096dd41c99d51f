"""Configuration service for managing TodoPro core configuration.

This module provides the ConfigService class, the single source of truth for
configuration. It handles:

- Loading and saving config.json
- Context management (list, add, remove, switch)
- Config file initialization with a local SQLite context
- Building the storage strategy for the active context
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir

from todopro_core.models.config_models import AppConfig, StorageContext
from todopro_core.models.storage_strategy import (
    StorageStrategyContext,
    create_storage_strategy,
)
from todopro_core.utils.logger import get_logger

CONTEXT_ENV_VAR = "TODOPRO_CORE_CONTEXT"


class ConfigService:
    """Service for managing application configuration.

    Loads and persists ``AppConfig`` and resolves the active storage context.
    The ``TODOPRO_CORE_CONTEXT`` environment variable overrides the context
    stored in the file without changing it.
    """

    def __init__(self, config_dir: str | Path | None = None, data_dir: str | Path | None = None):
        """Initialize the config service.

        Args:
            config_dir: Directory holding config.json (default: platformdirs)
            data_dir: Directory for local databases (default: platformdirs)
        """
        self.config_dir = Path(config_dir or user_config_dir("todopro_core"))
        self.config_path = self.config_dir / "config.json"
        self.data_dir = Path(data_dir or user_data_dir("todopro_core"))

        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self._config: AppConfig | None = None
        self._storage_strategy_context: StorageStrategyContext | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    @property
    def storage_strategy_context(self) -> StorageStrategyContext:
        """Get the StorageStrategyContext for the active context, building it once."""
        if self._storage_strategy_context is None:
            context = self.get_current_context()
            get_logger("config").info(
                "using context '%s' (%s)", context.name, context.backend
            )
            self._storage_strategy_context = StorageStrategyContext(
                create_storage_strategy(context)
            )
        return self._storage_strategy_context

    def load_config(self) -> AppConfig:
        """Load configuration from storage."""
        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            # First run
            self._config = self.create_default_config()
        except Exception as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        return self._config

    def save_config(self):
        """Save the current configuration to storage."""
        if self._config is None:
            raise RuntimeError("No configuration to save")

        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self._config.model_dump_json(indent=4))
            self.config_path.chmod(0o600)
        except Exception as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def reset_config(self):
        """Reset configuration to defaults."""
        self._config = None
        self._storage_strategy_context = None
        if self.config_path.exists():
            self.config_path.unlink()
        self.create_default_config()

    def create_default_config(self) -> AppConfig:
        """Create a default configuration with a local SQLite context."""
        local_context = StorageContext(
            name="local",
            backend="sqlite",
            source=str(self.data_dir / "todos.db"),
            description="Local SQLite storage",
        )
        scratch_context = StorageContext(
            name="scratch",
            backend="memory",
            description="In-memory storage, discarded on exit",
        )

        self._config = AppConfig(
            current_context_name=local_context.name,
            contexts=[local_context, scratch_context],
        )
        self.save_config()
        get_logger("config").info("created default config at %s", self.config_path)
        return self._config

    def list_contexts(self) -> list[StorageContext]:
        """List all available contexts."""
        return self.config.contexts

    def get_current_context(self) -> StorageContext:
        """Get the currently active context.

        Raises:
            ValueError: If the active context name is not configured
        """
        override = os.environ.get(CONTEXT_ENV_VAR)
        if override:
            return self.config.get_context(override)
        return self.config.get_current_context()

    def use_context(self, name: str) -> StorageContext:
        """Set the current context by name."""
        context = self.config.get_context(name)
        self.config.current_context_name = context.name
        self.save_config()
        self._storage_strategy_context = None
        return context

    def add_context(self, context: StorageContext):
        """Add a new context to the configuration."""
        self.config.add_context(context)
        self.save_config()

    def remove_context(self, name: str):
        """Remove a context from the configuration."""
        self.config.remove_context(name)
        self.save_config()


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get a cached ConfigService instance."""
    config_service = ConfigService()
    config_service.load_config()
    return config_service


def get_storage_strategy_context() -> StorageStrategyContext:
    """Get a StorageStrategyContext based on the current configuration."""
    return get_config_service().storage_strategy_context
