"""Unit tests for services/config_service.py.

Covers first-run initialisation, persistence, context management and the
lru-cached factory helpers. Uses a real ConfigService pointed at tmp_path.
"""

from __future__ import annotations

import json
import stat
from unittest.mock import patch

import pytest

from todopro_core.adapters.sqlite.connection import DatabaseConnection
from todopro_core.models.config_models import AppConfig, StorageContext
from todopro_core.models.storage_strategy import (
    MemoryStorageStrategy,
    SqliteStorageStrategy,
)
from todopro_core.services.config_service import (
    CONTEXT_ENV_VAR,
    ConfigService,
    get_config_service,
    get_storage_strategy_context,
)


@pytest.fixture(autouse=True)
def reset_connections():
    yield
    DatabaseConnection.close_all()


# ---------------------------------------------------------------------------
# First run
# ---------------------------------------------------------------------------


class TestDefaultConfig:
    def test_directories_created(self, tmp_path):
        svc = ConfigService(config_dir=tmp_path / "cfg", data_dir=tmp_path / "data")
        assert (tmp_path / "cfg").is_dir()
        assert (tmp_path / "data").is_dir()
        assert svc.config_path == tmp_path / "cfg" / "config.json"

    def test_first_load_writes_default(self, tmp_config):
        config = tmp_config.config

        assert tmp_config.config_path.exists()
        assert config.current_context_name == "local"
        assert [ctx.name for ctx in config.contexts] == ["local", "scratch"]

    def test_default_local_context_is_sqlite_in_data_dir(self, tmp_config):
        local = tmp_config.config.get_context("local")
        assert local.backend == "sqlite"
        assert local.source == str(tmp_config.data_dir / "todos.db")

    def test_config_file_owner_only(self, tmp_config):
        _ = tmp_config.config
        assert stat.S_IMODE(tmp_config.config_path.stat().st_mode) == 0o600

    def test_platformdirs_used(self, tmp_config, tmp_path):
        assert tmp_config.config_dir == tmp_path
        assert tmp_config.data_dir == tmp_path


# ---------------------------------------------------------------------------
# Load / save
# ---------------------------------------------------------------------------


class TestLoadSave:
    def test_round_trip(self, tmp_path):
        svc = ConfigService(config_dir=tmp_path, data_dir=tmp_path)
        svc._config = AppConfig(
            current_context_name="mem",
            contexts=[StorageContext(name="mem", backend="memory")],
        )
        svc.save_config()

        reloaded = ConfigService(config_dir=tmp_path, data_dir=tmp_path).config
        assert reloaded.current_context_name == "mem"
        assert reloaded.contexts[0].backend == "memory"

    def test_file_is_json(self, tmp_config):
        _ = tmp_config.config
        data = json.loads(tmp_config.config_path.read_text())
        assert data["current_context_name"] == "local"

    def test_corrupt_file_raises(self, tmp_path):
        (tmp_path / "config.json").write_text("{not json")
        svc = ConfigService(config_dir=tmp_path, data_dir=tmp_path)
        with pytest.raises(RuntimeError, match="Failed to load config"):
            svc.load_config()

    def test_save_without_config_raises(self, tmp_path):
        svc = ConfigService(config_dir=tmp_path, data_dir=tmp_path)
        with pytest.raises(RuntimeError, match="No configuration to save"):
            svc.save_config()

    def test_reset_config(self, tmp_config):
        tmp_config.add_context(StorageContext(name="extra", backend="memory"))
        tmp_config.reset_config()
        assert [ctx.name for ctx in tmp_config.config.contexts] == ["local", "scratch"]


# ---------------------------------------------------------------------------
# Contexts
# ---------------------------------------------------------------------------


class TestContexts:
    def test_list_contexts(self, tmp_config):
        assert len(tmp_config.list_contexts()) == 2

    def test_use_context_persists(self, tmp_config):
        tmp_config.use_context("scratch")
        reloaded = ConfigService(
            config_dir=tmp_config.config_dir, data_dir=tmp_config.data_dir
        )
        assert reloaded.get_current_context().name == "scratch"

    def test_use_unknown_context(self, tmp_config):
        with pytest.raises(ValueError, match="not found"):
            tmp_config.use_context("nope")

    def test_use_context_rebuilds_strategy(self, tmp_config):
        first = tmp_config.storage_strategy_context
        assert isinstance(first.strategy, SqliteStorageStrategy)

        tmp_config.use_context("scratch")

        second = tmp_config.storage_strategy_context
        assert second is not first
        assert isinstance(second.strategy, MemoryStorageStrategy)

    def test_add_and_remove(self, tmp_config):
        tmp_config.add_context(StorageContext(name="orm", backend="sqlalchemy", source="sqlite://"))
        assert tmp_config.config.get_context("orm").backend == "sqlalchemy"

        tmp_config.remove_context("orm")
        with pytest.raises(ValueError):
            tmp_config.config.get_context("orm")

    def test_add_duplicate(self, tmp_config):
        with pytest.raises(ValueError, match="already exists"):
            tmp_config.add_context(StorageContext(name="scratch", backend="memory"))

    def test_remove_active(self, tmp_config):
        with pytest.raises(ValueError, match="active"):
            tmp_config.remove_context("local")

    def test_env_override(self, tmp_config, monkeypatch):
        monkeypatch.setenv(CONTEXT_ENV_VAR, "scratch")
        assert tmp_config.get_current_context().name == "scratch"
        # The stored choice is untouched
        assert tmp_config.config.current_context_name == "local"

    def test_env_override_unknown(self, tmp_config, monkeypatch):
        monkeypatch.setenv(CONTEXT_ENV_VAR, "missing")
        with pytest.raises(ValueError, match="not found"):
            tmp_config.get_current_context()


# ---------------------------------------------------------------------------
# Factory helpers
# ---------------------------------------------------------------------------


class TestFactories:
    def test_get_config_service_cached(self, tmp_path):
        get_config_service.cache_clear()
        with patch("todopro_core.services.config_service.user_config_dir", return_value=str(tmp_path)):
            with patch("todopro_core.services.config_service.user_data_dir", return_value=str(tmp_path)):
                assert get_config_service() is get_config_service()
        get_config_service.cache_clear()

    def test_get_storage_strategy_context(self, memory_config_service):
        context = get_storage_strategy_context()
        assert context.storage_type == "memory"
        assert context is memory_config_service.storage_strategy_context
