"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from real filesystem state and a
repository fixture parametrised over every storage backend.
"""

from __future__ import annotations

import logging
from unittest.mock import patch

import mongomock
import pytest

from todopro_core.adapters.active_record import ActiveRecordTodoRepository
from todopro_core.adapters.in_memory import InMemoryTodoRepository
from todopro_core.adapters.mongo import MongoTodoRepository
from todopro_core.adapters.sqlalchemy_orm import SqlAlchemyTodoRepository
from todopro_core.adapters.sqlite import SqliteTodoRepository
from todopro_core.models.config_models import AppConfig, StorageContext

BACKENDS = ["memory", "sqlite", "sqlalchemy", "peewee", "mongodb"]


# ---------------------------------------------------------------------------
# Logging isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_logger(tmp_path_factory):
    """Send application logs to a temporary directory for every test."""
    import todopro_core.utils.logger as logger_mod

    log_dir = tmp_path_factory.mktemp("logs")
    logger_mod._logger = None
    logging.getLogger("todopro_core").handlers.clear()
    with patch("todopro_core.utils.logger.user_log_dir", return_value=str(log_dir)):
        yield log_dir
    logging.getLogger("todopro_core").handlers.clear()
    logger_mod._logger = None


# ---------------------------------------------------------------------------
# Repositories
# ---------------------------------------------------------------------------


def make_repository(backend: str, identity_factory=None):
    """Build a fresh, empty repository for ``backend``."""
    if backend == "memory":
        return InMemoryTodoRepository(identity_factory)
    if backend == "sqlite":
        return SqliteTodoRepository(db_path=":memory:", identity_factory=identity_factory)
    if backend == "sqlalchemy":
        return SqlAlchemyTodoRepository(identity_factory=identity_factory)
    if backend == "peewee":
        return ActiveRecordTodoRepository(identity_factory=identity_factory)
    if backend == "mongodb":
        client = mongomock.MongoClient(tz_aware=True)
        return MongoTodoRepository(
            client["todopro_test"]["todos"], identity_factory=identity_factory
        )
    raise ValueError(backend)


@pytest.fixture(params=BACKENDS)
def build_repository(request):
    """Builder for the parametrised backend that accepts an identity factory."""
    built = []

    def build(identity_factory=None):
        repo = make_repository(request.param, identity_factory)
        built.append(repo)
        return repo

    yield build
    for repo in built:
        repo.close()


@pytest.fixture(params=BACKENDS)
def repository(request):
    """A fresh repository for each storage backend."""
    repo = make_repository(request.param)
    yield repo
    repo.close()


# ---------------------------------------------------------------------------
# Config isolation helpers
# ---------------------------------------------------------------------------


def _make_memory_config() -> AppConfig:
    ctx = StorageContext(name="test", backend="memory")
    return AppConfig(current_context_name="test", contexts=[ctx])


@pytest.fixture()
def tmp_config(tmp_path, monkeypatch):
    """Provide a real ConfigService backed by a temporary directory.

    Patches platform dirs so config/data files land in *tmp_path* only.
    Also clears the lru_cache so each test gets a fresh service instance.
    """
    from todopro_core.services.config_service import CONTEXT_ENV_VAR, get_config_service

    monkeypatch.delenv(CONTEXT_ENV_VAR, raising=False)
    tmpdir = str(tmp_path)
    get_config_service.cache_clear()
    with patch("todopro_core.services.config_service.user_config_dir", return_value=tmpdir):
        with patch("todopro_core.services.config_service.user_data_dir", return_value=tmpdir):
            from todopro_core.services.config_service import ConfigService

            svc = ConfigService()
            yield svc
    get_config_service.cache_clear()


@pytest.fixture()
def memory_config_service(tmp_path, monkeypatch):
    """A real ConfigService whose only context is in-memory storage.

    ``get_config_service`` is patched to return it, so CLI commands run
    against a private in-memory repository.
    """
    from todopro_core.services.config_service import (
        CONTEXT_ENV_VAR,
        ConfigService,
        get_config_service,
    )

    monkeypatch.delenv(CONTEXT_ENV_VAR, raising=False)
    get_config_service.cache_clear()
    svc = ConfigService(config_dir=tmp_path / "config", data_dir=tmp_path / "data")
    svc._config = _make_memory_config()
    svc.save_config()
    with patch(
        "todopro_core.services.config_service.get_config_service", return_value=svc
    ):
        with patch("todopro_core.commands.contexts.get_config_service", return_value=svc):
            yield svc
    get_config_service.cache_clear()
