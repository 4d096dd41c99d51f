"""CLI tests for the contexts sub-commands."""

from __future__ import annotations

from typer.testing import CliRunner

from todopro_core.main import app

runner = CliRunner()


class TestContextsCommands:
    def test_list_marks_current(self, memory_config_service):
        result = runner.invoke(app, ["contexts", "list"])
        assert result.exit_code == 0
        assert "test" in result.output
        assert "*" in result.output

    def test_add_and_use(self, memory_config_service, tmp_path):
        db = str(tmp_path / "todos.db")
        result = runner.invoke(
            app, ["contexts", "add", "orm", "--backend", "peewee", "--source", db]
        )
        assert result.exit_code == 0
        assert "Added context 'orm'" in result.output

        result = runner.invoke(app, ["contexts", "use", "orm"])
        assert result.exit_code == 0
        assert memory_config_service.get_current_context().name == "orm"
        assert memory_config_service.storage_strategy_context.storage_type == "peewee"

    def test_add_unknown_backend(self, memory_config_service):
        result = runner.invoke(app, ["contexts", "add", "x", "--backend", "redis"])
        assert result.exit_code == 1
        assert "Unknown backend" in result.output

    def test_add_without_source(self, memory_config_service):
        result = runner.invoke(app, ["contexts", "add", "x", "--backend", "sqlite"])
        assert result.exit_code == 1
        assert "source is required" in result.output

    def test_add_duplicate(self, memory_config_service):
        result = runner.invoke(app, ["contexts", "add", "test", "--backend", "memory"])
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_use_unknown(self, memory_config_service):
        result = runner.invoke(app, ["contexts", "use", "missing"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_remove(self, memory_config_service):
        runner.invoke(app, ["contexts", "add", "spare", "--backend", "memory"])
        result = runner.invoke(app, ["contexts", "remove", "spare"])
        assert result.exit_code == 0
        assert [c.name for c in memory_config_service.list_contexts()] == ["test"]

    def test_remove_active(self, memory_config_service):
        result = runner.invoke(app, ["contexts", "remove", "test"])
        assert result.exit_code == 1
        assert "cannot be removed" in result.output
