"""Unit tests for the command line entry point."""

import sqlite3

import pytest

from src.infrastructure import cli
from src.infrastructure.config import settings as settings_module


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Load settings from the patched environment on every test."""
    monkeypatch.setenv("OTEL_LOG_JSON_FORMAT", "false")
    monkeypatch.setattr(settings_module, "_settings", None)


class TestCli:
    """Tests for cli.main."""

    def test_no_command_prints_help(self, capsys):
        assert cli.main([]) == 1

        assert "usage: sli-reporting" in capsys.readouterr().out

    def test_db_without_subcommand_prints_help(self, capsys):
        assert cli.main(["db"]) == 1

    def test_db_init_creates_tables(self, tmp_path):
        db_file = tmp_path / "data.db"

        exit_code = cli.main(["db", "init", "--database-url", f"sqlite+aiosqlite:///{db_file}"])

        assert exit_code == 0
        with sqlite3.connect(db_file) as conn:
            tables = {
                row[0]
                for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
            }
        assert "downtime_windows" in tables

    def test_db_init_is_idempotent(self, tmp_path):
        url = f"sqlite+aiosqlite:///{tmp_path / 'data.db'}"

        assert cli.main(["db", "init", "--database-url", url]) == 0
        assert cli.main(["db", "init", "--database-url", url]) == 0

    def test_serve_uses_settings_and_overrides(self, monkeypatch):
        calls = {}

        def fake_run(app, host, port, log_config):
            calls.update(app=app, host=host, port=port)

        monkeypatch.setattr(cli.uvicorn, "run", fake_run)
        monkeypatch.setenv("API_PORT", "9999")

        assert cli.main(["serve", "--host", "127.0.0.1"]) == 0

        assert calls["host"] == "127.0.0.1"
        assert calls["port"] == 9999
        assert calls["app"].title

    def test_serve_overrides_leave_shared_settings_untouched(self, monkeypatch):
        calls = {}

        def fake_run(app, host, port, log_config):
            calls.update(host=host, port=port)

        monkeypatch.setattr(cli.uvicorn, "run", fake_run)
        monkeypatch.delenv("API_HOST", raising=False)
        monkeypatch.delenv("API_PORT", raising=False)

        assert cli.main(["serve", "--host", "127.0.0.1", "--port", "9000"]) == 0

        assert (calls["host"], calls["port"]) == ("127.0.0.1", 9000)
        shared = settings_module.get_settings()
        assert (shared.api.host, shared.api.port) == ("0.0.0.0", 8080)

    def test_redact_url(self):
        assert "hunter2" not in cli._redact_url(
            "postgresql+asyncpg://sli:hunter2@db:5432/sli"
        )
