"""
Tests for the management command line.
"""

import asyncio

import pytest
from sqlalchemy import select

from vetmarket.cli import build_parser, main
from vetmarket.database.connection import create_engine
from vetmarket.database.session import SessionManager
from vetmarket.models import User, UserRole
from vetmarket.utils.security import verify_password


@pytest.fixture
def database_url(tmp_path, monkeypatch):
    url = f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    monkeypatch.delenv("APP_ENV", raising=False)
    return url


async def fetch_user(url, email):
    manager = SessionManager(create_engine(url))
    try:
        async with manager.get_session() as session:
            return await session.scalar(select(User).where(User.email == email))
    finally:
        await manager.close_all_sessions()


class TestParser:
    def test_serve_defaults(self):
        args = build_parser().parse_args(["serve"])

        assert (args.host, args.port, args.reload) == ("127.0.0.1", 5000, False)

    def test_create_admin_requires_credentials(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["create-admin", "--email", "a@example.com"])

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestCommands:
    def test_init_db_and_create_admin(self, database_url, capsys):
        assert main(["init-db"]) == 0
        assert "Database initialized" in capsys.readouterr().out

        assert main(
            ["create-admin", "--email", "Root@Example.com", "--password", "secret123"]
        ) == 0
        assert "Admin user ready: root@example.com" in capsys.readouterr().out

        user = asyncio.run(fetch_user(database_url, "root@example.com"))
        assert user.role == UserRole.ADMIN
        assert user.is_verified is True
        assert verify_password("secret123", user.password_hash)

    def test_create_admin_promotes_existing_account(self, database_url):
        assert main(["init-db"]) == 0
        assert main(["create-admin", "--email", "boss@example.com", "--password", "first-pass"]) == 0
        assert main(["create-admin", "--email", "boss@example.com", "--password", "second-pass"]) == 0

        user = asyncio.run(fetch_user(database_url, "boss@example.com"))
        assert verify_password("second-pass", user.password_hash)

    def test_short_password(self, database_url, capsys):
        assert main(["create-admin", "--email", "a@example.com", "--password", "123"]) == 1
        assert "at least 6 characters" in capsys.readouterr().err

    def test_invalid_email(self, database_url, capsys):
        main(["init-db"])

        assert main(["create-admin", "--email", "nope", "--password", "secret123"]) == 1
        assert "Error: " in capsys.readouterr().err

    def test_bad_configuration(self, monkeypatch, capsys):
        monkeypatch.setenv("DATABASE_URL", "mysql://localhost/db")

        assert main(["init-db"]) == 1
        assert "Configuration error" in capsys.readouterr().err

    def test_serve_runs_uvicorn(self, database_url, monkeypatch):
        calls = {}

        def fake_run(app, **kwargs):
            calls["app"] = app
            calls.update(kwargs)

        monkeypatch.setattr("uvicorn.run", fake_run)

        assert main(["serve", "--port", "8080"]) == 0
        assert calls["app"] == "vetmarket.api.app:create_app"
        assert calls["factory"] is True
        assert calls["port"] == 8080
