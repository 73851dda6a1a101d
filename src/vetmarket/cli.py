"""
Command-line entry point.

Usage:
    vetmarket init-db
    vetmarket create-admin --email admin@example.com --password secret
    vetmarket serve --host 0.0.0.0 --port 5000
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .database.connection import create_engine
from .database.session import SessionManager
from .exceptions import VetMarketException
from .models import Base
from .services.auth import AuthService
from .utils.config import AppSettings, LoggingConfigurator

logger = logging.getLogger(__name__)


async def init_db(settings: AppSettings) -> bool:
    """Create all tables on the configured database."""
    manager = SessionManager(create_engine(settings.database_url, echo=settings.db_echo))
    try:
        return await manager.initialize_database(Base.metadata)
    finally:
        await manager.close_all_sessions()


async def create_admin(
    settings: AppSettings, email: str, password: str, name: Optional[str] = None
) -> None:
    """Create an administrator account, or promote an existing account to admin."""
    manager = SessionManager(create_engine(settings.database_url, echo=settings.db_echo))
    try:
        async with manager.get_session() as session:
            user = await AuthService(session, settings).create_admin(email, password, name)
            print(f"Admin user ready: {user.email}")
    finally:
        await manager.close_all_sessions()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="vetmarket", description="Vetmarket management commands")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="Create database tables")

    admin_parser = subparsers.add_parser("create-admin", help="Create an admin account")
    admin_parser.add_argument("--email", required=True)
    admin_parser.add_argument("--password", required=True)
    admin_parser.add_argument("--name", default=None)

    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=5000)
    serve_parser.add_argument("--reload", action="store_true")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = AppSettings.from_environment()
    except VetMarketException as e:
        print(f"Configuration error: {e.message}", file=sys.stderr)
        return 1

    LoggingConfigurator.configure_basic_logging(level=settings.log_level)

    if args.command == "serve":
        import uvicorn

        uvicorn.run(
            "vetmarket.api.app:create_app",
            factory=True,
            host=args.host,
            port=args.port,
            reload=args.reload,
        )
        return 0

    try:
        if args.command == "init-db":
            if not asyncio.run(init_db(settings)):
                print("Database initialization failed", file=sys.stderr)
                return 1
            print("Database initialized")
        elif args.command == "create-admin":
            if len(args.password) < 6:
                print("Password must be at least 6 characters", file=sys.stderr)
                return 1
            asyncio.run(create_admin(settings, args.email, args.password, args.name))
    except VetMarketException as e:
        logger.error(f"{args.command} failed: {e.message}")
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
