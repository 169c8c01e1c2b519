"""Command line entry point.

Usage:
    sli-reporting serve [--host HOST] [--port PORT]
    sli-reporting db init [--database-url URL]

Everything not given on the command line is read from the environment
(see src.infrastructure.config.settings).
"""

import argparse
import asyncio
from typing import Sequence

import uvicorn
from sqlalchemy.engine import make_url

from src.infrastructure.config.settings import Settings, get_settings
from src.infrastructure.database.config import create_async_db_engine, create_tables
from src.infrastructure.observability.logging import configure_logging, get_logger

logger = get_logger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sli-reporting",
        description="SLI error budget reporting with planned downtime windows",
    )
    subparsers = parser.add_subparsers(dest="command")

    serve_parser = subparsers.add_parser("serve", help="Serve API endpoints")
    serve_parser.add_argument("--host", default=None, help="Host to bind (API_HOST)")
    serve_parser.add_argument("--port", type=int, default=None, help="Port to bind (API_PORT)")

    db_parser = subparsers.add_parser("db", help="Database management")
    db_subparsers = db_parser.add_subparsers(dest="db_command")
    init_parser = db_subparsers.add_parser("init", help="Create the database tables")
    init_parser.add_argument(
        "--database-url", default=None, help="SQLAlchemy async URL (DATABASE_URL)"
    )

    return parser


async def init_database(database_url: str) -> None:
    """Create all tables in the configured database."""
    engine = create_async_db_engine(database_url)
    try:
        await create_tables(engine)
    finally:
        await engine.dispose()


def serve(settings: Settings) -> None:
    """Run the API server until interrupted."""
    from src.infrastructure.api.main import create_app

    logger.info("Starting API server", host=settings.api.host, port=settings.api.port)
    uvicorn.run(
        create_app(settings),
        host=settings.api.host,
        port=settings.api.port,
        log_config=None,  # Keep the structlog handler configured above
    )


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.observability)

    if args.command == "serve":
        overrides = {
            key: value
            for key, value in (("host", args.host), ("port", args.port))
            if value is not None
        }
        serve(settings.model_copy(update={"api": settings.api.model_copy(update=overrides)}))
        return 0

    if args.command == "db" and args.db_command == "init":
        database_url = args.database_url or settings.database.url
        asyncio.run(init_database(database_url))
        logger.info("Database initialized", database_url=_redact_url(database_url))
        return 0

    parser.print_help()
    return 1


def _redact_url(database_url: str) -> str:
    return make_url(database_url).render_as_string(hide_password=True)


if __name__ == "__main__":  # pragma: no cover - exercised via console script
    raise SystemExit(main())
