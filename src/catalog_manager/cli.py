"""Command line entry point: run the API server or seed the database."""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Sequence

import structlog
import uvicorn
from sqlalchemy.exc import SQLAlchemyError

from catalog_manager.config import Settings, get_settings
from catalog_manager.db.errors import StoreError
from catalog_manager.db.seed import seed_defaults
from catalog_manager.db.session import create_schema, dispose_engine, get_session, init_engine
from catalog_manager.logging import configure_logging

logger = structlog.get_logger()


def parse_bind_address(address: str) -> tuple[str, int]:
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"invalid bind address: {address!r} (expected host:port)")
    return host or "0.0.0.0", int(port)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="catalog-manager", description="Catalog Manager")
    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser("serve", help="Run the API server")
    serve.add_argument("--bind", help="host:port to listen on (default: settings.bind_address)")

    subparsers.add_parser("seed", help="Create the schema and seed default data")
    return parser


def serve_command(settings: Settings, bind: str | None = None) -> int:
    try:
        host, port = parse_bind_address(bind or settings.bind_address)
    except ValueError as exc:
        logger.error("invalid_bind_address", error=str(exc))
        return 1

    logger.info("server_starting", host=host, port=port)
    uvicorn.run("catalog_manager.api.main:app", host=host, port=port, log_config=None)
    logger.info("server_stopped")
    return 0


async def _seed(settings: Settings) -> None:
    init_engine(settings)
    try:
        await create_schema()
        async for session in get_session():
            await seed_defaults(session)
    finally:
        await dispose_engine()


def seed_command(settings: Settings) -> int:
    try:
        asyncio.run(_seed(settings))
    except (SQLAlchemyError, StoreError, OSError) as exc:
        logger.error("seed_failed", error=str(exc))
        return 1
    logger.info("seed_completed")
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_level, json=not settings.debug)

    if args.command == "serve":
        sys.exit(serve_command(settings, bind=args.bind))
    if args.command == "seed":
        sys.exit(seed_command(settings))

    parser.print_help()
    sys.exit(1)


if __name__ == "__main__":  # pragma: no cover
    main()
