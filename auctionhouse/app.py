"""Application wiring and the command that serves it."""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from flask import Flask
from pymongo.errors import PyMongoError

from auctionhouse import logger
from auctionhouse.auction_repository import AuctionRepository
from auctionhouse.auction_usecase import AuctionUseCase
from auctionhouse.bid_repository import BidRepository
from auctionhouse.bid_usecase import BidUseCase
from auctionhouse.controllers import create_app
from auctionhouse.database import connect_database
from auctionhouse.user_repository import UserRepository
from auctionhouse.user_usecase import UserUseCase

MONGODB_URL = "MONGODB_URL"
MONGODB_DB = "MONGODB_DB"


def build_app(database: Any) -> Flask:
    """Wire repositories and use cases over ``database`` into a web application."""
    auction_repository = AuctionRepository(database)
    bid_repository = BidRepository(database, auction_repository)
    user_repository = UserRepository(database)
    return create_app(
        AuctionUseCase(auction_repository, bid_repository),
        BidUseCase(bid_repository),
        UserUseCase(user_repository),
    )


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="auctionhouse", description="Run the auction server.")
    parser.add_argument("--env-file", default=".env", help="file of environment variables")
    parser.add_argument("--host", default="0.0.0.0", help="address to listen on")
    parser.add_argument("--port", type=int, default=8080, help="port to listen on")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Load settings, connect to the database and serve the API."""
    args = _parse_args(argv)

    env_file = Path(args.env_file)
    if not env_file.is_file():
        logger.error(
            "Error trying to load env variables",
            FileNotFoundError(f"no such file: {env_file}"),
        )
        return 1
    load_dotenv(env_file)

    try:
        database = connect_database(
            os.environ.get(MONGODB_URL, ""), os.environ.get(MONGODB_DB, "")
        )
    except (PyMongoError, ValueError) as exc:
        logger.error(str(exc), exc)
        return 1

    app = build_app(database)
    try:
        app.run(host=args.host, port=args.port)
    finally:
        app.extensions["auctionhouse"]["bid_use_case"].close()
    return 0