"""Connection to the MongoDB database."""

from __future__ import annotations

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from auctionhouse import logger


def connect_database(url: str, name: str) -> Database:
    """Connect to MongoDB at ``url``, check the server answers, and return database ``name``.

    Raises PyMongoError when the connection or the ping fails.
    """
    try:
        client: MongoClient = MongoClient(url)
    except PyMongoError as exc:
        logger.error("Error trying to connect to mongodb database", exc)
        raise

    try:
        client.admin.command("ping")
    except PyMongoError as exc:
        logger.error("Error trying to ping mongodb database", exc)
        client.close()
        raise

    return client[name]