"""MongoDB storage for users."""

from __future__ import annotations

from typing import Any

from pymongo.errors import PyMongoError

from auctionhouse import logger
from auctionhouse.entities import User
from auctionhouse.errors import internal_server_error, not_found_error

COLLECTION_NAME = "users"


class UserRepository:
    """Looks up registered users."""

    def __init__(self, database: Any) -> None:
        self.collection = database[COLLECTION_NAME]

    def find_user_by_id(self, user_id: str) -> User:
        """Return the user with this id; raise a not-found InternalError if absent."""
        try:
            document = self.collection.find_one({"_id": user_id})
        except PyMongoError as exc:
            logger.error("Error trying to find user by userId", exc)
            raise internal_server_error("Error trying to find user by userId") from exc

        if document is None:
            message = f"User not found with this id = {user_id}"
            logger.error(message, LookupError("no documents in result"))
            raise not_found_error(message)

        return User(id=document["_id"], name=document.get("name", ""))