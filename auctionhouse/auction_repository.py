"""MongoDB storage for auctions."""

from __future__ import annotations

import math
import threading
from datetime import datetime, timedelta, timezone
from typing import Any

from pymongo.errors import PyMongoError

from auctionhouse import logger
from auctionhouse.entities import Auction, AuctionStatus
from auctionhouse.errors import internal_server_error
from auctionhouse.settings import auction_interval as _configured_auction_interval

COLLECTION_NAME = "auctions"


def _to_document(auction: Auction) -> dict[str, Any]:
    return {
        "_id": auction.id,
        "product_name": auction.product_name,
        "category": auction.category,
        "description": auction.description,
        "condition": int(auction.condition),
        "status": int(auction.status),
        "timestamp": math.floor(auction.timestamp.timestamp()),
    }


def _from_document(document: dict[str, Any]) -> Auction:
    return Auction(
        id=document["_id"],
        product_name=document.get("product_name", ""),
        category=document.get("category", ""),
        description=document.get("description", ""),
        condition=int(document.get("condition", 0)),
        status=AuctionStatus(int(document.get("status", 0))),
        timestamp=datetime.fromtimestamp(int(document.get("timestamp", 0)), timezone.utc),
    )


class AuctionRepository:
    """Stores auctions and closes each one once its interval has passed."""

    def __init__(self, database: Any, interval: timedelta | None = None) -> None:
        self.collection = database[COLLECTION_NAME]
        self.interval = _configured_auction_interval() if interval is None else interval

    def create_auction(self, auction: Auction) -> None:
        """Insert the auction and schedule it to be marked completed."""
        document = _to_document(auction)
        try:
            self.collection.insert_one(document)
        except PyMongoError as exc:
            logger.error("Error trying to insert auction", exc)
            raise internal_server_error("Error trying to insert auction") from exc

        timer = threading.Timer(
            max(self.interval.total_seconds(), 0.0), self._complete, args=(auction.id,)
        )
        timer.daemon = True
        timer.start()

    def _complete(self, auction_id: str) -> None:
        try:
            self.collection.update_one(
                {"_id": auction_id},
                {"$set": {"status": int(AuctionStatus.COMPLETED)}},
            )
        except PyMongoError as exc:
            logger.error("Error trying to update auction", exc)

    def find_auction_by_id(self, auction_id: str) -> Auction:
        """Return the auction with this id, raising InternalError if it cannot be read."""
        try:
            document = self.collection.find_one({"_id": auction_id})
        except PyMongoError as exc:
            logger.error(f"Error trying to find auction by id = {auction_id}", exc)
            raise internal_server_error("Error trying to find auction by id") from exc
        if document is None:
            logger.error(
                f"Error trying to find auction by id = {auction_id}",
                LookupError("no documents in result"),
            )
            raise internal_server_error("Error trying to find auction by id")
        return _from_document(document)

    def find_auctions(
        self, status: int, category: str, product_name: str
    ) -> list[Auction]:
        """Return auctions matching the given filters; empty values do not filter."""
        query: dict[str, Any] = {}
        if status != 0:
            query["status"] = int(status)
        if category:
            query["category"] = category
        if product_name:
            query["productName"] = {"$regex": product_name, "$options": "i"}

        try:
            cursor = self.collection.find(query)
        except PyMongoError as exc:
            logger.error("Error finding auctions", exc)
            raise internal_server_error("Error finding auctions") from exc

        try:
            documents = list(cursor)
        except PyMongoError as exc:
            logger.error("Error decoding auctions", exc)
            raise internal_server_error("Error decoding auctions") from exc
        finally:
            close = getattr(cursor, "close", None)
            if close is not None:
                close()

        return [_from_document(document) for document in documents]