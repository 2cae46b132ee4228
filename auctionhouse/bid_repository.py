"""MongoDB storage for bids."""

from __future__ import annotations

import math
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable

from pymongo.errors import PyMongoError

from auctionhouse import logger
from auctionhouse.auction_repository import AuctionRepository
from auctionhouse.entities import AuctionStatus, Bid
from auctionhouse.errors import InternalError, internal_server_error
from auctionhouse.settings import auction_interval as _configured_auction_interval

COLLECTION_NAME = "bids"


def _to_document(bid: Bid) -> dict[str, Any]:
    return {
        "_id": bid.id,
        "user_id": bid.user_id,
        "auction_id": bid.auction_id,
        "amount": float(bid.amount),
        "timestamp": math.floor(bid.timestamp.timestamp()),
    }


def _from_document(document: dict[str, Any]) -> Bid:
    return Bid(
        id=document["_id"],
        user_id=document.get("user_id", ""),
        auction_id=document.get("auction_id", ""),
        amount=float(document.get("amount", 0.0)),
        timestamp=datetime.fromtimestamp(int(document.get("timestamp", 0)), timezone.utc),
    )


class BidRepository:
    """Stores bids, accepting them only while their auction is open."""

    def __init__(
        self,
        database: Any,
        auction_repository: AuctionRepository,
        auction_interval: timedelta | None = None,
    ) -> None:
        self.collection = database[COLLECTION_NAME]
        self.auction_repository = auction_repository
        self.auction_interval = (
            _configured_auction_interval() if auction_interval is None else auction_interval
        )
        self._status_by_auction: dict[str, AuctionStatus] = {}
        self._end_time_by_auction: dict[str, datetime] = {}
        self._status_lock = threading.Lock()
        self._end_time_lock = threading.Lock()

    def create_bid(self, bids: Iterable[Bid]) -> None:
        """Store every bid whose auction is still open; failures are logged, not raised."""
        bids = list(bids)
        if not bids:
            return
        with ThreadPoolExecutor(max_workers=len(bids)) as executor:
            list(executor.map(self._store, bids))

    def _insert(self, bid: Bid) -> None:
        try:
            self.collection.insert_one(_to_document(bid))
        except PyMongoError as exc:
            logger.error("Error trying to insert bid", exc)

    def _store(self, bid: Bid) -> None:
        with self._status_lock:
            status = self._status_by_auction.get(bid.auction_id)
        with self._end_time_lock:
            end_time = self._end_time_by_auction.get(bid.auction_id)

        if status is not None and end_time is not None:
            if status is AuctionStatus.COMPLETED or datetime.now(timezone.utc) > end_time:
                return
            self._insert(bid)
            return

        try:
            auction = self.auction_repository.find_auction_by_id(bid.auction_id)
        except InternalError as exc:
            logger.error("Error trying to find auction by id", exc)
            return
        if auction.status is AuctionStatus.COMPLETED:
            return

        with self._status_lock:
            self._status_by_auction[bid.auction_id] = auction.status
        with self._end_time_lock:
            self._end_time_by_auction[bid.auction_id] = (
                auction.timestamp + self.auction_interval
            )

        self._insert(bid)

    def find_bid_by_auction_id(self, auction_id: str) -> list[Bid]:
        """Return the bids placed on an auction."""
        message = f"Error trying to find bids by auctionId {auction_id}"
        try:
            documents = list(self.collection.find({"auctionId": auction_id}))
        except PyMongoError as exc:
            logger.error(message, exc)
            raise internal_server_error(message) from exc
        return [_from_document(document) for document in documents]

    def find_winning_bid_by_auction_id(self, auction_id: str) -> Bid:
        """Return the highest bid on an auction, raising InternalError if there is none."""
        message = "Error trying to find the auction winner"
        try:
            document = self.collection.find_one(
                {"auction_id": auction_id}, sort=[("amount", -1)]
            )
        except PyMongoError as exc:
            logger.error(message, exc)
            raise internal_server_error(message) from exc
        if document is None:
            logger.error(message, LookupError("no documents in result"))
            raise internal_server_error(message)
        return _from_document(document)