"""Use cases for placing bids and reading them back."""

from __future__ import annotations

import queue
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Iterable, Protocol

from auctionhouse import logger, settings
from auctionhouse.entities import Bid

_STOP = object()


class _BidStore(Protocol):
    def create_bid(self, bids: Iterable[Bid]) -> None: ...

    def find_bid_by_auction_id(self, auction_id: str) -> list[Bid]: ...

    def find_winning_bid_by_auction_id(self, auction_id: str) -> Bid: ...


def _format_timestamp(moment: datetime) -> str:
    text = moment.isoformat()
    if moment.utcoffset() == timedelta(0) and text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


@dataclass(frozen=True)
class BidInput:
    """A request to place a bid."""

    user_id: str
    auction_id: str
    amount: float


@dataclass(frozen=True)
class BidOutput:
    """A bid as returned to clients."""

    id: str
    user_id: str
    auction_id: str
    amount: float
    timestamp: datetime

    @classmethod
    def from_entity(cls, bid: Bid) -> BidOutput:
        """Build the output view of a stored bid."""
        return cls(
            id=bid.id,
            user_id=bid.user_id,
            auction_id=bid.auction_id,
            amount=bid.amount,
            timestamp=bid.timestamp,
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body for this bid."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "auction_id": self.auction_id,
            "amount": self.amount,
            "timestamp": _format_timestamp(self.timestamp),
        }


class BidUseCase:
    """Accepts bids and writes them to the repository in batches.

    A batch is flushed when it reaches ``max_batch_size`` bids or when
    ``batch_insert_interval`` passes without a size-triggered flush.
    """

    def __init__(
        self,
        bid_repository: _BidStore,
        max_batch_size: int | None = None,
        batch_insert_interval: timedelta | None = None,
    ) -> None:
        self.bid_repository = bid_repository
        self.max_batch_size = (
            settings.max_batch_size() if max_batch_size is None else max_batch_size
        )
        self.batch_insert_interval = (
            settings.batch_insert_interval()
            if batch_insert_interval is None
            else batch_insert_interval
        )
        self._queue: queue.Queue[object] = queue.Queue(maxsize=max(self.max_batch_size, 0))
        self._closed = False
        self._close_lock = threading.Lock()
        self._worker = threading.Thread(target=self._run, name="bid-batcher", daemon=True)
        self._worker.start()

    def __enter__(self) -> BidUseCase:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _flush(self, batch: list[Bid]) -> None:
        if not batch:
            return
        try:
            self.bid_repository.create_bid(batch)
        except Exception as exc:
            logger.error("error trying to process bid batch list", exc)

    def _run(self) -> None:
        interval = max(self.batch_insert_interval.total_seconds(), 0.0)
        batch: list[Bid] = []
        deadline = time.monotonic() + interval
        while True:
            timeout = max(deadline - time.monotonic(), 0.0)
            try:
                item = self._queue.get(timeout=timeout)
            except queue.Empty:
                self._flush(batch)
                batch = []
                deadline = time.monotonic() + interval
                continue
            if item is _STOP:
                self._flush(batch)
                return
            batch.append(item)  # type: ignore[arg-type]
            if len(batch) >= self.max_batch_size:
                self._flush(batch)
                batch = []
                deadline = time.monotonic() + interval

    def create_bid(self, bid_input: BidInput) -> None:
        """Validate the bid and queue it for the next batch write.

        Raises InternalError for an invalid bid and RuntimeError once closed.
        """
        bid = Bid.create(bid_input.user_id, bid_input.auction_id, bid_input.amount)
        with self._close_lock:
            if self._closed:
                raise RuntimeError("bid use case is closed")
            self._queue.put(bid)

    def close(self) -> None:
        """Write any pending bids and stop the batching worker."""
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(_STOP)
        self._worker.join()

    def find_bid_by_auction_id(self, auction_id: str) -> list[BidOutput]:
        """Return every bid placed on an auction."""
        return [
            BidOutput.from_entity(bid)
            for bid in self.bid_repository.find_bid_by_auction_id(auction_id)
        ]

    def find_winning_bid_by_auction_id(self, auction_id: str) -> BidOutput:
        """Return the highest bid placed on an auction."""
        return BidOutput.from_entity(
            self.bid_repository.find_winning_bid_by_auction_id(auction_id)
        )