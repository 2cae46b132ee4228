"""Use cases for creating and reading auctions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Protocol

from auctionhouse import logger
from auctionhouse.bid_usecase import BidOutput
from auctionhouse.entities import Auction, Bid
from auctionhouse.errors import InternalError


class _AuctionStore(Protocol):
    def create_auction(self, auction: Auction) -> None: ...

    def find_auction_by_id(self, auction_id: str) -> Auction: ...

    def find_auctions(self, status: int, category: str, product_name: str) -> list[Auction]: ...


class _WinningBidSource(Protocol):
    def find_winning_bid_by_auction_id(self, auction_id: str) -> Bid: ...


def _format_timestamp(moment: datetime) -> str:
    text = moment.isoformat()
    if moment.utcoffset() == timedelta(0) and text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


@dataclass(frozen=True)
class AuctionInput:
    """A request to open an auction."""

    product_name: str
    category: str
    description: str
    condition: int = 0


@dataclass(frozen=True)
class AuctionOutput:
    """An auction as returned to clients."""

    id: str
    product_name: str
    category: str
    description: str
    condition: int
    status: int
    timestamp: datetime

    @classmethod
    def from_entity(cls, auction: Auction) -> AuctionOutput:
        """Build the output view of a stored auction."""
        return cls(
            id=auction.id,
            product_name=auction.product_name,
            category=auction.category,
            description=auction.description,
            condition=int(auction.condition),
            status=int(auction.status),
            timestamp=auction.timestamp,
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body for this auction."""
        return {
            "id": self.id,
            "product_name": self.product_name,
            "category": self.category,
            "description": self.description,
            "condition": self.condition,
            "status": self.status,
            "timestamp": _format_timestamp(self.timestamp),
        }


@dataclass(frozen=True)
class WinningInfoOutput:
    """An auction together with its highest bid, if any."""

    auction: AuctionOutput
    bid: BidOutput | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body; the bid is left out when there is none."""
        body: dict[str, Any] = {"auction": self.auction.to_dict()}
        if self.bid is not None:
            body["bid"] = self.bid.to_dict()
        return body


class AuctionUseCase:
    """Creates auctions and answers queries about them."""

    def __init__(
        self, auction_repository: _AuctionStore, bid_repository: _WinningBidSource
    ) -> None:
        self.auction_repository = auction_repository
        self.bid_repository = bid_repository

    def create_auction(self, auction_input: AuctionInput) -> None:
        """Validate and store a new auction; raises InternalError on failure."""
        auction = Auction.create(
            auction_input.product_name,
            auction_input.category,
            auction_input.description,
            int(auction_input.condition),
        )
        self.auction_repository.create_auction(auction)

    def find_auction_by_id(self, auction_id: str) -> AuctionOutput:
        """Return the auction with this id."""
        return AuctionOutput.from_entity(self.auction_repository.find_auction_by_id(auction_id))

    def find_auctions(
        self, status: int, category: str, product_name: str
    ) -> list[AuctionOutput]:
        """Return auctions matching the filters."""
        return [
            AuctionOutput.from_entity(auction)
            for auction in self.auction_repository.find_auctions(
                int(status), category, product_name
            )
        ]

    def find_winning_bid_by_auction_id(self, auction_id: str) -> WinningInfoOutput:
        """Return the auction and its highest bid; the bid is None when it cannot be read."""
        auction = self.auction_repository.find_auction_by_id(auction_id)
        auction_output = AuctionOutput.from_entity(auction)
        try:
            winning = self.bid_repository.find_winning_bid_by_auction_id(auction.id)
        except InternalError as exc:
            logger.error("", exc)
            return WinningInfoOutput(auction=auction_output, bid=None)
        return WinningInfoOutput(auction=auction_output, bid=BidOutput.from_entity(winning))