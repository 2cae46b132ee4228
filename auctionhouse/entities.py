"""Core domain entities: auctions, bids and users."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum

from auctionhouse.errors import bad_request_error

_HEX32 = re.compile(r"[0-9a-fA-F]{32}")
_HEX_DASHED = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)
_URN_PREFIX = "urn:uuid:"


class ProductCondition(IntEnum):
    NEW = 1
    USED = 2
    REFURBISHED = 3


class AuctionStatus(IntEnum):
    ACTIVE = 0
    COMPLETED = 1


def is_valid_uuid(value: str) -> bool:
    """Accept the usual UUID spellings: plain, braced, urn-prefixed or 32 hex digits."""
    if len(value) == 36 + len(_URN_PREFIX):
        if value[: len(_URN_PREFIX)].lower() != _URN_PREFIX:
            return False
        value = value[len(_URN_PREFIX):]
    elif len(value) == 38:
        if not (value.startswith("{") and value.endswith("}")):
            return False
        value = value[1:-1]
    elif len(value) == 32:
        return _HEX32.fullmatch(value) is not None
    if len(value) != 36:
        return False
    return _HEX_DASHED.fullmatch(value) is not None


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _byte_length(text: str) -> int:
    return len(text.encode("utf-8"))


@dataclass
class Auction:
    """An item offered for bidding."""

    id: str
    product_name: str
    category: str
    description: str
    condition: int
    status: AuctionStatus = AuctionStatus.ACTIVE
    timestamp: datetime = field(default_factory=_now)

    @classmethod
    def create(
        cls, product_name: str, category: str, description: str, condition: int
    ) -> Auction:
        """Build a new active auction, raising InternalError when it is invalid."""
        auction = cls(
            id=str(uuid.uuid4()),
            product_name=product_name,
            category=category,
            description=description,
            condition=condition,
            status=AuctionStatus.ACTIVE,
            timestamp=_now(),
        )
        auction.validate()
        return auction

    def validate(self) -> None:
        """Raise a bad-request InternalError if the auction is malformed."""
        known_condition = self.condition in tuple(ProductCondition)
        if (
            _byte_length(self.product_name) <= 1
            or _byte_length(self.category) <= 2
            or (_byte_length(self.description) <= 10 and not known_condition)
        ):
            raise bad_request_error("invalid auction object")


@dataclass
class Bid:
    """An offer made by a user on an auction."""

    id: str
    user_id: str
    auction_id: str
    amount: float
    timestamp: datetime = field(default_factory=_now)

    @classmethod
    def create(cls, user_id: str, auction_id: str, amount: float) -> Bid:
        """Build a new bid, raising InternalError when it is invalid."""
        bid = cls(
            id=str(uuid.uuid4()),
            user_id=user_id,
            auction_id=auction_id,
            amount=amount,
            timestamp=_now(),
        )
        bid.validate()
        return bid

    def validate(self) -> None:
        """Raise a bad-request InternalError if the bid is malformed."""
        if not is_valid_uuid(self.user_id):
            raise bad_request_error("UserId is not a valid id")
        if not is_valid_uuid(self.auction_id):
            raise bad_request_error("AuctionId is not a valid id")
        if self.amount <= 0:
            raise bad_request_error("Amount is not a valid value")


@dataclass
class User:
    """A registered bidder."""

    id: str
    name: str