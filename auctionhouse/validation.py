"""Decoding and validation of JSON request bodies."""

from __future__ import annotations

import json
import math
from typing import Any

from auctionhouse.auction_usecase import AuctionInput
from auctionhouse.bid_usecase import BidInput
from auctionhouse.rest_errors import Cause, RestError, bad_request_error, not_found_error

_INT64_MIN, _INT64_MAX = -(1 << 63), (1 << 63) - 1
_ALLOWED_CONDITIONS = (0, 1, 2)
_JSON_WHITESPACE = " \t\n\r"


class _TypeMismatch(Exception):
    """A JSON value has the wrong type for the field it is bound to."""


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant {name}")


def _decode(payload: str | bytes | bytearray) -> Any:
    if isinstance(payload, (bytes, bytearray)):
        text = bytes(payload).decode("utf-8", errors="replace")
    else:
        text = payload
    decoder = json.JSONDecoder(parse_constant=_reject_constant)
    try:
        value, _ = decoder.raw_decode(text.lstrip(_JSON_WHITESPACE))
    except ValueError as exc:
        raise bad_request_error("Error trying to convert fields") from exc
    return value


def _object(value: Any) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise _TypeMismatch("request body is not an object")
    return value


def _field(obj: dict[str, Any], key: str) -> Any:
    """Return the value for ``key``, matching names case-insensitively; last one wins."""
    found = None
    for name, value in obj.items():
        if name.lower() == key:
            found = value
    return found


def _string(value: Any) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise _TypeMismatch("expected a string")
    return value


def _number(value: Any) -> float:
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _TypeMismatch("expected a number")
    try:
        number = float(value)
    except OverflowError as exc:
        raise _TypeMismatch("number out of range") from exc
    if math.isinf(number):
        raise _TypeMismatch("number out of range")
    return number


def _integer(value: Any) -> int:
    if value is None:
        return 0
    if type(value) is not int:
        raise _TypeMismatch("expected an integer")
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise _TypeMismatch("integer out of range")
    return value


def _characters(count: int) -> str:
    return f"{count} character" if count == 1 else f"{count} characters"


def _check_text(
    field: str, value: str, minimum: int, maximum: int | None = None
) -> Cause | None:
    if value == "":
        return Cause(field, f"{field} is a required field")
    if len(value) < minimum:
        return Cause(field, f"{field} must be at least {_characters(minimum)} in length")
    if maximum is not None and len(value) > maximum:
        return Cause(field, f"{field} must be a maximum of {_characters(maximum)} in length")
    return None


def _check_one_of(field: str, value: int, allowed: tuple[int, ...]) -> Cause | None:
    if value in allowed:
        return None
    choices = " ".join(str(choice) for choice in allowed)
    return Cause(field, f"{field} must be one of [{choices}]")


def _invalid_type() -> RestError:
    return not_found_error("Invalid type error")


def parse_auction_input(payload: str | bytes | bytearray) -> AuctionInput:
    """Decode and validate a request to open an auction; raises RestError."""
    try:
        body = _object(_decode(payload))
        product_name = _string(_field(body, "product_name"))
        category = _string(_field(body, "category"))
        description = _string(_field(body, "description"))
        condition = _integer(_field(body, "condition"))
    except _TypeMismatch as exc:
        raise _invalid_type() from exc

    checks = (
        _check_text("ProductName", product_name, 1),
        _check_text("Category", category, 2),
        _check_text("Description", description, 10, 200),
        _check_one_of("Condition", condition, _ALLOWED_CONDITIONS),
    )
    causes = [cause for cause in checks if cause is not None]
    if causes:
        raise bad_request_error("Invalid field values", *causes)

    return AuctionInput(
        product_name=product_name,
        category=category,
        description=description,
        condition=condition,
    )


def parse_bid_input(payload: str | bytes | bytearray) -> BidInput:
    """Decode a request to place a bid; raises RestError."""
    try:
        body = _object(_decode(payload))
        return BidInput(
            user_id=_string(_field(body, "user_id")),
            auction_id=_string(_field(body, "auction_id")),
            amount=_number(_field(body, "amount")),
        )
    except _TypeMismatch as exc:
        raise _invalid_type() from exc