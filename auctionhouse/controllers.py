"""HTTP routes for auctions, bids and users."""

from __future__ import annotations

import re
from typing import Any

from flask import Flask, jsonify, request

from auctionhouse.entities import is_valid_uuid
from auctionhouse.errors import InternalError
from auctionhouse.rest_errors import Cause, RestError, bad_request_error, convert_error
from auctionhouse.validation import parse_auction_input, parse_bid_input

_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT64_MIN, _INT64_MAX = -(1 << 63), (1 << 63) - 1


def _rest_error_response(error: RestError) -> Any:
    return jsonify(error.to_dict()), error.code


def _internal_error_response(error: InternalError) -> Any:
    return _rest_error_response(convert_error(error))


def _require_uuid(value: str, field: str) -> None:
    if not is_valid_uuid(value):
        raise bad_request_error("Invalid fields", Cause(field, "Invalid UUID value"))


def _parse_status(text: str) -> int:
    if _INTEGER.fullmatch(text):
        value = int(text)
        if _INT64_MIN <= value <= _INT64_MAX:
            return value
    raise bad_request_error("Error trying to validate auction status param")


def _json_list(items: list[Any]) -> Any:
    # An empty result is sent as JSON null.
    return jsonify([item.to_dict() for item in items] or None)


def create_app(auction_use_case: Any, bid_use_case: Any, user_use_case: Any) -> Flask:
    """Build the web application serving the given use cases."""
    app = Flask(__name__)
    app.json.sort_keys = False  # type: ignore[attr-defined]
    app.extensions["auctionhouse"] = {
        "auction_use_case": auction_use_case,
        "bid_use_case": bid_use_case,
        "user_use_case": user_use_case,
    }
    app.register_error_handler(RestError, _rest_error_response)
    app.register_error_handler(InternalError, _internal_error_response)

    @app.get("/auction")
    def find_auctions() -> Any:
        status = _parse_status(request.args.get("status", ""))
        auctions = auction_use_case.find_auctions(
            status,
            request.args.get("category", ""),
            request.args.get("productName", ""),
        )
        return _json_list(auctions)

    @app.get("/auction/<auction_id>")
    def find_auction_by_id(auction_id: str) -> Any:
        _require_uuid(auction_id, "auctionId")
        return jsonify(auction_use_case.find_auction_by_id(auction_id).to_dict())

    @app.post("/auction")
    def create_auction() -> Any:
        auction_input = parse_auction_input(request.get_data())
        auction_use_case.create_auction(auction_input)
        return "", 201

    @app.get("/auction/winner/<auction_id>")
    def find_winning_bid_by_auction_id(auction_id: str) -> Any:
        _require_uuid(auction_id, "auctionId")
        return jsonify(auction_use_case.find_winning_bid_by_auction_id(auction_id).to_dict())

    @app.post("/bid")
    def create_bid() -> Any:
        bid_input = parse_bid_input(request.get_data())
        bid_use_case.create_bid(bid_input)
        return "", 201

    @app.get("/bid/<auction_id>")
    def find_bid_by_auction_id(auction_id: str) -> Any:
        _require_uuid(auction_id, "auctionId")
        return _json_list(bid_use_case.find_bid_by_auction_id(auction_id))

    @app.get("/user/<user_id>")
    def find_user_by_id(user_id: str) -> Any:
        _require_uuid(user_id, "userId")
        return jsonify(user_use_case.find_user_by_id(user_id).to_dict())

    return app