import json
from datetime import datetime, timezone

import pytest

from auctionhouse.auction_usecase import AuctionInput, AuctionOutput, WinningInfoOutput
from auctionhouse.bid_usecase import BidInput, BidOutput
from auctionhouse.controllers import create_app
from auctionhouse.errors import bad_request_error, internal_server_error, not_found_error
from auctionhouse.user_usecase import UserOutput

AUCTION_ID = "0f8fad5b-d9cb-469f-a165-70867728950e"
USER_ID = "7c9e6679-7425-40de-944b-e07fc1f90ae7"
MOMENT = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

AUCTION = AuctionOutput(
    id=AUCTION_ID,
    product_name="Phone",
    category="Electronics",
    description="A phone in great shape",
    condition=1,
    status=0,
    timestamp=MOMENT,
)
BID = BidOutput(
    id="1b4e28ba-2fa1-11d2-883f-0016d3cca427",
    user_id=USER_ID,
    auction_id=AUCTION_ID,
    amount=42.5,
    timestamp=MOMENT,
)


class FakeAuctionUseCase:
    def __init__(self):
        self.created = []
        self.queries = []
        self.auctions = []
        self.winning = None
        self.error = None

    def _maybe_fail(self):
        if self.error is not None:
            raise self.error

    def create_auction(self, auction_input):
        self._maybe_fail()
        self.created.append(auction_input)

    def find_auction_by_id(self, auction_id):
        self._maybe_fail()
        return AUCTION

    def find_auctions(self, status, category, product_name):
        self.queries.append((status, category, product_name))
        self._maybe_fail()
        return list(self.auctions)

    def find_winning_bid_by_auction_id(self, auction_id):
        self._maybe_fail()
        return WinningInfoOutput(auction=AUCTION, bid=self.winning)


class FakeBidUseCase:
    def __init__(self):
        self.created = []
        self.bids = []
        self.error = None

    def create_bid(self, bid_input):
        if self.error is not None:
            raise self.error
        self.created.append(bid_input)

    def find_bid_by_auction_id(self, auction_id):
        if self.error is not None:
            raise self.error
        return list(self.bids)


class FakeUserUseCase:
    def __init__(self):
        self.error = None

    def find_user_by_id(self, user_id):
        if self.error is not None:
            raise self.error
        return UserOutput(id=user_id, name="Ada")


@pytest.fixture
def env():
    auctions, bids, users = FakeAuctionUseCase(), FakeBidUseCase(), FakeUserUseCase()
    app = create_app(auctions, bids, users)
    return app.test_client(), auctions, bids, users


def test_invalid_auction_id_is_rejected(env):
    client, *_ = env
    response = client.get("/auction/not-a-uuid")
    assert response.status_code == 400
    body = response.get_json()
    assert body["message"] == "Invalid fields"
    assert body["causes"] == [{"field": "auctionId", "message": "Invalid UUID value"}]


def test_find_auction_by_id_returns_auction(env):
    client, *_ = env
    response = client.get(f"/auction/{AUCTION_ID}")
    assert response.status_code == 200
    assert response.get_json() == AUCTION.to_dict()


def test_not_found_error_maps_to_404(env):
    client, auctions, *_ = env
    auctions.error = not_found_error("missing")
    response = client.get(f"/auction/{AUCTION_ID}")
    assert response.status_code == 404
    assert response.get_json()["err"] == "not_found"
    assert response.get_json()["message"] == "missing"


def test_internal_error_maps_to_500(env):
    client, auctions, *_ = env
    auctions.error = internal_server_error("Error trying to find auction by id")
    response = client.get(f"/auction/{AUCTION_ID}")
    assert response.status_code == 500
    assert response.get_json()["err"] == "internal_server"


@pytest.mark.parametrize("query", ["", "?status=abc", "?status=1.5"])
def test_find_auctions_requires_numeric_status(env, query):
    client, auctions, *_ = env
    response = client.get(f"/auction{query}")
    assert response.status_code == 400
    assert response.get_json()["message"] == "Error trying to validate auction status param"
    assert auctions.queries == []


def test_find_auctions_passes_filters(env):
    client, auctions, *_ = env
    response = client.get("/auction?status=+1&category=Electronics&productName=Phone")
    assert response.status_code == 200
    assert auctions.queries == [(1, "Electronics", "Phone")]
    assert response.get_json() is None


def test_find_auctions_lists_results(env):
    client, auctions, *_ = env
    auctions.auctions = [AUCTION]
    response = client.get("/auction?status=0")
    assert response.get_json() == [AUCTION.to_dict()]


def test_create_auction(env):
    client, auctions, *_ = env
    payload = {
        "product_name": "Phone",
        "category": "Electronics",
        "description": "A phone in great shape",
        "condition": 2,
    }
    response = client.post("/auction", data=json.dumps(payload))
    assert response.status_code == 201
    assert auctions.created == [
        AuctionInput("Phone", "Electronics", "A phone in great shape", 2)
    ]


def test_create_auction_with_invalid_fields(env):
    client, auctions, *_ = env
    response = client.post("/auction", data="{}")
    assert response.status_code == 400
    assert response.get_json()["message"] == "Invalid field values"
    assert auctions.created == []


def test_create_auction_domain_error(env):
    client, auctions, *_ = env
    auctions.error = bad_request_error("invalid auction object")
    payload = {
        "product_name": "Phone",
        "category": "Electronics",
        "description": "A phone in great shape",
    }
    response = client.post("/auction", data=json.dumps(payload))
    assert response.status_code == 400
    assert response.get_json()["message"] == "invalid auction object"


def test_winner_without_bid_omits_bid(env):
    client, *_ = env
    response = client.get(f"/auction/winner/{AUCTION_ID}")
    assert response.status_code == 200
    assert response.get_json() == {"auction": AUCTION.to_dict()}


def test_winner_with_bid(env):
    client, auctions, *_ = env
    auctions.winning = BID
    response = client.get(f"/auction/winner/{AUCTION_ID}")
    assert response.get_json()["bid"] == BID.to_dict()


def test_winner_requires_uuid(env):
    client, *_ = env
    response = client.get("/auction/winner/bad")
    assert response.status_code == 400


def test_create_bid(env):
    client, _, bids, _ = env
    payload = {"user_id": USER_ID, "auction_id": AUCTION_ID, "amount": 42.5}
    response = client.post("/bid", data=json.dumps(payload))
    assert response.status_code == 201
    assert bids.created == [BidInput(USER_ID, AUCTION_ID, 42.5)]


def test_create_bid_malformed(env):
    client, _, bids, _ = env
    response = client.post("/bid", data="{")
    assert response.status_code == 400
    assert response.get_json()["message"] == "Error trying to convert fields"
    assert bids.created == []


def test_create_bid_domain_error(env):
    client, _, bids, _ = env
    bids.error = bad_request_error("Amount is not a valid value")
    response = client.post("/bid", data=json.dumps({"amount": -1}))
    assert response.status_code == 400
    assert response.get_json()["message"] == "Amount is not a valid value"


def test_find_bids(env):
    client, _, bids, _ = env
    bids.bids = [BID]
    response = client.get(f"/bid/{AUCTION_ID}")
    assert response.status_code == 200
    assert response.get_json() == [BID.to_dict()]


def test_find_bids_requires_uuid(env):
    client, *_ = env
    response = client.get("/bid/nope")
    assert response.get_json()["causes"][0]["field"] == "auctionId"


def test_find_user(env):
    client, *_ = env
    response = client.get(f"/user/{USER_ID}")
    assert response.status_code == 200
    assert response.get_json() == {"id": USER_ID, "name": "Ada"}


def test_find_user_requires_uuid(env):
    client, *_ = env
    response = client.get("/user/bad")
    assert response.status_code == 400
    assert response.get_json()["causes"] == [
        {"field": "userId", "message": "Invalid UUID value"}
    ]


def test_find_user_not_found(env):
    client, _, _, users = env
    users.error = not_found_error("gone")
    response = client.get(f"/user/{USER_ID}")
    assert response.status_code == 404
    assert response.get_json()["causes"] is None