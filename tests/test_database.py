from unittest.mock import MagicMock, patch

import pytest
from pymongo.errors import ConnectionFailure, PyMongoError

from auctionhouse.database import connect_database


def test_invalid_url_raises():
    with pytest.raises(PyMongoError):
        connect_database("not-a-url", "auctions")


def test_ping_failure_raises_and_closes_client(capsys):
    client = MagicMock()
    client.admin.command.side_effect = ConnectionFailure("unreachable")
    with patch("auctionhouse.database.MongoClient", return_value=client):
        with pytest.raises(ConnectionFailure):
            connect_database("mongodb://localhost:27017", "auctions")
    client.admin.command.assert_called_once_with("ping")
    assert client.close.call_count == 1
    assert "Error trying to ping mongodb database" in capsys.readouterr().err


def test_success_returns_named_database():
    client = MagicMock()
    with patch("auctionhouse.database.MongoClient", return_value=client) as factory:
        database = connect_database("mongodb://localhost:27017", "auctions")
    factory.assert_called_once_with("mongodb://localhost:27017")
    client.__getitem__.assert_called_once_with("auctions")
    assert database is client.__getitem__.return_value