"""HTTP-facing errors and their JSON representation."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from http import HTTPStatus
from typing import Any

from auctionhouse.errors import BAD_REQUEST as _INTERNAL_BAD_REQUEST
from auctionhouse.errors import NOT_FOUND as _INTERNAL_NOT_FOUND
from auctionhouse.errors import InternalError

BAD_REQUEST = "bad_request"
INTERNAL_SERVER = "internal_server"
NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Cause:
    """One field-level reason for a rejected request."""

    field: str
    message: str


class RestError(Exception):
    """An error ready to be returned as an HTTP response body."""

    def __init__(
        self,
        message: str,
        err: str,
        code: int,
        causes: tuple[Cause, ...] | list[Cause] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.err = err
        self.code = code
        self.causes: list[Cause] = list(causes or ())

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"RestError(message={self.message!r}, err={self.err!r}, "
            f"code={self.code!r}, causes={self.causes!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body for this error."""
        return {
            "message": self.message,
            "err": self.err,
            "code": self.code,
            "causes": [asdict(cause) for cause in self.causes] if self.causes else None,
        }


def convert_error(internal_error: InternalError) -> RestError:
    """Map a domain error onto the matching HTTP error."""
    if internal_error.err == _INTERNAL_BAD_REQUEST:
        return bad_request_error(str(internal_error))
    if internal_error.err == _INTERNAL_NOT_FOUND:
        return not_found_error(str(internal_error))
    return internal_server_error(str(internal_error))


def bad_request_error(message: str, *args: Cause) -> RestError:
    """Build a 400 error, optionally listing the offending fields."""
    return RestError(message, BAD_REQUEST, int(HTTPStatus.BAD_REQUEST), args)


def internal_server_error(message: str) -> RestError:
    """Build a 500 error."""
    return RestError(message, INTERNAL_SERVER, int(HTTPStatus.INTERNAL_SERVER_ERROR))


def not_found_error(message: str) -> RestError:
    """Build a 404 error."""
    return RestError(message, NOT_FOUND, int(HTTPStatus.NOT_FOUND))