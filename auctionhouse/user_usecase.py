"""Use case for looking up users."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from auctionhouse.entities import User


class _UserStore(Protocol):
    def find_user_by_id(self, user_id: str) -> User: ...


@dataclass(frozen=True)
class UserOutput:
    """A user as returned to clients."""

    id: str
    name: str

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body for this user."""
        return {"id": self.id, "name": self.name}


class UserUseCase:
    """Answers queries about users."""

    def __init__(self, user_repository: _UserStore) -> None:
        self.user_repository = user_repository

    def find_user_by_id(self, user_id: str) -> UserOutput:
        """Return the user with this id; InternalError from the repository propagates."""
        user = self.user_repository.find_user_by_id(user_id)
        return UserOutput(id=user.id, name=user.name)