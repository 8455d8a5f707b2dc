"""Authenticated actor performing a ledger operation."""

from enum import Enum

from pydantic import BaseModel


class ActorRole(str, Enum):
    ADMIN = "admin"
    STAFF = "staff"


class Actor(BaseModel):
    """Identity supplied by the caller and recorded on every log entry."""

    id: int
    role: ActorRole = ActorRole.STAFF
    name: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == ActorRole.ADMIN
