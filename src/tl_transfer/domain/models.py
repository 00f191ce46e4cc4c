"""Domain models for tl_transfer: pure dataclasses, no SQLAlchemy dependency."""

import uuid
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Transfer:
    """One completed money movement. Append-only: never updated or deleted."""

    id: str
    from_id: str
    to_id: str
    amount: int                          # cents, always > 0
    created_at: datetime | None = None   # set by the database on insert

    @classmethod
    def create(cls, from_id: str, to_id: str, amount: int) -> "Transfer":
        return cls(id=str(uuid.uuid4()), from_id=from_id, to_id=to_id, amount=amount)
