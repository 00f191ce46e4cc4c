"""Domain models for tl_account: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import date, datetime


@dataclass
class Account:
    id: str
    username: str
    balance: int              # cents
    version: int = 0
    birthdate: date | None = None
    password_hash: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
