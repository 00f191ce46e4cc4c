"""Pydantic schemas for the user directory API.

Responses serialize with camelCase aliases (``hasNextPage``, ``totalCount``).
"""

from datetime import date

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.tl_account.domain.models import Account
from src.tl_common.cents import cents_to_display
from src.tl_common.datetime_utils import isoformat_or_empty


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserItem(_CamelModel):
    id: str
    username: str
    birthdate: date | None
    balance: int  # cents
    balance_display: str

    @classmethod
    def from_account(cls, account: Account) -> "UserItem":
        return cls(
            id=account.id,
            username=account.username,
            birthdate=account.birthdate,
            balance=account.balance,
            balance_display=cents_to_display(account.balance),
        )


class FindManyUsersResponse(_CamelModel):
    users: list[UserItem]
    has_next_page: bool
    total_count: int


class ProfileResponse(UserItem):
    created_at: str  # ISO8601 string

    @classmethod
    def from_account(cls, account: Account) -> "ProfileResponse":
        item = UserItem.from_account(account)
        return cls(
            **item.model_dump(),
            created_at=isoformat_or_empty(account.created_at),
        )
