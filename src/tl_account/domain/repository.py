"""Repository Protocol: dependency inversion for testability.

Unit tests inject a mock (or the in-memory store) that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from collections.abc import Collection
from datetime import date
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.tl_account.domain.models import Account


class AccountRepositoryProtocol(Protocol):
    async def find_by_ids(
        self,
        db: AsyncSession,
        ids: Collection[str],
        for_update: bool = False,
        lock_timeout_ms: int | None = None,
    ) -> list[Account]: ...

    async def update_balance(
        self, db: AsyncSession, account_id: str, new_balance: int
    ) -> Account: ...

    async def find_by_id(self, db: AsyncSession, account_id: str) -> Account | None: ...

    async def find_by_username(
        self, db: AsyncSession, username: str
    ) -> Account | None: ...

    async def create(
        self,
        db: AsyncSession,
        username: str,
        password_hash: str,
        birthdate: date,
        balance: int,
    ) -> Account: ...

    async def find_many(
        self, db: AsyncSession, ids: Collection[str] | None, skip: int, take: int
    ) -> list[Account]: ...

    async def count(self, db: AsyncSession, ids: Collection[str] | None) -> int: ...
