"""UserDirectoryService: read-only lookups over the accounts table.

No explicit transaction: every operation here is a plain read.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.tl_account.application.schemas import (
    FindManyUsersResponse,
    ProfileResponse,
    UserItem,
)
from src.tl_account.domain.repository import AccountRepositoryProtocol
from src.tl_account.infrastructure.persistence import AccountRepository
from src.tl_common.errors import AccountNotFoundError

DEFAULT_SKIP = 0
DEFAULT_TAKE = 10


class UserDirectoryService:
    def __init__(self, repo: AccountRepositoryProtocol | None = None) -> None:
        self._repo: AccountRepositoryProtocol = repo or AccountRepository()

    async def find_many(
        self,
        db: AsyncSession,
        ids: list[str] | None,
        skip: int = DEFAULT_SKIP,
        take: int = DEFAULT_TAKE,
    ) -> FindManyUsersResponse:
        accounts = await self._repo.find_many(db, ids, skip, take)
        total_count = await self._repo.count(db, ids)
        return FindManyUsersResponse(
            users=[UserItem.from_account(a) for a in accounts],
            has_next_page=skip + take < total_count,
            total_count=total_count,
        )

    async def get_profile(self, db: AsyncSession, account_id: str) -> ProfileResponse:
        account = await self._repo.find_by_id(db, account_id)
        if account is None:
            raise AccountNotFoundError(f"Account not found: {account_id}")
        return ProfileResponse.from_account(account)
