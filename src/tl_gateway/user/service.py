"""User domain service: signup and signin.

All DB operations use the injected AsyncSession. Transactions are managed
by the caller (router layer) via `async with db.begin()`.
"""

import logging
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.tl_account.domain.models import Account
from src.tl_account.domain.repository import AccountRepositoryProtocol
from src.tl_account.infrastructure.persistence import AccountRepository
from src.tl_common.errors import InvalidCredentialsError, UsernameExistsError
from src.tl_gateway.auth.jwt_handler import create_access_token
from src.tl_gateway.auth.password import hash_password, verify_password

logger = logging.getLogger(__name__)


class UserService:
    """Stateless service: instantiate once, reuse across requests."""

    def __init__(self, repo: AccountRepositoryProtocol | None = None) -> None:
        self._repo: AccountRepositoryProtocol = repo or AccountRepository()

    async def signup(
        self,
        username: str,
        password: str,
        birthdate: date,
        db: AsyncSession,
    ) -> Account:
        """Create an account credited with the starting grant.

        The caller must wrap this in `async with db.begin()`.
        """
        # DB UNIQUE constraint is the final guard against races
        if await self._repo.find_by_username(db, username) is not None:
            raise UsernameExistsError()

        account = await self._repo.create(
            db,
            username=username,
            password_hash=hash_password(password),
            birthdate=birthdate,
            balance=settings.SIGNUP_BALANCE_CENTS,
        )
        logger.info("Account created: id=%s grant=%d", account.id, account.balance)
        return account

    async def signin(
        self,
        username: str,
        password: str,
        db: AsyncSession,
    ) -> tuple[Account, str]:
        """Authenticate and return (account, access_token).

        Unknown username and wrong password both raise InvalidCredentialsError.
        """
        account = await self._repo.find_by_username(db, username)

        if account is None or not verify_password(password, account.password_hash):
            raise InvalidCredentialsError()

        return account, create_access_token(account.id, account.username)
