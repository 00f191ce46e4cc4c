"""FastAPI dependency: get_current_user.

Usage in any protected router:
    from src.tl_gateway.auth.dependencies import get_current_user

    @router.get("/protected")
    async def protected(user: AccountORM = Depends(get_current_user)):
        ...
"""

import uuid

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.tl_account.infrastructure.db_models import AccountORM
from src.tl_common.database import get_db_session
from src.tl_common.errors import InvalidCredentialsError
from src.tl_gateway.auth.jwt_handler import decode_access_token

# tokenUrl tells Swagger UI where to get a token (used for the "Authorize" button)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/users/signin")

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> AccountORM:
    """Extract and validate the JWT Bearer token, return the caller's account.

    Raises HTTP 401 if the token is missing, invalid, expired, or names an
    account that no longer exists.
    """
    try:
        payload = decode_access_token(token)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    subject = payload.get("sub")
    try:
        account_id = uuid.UUID(str(subject))
    except ValueError:
        raise _CREDENTIALS_EXCEPTION from None

    result = await db.execute(select(AccountORM).where(AccountORM.id == account_id))
    account = result.scalar_one_or_none()
    if account is None:
        raise _CREDENTIALS_EXCEPTION

    return account
