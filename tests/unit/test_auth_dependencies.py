"""Unit tests for get_current_user (mocked session)."""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import HTTPException

from src.tl_account.infrastructure.db_models import AccountORM
from src.tl_gateway.auth.dependencies import get_current_user
from src.tl_gateway.auth.jwt_handler import create_access_token

_ACCOUNT_ID = uuid.UUID("11111111-1111-1111-1111-111111111111")


def _db_returning(account: AccountORM | None) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = account
    db = MagicMock()
    db.execute = AsyncMock(return_value=result)
    return db


class TestGetCurrentUser:
    async def test_valid_token_returns_account(self) -> None:
        account = AccountORM(id=_ACCOUNT_ID, username="01012345678")
        token = create_access_token(str(_ACCOUNT_ID), "01012345678")

        user = await get_current_user(token, _db_returning(account))

        assert user is account

    async def test_garbage_token(self) -> None:
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user("not-a-jwt", _db_returning(None))
        assert exc_info.value.status_code == 401
        assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}

    async def test_subject_not_a_uuid(self) -> None:
        token = create_access_token("acct-123", "01012345678")
        db = _db_returning(None)

        with pytest.raises(HTTPException):
            await get_current_user(token, db)
        db.execute.assert_not_awaited()

    async def test_deleted_account(self) -> None:
        token = create_access_token(str(_ACCOUNT_ID), "01012345678")

        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(token, _db_returning(None))
        assert exc_info.value.status_code == 401
