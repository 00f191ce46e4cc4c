"""Unit tests for UserDirectoryService using a mock repository."""

from datetime import UTC, date, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.tl_account.application.service import UserDirectoryService
from src.tl_account.domain.models import Account
from src.tl_common.errors import AccountNotFoundError


def _make_account(n: int, balance: int = 10000) -> Account:
    return Account(
        id=f"00000000-0000-0000-0000-{n:012d}",
        username=f"0101234{n:04d}",
        balance=balance,
        birthdate=date(1990, 1, 1),
        created_at=datetime(2026, 1, 1, tzinfo=UTC),
    )


class TestFindMany:
    async def test_first_page_has_next(self) -> None:
        repo = AsyncMock()
        repo.find_many.return_value = [_make_account(1), _make_account(2)]
        repo.count.return_value = 5
        svc = UserDirectoryService(repo=repo)
        db = MagicMock()

        result = await svc.find_many(db, None, 0, 2)

        repo.find_many.assert_awaited_once_with(db, None, 0, 2)
        assert result.total_count == 5
        assert result.has_next_page is True
        assert [u.username for u in result.users] == ["01012340001", "01012340002"]

    async def test_last_page(self) -> None:
        repo = AsyncMock()
        repo.find_many.return_value = [_make_account(5)]
        repo.count.return_value = 5
        svc = UserDirectoryService(repo=repo)

        result = await svc.find_many(MagicMock(), None, 4, 2)

        assert result.has_next_page is False

    async def test_exact_boundary_has_no_next(self) -> None:
        repo = AsyncMock()
        repo.find_many.return_value = [_make_account(3), _make_account(4)]
        repo.count.return_value = 4
        svc = UserDirectoryService(repo=repo)

        result = await svc.find_many(MagicMock(), None, 2, 2)

        assert result.has_next_page is False

    async def test_ids_filter_passed_through(self) -> None:
        repo = AsyncMock()
        repo.find_many.return_value = []
        repo.count.return_value = 0
        svc = UserDirectoryService(repo=repo)
        db = MagicMock()

        result = await svc.find_many(db, ["a", "b"])

        repo.find_many.assert_awaited_once_with(db, ["a", "b"], 0, 10)
        repo.count.assert_awaited_once_with(db, ["a", "b"])
        assert result.users == []

    async def test_serializes_camel_case(self) -> None:
        repo = AsyncMock()
        repo.find_many.return_value = [_make_account(1, balance=12345)]
        repo.count.return_value = 1
        svc = UserDirectoryService(repo=repo)

        result = await svc.find_many(MagicMock(), None)
        dumped = result.model_dump(mode="json", by_alias=True)

        assert dumped["hasNextPage"] is False
        assert dumped["totalCount"] == 1
        assert dumped["users"][0]["balanceDisplay"] == "$123.45"
        assert dumped["users"][0]["birthdate"] == "1990-01-01"
        assert "passwordHash" not in dumped["users"][0]


class TestGetProfile:
    async def test_returns_profile(self) -> None:
        repo = AsyncMock()
        repo.find_by_id.return_value = _make_account(1)
        svc = UserDirectoryService(repo=repo)

        profile = await svc.get_profile(MagicMock(), "00000000-0000-0000-0000-000000000001")

        assert profile.balance == 10000
        assert profile.created_at == "2026-01-01T00:00:00+00:00"

    async def test_missing_account(self) -> None:
        repo = AsyncMock()
        repo.find_by_id.return_value = None
        svc = UserDirectoryService(repo=repo)

        with pytest.raises(AccountNotFoundError):
            await svc.get_profile(MagicMock(), "missing")
