"""Tests for account and transfer domain dataclasses."""

import dataclasses
import uuid

import pytest

from src.tl_account.domain.models import Account
from src.tl_transfer.domain.models import Transfer


class TestAccount:
    def test_defaults(self) -> None:
        account = Account(id="a", username="01012345678", balance=10000)
        assert account.version == 0
        assert account.birthdate is None
        assert account.created_at is None

    def test_keeps_password_hash(self) -> None:
        account = Account(id="a", username="u", balance=0, password_hash="$2b$10$x")
        assert account.password_hash == "$2b$10$x"


class TestTransfer:
    def test_create_assigns_uuid(self) -> None:
        transfer = Transfer.create("a", "b", 100)
        assert uuid.UUID(transfer.id)
        assert transfer.created_at is None
        assert (transfer.from_id, transfer.to_id, transfer.amount) == ("a", "b", 100)

    def test_ids_are_unique(self) -> None:
        assert Transfer.create("a", "b", 1).id != Transfer.create("a", "b", 1).id

    def test_is_immutable(self) -> None:
        transfer = Transfer.create("a", "b", 100)
        with pytest.raises(dataclasses.FrozenInstanceError):
            transfer.amount = 1  # type: ignore[misc]
