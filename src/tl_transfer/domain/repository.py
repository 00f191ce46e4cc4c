"""Transfer ledger Protocol: dependency inversion for testability."""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.tl_common.enums import TransferDirection
from src.tl_transfer.domain.models import Transfer


class TransferLedgerProtocol(Protocol):
    async def append(self, db: AsyncSession, transfer: Transfer) -> Transfer: ...

    async def list_for_account(
        self,
        db: AsyncSession,
        account_id: str,
        direction: TransferDirection | None,
        cursor: tuple[datetime, str] | None,
        limit: int,
    ) -> list[Transfer]: ...
