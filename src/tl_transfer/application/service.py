"""TransferApplicationService: thin composition layer.

create_transfer() applies the caller-ownership rule and delegates the money
movement to TransferExecutor, which owns its own transaction.
list_transfers() is read-only and runs on the request session.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.tl_common.enums import TransferDirection
from src.tl_common.errors import TransferForbiddenError
from src.tl_transfer.application.schemas import (
    TransferItem,
    TransferListResponse,
    cursor_decode,
    cursor_encode,
)
from src.tl_transfer.domain.executor import TransferExecutor
from src.tl_transfer.domain.models import Transfer
from src.tl_transfer.domain.repository import TransferLedgerProtocol
from src.tl_transfer.domain.validation import canonical_account_id
from src.tl_transfer.infrastructure.persistence import TransferLedger


class TransferApplicationService:
    def __init__(
        self,
        executor: TransferExecutor | None = None,
        ledger: TransferLedgerProtocol | None = None,
    ) -> None:
        self._executor = executor or TransferExecutor()
        self._ledger: TransferLedgerProtocol = ledger or TransferLedger()

    async def create_transfer(
        self, caller_id: str, from_id: str, to_id: str, amount: int
    ) -> Transfer:
        # Empty from_id falls through to the executor's INVALID_REQUEST
        if from_id and canonical_account_id(from_id) != canonical_account_id(caller_id):
            raise TransferForbiddenError()
        return await self._executor.execute(from_id, to_id, amount)

    async def list_transfers(
        self,
        db: AsyncSession,
        account_id: str,
        direction: TransferDirection | None,
        cursor: str | None,
        limit: int,
    ) -> TransferListResponse:
        # Fetch limit+1 to detect has_more without a COUNT(*) query
        rows = await self._ledger.list_for_account(
            db, account_id, direction, cursor_decode(cursor), limit + 1
        )
        has_more = len(rows) > limit
        page = rows[:limit]

        next_cursor = None
        if has_more and page and page[-1].created_at is not None:
            next_cursor = cursor_encode(page[-1].created_at, page[-1].id)
        return TransferListResponse(
            items=[TransferItem.from_transfer(t) for t in page],
            next_cursor=next_cursor,
            has_more=has_more,
        )
