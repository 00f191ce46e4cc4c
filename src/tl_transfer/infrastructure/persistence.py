"""TransferLedger: append-only storage for completed transfers.

append() runs inside the caller's transaction (the executor's), so a failed
insert aborts the balance updates with it. It has no update or
delete method.
"""

from datetime import datetime

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.tl_common.enums import TransferDirection
from src.tl_common.errors import InternalError
from src.tl_transfer.domain.models import Transfer

_INSERT_TRANSFER_SQL = text("""
    INSERT INTO transfers (id, from_id, to_id, amount)
    VALUES (:id, :from_id, :to_id, :amount)
    RETURNING id, from_id, to_id, amount, created_at
""")

# WHERE fragments are fixed strings; only bind parameters carry request data
_DIRECTION_FILTERS = {
    None: "(from_id = :account_id OR to_id = :account_id)",
    TransferDirection.OUT: "from_id = :account_id",
    TransferDirection.IN: "to_id = :account_id",
}
_CURSOR_FILTER = "AND (created_at, id) < (:cursor_ts, :cursor_id)"


def _list_sql(direction: TransferDirection | None, with_cursor: bool) -> str:
    return f"""
        SELECT id, from_id, to_id, amount, created_at
        FROM transfers
        WHERE {_DIRECTION_FILTERS[direction]}
        {_CURSOR_FILTER if with_cursor else ""}
        ORDER BY created_at DESC, id DESC
        LIMIT :limit
    """


def _row_to_transfer(row: object) -> Transfer:
    return Transfer(
        id=str(row.id),  # type: ignore[attr-defined]
        from_id=str(row.from_id),  # type: ignore[attr-defined]
        to_id=str(row.to_id),  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class TransferLedger:
    async def append(self, db: AsyncSession, transfer: Transfer) -> Transfer:
        result = await db.execute(
            _INSERT_TRANSFER_SQL,
            {
                "id": transfer.id,
                "from_id": transfer.from_id,
                "to_id": transfer.to_id,
                "amount": transfer.amount,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Transfer insert returned no rows")
        return _row_to_transfer(row)

    async def list_for_account(
        self,
        db: AsyncSession,
        account_id: str,
        direction: TransferDirection | None,
        cursor: tuple[datetime, str] | None,
        limit: int,
    ) -> list[Transfer]:
        params: dict[str, object] = {"account_id": account_id, "limit": limit}
        if cursor is not None:
            params["cursor_ts"], params["cursor_id"] = cursor
        result = await db.execute(text(_list_sql(direction, cursor is not None)), params)
        return [_row_to_transfer(row) for row in result.fetchall()]
