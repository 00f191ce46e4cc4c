"""AccountRepository: concrete implementation of AccountRepositoryProtocol.

Transaction ownership: the CALLER (executor, service or router) is responsible
for starting and committing the transaction. Storage errors (DBAPIError) are
never interpreted here; they propagate unchanged to the caller.

Ids that are not valid UUIDs cannot exist in the table, so they are dropped
before querying instead of letting PostgreSQL reject the cast.
"""

import uuid
from collections.abc import Collection
from datetime import date

from sqlalchemy import bindparam, text
from sqlalchemy.ext.asyncio import AsyncSession

from src.tl_account.domain.models import Account
from src.tl_common.errors import InternalError

_COLUMNS = "id, username, password_hash, birthdate, balance, version, created_at, updated_at"

# ---------------------------------------------------------------------------
# SQL: reads
# ---------------------------------------------------------------------------

_FIND_BY_IDS_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM accounts
    WHERE id IN :ids
    ORDER BY id
""").bindparams(bindparam("ids", expanding=True))

# ORDER BY id makes every caller lock rows in the same order (no deadlock cycles)
_LOCK_BY_IDS_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM accounts
    WHERE id IN :ids
    ORDER BY id
    FOR UPDATE
""").bindparams(bindparam("ids", expanding=True))

_FIND_BY_ID_SQL = text(f"SELECT {_COLUMNS} FROM accounts WHERE id = :id")

_FIND_BY_USERNAME_SQL = text(f"SELECT {_COLUMNS} FROM accounts WHERE username = :username")

_FIND_PAGE_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM accounts
    ORDER BY created_at, id
    OFFSET :skip
    LIMIT :take
""")

_FIND_PAGE_BY_IDS_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM accounts
    WHERE id IN :ids
    ORDER BY created_at, id
    OFFSET :skip
    LIMIT :take
""").bindparams(bindparam("ids", expanding=True))

_COUNT_SQL = text("SELECT COUNT(*) FROM accounts")

_COUNT_BY_IDS_SQL = text(
    "SELECT COUNT(*) FROM accounts WHERE id IN :ids"
).bindparams(bindparam("ids", expanding=True))

# ---------------------------------------------------------------------------
# SQL: writes
# ---------------------------------------------------------------------------

_UPDATE_BALANCE_SQL = text(f"""
    UPDATE accounts
    SET balance = :balance,
        version = version + 1,
        updated_at = NOW()
    WHERE id = :id
    RETURNING {_COLUMNS}
""")

_INSERT_ACCOUNT_SQL = text(f"""
    INSERT INTO accounts (username, password_hash, birthdate, balance)
    VALUES (:username, :password_hash, :birthdate, :balance)
    RETURNING {_COLUMNS}
""")


def _row_to_account(row: object) -> Account:
    return Account(
        id=str(row.id),  # type: ignore[attr-defined]
        username=row.username,  # type: ignore[attr-defined]
        password_hash=row.password_hash,  # type: ignore[attr-defined]
        birthdate=row.birthdate,  # type: ignore[attr-defined]
        balance=row.balance,  # type: ignore[attr-defined]
        version=row.version,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


def _valid_ids(ids: Collection[str]) -> list[uuid.UUID]:
    valid: set[uuid.UUID] = set()
    for raw in ids:
        try:
            valid.add(uuid.UUID(str(raw)))
        except ValueError:
            continue
    return sorted(valid)


class AccountRepository:
    """Concrete repository: raw SQL over the accounts table."""

    async def find_by_ids(
        self,
        db: AsyncSession,
        ids: Collection[str],
        for_update: bool = False,
        lock_timeout_ms: int | None = None,
    ) -> list[Account]:
        """Return the existing accounts among ``ids``, ordered by id.

        With ``for_update`` the rows stay locked until the caller's transaction
        ends; ``lock_timeout_ms`` bounds the wait (SQLSTATE 55P03 on expiry).
        """
        valid = _valid_ids(ids)
        if not valid:
            return []
        if for_update and lock_timeout_ms is not None:
            # SET LOCAL does not accept bind parameters; value is coerced to int
            await db.execute(text(f"SET LOCAL lock_timeout = {int(lock_timeout_ms)}"))
        sql = _LOCK_BY_IDS_SQL if for_update else _FIND_BY_IDS_SQL
        result = await db.execute(sql, {"ids": valid})
        return [_row_to_account(row) for row in result.fetchall()]

    async def update_balance(
        self, db: AsyncSession, account_id: str, new_balance: int
    ) -> Account:
        result = await db.execute(
            _UPDATE_BALANCE_SQL, {"id": account_id, "balance": new_balance}
        )
        row = result.fetchone()
        if row is None:
            raise InternalError(f"Balance update matched no account: {account_id}")
        return _row_to_account(row)

    async def find_by_id(self, db: AsyncSession, account_id: str) -> Account | None:
        if not _valid_ids([account_id]):
            return None
        result = await db.execute(_FIND_BY_ID_SQL, {"id": account_id})
        row = result.fetchone()
        return _row_to_account(row) if row else None

    async def find_by_username(
        self, db: AsyncSession, username: str
    ) -> Account | None:
        result = await db.execute(_FIND_BY_USERNAME_SQL, {"username": username})
        row = result.fetchone()
        return _row_to_account(row) if row else None

    async def create(
        self,
        db: AsyncSession,
        username: str,
        password_hash: str,
        birthdate: date,
        balance: int,
    ) -> Account:
        result = await db.execute(
            _INSERT_ACCOUNT_SQL,
            {
                "username": username,
                "password_hash": password_hash,
                "birthdate": birthdate,
                "balance": balance,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Account insert returned no rows")
        return _row_to_account(row)

    async def find_many(
        self, db: AsyncSession, ids: Collection[str] | None, skip: int, take: int
    ) -> list[Account]:
        if ids is None:
            result = await db.execute(_FIND_PAGE_SQL, {"skip": skip, "take": take})
        else:
            valid = _valid_ids(ids)
            if not valid:
                return []
            result = await db.execute(
                _FIND_PAGE_BY_IDS_SQL, {"ids": valid, "skip": skip, "take": take}
            )
        return [_row_to_account(row) for row in result.fetchall()]

    async def count(self, db: AsyncSession, ids: Collection[str] | None) -> int:
        if ids is None:
            result = await db.execute(_COUNT_SQL)
        else:
            valid = _valid_ids(ids)
            if not valid:
                return 0
            result = await db.execute(_COUNT_BY_IDS_SQL, {"ids": valid})
        return int(result.scalar_one())
