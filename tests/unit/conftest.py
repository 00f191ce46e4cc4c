"""In-memory stand-ins for the account store, transfer ledger and session.

They reproduce the storage semantics the executor relies on:
  - writes are staged per transaction and only become visible on commit
  - exceptions inside ``begin()`` discard staged writes
  - ``find_by_ids(for_update=True)`` takes per-row locks held until the
    transaction ends; a lock wait longer than ``lock_timeout_ms`` raises the
    same DBAPIError (SQLSTATE 55P03) PostgreSQL would
  - every storage call yields to the event loop so concurrent transfers
    genuinely interleave between their reads and writes
"""

import asyncio
from collections import defaultdict
from collections.abc import Collection
from dataclasses import replace

import pytest
from sqlalchemy.exc import DBAPIError

from src.tl_account.domain.models import Account
from src.tl_common.datetime_utils import utc_now
from src.tl_transfer.domain.executor import TransferExecutor
from src.tl_transfer.domain.models import Transfer


class FakePgError(Exception):
    """Mimics the driver exception SQLAlchemy wraps (exposes ``sqlstate``)."""

    def __init__(self, sqlstate: str) -> None:
        super().__init__(f"sqlstate {sqlstate}")
        self.sqlstate = sqlstate


def make_db_error(sqlstate: str) -> DBAPIError:
    return DBAPIError("-- test statement", None, FakePgError(sqlstate))


class MemoryStore:
    def __init__(self, balances: dict[str, int]) -> None:
        self.balances: dict[str, int] = dict(balances)
        self.transfers: list[Transfer] = []
        self.locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self.commits = 0
        self.rollbacks = 0

    def session(self) -> "MemorySession":
        return MemorySession(self)

    def total(self) -> int:
        return sum(self.balances.values())


class MemorySession:
    def __init__(self, store: MemoryStore) -> None:
        self.store = store
        self.pending_balances: dict[str, int] = {}
        self.pending_transfers: list[Transfer] = []
        self.held_locks: list[asyncio.Lock] = []

    async def __aenter__(self) -> "MemorySession":
        return self

    async def __aexit__(self, *exc_info: object) -> bool:
        self._end()
        return False

    def begin(self) -> "_MemoryTransaction":
        return _MemoryTransaction(self)

    def _end(self) -> None:
        self.pending_balances.clear()
        self.pending_transfers.clear()
        for lock in reversed(self.held_locks):
            lock.release()
        self.held_locks.clear()


class _MemoryTransaction:
    def __init__(self, session: MemorySession) -> None:
        self._session = session

    async def __aenter__(self) -> MemorySession:
        return self._session

    async def __aexit__(self, exc_type: type | None, *exc_info: object) -> bool:
        session = self._session
        if exc_type is None:
            session.store.balances.update(session.pending_balances)
            session.store.transfers.extend(session.pending_transfers)
            session.store.commits += 1
        else:
            session.store.rollbacks += 1
        session._end()
        return False


class MemoryAccountRepository:
    def __init__(self, store: MemoryStore) -> None:
        self._store = store

    async def find_by_ids(
        self,
        db: MemorySession,
        ids: Collection[str],
        for_update: bool = False,
        lock_timeout_ms: int | None = None,
    ) -> list[Account]:
        found = sorted(i for i in set(ids) if i in self._store.balances)
        if for_update:
            for account_id in found:
                lock = self._store.locks[account_id]
                try:
                    if lock_timeout_ms is None:
                        await lock.acquire()
                    else:
                        await asyncio.wait_for(lock.acquire(), lock_timeout_ms / 1000)
                except TimeoutError:
                    raise make_db_error("55P03") from None
                db.held_locks.append(lock)
        await asyncio.sleep(0)
        return [
            Account(
                id=i,
                username=i,
                balance=db.pending_balances.get(i, self._store.balances[i]),
            )
            for i in found
        ]

    async def update_balance(
        self, db: MemorySession, account_id: str, new_balance: int
    ) -> Account:
        await asyncio.sleep(0)
        db.pending_balances[account_id] = new_balance
        return Account(id=account_id, username=account_id, balance=new_balance)


class MemoryTransferLedger:
    def __init__(self, store: MemoryStore) -> None:
        self._store = store
        self.fail_with: BaseException | None = None
        self.delay_seconds = 0.0

    async def append(self, db: MemorySession, transfer: Transfer) -> Transfer:
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        else:
            await asyncio.sleep(0)
        if self.fail_with is not None:
            raise self.fail_with
        stored = replace(transfer, created_at=utc_now())
        db.pending_transfers.append(stored)
        return stored


class MemoryBank:
    """Bundles a store with repositories and builds executors over them."""

    def __init__(self, balances: dict[str, int]) -> None:
        self.store = MemoryStore(balances)
        self.accounts = MemoryAccountRepository(self.store)
        self.ledger = MemoryTransferLedger(self.store)

    def executor(self, **overrides: object) -> TransferExecutor:
        options: dict[str, object] = {
            "max_attempts": 3,
            "retry_backoff_ms": 0,
            "lock_timeout_ms": 1_000,
            "timeout_seconds": 5.0,
        }
        options.update(overrides)
        return TransferExecutor(
            accounts=options.pop("accounts", self.accounts),  # type: ignore[arg-type]
            ledger=options.pop("ledger", self.ledger),  # type: ignore[arg-type]
            session_factory=self.store.session,  # type: ignore[arg-type]
            **options,  # type: ignore[arg-type]
        )

    @property
    def balances(self) -> dict[str, int]:
        return self.store.balances

    @property
    def transfers(self) -> list[Transfer]:
        return self.store.transfers


@pytest.fixture
def make_bank():
    """Factory fixture: ``make_bank({"alice": 200, "bob": 50})``."""
    return MemoryBank


@pytest.fixture
def db_error():
    """Factory fixture: ``db_error("40P01")`` → DBAPIError with that SQLSTATE."""
    return make_db_error
