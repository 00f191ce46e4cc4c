"""TransferExecutor: the only code path that moves money between accounts.

One attempt = one transaction on a fresh session:
  1. Lock both account rows (SELECT ... ORDER BY id FOR UPDATE, bounded by
     lock_timeout). Every transfer locks in ascending id order regardless of
     direction, so two transfers over the same pair can never deadlock on
     each other.
  2. Check existence and funds against the locked (current) balances.
  3. Write both balances and append the Transfer row.
  4. Commit. Any exception inside the block rolls all three writes back.

Lock-not-available, deadlock and serialization failures are retried on a new
transaction up to ``max_attempts`` times, then surfaced as CONFLICT. Each
attempt runs under an asyncio timeout; expiry surfaces TIMEOUT. Every other
database failure surfaces STORAGE_ERROR. Validation errors are raised before
any session is opened.

Stateless between calls; collaborators are injected at construction.
"""

import asyncio
import logging
from collections.abc import Callable

from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.tl_account.domain.repository import AccountRepositoryProtocol
from src.tl_account.infrastructure.persistence import AccountRepository
from src.tl_common.database import async_session_factory
from src.tl_common.errors import (
    AccountNotFoundError,
    InsufficientBalanceError,
    InvalidTransferError,
    StorageError,
    TransferConflictError,
    TransferTimeoutError,
)
from src.tl_transfer.domain.models import Transfer
from src.tl_transfer.domain.repository import TransferLedgerProtocol
from src.tl_transfer.domain.validation import canonical_account_id, check_transfer_request
from src.tl_transfer.infrastructure.persistence import TransferLedger

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATEs
_CONFLICT_SQLSTATES = frozenset({
    "40001",  # serialization_failure
    "40P01",  # deadlock_detected
    "55P03",  # lock_not_available (lock_timeout expired)
})
_TIMEOUT_SQLSTATES = frozenset({
    "57014",  # query_canceled (statement_timeout)
})


def _sqlstate(exc: DBAPIError) -> str | None:
    orig = exc.orig
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


class TransferExecutor:
    def __init__(
        self,
        accounts: AccountRepositoryProtocol | None = None,
        ledger: TransferLedgerProtocol | None = None,
        session_factory: Callable[[], AsyncSession] | None = None,
        max_attempts: int | None = None,
        retry_backoff_ms: int | None = None,
        lock_timeout_ms: int | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        self._accounts: AccountRepositoryProtocol = accounts or AccountRepository()
        self._ledger: TransferLedgerProtocol = ledger or TransferLedger()
        self._session_factory = session_factory or async_session_factory
        self._max_attempts = max(
            1, max_attempts if max_attempts is not None else settings.TRANSFER_MAX_ATTEMPTS
        )
        self._retry_backoff_ms = (
            retry_backoff_ms if retry_backoff_ms is not None
            else settings.TRANSFER_RETRY_BACKOFF_MS
        )
        self._lock_timeout_ms = (
            lock_timeout_ms if lock_timeout_ms is not None
            else settings.TRANSFER_LOCK_TIMEOUT_MS
        )
        self._timeout_seconds = (
            timeout_seconds if timeout_seconds is not None
            else settings.TRANSFER_TIMEOUT_SECONDS
        )

    async def execute(self, from_id: str, to_id: str, amount: int) -> Transfer:
        """Move ``amount`` cents from ``from_id`` to ``to_id`` atomically.

        Raises:
            InvalidTransferError: empty/identical ids, non-positive amount.
            AccountNotFoundError: either account does not exist.
            InsufficientBalanceError: source balance < amount.
            TransferConflictError: lock contention persisted through every attempt.
            TransferTimeoutError: an attempt exceeded its time budget.
            StorageError: any other database failure.
        """
        # Rows come back keyed by canonical UUID text; compare and look up the same way
        from_id = canonical_account_id(from_id)
        to_id = canonical_account_id(to_id)
        rejection = check_transfer_request(from_id, to_id, amount)
        if rejection is not None:
            raise InvalidTransferError(rejection.value)

        attempt = 0
        while True:
            attempt += 1
            try:
                async with asyncio.timeout(self._timeout_seconds):
                    transfer = await self._attempt(from_id, to_id, amount)
            except TimeoutError:
                logger.warning(
                    "Transfer timed out: from=%s to=%s amount=%d attempt=%d",
                    from_id, to_id, amount, attempt,
                )
                raise TransferTimeoutError() from None
            except DBAPIError as exc:
                state = _sqlstate(exc)
                if state in _TIMEOUT_SQLSTATES:
                    logger.warning("Transfer statement timeout: from=%s to=%s", from_id, to_id)
                    raise TransferTimeoutError() from exc
                if state not in _CONFLICT_SQLSTATES:
                    logger.error("Transfer storage failure: sqlstate=%s", state, exc_info=True)
                    raise StorageError() from exc
                if attempt >= self._max_attempts:
                    logger.warning(
                        "Transfer conflict, giving up: from=%s to=%s attempts=%d",
                        from_id, to_id, attempt,
                    )
                    raise TransferConflictError(attempt) from exc
                logger.warning(
                    "Transfer conflict, retrying: sqlstate=%s attempt=%d/%d",
                    state, attempt, self._max_attempts,
                )
                await asyncio.sleep(self._retry_backoff_ms * attempt / 1000)
                continue
            except SQLAlchemyError as exc:
                logger.error("Transfer storage failure", exc_info=True)
                raise StorageError() from exc

            logger.info(
                "Transfer committed: id=%s from=%s to=%s amount=%d",
                transfer.id, transfer.from_id, transfer.to_id, transfer.amount,
            )
            return transfer

    async def _attempt(self, from_id: str, to_id: str, amount: int) -> Transfer:
        async with self._session_factory() as db, db.begin():
            accounts = await self._accounts.find_by_ids(
                db,
                sorted({from_id, to_id}),
                for_update=True,
                lock_timeout_ms=self._lock_timeout_ms,
            )
            by_id = {account.id: account for account in accounts}
            source = by_id.get(from_id)
            target = by_id.get(to_id)
            if source is None or target is None:
                raise AccountNotFoundError()

            if source.balance < amount:
                raise InsufficientBalanceError(amount, source.balance)

            await self._accounts.update_balance(db, source.id, source.balance - amount)
            await self._accounts.update_balance(db, target.id, target.balance + amount)
            return await self._ledger.append(db, Transfer.create(from_id, to_id, amount))
