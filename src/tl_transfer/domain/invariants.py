"""Ledger reconciliation: balances must be explained by grants + transfers.

INV-A (per account): balance == grant + Σ received − Σ sent
INV-Z (global):      Σ balance == accounts × grant   (transfers are zero-sum)

Both are derived from a single SELECT, so they are checked against one
consistent snapshot.
"""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings

logger = logging.getLogger(__name__)

_RECONCILE_SQL = text("""
    SELECT a.id,
           a.balance,
           COALESCE((SELECT SUM(t.amount) FROM transfers t WHERE t.to_id = a.id), 0)
               AS received,
           COALESCE((SELECT SUM(t.amount) FROM transfers t WHERE t.from_id = a.id), 0)
               AS sent
    FROM accounts a
""")


async def verify_ledger_reconciliation(
    db: AsyncSession, grant: int | None = None
) -> list[str]:
    """Return a list of violation strings (empty when the ledger reconciles)."""
    grant = settings.SIGNUP_BALANCE_CENTS if grant is None else grant
    rows = (await db.execute(_RECONCILE_SQL)).fetchall()

    violations: list[str] = []
    total = 0
    for row in rows:
        total += row.balance
        expected = grant + row.received - row.sent
        if row.balance < 0:
            violations.append(f"INV-A violated: account {row.id} balance {row.balance} < 0")
        if row.balance != expected:
            violations.append(
                f"INV-A violated: account {row.id} balance={row.balance} != "
                f"grant({grant}) + received({row.received}) - sent({row.sent}) = {expected}"
            )

    if total != len(rows) * grant:
        violations.append(
            f"INV-Z violated: sum(balance)={total} != accounts({len(rows)}) * grant({grant})"
        )

    for msg in violations:
        logger.error(msg)
    return violations
