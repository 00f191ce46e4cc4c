"""003: create transfers table

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE transfers (
            id          UUID            PRIMARY KEY,
            from_id     UUID            NOT NULL REFERENCES accounts (id),
            to_id       UUID            NOT NULL REFERENCES accounts (id),
            amount      BIGINT          NOT NULL,
            created_at  TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_transfers_amount_gt_0     CHECK (amount > 0),
            CONSTRAINT ck_transfers_distinct_ends   CHECK (from_id <> to_id)
        );
    """)
    op.execute("CREATE INDEX idx_transfers_from_time ON transfers (from_id, created_at DESC, id DESC);")
    op.execute("CREATE INDEX idx_transfers_to_time ON transfers (to_id, created_at DESC, id DESC);")
    op.execute("COMMENT ON TABLE transfers IS 'Transfer ledger: append-only, never updated or deleted; cents';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS transfers CASCADE;")
