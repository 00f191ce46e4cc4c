"""Pydantic schemas and cursor utilities for the transfers API."""

import base64
import json
import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.tl_common.cents import cents_to_display
from src.tl_common.datetime_utils import isoformat_or_empty
from src.tl_transfer.domain.models import Transfer

# ---------------------------------------------------------------------------
# Keyset pagination cursor: (created_at, id) of the last row on the page
# ---------------------------------------------------------------------------


def cursor_encode(created_at: datetime, transfer_id: str) -> str:
    """Encode the last row's sort key into an opaque Base64 cursor string."""
    payload = json.dumps({"ts": created_at.isoformat(), "id": transfer_id})
    return base64.urlsafe_b64encode(payload.encode()).decode()


def cursor_decode(cursor: str | None) -> tuple[datetime, str] | None:
    """Decode a cursor string back to (created_at, id). Returns None on error."""
    if cursor is None:
        return None
    try:
        payload = json.loads(base64.urlsafe_b64decode(cursor.encode()).decode())
        return datetime.fromisoformat(payload["ts"]), str(uuid.UUID(payload["id"]))
    except (ValueError, KeyError, TypeError):
        return None


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class CreateTransferRequest(_CamelModel):
    """Parses types only; business rules live in check_transfer_request()."""

    from_id: str = Field(..., description="Source account id (must be the caller)")
    to_id: str = Field(..., description="Destination account id")
    # strict: no true -> 1, "2500" -> 2500 or 2500.0 -> 2500 coercion
    amount: int = Field(..., strict=True, description="Amount in cents")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class TransferItem(_CamelModel):
    id: str
    from_id: str
    to_id: str
    amount: int
    amount_display: str
    created_at: str  # ISO8601 string

    @classmethod
    def from_transfer(cls, transfer: Transfer) -> "TransferItem":
        return cls(
            id=transfer.id,
            from_id=transfer.from_id,
            to_id=transfer.to_id,
            amount=transfer.amount,
            amount_display=cents_to_display(transfer.amount),
            created_at=isoformat_or_empty(transfer.created_at),
        )


class TransferListResponse(_CamelModel):
    items: list[TransferItem]
    next_cursor: str | None
    has_more: bool
