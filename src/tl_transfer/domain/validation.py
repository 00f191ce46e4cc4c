"""Request checks that run before any storage access.

Returns a typed rejection instead of raising, so the boundary decides how to
surface it. Order matters: the first violated rule wins.
"""

import uuid
from enum import Enum


class TransferRejection(str, Enum):
    MISSING_ACCOUNT_ID = "fromId and toId are required"
    SAME_ACCOUNT = "cannot transfer to same user"
    INVALID_AMOUNT = "amount must be an integer number of cents"
    NON_POSITIVE_AMOUNT = "amount must be greater than 0"


def canonical_account_id(raw: str) -> str:
    """Lowercase hyphenated form of a UUID id; anything else is returned as is.

    Non-UUID ids cannot match a stored account and end up as NOT_FOUND.
    """
    if not raw:
        return raw
    try:
        return str(uuid.UUID(raw))
    except ValueError:
        return raw


def check_transfer_request(
    from_id: str | None, to_id: str | None, amount: object
) -> TransferRejection | None:
    if not from_id or not to_id:
        return TransferRejection.MISSING_ACCOUNT_ID
    if from_id == to_id:
        return TransferRejection.SAME_ACCOUNT
    if amount is None:
        return TransferRejection.NON_POSITIVE_AMOUNT
    # bool is an int subclass; True must not move one cent
    if isinstance(amount, bool) or not isinstance(amount, int):
        return TransferRejection.INVALID_AMOUNT
    if amount <= 0:
        return TransferRejection.NON_POSITIVE_AMOUNT
    return None
