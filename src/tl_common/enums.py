"""Global enums: must match API query values exactly."""

from enum import Enum


class TransferDirection(str, Enum):
    """Which side of a transfer the listed account is on."""
    IN = "IN"
    OUT = "OUT"
