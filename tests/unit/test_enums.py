"""Tests for tl_common.enums: values must match API query values."""

from src.tl_common.enums import TransferDirection


class TestTransferDirection:
    def test_is_str(self) -> None:
        assert isinstance(TransferDirection.IN, str)
        assert TransferDirection.IN == "IN"
        assert TransferDirection.OUT == "OUT"

    def test_lookup_by_value(self) -> None:
        assert TransferDirection("OUT") is TransferDirection.OUT

    def test_members(self) -> None:
        assert {d.value for d in TransferDirection} == {"IN", "OUT"}
