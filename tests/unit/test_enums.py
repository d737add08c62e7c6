"""Tests for sm_common.enums: values must match DB CHECK constraints."""

from src.sm_common.enums import OrderStatus, TransactionKind, TransactionStatus


class TestAllEnumsAreStr:
    def test_order_status_is_str(self) -> None:
        assert isinstance(OrderStatus.PENDING, str)
        assert OrderStatus.WAITING_CONFIRMATION == "WAITING_CONFIRMATION"

    def test_transaction_kind_is_str(self) -> None:
        assert TransactionKind.PURCHASE == "PURCHASE"


class TestEnumMembers:
    def test_order_statuses(self) -> None:
        assert {s.value for s in OrderStatus} == {
            "PENDING", "WAITING_CONFIRMATION", "COMPLETED", "CANCELED",
        }

    def test_transaction_kinds(self) -> None:
        assert {k.value for k in TransactionKind} == {"DEPOSIT", "WITHDRAWAL", "PURCHASE", "SALE"}

    def test_transaction_statuses(self) -> None:
        assert {s.value for s in TransactionStatus} == {"PENDING", "COMPLETED", "FAILED"}
