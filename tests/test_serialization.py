"""Tests for sink serialization utilities."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from dimob_gen.models import (
    Address,
    AggregateDetail,
    Contract,
    ContractStatus,
    DeclarationResult,
    PaymentStatus,
    PipelineStage,
    ResultStatus,
)
from dimob_gen.sinks.serialization import detail_to_dict, result_to_dict, serialize_value, to_dict


def _detail() -> AggregateDetail:
    contract = Contract("c-001", "prop-c-001", "owner-001", "tenant-c-001", date(2023, 1, 10), None,
                        Decimal("2800.00"), Decimal("10"), ContractStatus.ACTIVE)
    detail = AggregateDetail("owner-001", "c-001", 2024, contract, None, None,
                             gross_income=Decimal("2800.00"), net_amount=Decimal("2520.00"))
    detail.payment_ids.append("pay-1")
    return detail


class TestSerializeValue:
    """Tests for serialize_value."""

    def test_decimal_keeps_cents(self) -> None:
        assert serialize_value(Decimal("2800.00")) == "2800.00"

    def test_enum(self) -> None:
        assert serialize_value(PaymentStatus.PAID) == "PAID"

    def test_dates(self) -> None:
        assert serialize_value(date(2024, 3, 10)) == "2024-03-10"
        assert serialize_value(datetime(2024, 3, 10, 8, 30)) == "2024-03-10T08:30:00"

    def test_nested(self) -> None:
        value = {"amounts": [Decimal("1.50"), Decimal("2.00")], "status": (ContractStatus.ACTIVE,)}

        assert serialize_value(value) == {"amounts": ["1.50", "2.00"], "status": ["ACTIVE"]}

    def test_passthrough(self) -> None:
        assert serialize_value(None) is None
        assert serialize_value(3) == 3


class TestToDict:
    """Tests for to_dict."""

    def test_dataclass(self) -> None:
        address = Address("Av Paulista", "100", "Bela Vista", "São Paulo", "SP", "01310-100")

        data = to_dict(address)

        assert data["street"] == "Av Paulista"
        assert data["country"] == "BR"

    def test_nested_dataclass(self) -> None:
        @dataclass
        class Wrapper:
            amount: Decimal
            address: Address

        data = to_dict(Wrapper(Decimal("1.00"), Address("R", "1", "B", "C", "SP", "01001000")))

        assert data == {
            "amount": "1.00",
            "address": {
                "street": "R",
                "number": "1",
                "neighborhood": "B",
                "city": "C",
                "state": "SP",
                "postal_code": "01001000",
                "complement": "",
                "country": "BR",
            },
        }

    def test_other_objects(self) -> None:
        assert to_dict(42) == {"value": "42"}


class TestResultToDict:
    """Tests for detail_to_dict and result_to_dict."""

    def test_detail(self) -> None:
        data = detail_to_dict(_detail())

        assert data["contract_id"] == "c-001"
        assert data["tenant_id"] == "tenant-c-001"
        assert data["gross_income"] == "2800.00"
        assert data["net_amount"] == "2520.00"
        assert data["monthly_income"] == ["0.00"] * 12
        assert data["payment_ids"] == ["pay-1"]

    def test_result(self) -> None:
        result = DeclarationResult("owner-001", 2024, ResultStatus.EMPTY, PipelineStage.EMPTY)
        result.details.append(_detail())

        data = result_to_dict(result)

        assert data["status"] == "EMPTY"
        assert data["stage"] == "EMPTY"
        assert data["reference_date"] is None
        assert len(data["details"]) == 1

    def test_result_without_details(self) -> None:
        result = DeclarationResult("owner-001", 2024, ResultStatus.EMPTY, PipelineStage.EMPTY)

        assert "details" not in result_to_dict(result, include_details=False)
