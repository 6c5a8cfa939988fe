"""Tests for record encoding and decoding."""

import logging
from datetime import date
from decimal import Decimal

import pytest

from dimob_gen.encoding import RecordEncoder, decode_record, normalize_text
from dimob_gen.encoding import encoder as encoder_module
from dimob_gen.exceptions import (
    EncodingOverflowError,
    FieldValueError,
    LayoutError,
    RecordLengthInvariantError,
)
from dimob_gen.layout import LAYOUT_V1
from dimob_gen.models import RecordType, WarningCode


def _trailer_values(**overrides) -> dict:
    values = {
        "declarant_tax_id": "11222333000181",
        "fiscal_year": 2024,
        "detail_count": 1,
        "total_gross": Decimal("2800.00"),
        "total_net": Decimal("2800.00"),
    }
    values.update(overrides)
    return values


def _transaction_values(**overrides) -> dict:
    values = {
        "declarant_tax_id": "11222333000181",
        "fiscal_year": 2024,
        "sequence": 1,
        "owner_tax_id": "52998224725",
        "owner_name": "José da Silva",
        "tenant_tax_id": "11144477735",
        "tenant_name": "Maria Souza",
        "contract_id": "c-001",
        "contract_start_date": date(2023, 1, 10),
        "gross_income": Decimal("2800.00"),
        "commission_total": Decimal("0.00"),
        "deduction_total": Decimal("0.00"),
        "net_amount": Decimal("2800.00"),
        "projected_amount": Decimal("0.00"),
        "property_type": "1",
        "property_address": "Av Paulista, 100 - Bela Vista",
        "property_postal_code": "01310100",
        "property_city": "São Paulo",
        "property_state": "SP",
    }
    for month in range(1, 13):
        values[f"income_{month:02d}"] = Decimal("0.00")
    values["income_03"] = Decimal("2800.00")
    values.update(overrides)
    return values


@pytest.fixture
def encoder() -> RecordEncoder:
    return RecordEncoder(LAYOUT_V1)


class TestNormalizeText:
    """Tests for normalize_text."""

    def test_strips_accents_and_uppercases(self) -> None:
        assert normalize_text("São João da Conceição") == "SAO JOAO DA CONCEICAO"

    def test_control_characters_and_pipes(self) -> None:
        assert normalize_text("Rua A|Bloco\tB\r\n12") == "RUA A BLOCO B 12"

    def test_collapses_spaces(self) -> None:
        assert normalize_text("  Av   Paulista  ") == "AV PAULISTA"

    def test_drops_non_ascii(self) -> None:
        assert normalize_text("Loja № 5 ★") == "LOJA NO 5"

    def test_none(self) -> None:
        assert normalize_text(None) == ""


class TestRecordEncoder:
    """Tests for RecordEncoder."""

    def test_header(self, encoder: RecordEncoder) -> None:
        record = encoder.encode(RecordType.HEADER, {})

        assert len(record.line) == 374
        assert record.line.startswith("DIMOB")
        assert record.line[5:].strip() == ""

    def test_amount_with_implied_decimals(self, encoder: RecordEncoder) -> None:
        record = encoder.encode(RecordType.TRANSACTION_DETAIL, _transaction_values())
        layout = LAYOUT_V1.record(RecordType.TRANSACTION_DETAIL)

        assert len(record.line) == 613
        assert layout.field("gross_income").slice_of(record.line) == "000000280000"
        assert layout.field("income_03").slice_of(record.line) == "000000280000"
        assert layout.field("income_04").slice_of(record.line) == "000000000000"
        assert layout.field("contract_start_date").slice_of(record.line) == "20230110"
        assert layout.field("owner_name").slice_of(record.line) == "JOSE DA SILVA".ljust(60)
        assert record.line[:3] == "R02"
        assert record.warnings == []

    def test_digit_strings_written_literally(self, encoder: RecordEncoder) -> None:
        record = encoder.encode(RecordType.TRAILER, _trailer_values(declarant_tax_id="01222333000181"))

        assert record.line[2:16] == "01222333000181"

    def test_too_many_decimals(self, encoder: RecordEncoder) -> None:
        with pytest.raises(FieldValueError, match="decimal places") as exc_info:
            encoder.encode(RecordType.TRAILER, _trailer_values(total_net=Decimal("10.005")))

        assert exc_info.value.field_name == "total_net"
        assert exc_info.value.record_type == "T9"

    @pytest.mark.parametrize("value", [Decimal("-1.00"), -1, True, None, 1.5, "12a", "1²", "\u0661\u0662"])
    def test_rejects_bad_numeric_values(self, encoder: RecordEncoder, value) -> None:
        with pytest.raises(FieldValueError):
            encoder.encode(RecordType.TRAILER, _trailer_values(total_gross=value))

    def test_numeric_overflow(self, encoder: RecordEncoder) -> None:
        with pytest.raises(EncodingOverflowError, match="total_gross"):
            encoder.encode(RecordType.TRAILER, _trailer_values(total_gross=Decimal("10000000000000.00")))

    def test_largest_amount_fits(self, encoder: RecordEncoder) -> None:
        record = encoder.encode(RecordType.TRAILER, _trailer_values(total_gross=Decimal("9999999999999.99")))

        assert record.line[28:43] == "999999999999999"

    def test_date_required(self, encoder: RecordEncoder) -> None:
        with pytest.raises(FieldValueError, match="date required"):
            encoder.encode(RecordType.TRANSACTION_DETAIL, _transaction_values(contract_start_date="2023-01-10"))

    def test_name_overflow_raises(self, encoder: RecordEncoder) -> None:
        with pytest.raises(EncodingOverflowError, match="tenant_name"):
            encoder.encode(RecordType.TRANSACTION_DETAIL, _transaction_values(tenant_name="B" * 61))

    def test_address_overflow_truncates_with_warning(self, encoder: RecordEncoder, caplog) -> None:
        caplog.set_level(logging.WARNING, logger="dimob_gen.encoding.encoder")

        record = encoder.encode(
            RecordType.TRANSACTION_DETAIL, _transaction_values(property_address="X" * 130), "c-001"
        )

        spec = LAYOUT_V1.record(RecordType.TRANSACTION_DETAIL).field("property_address")
        assert spec.slice_of(record.line) == "X" * 120
        assert len(record.line) == 613
        assert len(record.warnings) == 1
        assert record.warnings[0].code is WarningCode.FIELD_TRUNCATED
        assert record.warnings[0].entity_id == "c-001"
        assert "Truncating R02.property_address" in caplog.text

    def test_constants_ignore_values(self, encoder: RecordEncoder) -> None:
        record = encoder.encode(RecordType.TRAILER, _trailer_values(record_type="XX"))

        assert record.line.startswith("T9")

    def test_length_invariant(self, encoder: RecordEncoder, monkeypatch) -> None:
        monkeypatch.setattr(encoder_module, "_pad", lambda spec, value: value)

        with pytest.raises(RecordLengthInvariantError):
            encoder.encode(RecordType.HEADER, {})


class TestDecodeRecord:
    """Tests for decode_record."""

    def test_transaction_detail(self, encoder: RecordEncoder) -> None:
        line = encoder.encode(RecordType.TRANSACTION_DETAIL, _transaction_values()).line

        decoded = decode_record(LAYOUT_V1, RecordType.TRANSACTION_DETAIL, line)

        assert decoded["sequence"] == 1
        assert decoded["gross_income"] == Decimal("2800.00")
        assert decoded["income_03"] == Decimal("2800.00")
        assert decoded["contract_start_date"] == date(2023, 1, 10)
        assert decoded["tenant_name"] == "MARIA SOUZA"
        assert decoded["property_city"] == "SAO PAULO"
        assert decoded["reserved"] == ""

    def test_ignores_terminator(self, encoder: RecordEncoder) -> None:
        line = encoder.encode(RecordType.TRAILER, _trailer_values()).line

        decoded = decode_record(LAYOUT_V1, RecordType.TRAILER, line + "\r\n")

        assert decoded["detail_count"] == 1
        assert decoded["total_net"] == Decimal("2800.00")

    def test_wrong_length(self) -> None:
        with pytest.raises(LayoutError, match="expected 100"):
            decode_record(LAYOUT_V1, RecordType.TRAILER, "T9")
