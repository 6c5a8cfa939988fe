"""Tests for declaration file assembly."""

from datetime import date
from decimal import Decimal

import pytest

from dimob_gen.encoding import FileAssembler, decode_record
from dimob_gen.encoding import assembler as assembler_module
from dimob_gen.exceptions import LayoutError
from dimob_gen.layout import LAYOUT_V1
from dimob_gen.models import (
    Address,
    AggregateDetail,
    Contract,
    ContractStatus,
    Property,
    RecordType,
    Tenant,
    WarningCode,
)


def _detail(contract_id: str, gross: str, net: str, projected: str = "0.00") -> AggregateDetail:
    contract = Contract(contract_id, f"prop-{contract_id}", "owner-001", f"tenant-{contract_id}",
                        date(2023, 1, 10), None, Decimal("2800.00"), Decimal("0"), ContractStatus.ACTIVE)
    address = Address("Av Paulista", "100", "Bela Vista", "São Paulo", "SP", "01310-100")
    detail = AggregateDetail(
        owner_id="owner-001",
        contract_id=contract_id,
        fiscal_year=2024,
        contract=contract,
        tenant=Tenant(f"tenant-{contract_id}", "Maria Souza", "11144477735"),
        property=Property(f"prop-{contract_id}", "owner-001", address),
        gross_income=Decimal(gross),
        net_amount=Decimal(net),
        projected_amount=Decimal(projected),
    )
    detail.monthly_income[0] = Decimal(gross)
    return detail


@pytest.fixture
def details() -> list[AggregateDetail]:
    return [_detail("c-002", "1000.00", "900.00"), _detail("c-001", "2800.00", "2800.00", "2883.72")]


class TestFileAssembler:
    """Tests for FileAssembler."""

    def test_record_order(self, declarant, owner, details) -> None:
        assembled = FileAssembler(LAYOUT_V1).assemble(declarant, owner, details, 2024)

        prefixes = ["DIMOB", "R01", "R02", "R02", "T9"]
        assert len(assembled.lines) == len(prefixes)
        assert all(line.startswith(prefix) for line, prefix in zip(assembled.lines, prefixes))
        assert assembled.record_counts == {"HEADER": 1, "R01": 1, "R02": 2, "T9": 1}

    def test_crlf_after_every_record(self, declarant, owner, details) -> None:
        payload = FileAssembler(LAYOUT_V1).assemble(declarant, owner, details, 2024).payload

        assert payload.endswith("\r\n")
        assert payload.count("\r\n") == 5
        assert "\n" not in payload.replace("\r\n", "")
        lengths = [len(line) for line in payload.split("\r\n")[:-1]]
        assert lengths == [374, 472, 613, 613, 100]

    def test_details_sorted_and_numbered(self, declarant, owner, details) -> None:
        lines = FileAssembler(LAYOUT_V1).assemble(declarant, owner, details, 2024).lines

        first = decode_record(LAYOUT_V1, RecordType.TRANSACTION_DETAIL, lines[2])
        second = decode_record(LAYOUT_V1, RecordType.TRANSACTION_DETAIL, lines[3])
        assert (first["contract_id"], first["sequence"]) == ("c-001", 1)
        assert (second["contract_id"], second["sequence"]) == ("c-002", 2)

    def test_trailer_totals(self, declarant, owner, details) -> None:
        lines = FileAssembler(LAYOUT_V1).assemble(declarant, owner, details, 2024).lines

        trailer = decode_record(LAYOUT_V1, RecordType.TRAILER, lines[-1])
        assert trailer["detail_count"] == 2
        assert trailer["total_gross"] == Decimal("3800.00")
        assert trailer["total_net"] == Decimal("3700.00")
        assert trailer["declarant_tax_id"] == 11222333000181
        assert trailer["fiscal_year"] == 2024

    def test_owner_detail_fields(self, declarant, owner, details) -> None:
        lines = FileAssembler(LAYOUT_V1).assemble(declarant, owner, details, 2024).lines

        r01 = decode_record(LAYOUT_V1, RecordType.OWNER_DETAIL, lines[1])
        assert r01["declarant_name"] == "IMOBILIARIA EXEMPLO LTDA"
        assert r01["owner_tax_id"] == "52998224725"
        assert r01["owner_name"] == "JOSE DA SILVA"
        assert r01["municipality_code"] == 3550308
        assert r01["responsible_tax_id"] == 12345678909

    def test_projected_zero_by_default(self, declarant, owner, details) -> None:
        lines = FileAssembler(LAYOUT_V1).assemble(declarant, owner, details, 2024).lines

        r02 = decode_record(LAYOUT_V1, RecordType.TRANSACTION_DETAIL, lines[2])
        assert r02["projected_amount"] == Decimal("0")

    def test_projected_encoded_on_request(self, declarant, owner, details) -> None:
        lines = FileAssembler(LAYOUT_V1, encode_projected=True).assemble(declarant, owner, details, 2024).lines

        r02 = decode_record(LAYOUT_V1, RecordType.TRANSACTION_DETAIL, lines[2])
        assert r02["projected_amount"] == Decimal("2883.72")

    def test_truncation_warnings_collected(self, declarant, owner) -> None:
        detail = _detail("c-001", "100.00", "100.00")
        detail.property.address.street = "Rua " + "Muito Longa " * 12

        assembled = FileAssembler(LAYOUT_V1).assemble(declarant, owner, [detail], 2024)

        assert [w.code for w in assembled.warnings] == [WarningCode.FIELD_TRUNCATED]
        assert assembled.warnings[0].entity_id == "c-001"

    def test_deterministic(self, declarant, owner, details) -> None:
        assembler = FileAssembler(LAYOUT_V1)

        first = assembler.assemble(declarant, owner, details, 2024).payload
        second = assembler.assemble(declarant, owner, list(reversed(details)), 2024).payload

        assert first == second

    def test_trailer_mismatch_detected(self, declarant, owner, details, monkeypatch) -> None:
        real_decode = assembler_module.decode_record

        def miscounting(layout, record_type, line):
            values = real_decode(layout, record_type, line)
            values["detail_count"] += 1
            return values

        monkeypatch.setattr(assembler_module, "decode_record", miscounting)

        with pytest.raises(LayoutError, match="Trailer declares 3 detail records, 2 were emitted"):
            FileAssembler(LAYOUT_V1).assemble(declarant, owner, details, 2024)
