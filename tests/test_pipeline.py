"""Tests for the declaration pipeline."""

import threading
from datetime import date
from decimal import Decimal

import pytest

from dimob_gen.config import DimobGenConfig
from dimob_gen.exceptions import ConfigurationError, ProviderError
from dimob_gen.layout import LAYOUT_V1
from dimob_gen.models import (
    Address,
    Owner,
    PaymentStatus,
    PipelineStage,
    RecordType,
    ResultStatus,
    WarningCode,
)
from dimob_gen.pipeline import DeclarationPipeline
from dimob_gen.providers.postgres import parse_policy

COMPANY_ID = "company-001"
OWNER_ID = "owner-001"
REFERENCE_DATE = date(2025, 1, 15)

PAID = PaymentStatus.PAID
OPEN = PaymentStatus.OPEN
CANCELED = PaymentStatus.CANCELED


@pytest.fixture
def pipeline(provider) -> DeclarationPipeline:
    return DeclarationPipeline(provider, COMPANY_ID, reference_date=REFERENCE_DATE)


def _field(line: str, record_type: RecordType, name: str) -> str:
    return LAYOUT_V1.record(record_type).field(name).slice_of(line)


class TestDeclarationPipeline:
    """Tests for DeclarationPipeline.generate."""

    def test_single_paid_lease(self, pipeline, add_lease) -> None:
        add_lease("c-001", [(date(2024, 3, 10), "2800.00", PAID)])

        result = pipeline.generate(OWNER_ID, 2024)

        assert result.status is ResultStatus.GENERATED
        assert result.stage is PipelineStage.COMPLETED
        assert result.success
        assert result.details[0].net_amount == Decimal("2800.00")
        assert result.record_counts == {"HEADER": 1, "R01": 1, "R02": 1, "T9": 1}

        lines = result.payload.split("\r\n")
        assert lines[-1] == ""
        r02, t9 = lines[2], lines[3]
        assert _field(r02, RecordType.TRANSACTION_DETAIL, "net_amount") == "000000280000"
        assert _field(r02, RecordType.TRANSACTION_DETAIL, "income_03") == "000000280000"
        assert _field(t9, RecordType.TRAILER, "detail_count") == "00000001"
        assert result.payload_bytes == result.payload.encode("ascii")
        assert result.filename == "DECLARATION_2024.txt"

    def test_idempotent(self, pipeline, add_lease) -> None:
        add_lease("c-002", [(date(2024, 5, 10), "1500.00", PAID)], tenant_tax_id="98765432100")
        add_lease("c-001", [(date(2024, 3, 10), "2800.00", PAID), (date(2024, 12, 10), "2800.00", OPEN)])

        first = pipeline.generate(OWNER_ID, 2024)
        second = pipeline.generate(OWNER_ID, 2024)

        assert first.payload == second.payload
        assert first.record_counts["R02"] == 2

    def test_open_payment_only_projected(self, pipeline, add_lease) -> None:
        add_lease("c-001", [(date(2024, 3, 10), "2800.00", PAID), (date(2024, 12, 16), "2800.00", OPEN)])

        result = pipeline.generate(OWNER_ID, 2024)

        detail = result.details[0]
        assert detail.gross_income == Decimal("2800.00")
        assert detail.projected_amount == Decimal("2883.72")
        r02 = result.payload.split("\r\n")[2]
        assert _field(r02, RecordType.TRANSACTION_DETAIL, "projected_amount") == "0" * 12

    def test_encode_projected(self, provider, add_lease) -> None:
        add_lease("c-001", [(date(2024, 12, 16), "2800.00", OPEN)])
        pipeline = DeclarationPipeline(provider, COMPANY_ID, reference_date=REFERENCE_DATE, encode_projected=True)

        result = pipeline.generate(OWNER_ID, 2024)

        r02 = result.payload.split("\r\n")[2]
        assert _field(r02, RecordType.TRANSACTION_DETAIL, "projected_amount") == "000000288372"
        assert _field(r02, RecordType.TRANSACTION_DETAIL, "gross_income") == "0" * 12

    def test_nothing_to_declare(self, pipeline, add_lease) -> None:
        add_lease("c-001", [(date(2024, 3, 10), "2800.00", CANCELED)])
        add_lease("c-002", [(date(2023, 3, 10), "2800.00", PAID)])
        add_lease("c-003", [(date(2024, 3, 10), "2800.00", PAID)], include=False)

        result = pipeline.generate(OWNER_ID, 2024)

        assert result.status is ResultStatus.EMPTY
        assert result.stage is PipelineStage.EMPTY
        assert result.payload is None
        assert result.payload_bytes == b""
        assert result.violations == []

    def test_rejected_with_every_violation(self, pipeline, add_lease) -> None:
        add_lease("c-001", [(date(2024, 3, 10), "2800.00", PAID)])
        add_lease("c-002", [(date(2024, 3, 10), "2800.00", PAID)], tenant_tax_id="")
        add_lease("c-003", [(date(2024, 3, 10), "2800.00", PAID)], tenant_tax_id="39053344705")

        result = pipeline.generate(OWNER_ID, 2024)

        assert result.status is ResultStatus.REJECTED
        assert result.stage is PipelineStage.REJECTED
        assert result.payload is None
        assert result.record_counts == {}
        error = result.to_error_payload()
        assert error["success"] is False
        assert error["violations"] == [
            {
                "entity": "Tenant",
                "entity_id": "tenant-c-002",
                "contract_id": "c-002",
                "field": "tax_id",
                "reason": "MISSING_MANDATORY_FIELD",
                "message": "",
            }
        ]

    def test_missing_owner_profile_rejected(self, provider, pipeline, add_lease) -> None:
        provider.add_owner(Owner("owner-002", "Ana Lima", "39053344705"))
        add_lease("c-001", [(date(2024, 3, 10), "2800.00", PAID)], owner_id="owner-002")
        del provider.owners["owner-002"]

        result = pipeline.generate("owner-002", 2024)

        assert result.status is ResultStatus.REJECTED
        assert [(v.entity, v.entity_id) for v in result.violations] == [("Owner", "owner-002")]

    def test_missing_policy_uses_defaults(self, provider, pipeline, add_lease) -> None:
        del provider.policies[COMPANY_ID]
        add_lease("c-001", [(date(2024, 12, 16), "2800.00", OPEN)])

        result = pipeline.generate(OWNER_ID, 2024)

        assert result.status is ResultStatus.GENERATED
        assert result.warnings[0].code is WarningCode.ADJUSTMENT_POLICY_MISSING
        assert result.details[0].projected_amount == Decimal("2883.72")

    def test_partially_defaulted_policy_warns(self, provider, pipeline, add_lease) -> None:
        provider.policies[COMPANY_ID] = parse_policy({"penaltyRate": "2", "dailyInterestRate": "0.033"})
        add_lease("c-001", [(date(2024, 3, 10), "2800.00", PAID)])

        result = pipeline.generate(OWNER_ID, 2024)

        assert result.status is ResultStatus.GENERATED
        assert [w.code for w in result.warnings] == [WarningCode.ADJUSTMENT_POLICY_MISSING]
        assert "gracePeriodDays" in result.warnings[0].message
        assert "maxInterestDays" in result.warnings[0].message

    def test_tenant_name_lost_in_encoding_is_rejected(self, pipeline, add_lease) -> None:
        add_lease("c-001", [(date(2024, 3, 10), "2800.00", PAID)], tenant_name="李伟")

        result = pipeline.generate(OWNER_ID, 2024)

        assert result.status is ResultStatus.REJECTED
        assert result.payload is None
        assert [(v.entity, v.field) for v in result.violations] == [("Tenant", "name")]

    def test_superscript_tax_id_is_rejected_not_raised(self, pipeline, add_lease) -> None:
        add_lease("c-001", [(date(2024, 3, 10), "2800.00", PAID)], tenant_tax_id="1114447773²")

        result = pipeline.generate(OWNER_ID, 2024)

        assert result.status is ResultStatus.REJECTED
        assert [(v.entity, v.field) for v in result.violations] == [("Tenant", "tax_id")]

    def test_incomplete_property_address_warns(self, pipeline, add_lease) -> None:
        address = Address("Rua Sem Numero", "", "Centro", "Curitiba", "PR", "80010-000")
        add_lease("c-001", [(date(2024, 3, 10), "2800.00", PAID)], property_address=address)

        result = pipeline.generate(OWNER_ID, 2024)

        assert result.status is ResultStatus.GENERATED
        assert [w.code for w in result.warnings] == [WarningCode.INCOMPLETE_ADDRESS]

    def test_cancelled_before_start(self, pipeline, add_lease) -> None:
        add_lease("c-001", [(date(2024, 3, 10), "2800.00", PAID)])
        cancel = threading.Event()
        cancel.set()

        result = pipeline.generate(OWNER_ID, 2024, cancel_event=cancel)

        assert result.status is ResultStatus.CANCELLED
        assert result.stage is PipelineStage.CANCELLED
        assert result.payload is None

    def test_cancelled_mid_run(self, provider, pipeline, add_lease) -> None:
        add_lease("c-001", [(date(2024, 3, 10), "2800.00", PAID)])
        cancel = threading.Event()
        original = provider.get_deductions

        def cancelling(owner_id, year):
            cancel.set()
            return original(owner_id, year)

        provider.get_deductions = cancelling

        result = pipeline.generate(OWNER_ID, 2024, cancel_event=cancel)

        assert result.status is ResultStatus.CANCELLED
        assert result.payload is None

    def test_provider_errors_propagate(self, provider, pipeline, add_lease) -> None:
        add_lease("c-001", [(date(2024, 3, 10), "2800.00", PAID)])

        def failing(contract_id, start, end):
            raise ProviderError("database unavailable")

        provider.get_payments = failing

        with pytest.raises(ProviderError, match="database unavailable"):
            pipeline.generate(OWNER_ID, 2024)


class TestGenerateBatch:
    """Tests for DeclarationPipeline.generate_batch."""

    def test_results_in_input_order(self, provider, pipeline, add_lease) -> None:
        provider.add_owner(Owner("owner-002", "Ana Lima", "39053344705"))
        provider.add_owner(Owner("owner-003", "Carlos Dias", "11144477735"))
        add_lease("c-001", [(date(2024, 3, 10), "2800.00", PAID)])
        add_lease("c-002", [(date(2024, 3, 10), "1200.00", PAID)], owner_id="owner-002")

        results = pipeline.generate_batch(["owner-003", "owner-002", OWNER_ID, "owner-002"], 2024)

        assert [r.owner_id for r in results] == ["owner-003", "owner-002", OWNER_ID]
        assert [r.status for r in results] == [ResultStatus.EMPTY, ResultStatus.GENERATED, ResultStatus.GENERATED]
        assert results[1].details[0].gross_income == Decimal("1200.00")

    def test_runs_are_isolated(self, provider, pipeline, add_lease) -> None:
        add_lease("c-001", [(date(2024, 3, 10), "2800.00", PAID)])
        single = pipeline.generate(OWNER_ID, 2024).payload

        batch = pipeline.generate_batch([OWNER_ID], 2024)

        assert batch[0].payload == single


class TestConstruction:
    """Tests for pipeline construction."""

    def test_requires_company(self, provider) -> None:
        with pytest.raises(ConfigurationError):
            DeclarationPipeline(provider, "")

    def test_requires_workers(self, provider) -> None:
        with pytest.raises(ConfigurationError, match="max_workers"):
            DeclarationPipeline(provider, COMPANY_ID, max_workers=0)

    def test_defaults(self, provider) -> None:
        pipeline = DeclarationPipeline(provider, COMPANY_ID)

        assert pipeline.layout is LAYOUT_V1
        assert pipeline.reference_date == date.today()
        assert pipeline.encode_projected is False

    def test_from_config(self, provider) -> None:
        config = DimobGenConfig()
        config.declaration.company_id = COMPANY_ID
        config.declaration.encode_projected = True
        config.declaration.max_workers = 2

        pipeline = DeclarationPipeline.from_config(provider, config, reference_date=REFERENCE_DATE)

        assert pipeline.company_id == COMPANY_ID
        assert pipeline.encode_projected is True
        assert pipeline.max_workers == 2
        assert pipeline.reference_date == REFERENCE_DATE

    def test_from_config_without_company(self, provider) -> None:
        with pytest.raises(ConfigurationError, match="DIMOB_COMPANY_ID"):
            DeclarationPipeline.from_config(provider, DimobGenConfig())

    def test_from_config_unknown_layout(self, provider) -> None:
        config = DimobGenConfig()
        config.declaration.company_id = COMPANY_ID
        config.declaration.layout_version = "v9"

        with pytest.raises(ConfigurationError, match="v9"):
            DeclarationPipeline.from_config(provider, config)
