"""Derived models produced by a declaration run."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from dimob_gen.models.contract import Contract, Property
from dimob_gen.models.enums import PipelineStage, ResultStatus, ViolationReason, WarningCode
from dimob_gen.models.parties import Owner, Tenant

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class AdjustmentResult:
    """Outcome of applying a late-payment policy to one open amount."""

    base_amount: Decimal
    penalty: Decimal
    interest: Decimal
    final_amount: Decimal
    days_late: int


@dataclass
class AggregateDetail:
    """One declared (owner, contract, fiscal year) line."""

    owner_id: str
    contract_id: str
    fiscal_year: int
    contract: Contract
    tenant: Tenant | None
    property: Property | None
    gross_income: Decimal = ZERO
    administration_fee: Decimal = ZERO
    commission_total: Decimal = ZERO
    deduction_total: Decimal = ZERO
    net_amount: Decimal = ZERO
    projected_amount: Decimal = ZERO
    penalty_total: Decimal = ZERO
    interest_total: Decimal = ZERO
    monthly_income: list[Decimal] = field(default_factory=lambda: [ZERO] * 12)
    payment_ids: list[str] = field(default_factory=list)

    @property
    def key(self) -> tuple[str, str, int]:
        """Grouping key of the detail."""
        return (self.owner_id, self.contract_id, self.fiscal_year)


@dataclass(frozen=True)
class Violation:
    """A mandatory-data problem that blocks generation."""

    entity: str
    entity_id: str
    field: str
    reason: ViolationReason
    message: str = ""
    contract_id: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        """Structured form for error payloads."""
        return {
            "entity": self.entity,
            "entity_id": self.entity_id,
            "contract_id": self.contract_id,
            "field": self.field,
            "reason": self.reason.value,
            "message": self.message,
        }


@dataclass(frozen=True)
class GenerationWarning:
    """A non-blocking data-quality signal recorded during a run."""

    code: WarningCode
    entity: str
    entity_id: str
    message: str

    def to_dict(self) -> dict[str, str]:
        """Structured form for reports."""
        return {
            "code": self.code.value,
            "entity": self.entity,
            "entity_id": self.entity_id,
            "message": self.message,
        }


@dataclass
class DeclarationResult:
    """Terminal outcome of one owner's pipeline run."""

    owner_id: str
    fiscal_year: int
    status: ResultStatus
    stage: PipelineStage
    payload: str | None = None
    details: list[AggregateDetail] = field(default_factory=list)
    violations: list[Violation] = field(default_factory=list)
    warnings: list[GenerationWarning] = field(default_factory=list)
    record_counts: dict[str, int] = field(default_factory=dict)
    owner: Owner | None = None
    reference_date: date | None = None

    @property
    def success(self) -> bool:
        """True only when a payload was produced."""
        return self.status is ResultStatus.GENERATED

    @property
    def filename(self) -> str:
        """Suggested download filename."""
        return f"DECLARATION_{self.fiscal_year}.txt"

    @property
    def content_type(self) -> str:
        return "text/plain"

    @property
    def payload_bytes(self) -> bytes:
        """Payload encoded for delivery; empty for non-generated results."""
        if self.payload is None:
            return b""
        return self.payload.encode("ascii")

    def to_error_payload(self) -> dict:
        """Structured error body returned when validation rejects the batch."""
        return {
            "success": False,
            "violations": [v.to_dict() for v in self.violations],
        }

    def to_report(self) -> dict:
        """Summary of the run for JSON reports and console output."""
        return {
            "success": self.success,
            "status": self.status.value,
            "owner_id": self.owner_id,
            "fiscal_year": self.fiscal_year,
            "filename": self.filename if self.success else None,
            "record_counts": dict(self.record_counts),
            "violations": [v.to_dict() for v in self.violations],
            "warnings": [w.to_dict() for w in self.warnings],
        }
