"""Domain models for declaration generation."""

from dimob_gen.models.adjustments import DEFAULT_POLICY, Commission, Deduction, FinancialPolicy
from dimob_gen.models.base import Address
from dimob_gen.models.contract import Contract, Payment, Property
from dimob_gen.models.declaration import (
    AdjustmentResult,
    AggregateDetail,
    DeclarationResult,
    GenerationWarning,
    Violation,
)
from dimob_gen.models.enums import (
    CommissionCategory,
    ContractStatus,
    DeductionType,
    FieldKind,
    Justification,
    PaymentStatus,
    PipelineStage,
    PropertyType,
    RecordType,
    ResultStatus,
    ViolationReason,
    WarningCode,
)
from dimob_gen.models.parties import Declarant, Owner, Tenant

__all__ = [
    "DEFAULT_POLICY",
    "Address",
    "AdjustmentResult",
    "AggregateDetail",
    "Commission",
    "CommissionCategory",
    "Contract",
    "ContractStatus",
    "Declarant",
    "DeclarationResult",
    "Deduction",
    "DeductionType",
    "FieldKind",
    "FinancialPolicy",
    "GenerationWarning",
    "Justification",
    "Owner",
    "Payment",
    "PaymentStatus",
    "PipelineStage",
    "Property",
    "PropertyType",
    "RecordType",
    "ResultStatus",
    "Tenant",
    "Violation",
    "ViolationReason",
    "WarningCode",
]
