"""Enumeration types for declaration entities."""

from enum import Enum


class ContractStatus(str, Enum):
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    TERMINATED = "TERMINATED"


class PaymentStatus(str, Enum):
    OPEN = "OPEN"
    PAID = "PAID"
    CANCELED = "CANCELED"


class PropertyType(str, Enum):
    RESIDENTIAL = "RESIDENTIAL"
    COMMERCIAL = "COMMERCIAL"

    @property
    def code(self) -> str:
        """Single-digit code used in the declaration file."""
        return "1" if self is PropertyType.RESIDENTIAL else "2"


class CommissionCategory(str, Enum):
    BROKERAGE = "BROKERAGE"
    REFERRAL = "REFERRAL"
    ADMINISTRATION = "ADMINISTRATION"
    OTHER = "OTHER"


class DeductionType(str, Enum):
    DISCOUNT = "01"
    REPAIR = "02"
    CONDOMINIUM = "03"
    OTHER = "04"


class RecordType(str, Enum):
    HEADER = "HEADER"
    OWNER_DETAIL = "R01"
    TRANSACTION_DETAIL = "R02"
    TRAILER = "T9"


class FieldKind(str, Enum):
    NUMERIC = "NUMERIC"
    TEXT = "TEXT"
    DATE = "DATE"


class Justification(str, Enum):
    LEFT = "LEFT"
    RIGHT = "RIGHT"


class ViolationReason(str, Enum):
    MISSING_MANDATORY_FIELD = "MISSING_MANDATORY_FIELD"
    INVALID_FORMAT = "INVALID_FORMAT"
    EXCEEDS_FIELD_LENGTH = "EXCEEDS_FIELD_LENGTH"
    NEGATIVE_AMOUNT = "NEGATIVE_AMOUNT"
    NOT_FINITE = "NOT_FINITE"


class WarningCode(str, Enum):
    ADJUSTMENT_POLICY_MISSING = "ADJUSTMENT_POLICY_MISSING"
    NEGATIVE_NET_CLAMPED = "NEGATIVE_NET_CLAMPED"
    FIELD_TRUNCATED = "FIELD_TRUNCATED"
    INCOMPLETE_ADDRESS = "INCOMPLETE_ADDRESS"


class PipelineStage(str, Enum):
    IDLE = "IDLE"
    FILTERING = "FILTERING"
    ADJUSTING = "ADJUSTING"
    AGGREGATING = "AGGREGATING"
    VALIDATING = "VALIDATING"
    ENCODING = "ENCODING"
    ASSEMBLING = "ASSEMBLING"
    COMPLETED = "COMPLETED"
    REJECTED = "REJECTED"
    EMPTY = "EMPTY"
    CANCELLED = "CANCELLED"


class ResultStatus(str, Enum):
    GENERATED = "GENERATED"
    REJECTED = "REJECTED"
    EMPTY = "EMPTY"
    CANCELLED = "CANCELLED"
