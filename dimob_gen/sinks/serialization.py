"""JSON-ready conversion of declaration results for the report sinks."""

from dataclasses import fields, is_dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

from dimob_gen.models import AggregateDetail, DeclarationResult


def to_dict(obj: Any) -> dict:
    """Convert a dataclass or mapping to a JSON-ready dictionary."""
    if is_dataclass(obj):
        return {f.name: serialize_value(getattr(obj, f.name)) for f in fields(obj)}
    if isinstance(obj, dict):
        return {key: serialize_value(value) for key, value in obj.items()}
    return {"value": str(obj)}


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output.

    Decimals become strings so amounts keep their exact cents; dates and
    datetimes use ISO 8601.
    """
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if is_dataclass(value):
        return to_dict(value)
    if isinstance(value, dict):
        return {key: serialize_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize_value(item) for item in value]
    return value


def detail_to_dict(detail: AggregateDetail) -> dict:
    """Flat view of an aggregate detail, without the entity snapshots."""
    return {
        "contract_id": detail.contract_id,
        "tenant_id": detail.contract.tenant_id,
        "property_id": detail.contract.property_id,
        "gross_income": serialize_value(detail.gross_income),
        "administration_fee": serialize_value(detail.administration_fee),
        "commission_total": serialize_value(detail.commission_total),
        "deduction_total": serialize_value(detail.deduction_total),
        "net_amount": serialize_value(detail.net_amount),
        "projected_amount": serialize_value(detail.projected_amount),
        "penalty_total": serialize_value(detail.penalty_total),
        "interest_total": serialize_value(detail.interest_total),
        "monthly_income": serialize_value(detail.monthly_income),
        "payment_ids": list(detail.payment_ids),
    }


def result_to_dict(result: DeclarationResult, include_details: bool = True) -> dict:
    """Full JSON report of a pipeline run."""
    data = result.to_report()
    data["stage"] = result.stage.value
    data["reference_date"] = serialize_value(result.reference_date)
    if include_details:
        data["details"] = [detail_to_dict(d) for d in result.details]
    return data
