"""Commission, deduction and late-payment policy models."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from dimob_gen.models.enums import CommissionCategory, DeductionType


@dataclass
class Commission:
    """Commission paid outside the payment schedule (e.g. a partner broker)."""

    commission_id: str
    owner_id: str
    beneficiary_tax_id: str
    beneficiary_name: str
    amount: Decimal
    competency_date: date
    category: CommissionCategory = CommissionCategory.BROKERAGE
    contract_id: str | None = None
    withheld_pis: Decimal = Decimal("0")
    withheld_cofins: Decimal = Decimal("0")
    withheld_inss: Decimal = Decimal("0")
    withheld_ir: Decimal = Decimal("0")
    description: str = ""
    active: bool = True


@dataclass
class Deduction:
    """Amount deducted from the owner's income (discount, repair, ...)."""

    deduction_id: str
    owner_id: str
    deduction_type: DeductionType
    amount: Decimal
    competency_date: date
    description: str = ""
    contract_id: str | None = None
    tenant_tax_id: str | None = None
    active: bool = True


@dataclass(frozen=True)
class FinancialPolicy:
    """Late-payment policy of a declarant company."""

    penalty_rate_percent: Decimal  # Flat, applied once
    daily_interest_rate_percent: Decimal
    grace_period_days: int
    max_interest_days: int
    # Stored setting keys that were missing or invalid and took the default
    defaulted_settings: tuple[str, ...] = field(default=(), compare=False)


# 2% penalty, 0.033% per day (about 1% a month), no grace period, one year cap
DEFAULT_POLICY = FinancialPolicy(
    penalty_rate_percent=Decimal("2.0"),
    daily_interest_rate_percent=Decimal("0.033"),
    grace_period_days=0,
    max_interest_days=365,
)
