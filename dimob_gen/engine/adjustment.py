"""Late-payment penalty and interest."""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from dimob_gen.models import AdjustmentResult, FinancialPolicy

CENT = Decimal("0.01")
HUNDRED = Decimal("100")


def round2(value: Decimal) -> Decimal:
    """Round to cents, half-up."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def adjust(
    base_amount: Decimal,
    due_date: date,
    reference_date: date,
    policy: FinancialPolicy,
) -> AdjustmentResult:
    """Compute penalty and interest owed on an open amount.

    The penalty is a flat percentage charged once the grace period is
    exhausted; interest accrues per day past the grace period, capped at
    ``policy.max_interest_days``. Penalty and interest are each rounded to
    cents before being added to the base.

    Parameters
    ----------
    base_amount : Decimal
        Scheduled amount of the payment.
    due_date : date
        Payment due date.
    reference_date : date
        Date the amount is evaluated at (usually today).
    policy : FinancialPolicy
        Company late-payment policy.

    Returns
    -------
    AdjustmentResult
        Penalty, interest, final amount and days late.
    """
    days_late = max(0, (reference_date - due_date).days)
    if days_late == 0:
        return AdjustmentResult(base_amount, Decimal("0.00"), Decimal("0.00"), round2(base_amount), 0)

    effective_days = max(0, days_late - policy.grace_period_days)
    if effective_days == 0:
        return AdjustmentResult(
            base_amount, Decimal("0.00"), Decimal("0.00"), round2(base_amount), days_late
        )

    penalty = round2(base_amount * policy.penalty_rate_percent / HUNDRED)
    interest_days = min(effective_days, policy.max_interest_days)
    interest = round2(base_amount * policy.daily_interest_rate_percent / HUNDRED * interest_days)
    final_amount = round2(base_amount + penalty + interest)
    return AdjustmentResult(base_amount, penalty, interest, final_amount, days_late)
