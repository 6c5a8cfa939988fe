"""Fiscal aggregation of payments, commissions and deductions per contract."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from dimob_gen.engine.adjustment import HUNDRED, adjust, round2
from dimob_gen.engine.eligibility import fiscal_year_bounds
from dimob_gen.models import (
    AggregateDetail,
    Commission,
    Contract,
    Deduction,
    FinancialPolicy,
    GenerationWarning,
    Payment,
    PaymentStatus,
    Property,
    Tenant,
    WarningCode,
)
from dimob_gen.models.declaration import ZERO

logger = logging.getLogger(__name__)


def allocate_pro_rata(amount: Decimal, weights: list[Decimal]) -> list[Decimal]:
    """Split ``amount`` across targets in proportion to ``weights``.

    Shares are rounded half-up to cents; the last target absorbs the
    rounding remainder so the shares always sum to ``amount``. When every
    weight is zero the split is equal.
    """
    if not weights:
        return []
    total = sum(weights, ZERO)
    if total <= 0:
        weights = [Decimal("1")] * len(weights)
        total = Decimal(len(weights))
    shares = [round2(amount * w / total) for w in weights[:-1]]
    shares.append(amount - sum(shares, ZERO))
    return shares


@dataclass
class AggregationOutcome:
    """Details built for one owner plus the warnings raised on the way."""

    details: list[AggregateDetail] = field(default_factory=list)
    warnings: list[GenerationWarning] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.details


class FiscalAggregator:
    """Collapse an owner's fiscal-year movements into one detail per contract.

    Paid payments feed settled gross income. Open payments are adjusted for
    penalty and interest as of ``reference_date`` and feed the separate
    projected bucket only. Canceled payments are ignored.
    """

    def __init__(self, policy: FinancialPolicy, reference_date: date) -> None:
        self.policy = policy
        self.reference_date = reference_date

    def aggregate(
        self,
        owner_id: str,
        year: int,
        contracts: list[Contract],
        payments_by_contract: dict[str, list[Payment]],
        tenants: dict[str, Tenant | None],
        properties: dict[str, Property | None],
        commissions: list[Commission],
        deductions: list[Deduction],
    ) -> AggregationOutcome:
        """Build the aggregate details of one owner for ``year``.

        Parameters
        ----------
        owner_id : str
            Owner being declared.
        year : int
            Fiscal year.
        contracts : list[Contract]
            Eligible contracts of the owner.
        payments_by_contract : dict[str, list[Payment]]
            Payments of each contract (any due date; filtered to ``year`` here).
        tenants, properties : dict
            Snapshots keyed by id; missing entities map to ``None``.
        commissions, deductions : list
            Owner's adjustment records for the year.

        Returns
        -------
        AggregationOutcome
            One detail per contract, ordered by contract id.
        """
        outcome = AggregationOutcome()
        start, end = fiscal_year_bounds(year)

        for contract in sorted(contracts, key=lambda c: c.contract_id):
            detail = AggregateDetail(
                owner_id=owner_id,
                contract_id=contract.contract_id,
                fiscal_year=year,
                contract=contract,
                tenant=tenants.get(contract.tenant_id),
                property=properties.get(contract.property_id),
            )
            in_year = [
                p for p in payments_by_contract.get(contract.contract_id, [])
                if start <= p.due_date <= end
            ]
            self._collect_payments(detail, in_year)
            detail.gross_income = round2(detail.gross_income)
            detail.monthly_income = [round2(v) for v in detail.monthly_income]
            detail.administration_fee = round2(
                detail.gross_income * contract.administration_fee_percent / HUNDRED
            )
            outcome.details.append(detail)

        if outcome.is_empty:
            return outcome

        commission_shares = self._distribute(
            outcome.details,
            [(c.contract_id, c.amount) for c in commissions if c.active and c.competency_date.year == year],
        )
        deduction_shares = self._distribute(
            outcome.details,
            [(d.contract_id, d.amount) for d in deductions if d.active and d.competency_date.year == year],
        )

        for detail, commission, deduction in zip(outcome.details, commission_shares, deduction_shares):
            detail.commission_total = round2(detail.administration_fee + commission)
            detail.deduction_total = round2(deduction)
            net = detail.gross_income - detail.commission_total - detail.deduction_total
            if net < 0:
                logger.warning(
                    "Net amount of contract %s would be %s; clamping to zero", detail.contract_id, net
                )
                outcome.warnings.append(
                    GenerationWarning(
                        code=WarningCode.NEGATIVE_NET_CLAMPED,
                        entity="Contract",
                        entity_id=detail.contract_id,
                        message=f"Commissions and deductions exceed gross income by {-net}",
                    )
                )
                net = ZERO
            detail.net_amount = round2(net)

        logger.debug("Aggregated %d details for owner %s, year %d", len(outcome.details), owner_id, year)
        return outcome

    def _collect_payments(self, detail: AggregateDetail, payments: list[Payment]) -> None:
        for payment in sorted(payments, key=lambda p: (p.due_date, p.payment_id)):
            if payment.status is PaymentStatus.PAID:
                amount = payment.settled_amount
                detail.gross_income += amount
                detail.monthly_income[payment.due_date.month - 1] += amount
                detail.payment_ids.append(payment.payment_id)
            elif payment.status is PaymentStatus.OPEN:
                result = adjust(payment.amount, payment.due_date, self.reference_date, self.policy)
                detail.projected_amount += result.final_amount
                detail.penalty_total += result.penalty
                detail.interest_total += result.interest

    @staticmethod
    def _distribute(
        details: list[AggregateDetail],
        entries: list[tuple[str | None, Decimal]],
    ) -> list[Decimal]:
        """Per-detail totals of linked entries plus a pro-rata share of unlinked ones."""
        index = {d.contract_id: i for i, d in enumerate(details)}
        totals = [ZERO] * len(details)
        unlinked = ZERO
        for contract_id, amount in entries:
            if contract_id is not None and contract_id in index:
                totals[index[contract_id]] += amount
            else:
                unlinked += amount
        if unlinked:
            shares = allocate_pro_rata(unlinked, [d.gross_income for d in details])
            totals = [t + s for t, s in zip(totals, shares)]
        return totals
