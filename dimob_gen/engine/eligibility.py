"""Contract eligibility for a fiscal year."""

from datetime import date

from dimob_gen.models import Contract, ContractStatus, Payment, PaymentStatus


def fiscal_year_bounds(year: int) -> tuple[date, date]:
    """First and last day of a fiscal (calendar) year."""
    return date(year, 1, 1), date(year, 12, 31)


def is_eligible(contract: Contract, payments: list[Payment], year: int) -> bool:
    """Whether a contract belongs in the owner's declaration for ``year``.

    A contract qualifies when it is active, flagged for inclusion and has at
    least one non-canceled payment due within the year.
    """
    if contract.status is not ContractStatus.ACTIVE or not contract.include_in_declaration:
        return False
    start, end = fiscal_year_bounds(year)
    return any(
        start <= p.due_date <= end and p.status is not PaymentStatus.CANCELED
        for p in payments
        if p.contract_id == contract.contract_id
    )


def filter_eligible(
    contracts: list[Contract],
    payments_by_contract: dict[str, list[Payment]],
    year: int,
) -> list[Contract]:
    """Select eligible contracts, ordered by contract id.

    Ineligible contracts are dropped silently; an empty list is a valid
    result meaning there is nothing to declare.
    """
    eligible = [
        c for c in contracts
        if is_eligible(c, payments_by_contract.get(c.contract_id, []), year)
    ]
    return sorted(eligible, key=lambda c: c.contract_id)
