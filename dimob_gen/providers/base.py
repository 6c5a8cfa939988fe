"""Read-only data provider contract consumed by the declaration pipeline."""

from __future__ import annotations

from datetime import date
from typing import Protocol, runtime_checkable

from dimob_gen.models import (
    Commission,
    Contract,
    Declarant,
    Deduction,
    FinancialPolicy,
    Owner,
    Payment,
    Property,
    Tenant,
)


@runtime_checkable
class DataProvider(Protocol):
    """Typed read accessors over the surrounding application's data.

    Every method returns a fully materialized snapshot (lists, not cursors).
    Implementations must never mutate what they hand out between calls of
    one run.
    """

    def get_declarant_profile(self, company_id: str) -> Declarant | None: ...

    def get_financial_policy(self, company_id: str) -> FinancialPolicy | None: ...

    def get_owner_profile(self, owner_id: str) -> Owner | None: ...

    def get_eligible_contracts(self, owner_id: str, year: int) -> list[Contract]: ...

    def get_payments(self, contract_id: str, start: date, end: date) -> list[Payment]: ...

    def get_commissions(self, owner_id: str, year: int) -> list[Commission]: ...

    def get_deductions(self, owner_id: str, year: int) -> list[Deduction]: ...

    def get_tenant(self, tenant_id: str) -> Tenant | None: ...

    def get_property(self, property_id: str) -> Property | None: ...
