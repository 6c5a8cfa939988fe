"""In-memory data provider with referential integrity."""

from dataclasses import dataclass, field
from datetime import date

from dimob_gen.exceptions import ReferentialIntegrityError
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


@dataclass
class InMemoryDataProvider:
    """In-memory store for rental entities with relationship tracking.

    Used by tests, the demo generator and any caller that already holds a
    snapshot of the application's data.
    """

    # Primary entities
    declarants: dict[str, Declarant] = field(default_factory=dict)
    policies: dict[str, FinancialPolicy] = field(default_factory=dict)
    owners: dict[str, Owner] = field(default_factory=dict)
    tenants: dict[str, Tenant] = field(default_factory=dict)
    properties: dict[str, Property] = field(default_factory=dict)
    contracts: dict[str, Contract] = field(default_factory=dict)

    # Movements
    payments: list[Payment] = field(default_factory=list)
    commissions: list[Commission] = field(default_factory=list)
    deductions: list[Deduction] = field(default_factory=list)

    # Relationship indexes
    _owner_contracts: dict[str, list[str]] = field(default_factory=dict)
    _contract_payments: dict[str, list[int]] = field(default_factory=dict)

    def add_declarant(self, declarant: Declarant, policy: FinancialPolicy | None = None) -> None:
        """Add a declarant company and, optionally, its late-payment policy."""
        self.declarants[declarant.company_id] = declarant
        if policy is not None:
            self.policies[declarant.company_id] = policy

    def add_owner(self, owner: Owner) -> None:
        """Add an owner to the store."""
        self.owners[owner.owner_id] = owner
        self._owner_contracts.setdefault(owner.owner_id, [])

    def add_tenant(self, tenant: Tenant) -> None:
        """Add a tenant to the store."""
        self.tenants[tenant.tenant_id] = tenant

    def add_property(self, prop: Property) -> None:
        """Add a property to the store."""
        if prop.owner_id not in self.owners:
            raise ReferentialIntegrityError(f"Owner {prop.owner_id} not found")
        self.properties[prop.property_id] = prop

    def add_contract(self, contract: Contract) -> None:
        """Add a contract to the store."""
        if contract.owner_id not in self.owners:
            raise ReferentialIntegrityError(f"Owner {contract.owner_id} not found")

        if contract.tenant_id not in self.tenants:
            raise ReferentialIntegrityError(f"Tenant {contract.tenant_id} not found")

        if contract.property_id not in self.properties:
            raise ReferentialIntegrityError(f"Property {contract.property_id} not found")

        self.contracts[contract.contract_id] = contract
        self._owner_contracts[contract.owner_id].append(contract.contract_id)
        self._contract_payments[contract.contract_id] = []

    def add_payment(self, payment: Payment) -> None:
        """Add a scheduled payment to the store."""
        if payment.contract_id not in self.contracts:
            raise ReferentialIntegrityError(f"Contract {payment.contract_id} not found")

        idx = len(self.payments)
        self.payments.append(payment)
        self._contract_payments[payment.contract_id].append(idx)

    def add_commission(self, commission: Commission) -> None:
        """Add a commission record to the store."""
        if commission.owner_id not in self.owners:
            raise ReferentialIntegrityError(f"Owner {commission.owner_id} not found")
        if commission.contract_id and commission.contract_id not in self.contracts:
            raise ReferentialIntegrityError(f"Contract {commission.contract_id} not found")
        self.commissions.append(commission)

    def add_deduction(self, deduction: Deduction) -> None:
        """Add a deduction record to the store."""
        if deduction.owner_id not in self.owners:
            raise ReferentialIntegrityError(f"Owner {deduction.owner_id} not found")
        if deduction.contract_id and deduction.contract_id not in self.contracts:
            raise ReferentialIntegrityError(f"Contract {deduction.contract_id} not found")
        self.deductions.append(deduction)

    # Read accessors (DataProvider)
    def get_declarant_profile(self, company_id: str) -> Declarant | None:
        """Get the declarant company."""
        return self.declarants.get(company_id)

    def get_financial_policy(self, company_id: str) -> FinancialPolicy | None:
        """Get the company's late-payment policy, if configured."""
        return self.policies.get(company_id)

    def get_owner_profile(self, owner_id: str) -> Owner | None:
        """Get an owner."""
        return self.owners.get(owner_id)

    def get_eligible_contracts(self, owner_id: str, year: int) -> list[Contract]:
        """Get every contract of an owner; eligibility is decided by the engine."""
        contract_ids = self._owner_contracts.get(owner_id, [])
        return [self.contracts[cid] for cid in contract_ids]

    def get_payments(self, contract_id: str, start: date, end: date) -> list[Payment]:
        """Get payments of a contract due within ``[start, end]``."""
        indices = self._contract_payments.get(contract_id, [])
        return [
            self.payments[i]
            for i in indices
            if start <= self.payments[i].due_date <= end
        ]

    def get_commissions(self, owner_id: str, year: int) -> list[Commission]:
        """Get an owner's commissions with competency in ``year``."""
        return [
            c for c in self.commissions
            if c.owner_id == owner_id and c.competency_date.year == year
        ]

    def get_deductions(self, owner_id: str, year: int) -> list[Deduction]:
        """Get an owner's deductions with competency in ``year``."""
        return [
            d for d in self.deductions
            if d.owner_id == owner_id and d.competency_date.year == year
        ]

    def get_tenant(self, tenant_id: str) -> Tenant | None:
        """Get a tenant."""
        return self.tenants.get(tenant_id)

    def get_property(self, property_id: str) -> Property | None:
        """Get a property."""
        return self.properties.get(property_id)

    def summary(self) -> dict[str, int]:
        """Return summary counts of all entities."""
        return {
            "declarants": len(self.declarants),
            "owners": len(self.owners),
            "tenants": len(self.tenants),
            "properties": len(self.properties),
            "contracts": len(self.contracts),
            "payments": len(self.payments),
            "commissions": len(self.commissions),
            "deductions": len(self.deductions),
        }
