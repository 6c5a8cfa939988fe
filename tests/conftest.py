"""Pytest configuration and fixtures."""

from datetime import date
from decimal import Decimal
from typing import Callable

import pytest

from dimob_gen.layout import LAYOUT_V1, LayoutVersion
from dimob_gen.models import (
    DEFAULT_POLICY,
    Address,
    Contract,
    ContractStatus,
    Declarant,
    Owner,
    Payment,
    PaymentStatus,
    Property,
    PropertyType,
    Tenant,
)
from dimob_gen.providers import InMemoryDataProvider

FISCAL_YEAR = 2024
COMPANY_ID = "company-001"
OWNER_ID = "owner-001"

DECLARANT_CNPJ = "11222333000181"
RESPONSIBLE_CPF = "12345678909"
OWNER_CPF = "52998224725"
TENANT_CPFS = ["11144477735", "98765432100", "39053344705"]


def make_address(number: str = "100", street: str = "Av Paulista") -> Address:
    """Create a complete São Paulo address."""
    return Address(
        street=street,
        number=number,
        neighborhood="Bela Vista",
        city="São Paulo",
        state="SP",
        postal_code="01310-100",
    )


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def layout() -> LayoutVersion:
    """Current layout version."""
    return LAYOUT_V1


@pytest.fixture
def declarant() -> Declarant:
    """Create a valid declarant company."""
    return Declarant(
        company_id=COMPANY_ID,
        legal_name="Imobiliária Exemplo Ltda",
        tax_id="11.222.333/0001-81",
        municipal_registration="12345678",
        address=make_address("1000"),
        responsible_tax_id=RESPONSIBLE_CPF,
        municipality_code="3550308",
    )


@pytest.fixture
def owner() -> Owner:
    """Create a valid owner."""
    return Owner(
        owner_id=OWNER_ID,
        name="José da Silva",
        tax_id="529.982.247-25",
        address=make_address("250", "Rua Augusta"),
    )


@pytest.fixture
def provider(declarant: Declarant, owner: Owner) -> InMemoryDataProvider:
    """Provider with a declarant, its policy and one owner without contracts."""
    store = InMemoryDataProvider()
    store.add_declarant(declarant, DEFAULT_POLICY)
    store.add_owner(owner)
    return store


@pytest.fixture
def add_lease(provider: InMemoryDataProvider) -> Callable[..., Contract]:
    """Factory adding a tenant, property, contract and payments to the provider.

    ``payments`` is a list of ``(due_date, amount, status)`` tuples. Paid
    payments are paid on their due date.
    """

    def _add(
        contract_id: str,
        payments: list[tuple[date, str, PaymentStatus]],
        tenant_tax_id: str = TENANT_CPFS[0],
        tenant_name: str = "Maria Souza",
        rent: str = "2800.00",
        fee_percent: str = "0",
        owner_id: str = OWNER_ID,
        status: ContractStatus = ContractStatus.ACTIVE,
        include: bool = True,
        property_address: Address | None = None,
    ) -> Contract:
        tenant = Tenant(tenant_id=f"tenant-{contract_id}", name=tenant_name, tax_id=tenant_tax_id)
        provider.add_tenant(tenant)
        prop = Property(
            property_id=f"prop-{contract_id}",
            owner_id=owner_id,
            address=property_address or make_address(),
            property_type=PropertyType.RESIDENTIAL,
        )
        provider.add_property(prop)
        contract = Contract(
            contract_id=contract_id,
            property_id=prop.property_id,
            owner_id=owner_id,
            tenant_id=tenant.tenant_id,
            start_date=date(2023, 1, 10),
            end_date=date(2026, 1, 10),
            rent_amount=Decimal(rent),
            administration_fee_percent=Decimal(fee_percent),
            status=status,
            include_in_declaration=include,
        )
        provider.add_contract(contract)
        for i, (due, amount, payment_status) in enumerate(payments):
            paid = payment_status is PaymentStatus.PAID
            provider.add_payment(
                Payment(
                    payment_id=f"pay-{contract_id}-{i:02d}",
                    contract_id=contract_id,
                    due_date=due,
                    amount=Decimal(amount),
                    status=payment_status,
                    paid_date=due if paid else None,
                    paid_amount=Decimal(amount) if paid else None,
                )
            )
        return contract

    return _add
