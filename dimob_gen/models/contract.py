"""Property, contract and payment models."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from dimob_gen.models.base import Address
from dimob_gen.models.enums import ContractStatus, PaymentStatus, PropertyType


@dataclass
class Property:
    """Rented real estate property."""

    property_id: str
    owner_id: str
    address: Address | None
    property_type: PropertyType = PropertyType.RESIDENTIAL


@dataclass
class Contract:
    """Lease contract linking a property, its owner and a tenant."""

    contract_id: str
    property_id: str
    owner_id: str
    tenant_id: str
    start_date: date
    end_date: date | None
    rent_amount: Decimal
    administration_fee_percent: Decimal
    status: ContractStatus
    include_in_declaration: bool = True


@dataclass
class Payment:
    """Scheduled rent payment (boleto) of a contract."""

    payment_id: str
    contract_id: str
    due_date: date
    amount: Decimal
    status: PaymentStatus
    paid_date: date | None = None
    paid_amount: Decimal | None = None  # Includes any penalty actually collected

    @property
    def settled_amount(self) -> Decimal:
        """Amount recorded as received; falls back to the scheduled amount."""
        return self.paid_amount if self.paid_amount is not None else self.amount
