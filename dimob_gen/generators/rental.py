"""Property, contract, payment and adjustment generators."""

from __future__ import annotations

import calendar
from datetime import date, timedelta
from decimal import Decimal

from dimob_gen.documents import generate_cnpj, generate_cpf
from dimob_gen.generators.address import AddressGenerator
from dimob_gen.generators.base import BaseGenerator
from dimob_gen.models import (
    Commission,
    CommissionCategory,
    Contract,
    ContractStatus,
    Deduction,
    DeductionType,
    Payment,
    PaymentStatus,
    Property,
    PropertyType,
)


class PropertyGenerator(BaseGenerator):
    """Generate rental properties."""

    def __init__(self, seed: int | None = None, commercial_share: float = 0.2) -> None:
        super().__init__(seed)
        self.commercial_share = commercial_share
        self._addresses = AddressGenerator(seed=seed)

    def generate(self, owner_id: str) -> Property:
        commercial = self.rng.random() < self.commercial_share
        return Property(
            property_id=self.new_id(),
            owner_id=owner_id,
            address=self._addresses.generate(),
            property_type=PropertyType.COMMERCIAL if commercial else PropertyType.RESIDENTIAL,
        )


class ContractGenerator(BaseGenerator):
    """Generate lease contracts running through a fiscal year."""

    STATUSES = [ContractStatus.ACTIVE, ContractStatus.SUSPENDED, ContractStatus.TERMINATED]
    STATUS_WEIGHTS = [0.85, 0.05, 0.10]

    def generate(self, owner_id: str, property_id: str, tenant_id: str, year: int) -> Contract:
        """Generate a contract that started in ``year`` or up to two years before."""
        start = date(year - self.rng.randint(0, 2), self.rng.randint(1, 12), self.rng.randint(1, 28))
        if start.year == year and start.month == 12:
            start = start.replace(month=self.rng.randint(1, 11))
        status = self.rng.choices(self.STATUSES, weights=self.STATUS_WEIGHTS, k=1)[0]
        rent = Decimal(self.rng.randrange(800, 8000, 50))
        return Contract(
            contract_id=self.new_id(),
            property_id=property_id,
            owner_id=owner_id,
            tenant_id=tenant_id,
            start_date=start,
            end_date=start.replace(year=start.year + 3),
            rent_amount=rent.quantize(Decimal("0.01")),
            administration_fee_percent=Decimal(self.rng.choice(["8", "10", "12"])),
            status=status,
            include_in_declaration=self.rng.random() < 0.95,
        )


class PaymentScheduleGenerator(BaseGenerator):
    """Generate the monthly payments of a contract for one year.

    Most payments are paid, a few stay open and a few are canceled. Late
    paid payments embed the penalty actually collected in ``paid_amount``.
    """

    def __init__(
        self,
        seed: int | None = None,
        open_rate: float = 0.08,
        cancel_rate: float = 0.04,
        late_rate: float = 0.15,
    ) -> None:
        super().__init__(seed)
        self.open_rate = open_rate
        self.cancel_rate = cancel_rate
        self.late_rate = late_rate

    def generate(self, contract: Contract, year: int) -> list[Payment]:
        """Generate one payment per month of ``year`` from the contract start."""
        payments: list[Payment] = []
        due_day = min(contract.start_date.day, 28)
        for month in range(1, 13):
            due = date(year, month, due_day)
            if due < contract.start_date:
                continue
            payments.append(self._generate_one(contract, due))
        return payments

    def _generate_one(self, contract: Contract, due: date) -> Payment:
        roll = self.rng.random()
        amount = contract.rent_amount
        if roll < self.cancel_rate:
            return Payment(self.new_id(), contract.contract_id, due, amount, PaymentStatus.CANCELED)
        if roll < self.cancel_rate + self.open_rate:
            return Payment(self.new_id(), contract.contract_id, due, amount, PaymentStatus.OPEN)

        paid_amount = amount
        paid_date = due - timedelta(days=self.rng.randint(0, 5))
        if self.rng.random() < self.late_rate:
            days_late = self.rng.randint(1, 20)
            paid_date = due + timedelta(days=days_late)
            penalty = (amount * Decimal("0.02")).quantize(Decimal("0.01"))
            paid_amount = amount + penalty
        # Keep the paid date inside the same month as the due date
        last_day = calendar.monthrange(due.year, due.month)[1]
        paid_date = min(paid_date, due.replace(day=last_day))
        return Payment(
            self.new_id(), contract.contract_id, due, amount, PaymentStatus.PAID,
            paid_date=paid_date, paid_amount=paid_amount,
        )


class CommissionGenerator(BaseGenerator):
    """Generate manually entered broker commissions."""

    def generate(self, owner_id: str, year: int, contract_id: str | None = None) -> Commission:
        amount = Decimal(self.rng.randrange(100, 1500, 10)).quantize(Decimal("0.01"))
        is_company = self.rng.random() < 0.5
        return Commission(
            commission_id=self.new_id(),
            owner_id=owner_id,
            beneficiary_tax_id=generate_cnpj(self.rng) if is_company else generate_cpf(self.rng),
            beneficiary_name=self.fake.company() if is_company else self.fake.name(),
            amount=amount,
            competency_date=date(year, self.rng.randint(1, 12), 1),
            category=self.rng.choice(list(CommissionCategory)),
            contract_id=contract_id,
            withheld_ir=(amount * Decimal("0.015")).quantize(Decimal("0.01")) if is_company else Decimal("0"),
            description="Comissão de intermediação",
            active=self.rng.random() < 0.9,
        )


class DeductionGenerator(BaseGenerator):
    """Generate deductions such as repairs and condominium fees."""

    def generate(self, owner_id: str, year: int, contract_id: str | None = None) -> Deduction:
        deduction_type = self.rng.choice(list(DeductionType))
        return Deduction(
            deduction_id=self.new_id(),
            owner_id=owner_id,
            deduction_type=deduction_type,
            amount=Decimal(self.rng.randrange(50, 900, 5)).quantize(Decimal("0.01")),
            competency_date=date(year, self.rng.randint(1, 12), 1),
            description=deduction_type.name.title(),
            contract_id=contract_id,
            active=self.rng.random() < 0.9,
        )
