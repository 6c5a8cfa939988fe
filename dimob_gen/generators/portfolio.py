"""Synthetic rental portfolio for demos and end-to-end tests."""

from __future__ import annotations

import logging
import random

from dimob_gen.generators.parties import DeclarantGenerator, OwnerGenerator, TenantGenerator
from dimob_gen.generators.rental import (
    CommissionGenerator,
    ContractGenerator,
    DeductionGenerator,
    PaymentScheduleGenerator,
    PropertyGenerator,
)
from dimob_gen.models import DEFAULT_POLICY
from dimob_gen.providers.memory import InMemoryDataProvider

logger = logging.getLogger(__name__)


class RentalPortfolioScenario:
    """Generate a management company with owners, leases and a year of payments.

    The resulting ``InMemoryDataProvider`` is a drop-in data source for the
    declaration pipeline. Identical seeds produce identical portfolios.
    """

    def __init__(
        self,
        year: int,
        num_owners: int = 5,
        contracts_per_owner: tuple[int, int] = (1, 3),
        commission_rate: float = 0.4,
        deduction_rate: float = 0.4,
        with_policy: bool = True,
        seed: int | None = None,
    ) -> None:
        """Initialize rental portfolio scenario.

        Parameters
        ----------
        year : int
            Fiscal year the payments are scheduled in.
        num_owners : int
            Number of owners to generate.
        contracts_per_owner : tuple[int, int]
            Min and max contracts per owner.
        commission_rate, deduction_rate : float
            Probability of each contract getting a commission or deduction.
        with_policy : bool
            Store the default financial policy for the company. When False
            the pipeline falls back to it with a warning.
        seed : int | None
            Random seed for reproducibility.
        """
        self.year = year
        self.num_owners = num_owners
        self.contracts_per_owner = contracts_per_owner
        self.commission_rate = commission_rate
        self.deduction_rate = deduction_rate
        self.with_policy = with_policy
        self.seed = seed

        self._rng = random.Random(seed)
        self.provider = InMemoryDataProvider()
        # One seed per generator; a shared seed repeats ids across entity types
        self._declarant_gen = DeclarantGenerator(seed=_derive(seed, 1))
        self._owner_gen = OwnerGenerator(seed=_derive(seed, 2))
        self._tenant_gen = TenantGenerator(seed=_derive(seed, 3))
        self._property_gen = PropertyGenerator(seed=_derive(seed, 4))
        self._contract_gen = ContractGenerator(seed=_derive(seed, 5))
        self._payment_gen = PaymentScheduleGenerator(seed=_derive(seed, 6))
        self._commission_gen = CommissionGenerator(seed=_derive(seed, 7))
        self._deduction_gen = DeductionGenerator(seed=_derive(seed, 8))
        self.company_id: str | None = None

    def generate(self) -> InMemoryDataProvider:
        """Generate all data for the portfolio.

        Returns
        -------
        InMemoryDataProvider
            Provider holding the generated portfolio.
        """
        logger.info("Starting rental portfolio scenario: %d owners, year %d", self.num_owners, self.year)

        declarant = self._declarant_gen.generate()
        self.provider.add_declarant(declarant, DEFAULT_POLICY if self.with_policy else None)
        self.company_id = declarant.company_id

        for _ in range(self.num_owners):
            self._generate_owner()

        logger.info("Generated portfolio: %s", self.provider.summary())
        return self.provider

    @property
    def owner_ids(self) -> list[str]:
        return list(self.provider.owners)

    def _generate_owner(self) -> None:
        owner = self._owner_gen.generate()
        self.provider.add_owner(owner)

        for _ in range(self._rng.randint(*self.contracts_per_owner)):
            tenant = self._tenant_gen.generate()
            self.provider.add_tenant(tenant)
            prop = self._property_gen.generate(owner.owner_id)
            self.provider.add_property(prop)
            contract = self._contract_gen.generate(owner.owner_id, prop.property_id, tenant.tenant_id, self.year)
            self.provider.add_contract(contract)

            for payment in self._payment_gen.generate(contract, self.year):
                self.provider.add_payment(payment)

            if self._rng.random() < self.commission_rate:
                linked = contract.contract_id if self._rng.random() < 0.5 else None
                self.provider.add_commission(self._commission_gen.generate(owner.owner_id, self.year, linked))
            if self._rng.random() < self.deduction_rate:
                linked = contract.contract_id if self._rng.random() < 0.5 else None
                self.provider.add_deduction(self._deduction_gen.generate(owner.owner_id, self.year, linked))


def _derive(seed: int | None, offset: int) -> int | None:
    return None if seed is None else seed * 100 + offset
