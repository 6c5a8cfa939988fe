"""Faker-based demo data generators."""

from dimob_gen.generators.address import AddressGenerator
from dimob_gen.generators.parties import DeclarantGenerator, OwnerGenerator, TenantGenerator
from dimob_gen.generators.portfolio import RentalPortfolioScenario
from dimob_gen.generators.rental import (
    CommissionGenerator,
    ContractGenerator,
    DeductionGenerator,
    PaymentScheduleGenerator,
    PropertyGenerator,
)

__all__ = [
    "AddressGenerator",
    "CommissionGenerator",
    "ContractGenerator",
    "DeclarantGenerator",
    "DeductionGenerator",
    "OwnerGenerator",
    "PaymentScheduleGenerator",
    "PropertyGenerator",
    "RentalPortfolioScenario",
    "TenantGenerator",
]
