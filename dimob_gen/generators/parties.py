"""Declarant, owner and tenant generators."""

from __future__ import annotations

from dimob_gen.documents import generate_cnpj, generate_cpf
from dimob_gen.generators.address import AddressGenerator
from dimob_gen.generators.base import BaseGenerator
from dimob_gen.models import Declarant, Owner, Tenant


class DeclarantGenerator(BaseGenerator):
    """Generate the management company that files the declaration."""

    def __init__(self, seed: int | None = None) -> None:
        super().__init__(seed)
        self._addresses = AddressGenerator(seed=seed)

    def generate(self) -> Declarant:
        municipality = self._addresses.pick_municipality()
        return Declarant(
            company_id=self.new_id(),
            legal_name=f"{self.fake.last_name()} Administradora de Imóveis Ltda",
            tax_id=generate_cnpj(self.rng),
            municipal_registration=str(self.rng.randint(10000000, 999999999)),
            address=self._addresses.generate(municipality),
            responsible_tax_id=generate_cpf(self.rng),
            municipality_code=municipality[2],
            email=self.fake.company_email(),
            phone=self.fake.phone_number(),
        )


class OwnerGenerator(BaseGenerator):
    """Generate property owners; a share of them are companies."""

    def __init__(self, seed: int | None = None, company_share: float = 0.15) -> None:
        super().__init__(seed)
        self.company_share = company_share
        self._addresses = AddressGenerator(seed=seed)

    def generate(self) -> Owner:
        if self.rng.random() < self.company_share:
            name, tax_id = self.fake.company(), generate_cnpj(self.rng)
        else:
            name, tax_id = self.fake.name(), generate_cpf(self.rng)
        return Owner(
            owner_id=self.new_id(),
            name=name[:60],
            tax_id=tax_id,
            address=self._addresses.generate(),
            email=self.fake.email(),
        )


class TenantGenerator(BaseGenerator):
    """Generate tenants."""

    def generate(self) -> Tenant:
        return Tenant(
            tenant_id=self.new_id(),
            name=self.fake.name()[:60],
            tax_id=generate_cpf(self.rng),
            email=self.fake.email(),
        )
