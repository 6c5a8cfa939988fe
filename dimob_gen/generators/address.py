"""Brazilian address generation."""

from __future__ import annotations

from dimob_gen.generators.base import BaseGenerator
from dimob_gen.models import Address

# (city, UF, IBGE municipality code)
MUNICIPALITIES: list[tuple[str, str, str]] = [
    ("São Paulo", "SP", "3550308"),
    ("Rio de Janeiro", "RJ", "3304557"),
    ("Belo Horizonte", "MG", "3106200"),
    ("Curitiba", "PR", "4106902"),
    ("Porto Alegre", "RS", "4314902"),
    ("Florianópolis", "SC", "4205407"),
    ("Salvador", "BA", "2927408"),
    ("Recife", "PE", "2611606"),
]


class AddressGenerator(BaseGenerator):
    """Generate Brazilian addresses with pt_BR Faker providers."""

    def generate(self, municipality: tuple[str, str, str] | None = None) -> Address:
        """Generate an address, optionally inside a given municipality.

        Parameters
        ----------
        municipality : tuple[str, str, str] | None
            ``(city, UF, IBGE code)``; a random one is picked when omitted.

        Returns
        -------
        Address
            Generated address with an 8-digit CEP.
        """
        city, state, _ = municipality or self.rng.choice(MUNICIPALITIES)
        return Address(
            street=self.fake.street_name(),
            number=str(self.rng.randint(1, 9999)),
            neighborhood=self.fake.bairro(),
            city=city,
            state=state,
            postal_code=f"{self.rng.randint(1000000, 99999999):08d}",
            complement=self.rng.choice(["", "", "", f"Apto {self.rng.randint(1, 500)}"]),
        )

    def pick_municipality(self) -> tuple[str, str, str]:
        return self.rng.choice(MUNICIPALITIES)
