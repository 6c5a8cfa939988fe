"""Base models shared across entities."""

import re
from dataclasses import dataclass


@dataclass
class Address:
    """Brazilian postal address.

    Fields follow the layout of a Receita Federal address:
    - street/number: logradouro and número
    - neighborhood: bairro
    - state: UF abbreviation (two letters)
    - postal_code: CEP, with or without punctuation
    - country: ISO 3166-1 alpha-2 code (default: ``"BR"``)
    """

    street: str
    number: str
    neighborhood: str
    city: str
    state: str
    postal_code: str
    complement: str = ""
    country: str = "BR"

    def one_line(self) -> str:
        """Join street, number, complement and neighborhood as a single line."""
        head = ", ".join(part for part in (self.street, self.number) if part)
        tail = " - ".join(part for part in (self.complement, self.neighborhood) if part)
        return f"{head} - {tail}" if head and tail else head or tail

    @property
    def postal_code_digits(self) -> str:
        """CEP without punctuation."""
        return re.sub(r"[^0-9]", "", self.postal_code)
