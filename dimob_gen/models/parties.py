"""Declarant, owner and tenant models."""

from dataclasses import dataclass

from dimob_gen.models.base import Address


@dataclass
class Declarant:
    """Management company filing the declaration."""

    company_id: str
    legal_name: str
    tax_id: str  # CNPJ
    municipal_registration: str  # Inscricao municipal
    address: Address
    responsible_tax_id: str  # CPF of the person responsible for the filing
    municipality_code: str  # IBGE, 7 digits
    email: str = ""
    phone: str = ""


@dataclass
class Owner:
    """Property owner (locador)."""

    owner_id: str
    name: str
    tax_id: str  # CPF or CNPJ
    address: Address | None = None
    email: str = ""


@dataclass
class Tenant:
    """Tenant (locatario)."""

    tenant_id: str
    name: str
    tax_id: str  # CPF or CNPJ
    email: str = ""
