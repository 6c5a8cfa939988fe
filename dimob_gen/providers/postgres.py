"""Read-only PostgreSQL data provider.

Reads the rental application's tables with parameterized queries only; no
value is ever interpolated into SQL text. Every accessor materializes its
rows before returning.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from dimob_gen.config import PostgresConfig
from dimob_gen.exceptions import ProviderError
from dimob_gen.models import (
    DEFAULT_POLICY,
    Address,
    Commission,
    CommissionCategory,
    Contract,
    ContractStatus,
    Declarant,
    Deduction,
    DeductionType,
    FinancialPolicy,
    Owner,
    Payment,
    PaymentStatus,
    Property,
    PropertyType,
    Tenant,
)

logger = logging.getLogger(__name__)


class PostgresDataProvider:
    """DataProvider backed by the application's PostgreSQL database."""

    QUERIES: dict[str, str] = {
        "declarant": (
            "SELECT id, name, document, municipal_registration, street, number, complement,"
            " neighborhood, city, state, zip_code, responsible_cpf, municipality_code, email, phone"
            " FROM companies WHERE id = %s"
        ),
        "policy": "SELECT value FROM settings WHERE company_id = %s AND key = 'financial'",
        "owner": (
            "SELECT id, name, document, email, street, number, complement, neighborhood,"
            " city, state, zip_code FROM owners WHERE id = %s"
        ),
        "contracts": (
            "SELECT id, property_id, owner_id, tenant_id, start_date, end_date, rent_amount,"
            " administration_fee_percentage, status, include_in_dimob"
            " FROM contracts WHERE owner_id = %s ORDER BY id"
        ),
        "payments": (
            "SELECT id, contract_id, due_date, amount, status, paid_date, paid_amount"
            " FROM payments WHERE contract_id = %s AND due_date BETWEEN %s AND %s"
            " ORDER BY due_date, id"
        ),
        "commissions": (
            "SELECT id, owner_id, cpf_cnpj, nome, valor_comissao, competencia, categoria,"
            " contrato_id, valor_pis, valor_cofins, valor_inss, valor_ir, descricao, ativo"
            " FROM dimob_commissions WHERE owner_id = %s AND competencia BETWEEN %s AND %s"
            " ORDER BY competencia, id"
        ),
        "deductions": (
            "SELECT id, owner_id, tipo_deducao, valor_deducao, competencia, descricao,"
            " contrato_id, inquilino_doc, ativo"
            " FROM dimob_deductions WHERE owner_id = %s AND competencia BETWEEN %s AND %s"
            " ORDER BY competencia, id"
        ),
        "tenant": "SELECT id, name, document, email FROM tenants WHERE id = %s",
        "property": (
            "SELECT id, owner_id, type, street, number, complement, neighborhood, city,"
            " state, zip_code FROM properties WHERE id = %s"
        ),
    }

    def __init__(self, config: PostgresConfig | None = None, connection: Any = None) -> None:
        """Initialize the provider.

        Parameters
        ----------
        config : PostgresConfig | None
            Connection settings, used when no connection is injected.
        connection : Any
            An open psycopg connection. When omitted, one is opened lazily.
        """
        self.config = config or PostgresConfig()
        self._conn = connection

    def _connect(self) -> Any:
        if self._conn is None:
            import psycopg
            from psycopg.rows import dict_row

            logger.info("Connecting to PostgreSQL at %s:%d", self.config.host, self.config.port)
            self._conn = psycopg.connect(
                self.config.connection_string,
                row_factory=dict_row,
                connect_timeout=self.config.connect_timeout,
            )
        return self._conn

    def _fetch(self, query_name: str, params: tuple) -> list[dict[str, Any]]:
        """Run a named query and return every row as a dict."""
        import psycopg

        conn = self._connect()
        try:
            with conn.cursor() as cur:
                cur.execute(self.QUERIES[query_name], params)
                return list(cur.fetchall())
        except psycopg.Error as e:
            raise ProviderError(f"Query {query_name} failed: {e}") from e

    def _fetch_one(self, query_name: str, params: tuple) -> dict[str, Any] | None:
        rows = self._fetch(query_name, params)
        return rows[0] if rows else None

    def close(self) -> None:
        """Close the connection if this provider opened or received one."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    # DataProvider accessors
    def get_declarant_profile(self, company_id: str) -> Declarant | None:
        row = self._fetch_one("declarant", (company_id,))
        if row is None:
            return None
        return Declarant(
            company_id=str(row["id"]),
            legal_name=row["name"] or "",
            tax_id=row["document"] or "",
            municipal_registration=row["municipal_registration"] or "",
            address=_address_from_row(row),
            responsible_tax_id=row["responsible_cpf"] or "",
            municipality_code=row["municipality_code"] or "",
            email=row["email"] or "",
            phone=row["phone"] or "",
        )

    def get_financial_policy(self, company_id: str) -> FinancialPolicy | None:
        row = self._fetch_one("policy", (company_id,))
        if row is None:
            return None
        return parse_policy(row["value"])

    def get_owner_profile(self, owner_id: str) -> Owner | None:
        row = self._fetch_one("owner", (owner_id,))
        if row is None:
            return None
        return Owner(
            owner_id=str(row["id"]),
            name=row["name"] or "",
            tax_id=row["document"] or "",
            address=_address_from_row(row) if row.get("street") else None,
            email=row["email"] or "",
        )

    def get_eligible_contracts(self, owner_id: str, year: int) -> list[Contract]:
        rows = self._fetch("contracts", (owner_id,))
        return [
            Contract(
                contract_id=str(row["id"]),
                property_id=str(row["property_id"]),
                owner_id=str(row["owner_id"]),
                tenant_id=str(row["tenant_id"]),
                start_date=row["start_date"],
                end_date=row["end_date"],
                rent_amount=Decimal(str(row["rent_amount"])),
                administration_fee_percent=Decimal(str(row["administration_fee_percentage"] or 0)),
                status=ContractStatus(row["status"]),
                include_in_declaration=bool(row["include_in_dimob"]),
            )
            for row in rows
        ]

    def get_payments(self, contract_id: str, start: date, end: date) -> list[Payment]:
        rows = self._fetch("payments", (contract_id, start, end))
        return [
            Payment(
                payment_id=str(row["id"]),
                contract_id=str(row["contract_id"]),
                due_date=row["due_date"],
                amount=Decimal(str(row["amount"])),
                status=PaymentStatus(row["status"]),
                paid_date=row["paid_date"],
                paid_amount=Decimal(str(row["paid_amount"])) if row["paid_amount"] is not None else None,
            )
            for row in rows
        ]

    def get_commissions(self, owner_id: str, year: int) -> list[Commission]:
        rows = self._fetch("commissions", (owner_id, date(year, 1, 1), date(year, 12, 31)))
        return [
            Commission(
                commission_id=str(row["id"]),
                owner_id=str(row["owner_id"]),
                beneficiary_tax_id=row["cpf_cnpj"] or "",
                beneficiary_name=row["nome"] or "",
                amount=Decimal(str(row["valor_comissao"])),
                competency_date=row["competencia"],
                category=CommissionCategory(row["categoria"] or CommissionCategory.BROKERAGE.value),
                contract_id=str(row["contrato_id"]) if row["contrato_id"] else None,
                withheld_pis=Decimal(str(row["valor_pis"] or 0)),
                withheld_cofins=Decimal(str(row["valor_cofins"] or 0)),
                withheld_inss=Decimal(str(row["valor_inss"] or 0)),
                withheld_ir=Decimal(str(row["valor_ir"] or 0)),
                description=row["descricao"] or "",
                active=bool(row["ativo"]),
            )
            for row in rows
        ]

    def get_deductions(self, owner_id: str, year: int) -> list[Deduction]:
        rows = self._fetch("deductions", (owner_id, date(year, 1, 1), date(year, 12, 31)))
        return [
            Deduction(
                deduction_id=str(row["id"]),
                owner_id=str(row["owner_id"]),
                deduction_type=DeductionType(row["tipo_deducao"]),
                amount=Decimal(str(row["valor_deducao"])),
                competency_date=row["competencia"],
                description=row["descricao"] or "",
                contract_id=str(row["contrato_id"]) if row["contrato_id"] else None,
                tenant_tax_id=row["inquilino_doc"],
                active=bool(row["ativo"]),
            )
            for row in rows
        ]

    def get_tenant(self, tenant_id: str) -> Tenant | None:
        row = self._fetch_one("tenant", (tenant_id,))
        if row is None:
            return None
        return Tenant(
            tenant_id=str(row["id"]),
            name=row["name"] or "",
            tax_id=row["document"] or "",
            email=row["email"] or "",
        )

    def get_property(self, property_id: str) -> Property | None:
        row = self._fetch_one("property", (property_id,))
        if row is None:
            return None
        return Property(
            property_id=str(row["id"]),
            owner_id=str(row["owner_id"]),
            address=_address_from_row(row) if row.get("street") else None,
            property_type=PropertyType(row["type"] or PropertyType.RESIDENTIAL.value),
        )


def _address_from_row(row: dict[str, Any]) -> Address:
    return Address(
        street=row.get("street") or "",
        number=row.get("number") or "",
        neighborhood=row.get("neighborhood") or "",
        city=row.get("city") or "",
        state=row.get("state") or "",
        postal_code=row.get("zip_code") or "",
        complement=row.get("complement") or "",
    )


_POLICY_KEYS = {
    "penalty_rate_percent": "penaltyRate",
    "daily_interest_rate_percent": "dailyInterestRate",
    "grace_period_days": "gracePeriodDays",
    "max_interest_days": "maxInterestDays",
}


def parse_policy(raw: str | dict) -> FinancialPolicy:
    """Parse the stored ``financial`` settings document.

    Individual values that are missing or not numeric fall back to
    ``DEFAULT_POLICY``; their keys are listed in ``defaulted_settings``.

    Raises
    ------
    ProviderError
        If the document is not a JSON object.
    """
    try:
        data = json.loads(raw) if isinstance(raw, str) else raw
    except json.JSONDecodeError as e:
        raise ProviderError(f"Financial settings are not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ProviderError(f"Financial settings must be a JSON object, got {type(data).__name__}")

    values: dict[str, Any] = {}
    defaulted: list[str] = []
    for attr, key in _POLICY_KEYS.items():
        default = getattr(DEFAULT_POLICY, attr)
        try:
            value = Decimal(str(data[key]))
            if not value.is_finite():
                raise InvalidOperation(key)
        except (KeyError, InvalidOperation):
            logger.warning("Financial setting %s missing or invalid, using %s", key, default)
            values[attr] = default
            defaulted.append(key)
            continue
        values[attr] = int(value) if isinstance(default, int) else value
    return FinancialPolicy(**values, defaulted_settings=tuple(defaulted))
