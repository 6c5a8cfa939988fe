"""Mandatory-data validation ahead of encoding."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal

from dimob_gen.documents import is_ascii_digits, is_valid_cnpj, is_valid_cpf, is_valid_tax_id, only_digits
from dimob_gen.encoding.encoder import normalize_text
from dimob_gen.layout import LayoutVersion
from dimob_gen.models import (
    Address,
    AggregateDetail,
    Declarant,
    GenerationWarning,
    Owner,
    RecordType,
    Violation,
    ViolationReason,
    WarningCode,
)

logger = logging.getLogger(__name__)

MUNICIPALITY_CODE_LENGTH = 7
POSTAL_CODE_LENGTH = 8


@dataclass
class ValidationReport:
    """Every violation and warning found in one owner's batch, in walk order."""

    violations: list[Violation] = field(default_factory=list)
    warnings: list[GenerationWarning] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.violations


class DeclarationValidator:
    """Walk a declarant, an owner and its aggregate details collecting problems.

    The walk never stops at the first problem: the operator receives the full
    list and can fix everything in one pass. Name lengths are checked against
    the layout so that the encoder never has to reject identity data.
    """

    def __init__(self, layout: LayoutVersion) -> None:
        self.layout = layout
        r01 = layout.record(RecordType.OWNER_DETAIL)
        r02 = layout.record(RecordType.TRANSACTION_DETAIL)
        self._max_lengths = {
            "declarant_name": r01.field("declarant_name").length,
            "municipal_registration": r01.field("municipal_registration").length,
            "owner_name": r01.field("owner_name").length,
            "tenant_name": r02.field("tenant_name").length,
            "contract_id": r02.field("contract_id").length,
        }

    def validate(
        self,
        declarant: Declarant | None,
        owner: Owner | None,
        details: list[AggregateDetail],
        owner_id: str = "",
    ) -> ValidationReport:
        """Validate one owner's batch.

        Parameters
        ----------
        declarant : Declarant | None
            Filing company; ``None`` when its profile could not be found.
        owner : Owner | None
            Owner being declared; ``None`` when the profile is missing.
        details : list[AggregateDetail]
            Aggregated details with their tenant and property snapshots.
        owner_id : str
            Id reported when the owner profile itself is missing.

        Returns
        -------
        ValidationReport
            Ordered violations (declarant, owner, then details by contract id)
            and non-blocking warnings.
        """
        report = ValidationReport()
        self._check_declarant(declarant, report)
        self._check_owner(owner, owner_id, report)
        for detail in sorted(details, key=lambda d: d.contract_id):
            self._check_detail(detail, report)

        if report.violations:
            logger.info(
                "Validation found %d violation(s) for owner %s",
                len(report.violations),
                owner.owner_id if owner else owner_id,
            )
        return report

    def _check_declarant(self, declarant: Declarant | None, report: ValidationReport) -> None:
        if declarant is None:
            report.violations.append(
                Violation("Declarant", "", "profile", ViolationReason.MISSING_MANDATORY_FIELD,
                          "Declarant company profile not found")
            )
            return

        entity, eid = "Declarant", declarant.company_id
        self._require_text(report, entity, eid, "legal_name", declarant.legal_name,
                           self._max_lengths["declarant_name"])
        self._require_document(report, entity, eid, "tax_id", declarant.tax_id, is_valid_cnpj, "CNPJ")
        self._require_document(
            report, entity, eid, "responsible_tax_id", declarant.responsible_tax_id, is_valid_cpf, "CPF"
        )
        if len(normalize_text(declarant.municipal_registration)) > self._max_lengths["municipal_registration"]:
            report.violations.append(
                Violation(entity, eid, "municipal_registration", ViolationReason.EXCEEDS_FIELD_LENGTH,
                          f"Longer than {self._max_lengths['municipal_registration']} characters")
            )

        code = declarant.municipality_code or ""
        if not code.strip():
            report.violations.append(
                Violation(entity, eid, "municipality_code", ViolationReason.MISSING_MANDATORY_FIELD)
            )
        elif not is_ascii_digits(code) or len(code) != MUNICIPALITY_CODE_LENGTH:
            report.violations.append(
                Violation(entity, eid, "municipality_code", ViolationReason.INVALID_FORMAT,
                          f"Expected {MUNICIPALITY_CODE_LENGTH} digits")
            )

        self._check_address(report, entity, eid, "address", declarant.address, require_number=True)

    def _check_owner(self, owner: Owner | None, owner_id: str, report: ValidationReport) -> None:
        if owner is None:
            report.violations.append(
                Violation("Owner", owner_id, "profile", ViolationReason.MISSING_MANDATORY_FIELD,
                          "Owner profile not found")
            )
            return
        self._require_text(report, "Owner", owner.owner_id, "name", owner.name, self._max_lengths["owner_name"])
        self._require_document(report, "Owner", owner.owner_id, "tax_id", owner.tax_id, is_valid_tax_id, "CPF/CNPJ")

    def _check_detail(self, detail: AggregateDetail, report: ValidationReport) -> None:
        cid = detail.contract_id
        if len(cid) > self._max_lengths["contract_id"]:
            report.violations.append(
                Violation("Contract", cid, "contract_id", ViolationReason.EXCEEDS_FIELD_LENGTH,
                          f"Longer than {self._max_lengths['contract_id']} characters", contract_id=cid)
            )

        tenant = detail.tenant
        if tenant is None:
            report.violations.append(
                Violation("Tenant", detail.contract.tenant_id, "profile",
                          ViolationReason.MISSING_MANDATORY_FIELD, "Tenant not found", contract_id=cid)
            )
        else:
            self._require_text(report, "Tenant", tenant.tenant_id, "name", tenant.name,
                               self._max_lengths["tenant_name"], contract_id=cid)
            self._require_document(report, "Tenant", tenant.tenant_id, "tax_id", tenant.tax_id,
                                   is_valid_tax_id, "CPF/CNPJ", contract_id=cid)

        prop = detail.property
        if prop is None or prop.address is None:
            report.violations.append(
                Violation("Property", detail.contract.property_id, "address",
                          ViolationReason.MISSING_MANDATORY_FIELD, "Property address missing",
                          contract_id=cid)
            )
        else:
            self._check_address(report, "Property", prop.property_id, "address", prop.address, contract_id=cid)

        self._check_amount(report, cid, detail.net_amount)

    @staticmethod
    def _check_amount(report: ValidationReport, contract_id: str, value: Decimal) -> None:
        if not isinstance(value, Decimal) or not value.is_finite():
            report.violations.append(
                Violation("Contract", contract_id, "net_amount", ViolationReason.NOT_FINITE,
                          contract_id=contract_id)
            )
        elif value < 0:
            report.violations.append(
                Violation("Contract", contract_id, "net_amount", ViolationReason.NEGATIVE_AMOUNT,
                          contract_id=contract_id)
            )

    @staticmethod
    def _require_text(
        report: ValidationReport,
        entity: str,
        entity_id: str,
        field_name: str,
        value: str | None,
        max_length: int,
        contract_id: str | None = None,
    ) -> None:
        # Judged on the encoded form: text that normalizes away is absent
        normalized = normalize_text(value)
        if not normalized:
            report.violations.append(
                Violation(entity, entity_id, field_name, ViolationReason.MISSING_MANDATORY_FIELD,
                          contract_id=contract_id)
            )
        elif len(normalized) > max_length:
            report.violations.append(
                Violation(entity, entity_id, field_name, ViolationReason.EXCEEDS_FIELD_LENGTH,
                          f"Longer than {max_length} characters", contract_id=contract_id)
            )

    @staticmethod
    def _require_document(
        report: ValidationReport,
        entity: str,
        entity_id: str,
        field_name: str,
        value: str | None,
        check,
        label: str,
        contract_id: str | None = None,
    ) -> None:
        if not only_digits(value):
            report.violations.append(
                Violation(entity, entity_id, field_name, ViolationReason.MISSING_MANDATORY_FIELD,
                          contract_id=contract_id)
            )
        elif not check(value):
            report.violations.append(
                Violation(entity, entity_id, field_name, ViolationReason.INVALID_FORMAT,
                          f"Invalid {label}", contract_id=contract_id)
            )

    @staticmethod
    def _check_address(
        report: ValidationReport,
        entity: str,
        entity_id: str,
        prefix: str,
        address: Address | None,
        require_number: bool = False,
        contract_id: str | None = None,
    ) -> None:
        if address is None:
            report.violations.append(
                Violation(entity, entity_id, prefix, ViolationReason.MISSING_MANDATORY_FIELD,
                          contract_id=contract_id)
            )
            return

        for name in ("street", "city", "state", "postal_code"):
            if not normalize_text(getattr(address, name)):
                report.violations.append(
                    Violation(entity, entity_id, f"{prefix}.{name}", ViolationReason.MISSING_MANDATORY_FIELD,
                              contract_id=contract_id)
                )

        if address.state.strip() and len(address.state.strip()) != 2:
            report.violations.append(
                Violation(entity, entity_id, f"{prefix}.state", ViolationReason.INVALID_FORMAT,
                          "Expected a two-letter UF", contract_id=contract_id)
            )
        if address.postal_code.strip() and len(address.postal_code_digits) != POSTAL_CODE_LENGTH:
            report.violations.append(
                Violation(entity, entity_id, f"{prefix}.postal_code", ViolationReason.INVALID_FORMAT,
                          f"Expected {POSTAL_CODE_LENGTH} digits", contract_id=contract_id)
            )

        if not address.number.strip():
            if require_number:
                report.violations.append(
                    Violation(entity, entity_id, f"{prefix}.number", ViolationReason.MISSING_MANDATORY_FIELD,
                              contract_id=contract_id)
                )
            else:
                report.warnings.append(
                    GenerationWarning(WarningCode.INCOMPLETE_ADDRESS, entity, entity_id,
                                      "Address has no street number")
                )
