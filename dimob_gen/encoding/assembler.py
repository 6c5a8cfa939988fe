"""Assembly of the complete declaration file for one owner."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from dimob_gen.documents import only_digits
from dimob_gen.encoding.encoder import RecordEncoder, decode_record
from dimob_gen.exceptions import LayoutError
from dimob_gen.layout import LayoutVersion
from dimob_gen.models import AggregateDetail, Declarant, GenerationWarning, Owner, RecordType
from dimob_gen.models.declaration import ZERO

logger = logging.getLogger(__name__)


@dataclass
class AssembledFile:
    """Encoded payload plus per-record-type counts."""

    payload: str
    record_counts: dict[str, int]
    warnings: list[GenerationWarning] = field(default_factory=list)

    @property
    def lines(self) -> list[str]:
        return self.payload.splitlines()


class FileAssembler:
    """Order, encode and join the records of one owner's declaration.

    Records are always Header, one OwnerDetail, TransactionDetails by
    ascending contract id, then the Trailer. The trailer count is the number
    of TransactionDetail lines actually emitted and is checked against the
    encoded trailer before the payload is returned.
    """

    def __init__(self, layout: LayoutVersion, encode_projected: bool = False) -> None:
        self.layout = layout
        self.encoder = RecordEncoder(layout)
        self.encode_projected = encode_projected

    def assemble(
        self,
        declarant: Declarant,
        owner: Owner,
        details: list[AggregateDetail],
        year: int,
    ) -> AssembledFile:
        """Build the payload of one owner's declaration.

        Parameters
        ----------
        declarant : Declarant
            Validated filing company.
        owner : Owner
            Validated owner.
        details : list[AggregateDetail]
            Validated, non-empty aggregate details.
        year : int
            Fiscal year.

        Returns
        -------
        AssembledFile
            Payload and record counts.
        """
        warnings: list[GenerationWarning] = []
        ordered = sorted(details, key=lambda d: d.contract_id)

        header = self.encoder.encode(RecordType.HEADER, {})
        owner_detail = self.encoder.encode(
            RecordType.OWNER_DETAIL, self._owner_values(declarant, owner, year), owner.owner_id
        )
        transactions = [
            self.encoder.encode(
                RecordType.TRANSACTION_DETAIL,
                self._transaction_values(declarant, owner, detail, year, sequence),
                detail.contract_id,
            )
            for sequence, detail in enumerate(ordered, start=1)
        ]
        trailer = self.encoder.encode(
            RecordType.TRAILER,
            {
                "declarant_tax_id": only_digits(declarant.tax_id),
                "fiscal_year": year,
                "detail_count": len(transactions),
                "total_gross": total_amount(ordered, "gross_income"),
                "total_net": total_amount(ordered, "net_amount"),
            },
        )

        records = [header, owner_detail, *transactions, trailer]
        for record in records:
            warnings.extend(record.warnings)

        self._check_trailer(trailer.line, len(transactions))

        terminator = self.layout.line_terminator
        payload = terminator.join(record.line for record in records)
        if self.layout.trailing_terminator:
            payload += terminator

        counts = {
            RecordType.HEADER.value: 1,
            RecordType.OWNER_DETAIL.value: 1,
            RecordType.TRANSACTION_DETAIL.value: len(transactions),
            RecordType.TRAILER.value: 1,
        }
        logger.debug("Assembled %d records for owner %s", sum(counts.values()), owner.owner_id)
        return AssembledFile(payload=payload, record_counts=counts, warnings=warnings)

    def _check_trailer(self, trailer_line: str, emitted: int) -> None:
        decoded = decode_record(self.layout, RecordType.TRAILER, trailer_line)
        if decoded["detail_count"] != emitted:
            raise LayoutError(
                f"Trailer declares {decoded['detail_count']} detail records, {emitted} were emitted"
            )

    @staticmethod
    def _owner_values(declarant: Declarant, owner: Owner, year: int) -> dict[str, Any]:
        return {
            "declarant_tax_id": only_digits(declarant.tax_id),
            "fiscal_year": year,
            "declarant_name": declarant.legal_name,
            "responsible_tax_id": only_digits(declarant.responsible_tax_id),
            "declarant_address": declarant.address.one_line(),
            "declarant_state": declarant.address.state,
            "municipality_code": declarant.municipality_code,
            "municipal_registration": declarant.municipal_registration,
            "owner_tax_id": only_digits(owner.tax_id),
            "owner_name": owner.name,
            "owner_address": owner.address.one_line() if owner.address else "",
        }

    def _transaction_values(
        self,
        declarant: Declarant,
        owner: Owner,
        detail: AggregateDetail,
        year: int,
        sequence: int,
    ) -> dict[str, Any]:
        prop = detail.property
        address = prop.address
        values: dict[str, Any] = {
            "declarant_tax_id": only_digits(declarant.tax_id),
            "fiscal_year": year,
            "sequence": sequence,
            "owner_tax_id": only_digits(owner.tax_id),
            "owner_name": owner.name,
            "tenant_tax_id": only_digits(detail.tenant.tax_id),
            "tenant_name": detail.tenant.name,
            "contract_id": detail.contract_id,
            "contract_start_date": detail.contract.start_date,
            "gross_income": detail.gross_income,
            "commission_total": detail.commission_total,
            "deduction_total": detail.deduction_total,
            "net_amount": detail.net_amount,
            "projected_amount": detail.projected_amount if self.encode_projected else ZERO,
            "property_type": prop.property_type.code,
            "property_address": address.one_line(),
            "property_postal_code": address.postal_code_digits,
            "property_city": address.city,
            "property_state": address.state,
        }
        for month, amount in enumerate(detail.monthly_income, start=1):
            values[f"income_{month:02d}"] = amount
        return values


def total_amount(details: list[AggregateDetail], attr: str) -> Decimal:
    """Sum one amount attribute across details."""
    return sum((getattr(d, attr) for d in details), ZERO)
