"""Table-driven fixed-width record encoding and decoding."""

from __future__ import annotations

import logging
import re
import unicodedata
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from dimob_gen.exceptions import (
    EncodingOverflowError,
    FieldValueError,
    LayoutError,
    RecordLengthInvariantError,
)
from dimob_gen.layout import FieldSpec, LayoutVersion, RecordLayout
from dimob_gen.models import FieldKind, GenerationWarning, Justification, RecordType, WarningCode

logger = logging.getLogger(__name__)

# Characters that could be mistaken for record or field separators
_UNSAFE = re.compile(r"[\x00-\x1f\x7f|]")
_SPACES = re.compile(r" {2,}")


def normalize_text(value: Any) -> str:
    """Normalize free text for the declaration file.

    Strips diacritics, uppercases, turns control characters and pipes into
    spaces, collapses repeated spaces and drops anything outside ASCII.

    >>> normalize_text("São João | Apto\\n12")
    'SAO JOAO APTO 12'
    """
    if value is None:
        return ""
    decomposed = unicodedata.normalize("NFKD", str(value))
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    cleaned = _UNSAFE.sub(" ", stripped).upper()
    cleaned = cleaned.encode("ascii", "ignore").decode("ascii")
    return _SPACES.sub(" ", cleaned).strip()


@dataclass
class EncodedRecord:
    """One encoded line (without terminator) and its truncation warnings."""

    record_type: RecordType
    line: str
    warnings: list[GenerationWarning] = field(default_factory=list)


class RecordEncoder:
    """Encode records of one layout version from plain value mappings.

    Values are looked up by field name. Constant fields ignore the mapping.
    Numeric fields accept ``int``, ``Decimal`` or a digit string; digit
    strings are written as-is, numbers are scaled by the field's implied
    decimals and must be exact at that precision.
    """

    def __init__(self, layout: LayoutVersion) -> None:
        self.layout = layout

    def encode(self, record_type: RecordType, values: dict[str, Any], entity_id: str = "") -> EncodedRecord:
        """Encode one record.

        Raises
        ------
        EncodingOverflowError
            A value does not fit a field that may not be truncated.
        FieldValueError
            A value has the wrong type or sign for its field.
        RecordLengthInvariantError
            The encoded line does not match the record's declared length.
        """
        record = self.layout.record(record_type)
        encoded = EncodedRecord(record_type, "")
        parts: list[str] = []

        for spec in record.fields:
            raw = spec.constant if spec.constant is not None else values.get(spec.name)
            if spec.kind is FieldKind.NUMERIC:
                text_value = self._format_numeric(record, spec, raw)
            elif spec.kind is FieldKind.DATE:
                text_value = self._format_date(record, spec, raw)
            else:
                text_value = self._format_text(record, spec, raw, entity_id, encoded.warnings)
            parts.append(_pad(spec, text_value))

        encoded.line = "".join(parts)
        if len(encoded.line) != record.total_length:
            raise RecordLengthInvariantError(
                f"{record_type.value} encoded to {len(encoded.line)} characters, "
                f"layout {self.layout.version} declares {record.total_length}"
            )
        return encoded

    @staticmethod
    def _format_numeric(record: RecordLayout, spec: FieldSpec, raw: Any) -> str:
        rtype = record.record_type.value
        if raw is None or isinstance(raw, bool):
            raise FieldValueError(f"{rtype}.{spec.name}: numeric value required, got {raw!r}", rtype, spec.name)

        if isinstance(raw, str):
            digits = raw.strip()
            if not (digits.isascii() and digits.isdigit()):
                raise FieldValueError(f"{rtype}.{spec.name}: {raw!r} is not a digit string", rtype, spec.name)
        elif isinstance(raw, (int, Decimal)):
            number = Decimal(raw)
            if not number.is_finite() or number < 0:
                raise FieldValueError(
                    f"{rtype}.{spec.name}: {raw} is not a finite non-negative number", rtype, spec.name
                )
            scaled = number.scaleb(spec.decimals)
            if scaled != scaled.to_integral_value():
                raise FieldValueError(
                    f"{rtype}.{spec.name}: {raw} has more than {spec.decimals} decimal places", rtype, spec.name
                )
            digits = str(int(scaled))
        else:
            raise FieldValueError(
                f"{rtype}.{spec.name}: unsupported type {type(raw).__name__}", rtype, spec.name
            )

        if len(digits) > spec.length:
            raise EncodingOverflowError(
                f"{rtype}.{spec.name}: {len(digits)} digits exceed field length {spec.length}", rtype, spec.name
            )
        return digits

    @staticmethod
    def _format_date(record: RecordLayout, spec: FieldSpec, raw: Any) -> str:
        if not isinstance(raw, date):
            rtype = record.record_type.value
            raise FieldValueError(f"{rtype}.{spec.name}: date required, got {raw!r}", rtype, spec.name)
        return raw.strftime("%Y%m%d")

    @staticmethod
    def _format_text(
        record: RecordLayout,
        spec: FieldSpec,
        raw: Any,
        entity_id: str,
        warnings: list[GenerationWarning],
    ) -> str:
        value = normalize_text(raw)
        if len(value) <= spec.length:
            return value

        rtype = record.record_type.value
        if not spec.truncatable:
            raise EncodingOverflowError(
                f"{rtype}.{spec.name}: {len(value)} characters exceed field length {spec.length}",
                rtype,
                spec.name,
            )
        logger.warning("Truncating %s.%s of %s to %d characters", rtype, spec.name, entity_id, spec.length)
        warnings.append(
            GenerationWarning(
                code=WarningCode.FIELD_TRUNCATED,
                entity=rtype,
                entity_id=entity_id,
                message=f"{spec.name} truncated from {len(value)} to {spec.length} characters",
            )
        )
        return value[: spec.length].rstrip()


def _pad(spec: FieldSpec, value: str) -> str:
    if spec.justification is Justification.RIGHT:
        return value.rjust(spec.length, spec.pad_char)
    return value.ljust(spec.length, spec.pad_char)


def decode_record(layout: LayoutVersion, record_type: RecordType, line: str) -> dict[str, Any]:
    """Parse an encoded line back into typed values.

    Numeric fields without decimals decode to ``int``, with decimals to
    ``Decimal`` at the declared precision. Text is right-stripped. Dates
    decode to ``datetime.date`` (``None`` when blank).
    """
    record = layout.record(record_type)
    line = line.rstrip("\r\n")
    if len(line) != record.total_length:
        raise LayoutError(
            f"{record_type.value} line has {len(line)} characters, expected {record.total_length}"
        )

    values: dict[str, Any] = {}
    for spec in record.fields:
        chunk = spec.slice_of(line)
        if spec.kind is FieldKind.NUMERIC:
            number = int(chunk)
            values[spec.name] = Decimal(number).scaleb(-spec.decimals) if spec.decimals else number
        elif spec.kind is FieldKind.DATE:
            values[spec.name] = datetime.strptime(chunk, "%Y%m%d").date() if chunk.strip() else None
        else:
            values[spec.name] = chunk.rstrip()
    return values
