"""FieldSpec tables describing fixed-width record layouts."""

from __future__ import annotations

from dataclasses import dataclass, field

from dimob_gen.exceptions import LayoutError
from dimob_gen.models import FieldKind, Justification, RecordType


@dataclass(frozen=True)
class FieldSpec:
    """One positional field of a record.

    ``start`` is 1-based, as printed in the authority's layout manual.
    ``constant`` fields ignore the record's values and always encode the
    same literal.
    """

    name: str
    start: int
    length: int
    kind: FieldKind
    justification: Justification
    pad_char: str
    decimals: int = 0
    truncatable: bool = False
    constant: str | None = None

    @property
    def end(self) -> int:
        """Last 1-based position occupied by the field."""
        return self.start + self.length - 1

    def slice_of(self, line: str) -> str:
        """Substring of an encoded line that holds this field."""
        return line[self.start - 1 : self.end]


def numeric(name: str, start: int, length: int, decimals: int = 0, constant: str | None = None) -> FieldSpec:
    """Zero-padded, right-justified number."""
    return FieldSpec(
        name, start, length, FieldKind.NUMERIC, Justification.RIGHT, "0",
        decimals=decimals, constant=constant,
    )


def text(name: str, start: int, length: int, truncatable: bool = False, constant: str | None = None) -> FieldSpec:
    """Space-padded, left-justified text."""
    return FieldSpec(
        name, start, length, FieldKind.TEXT, Justification.LEFT, " ",
        truncatable=truncatable, constant=constant,
    )


def date_field(name: str, start: int) -> FieldSpec:
    """Date as YYYYMMDD."""
    return FieldSpec(name, start, 8, FieldKind.DATE, Justification.LEFT, " ")


def filler(name: str, start: int, length: int) -> FieldSpec:
    """Reserved blank area."""
    return text(name, start, length, constant="")


@dataclass(frozen=True)
class RecordLayout:
    """Ordered field table of one record type."""

    record_type: RecordType
    total_length: int
    fields: tuple[FieldSpec, ...]

    def __post_init__(self) -> None:
        self.check()

    def check(self) -> None:
        """Verify the table tiles the record exactly: contiguous, no overlap, right total.

        Raises
        ------
        LayoutError
            If the table is inconsistent.
        """
        position = 1
        names: set[str] = set()
        for spec in self.fields:
            if spec.name in names:
                raise LayoutError(f"{self.record_type.value}: duplicate field {spec.name}")
            names.add(spec.name)
            if spec.length <= 0:
                raise LayoutError(f"{self.record_type.value}.{spec.name}: length must be positive")
            if spec.start != position:
                raise LayoutError(
                    f"{self.record_type.value}.{spec.name}: starts at {spec.start}, expected {position}"
                )
            if spec.kind is FieldKind.DATE and spec.length != 8:
                raise LayoutError(f"{self.record_type.value}.{spec.name}: dates are 8 characters")
            position = spec.end + 1
        if position - 1 != self.total_length:
            raise LayoutError(
                f"{self.record_type.value}: fields cover {position - 1} characters, "
                f"declared length is {self.total_length}"
            )

    def field(self, name: str) -> FieldSpec:
        """Look up a field by name."""
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise KeyError(f"{self.record_type.value} has no field {name}")

    @property
    def value_fields(self) -> list[FieldSpec]:
        """Fields that take their value from the domain (non-constant)."""
        return [spec for spec in self.fields if spec.constant is None]


@dataclass(frozen=True)
class LayoutVersion:
    """A complete, versioned file layout.

    ``trailing_terminator`` is part of the version: whether the line
    terminator also follows the last record never varies between runs.
    """

    version: str
    line_terminator: str
    trailing_terminator: bool
    records: dict[RecordType, RecordLayout] = field(default_factory=dict)

    def record(self, record_type: RecordType) -> RecordLayout:
        try:
            return self.records[record_type]
        except KeyError:
            raise LayoutError(f"Layout {self.version} has no {record_type.value} record") from None
