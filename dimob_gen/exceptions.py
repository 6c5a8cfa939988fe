"""Custom exception hierarchy for dimob-gen.

Data problems found in the declaration batch are never raised: they are
reported as ``Violation`` entries on a ``DeclarationResult``. Exceptions are
reserved for broken collaborators and internal defects.
"""


class DimobGenError(Exception):
    """Base exception for all dimob-gen errors."""


class EntityNotFoundError(DimobGenError):
    """Raised when a referenced entity does not exist."""


class ReferentialIntegrityError(EntityNotFoundError):
    """Raised when a foreign key reference is violated."""


class ConfigurationError(DimobGenError):
    """Raised when configuration is invalid or missing."""


class ProviderError(DimobGenError):
    """Raised when the data provider cannot return a snapshot."""


class SinkError(DimobGenError):
    """Raised when a sink operation fails."""


class EncodingError(DimobGenError):
    """Raised when a value cannot be encoded into its fixed-width field."""

    def __init__(self, message: str, record_type: str = "", field_name: str = "") -> None:
        super().__init__(message)
        self.record_type = record_type
        self.field_name = field_name


class EncodingOverflowError(EncodingError):
    """Raised when a value is longer than a non-truncatable field."""


class FieldValueError(EncodingError):
    """Raised when a value has the wrong type or sign for its field kind."""


class LayoutError(DimobGenError):
    """Raised when a FieldSpec table is inconsistent."""


class RecordLengthInvariantError(LayoutError):
    """Raised when an encoded record does not match its declared length.

    Always an internal defect in the layout table or encoder, never a data
    problem.
    """


class GenerationCancelledError(DimobGenError):
    """Raised inside a pipeline run when its cancel token is set."""
