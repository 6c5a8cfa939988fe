"""Fixed-width encoding and file assembly."""

from dimob_gen.encoding.assembler import AssembledFile, FileAssembler
from dimob_gen.encoding.encoder import EncodedRecord, RecordEncoder, decode_record, normalize_text

__all__ = [
    "AssembledFile",
    "EncodedRecord",
    "FileAssembler",
    "RecordEncoder",
    "decode_record",
    "normalize_text",
]
