"""Versioned fixed-width layouts of the declaration file."""

from dimob_gen.layout.fields import FieldSpec, LayoutVersion, RecordLayout
from dimob_gen.layout.registry import available_versions, get_layout, register_layout
from dimob_gen.layout.v1 import LAYOUT_V1

__all__ = [
    "LAYOUT_V1",
    "FieldSpec",
    "LayoutVersion",
    "RecordLayout",
    "available_versions",
    "get_layout",
    "register_layout",
]
