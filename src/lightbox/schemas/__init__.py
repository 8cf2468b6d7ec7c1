"""Schema generations and registry for lightbox.

This package holds the closed categorical tables, the shipped schema
generations, and the registry that maps ids and names to schemas.
"""

from __future__ import annotations

from .builtin import BUILTIN_SCHEMAS, COMPACT_V1, EXTENDED_V2, TACTICAL_V3, TEXT_V4
from .categories import (
    ClassificationTier,
    CompassOctant,
    MovementState,
    UnitClass,
    enum_table,
)
from .registry import (
    SCHEMA_REGISTRY,
    decode_by_version,
    get_schema,
    list_schemas,
    peek_version,
    register_schema,
)

__all__ = [
    "BUILTIN_SCHEMAS",
    "COMPACT_V1",
    "EXTENDED_V2",
    "TACTICAL_V3",
    "TEXT_V4",
    "ClassificationTier",
    "CompassOctant",
    "MovementState",
    "UnitClass",
    "enum_table",
    "SCHEMA_REGISTRY",
    "decode_by_version",
    "get_schema",
    "list_schemas",
    "peek_version",
    "register_schema",
]
