# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# STATUS: Foundation - Column kinds and target type names
# PURPOSE: Shared vocabulary between entity reflection and schema translation
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: ColumnKind, EnumBacking, EntityStatus, Types, OPTION_KEYS
# DEPENDENCIES: enum
# ============================================================================
"""
Base contracts for the entity schema bridge.

These define the vocabulary that crosses the boundary between:
- Entity classes (Pydantic models with __sql_* metadata)
- The schema translator (descriptor -> TableSchema)
- The migrations engine (TableSchema -> SQLAlchemy MetaData -> Alembic)
"""

from enum import Enum


# ============================================================================
# COLUMN KINDS
# ============================================================================

class ColumnKind(str, Enum):
    """
    Semantic kind of an entity column.

    Every entity field is reflected into exactly one kind; the translator
    maps kinds to target storage types.
    """
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DATETIME = "datetime"
    ENUM = "enum"
    JSON = "json"            # dict / list / nested model

    def is_structured(self) -> bool:
        """Check if values of this kind are stored as serialized JSON."""
        return self is ColumnKind.JSON


class EnumBacking(str, Enum):
    """
    How an enum column stores its cases.

    UNIT enums store case names, STRING enums store case values,
    INTEGER enums store integer values in a plain INTEGER column.
    """
    UNIT = "unit"
    STRING = "string"
    INTEGER = "integer"


class EntityStatus(str, Enum):
    """Outcome of translating one entity."""
    TRANSLATED = "translated"    # Table emitted
    SKIPPED = "skipped"          # Connection did not match
    FAILED = "failed"            # Derivation or translation raised

    def produced_table(self) -> bool:
        return self is EntityStatus.TRANSLATED


# ============================================================================
# TARGET TYPE NAMES
# ============================================================================

class Types:
    """Storage type names emitted by the translator."""
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    JSON = "json"
    DATETIME_MUTABLE = "datetime"
    DATETIME_IMMUTABLE = "datetime_immutable"


# Option keys understood by the migrations engine adapter
OPTION_KEYS = (
    "notnull",
    "scale",
    "unsigned",
    "length",
    "default",
    "columnDefinition",
    "autoincrement",
)

CURRENT_TIMESTAMP = "CURRENT_TIMESTAMP"
DEFAULT_CONNECTION = "default"


__all__ = [
    "ColumnKind",
    "EnumBacking",
    "EntityStatus",
    "Types",
    "OPTION_KEYS",
    "CURRENT_TIMESTAMP",
    "DEFAULT_CONNECTION",
]
