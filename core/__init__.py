# ============================================================================
# CORE MODULE
# ============================================================================
# STATUS: Core module initialization
# PURPOSE: Export contracts, entity models, and schema translation
# LAST_REVIEWED: 18 OCT 2026
# ============================================================================

from core.contracts import ColumnKind, EnumBacking, EntityStatus, Types
from core.models import (
    AbstractEntity,
    Column,
    Index,
    EntityDescriptor,
    ColumnDescriptor,
    IndexDescriptor,
    DialectCapabilities,
    TableSchema,
    TranslationReport,
    EntityDefinitionError,
)
from core.schema import SchemaTranslator, SchemaProviderBridge, TranslationError, translate

__all__ = [
    # Enums
    "ColumnKind",
    "EnumBacking",
    "EntityStatus",
    "Types",
    # Models
    "AbstractEntity",
    "Column",
    "Index",
    "EntityDescriptor",
    "ColumnDescriptor",
    "IndexDescriptor",
    "DialectCapabilities",
    "TableSchema",
    "TranslationReport",
    "EntityDefinitionError",
    # Schema
    "SchemaTranslator",
    "SchemaProviderBridge",
    "TranslationError",
    "translate",
]
