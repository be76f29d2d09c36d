# ============================================================================
# SCHEMA MODULE
# ============================================================================
# STATUS: Core - Schema generation from entity models
# PURPOSE: Reflect entities, translate to tables, hand MetaData to Alembic
# LAST_REVIEWED: 18 OCT 2026
# ============================================================================

from core.schema.ddl_utils import (
    IndexBuilder,
    EnumBuilder,
    DefaultBuilder,
    TYPE_MAP,
    get_storage_type,
)
from core.schema.reflection import get_entity_descriptor
from core.schema.translator import SchemaTranslator, TranslationError, translate
from core.schema.discovery import find_all_entities
from core.schema.sqlalchemy_bridge import RawColumnType, build_metadata, compile_ddl
from core.schema.provider import SchemaProviderBridge

__all__ = [
    # Translation
    "SchemaTranslator",
    "TranslationError",
    "translate",
    "get_entity_descriptor",
    # Migrations engine
    "SchemaProviderBridge",
    "build_metadata",
    "compile_ddl",
    "RawColumnType",
    "find_all_entities",
    # Utilities
    "IndexBuilder",
    "EnumBuilder",
    "DefaultBuilder",
    "TYPE_MAP",
    "get_storage_type",
]
