# ============================================================================
# MODELS MODULE
# ============================================================================
# STATUS: Model exports
# PURPOSE: Central export point for entity, schema and report models
# LAST_REVIEWED: 18 OCT 2026
# ============================================================================
"""
Models Module - Central Export Point

Input side:
    - AbstractEntity: Pydantic base for entities with __sql_* metadata
    - Column / Index: declarative attributes
    - EntityDescriptor / ColumnDescriptor / IndexDescriptor: reflected metadata

Output side:
    - TableSchema / ColumnSchema / IndexSchema: translator output
    - TranslationReport / EntityResult: per-entity outcomes
"""

from core.models.attributes import Column, Index
from core.models.entity import (
    AbstractEntity,
    EntityDescriptor,
    ColumnDescriptor,
    IndexDescriptor,
    EnumCase,
    EntityDefinitionError,
)
from core.models.dialect import DialectCapabilities
from core.models.table_schema import TableSchema, ColumnSchema, IndexSchema
from core.models.report import EntityResult, TranslationReport

__all__ = [
    # Attributes
    "Column",
    "Index",
    # Entities
    "AbstractEntity",
    "EntityDescriptor",
    "ColumnDescriptor",
    "IndexDescriptor",
    "EnumCase",
    "EntityDefinitionError",
    # Dialect
    "DialectCapabilities",
    # Output
    "TableSchema",
    "ColumnSchema",
    "IndexSchema",
    # Report
    "EntityResult",
    "TranslationReport",
]
