# ============================================================================
# SCHEMA PROVIDER BRIDGE
# ============================================================================
# STATUS: Core - Discovery + translation + MetaData in one call
# PURPOSE: Desired schema for one connection, in the shape Alembic expects
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: SchemaProviderBridge
# DEPENDENCIES: sqlalchemy
# ============================================================================
"""
SchemaProviderBridge - desired schema for the migrations engine.

Workflow:
1. Discover entity classes under the configured directories
2. Translate them for one connection and the target dialect
3. Build a SQLAlchemy MetaData graph (Alembic target_metadata)

Usage:
    # In alembic/env.py
    provider = SchemaProviderBridge(["app/entities"], "default", connection)
    target_metadata = provider.create_schema()

    # Dry run (show SQL without executing)
    for statement in provider.generate_ddl():
        print(statement)
"""

from pathlib import Path
from typing import Any, List, Optional, Sequence, Union

import sqlalchemy as sa

from core.config import get_defaults
from core.logging import ComponentType, get_logger, log_context
from core.models.dialect import DialectCapabilities
from core.models.report import TranslationReport
from core.schema.discovery import find_all_entities
from core.schema.sqlalchemy_bridge import build_metadata, compile_ddl, get_dialect
from core.schema.translator import SchemaTranslator

logger = get_logger(__name__, ComponentType.PROVIDER)


class SchemaProviderBridge:
    """
    Build the desired schema for one connection.

    Entities are rediscovered and retranslated on every call; nothing
    is cached between schema builds.
    """

    def __init__(
        self,
        entity_dirs: Sequence[Union[str, Path]],
        connection_name: str,
        connection: Any,
        strict: Optional[bool] = None,
        default_string_length: Optional[int] = None,
    ):
        """
        Args:
            entity_dirs: Directories to scan for entity classes
            connection_name: Only entities on this connection are included
            connection: SQLAlchemy Engine/Connection/Dialect or database URL
            strict: Raise on the first entity failure (defaults from config)
            default_string_length: Length for unsized strings (defaults from config)
        """
        defaults = get_defaults().translation
        self.entity_dirs = list(entity_dirs)
        self.connection_name = connection_name
        self.dialect = get_dialect(connection)
        self.capabilities = DialectCapabilities.from_sqlalchemy(self.dialect)
        self.strict = defaults.strict if strict is None else strict
        self.translator = SchemaTranslator(
            self.capabilities,
            default_string_length=default_string_length or defaults.default_string_length,
        )

    def create_report(self) -> TranslationReport:
        """Discover and translate, returning per-entity outcomes."""
        with log_context(connection=self.connection_name, operation="create_schema"):
            entities = find_all_entities(self.entity_dirs)
            return self.translator.translate_report(
                entities, self.connection_name, strict=self.strict
            )

    def create_schema(self, metadata: Optional[sa.MetaData] = None) -> sa.MetaData:
        """
        Build the MetaData graph for this connection.

        Args:
            metadata: Optional MetaData to extend

        Returns:
            sqlalchemy.MetaData
        """
        report = self.create_report()
        metadata = build_metadata(report.tables, metadata)
        logger.info(
            f"Schema for {self.connection_name} has {len(metadata.tables)} tables "
            f"(dialect {self.capabilities.name})"
        )
        return metadata

    def generate_ddl(self) -> List[str]:
        """CREATE statements for the desired schema, compiled for the target dialect."""
        return compile_ddl(self.create_schema(), self.dialect)


__all__ = ["SchemaProviderBridge"]
