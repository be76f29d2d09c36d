# ============================================================================
# SCHEMA TRANSLATOR
# ============================================================================
# STATUS: Core - Entity descriptors to relational table schemas
# PURPOSE: Translate entity metadata into tables, columns, keys and indexes
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: SchemaTranslator, TranslationError, translate
# DEPENDENCIES: pydantic
# ============================================================================
"""
Schema Translator.

Turns EntityDescriptors (or entity classes, reflected on the fly) into
TableSchema objects for one target connection and dialect.

Failure policy:
    - lenient (default): an entity whose derivation or translation raises
      contributes no table; it is recorded as FAILED and the run goes on.
    - strict: the first failure is raised as TranslationError.

Usage:
    translator = SchemaTranslator(DialectCapabilities.for_name("mysql"))
    tables = translator.translate([User, Order], "default")

    report = translator.translate_report(entities, "default")
    for failure in report.failures:
        print(failure.entity_name, failure.error)
"""

import time
from typing import Any, Callable, Dict, List, Sequence, Type, Union

from pydantic import BaseModel

from core.contracts import ColumnKind, EntityStatus
from core.logging import ComponentType, get_logger, log_context, log_checkpoint
from core.models.dialect import DialectCapabilities
from core.models.entity import ColumnDescriptor, EntityDescriptor
from core.models.report import EntityResult, TranslationReport
from core.models.table_schema import TableSchema
from core.schema.ddl_utils import (
    DEFAULT_STRING_LENGTH,
    DefaultBuilder,
    EnumBuilder,
    IndexBuilder,
    get_storage_type,
)
from core.schema.reflection import get_entity_descriptor

logger = get_logger(__name__, ComponentType.TRANSLATOR)

EntitySource = Union[EntityDescriptor, Type[BaseModel]]


# ============================================================================
# EXCEPTIONS
# ============================================================================

class TranslationError(Exception):
    """Raised in strict mode when one entity cannot be translated."""

    def __init__(self, entity_name: str, reason: str):
        self.entity_name = entity_name
        self.reason = reason
        super().__init__(f"Cannot translate {entity_name}: {reason}")


# ============================================================================
# TRANSLATOR
# ============================================================================

class SchemaTranslator:
    """
    Translate entity descriptors into TableSchema objects.

    Stateless between calls; safe to reuse.
    """

    def __init__(
        self,
        dialect: DialectCapabilities,
        clock: Callable[[], float] = time.time,
        default_string_length: int = DEFAULT_STRING_LENGTH,
    ):
        """
        Args:
            dialect: Target dialect capabilities
            clock: Returns current unix time (used by the CURRENT_TIMESTAMP heuristic)
            default_string_length: length for string columns without a size
        """
        self.dialect = dialect
        self.clock = clock
        self.default_string_length = default_string_length

    # =========================================================================
    # ENTRY POINTS
    # =========================================================================

    def translate(self, entities: Sequence[EntitySource], target_connection: str) -> List[TableSchema]:
        """
        Translate entities, skipping any that fail.

        Returns:
            Tables for entities on target_connection, in input order
        """
        return self.translate_report(entities, target_connection).tables

    def translate_report(
        self,
        entities: Sequence[EntitySource],
        target_connection: str,
        strict: bool = False,
    ) -> TranslationReport:
        """
        Translate entities and record the outcome of each one.

        Args:
            entities: EntityDescriptors or entity classes
            target_connection: Only entities on this connection produce tables
            strict: Raise TranslationError on the first failure

        Returns:
            TranslationReport
        """
        report = TranslationReport(target_connection=target_connection, dialect=self.dialect.name)

        for entity in entities:
            entity_name = _entity_name(entity)
            with log_context(entity=entity_name, connection=target_connection):
                result = self._translate_one(entity, entity_name, target_connection, strict)
            report.results.append(result)

        summary = report.to_dict()["summary"]
        logger.info(
            f"Translated {summary['translated']} of {summary['total']} entities "
            f"for connection {target_connection} "
            f"({summary['skipped']} skipped, {summary['failed']} failed)"
        )
        log_checkpoint("schema_translated", summary)
        return report

    def _translate_one(
        self,
        entity: EntitySource,
        entity_name: str,
        target_connection: str,
        strict: bool,
    ) -> EntityResult:
        try:
            descriptor = self.derive(entity)
            if descriptor.connection_name != target_connection:
                logger.debug(f"Skipping {entity_name}: connection {descriptor.connection_name}")
                return EntityResult(
                    entity_name=entity_name,
                    status=EntityStatus.SKIPPED,
                    connection_name=descriptor.connection_name,
                )
            table = self.translate_entity(descriptor)
        except Exception as e:
            if strict:
                raise TranslationError(entity_name, str(e)) from e
            logger.warning(f"Skipping {entity_name}: {e}")
            return EntityResult(
                entity_name=entity_name,
                status=EntityStatus.FAILED,
                error=str(e),
            )

        return EntityResult(
            entity_name=entity_name,
            status=EntityStatus.TRANSLATED,
            table=table,
            connection_name=descriptor.connection_name,
        )

    # =========================================================================
    # DERIVATION
    # =========================================================================

    @staticmethod
    def derive(entity: EntitySource) -> EntityDescriptor:
        """Reflect entity classes; integrity-check descriptors."""
        if isinstance(entity, EntityDescriptor):
            return entity.check_integrity()
        return get_entity_descriptor(entity)

    # =========================================================================
    # TABLE GENERATION
    # =========================================================================

    def translate_entity(self, descriptor: EntityDescriptor) -> TableSchema:
        """
        Build the TableSchema for one descriptor.

        Args:
            descriptor: Integrity-checked EntityDescriptor

        Returns:
            TableSchema
        """
        with log_context(table=descriptor.table_name):
            table = TableSchema(name=descriptor.table_name)

            for column in descriptor.columns:
                table.add_column(
                    name=column.name,
                    type_name=get_storage_type(column, self.dialect),
                    options=self.get_column_options(descriptor, column),
                )

            table.set_primary_key(descriptor.primary_keys)

            for index in descriptor.indexes:
                index_name = IndexBuilder.index_name(
                    descriptor.table_name, index.columns, unique=index.is_unique, name=index.name
                )
                if index.is_unique:
                    table.add_unique_index(columns=index.columns, name=index_name)
                else:
                    table.add_index(columns=index.columns, name=index_name)

            logger.debug(
                f"Built table {table.name}: {len(table.columns)} columns, {len(table.indexes)} indexes"
            )
        return table

    def get_column_options(self, descriptor: EntityDescriptor, column: ColumnDescriptor) -> Dict[str, Any]:
        """
        Build the option bag for one column.

        Attribute values win over descriptor-derived defaults; a falsy
        attribute value (0, "", False) counts as unset.
        Precision is written to the scale key and overrides a declared scale.
        """
        options: Dict[str, Any] = {}
        attribute = column.attribute

        if not column.nullable:
            options["notnull"] = True

        if attribute is not None and attribute.scale:
            options["scale"] = attribute.scale

        if attribute is not None and attribute.precision:
            options["scale"] = attribute.precision

        if attribute is not None and attribute.unsigned:
            options["unsigned"] = True

        if attribute is not None and attribute.size:
            options["length"] = attribute.size
        elif column.kind == ColumnKind.STRING:
            options["length"] = self.default_string_length

        if attribute is not None and attribute.default:
            options["default"] = attribute.default
        elif column.has_default:
            options["default"] = DefaultBuilder.default_value(column, self.clock)

        column_definition = EnumBuilder.column_definition(column, self.dialect)
        if column_definition:
            options["columnDefinition"] = column_definition

        if column.name == descriptor.auto_increment:
            options["autoincrement"] = True

        return options


# ============================================================================
# HELPERS
# ============================================================================

def _entity_name(entity: Any) -> str:
    if isinstance(entity, EntityDescriptor):
        return entity.entity_name
    return getattr(entity, "__name__", repr(entity))


def translate(
    entities: Sequence[EntitySource],
    target_connection: str,
    dialect: DialectCapabilities,
) -> List[TableSchema]:
    """
    Translate entities for one connection and dialect, skipping failures.
    """
    return SchemaTranslator(dialect).translate(entities, target_connection)


__all__ = ["SchemaTranslator", "TranslationError", "translate"]
