# ============================================================================
# SQLALCHEMY BRIDGE
# ============================================================================
# STATUS: Core - TableSchema to SQLAlchemy MetaData
# PURPOSE: Feed translated tables to Alembic autogenerate via MetaData
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: build_metadata, build_table, RawColumnType, compile_ddl, get_dialect
# DEPENDENCIES: sqlalchemy
# ============================================================================
"""
SQLAlchemy Bridge.

Alembic diffs a live database against a MetaData graph. This module builds
that graph from TableSchema objects. Option keys map as follows:

    notnull          -> Column(nullable=False)
    length           -> String(length)
    unsigned         -> MySQL/MariaDB UNSIGNED variant
    scale            -> Float(decimal_return_scale=scale)
    default          -> Column(server_default=...)
    columnDefinition -> RawColumnType (replaces the synthesized type)
    autoincrement    -> Column(autoincrement=True)
"""

import logging
from typing import Any, Iterable, List, Optional, Union

import sqlalchemy as sa
from sqlalchemy.dialects import mysql
from sqlalchemy.engine import Dialect
from sqlalchemy.schema import CreateIndex, CreateTable
from sqlalchemy.types import TypeEngine, UserDefinedType

from core.contracts import Types, CURRENT_TIMESTAMP
from core.models.table_schema import ColumnSchema, TableSchema

logger = logging.getLogger(__name__)

UNSIGNED_DIALECTS = ("mysql", "mariadb")


# ============================================================================
# TYPES
# ============================================================================

class RawColumnType(UserDefinedType):
    """Column type rendered verbatim, e.g. ENUM('a', 'b')."""
    cache_ok = True

    def __init__(self, definition: str):
        self.definition = definition

    def get_col_spec(self, **kw):
        return self.definition

    def __repr__(self):
        return f"RawColumnType({self.definition!r})"


def build_type(column: ColumnSchema) -> TypeEngine:
    """
    Map an output column to a SQLAlchemy type.

    A columnDefinition always wins over the synthesized type.
    """
    options = column.options
    definition = column.column_definition
    if definition:
        return RawColumnType(definition)

    type_name = column.type_name
    unsigned = bool(options.get("unsigned"))

    if type_name == Types.INTEGER:
        if unsigned:
            return sa.Integer().with_variant(mysql.INTEGER(unsigned=True), *UNSIGNED_DIALECTS)
        return sa.Integer()
    if type_name == Types.FLOAT:
        float_type = sa.Float(decimal_return_scale=options.get("scale"))
        if unsigned:
            return float_type.with_variant(mysql.FLOAT(unsigned=True), *UNSIGNED_DIALECTS)
        return float_type
    if type_name == Types.BOOLEAN:
        return sa.Boolean()
    if type_name in (Types.DATETIME_MUTABLE, Types.DATETIME_IMMUTABLE):
        return sa.DateTime()
    if type_name == Types.JSON:
        return sa.JSON()
    return sa.String(length=options.get("length"))


def build_server_default(value: Any) -> Optional[Any]:
    """Translate an emitted default into a server_default argument."""
    if value is None:
        return None
    if value == CURRENT_TIMESTAMP:
        return sa.text(CURRENT_TIMESTAMP)
    if isinstance(value, bool):
        return sa.true() if value else sa.false()
    if isinstance(value, (int, float)):
        return sa.text(str(value))
    return str(value)


# ============================================================================
# TABLE GENERATION
# ============================================================================

def build_column(column: ColumnSchema) -> sa.Column:
    options = column.options
    kwargs = {}

    if options.get("notnull"):
        kwargs["nullable"] = False

    server_default = build_server_default(options.get("default"))
    if server_default is not None:
        kwargs["server_default"] = server_default

    if options.get("autoincrement"):
        kwargs["autoincrement"] = True

    return sa.Column(column.name, build_type(column), **kwargs)


def build_table(table: TableSchema, metadata: sa.MetaData) -> sa.Table:
    """
    Register one TableSchema on metadata.

    Args:
        table: Translator output
        metadata: Target MetaData

    Returns:
        sqlalchemy.Table
    """
    items: List[Any] = [build_column(column) for column in table.columns]

    if table.primary_key:
        items.append(sa.PrimaryKeyConstraint(*table.primary_key))

    for index in table.indexes:
        items.append(sa.Index(index.name, *index.columns, unique=index.is_unique))

    return sa.Table(table.name, metadata, *items)


def build_metadata(
    tables: Iterable[TableSchema],
    metadata: Optional[sa.MetaData] = None,
) -> sa.MetaData:
    """
    Build a MetaData graph for Alembic.

    A table name seen twice keeps its first definition.
    """
    metadata = metadata if metadata is not None else sa.MetaData()

    for table in tables:
        if table.name in metadata.tables:
            logger.warning(f"Table {table.name} already defined, keeping first definition")
            continue
        build_table(table, metadata)

    return metadata


# ============================================================================
# DDL RENDERING
# ============================================================================

def get_dialect(target: Union[str, Dialect, Any]) -> Dialect:
    """
    Resolve a SQLAlchemy Dialect from a URL, Engine, Connection or Dialect.
    """
    if isinstance(target, Dialect):
        return target
    if isinstance(target, (str, sa.engine.URL)):
        return sa.engine.make_url(target).get_dialect()()
    dialect = getattr(target, "dialect", None)
    if isinstance(dialect, Dialect):
        return dialect
    raise TypeError(f"Cannot resolve a dialect from {target!r}")


def compile_ddl(metadata: sa.MetaData, dialect: Dialect) -> List[str]:
    """
    Render CREATE TABLE / CREATE INDEX statements for every table.

    Tables keep registration order; indexes are sorted by name.
    """
    statements = []
    for table in metadata.tables.values():
        statements.append(str(CreateTable(table).compile(dialect=dialect)).strip())
        for index in sorted(table.indexes, key=lambda i: i.name or ""):
            statements.append(str(CreateIndex(index).compile(dialect=dialect)).strip())
    return statements


__all__ = [
    "RawColumnType",
    "build_type",
    "build_server_default",
    "build_column",
    "build_table",
    "build_metadata",
    "get_dialect",
    "compile_ddl",
]
