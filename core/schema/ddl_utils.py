# ============================================================================
# DDL UTILITIES
# ============================================================================
# STATUS: Core - Naming and type helpers for schema translation
# PURPOSE: Type map, index naming, enum definitions, default sentinels
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: TYPE_MAP, get_storage_type, IndexBuilder, EnumBuilder, DefaultBuilder
# DEPENDENCIES: none
# ============================================================================
"""
DDL Utilities - Shared Translation Patterns.

Small pure helpers used by the SchemaTranslator. Nothing here touches a
database; every helper takes descriptors and returns plain values.

Usage:
    from core.schema.ddl_utils import IndexBuilder, EnumBuilder

    IndexBuilder.index_name('users', ['email'], unique=True)
    # -> 'users_unq_email'

    EnumBuilder.definition(['a', 'b'], dialect)
    # -> "ENUM('a', 'b')" on MySQL, None elsewhere
"""

import calendar
import time
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from core.contracts import ColumnKind, EnumBacking, Types, CURRENT_TIMESTAMP
from core.models.dialect import DialectCapabilities
from core.models.entity import ColumnDescriptor


# ============================================================================
# TYPE MAPPING
# ============================================================================

TYPE_MAP = {
    ColumnKind.JSON: Types.JSON,
    ColumnKind.BOOLEAN: Types.BOOLEAN,
    ColumnKind.FLOAT: Types.FLOAT,
    ColumnKind.INTEGER: Types.INTEGER,
    ColumnKind.STRING: Types.STRING,
    ColumnKind.ENUM: Types.STRING,
}

DEFAULT_STRING_LENGTH = 255


def get_storage_type(column: ColumnDescriptor, dialect: DialectCapabilities) -> str:
    """
    Map a column to its target storage type.

    Integer-backed enums win over every other rule; datetimes use the
    immutable variant only where the dialect tells them apart.

    Args:
        column: Column descriptor
        dialect: Target dialect capabilities

    Returns:
        Type name from core.contracts.Types
    """
    if column.is_integer_enum():
        return Types.INTEGER

    if column.kind == ColumnKind.DATETIME:
        if column.immutable and dialect.distinguishes_immutable_datetime:
            return Types.DATETIME_IMMUTABLE
        return Types.DATETIME_MUTABLE

    return TYPE_MAP.get(column.kind, Types.STRING)


# ============================================================================
# INDEX BUILDER
# ============================================================================

class IndexBuilder:
    """
    Naming rules for table indexes.

    All methods are static.
    """

    @staticmethod
    def index_name(
        table: str,
        columns: Sequence[str],
        unique: bool = False,
        name: Optional[str] = None,
    ) -> str:
        """
        Explicit name if given, else {table}_{unq|idx}_{col1}_{col2}...
        """
        if name:
            return name
        parts = [table, "unq" if unique else "idx"]
        parts.extend(columns)
        return "_".join(parts)


# ============================================================================
# ENUM BUILDER
# ============================================================================

class EnumBuilder:
    """
    Raw column definitions for enum columns.
    """

    @staticmethod
    def cases(column: ColumnDescriptor) -> Optional[List[str]]:
        """
        Stored case labels, or None when the enum is not stored as text.

        UNIT enums store names, STRING enums store values.
        """
        if column.kind != ColumnKind.ENUM:
            return None
        if column.enum_backing == EnumBacking.UNIT:
            return [case.name for case in column.enum_cases]
        if column.enum_backing == EnumBacking.STRING:
            return [str(case.value) for case in column.enum_cases]
        return None

    @staticmethod
    def definition(cases: Sequence[str], dialect: DialectCapabilities) -> Optional[str]:
        """Render ENUM('a', 'b') if the dialect has native enums."""
        if not dialect.supports_native_enum:
            return None
        return "ENUM('" + "', '".join(cases) + "')"

    @staticmethod
    def column_definition(column: ColumnDescriptor, dialect: DialectCapabilities) -> Optional[str]:
        cases = EnumBuilder.cases(column)
        if cases is None:
            return None
        return EnumBuilder.definition(cases, dialect)


# ============================================================================
# DEFAULT BUILDER
# ============================================================================

class DefaultBuilder:
    """
    Default value rendering.

    A datetime default equal to "now" (or one second before) was almost
    certainly produced by a construction-time factory, so it is emitted
    as CURRENT_TIMESTAMP instead of a frozen literal.
    """

    @staticmethod
    def unix_seconds(value: datetime) -> List[int]:
        """
        Candidate unix seconds for a datetime.

        Naive datetimes are read both as local time and as UTC, since
        factories like datetime.now and datetime.utcnow both produce them.
        """
        if value.tzinfo is not None:
            return [int(value.timestamp())]
        return [int(value.timestamp()), calendar.timegm(value.timetuple())]

    @staticmethod
    def is_generation_time(value: datetime, clock: Callable[[], float] = time.time) -> bool:
        now = int(clock())
        candidates = DefaultBuilder.unix_seconds(value)
        return now in candidates or (now - 1) in candidates

    @staticmethod
    def default_value(column: ColumnDescriptor, clock: Callable[[], float] = time.time):
        """
        Compute the emitted default for a column that has one.
        """
        value = column.default_value
        if value is None:
            return None
        if isinstance(value, datetime) and DefaultBuilder.is_generation_time(value, clock):
            return CURRENT_TIMESTAMP
        return column.uncast(value)


__all__ = [
    "TYPE_MAP",
    "DEFAULT_STRING_LENGTH",
    "get_storage_type",
    "IndexBuilder",
    "EnumBuilder",
    "DefaultBuilder",
]
