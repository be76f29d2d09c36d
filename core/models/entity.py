# ============================================================================
# ENTITY DESCRIPTOR MODELS
# ============================================================================
# STATUS: Core model - Reflected entity metadata
# PURPOSE: Immutable description of one entity type and its columns
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: AbstractEntity, EntityDescriptor, ColumnDescriptor, IndexDescriptor,
#          EnumCase, EntityDefinitionError
# DEPENDENCIES: pydantic
# ============================================================================
"""
Entity Descriptor Models

An entity is a Pydantic model that carries SQL metadata via ClassVar
attributes (same convention the DDL tooling has always used):

    __sql_table__: Table name (required)
    __sql_connection__: Connection identifier the table lives on
    __sql_primary_key__: Primary key column(s) - string or list
    __sql_indexes__: List of Index declarations
    __sql_auto_increment__: Auto-increment column (must be in the primary key)

Reflecting an entity yields an EntityDescriptor. Descriptors are derived
fresh on every translation and never mutated.
"""

from typing import Any, Callable, ClassVar, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from core.contracts import ColumnKind, EnumBacking, DEFAULT_CONNECTION
from core.models.attributes import Column, Index


# ============================================================================
# EXCEPTIONS
# ============================================================================

class EntityDefinitionError(Exception):
    """Raised when entity metadata is malformed or inconsistent."""

    def __init__(self, message: str, entity_name: str = None, field: str = None):
        self.entity_name = entity_name
        self.field = field
        super().__init__(message)


def _identity(value: Any) -> Any:
    return value


# ============================================================================
# DESCRIPTORS
# ============================================================================

class EnumCase(BaseModel):
    """One case of an enum column, in declaration order."""
    model_config = ConfigDict(frozen=True)

    name: str
    value: Any = None


class ColumnDescriptor(BaseModel):
    """
    Metadata for one entity field.

    The attribute (if any) takes precedence over descriptor defaults
    when the translator builds the option bag.
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    kind: ColumnKind = ColumnKind.STRING
    nullable: bool = False

    # Default value as declared on the entity (default_factory already called)
    has_default: bool = False
    default_value: Any = None

    # Column-level attribute (size/default/precision/scale/unsigned)
    attribute: Optional[Column] = None

    # DATETIME only
    immutable: bool = True

    # ENUM only
    enum_backing: Optional[EnumBacking] = None
    enum_cases: List[EnumCase] = Field(default_factory=list)

    # Converts a Python value into its raw stored scalar
    uncast: Callable[[Any], Any] = Field(default=_identity, exclude=True)

    def is_integer_enum(self) -> bool:
        """Check if this is an enum stored as plain integers."""
        return self.kind == ColumnKind.ENUM and self.enum_backing == EnumBacking.INTEGER


class IndexDescriptor(BaseModel):
    """Table-level index: optional explicit name, ordered columns, uniqueness."""
    model_config = ConfigDict(frozen=True)

    columns: List[str]
    is_unique: bool = False
    name: Optional[str] = None

    @classmethod
    def from_attribute(cls, attribute: Index) -> "IndexDescriptor":
        return cls(
            columns=list(attribute.columns),
            is_unique=attribute.is_unique,
            name=attribute.name,
        )


class EntityDescriptor(BaseModel):
    """
    Structured metadata for one entity type.

    Maps to: one table on one connection
    """
    model_config = ConfigDict(frozen=True)

    entity_name: str
    table_name: str
    connection_name: str = DEFAULT_CONNECTION
    columns: List[ColumnDescriptor] = Field(default_factory=list)
    indexes: List[IndexDescriptor] = Field(default_factory=list)
    primary_keys: List[str] = Field(default_factory=list)
    auto_increment: Optional[str] = None

    @property
    def column_names(self) -> List[str]:
        return [column.name for column in self.columns]

    def get_column(self, name: str) -> Optional[ColumnDescriptor]:
        for column in self.columns:
            if column.name == name:
                return column
        return None

    def check_integrity(self) -> "EntityDescriptor":
        """
        Verify structural invariants.

        Raises:
            EntityDefinitionError: On empty table name, duplicate columns,
                or primary key / index / auto-increment columns that are
                not declared on the entity.

        Returns:
            self, for chaining
        """
        if not self.table_name:
            raise EntityDefinitionError(
                f"Entity {self.entity_name} has no table name",
                entity_name=self.entity_name,
                field="table_name",
            )

        names = self.column_names
        seen = set()
        for name in names:
            if name in seen:
                raise EntityDefinitionError(
                    f"Entity {self.entity_name} declares column '{name}' twice",
                    entity_name=self.entity_name,
                    field=name,
                )
            seen.add(name)

        for key in self.primary_keys:
            if key not in seen:
                raise EntityDefinitionError(
                    f"Primary key column '{key}' is not a column of {self.entity_name}",
                    entity_name=self.entity_name,
                    field=key,
                )

        for index in self.indexes:
            if not index.columns:
                raise EntityDefinitionError(
                    f"Index on {self.entity_name} declares no columns",
                    entity_name=self.entity_name,
                )
            for column in index.columns:
                if column not in seen:
                    raise EntityDefinitionError(
                        f"Index column '{column}' is not a column of {self.entity_name}",
                        entity_name=self.entity_name,
                        field=column,
                    )

        if self.auto_increment is not None and self.auto_increment not in self.primary_keys:
            raise EntityDefinitionError(
                f"Auto-increment column '{self.auto_increment}' must be part of the primary key",
                entity_name=self.entity_name,
                field=self.auto_increment,
            )

        return self


# ============================================================================
# ENTITY BASE CLASS
# ============================================================================

class AbstractEntity(BaseModel):
    """
    Base class for persistent entities.

    Subclasses declare fields as usual and set the __sql_* ClassVars.
    """

    __sql_table__: ClassVar[Optional[str]] = None
    __sql_connection__: ClassVar[str] = DEFAULT_CONNECTION
    __sql_primary_key__: ClassVar[Union[str, List[str]]] = []
    __sql_indexes__: ClassVar[List[Any]] = []
    __sql_auto_increment__: ClassVar[Optional[str]] = None

    @classmethod
    def entity_schema(cls) -> EntityDescriptor:
        """Reflect this entity class into a descriptor."""
        from core.schema.reflection import get_entity_descriptor
        return get_entity_descriptor(cls)


__all__ = [
    "AbstractEntity",
    "EntityDescriptor",
    "ColumnDescriptor",
    "IndexDescriptor",
    "EnumCase",
    "EntityDefinitionError",
]
