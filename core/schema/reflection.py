# ============================================================================
# ENTITY REFLECTION
# ============================================================================
# STATUS: Core - Entity metadata provider
# PURPOSE: Reflect Pydantic entity classes into EntityDescriptor objects
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: get_entity_descriptor, get_model_metadata, reflect_column
# DEPENDENCIES: pydantic, annotated_types
# ============================================================================
"""
Entity Reflection.

Reads the __sql_* ClassVars and model_fields of an entity class and
produces an EntityDescriptor. Nothing is cached: every call reflects
the class again, so default factories (e.g. datetime.now) are observed
at translation time.

Type Mapping:
    Optional[X]                -> nullable X
    Optional[Annotated[X, m]]  -> nullable X, m scanned for Column
    bool                       -> BOOLEAN
    int                        -> INTEGER
    float                      -> FLOAT
    datetime                   -> DATETIME (immutable)
    Enum subclass              -> ENUM (backing from int/str mixin)
    dict / list / BaseModel    -> JSON
    str and everything else    -> STRING
"""

import dataclasses
import json
import types
from datetime import datetime
from enum import Enum
from typing import (
    Annotated,
    Any,
    Callable,
    Dict,
    List,
    Optional,
    Sequence,
    Tuple,
    Type,
    Union,
    get_args,
    get_origin,
)

from annotated_types import MaxLen
from pydantic import BaseModel, ValidationError
from pydantic.fields import FieldInfo

from core.contracts import ColumnKind, EnumBacking, DEFAULT_CONNECTION
from core.logging import ComponentType, get_logger
from core.models.attributes import Column, Index
from core.models.entity import (
    ColumnDescriptor,
    EntityDefinitionError,
    EntityDescriptor,
    EnumCase,
    IndexDescriptor,
)

logger = get_logger(__name__, ComponentType.REFLECTION)

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

_STRUCTURED_ORIGINS = (dict, list, tuple, set, frozenset)

if hasattr(types, "UnionType"):
    _UNION_ORIGINS = (Union, types.UnionType)
else:
    _UNION_ORIGINS = (Union,)


# ============================================================================
# METADATA EXTRACTION
# ============================================================================

def get_model_metadata(model: Type[BaseModel]) -> Dict[str, Any]:
    """
    Extract SQL metadata from an entity class.

    Args:
        model: Entity class

    Returns:
        Dict with table, connection, primary_key, indexes, auto_increment
    """
    metadata = {
        "table": getattr(model, "__sql_table__", None),
        "connection": getattr(model, "__sql_connection__", None) or DEFAULT_CONNECTION,
        "primary_key": getattr(model, "__sql_primary_key__", []) or [],
        "indexes": getattr(model, "__sql_indexes__", []) or [],
        "auto_increment": getattr(model, "__sql_auto_increment__", None),
    }

    # Normalize primary_key to list
    if isinstance(metadata["primary_key"], str):
        metadata["primary_key"] = [metadata["primary_key"]]
    else:
        metadata["primary_key"] = list(metadata["primary_key"])

    return metadata


# ============================================================================
# TYPE CONVERSION
# ============================================================================

def unwrap_optional(annotation: Any) -> Tuple[Any, bool]:
    """
    Strip None from a Union annotation.

    Returns:
        (actual_type, nullable)
    """
    if get_origin(annotation) in _UNION_ORIGINS:
        args = get_args(annotation)
        non_none = [arg for arg in args if arg is not type(None)]
        nullable = len(non_none) < len(args)
        if len(non_none) == 1:
            return non_none[0], nullable
        return annotation, nullable
    return annotation, False


def unwrap_annotated(annotation: Any) -> Tuple[Any, List[Any]]:
    """
    Split an Annotated type into (inner_type, metadata).

    Pydantic only lifts Annotated metadata into FieldInfo.metadata when
    Annotated is the outermost type; Optional[Annotated[...]] keeps it here.
    Nested FieldInfo objects (Field(max_length=...)) are flattened into
    their constraint metadata.
    """
    if get_origin(annotation) is not Annotated:
        return annotation, []
    inner, *extras = get_args(annotation)
    metadata: List[Any] = []
    for extra in extras:
        if isinstance(extra, FieldInfo):
            metadata.extend(extra.metadata)
        else:
            metadata.append(extra)
    return inner, metadata


def get_column_kind(actual_type: Any) -> ColumnKind:
    """Map an unwrapped Python annotation to a column kind."""
    origin = get_origin(actual_type)
    if origin in _STRUCTURED_ORIGINS:
        return ColumnKind.JSON

    if not isinstance(actual_type, type):
        return ColumnKind.STRING

    # Order matters: Enum before int (IntEnum), bool before int
    if issubclass(actual_type, Enum):
        return ColumnKind.ENUM
    if issubclass(actual_type, bool):
        return ColumnKind.BOOLEAN
    if issubclass(actual_type, int):
        return ColumnKind.INTEGER
    if issubclass(actual_type, float):
        return ColumnKind.FLOAT
    if issubclass(actual_type, datetime):
        return ColumnKind.DATETIME
    if issubclass(actual_type, _STRUCTURED_ORIGINS) or issubclass(actual_type, BaseModel):
        return ColumnKind.JSON
    return ColumnKind.STRING


def get_enum_backing(enum_class: Type[Enum]) -> EnumBacking:
    """Integer mixin -> INTEGER, str mixin -> STRING, otherwise UNIT."""
    if issubclass(enum_class, int):
        return EnumBacking.INTEGER
    if issubclass(enum_class, str):
        return EnumBacking.STRING
    return EnumBacking.UNIT


def _uncast_json(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump_json()
    if isinstance(value, (dict, list, tuple, set, frozenset)):
        if isinstance(value, (set, frozenset)):
            value = sorted(value)
        return json.dumps(value, separators=(",", ":"), default=str)
    return value


def _uncast_datetime(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.strftime(DATETIME_FORMAT)
    return value


def _uncast_unit_enum(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.name
    return value


def _uncast_backed_enum(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


def get_uncast(kind: ColumnKind, backing: Optional[EnumBacking] = None) -> Callable[[Any], Any]:
    """Pick the converter that turns a Python value into its stored scalar."""
    if kind == ColumnKind.ENUM:
        return _uncast_unit_enum if backing == EnumBacking.UNIT else _uncast_backed_enum
    if kind == ColumnKind.DATETIME:
        return _uncast_datetime
    if kind.is_structured():
        return _uncast_json
    return lambda value: value


# ============================================================================
# FIELD REFLECTION
# ============================================================================

def get_column_attribute(
    field_name: str,
    field_info: FieldInfo,
    extra_metadata: Sequence[Any] = (),
) -> Optional[Column]:
    """
    Find the Column attribute for a field.

    A Field(max_length=...) constraint stands in for Column(size=...)
    when no size is declared explicitly.

    Args:
        field_name: Field name (for error messages)
        field_info: Pydantic field information
        extra_metadata: Annotated metadata found below an Optional
    """
    metadata = list(field_info.metadata) + list(extra_metadata)
    attributes = [m for m in metadata if isinstance(m, Column)]
    if len(attributes) > 1:
        raise EntityDefinitionError(
            f"Field '{field_name}' declares more than one Column attribute",
            field=field_name,
        )
    attribute = attributes[0] if attributes else None

    max_length = None
    for constraint in metadata:
        if isinstance(constraint, MaxLen):
            max_length = constraint.max_length
            break

    if max_length and (attribute is None or not attribute.size):
        attribute = dataclasses.replace(attribute or Column(), size=max_length)

    return attribute


def get_default(field_info: FieldInfo) -> Tuple[bool, Any]:
    """
    Resolve a field default.

    Returns:
        (has_default, value) - default_factory is called unless it
        needs validated data, in which case the value is None
    """
    if field_info.is_required():
        return False, None
    if field_info.default_factory_takes_validated_data:
        return True, None
    if field_info.default_factory is not None:
        return True, field_info.get_default(call_default_factory=True)
    return True, field_info.default


def reflect_column(field_name: str, field_info: FieldInfo) -> ColumnDescriptor:
    """
    Reflect one model field into a ColumnDescriptor.

    Args:
        field_name: Field name (used as column name)
        field_info: Pydantic field information

    Returns:
        ColumnDescriptor
    """
    actual_type, nullable = unwrap_optional(field_info.annotation)
    actual_type, annotated_metadata = unwrap_annotated(actual_type)
    if annotated_metadata:
        actual_type, inner_nullable = unwrap_optional(actual_type)
        nullable = nullable or inner_nullable
    kind = get_column_kind(actual_type)
    has_default, default_value = get_default(field_info)

    backing = None
    cases: List[EnumCase] = []
    if kind == ColumnKind.ENUM:
        backing = get_enum_backing(actual_type)
        cases = [EnumCase(name=member.name, value=member.value) for member in actual_type]

    return ColumnDescriptor(
        name=field_name,
        kind=kind,
        nullable=nullable,
        has_default=has_default,
        default_value=default_value,
        attribute=get_column_attribute(field_name, field_info, annotated_metadata),
        immutable=True,
        enum_backing=backing,
        enum_cases=cases,
        uncast=get_uncast(kind, backing),
    )


# ============================================================================
# ENTITY REFLECTION
# ============================================================================

def get_entity_descriptor(model: Type[BaseModel]) -> EntityDescriptor:
    """
    Reflect an entity class into an EntityDescriptor.

    Args:
        model: Entity class with __sql_* metadata

    Returns:
        EntityDescriptor (integrity-checked)

    Raises:
        EntityDefinitionError: If the metadata is missing or inconsistent
    """
    entity_name = getattr(model, "__name__", repr(model))
    if not isinstance(model, type) or not issubclass(model, BaseModel):
        raise EntityDefinitionError(f"{entity_name} is not a Pydantic model", entity_name=entity_name)

    meta = get_model_metadata(model)
    if not meta["table"]:
        raise EntityDefinitionError(
            f"Model {entity_name} missing __sql_table__ attribute",
            entity_name=entity_name,
            field="__sql_table__",
        )

    logger.debug(f"Reflecting {entity_name} -> {meta['connection']}.{meta['table']}")

    try:
        columns = [
            reflect_column(field_name, field_info)
            for field_name, field_info in model.model_fields.items()
        ]
        indexes = [
            IndexDescriptor.from_attribute(Index.from_definition(definition))
            for definition in meta["indexes"]
        ]
        descriptor = EntityDescriptor(
            entity_name=entity_name,
            table_name=meta["table"],
            connection_name=meta["connection"],
            columns=columns,
            indexes=indexes,
            primary_keys=meta["primary_key"],
            auto_increment=meta["auto_increment"],
        )
    except EntityDefinitionError as e:
        if e.entity_name is None:
            e.entity_name = entity_name
        raise
    except (TypeError, ValueError, ValidationError) as e:
        raise EntityDefinitionError(
            f"Cannot reflect {entity_name}: {e}", entity_name=entity_name
        ) from e

    return descriptor.check_integrity()


__all__ = [
    "get_entity_descriptor",
    "get_model_metadata",
    "reflect_column",
    "get_column_kind",
    "get_enum_backing",
    "unwrap_optional",
    "DATETIME_FORMAT",
]
