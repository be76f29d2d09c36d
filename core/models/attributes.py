# ============================================================================
# ENTITY ATTRIBUTES
# ============================================================================
# STATUS: Core model - Declarative column and table attributes
# PURPOSE: Metadata markers attached to entity fields and entity classes
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: Column, Index
# DEPENDENCIES: dataclasses
# ============================================================================
"""
Entity Attributes

Column attributes ride along in the field annotation:

    name: Annotated[str, Column(size=64)]
    price: Annotated[float, Column(precision=10, scale=2, unsigned=True)]

Index attributes are listed on the class:

    __sql_indexes__: ClassVar[List[Index]] = [
        Index(columns=["name"]),
        Index(columns=["email"], is_unique=True, name="users_email"),
    ]

Both are plain frozen dataclasses so Pydantic keeps them untouched in
FieldInfo.metadata.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple


@dataclass(frozen=True)
class Column:
    """Column-level attribute. At most one per field."""
    size: Optional[int] = None
    default: Any = None
    precision: Optional[int] = None
    scale: Optional[int] = None
    unsigned: bool = False


@dataclass(frozen=True)
class Index:
    """Table-level index declaration."""
    columns: Tuple[str, ...] = field(default_factory=tuple)
    is_unique: bool = False
    name: Optional[str] = None

    def __post_init__(self):
        # Accept lists for convenience, store as tuple to stay hashable
        if isinstance(self.columns, str):
            object.__setattr__(self, "columns", (self.columns,))
        elif not isinstance(self.columns, tuple):
            object.__setattr__(self, "columns", tuple(self.columns))

    @classmethod
    def from_definition(cls, definition: Any) -> "Index":
        """
        Normalize an index declaration.

        Accepts an Index, a (name, columns) / (name, columns, is_unique)
        tuple, or a dict with columns/name/unique keys.
        """
        if isinstance(definition, Index):
            return definition
        if isinstance(definition, tuple):
            name = definition[0]
            columns: List[str] = definition[1] if len(definition) > 1 else []
            is_unique = bool(definition[2]) if len(definition) > 2 else False
            return cls(columns=columns, is_unique=is_unique, name=name)
        if isinstance(definition, dict):
            return cls(
                columns=definition.get("columns", []),
                is_unique=bool(definition.get("unique", definition.get("is_unique", False))),
                name=definition.get("name"),
            )
        raise TypeError(f"Unsupported index declaration: {definition!r}")


__all__ = ["Column", "Index"]
