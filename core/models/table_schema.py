# ============================================================================
# TABLE SCHEMA MODELS
# ============================================================================
# STATUS: Core model - Translator output
# PURPOSE: Relational description handed to the migrations engine
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: TableSchema, ColumnSchema, IndexSchema
# DEPENDENCIES: pydantic
# ============================================================================
"""
Table Schema Models

Output of the schema translator. Column options use a fixed vocabulary
(see core.contracts.OPTION_KEYS); an absent key means "engine default".
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from core.contracts import OPTION_KEYS


class ColumnSchema(BaseModel):
    """One output column: name, target type, option bag."""

    name: str
    type_name: str
    options: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("options")
    @classmethod
    def _known_options_only(cls, value: Dict[str, Any]) -> Dict[str, Any]:
        unknown = [key for key in value if key not in OPTION_KEYS]
        if unknown:
            raise ValueError(f"Unknown column option(s): {', '.join(unknown)}")
        return value

    @property
    def column_definition(self) -> Optional[str]:
        return self.options.get("columnDefinition")


class IndexSchema(BaseModel):
    """Named index over ordered columns."""

    name: str
    columns: List[str]
    is_unique: bool = False


class TableSchema(BaseModel):
    """
    One output table.

    Columns and indexes keep declaration order.
    """

    name: str
    columns: List[ColumnSchema] = Field(default_factory=list)
    primary_key: List[str] = Field(default_factory=list)
    indexes: List[IndexSchema] = Field(default_factory=list)

    def add_column(self, name: str, type_name: str, options: Dict[str, Any]) -> ColumnSchema:
        column = ColumnSchema(name=name, type_name=type_name, options=options)
        self.columns.append(column)
        return column

    def set_primary_key(self, columns: List[str]) -> None:
        self.primary_key = list(columns)

    def add_index(self, columns: List[str], name: str) -> IndexSchema:
        index = IndexSchema(name=name, columns=list(columns), is_unique=False)
        self.indexes.append(index)
        return index

    def add_unique_index(self, columns: List[str], name: str) -> IndexSchema:
        index = IndexSchema(name=name, columns=list(columns), is_unique=True)
        self.indexes.append(index)
        return index

    def get_column(self, name: str) -> Optional[ColumnSchema]:
        for column in self.columns:
            if column.name == name:
                return column
        return None

    @property
    def column_names(self) -> List[str]:
        return [column.name for column in self.columns]


__all__ = ["TableSchema", "ColumnSchema", "IndexSchema"]
