# ============================================================================
# SCHEMA TRANSLATOR TESTS
# ============================================================================
# STATUS: Tests - Entity descriptor to TableSchema translation
# PURPOSE: Verify type mapping, option bags, defaults, indexes, failure policy
# CREATED: 18 OCT 2026
# ============================================================================
"""
Schema Translator Tests

Unit tests for SchemaTranslator:
- Connection filtering
- Type mapping precedence (integer enums, json, datetime variants)
- Column options (notnull, length, scale, unsigned, default, autoincrement)
- CURRENT_TIMESTAMP heuristic with a fixed clock
- Index naming and uniqueness
- Lenient vs strict failure handling

Run with:
    pytest tests/test_translator.py -v
"""

from datetime import datetime, timedelta, timezone
from typing import ClassVar, List

import pytest
from pydantic import Field

from core.contracts import ColumnKind, EnumBacking, EntityStatus, Types
from core.models import (
    AbstractEntity,
    Column,
    ColumnDescriptor,
    DialectCapabilities,
    EntityDescriptor,
    EnumCase,
    IndexDescriptor,
)
from core.schema import SchemaTranslator, TranslationError, translate
from core.schema.reflection import get_uncast
from tests.stand.entities import Article, SampleEntity


NOW = 1_700_000_000  # 2023-11-14 22:13:20 UTC

SQLITE = DialectCapabilities.for_name("sqlite")
MYSQL = DialectCapabilities.for_name("mysql")


# ============================================================================
# HELPERS
# ============================================================================

def _translator(dialect=SQLITE):
    return SchemaTranslator(dialect, clock=lambda: float(NOW))


def _column(name="value", kind=ColumnKind.STRING, **kwargs):
    kwargs.setdefault("uncast", get_uncast(kind, kwargs.get("enum_backing")))
    return ColumnDescriptor(name=name, kind=kind, **kwargs)


def _entity(columns, table="t", connection="default", **kwargs):
    return EntityDescriptor(
        entity_name=kwargs.pop("entity_name", table.title()),
        table_name=table,
        connection_name=connection,
        columns=columns,
        **kwargs,
    )


def _options(column, dialect=SQLITE, **entity_kwargs):
    table = _translator(dialect).translate_entity(_entity([column], **entity_kwargs))
    return table.columns[0].options


def _enum_column(backing, cases):
    return _column(
        "status",
        kind=ColumnKind.ENUM,
        enum_backing=backing,
        enum_cases=[EnumCase(name=name, value=value) for name, value in cases],
    )


# ============================================================================
# CONNECTION FILTER
# ============================================================================


class TestConnectionFilter:
    def test_other_connection_emits_no_table(self):
        entities = [
            _entity([_column("id")], table="a", connection="sqlite", primary_keys=["id"]),
            _entity([_column("id")], table="b", connection="mysql", primary_keys=["id"]),
        ]
        tables = _translator().translate(entities, "sqlite")
        assert [t.name for t in tables] == ["a"]

    def test_skipped_entities_are_reported(self):
        entities = [_entity([_column("id")], table="b", connection="mysql")]
        report = _translator().translate_report(entities, "sqlite")
        assert report.tables == []
        assert report.results[0].status == EntityStatus.SKIPPED
        assert report.results[0].connection_name == "mysql"
        assert report.success is True

    def test_output_order_follows_input(self):
        entities = [
            _entity([_column("id")], table=name, connection="c")
            for name in ["zeta", "alpha", "mid"]
        ]
        tables = _translator().translate(entities, "c")
        assert [t.name for t in tables] == ["zeta", "alpha", "mid"]

    def test_empty_input(self):
        assert _translator().translate([], "default") == []


# ============================================================================
# TYPE MAPPING
# ============================================================================


class TestTypeMapping:
    @pytest.mark.parametrize("kind,expected", [
        (ColumnKind.STRING, Types.STRING),
        (ColumnKind.INTEGER, Types.INTEGER),
        (ColumnKind.FLOAT, Types.FLOAT),
        (ColumnKind.BOOLEAN, Types.BOOLEAN),
        (ColumnKind.JSON, Types.JSON),
    ])
    def test_kind_to_type(self, kind, expected):
        table = _translator().translate_entity(_entity([_column(kind=kind)]))
        assert table.columns[0].type_name == expected

    def test_datetime_on_dialect_without_variants(self):
        table = _translator().translate_entity(_entity([_column(kind=ColumnKind.DATETIME)]))
        assert table.columns[0].type_name == Types.DATETIME_MUTABLE

    def test_datetime_variants_when_dialect_distinguishes(self):
        dialect = DialectCapabilities(name="custom", distinguishes_immutable_datetime=True)
        columns = [
            _column("fixed", kind=ColumnKind.DATETIME, immutable=True),
            _column("moving", kind=ColumnKind.DATETIME, immutable=False),
        ]
        table = _translator(dialect).translate_entity(_entity(columns))
        assert table.columns[0].type_name == Types.DATETIME_IMMUTABLE
        assert table.columns[1].type_name == Types.DATETIME_MUTABLE

    def test_integer_enum_is_integer_without_definition(self):
        column = _enum_column(EnumBacking.INTEGER, [("LOW", 1), ("HIGH", 2)])
        for dialect in (SQLITE, MYSQL):
            table = _translator(dialect).translate_entity(_entity([column]))
            assert table.columns[0].type_name == Types.INTEGER
            assert "columnDefinition" not in table.columns[0].options

    def test_string_enum_on_native_enum_dialect(self):
        column = _enum_column(EnumBacking.STRING, [("B", "beta"), ("A", "alpha")])
        table = _translator(MYSQL).translate_entity(_entity([column]))
        assert table.columns[0].options["columnDefinition"] == "ENUM('beta', 'alpha')"

    def test_string_enum_without_native_enums_falls_back_to_string(self):
        column = _enum_column(EnumBacking.STRING, [("B", "beta"), ("A", "alpha")])
        table = _translator(SQLITE).translate_entity(_entity([column]))
        assert table.columns[0].type_name == Types.STRING
        assert "columnDefinition" not in table.columns[0].options

    def test_unit_enum_uses_case_names(self):
        column = _enum_column(EnumBacking.UNIT, [("RED", 1), ("GREEN", 2)])
        options = _options(column, dialect=MYSQL)
        assert options["columnDefinition"] == "ENUM('RED', 'GREEN')"


# ============================================================================
# COLUMN OPTIONS
# ============================================================================


class TestColumnOptions:
    def test_not_nullable_sets_notnull(self):
        assert _options(_column(nullable=False))["notnull"] is True

    def test_nullable_omits_notnull(self):
        assert "notnull" not in _options(_column(nullable=True))

    def test_string_without_size_defaults_to_255(self):
        assert _options(_column())["length"] == 255

    def test_string_size_from_attribute(self):
        assert _options(_column(attribute=Column(size=64)))["length"] == 64

    def test_non_string_has_no_length(self):
        assert "length" not in _options(_column(kind=ColumnKind.INTEGER))

    def test_enum_without_size_has_no_length(self):
        column = _enum_column(EnumBacking.STRING, [("A", "a")])
        assert "length" not in _options(column)

    def test_custom_default_string_length(self):
        translator = SchemaTranslator(SQLITE, default_string_length=191)
        table = translator.translate_entity(_entity([_column()]))
        assert table.columns[0].options["length"] == 191

    def test_scale_from_attribute(self):
        column = _column(kind=ColumnKind.FLOAT, attribute=Column(scale=2))
        assert _options(column)["scale"] == 2

    def test_precision_written_to_scale(self):
        column = _column(kind=ColumnKind.FLOAT, attribute=Column(precision=10))
        options = _options(column)
        assert options["scale"] == 10
        assert "precision" not in options

    def test_precision_overrides_scale(self):
        column = _column(kind=ColumnKind.FLOAT, attribute=Column(precision=10, scale=2))
        assert _options(column)["scale"] == 10

    def test_unsigned(self):
        column = _column(kind=ColumnKind.INTEGER, attribute=Column(unsigned=True))
        assert _options(column)["unsigned"] is True

    def test_unsigned_absent_by_default(self):
        assert "unsigned" not in _options(_column(kind=ColumnKind.INTEGER))

    def test_autoincrement_on_declared_column(self):
        columns = [_column("id", kind=ColumnKind.INTEGER), _column("name")]
        table = _translator().translate_entity(
            _entity(columns, primary_keys=["id"], auto_increment="id")
        )
        assert table.columns[0].options["autoincrement"] is True
        assert "autoincrement" not in table.columns[1].options

    def test_only_known_option_keys(self):
        column = _column(
            kind=ColumnKind.FLOAT,
            attribute=Column(size=3, precision=4, scale=1, unsigned=True, default=1.5),
        )
        assert set(_options(column)) <= {
            "notnull", "scale", "unsigned", "length", "default", "columnDefinition", "autoincrement",
        }


# ============================================================================
# DEFAULT VALUES
# ============================================================================


class TestDefaultValues:
    def test_attribute_default_wins(self):
        column = _column(attribute=Column(default="x"), has_default=True, default_value="y")
        assert _options(column)["default"] == "x"

    @pytest.mark.parametrize("falsy", ["", 0, False])
    def test_falsy_attribute_default_falls_back_to_field_default(self, falsy):
        column = _column(attribute=Column(default=falsy), has_default=True, default_value="y")
        assert _options(column)["default"] == "y"

    def test_falsy_attribute_default_without_field_default(self):
        assert "default" not in _options(_column(attribute=Column(default="")))

    def test_column_default_used_without_attribute_default(self):
        column = _column(has_default=True, default_value="y")
        assert _options(column)["default"] == "y"

    def test_no_default_key_without_default(self):
        assert "default" not in _options(_column())

    def test_none_default(self):
        column = _column(nullable=True, has_default=True, default_value=None)
        options = _options(column)
        assert "default" in options
        assert options["default"] is None

    def test_now_becomes_current_timestamp(self):
        value = datetime.fromtimestamp(NOW, tz=timezone.utc)
        column = _column(kind=ColumnKind.DATETIME, has_default=True, default_value=value)
        assert _options(column)["default"] == "CURRENT_TIMESTAMP"

    def test_one_second_ago_becomes_current_timestamp(self):
        value = datetime.fromtimestamp(NOW - 1, tz=timezone.utc)
        column = _column(kind=ColumnKind.DATETIME, has_default=True, default_value=value)
        assert _options(column)["default"] == "CURRENT_TIMESTAMP"

    def test_naive_utc_now_becomes_current_timestamp(self):
        value = datetime.fromtimestamp(NOW, tz=timezone.utc).replace(tzinfo=None)
        column = _column(kind=ColumnKind.DATETIME, has_default=True, default_value=value)
        assert _options(column)["default"] == "CURRENT_TIMESTAMP"

    def test_older_timestamp_is_uncast(self):
        value = datetime.fromtimestamp(NOW, tz=timezone.utc) - timedelta(seconds=2)
        column = _column(kind=ColumnKind.DATETIME, has_default=True, default_value=value)
        assert _options(column)["default"] == "2023-11-14 22:13:18"

    def test_enum_default_is_uncast(self):
        column = _enum_column(EnumBacking.STRING, [("A", "alpha")])
        column = column.model_copy(update={"has_default": True, "default_value": "alpha"})
        assert _options(column)["default"] == "alpha"


# ============================================================================
# PRIMARY KEYS & INDEXES
# ============================================================================


class TestKeysAndIndexes:
    def _table(self, indexes, primary_keys=None):
        columns = [_column(name) for name in ["a", "b", "c"]]
        return _translator().translate_entity(
            _entity(columns, indexes=indexes, primary_keys=primary_keys or [])
        )

    def test_primary_key_declared_order(self):
        table = self._table([], primary_keys=["c", "a"])
        assert table.primary_key == ["c", "a"]

    def test_unique_index_name(self):
        table = self._table([IndexDescriptor(columns=["a", "b"], is_unique=True)])
        assert table.indexes[0].name == "t_unq_a_b"

    def test_plain_index_name(self):
        table = self._table([IndexDescriptor(columns=["c"])])
        assert table.indexes[0].name == "t_idx_c"

    def test_explicit_name(self):
        table = self._table([IndexDescriptor(columns=["c"], name="custom")])
        assert table.indexes[0].name == "custom"

    def test_uniqueness_is_preserved(self):
        table = self._table([
            IndexDescriptor(columns=["a"], is_unique=True),
            IndexDescriptor(columns=["b"], is_unique=False),
        ])
        assert [(i.name, i.is_unique) for i in table.indexes] == [
            ("t_unq_a", True),
            ("t_idx_b", False),
        ]

    def test_index_columns_keep_order(self):
        table = self._table([IndexDescriptor(columns=["c", "a", "b"])])
        assert table.indexes[0].columns == ["c", "a", "b"]


# ============================================================================
# FAILURE ISOLATION
# ============================================================================


class NoTable(AbstractEntity):
    __sql_connection__: ClassVar[str] = "sqlite"
    id: str


class UnknownPrimaryKey(AbstractEntity):
    __sql_table__: ClassVar[str] = "broken"
    __sql_connection__: ClassVar[str] = "sqlite"
    __sql_primary_key__: ClassVar[List[str]] = ["missing"]
    id: str


class TestFailureIsolation:
    def test_broken_entities_are_skipped(self):
        entities = [NoTable, SampleEntity, UnknownPrimaryKey]
        report = _translator().translate_report(entities, "sqlite")

        assert [t.name for t in report.tables] == ["TestTable"]
        assert [r.status for r in report.results] == [
            EntityStatus.FAILED,
            EntityStatus.TRANSLATED,
            EntityStatus.FAILED,
        ]
        assert "missing" in report.failures[1].error
        assert report.success is False

    def test_broken_descriptor_is_skipped(self):
        broken = _entity([_column("id")], primary_keys=["nope"])
        assert _translator().translate([broken], "default") == []

    def test_auto_increment_outside_primary_key_is_skipped(self):
        broken = _entity([_column("id"), _column("n")], primary_keys=["id"], auto_increment="n")
        assert _translator().translate([broken], "default") == []

    def test_unknown_index_column_is_skipped(self):
        broken = _entity([_column("id")], indexes=[IndexDescriptor(columns=["ghost"])])
        assert _translator().translate([broken], "default") == []

    def test_strict_mode_raises(self):
        with pytest.raises(TranslationError) as exc_info:
            _translator().translate_report([SampleEntity, NoTable], "sqlite", strict=True)
        assert exc_info.value.entity_name == "NoTable"

    def test_report_to_dict(self):
        report = _translator().translate_report([NoTable, SampleEntity, Article], "sqlite")
        data = report.to_dict()
        assert data["summary"] == {"total": 3, "translated": 1, "skipped": 1, "failed": 1}
        assert data["entities"][1]["table"] == "TestTable"


# ============================================================================
# END TO END
# ============================================================================


class TestEndToEnd:
    def test_sqlite_stand(self):
        tables = translate([SampleEntity, Article], "sqlite", SQLITE)

        assert len(tables) == 1
        table = tables[0]
        assert table.name == "TestTable"
        assert table.column_names == ["id", "name", "created_at"]
        assert table.primary_key == ["id"]
        assert table.get_column("name").options["length"] == 255
        assert table.get_column("created_at").options["default"] == "CURRENT_TIMESTAMP"

    def test_mysql_stand(self):
        tables = translate([SampleEntity, Article], "mysql", MYSQL)

        assert [t.name for t in tables] == ["articles"]
        table = tables[0]
        assert table.primary_key == ["article_id"]

        article_id = table.get_column("article_id").options
        assert article_id["autoincrement"] is True
        assert article_id["unsigned"] is True

        assert table.get_column("slug").options["length"] == 120

        status = table.get_column("status")
        assert status.type_name == Types.STRING
        assert status.options["columnDefinition"] == "ENUM('draft', 'published', 'archived')"
        assert status.options["default"] == "draft"

        priority = table.get_column("priority")
        assert priority.type_name == Types.INTEGER
        assert priority.options["default"] == 1
        assert "columnDefinition" not in priority.options

        rating = table.get_column("rating")
        assert rating.type_name == Types.FLOAT
        assert rating.options["scale"] == 5
        assert "notnull" not in rating.options

        assert table.get_column("tags").type_name == Types.JSON
        assert table.get_column("tags").options["default"] == "[]"
        assert table.get_column("is_featured").options["default"] is False
        assert table.get_column("created_at").options["default"] == "CURRENT_TIMESTAMP"

        assert [(i.name, i.is_unique, i.columns) for i in table.indexes] == [
            ("articles_unq_slug", True, ["slug"]),
            ("articles_idx_status_priority", False, ["status", "priority"]),
        ]

    def test_inputs_are_not_mutated(self):
        descriptor = SampleEntity.entity_schema()
        before = descriptor.model_dump()
        translate([descriptor], "sqlite", SQLITE)
        assert descriptor.model_dump() == before
