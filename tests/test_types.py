"""Tests for the portable type system."""

import datetime
import uuid

import pytest

from seedscribe.core.types import OPAQUE, DbType, TypeMapping, semantic_type_name
from seedscribe.providers.postgresql import TYPE_MAPPING as PG_TYPES
from seedscribe.providers.sqlserver import TYPE_MAPPING as MSSQL_TYPES


class TestDbTypeParse:
    """Tests for DbType.parse()."""

    def test_parse_value(self) -> None:
        assert DbType.parse("AnsiString") is DbType.ANSI_STRING
        assert DbType.parse("DateTimeOffset") is DbType.DATE_TIME_OFFSET

    def test_parse_is_case_insensitive(self) -> None:
        assert DbType.parse("int32") is DbType.INT32
        assert DbType.parse("  GUID ") is DbType.GUID

    def test_parse_member_name(self) -> None:
        assert DbType.parse("STRING_FIXED_LENGTH") is DbType.STRING_FIXED_LENGTH

    def test_parse_unknown_raises(self) -> None:
        with pytest.raises(ValueError, match="not a valid DbType"):
            DbType.parse("Varchar")


class TestTypeMapping:
    """Tests for TypeMapping.map()."""

    def test_unknown_type_is_opaque(self) -> None:
        result = MSSQL_TYPES.map("geography")

        assert result is OPAQUE
        assert result.is_opaque
        assert result.semantic_type is object
        assert result.db_type is DbType.OBJECT

    def test_missing_type_is_opaque(self) -> None:
        assert MSSQL_TYPES.map(None) is OPAQUE
        assert MSSQL_TYPES.map("") is OPAQUE

    def test_lookup_is_case_insensitive(self) -> None:
        assert MSSQL_TYPES.map("NVarChar").db_type is DbType.STRING
        assert PG_TYPES.map(" UUID ").semantic_type is uuid.UUID

    @pytest.mark.parametrize("mapping", [MSSQL_TYPES, PG_TYPES], ids=["sqlserver", "postgresql"])
    def test_every_entry_is_concrete(self, mapping: TypeMapping) -> None:
        """Every listed vendor type maps to a non-opaque result."""
        assert len(mapping) > 0
        for name in mapping:
            assert not mapping.map(name).is_opaque, name

    def test_sqlserver_mappings(self) -> None:
        assert MSSQL_TYPES.map("varchar").db_type is DbType.ANSI_STRING
        assert MSSQL_TYPES.map("char").db_type is DbType.ANSI_STRING_FIXED_LENGTH
        assert MSSQL_TYPES.map("nchar").db_type is DbType.STRING_FIXED_LENGTH
        assert MSSQL_TYPES.map("bit").semantic_type is bool
        assert MSSQL_TYPES.map("tinyint").db_type is DbType.BYTE
        assert MSSQL_TYPES.map("datetimeoffset").db_type is DbType.DATE_TIME_OFFSET
        assert MSSQL_TYPES.map("time").semantic_type is datetime.time
        assert MSSQL_TYPES.map("rowversion").db_type is DbType.BINARY

    def test_postgresql_mappings(self) -> None:
        assert PG_TYPES.map("character varying").db_type is DbType.STRING
        assert PG_TYPES.map("timestamp with time zone").db_type is DbType.DATE_TIME_OFFSET
        assert PG_TYPES.map("bytea").db_type is DbType.BINARY
        assert PG_TYPES.map("boolean").db_type is DbType.BOOLEAN

    def test_contains(self) -> None:
        mapping = TypeMapping({"thing": (str, DbType.STRING)})

        assert "THING" in mapping
        assert "other" not in mapping


def test_semantic_type_name() -> None:
    assert semantic_type_name(str) == "str"
    assert semantic_type_name(datetime.datetime) == "datetime.datetime"
    assert semantic_type_name(uuid.UUID) == "uuid.UUID"
