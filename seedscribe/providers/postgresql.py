"""PostgreSQL catalog queries and type mappings."""

import datetime
import decimal
import uuid

from seedscribe.core.types import DbType, TypeMapping
from seedscribe.providers.base import Dialect

SYSTEM_SCHEMAS = "('pg_catalog', 'information_schema')"

TABLES_QUERY = f"""
SELECT table_name, table_schema
FROM information_schema.tables
WHERE table_type = 'BASE TABLE'
  AND table_schema NOT IN {SYSTEM_SCHEMAS}
  AND table_schema NOT LIKE 'pg_toast%'
ORDER BY table_schema, table_name
"""

COLUMNS_QUERY = f"""
SELECT
    c.table_name,
    c.table_schema,
    c.column_name,
    c.data_type,
    c.character_maximum_length,
    c.is_nullable,
    CASE
        WHEN c.is_identity = 'YES' THEN true
        WHEN c.column_default LIKE 'nextval(%' THEN true
        ELSE false
    END AS is_identity,
    CASE WHEN pk.column_name IS NOT NULL THEN true ELSE false END AS is_pk
FROM information_schema.columns c
JOIN information_schema.tables t
  ON t.table_schema = c.table_schema
  AND t.table_name = c.table_name
  AND t.table_type = 'BASE TABLE'
LEFT JOIN (
    SELECT kcu.table_schema, kcu.table_name, kcu.column_name
    FROM information_schema.table_constraints tc
    JOIN information_schema.key_column_usage kcu
      ON tc.constraint_name = kcu.constraint_name
      AND tc.table_schema = kcu.table_schema
    WHERE tc.constraint_type = 'PRIMARY KEY'
) pk
  ON pk.table_schema = c.table_schema
  AND pk.table_name = c.table_name
  AND pk.column_name = c.column_name
WHERE c.table_schema NOT IN {SYSTEM_SCHEMAS}
ORDER BY c.table_schema, c.table_name, c.ordinal_position
"""

# Constraint names are only unique per table, so foreign keys are read from
# pg_constraint, pairing conkey with confkey by position
REFERENCES_QUERY = f"""
SELECT
    src.relname AS table_name,
    src_ns.nspname AS table_schema,
    src_att.attname AS column_name,
    dst_ns.nspname AS foreign_table_schema,
    dst.relname AS foreign_table_name,
    dst_att.attname AS foreign_column_name
FROM pg_constraint con
CROSS JOIN LATERAL unnest(con.conkey, con.confkey)
    WITH ORDINALITY AS k(src_attnum, dst_attnum, key_position)
JOIN pg_class src ON src.oid = con.conrelid
JOIN pg_namespace src_ns ON src_ns.oid = src.relnamespace
JOIN pg_attribute src_att
  ON src_att.attrelid = con.conrelid
  AND src_att.attnum = k.src_attnum
JOIN pg_class dst ON dst.oid = con.confrelid
JOIN pg_namespace dst_ns ON dst_ns.oid = dst.relnamespace
JOIN pg_attribute dst_att
  ON dst_att.attrelid = con.confrelid
  AND dst_att.attnum = k.dst_attnum
WHERE con.contype = 'f'
  AND src_ns.nspname NOT IN {SYSTEM_SCHEMAS}
ORDER BY src_ns.nspname, src.relname, con.conname, k.key_position
"""

TYPE_MAPPING = TypeMapping(
    {
        "bigint": (int, DbType.INT64),
        "integer": (int, DbType.INT32),
        "smallint": (int, DbType.INT16),
        "boolean": (bool, DbType.BOOLEAN),
        "bytea": (bytes, DbType.BINARY),
        "character": (str, DbType.STRING_FIXED_LENGTH),
        "character varying": (str, DbType.STRING),
        "text": (str, DbType.STRING),
        "citext": (str, DbType.STRING),
        "json": (str, DbType.STRING),
        "jsonb": (str, DbType.STRING),
        "xml": (str, DbType.XML),
        "date": (datetime.date, DbType.DATE),
        "time without time zone": (datetime.time, DbType.TIME),
        "time with time zone": (datetime.time, DbType.TIME),
        "timestamp without time zone": (datetime.datetime, DbType.DATE_TIME2),
        "timestamp with time zone": (datetime.datetime, DbType.DATE_TIME_OFFSET),
        "numeric": (decimal.Decimal, DbType.DECIMAL),
        "money": (decimal.Decimal, DbType.CURRENCY),
        "real": (float, DbType.SINGLE),
        "double precision": (float, DbType.DOUBLE),
        "uuid": (uuid.UUID, DbType.GUID),
    }
)


def quote_identifier(name: str) -> str:
    """Double-quoted identifier, doubling embedded quotes."""
    return '"' + name.replace('"', '""') + '"'


def quote_name(schema: str, table: str) -> str:
    return f"{quote_identifier(schema)}.{quote_identifier(table)}"


# PostgreSQL has no row-version column type; xmin is a hidden system column
POSTGRESQL = Dialect(
    name="postgresql",
    tables_query=TABLES_QUERY,
    columns_query=COLUMNS_QUERY,
    references_query=REFERENCES_QUERY,
    type_mapping=TYPE_MAPPING,
    quote_name=quote_name,
    quote_identifier=quote_identifier,
    auto_generated_types=frozenset(),
    placeholder="%s",
)
