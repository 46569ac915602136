"""Microsoft SQL Server catalog queries and type mappings."""

import datetime
import decimal
import uuid

from seedscribe.core.types import DbType, TypeMapping
from seedscribe.providers.base import Dialect

TABLES_QUERY = """
SELECT t.name AS Name, s.name AS [Schema]
FROM sys.tables t
JOIN sys.schemas s ON s.schema_id = t.schema_id
WHERE t.is_ms_shipped = 0
ORDER BY s.name, t.name
"""

# max_length is in bytes; halve it for n-types and report -1 (MAX) as NULL
COLUMNS_QUERY = """
SELECT
    t.name AS [Table],
    s.name AS [Schema],
    c.name AS Name,
    ty.name AS DbDataType,
    CASE
        WHEN c.max_length = -1 THEN NULL
        WHEN ty.name IN ('nchar', 'nvarchar') THEN c.max_length / 2
        ELSE c.max_length
    END AS MaxLength,
    c.is_nullable AS IsNullable,
    c.is_identity AS IsIdentity,
    CASE WHEN pk.column_id IS NOT NULL THEN 1 ELSE 0 END AS IsPrimaryKey
FROM sys.columns c
JOIN sys.tables t ON t.object_id = c.object_id
JOIN sys.schemas s ON s.schema_id = t.schema_id
JOIN sys.types ty ON ty.user_type_id = c.user_type_id
LEFT JOIN (
    SELECT ic.object_id, ic.column_id
    FROM sys.indexes i
    JOIN sys.index_columns ic
      ON ic.object_id = i.object_id
      AND ic.index_id = i.index_id
    WHERE i.is_primary_key = 1
) pk ON pk.object_id = c.object_id AND pk.column_id = c.column_id
WHERE t.is_ms_shipped = 0
ORDER BY s.name, t.name, c.column_id
"""

REFERENCES_QUERY = """
SELECT
    pt.name AS ReferencingTable,
    ps.name AS ReferencingSchema,
    pc.name AS ReferencingColumn,
    rs.name AS ReferencedSchema,
    rt.name AS ReferencedTable,
    rc.name AS ReferencedColumn
FROM sys.foreign_key_columns fkc
JOIN sys.tables pt ON pt.object_id = fkc.parent_object_id
JOIN sys.schemas ps ON ps.schema_id = pt.schema_id
JOIN sys.columns pc
  ON pc.object_id = fkc.parent_object_id
  AND pc.column_id = fkc.parent_column_id
JOIN sys.tables rt ON rt.object_id = fkc.referenced_object_id
JOIN sys.schemas rs ON rs.schema_id = rt.schema_id
JOIN sys.columns rc
  ON rc.object_id = fkc.referenced_object_id
  AND rc.column_id = fkc.referenced_column_id
ORDER BY ps.name, pt.name, fkc.constraint_column_id
"""

TYPE_MAPPING = TypeMapping(
    {
        "bigint": (int, DbType.INT64),
        "binary": (bytes, DbType.BINARY),
        "bit": (bool, DbType.BOOLEAN),
        "char": (str, DbType.ANSI_STRING_FIXED_LENGTH),
        "date": (datetime.date, DbType.DATE),
        "datetime": (datetime.datetime, DbType.DATE_TIME),
        "datetime2": (datetime.datetime, DbType.DATE_TIME2),
        "datetimeoffset": (datetime.datetime, DbType.DATE_TIME_OFFSET),
        "decimal": (decimal.Decimal, DbType.DECIMAL),
        "float": (float, DbType.DOUBLE),
        "image": (bytes, DbType.BINARY),
        "int": (int, DbType.INT32),
        "money": (decimal.Decimal, DbType.DECIMAL),
        "nchar": (str, DbType.STRING_FIXED_LENGTH),
        "ntext": (str, DbType.STRING),
        "numeric": (decimal.Decimal, DbType.DECIMAL),
        "nvarchar": (str, DbType.STRING),
        "real": (float, DbType.SINGLE),
        "rowversion": (bytes, DbType.BINARY),
        "smalldatetime": (datetime.datetime, DbType.DATE_TIME),
        "smallint": (int, DbType.INT16),
        "smallmoney": (decimal.Decimal, DbType.DECIMAL),
        "text": (str, DbType.STRING),
        "time": (datetime.time, DbType.TIME),
        "timestamp": (bytes, DbType.BINARY),
        "tinyint": (int, DbType.BYTE),
        "uniqueidentifier": (uuid.UUID, DbType.GUID),
        "varbinary": (bytes, DbType.BINARY),
        "varchar": (str, DbType.ANSI_STRING),
        "xml": (str, DbType.XML),
    }
)


def quote_identifier(name: str) -> str:
    """Bracket-delimited identifier, doubling any closing bracket."""
    return "[" + name.replace("]", "]]") + "]"


def quote_name(schema: str, table: str) -> str:
    return f"{quote_identifier(schema)}.{quote_identifier(table)}"


SQLSERVER = Dialect(
    name="sqlserver",
    tables_query=TABLES_QUERY,
    columns_query=COLUMNS_QUERY,
    references_query=REFERENCES_QUERY,
    type_mapping=TYPE_MAPPING,
    quote_name=quote_name,
    quote_identifier=quote_identifier,
    auto_generated_types=frozenset({"rowversion", "timestamp"}),
    placeholder="?",
)
