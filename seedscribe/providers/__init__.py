"""Database dialects and schema query providers."""

from seedscribe.providers.base import (
    ColumnRecord,
    Dialect,
    ReferenceRecord,
    SchemaQueryProvider,
    TableRecord,
)
from seedscribe.providers.management import DbManagementProvider
from seedscribe.providers.postgresql import POSTGRESQL
from seedscribe.providers.registry import get_dialect, list_dialects, register_dialect
from seedscribe.providers.sqlserver import SQLSERVER

__all__ = [
    "ColumnRecord",
    "DbManagementProvider",
    "Dialect",
    "POSTGRESQL",
    "ReferenceRecord",
    "SQLSERVER",
    "SchemaQueryProvider",
    "TableRecord",
    "get_dialect",
    "list_dialects",
    "register_dialect",
]
