"""
seedscribe - Schema introspection and test data helper generation

Reads table, column and foreign key metadata from SQL Server and PostgreSQL
catalogs into a portable model, exports it as annotated spreadsheet
workbooks and turns filled-in workbooks into generated seeding helpers.
"""

from seedscribe.core.models import (
    ColumnDefinition,
    ForeignKeyDefinition,
    GetTableOptions,
    TableDefinition,
    TableDefinitionCollection,
)
from seedscribe.core.types import DbType, TypeMapping
from seedscribe.excel.workbook import DataExcelWorkbook
from seedscribe.generators.helpers import Flavor, HelperGenerator, HelperGeneratorOptions
from seedscribe.providers.base import SchemaQueryProvider
from seedscribe.providers.registry import get_dialect

__version__ = "0.1.0"

__all__ = [
    "ColumnDefinition",
    "DataExcelWorkbook",
    "DbType",
    "Flavor",
    "ForeignKeyDefinition",
    "GetTableOptions",
    "HelperGenerator",
    "HelperGeneratorOptions",
    "SchemaQueryProvider",
    "TableDefinition",
    "TableDefinitionCollection",
    "TypeMapping",
    "get_dialect",
]
