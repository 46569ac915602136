"""Core schema model and portable type system."""

from seedscribe.core.models import (
    ColumnDefinition,
    ForeignKeyDefinition,
    GetTableOptions,
    TableDefinition,
    TableDefinitionCollection,
)
from seedscribe.core.types import OPAQUE, DbType, TypeMapping, TypeMappingResult

__all__ = [
    "ColumnDefinition",
    "DbType",
    "ForeignKeyDefinition",
    "GetTableOptions",
    "OPAQUE",
    "TableDefinition",
    "TableDefinitionCollection",
    "TypeMapping",
    "TypeMappingResult",
]
