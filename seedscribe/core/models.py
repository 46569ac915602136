"""
Core data models for seedscribe.

Defines the schema model returned by introspection: tables, columns and
single-column foreign key references.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional

from seedscribe.core.types import DbType
from seedscribe.exceptions import (
    ColumnNotFoundError,
    DuplicateColumnError,
    ForeignKeyConflictError,
    InvalidOptionsError,
)


@dataclass(frozen=True)
class ForeignKeyDefinition:
    """Target of a single-column foreign key."""

    schema: str
    table: str
    column: str

    def __str__(self) -> str:
        return f"{self.schema}.{self.table}.{self.column}"


@dataclass
class ColumnDefinition:
    """
    Column metadata from database introspection.

    Attributes:
        name: Column name
        database_type: Vendor-native type name (e.g. nvarchar)
        semantic_type: Python type values of this column map to
        db_type: Portable storage kind
        max_length: Maximum length, 0 when unbounded or not applicable
        is_nullable: Whether column allows NULL values
        is_identity: Whether the database assigns values from an identity sequence
        is_auto_generated: Whether the server generates the value (row versioning)
        is_primary_key: Whether column is part of the primary key
    """

    name: str
    database_type: str = ""
    semantic_type: type = object
    db_type: DbType = DbType.OBJECT
    max_length: int = 0
    is_nullable: bool = True
    is_identity: bool = False
    is_auto_generated: bool = False
    is_primary_key: bool = False
    foreign_key: Optional[ForeignKeyDefinition] = field(default=None, repr=False)

    def set_foreign_key(self, reference: ForeignKeyDefinition, table: str = "?") -> None:
        """
        Attach a foreign key reference.

        Args:
            reference: Referenced schema, table and column
            table: Owning table name, used in the error message

        Raises:
            ForeignKeyConflictError: If the column already has a foreign key
        """
        if self.foreign_key is not None:
            raise ForeignKeyConflictError(self.name, table, str(self.foreign_key), str(reference))
        self.foreign_key = reference


@dataclass
class TableDefinition:
    """Complete information about a database table."""

    name: str
    schema: str
    full_name: str = ""
    columns: list[ColumnDefinition] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.full_name:
            self.full_name = f"{self.schema}.{self.name}"

    def add_column(self, column: ColumnDefinition) -> None:
        """Append a column, keeping catalog order."""
        if any(c.name == column.name for c in self.columns):
            raise DuplicateColumnError(column.name, self.full_name)
        self.columns.append(column)

    def get_column(self, name: str) -> ColumnDefinition:
        """
        Get a column by exact name.

        Raises:
            ColumnNotFoundError: If the table has no such column
        """
        for col in self.columns:
            if col.name == name:
                return col
        raise ColumnNotFoundError(name, self.full_name)

    def has_column(self, name: str) -> bool:
        return any(c.name == name for c in self.columns)

    def set_foreign_key(self, column_name: str, reference: ForeignKeyDefinition) -> None:
        """Attach a foreign key to one of this table's columns."""
        self.get_column(column_name).set_foreign_key(reference, table=self.full_name)

    @property
    def foreign_key_columns(self) -> list[ColumnDefinition]:
        return [c for c in self.columns if c.foreign_key is not None]

    @property
    def primary_key_columns(self) -> list[ColumnDefinition]:
        return [c for c in self.columns if c.is_primary_key]


class TableDefinitionCollection:
    """
    Ordered tables returned by one introspection call.

    Supports iteration, ``len()``, positional indexing and lookup by
    ``(schema, name)``.
    """

    def __init__(self, tables: list[TableDefinition] | None = None):
        self._tables: list[TableDefinition] = list(tables or [])

    def __iter__(self) -> Iterator[TableDefinition]:
        return iter(self._tables)

    def __len__(self) -> int:
        return len(self._tables)

    def __getitem__(self, index: int) -> TableDefinition:
        return self._tables[index]

    def __repr__(self) -> str:
        names = ", ".join(f"{t.schema}.{t.name}" for t in self._tables)
        return f"TableDefinitionCollection([{names}])"

    def find(self, schema: str, name: str) -> TableDefinition | None:
        """Find a table by schema and name, or None."""
        for table in self._tables:
            if table.schema == schema and table.name == name:
                return table
        return None

    def get(self, schema: str, name: str) -> TableDefinition:
        """
        Get a table by schema and name.

        Raises:
            KeyError: If no such table is in the collection
        """
        table = self.find(schema, name)
        if table is None:
            raise KeyError(f"{schema}.{name}")
        return table

    def resolve(self, reference: ForeignKeyDefinition) -> ColumnDefinition | None:
        """Return the column a foreign key points to, or None if absent."""
        table = self.find(reference.schema, reference.table)
        if table is None or not table.has_column(reference.column):
            return None
        return table.get_column(reference.column)


@dataclass
class GetTableOptions:
    """
    Request-time options for table retrieval.

    Attributes:
        include_columns: Fetch column details (otherwise table names only)
        include_foreign_keys: Fetch foreign keys (requires include_columns)
        include_tables: Keep only these table names (empty keeps all)
        exclude_tables: Drop these table names
        include_schemas: Keep only these schemas (empty keeps all)
        exclude_schemas: Drop these schemas

    Table filters match either the bare table name or ``schema.name``.
    """

    include_columns: bool = True
    include_foreign_keys: bool = True
    include_tables: list[str] = field(default_factory=list)
    exclude_tables: list[str] = field(default_factory=list)
    include_schemas: list[str] = field(default_factory=list)
    exclude_schemas: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.include_foreign_keys and not self.include_columns:
            raise InvalidOptionsError(
                "include_foreign_keys requires include_columns; "
                "foreign keys are attached to fetched columns"
            )

    def accepts(self, table: TableDefinition) -> bool:
        """Check whether a table passes the include/exclude filters."""
        names = {table.name, f"{table.schema}.{table.name}"}

        if self.include_schemas and table.schema not in self.include_schemas:
            return False
        if table.schema in self.exclude_schemas:
            return False
        if self.include_tables and names.isdisjoint(self.include_tables):
            return False
        if not names.isdisjoint(self.exclude_tables):
            return False
        return True
