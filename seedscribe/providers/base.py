"""Schema introspection shared by every database dialect."""

import logging
from collections import defaultdict
from contextlib import closing
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence

from seedscribe.core.models import (
    ColumnDefinition,
    ForeignKeyDefinition,
    GetTableOptions,
    TableDefinition,
    TableDefinitionCollection,
)
from seedscribe.core.types import TypeMapping
from seedscribe.exceptions import DanglingForeignKeyError

logger = logging.getLogger(__name__)


def _as_bool(value: Any) -> bool:
    """Decode a catalog flag (bit, boolean or YES/NO text)."""
    if isinstance(value, str):
        return value.strip().upper() in ("YES", "Y", "TRUE", "T", "1")
    return bool(value)


def _as_length(value: Any) -> int:
    """Decode a catalog max length; NULL and negative (MAX) mean unbounded."""
    if value is None:
        return 0
    length = int(value)
    return length if length > 0 else 0


@dataclass(frozen=True)
class TableRecord:
    """One row of the tables catalog query: (name, schema)."""

    name: str
    schema: str

    @classmethod
    def from_row(cls, row: Sequence[Any]) -> "TableRecord":
        name, schema = row[0], row[1]
        return cls(name=str(name), schema=str(schema))


@dataclass(frozen=True)
class ColumnRecord:
    """
    One row of the columns catalog query.

    Column order: table, schema, name, native type, max length,
    is_nullable, is_identity, is_primary_key.
    """

    table: str
    schema: str
    name: str
    native_type: str
    max_length: int
    is_nullable: bool
    is_identity: bool
    is_primary_key: bool

    @classmethod
    def from_row(cls, row: Sequence[Any]) -> "ColumnRecord":
        table, schema, name, native_type, max_length, nullable, identity, pk = row[:8]
        return cls(
            table=str(table),
            schema=str(schema),
            name=str(name),
            native_type=str(native_type),
            max_length=_as_length(max_length),
            is_nullable=_as_bool(nullable),
            is_identity=_as_bool(identity),
            is_primary_key=_as_bool(pk),
        )


@dataclass(frozen=True)
class ReferenceRecord:
    """
    One row of the foreign keys catalog query.

    Column order: referencing table, referencing schema, referencing column,
    referenced schema, referenced table, referenced column.
    """

    referencing_table: str
    referencing_schema: str
    referencing_column: str
    referenced_schema: str
    referenced_table: str
    referenced_column: str

    @classmethod
    def from_row(cls, row: Sequence[Any]) -> "ReferenceRecord":
        return cls(*(str(value) for value in row[:6]))

    @property
    def target(self) -> ForeignKeyDefinition:
        return ForeignKeyDefinition(
            schema=self.referenced_schema,
            table=self.referenced_table,
            column=self.referenced_column,
        )


@dataclass(frozen=True)
class Dialect:
    """
    Everything that differs between database vendors.

    Attributes:
        name: Registry name (e.g. "sqlserver")
        tables_query: Catalog query yielding TableRecord rows
        columns_query: Catalog query yielding ColumnRecord rows
        references_query: Catalog query yielding ReferenceRecord rows
        type_mapping: Vendor type name lookup table
        quote_name: Builds the fully qualified table name from (schema, table)
        quote_identifier: Quotes a single identifier (column names in generated code)
        auto_generated_types: Native types whose values the server generates
        placeholder: DB-API parameter marker used by generated helpers
    """

    name: str
    tables_query: str
    columns_query: str
    references_query: str
    type_mapping: TypeMapping
    quote_name: Callable[[str, str], str]
    quote_identifier: Callable[[str], str]
    auto_generated_types: frozenset[str] = field(default_factory=frozenset)
    placeholder: str = "%s"

    def is_auto_generated(self, native_type: str) -> bool:
        return native_type.lower() in self.auto_generated_types

    def build_column(self, record: ColumnRecord) -> ColumnDefinition:
        """Convert a column catalog record into a ColumnDefinition."""
        mapping = self.type_mapping.map(record.native_type)
        return ColumnDefinition(
            name=record.name,
            database_type=record.native_type,
            semantic_type=mapping.semantic_type,
            db_type=mapping.db_type,
            max_length=record.max_length,
            is_nullable=record.is_nullable,
            is_identity=record.is_identity,
            is_auto_generated=self.is_auto_generated(record.native_type),
            is_primary_key=record.is_primary_key,
        )


class SchemaQueryProvider:
    """
    Introspect tables, columns and foreign keys over a borrowed connection.

    The connection is any open DB-API 2.0 connection for the dialect's
    database. It is never closed here.
    """

    def __init__(self, connection: Any, dialect: Dialect):
        self.connection = connection
        self.dialect = dialect

    def get_full_table_name(self, schema: str, table: str) -> str:
        return self.dialect.quote_name(schema, table)

    def get_tables(self, options: GetTableOptions | None = None) -> TableDefinitionCollection:
        """
        Get the tables matching the options.

        Foreign keys are checked against every table in the catalog before
        the include/exclude filters run. A filtered result can therefore hold
        foreign keys whose target table was filtered out; ``resolve()`` on the
        result returns None for those.

        Args:
            options: Retrieval and filter options (defaults fetch everything)

        Returns:
            Tables in catalog-query order

        Raises:
            ColumnNotFoundError: If a foreign key names a column not in its table
            ForeignKeyConflictError: If a column has more than one foreign key
            DanglingForeignKeyError: If a foreign key targets an unknown column
        """
        if options is None:
            options = GetTableOptions()

        columns: dict[tuple[str, str], list[ColumnRecord]] | None = None
        references: dict[tuple[str, str], list[ReferenceRecord]] | None = None

        if options.include_columns:
            columns = defaultdict(list)
            for record in self._fetch(self.dialect.columns_query, ColumnRecord):
                columns[(record.schema, record.table)].append(record)

            if options.include_foreign_keys:
                references = defaultdict(list)
                for ref in self._fetch(self.dialect.references_query, ReferenceRecord):
                    references[(ref.referencing_schema, ref.referencing_table)].append(ref)

        tables = []
        for record in self._fetch(self.dialect.tables_query, TableRecord):
            table = TableDefinition(
                name=record.name,
                schema=record.schema,
                full_name=self.get_full_table_name(record.schema, record.name),
            )
            key = (record.schema, record.name)
            if columns is not None:
                for column_record in columns.get(key, []):
                    table.add_column(self.dialect.build_column(column_record))
            if references is not None:
                for ref in references.get(key, []):
                    table.set_foreign_key(ref.referencing_column, ref.target)
            logger.debug(
                f"{table.full_name}: {len(table.columns)} columns, "
                f"{len(table.foreign_key_columns)} foreign keys"
            )
            tables.append(table)

        assembled = TableDefinitionCollection(tables)
        if references is not None:
            self._check_references(assembled)

        result = TableDefinitionCollection([t for t in assembled if options.accepts(t)])
        logger.info(
            f"Introspected {len(assembled)} tables "
            f"({sum(len(t.columns) for t in assembled)} columns) via {self.dialect.name}, "
            f"{len(result)} after filtering"
        )
        return result

    def _fetch(self, query: str, record_type: type) -> list:
        with closing(self.connection.cursor()) as cur:
            cur.execute(query)
            rows = cur.fetchall()
        logger.debug(f"{record_type.__name__} query returned {len(rows)} rows")
        return [record_type.from_row(row) for row in rows]

    @staticmethod
    def _check_references(tables: TableDefinitionCollection) -> None:
        for table in tables:
            for column in table.foreign_key_columns:
                if tables.resolve(column.foreign_key) is None:
                    raise DanglingForeignKeyError(
                        column.name, table.full_name, str(column.foreign_key)
                    )
