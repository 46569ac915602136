"""Custom exceptions with helpful error messages."""


class SeedScribeError(Exception):
    """Base exception for seedscribe errors."""

    pass


class MetadataError(SeedScribeError):
    """Workbook or worksheet metadata is missing or malformed."""

    pass


class InvalidOptionsError(SeedScribeError, ValueError):
    """Table retrieval options are inconsistent."""

    pass


class UnknownDialectError(SeedScribeError, KeyError):
    """No dialect registered under the requested name."""

    def __init__(self, name: str, available: list[str]):
        self.name = name
        super().__init__(
            f"Unknown database dialect '{name}'.\n\n"
            f"Suggestions:\n"
            f"1. Use one of: {', '.join(sorted(available)) or '(none registered)'}\n"
            f"2. Register a custom dialect with register_dialect()"
        )

    def __str__(self) -> str:
        # KeyError repr-quotes its message otherwise
        return str(self.args[0])


class StructuralError(SeedScribeError):
    """Catalog contents and assembled schema model disagree."""

    pass


class ColumnNotFoundError(StructuralError):
    """A referenced column is not present in the assembled table."""

    def __init__(self, column: str, table: str):
        self.column = column
        self.table = table
        super().__init__(
            f"Column '{column}' not found in table {table}.\n\n"
            f"Suggestions:\n"
            f"1. Check that the catalog column query returns every column of {table}\n"
            f"2. Check the foreign key query for case or schema mismatches"
        )


class DuplicateColumnError(StructuralError):
    """A column name appears twice in one table."""

    def __init__(self, column: str, table: str):
        self.column = column
        self.table = table
        super().__init__(f"Column '{column}' is defined more than once in table {table}.")


class ForeignKeyConflictError(StructuralError):
    """A column already carries a foreign key."""

    def __init__(self, column: str, table: str, existing: str, incoming: str):
        self.column = column
        self.table = table
        super().__init__(
            f"Column '{column}' in table {table} already references {existing}; "
            f"cannot also reference {incoming}.\n\n"
            f"Suggestions:\n"
            f"1. Composite or duplicate foreign keys are not supported\n"
            f"2. Drop the redundant constraint from the database"
        )


class DanglingForeignKeyError(StructuralError):
    """A foreign key targets a column outside the assembled table set."""

    def __init__(self, column: str, table: str, target: str):
        self.column = column
        self.table = table
        super().__init__(
            f"Foreign key on column '{column}' in table {table} references {target}, "
            f"which was not returned by the catalog."
        )


class ValueSerializationError(SeedScribeError):
    """A cell value cannot be encoded for its column's storage kind."""

    def __init__(self, value: str, db_type: str, reason: str):
        self.value = value
        self.db_type = db_type
        self.reason = reason
        super().__init__(f"Cannot serialize value {value!r} as {db_type}: {reason}")


class UnsupportedOperationError(SeedScribeError, NotImplementedError):
    """Provider does not implement a schema-modifying operation."""

    def __init__(self, operation: str, dialect: str):
        super().__init__(f"Operation '{operation}' is not supported for dialect '{dialect}'.")
