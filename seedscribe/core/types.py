"""
Portable type system.

Vendor column types are mapped onto a ``DbType`` storage kind plus a Python
semantic type. Each database dialect ships its own ``TypeMapping`` table.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping


class DbType(str, Enum):
    """Storage kind of a column, independent of the database vendor."""

    ANSI_STRING = "AnsiString"
    ANSI_STRING_FIXED_LENGTH = "AnsiStringFixedLength"
    STRING = "String"
    STRING_FIXED_LENGTH = "StringFixedLength"
    BINARY = "Binary"
    BOOLEAN = "Boolean"
    BYTE = "Byte"
    SBYTE = "SByte"
    INT16 = "Int16"
    UINT16 = "UInt16"
    INT32 = "Int32"
    UINT32 = "UInt32"
    INT64 = "Int64"
    UINT64 = "UInt64"
    CURRENCY = "Currency"
    DECIMAL = "Decimal"
    SINGLE = "Single"
    DOUBLE = "Double"
    DATE = "Date"
    DATE_TIME = "DateTime"
    DATE_TIME2 = "DateTime2"
    DATE_TIME_OFFSET = "DateTimeOffset"
    TIME = "Time"
    GUID = "Guid"
    XML = "Xml"
    VAR_NUMERIC = "VarNumeric"
    OBJECT = "Object"

    @classmethod
    def parse(cls, text: str) -> DbType:
        """
        Parse a storage kind from its value or member name.

        Matching is case-insensitive, so ``"AnsiString"``, ``"ansistring"``
        and ``"ANSI_STRING"`` all resolve to ``DbType.ANSI_STRING``.

        Raises:
            ValueError: If text names no storage kind
        """
        needle = text.strip().lower()
        for member in cls:
            if needle in (member.value.lower(), member.name.lower()):
                return member
        raise ValueError(f"'{text}' is not a valid DbType")


STRING_TYPES = frozenset(
    {
        DbType.ANSI_STRING,
        DbType.ANSI_STRING_FIXED_LENGTH,
        DbType.STRING,
        DbType.STRING_FIXED_LENGTH,
        DbType.XML,
    }
)

NUMERIC_TYPES = frozenset(
    {
        DbType.DECIMAL,
        DbType.SINGLE,
        DbType.DOUBLE,
        DbType.INT16,
        DbType.INT32,
        DbType.INT64,
        DbType.BYTE,
    }
)

DATE_TIME_TYPES = frozenset({DbType.DATE, DbType.DATE_TIME, DbType.DATE_TIME2, DbType.TIME})

VARIABLE_LENGTH_TYPES = STRING_TYPES | {DbType.BINARY, DbType.VAR_NUMERIC}

# Byte widths of fixed-size scalar kinds
FIXED_WIDTHS: dict[DbType, int] = {
    DbType.BOOLEAN: 1,
    DbType.BYTE: 1,
    DbType.SBYTE: 1,
    DbType.INT16: 2,
    DbType.UINT16: 2,
    DbType.INT32: 4,
    DbType.UINT32: 4,
    DbType.INT64: 8,
    DbType.UINT64: 8,
    DbType.CURRENCY: 16,
    DbType.DECIMAL: 16,
    DbType.SINGLE: 4,
    DbType.DOUBLE: 8,
}


@dataclass(frozen=True)
class TypeMappingResult:
    """Semantic type and storage kind for a vendor type name."""

    semantic_type: type
    db_type: DbType

    @property
    def is_opaque(self) -> bool:
        """True for the fallback mapping of unrecognized vendor types."""
        return self.semantic_type is object and self.db_type is DbType.OBJECT


OPAQUE = TypeMappingResult(object, DbType.OBJECT)


class TypeMapping:
    """Lookup table from vendor type names to portable types."""

    def __init__(self, entries: Mapping[str, tuple[type, DbType]]):
        self._entries = {
            name.lower(): TypeMappingResult(semantic, db_type)
            for name, (semantic, db_type) in entries.items()
        }

    def map(self, vendor_type: str | None) -> TypeMappingResult:
        """
        Map a vendor type name.

        Never raises: unknown or missing names map to ``OPAQUE``.
        """
        if not vendor_type:
            return OPAQUE
        return self._entries.get(vendor_type.strip().lower(), OPAQUE)

    def __contains__(self, vendor_type: str) -> bool:
        return vendor_type.lower() in self._entries

    def __iter__(self):
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


def semantic_type_name(semantic_type: type) -> str:
    """Qualified Python name of a semantic type (``datetime.datetime``, ``str``)."""
    module = semantic_type.__module__
    if module == "builtins":
        return semantic_type.__qualname__
    return f"{module}.{semantic_type.__qualname__}"

