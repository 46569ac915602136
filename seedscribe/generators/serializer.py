"""Convert raw cell values into source-code literals."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from seedscribe.core.types import DATE_TIME_TYPES, NUMERIC_TYPES, STRING_TYPES, DbType
from seedscribe.exceptions import ValueSerializationError

# Native types whose text is stored one byte per character
VARIABLE_BINARY_TYPES = frozenset({"varbinary", "bytea"})


@dataclass(frozen=True)
class LiteralSyntax:
    """
    Spelling of literal values in a target language.

    Format strings take one positional argument: a quoted string literal for
    the parse/constructor expressions, or a comma-separated byte list for
    ``byte_array``.
    """

    name: str
    null: str
    true: str
    false: str
    byte_array: str
    date_time: str
    time: str
    date_time_offset: str
    guid: str


PYTHON = LiteralSyntax(
    name="python",
    null="None",
    true="True",
    false="False",
    byte_array="bytes([{}])",
    date_time="datetime.datetime.fromisoformat({})",
    time="datetime.time.fromisoformat({})",
    date_time_offset="datetime.datetime.fromisoformat({})",
    guid="uuid.UUID({})",
)

CSHARP = LiteralSyntax(
    name="csharp",
    null="null",
    true="true",
    false="false",
    byte_array="new byte[] {{ {} }}",
    date_time="DateTime.Parse({})",
    time="DateTime.Parse({})",
    date_time_offset="DateTimeOffset.Parse((string){})",
    guid="new Guid((string){})",
)

SYNTAXES = {PYTHON.name: PYTHON, CSHARP.name: CSHARP}


def escape_string(text: str) -> str:
    """
    Escape text for a double-quoted literal.

    Backslashes are doubled first so the escapes added afterwards are not
    escaped again.
    """
    return (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )


def quote(text: str) -> str:
    return f'"{escape_string(text)}"'


def _char_bytes(text: str) -> bytes:
    # One byte per character; code points above 0xFF keep their low byte
    return bytes(ord(ch) & 0xFF for ch in text)


def _uint64_bytes(text: str, db_type: DbType) -> bytes:
    try:
        number = Decimal(text.strip())
    except InvalidOperation:
        raise ValueSerializationError(text, db_type.value, "not a number") from None
    if number != number.to_integral_value() or not 0 <= number < 2**64:
        raise ValueSerializationError(text, db_type.value, "not an unsigned 64-bit integer")
    return int(number).to_bytes(8, "little")


def serialize_value(
    raw: Any,
    db_type: DbType,
    native_type: str,
    is_nullable: bool,
    syntax: LiteralSyntax = PYTHON,
) -> str:
    """
    Serialize a raw cell value as a literal for its column's storage kind.

    Args:
        raw: Cell value (usually its text), or None for an empty cell
        db_type: Column storage kind
        native_type: Vendor type name (selects the binary encoding)
        is_nullable: Whether the text "NULL" means a null value
        syntax: Target language spelling

    Returns:
        Literal source text

    Raises:
        ValueSerializationError: If a fixed binary value is not an unsigned integer
    """
    if raw is None:
        return syntax.null
    text = str(raw)
    if is_nullable and text.upper() == "NULL":
        return syntax.null

    if db_type is DbType.BINARY:
        if native_type.strip().lower() in VARIABLE_BINARY_TYPES:
            data = _char_bytes(text)
        else:
            data = _uint64_bytes(text, db_type)
        return syntax.byte_array.format(", ".join(str(b) for b in data))
    if db_type is DbType.BOOLEAN:
        return syntax.false if text == "0" else syntax.true
    if db_type in STRING_TYPES:
        return quote(text)
    if db_type in NUMERIC_TYPES:
        return text
    if db_type in DATE_TIME_TYPES:
        template = syntax.time if db_type is DbType.TIME else syntax.date_time
        return template.format(quote(text))
    if db_type is DbType.DATE_TIME_OFFSET:
        return syntax.date_time_offset.format(quote(text))
    if db_type is DbType.GUID:
        return syntax.guid.format(quote(text))
    return quote(text)
