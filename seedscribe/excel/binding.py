"""
Code-generation binding models built from workbook header metadata.

Each header cell of a data table carries a JSON comment describing the column:

    {"DbType": "String", "Type": "str", "IsPrimaryKey": false,
     "IsNullable": true, "IsIdentity": false, "MaxLength": 50,
     "IsAutoGenerated": false, "NativeType": "nvarchar"}
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from seedscribe.core.types import FIXED_WIDTHS, VARIABLE_LENGTH_TYPES, DbType
from seedscribe.excel.workbook import DataExcelTable, DataExcelTableColumn
from seedscribe.exceptions import MetadataError

logger = logging.getLogger(__name__)

T = TypeVar("T")

REQUIRED_METADATA_KEYS = (
    "DbType",
    "Type",
    "IsPrimaryKey",
    "IsNullable",
    "IsIdentity",
    "MaxLength",
    "IsAutoGenerated",
    "NativeType",
)

UNBOUNDED_PARAMETER_SIZE = 2**31 - 1


def parameter_size(db_type: DbType, max_length: int) -> int:
    """
    Size bound used by generated code when binding a parameter.

    Variable-length kinds use max_length, or UNBOUNDED_PARAMETER_SIZE when
    max_length is not positive. Fixed-width scalars use their byte width.
    Temporal, GUID and opaque kinds use a placeholder size of 1.
    """
    if db_type in VARIABLE_LENGTH_TYPES:
        return max_length if max_length > 0 else UNBOUNDED_PARAMETER_SIZE
    return FIXED_WIDTHS.get(db_type, 1)


@dataclass
class ColumnBindingModel:
    """Column as seen by the code generator."""

    name: str
    db_type: DbType
    database_type: str
    semantic_type: str
    native_type: str
    is_primary_key: bool = False
    is_nullable: bool = True
    is_identity: bool = False
    is_auto_generated: bool = False
    max_length: int = 0
    parameter_size: int = 1


@dataclass
class TableBindingModel:
    """Table as seen by the code generator."""

    name: str
    schema: str
    columns: list[ColumnBindingModel] = field(default_factory=list)

    @property
    def has_identity_column(self) -> bool:
        return any(c.is_identity for c in self.columns)

    def strip_auto_generated(self) -> list[ColumnBindingModel]:
        """Remove server-generated columns; returns the removed columns."""
        removed = [c for c in self.columns if c.is_auto_generated]
        self.columns = [c for c in self.columns if not c.is_auto_generated]
        return removed


def _to_bool(text: str) -> bool:
    normalized = text.strip().lower()
    if normalized in ("true", "1"):
        return True
    if normalized in ("false", "0"):
        return False
    raise ValueError(f"'{text}' is not a boolean")


def _to_str(value: Any) -> str:
    # JSON booleans come back as Python bools; render them like the key's text form
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def parse_column_metadata(comment: str | None, sheet: str, index: int) -> dict[str, Any]:
    """
    Parse a header comment into its metadata map.

    Excel prefixes notes with the author's name, so only the outermost
    ``{...}`` span of the comment is decoded.

    Raises:
        MetadataError: If the comment is absent, unparseable or not an object
    """
    if comment is None or not comment.strip():
        raise MetadataError(
            f"Cell in worksheet '{sheet}' at index {index} does not have the metadata comment."
        )

    start, end = comment.find("{"), comment.rfind("}")
    if start < 0 or end < start:
        raise MetadataError(
            f"Cell in worksheet '{sheet}' at index {index} has an invalid metadata comment."
        )
    try:
        metadata = json.loads(comment[start : end + 1])
    except json.JSONDecodeError as e:
        raise MetadataError(
            f"Cell in worksheet '{sheet}' at index {index} has an invalid metadata comment: {e}"
        ) from e
    if not isinstance(metadata, dict):
        raise MetadataError(
            f"Cell in worksheet '{sheet}' at index {index} has an invalid metadata comment."
        )
    return metadata


def build_column_binding(
    column: DataExcelTableColumn, sheet: str, db_type_prefix: str = "DbType."
) -> ColumnBindingModel:
    """
    Build a column binding model from a header cell.

    Args:
        column: Header cell with its metadata comment
        sheet: Worksheet name, for error messages
        db_type_prefix: Prefix for the generated storage kind reference

    Raises:
        MetadataError: If the comment or any required key is missing or invalid
    """
    metadata = parse_column_metadata(column.comment, sheet, column.index)

    def get(name: str, converter: Callable[[str], T]) -> T:
        if name not in metadata or metadata[name] is None:
            raise MetadataError(
                f"Cell in worksheet '{sheet}' at index {column.index} "
                f"does not have the {name} metadata."
            )
        try:
            return converter(_to_str(metadata[name]))
        except ValueError as e:
            raise MetadataError(
                f"Cell in worksheet '{sheet}' at index {column.index} "
                f"has an invalid {name} metadata value: {e}"
            ) from e

    db_type = get("DbType", DbType.parse)
    max_length = get("MaxLength", int)
    return ColumnBindingModel(
        name=column.text,
        db_type=db_type,
        database_type=f"{db_type_prefix}{db_type.value}",
        semantic_type=get("Type", str),
        native_type=get("NativeType", str),
        is_primary_key=get("IsPrimaryKey", _to_bool),
        is_nullable=get("IsNullable", _to_bool),
        is_identity=get("IsIdentity", _to_bool),
        is_auto_generated=get("IsAutoGenerated", _to_bool),
        max_length=max_length,
        parameter_size=parameter_size(db_type, max_length),
    )


def build_table_binding(table: DataExcelTable, db_type_prefix: str = "DbType.") -> TableBindingModel:
    """
    Build the binding model of an Excel data table.

    Auto-generated columns are kept; call
    ``TableBindingModel.strip_auto_generated()`` once row values are extracted.
    """
    model = TableBindingModel(name=table.table_name, schema=table.schema)
    for column in table.columns:
        model.columns.append(build_column_binding(column, table.sheet_name, db_type_prefix))
    logger.debug(f"Bound {table.display_name}: {len(model.columns)} columns")
    return model
