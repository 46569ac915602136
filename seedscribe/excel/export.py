"""Export an introspected schema as an annotated data workbook."""

import json
import logging
import re
from pathlib import Path
from typing import Any, Iterable

from openpyxl import Workbook
from openpyxl.comments import Comment
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.table import Table, TableStyleInfo

from seedscribe.core.models import ColumnDefinition, TableDefinition
from seedscribe.core.types import STRING_TYPES, DbType, semantic_type_name
from seedscribe.exceptions import MetadataError

logger = logging.getLogger(__name__)

METADATA_AUTHOR = "seedscribe"
MAX_SHEET_TITLE = 31

CSHARP_TYPE_NAMES: dict[DbType, str] = {
    DbType.INT64: "long",
    DbType.INT32: "int",
    DbType.INT16: "short",
    DbType.BYTE: "byte",
    DbType.BINARY: "byte[]",
    DbType.BOOLEAN: "bool",
    DbType.DATE: "DateTime",
    DbType.DATE_TIME: "DateTime",
    DbType.DATE_TIME2: "DateTime",
    DbType.DATE_TIME_OFFSET: "DateTimeOffset",
    DbType.TIME: "TimeSpan",
    DbType.DECIMAL: "decimal",
    DbType.CURRENCY: "decimal",
    DbType.SINGLE: "float",
    DbType.DOUBLE: "double",
    DbType.GUID: "Guid",
}


def type_name(column: ColumnDefinition, language: str) -> str:
    """Name of the column's semantic type in the target language."""
    if language == "csharp":
        if column.db_type in STRING_TYPES:
            return "string"
        return CSHARP_TYPE_NAMES.get(column.db_type, "object")
    return semantic_type_name(column.semantic_type)


def column_metadata(column: ColumnDefinition, language: str = "python") -> dict[str, Any]:
    """Metadata map stored in a header cell comment."""
    return {
        "DbType": column.db_type.value,
        "Type": type_name(column, language),
        "IsPrimaryKey": column.is_primary_key,
        "IsNullable": column.is_nullable,
        "IsIdentity": column.is_identity,
        "MaxLength": column.max_length,
        "IsAutoGenerated": column.is_auto_generated,
        "NativeType": column.database_type,
    }


def _sheet_title(table: TableDefinition, used: set[str]) -> str:
    base = re.sub(r"[\[\]:*?/\\]", "_", f"{table.schema}.{table.name}")[:MAX_SHEET_TITLE]
    title, counter = base, 1
    while title.lower() in used:
        suffix = f"~{counter}"
        title = base[: MAX_SHEET_TITLE - len(suffix)] + suffix
        counter += 1
    used.add(title.lower())
    return title


def export_schema_workbook(
    tables: Iterable[TableDefinition], path: Path | str, language: str = "python"
) -> Path:
    """
    Write one worksheet per table with an annotated, empty Excel table.

    The header cells carry the JSON metadata read back by
    ``seedscribe.excel.binding``. Tables without columns are skipped.

    Args:
        tables: Introspected tables (fetched with include_columns)
        path: Workbook file to create
        language: Spelling of the "Type" metadata ("python" or "csharp")

    Returns:
        Path of the written workbook
    """
    path = Path(path)
    workbook = Workbook()
    workbook.remove(workbook.active)
    used_titles: set[str] = set()
    header_font = Font(bold=True)

    for index, table in enumerate(tables, start=1):
        if not table.columns:
            logger.warning(f"Skipping {table.full_name}: no columns were introspected")
            continue

        worksheet = workbook.create_sheet(title=_sheet_title(table, used_titles))
        for col_idx, column in enumerate(table.columns, start=1):
            cell = worksheet.cell(row=1, column=col_idx, value=column.name)
            cell.font = header_font
            cell.comment = Comment(
                json.dumps(column_metadata(column, language)), METADATA_AUTHOR, width=320, height=160
            )
            worksheet.column_dimensions[get_column_letter(col_idx)].width = max(12, len(column.name) + 4)

        # Excel tables need at least one data row
        ref = f"A1:{get_column_letter(len(table.columns))}2"
        excel_table = Table(displayName=f"{table.schema}.{table.name}", ref=ref)
        excel_table.tableStyleInfo = TableStyleInfo(name="TableStyleMedium2", showRowStripes=True)
        worksheet.add_table(excel_table)
        logger.debug(f"Exported {table.full_name} ({len(table.columns)} columns) as sheet {index}")

    if not workbook.worksheets:
        raise MetadataError(
            "No tables with columns to export.\n\n"
            "Suggestions:\n"
            "1. Introspect with include_columns enabled\n"
            "2. Relax the include/exclude table filters"
        )

    path.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(path)
    logger.info(f"Exported {len(used_titles)} tables to {path}")
    return path
