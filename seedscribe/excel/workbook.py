"""
Object model for Excel workbooks that hold database data.

Every worksheet must contain exactly one Excel table. The table's display name
is ``schema.name``; its header row carries one metadata comment per column and
the remaining rows hold the data.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass
from functools import cached_property
from pathlib import Path
from typing import Any, Iterator, Optional

import openpyxl
from openpyxl.utils.cell import range_boundaries
from openpyxl.worksheet.table import Table
from openpyxl.worksheet.worksheet import Worksheet

from seedscribe.exceptions import MetadataError

logger = logging.getLogger(__name__)


def split_table_name(qualified_name: str, source: str) -> tuple[str, str]:
    """
    Split ``schema.name`` into its two parts.

    The split happens at the first period, so the table part may itself
    contain periods. Both parts must be non-empty.

    Args:
        qualified_name: Excel table display name
        source: Worksheet name, for the error message

    Raises:
        MetadataError: If the name has no period or an empty part
    """
    schema, sep, name = qualified_name.partition(".")
    if not sep or not schema.strip() or not name.strip():
        raise MetadataError(
            f"Excel table '{qualified_name}' in worksheet '{source}' has an invalid name; "
            f"expected 'schema.table'."
        )
    return schema.strip(), name.strip()


def cell_text(value: Any) -> Optional[str]:
    """Render a cell value the way it reads in Excel."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime.datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    return str(value)


@dataclass
class DataExcelTableColumn:
    """Header cell of an Excel table column."""

    index: int
    text: str
    comment: Optional[str]


class DataExcelTable:
    """Excel table region inside a worksheet."""

    def __init__(self, worksheet: Worksheet, table: Table):
        self.worksheet = worksheet
        self._table = table
        self.schema, self.table_name = split_table_name(table.displayName, worksheet.title)
        self._min_col, self._min_row, self._max_col, self._max_row = range_boundaries(table.ref)

    @property
    def sheet_name(self) -> str:
        return self.worksheet.title

    @property
    def display_name(self) -> str:
        return self._table.displayName

    @property
    def width(self) -> int:
        return self._max_col - self._min_col + 1

    @cached_property
    def columns(self) -> list[DataExcelTableColumn]:
        """
        Header cells of the table, in column order.

        Raises:
            MetadataError: If a header cell is missing or blank
        """
        columns = []
        for offset in range(self.width):
            cell = self.worksheet.cell(row=self._min_row, column=self._min_col + offset)
            text = cell_text(cell.value)
            if text is None or not text.strip():
                raise MetadataError(
                    f"Cell in worksheet '{self.sheet_name}' at index {offset} could not be retrieved."
                )
            comment = cell.comment.text if cell.comment is not None else None
            columns.append(DataExcelTableColumn(index=offset, text=text.strip(), comment=comment))
        return columns

    def enumerate_rows(self) -> Iterator[list[Optional[str]]]:
        """
        Yield the cell text of each data row below the header.

        Rows whose cells are all empty are skipped. Empty cells yield None.
        """
        for row in self.worksheet.iter_rows(
            min_row=self._min_row + 1,
            max_row=self._max_row,
            min_col=self._min_col,
            max_col=self._max_col,
            values_only=True,
        ):
            values = [cell_text(v) for v in row]
            if all(v is None or v == "" for v in values):
                continue
            yield values


class DataExcelWorkbook:
    """
    Workbook of data tables, one per worksheet.

    Use as a context manager so the workbook is always closed:

        >>> with DataExcelWorkbook("data.xlsx") as workbook:
        ...     for table in workbook.enumerate_tables():
        ...         print(table.schema, table.table_name)
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._workbook = openpyxl.load_workbook(self.path)
        logger.debug(f"Opened workbook {self.path} ({len(self._workbook.worksheets)} worksheets)")

    def __enter__(self) -> DataExcelWorkbook:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._workbook.close()

    def enumerate_tables(self) -> Iterator[DataExcelTable]:
        """
        Yield the single table of every worksheet, in worksheet order.

        Raises:
            MetadataError: If a worksheet has zero or several tables
        """
        for worksheet in self._workbook.worksheets:
            tables = list(worksheet.tables.values())
            if not tables:
                raise MetadataError(f"Worksheet {worksheet.title} does not contain a table.")
            if len(tables) > 1:
                raise MetadataError(f"Worksheet {worksheet.title} has more than one table.")
            yield DataExcelTable(worksheet, tables[0])
