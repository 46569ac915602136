"""Spreadsheet data workbooks: reading, binding models and schema export."""

from seedscribe.excel.binding import (
    REQUIRED_METADATA_KEYS,
    UNBOUNDED_PARAMETER_SIZE,
    ColumnBindingModel,
    TableBindingModel,
    build_table_binding,
    parameter_size,
)
from seedscribe.excel.export import export_schema_workbook
from seedscribe.excel.workbook import DataExcelTable, DataExcelWorkbook, split_table_name

__all__ = [
    "ColumnBindingModel",
    "DataExcelTable",
    "DataExcelWorkbook",
    "REQUIRED_METADATA_KEYS",
    "TableBindingModel",
    "UNBOUNDED_PARAMETER_SIZE",
    "build_table_binding",
    "export_schema_workbook",
    "parameter_size",
    "split_table_name",
]
