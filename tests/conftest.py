"""Pytest configuration and shared fixtures."""

import json
from pathlib import Path
from typing import Any, Callable, Sequence

import pytest
from openpyxl import Workbook
from openpyxl.comments import Comment
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.table import Table

from seedscribe.generators.templating import initialize_templates
from seedscribe.providers.sqlserver import SQLSERVER


class FakeCursor:
    """DB-API cursor that replays canned rows keyed by query text."""

    def __init__(self, connection: "FakeConnection"):
        self.connection = connection
        self._rows: list[tuple] = []
        self.closed = False

    def execute(self, query: str, params: Any = None) -> None:
        self.connection.executed.append(query)
        if query not in self.connection.responses:
            raise AssertionError(f"Unexpected query: {query[:60]!r}")
        self._rows = list(self.connection.responses[query])

    def fetchall(self) -> list[tuple]:
        return self._rows

    def close(self) -> None:
        self.closed = True
        self.connection.cursors_closed += 1


class FakeConnection:
    """DB-API connection serving FakeCursors."""

    def __init__(self, responses: dict[str, list[tuple]]):
        self.responses = responses
        self.executed: list[str] = []
        self.cursors_closed = 0
        self.closed = False

    def cursor(self) -> FakeCursor:
        return FakeCursor(self)

    def close(self) -> None:
        self.closed = True


def sqlserver_catalog(
    tables: Sequence[tuple] = (),
    columns: Sequence[tuple] = (),
    references: Sequence[tuple] = (),
) -> FakeConnection:
    """Fake SQL Server connection answering the three catalog queries."""
    return FakeConnection(
        {
            SQLSERVER.tables_query: list(tables),
            SQLSERVER.columns_query: list(columns),
            SQLSERVER.references_query: list(references),
        }
    )


@pytest.fixture
def shop_connection() -> FakeConnection:
    """
    Catalog with Customers and Orders.

    Orders.CustomerId references Customers.Id.
    """
    return sqlserver_catalog(
        tables=[("Customers", "dbo"), ("Orders", "dbo")],
        columns=[
            # table, schema, name, native type, max length, nullable, identity, pk
            ("Customers", "dbo", "Id", "int", 4, 0, 1, 1),
            ("Customers", "dbo", "Name", "nvarchar", 50, 1, 0, 0),
            ("Orders", "dbo", "Id", "int", 4, 0, 1, 1),
            ("Orders", "dbo", "CustomerId", "int", 4, 0, 0, 0),
        ],
        references=[("Orders", "dbo", "CustomerId", "dbo", "Customers", "Id")],
    )


def column_meta(
    db_type: str,
    type_name: str = "str",
    native_type: str = "nvarchar",
    max_length: int = 0,
    is_nullable: bool = True,
    is_primary_key: bool = False,
    is_identity: bool = False,
    is_auto_generated: bool = False,
) -> dict[str, Any]:
    """Header metadata map as written by the schema exporter."""
    return {
        "DbType": db_type,
        "Type": type_name,
        "IsPrimaryKey": is_primary_key,
        "IsNullable": is_nullable,
        "IsIdentity": is_identity,
        "MaxLength": max_length,
        "IsAutoGenerated": is_auto_generated,
        "NativeType": native_type,
    }


def add_data_sheet(
    workbook: Workbook,
    display_name: str,
    headers: list[tuple[str, Any]],
    rows: list[list[Any]],
    title: str | None = None,
) -> None:
    """
    Add a worksheet holding one Excel table.

    Args:
        workbook: Target workbook
        display_name: Excel table name (schema.table)
        headers: (column name, metadata) pairs; metadata may be a dict, raw
            comment text, or None for no comment
        rows: Data rows below the header
        title: Worksheet title (defaults to display_name)
    """
    worksheet = workbook.create_sheet(title=title or display_name)
    for col_idx, (name, meta) in enumerate(headers, start=1):
        cell = worksheet.cell(row=1, column=col_idx, value=name)
        if meta is not None:
            text = meta if isinstance(meta, str) else json.dumps(meta)
            cell.comment = Comment(text, "tests")
    for row_idx, row in enumerate(rows, start=2):
        for col_idx, value in enumerate(row, start=1):
            worksheet.cell(row=row_idx, column=col_idx, value=value)

    last_row = max(len(rows) + 1, 2)
    ref = f"A1:{get_column_letter(len(headers))}{last_row}"
    worksheet.add_table(Table(displayName=display_name, ref=ref))


@pytest.fixture
def build_workbook(tmp_path: Path) -> Callable[..., Path]:
    """
    Factory writing a workbook to tmp_path.

    Usage:
        path = build_workbook("data.xlsx", lambda wb: add_data_sheet(wb, ...))
    """

    def _build(filename: str, populate: Callable[[Workbook], None]) -> Path:
        workbook = Workbook()
        workbook.remove(workbook.active)
        populate(workbook)
        path = tmp_path / filename
        workbook.save(path)
        return path

    return _build


@pytest.fixture
def products_workbook(build_workbook: Callable[..., Path]) -> Path:
    """dbo.Products: header plus three data rows, RowVersion auto-generated."""

    def populate(workbook: Workbook) -> None:
        add_data_sheet(
            workbook,
            "dbo.Products",
            [
                ("Id", column_meta("Int32", "int", "int", is_nullable=False,
                                   is_primary_key=True, is_identity=True)),
                ("Name", column_meta("String", "str", "nvarchar", max_length=50)),
                ("InStock", column_meta("Boolean", "bool", "bit", is_nullable=False)),
                ("RowVersion", column_meta("Binary", "bytes", "rowversion", max_length=8,
                                           is_nullable=False, is_auto_generated=True)),
            ],
            [
                [1, "Widget", True, "0x0001"],
                [2, 'Gadget "Pro"', False, "0x0002"],
                [3, None, True, "0x0003"],
            ],
        )

    return build_workbook("products.xlsx", populate)


@pytest.fixture(autouse=True, scope="session")
def templates() -> None:
    """Initialize the template environment once per test session."""
    initialize_templates()
