"""Open DB-API connections for the command line tool."""

import logging
from typing import Any

import psycopg

from seedscribe.providers.base import Dialect

logger = logging.getLogger(__name__)


def open_connection(dialect: Dialect, url: str) -> Any:
    """
    Open a connection with the dialect's driver.

    The caller owns the returned connection and must close it. Schema
    providers only borrow connections.

    Args:
        dialect: Registered dialect
        url: psycopg conninfo/URL for PostgreSQL, ODBC connection string for SQL Server

    Raises:
        ValueError: If no driver is known for the dialect
    """
    logger.debug(f"Connecting with {dialect.name} driver")
    if dialect.name == "postgresql":
        return psycopg.connect(url)
    if dialect.name == "sqlserver":
        # Optional dependency: pip install seedscribe[sqlserver]
        import pyodbc

        return pyodbc.connect(url)
    raise ValueError(
        f"No driver known for dialect '{dialect.name}'. "
        f"Open the connection yourself and pass it to SchemaQueryProvider."
    )
