"""
PostgreSQL integration tests.

Run against a scratch database:

    SEEDSCRIBE_TEST_DSN=postgresql://localhost/seedscribe_test pytest tests/integration
"""

import os

import psycopg
import pytest
from psycopg import Connection

from seedscribe.core.models import ForeignKeyDefinition, GetTableOptions
from seedscribe.core.types import DbType
from seedscribe.providers import POSTGRESQL, SchemaQueryProvider

DSN = os.environ.get("SEEDSCRIBE_TEST_DSN")

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(not DSN, reason="SEEDSCRIBE_TEST_DSN not set"),
]

SCHEMA = "seedscribe_it"


@pytest.fixture
def db_conn() -> Connection:
    """Provide a test database connection, rolled back afterwards."""
    conn = psycopg.connect(DSN, autocommit=False)
    yield conn
    conn.rollback()
    conn.close()


@pytest.fixture
def shop_schema(db_conn: Connection) -> str:
    """Create customers, orders, invoices and shipments tables in a scratch schema."""
    with db_conn.cursor() as cur:
        cur.execute(f"DROP SCHEMA IF EXISTS {SCHEMA} CASCADE")
        cur.execute(f"CREATE SCHEMA {SCHEMA}")
        cur.execute(f"""
            CREATE TABLE {SCHEMA}.customers (
                id INTEGER GENERATED ALWAYS AS IDENTITY PRIMARY KEY,
                name VARCHAR(50) NOT NULL,
                email TEXT
            )
        """)
        cur.execute(f"""
            CREATE TABLE {SCHEMA}.orders (
                id BIGSERIAL PRIMARY KEY,
                customer_id INTEGER NOT NULL REFERENCES {SCHEMA}.customers(id),
                placed_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                reference UUID
            )
        """)
        # Constraint names only need to be unique per table
        cur.execute(f"""
            CREATE TABLE {SCHEMA}.invoices (
                id SERIAL PRIMARY KEY,
                client_id INTEGER NOT NULL,
                order_id BIGINT,
                CONSTRAINT fk_customer FOREIGN KEY (client_id) REFERENCES {SCHEMA}.customers(id),
                CONSTRAINT fk_order FOREIGN KEY (order_id) REFERENCES {SCHEMA}.orders(id)
            )
        """)
        cur.execute(f"""
            CREATE TABLE {SCHEMA}.shipments (
                id SERIAL PRIMARY KEY,
                order_id BIGINT NOT NULL,
                CONSTRAINT fk_customer FOREIGN KEY (order_id) REFERENCES {SCHEMA}.orders(id)
            )
        """)
        db_conn.commit()

    yield SCHEMA

    with db_conn.cursor() as cur:
        cur.execute(f"DROP SCHEMA IF EXISTS {SCHEMA} CASCADE")
        db_conn.commit()


def test_get_tables(db_conn: Connection, shop_schema: str):
    """Should discover both tables with columns and the foreign key."""
    provider = SchemaQueryProvider(db_conn, POSTGRESQL)
    tables = provider.get_tables(GetTableOptions(include_schemas=[shop_schema]))

    assert [t.name for t in tables] == ["customers", "invoices", "orders", "shipments"]
    assert tables[0].full_name == f'"{shop_schema}"."customers"'

    customers = tables.get(shop_schema, "customers")
    assert [c.name for c in customers.columns] == ["id", "name", "email"]
    assert customers.get_column("id").is_identity is True
    assert customers.get_column("id").is_primary_key is True
    assert customers.get_column("name").max_length == 50
    assert customers.get_column("name").is_nullable is False
    assert customers.get_column("email").db_type is DbType.STRING

    orders = tables.get(shop_schema, "orders")
    assert orders.get_column("id").is_identity is True
    assert orders.get_column("customer_id").foreign_key == ForeignKeyDefinition(
        shop_schema, "customers", "id"
    )
    assert orders.get_column("placed_at").db_type is DbType.DATE_TIME_OFFSET
    assert orders.get_column("reference").db_type is DbType.GUID


def test_shared_constraint_names(db_conn: Connection, shop_schema: str):
    """Foreign keys with the same constraint name on different tables stay apart."""
    tables = SchemaQueryProvider(db_conn, POSTGRESQL).get_tables(
        GetTableOptions(include_schemas=[shop_schema])
    )

    invoices = tables.get(shop_schema, "invoices")
    assert [c.name for c in invoices.foreign_key_columns] == ["client_id", "order_id"]
    assert invoices.get_column("client_id").foreign_key == ForeignKeyDefinition(
        shop_schema, "customers", "id"
    )
    assert invoices.get_column("order_id").foreign_key == ForeignKeyDefinition(
        shop_schema, "orders", "id"
    )

    shipments = tables.get(shop_schema, "shipments")
    assert [c.name for c in shipments.foreign_key_columns] == ["order_id"]
    assert shipments.get_column("order_id").foreign_key == ForeignKeyDefinition(
        shop_schema, "orders", "id"
    )


def test_connection_stays_usable(db_conn: Connection, shop_schema: str):
    """The provider borrows the connection and leaves it open."""
    SchemaQueryProvider(db_conn, POSTGRESQL).get_tables(
        GetTableOptions(include_columns=False, include_foreign_keys=False)
    )

    assert not db_conn.closed
    with db_conn.cursor() as cur:
        cur.execute("SELECT 1")
        assert cur.fetchone() == (1,)
