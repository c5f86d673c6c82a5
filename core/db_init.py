# ---------- db_init.py ----------
"""Create and return a database connection (hosted PostgreSQL or SQLite).

The hosted database (Supabase) owns the real schema; ``init_schema`` only
creates missing tables so a fresh local SQLite file is usable.
"""
import logging
import os
import sqlite3
from typing import Union

from core.config import get_postgres_settings, get_sqlite_path

try:
    import psycopg2
    import psycopg2.extensions
except ImportError:
    psycopg2 = None

logger = logging.getLogger(__name__)

# Type alias for database connections
DBConnection = Union[sqlite3.Connection, "psycopg2.extensions.connection"]


def is_postgres(conn: DBConnection) -> bool:
    """Check if connection is PostgreSQL."""
    return psycopg2 is not None and isinstance(conn, psycopg2.extensions.connection)


def init_db() -> DBConnection:
    """Initialize the database connection.

    Uses PostgreSQL when credentials are configured, SQLite otherwise.
    Connection reuse is handled by ``st.cache_resource`` in app.py.
    """
    settings = get_postgres_settings()
    if settings is not None:
        if psycopg2 is None:
            raise RuntimeError("psycopg2 is required for the PostgreSQL connection")
        # Supabase requires SSL
        conn = psycopg2.connect(
            **settings,
            sslmode="require",
            connect_timeout=10,
            options="-c statement_timeout=30000",
        )
        conn.autocommit = False
        logger.info("Connected to PostgreSQL")
    else:
        conn = connect_sqlite(get_sqlite_path())
        logger.info("Using local SQLite database")

    init_schema(conn)
    return conn


def connect_sqlite(path: str) -> sqlite3.Connection:
    """Create a SQLite connection (ensures the parent directory exists)."""
    if path != ":memory:":
        folder = os.path.dirname(path)
        if folder:
            os.makedirs(folder, exist_ok=True)
    conn = sqlite3.connect(path, check_same_thread=False)
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_schema(conn: DBConnection) -> None:
    """Create tables for a new database (safe to run on an existing one)."""
    is_pg = is_postgres(conn)

    id_type = "SERIAL PRIMARY KEY" if is_pg else "INTEGER PRIMARY KEY AUTOINCREMENT"
    real_type = "NUMERIC(12,2)" if is_pg else "REAL"
    ts_type = "TIMESTAMPTZ DEFAULT now()" if is_pg else "TEXT DEFAULT CURRENT_TIMESTAMP"

    cur = conn.cursor()
    cur.execute(
        f"""
        CREATE TABLE IF NOT EXISTS categories (
            id {id_type},
            name TEXT UNIQUE NOT NULL,
            created_at {ts_type}
        )
        """
    )
    cur.execute(
        f"""
        CREATE TABLE IF NOT EXISTS products (
            id {id_type},
            name TEXT NOT NULL,
            category_id INTEGER REFERENCES categories(id),
            price {real_type} NOT NULL,
            stock INTEGER NOT NULL DEFAULT 0 CHECK (stock >= 0),
            width {real_type},
            height {real_type},
            weight {real_type},
            description TEXT,
            created_at {ts_type},
            updated_at TEXT
        )
        """
    )
    cur.execute(
        f"""
        CREATE TABLE IF NOT EXISTS sales (
            id {id_type},
            customer TEXT NOT NULL,
            date TEXT,
            products TEXT,
            status TEXT DEFAULT 'pendente',
            payment TEXT,
            total {real_type} DEFAULT 0,
            created_at {ts_type}
        )
        """
    )
    cur.execute(
        f"""
        CREATE TABLE IF NOT EXISTS customers (
            id {id_type},
            name TEXT NOT NULL,
            email TEXT,
            phone TEXT,
            total_purchases {real_type} DEFAULT 0,
            last_purchase TEXT,
            status TEXT DEFAULT 'ativo',
            created_at {ts_type}
        )
        """
    )
    cur.execute(
        f"""
        CREATE TABLE IF NOT EXISTS settings (
            id {id_type},
            store_name TEXT,
            store_email TEXT,
            store_phone TEXT,
            store_address TEXT,
            notify_low_stock INTEGER DEFAULT 1,
            notify_new_order INTEGER DEFAULT 1,
            notify_sales_report INTEGER DEFAULT 1,
            notify_product_updates INTEGER DEFAULT 0
        )
        """
    )
    conn.commit()
