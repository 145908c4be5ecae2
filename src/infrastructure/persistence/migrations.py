"""
infrastructure.persistence.migrations - Database schema creation.

Called once at startup by the factory or the CLI `init` command.
"""

from __future__ import annotations

import logging

from infrastructure.persistence.connection import AsyncSQLiteConnection

logger = logging.getLogger(__name__)

_TABLES = [
    """CREATE TABLE IF NOT EXISTS products (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        description TEXT,
        price TEXT NOT NULL,
        stock_quantity INTEGER NOT NULL DEFAULT 0,
        min_stock_level INTEGER DEFAULT 5,
        category TEXT,
        barcode TEXT,
        user_id TEXT NOT NULL,
        created_at TEXT,
        updated_at TEXT
    )""",
    """CREATE TABLE IF NOT EXISTS inventory_movements (
        id TEXT PRIMARY KEY,
        product_id TEXT NOT NULL,
        movement_type TEXT NOT NULL
            CHECK (movement_type IN ('purchase', 'sale', 'adjustment', 'return')),
        quantity_change INTEGER NOT NULL,
        previous_stock INTEGER NOT NULL,
        new_stock INTEGER NOT NULL CHECK (new_stock >= 0),
        notes TEXT,
        user_id TEXT NOT NULL,
        created_at TEXT,
        CHECK (new_stock = previous_stock + quantity_change),
        FOREIGN KEY (product_id) REFERENCES products(id)
    )""",
    """CREATE TABLE IF NOT EXISTS customers (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        email TEXT,
        phone TEXT,
        address TEXT,
        user_id TEXT NOT NULL,
        created_at TEXT,
        updated_at TEXT
    )""",
    """CREATE TABLE IF NOT EXISTS sales (
        id TEXT PRIMARY KEY,
        customer_id TEXT,
        total_amount TEXT NOT NULL,
        payment_method TEXT,
        user_id TEXT NOT NULL,
        created_at TEXT,
        FOREIGN KEY (customer_id) REFERENCES customers(id)
    )""",
    """CREATE TABLE IF NOT EXISTS sale_items (
        id TEXT PRIMARY KEY,
        sale_id TEXT NOT NULL,
        product_id TEXT,
        quantity INTEGER NOT NULL,
        unit_price TEXT NOT NULL,
        subtotal TEXT NOT NULL,
        FOREIGN KEY (sale_id) REFERENCES sales(id),
        FOREIGN KEY (product_id) REFERENCES products(id)
    )""",
]

_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_movements_product ON inventory_movements (product_id, created_at)",
    "CREATE INDEX IF NOT EXISTS idx_movements_created ON inventory_movements (created_at)",
    "CREATE INDEX IF NOT EXISTS idx_sales_customer ON sales (customer_id, created_at)",
    "CREATE INDEX IF NOT EXISTS idx_sale_items_sale ON sale_items (sale_id)",
]


async def run_migrations(connection: AsyncSQLiteConnection) -> None:
    """Create all tables if they don't exist.

    Safe to call multiple times (uses IF NOT EXISTS).
    """
    async with connection.acquire() as conn:
        for ddl in _TABLES + _INDEXES:
            await conn.execute(ddl)
    logger.info("All tables created (or already exist) in %s.", connection.db_path)
