"""
infrastructure.persistence.product_repo - SQLite product repository.

Implements ProductRepository. Prices are stored as TEXT and read back
as Decimal so no float rounding happens on the way through.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional
from uuid import uuid4

from domain.entities import DEFAULT_MIN_STOCK_LEVEL, Product
from domain.models import CategoryStats
from domain.time_utils import utcnow_iso
from infrastructure.persistence.connection import AsyncSQLiteConnection

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"

_COLUMNS = """id, name, description, price, stock_quantity, min_stock_level,
              category, barcode, user_id, created_at, updated_at"""


def like_pattern(term: str) -> str:
    """Case-folded substring pattern for `LOWER(col) LIKE ? ESCAPE '\\'`."""
    escaped = term.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class SQLiteProductRepository:
    """Async SQLite implementation of ProductRepository."""

    def __init__(self, connection: AsyncSQLiteConnection):
        self._conn = connection

    async def save(self, product: Product) -> Product:
        now = utcnow_iso()
        product.id = product.id or str(uuid4())
        product.created_at = product.created_at or now
        product.updated_at = now
        async with self._conn.acquire() as conn:
            await conn.execute(
                """INSERT INTO products
                   (id, name, description, price, stock_quantity, min_stock_level,
                    category, barcode, user_id, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (product.id, product.name, product.description, str(product.price),
                 product.stock_quantity, product.min_stock_level, product.category,
                 product.barcode, product.user_id, product.created_at, product.updated_at),
            )
        logger.info("Created product %s (%s)", product.id, product.name)
        return product

    async def get_by_id(self, product_id: str) -> Product | None:
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                f"SELECT {_COLUMNS} FROM products WHERE id = ?",
                (product_id,),
            )
        return self.row_to_product(rows[0]) if rows else None

    async def search(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[Product]:
        clauses: list[str] = []
        params: list[object] = []
        if category:
            clauses.append("LOWER(COALESCE(category, '')) LIKE ? ESCAPE '\\'")
            params.append(like_pattern(category))
        if search:
            clauses.append(
                """(LOWER(name) LIKE ? ESCAPE '\\'
                    OR LOWER(COALESCE(description, '')) LIKE ? ESCAPE '\\'
                    OR LOWER(COALESCE(barcode, '')) LIKE ? ESCAPE '\\')"""
            )
            params.extend([like_pattern(search)] * 3)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                f"""SELECT {_COLUMNS} FROM products {where}
                    ORDER BY created_at DESC, rowid DESC""",
                params,
            )
        return [self.row_to_product(r) for r in rows]

    async def recent_movement_counts(
        self, product_ids: list[str], limit: int = 5,
    ) -> dict[str, int]:
        """Number of recent movements per product, capped at *limit*."""
        if not product_ids:
            return {}
        placeholders = ", ".join("?" for _ in product_ids)
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                f"""SELECT product_id, MIN(COUNT(*), ?) AS recent
                    FROM inventory_movements
                    WHERE product_id IN ({placeholders})
                    GROUP BY product_id""",
                [limit, *product_ids],
            )
        return {r["product_id"]: r["recent"] for r in rows}

    async def list_low_stock(self) -> list[Product]:
        """Products at or below their threshold (5 when unset).

        SQLite compares the two columns directly, so the filter runs in
        the store rather than over the full product set in memory.
        """
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                f"""SELECT {_COLUMNS} FROM products
                    WHERE stock_quantity <= COALESCE(min_stock_level, ?)
                    ORDER BY created_at DESC, rowid DESC""",
                (DEFAULT_MIN_STOCK_LEVEL,),
            )
        return [self.row_to_product(r) for r in rows]

    async def category_summary(self) -> list[CategoryStats]:
        # Averages are computed in Python: SQL AVG() over TEXT prices would
        # go through REAL.
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                "SELECT category, price, stock_quantity FROM products ORDER BY category",
            )
        groups: dict[str, list[tuple[Decimal, int]]] = defaultdict(list)
        for r in rows:
            groups[r["category"] or UNCATEGORIZED].append(
                (Decimal(r["price"]), r["stock_quantity"] or 0)
            )
        stats = []
        for category, items in groups.items():
            total_price = sum((price for price, _ in items), Decimal("0"))
            average = (total_price / len(items)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
            stats.append(CategoryStats(
                category=category,
                product_count=len(items),
                total_stock=sum(stock for _, stock in items),
                average_price=average,
            ))
        return stats

    @staticmethod
    def row_to_product(row) -> Product:
        return Product(
            id=row["id"],
            name=row["name"] or "",
            description=row["description"],
            price=Decimal(row["price"]),
            stock_quantity=row["stock_quantity"] or 0,
            min_stock_level=row["min_stock_level"],
            category=row["category"],
            barcode=row["barcode"],
            user_id=row["user_id"] or "",
            created_at=row["created_at"] or "",
            updated_at=row["updated_at"] or "",
        )
