"""
infrastructure.persistence.customer_repo - SQLite customer repository.

Implements CustomerRepository.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Optional
from uuid import uuid4

from domain.entities import Customer
from domain.time_utils import utcnow_iso
from infrastructure.persistence.connection import AsyncSQLiteConnection
from infrastructure.persistence.product_repo import like_pattern

logger = logging.getLogger(__name__)


class SQLiteCustomerRepository:
    """Async SQLite implementation of CustomerRepository."""

    def __init__(self, connection: AsyncSQLiteConnection):
        self._conn = connection

    async def save(self, customer: Customer) -> Customer:
        now = utcnow_iso()
        customer.id = customer.id or str(uuid4())
        customer.created_at = customer.created_at or now
        customer.updated_at = now
        async with self._conn.acquire() as conn:
            await conn.execute(
                """INSERT INTO customers
                   (id, name, email, phone, address, user_id, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
                (customer.id, customer.name, customer.email, customer.phone,
                 customer.address, customer.user_id, customer.created_at,
                 customer.updated_at),
            )
        logger.info("Created customer %s (%s)", customer.id, customer.name)
        return customer

    async def search(
        self, search: Optional[str] = None, limit: int = 10,
    ) -> list[Customer]:
        where = ""
        params: list[object] = []
        if search:
            where = """WHERE LOWER(name) LIKE ? ESCAPE '\\'
                         OR LOWER(COALESCE(email, '')) LIKE ? ESCAPE '\\'
                         OR LOWER(COALESCE(phone, '')) LIKE ? ESCAPE '\\'"""
            params.extend([like_pattern(search)] * 3)
        params.append(limit)
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                f"""SELECT id, name, email, phone, address, user_id, created_at, updated_at
                    FROM customers {where}
                    ORDER BY created_at DESC, rowid DESC
                    LIMIT ?""",
                params,
            )
        return [self._row_to_customer(r) for r in rows]

    async def recent_sale_totals(
        self, customer_ids: list[str], per_customer: int = 3,
    ) -> dict[str, list[Decimal]]:
        """Totals of each customer's *per_customer* most recent sales."""
        if not customer_ids:
            return {}
        placeholders = ", ".join("?" for _ in customer_ids)
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                f"""SELECT customer_id, total_amount FROM (
                        SELECT customer_id, total_amount,
                               ROW_NUMBER() OVER (
                                   PARTITION BY customer_id
                                   ORDER BY created_at DESC, rowid DESC
                               ) AS rn
                        FROM sales
                        WHERE customer_id IN ({placeholders})
                    )
                    WHERE rn <= ?""",
                [*customer_ids, per_customer],
            )
        totals: dict[str, list[Decimal]] = defaultdict(list)
        for r in rows:
            totals[r["customer_id"]].append(Decimal(r["total_amount"]))
        return dict(totals)

    @staticmethod
    def _row_to_customer(row) -> Customer:
        return Customer(
            id=row["id"],
            name=row["name"] or "",
            email=row["email"],
            phone=row["phone"],
            address=row["address"],
            user_id=row["user_id"] or "",
            created_at=row["created_at"] or "",
            updated_at=row["updated_at"] or "",
        )
