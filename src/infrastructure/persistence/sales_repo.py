"""
infrastructure.persistence.sales_repo - SQLite sales repository.

Implements SalesRepository. The assistant only reads sales; save() exists
for seeding and for the point-of-sale side of the application.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Optional
from uuid import uuid4

from domain.entities import Sale, SaleItem
from domain.time_utils import utcnow_iso
from infrastructure.persistence.connection import AsyncSQLiteConnection

logger = logging.getLogger(__name__)


class SQLiteSalesRepository:
    """Async SQLite implementation of SalesRepository."""

    def __init__(self, connection: AsyncSQLiteConnection):
        self._conn = connection

    async def save(self, sale: Sale, items: list[SaleItem]) -> Sale:
        sale.id = sale.id or str(uuid4())
        sale.created_at = sale.created_at or utcnow_iso()
        async with self._conn.acquire() as conn:
            await conn.execute(
                """INSERT INTO sales
                   (id, customer_id, total_amount, payment_method, user_id, created_at)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (sale.id, sale.customer_id, str(sale.total_amount),
                 sale.payment_method, sale.user_id, sale.created_at),
            )
            for item in items:
                item.id = item.id or str(uuid4())
                item.sale_id = sale.id
                await conn.execute(
                    """INSERT INTO sale_items
                       (id, sale_id, product_id, quantity, unit_price, subtotal)
                       VALUES (?, ?, ?, ?, ?, ?)""",
                    (item.id, item.sale_id, item.product_id, item.quantity,
                     str(item.unit_price), str(item.subtotal)),
                )
        return sale

    async def search(
        self,
        customer_id: Optional[str] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        limit: int = 20,
    ) -> list[Sale]:
        """Sales newest first. Date bounds are inclusive ISO strings."""
        clauses: list[str] = []
        params: list[object] = []
        if customer_id:
            clauses.append("s.customer_id = ?")
            params.append(customer_id)
        if date_from:
            clauses.append("s.created_at >= ?")
            params.append(date_from)
        if date_to:
            clauses.append("s.created_at <= ?")
            params.append(date_to)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        params.append(limit)
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                f"""SELECT s.id, s.customer_id, c.name AS customer_name, s.total_amount,
                           s.payment_method, s.user_id, s.created_at
                    FROM sales s
                    LEFT JOIN customers c ON c.id = s.customer_id
                    {where}
                    ORDER BY s.created_at DESC, s.rowid DESC
                    LIMIT ?""",
                params,
            )
        return [
            Sale(
                id=r["id"],
                customer_id=r["customer_id"],
                customer_name=r["customer_name"],
                total_amount=Decimal(r["total_amount"]),
                payment_method=r["payment_method"] or "",
                user_id=r["user_id"] or "",
                created_at=r["created_at"] or "",
            )
            for r in rows
        ]

    async def items_for(self, sale_ids: list[str]) -> dict[str, list[SaleItem]]:
        if not sale_ids:
            return {}
        placeholders = ", ".join("?" for _ in sale_ids)
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                f"""SELECT i.id, i.sale_id, i.product_id, p.name AS product_name,
                           i.quantity, i.unit_price, i.subtotal
                    FROM sale_items i
                    LEFT JOIN products p ON p.id = i.product_id
                    WHERE i.sale_id IN ({placeholders})
                    ORDER BY i.rowid""",
                sale_ids,
            )
        items: dict[str, list[SaleItem]] = defaultdict(list)
        for r in rows:
            items[r["sale_id"]].append(SaleItem(
                id=r["id"],
                sale_id=r["sale_id"],
                product_id=r["product_id"] or "",
                product_name=r["product_name"],
                quantity=r["quantity"],
                unit_price=Decimal(r["unit_price"]),
                subtotal=Decimal(r["subtotal"]),
            ))
        return dict(items)
