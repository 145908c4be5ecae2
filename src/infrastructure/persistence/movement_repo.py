"""
infrastructure.persistence.movement_repo - SQLite inventory ledger.

Implements InventoryRepository. The stock column on `products` and the
append-only `inventory_movements` ledger are only ever written together,
inside one BEGIN IMMEDIATE transaction.
"""

from __future__ import annotations

import logging
from typing import Optional
from uuid import uuid4

import aiosqlite

from domain.entities import InventoryMovement, MovementType, Product
from domain.exceptions import InsufficientStockError, NotFoundError
from domain.time_utils import utcnow_iso
from infrastructure.persistence.connection import AsyncSQLiteConnection
from infrastructure.persistence.product_repo import SQLiteProductRepository

logger = logging.getLogger(__name__)

_COLUMNS = """id, product_id, movement_type, quantity_change, previous_stock,
              new_stock, notes, user_id, created_at"""


class SQLiteInventoryRepository:
    """Async SQLite implementation of InventoryRepository."""

    def __init__(self, connection: AsyncSQLiteConnection):
        self._conn = connection

    async def apply_stock_change(
        self,
        product_id: str,
        quantity: int,
        movement_type: MovementType,
        notes: Optional[str],
        user_id: str,
    ) -> tuple[Product, InventoryMovement]:
        """Change a product's stock and append the matching ledger row.

        Fetch, compute, update and insert all happen in one transaction:
        if anything raises, neither the stock nor the ledger changes.

        Raises:
            NotFoundError: no product with *product_id*.
            InsufficientStockError: the resulting stock would be negative.
        """
        async with self._conn.acquire(write_lock=True) as conn:
            rows = await conn.execute_fetchall(
                """SELECT id, name, description, price, stock_quantity, min_stock_level,
                          category, barcode, user_id, created_at, updated_at
                   FROM products WHERE id = ?""",
                (product_id,),
            )
            if not rows:
                raise NotFoundError(
                    f"Product not found with ID: {product_id}. "
                    "Please verify the product exists and use the correct UUID."
                )
            product = SQLiteProductRepository.row_to_product(rows[0])

            previous_stock = product.stock_quantity
            new_stock = previous_stock + quantity
            logger.debug(
                "Stock calculation for %s: %d %+d -> %d",
                product_id, previous_stock, quantity, new_stock,
            )
            if new_stock < 0:
                raise InsufficientStockError(
                    f'Insufficient stock for this operation: "{product.name}" has '
                    f"{previous_stock} in stock, cannot apply a change of {quantity}."
                )

            now = utcnow_iso()
            await conn.execute(
                "UPDATE products SET stock_quantity = ?, updated_at = ? WHERE id = ?",
                (new_stock, now, product_id),
            )
            movement = InventoryMovement(
                id=str(uuid4()),
                product_id=product_id,
                movement_type=MovementType(movement_type),
                quantity_change=quantity,
                previous_stock=previous_stock,
                new_stock=new_stock,
                notes=notes,
                user_id=user_id,
                created_at=now,
            )
            await self._insert_movement(conn, movement)

        product.stock_quantity = new_stock
        product.updated_at = now
        logger.info(
            "Stock for %s updated %d -> %d (%s, movement %s)",
            product_id, previous_stock, new_stock, movement.movement_type.value, movement.id,
        )
        return product, movement

    async def get_by_product(self, product_id: str) -> list[InventoryMovement]:
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                f"""SELECT {_COLUMNS} FROM inventory_movements
                    WHERE product_id = ?
                    ORDER BY created_at DESC, rowid DESC""",
                (product_id,),
            )
        return [self._row_to_movement(r) for r in rows]

    async def list_since(self, cutoff_iso: str) -> list[InventoryMovement]:
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                f"""SELECT {_COLUMNS} FROM inventory_movements
                    WHERE created_at >= ?
                    ORDER BY created_at DESC, rowid DESC""",
                (cutoff_iso,),
            )
        return [self._row_to_movement(r) for r in rows]

    @staticmethod
    async def _insert_movement(
        conn: aiosqlite.Connection, movement: InventoryMovement,
    ) -> None:
        await conn.execute(
            """INSERT INTO inventory_movements
               (id, product_id, movement_type, quantity_change, previous_stock,
                new_stock, notes, user_id, created_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (movement.id, movement.product_id, movement.movement_type.value,
             movement.quantity_change, movement.previous_stock, movement.new_stock,
             movement.notes, movement.user_id, movement.created_at),
        )

    @staticmethod
    def _row_to_movement(row) -> InventoryMovement:
        return InventoryMovement(
            id=row["id"],
            product_id=row["product_id"],
            movement_type=MovementType(row["movement_type"]),
            quantity_change=row["quantity_change"],
            previous_stock=row["previous_stock"],
            new_stock=row["new_stock"],
            notes=row["notes"],
            user_id=row["user_id"] or "",
            created_at=row["created_at"] or "",
        )
