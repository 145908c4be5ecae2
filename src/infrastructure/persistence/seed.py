"""
infrastructure.persistence.seed - Demo data for a fresh database.

Used by the CLI `seed` command. Every stock change goes through the
inventory repository so the ledger matches the stored quantities.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from domain.entities import Customer, MovementType, Product, Sale, SaleItem
from infrastructure.persistence.connection import AsyncSQLiteConnection
from infrastructure.persistence.customer_repo import SQLiteCustomerRepository
from infrastructure.persistence.movement_repo import SQLiteInventoryRepository
from infrastructure.persistence.product_repo import SQLiteProductRepository
from infrastructure.persistence.sales_repo import SQLiteSalesRepository

logger = logging.getLogger(__name__)

# name, category, price, initial purchase, min stock level
_PRODUCTS = [
    ("Wireless Mouse", "Electronics", "24.99", 40, 10),
    ("USB-C Cable", "Electronics", "9.50", 4, 10),
    ("Office Chair", "Furniture", "149.00", 6, 2),
    ("Standing Desk", "Furniture", "399.99", 2, 3),
    ("A4 Paper (500 sheets)", "Stationery", "5.25", 120, 20),
    ("Gel Pen", None, "1.20", 5, None),
]

_CUSTOMERS = [
    ("Alice Martin", "alice@example.com", "+1-555-0101", "12 Oak Street"),
    ("Bob Chen", "bob@example.com", "+1-555-0102", None),
    ("Carla Diaz", None, "+1-555-0103", "7 Pine Avenue"),
]


@dataclass(frozen=True)
class SeedSummary:
    products: int
    customers: int
    sales: int
    movements: int


async def seed_demo_data(connection: AsyncSQLiteConnection, user_id: str) -> SeedSummary:
    """Insert a small catalogue, a few customers and two sales owned by *user_id*."""
    products_repo = SQLiteProductRepository(connection)
    inventory_repo = SQLiteInventoryRepository(connection)
    customer_repo = SQLiteCustomerRepository(connection)
    sales_repo = SQLiteSalesRepository(connection)
    movements = 0

    products: list[Product] = []
    for name, category, price, initial, min_level in _PRODUCTS:
        product = await products_repo.save(Product(
            name=name,
            price=Decimal(price),
            stock_quantity=0,
            min_stock_level=min_level,
            category=category,
            user_id=user_id,
        ))
        await inventory_repo.apply_stock_change(
            product_id=product.id,
            quantity=initial,
            movement_type=MovementType.PURCHASE,
            notes="Initial stock",
            user_id=user_id,
        )
        movements += 1
        products.append(product)

    customers: list[Customer] = []
    for name, email, phone, address in _CUSTOMERS:
        customers.append(await customer_repo.save(Customer(
            name=name, email=email, phone=phone, address=address, user_id=user_id,
        )))

    # (customer index or None for walk-in, [(product index, quantity)])
    orders = [(0, [(0, 2), (4, 3)]), (None, [(1, 1)])]
    for customer_index, lines in orders:
        items = []
        for product_index, quantity in lines:
            product = products[product_index]
            items.append(SaleItem(
                product_id=product.id,
                quantity=quantity,
                unit_price=product.price,
                subtotal=product.price * quantity,
            ))
            await inventory_repo.apply_stock_change(
                product_id=product.id,
                quantity=-quantity,
                movement_type=MovementType.SALE,
                notes="Demo sale",
                user_id=user_id,
            )
            movements += 1
        await sales_repo.save(
            Sale(
                customer_id=customers[customer_index].id if customer_index is not None else None,
                total_amount=sum((item.subtotal for item in items), Decimal("0")),
                payment_method="card",
                user_id=user_id,
            ),
            items,
        )

    summary = SeedSummary(
        products=len(products),
        customers=len(customers),
        sales=len(orders),
        movements=movements,
    )
    logger.info("Seeded demo data for user %s: %s", user_id, summary)
    return summary
