"""
domain.ports - Abstract interfaces (Protocols) for all system boundaries.

These define WHAT the system needs without specifying HOW. Infrastructure
modules provide concrete implementations. Application services depend only
on these protocols, never on concrete classes.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, runtime_checkable

from domain.entities import (
    Customer,
    InventoryMovement,
    MovementType,
    Product,
    Sale,
    SaleItem,
)
from domain.models import CategoryStats


@runtime_checkable
class ProductRepository(Protocol):
    """Reads and creates products."""

    async def save(self, product: Product) -> Product: ...
    async def get_by_id(self, product_id: str) -> Product | None: ...
    async def search(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[Product]: ...
    async def recent_movement_counts(
        self, product_ids: list[str], limit: int = 5,
    ) -> dict[str, int]: ...
    async def list_low_stock(self) -> list[Product]: ...
    async def category_summary(self) -> list[CategoryStats]: ...


@runtime_checkable
class InventoryRepository(Protocol):
    """Append-only movement ledger plus the atomic stock change."""

    async def apply_stock_change(
        self,
        product_id: str,
        quantity: int,
        movement_type: MovementType,
        notes: Optional[str],
        user_id: str,
    ) -> tuple[Product, InventoryMovement]: ...
    async def get_by_product(self, product_id: str) -> list[InventoryMovement]: ...
    async def list_since(self, cutoff_iso: str) -> list[InventoryMovement]: ...


@runtime_checkable
class CustomerRepository(Protocol):
    """Reads and creates customers."""

    async def save(self, customer: Customer) -> Customer: ...
    async def search(
        self, search: Optional[str] = None, limit: int = 10,
    ) -> list[Customer]: ...
    async def recent_sale_totals(
        self, customer_ids: list[str], per_customer: int = 3,
    ) -> dict[str, list[Decimal]]: ...


@runtime_checkable
class SalesRepository(Protocol):
    """Read access to sales and their line items."""

    async def save(self, sale: Sale, items: list[SaleItem]) -> Sale: ...
    async def search(
        self,
        customer_id: Optional[str] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        limit: int = 20,
    ) -> list[Sale]: ...
    async def items_for(self, sale_ids: list[str]) -> dict[str, list[SaleItem]]: ...
