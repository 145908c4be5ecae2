"""
domain.entities - Persistence-aware types (have IDs, timestamps).

Plain dataclasses mirroring the backing-store tables. No SQL concerns,
no DB imports. Timestamps are set by the repository implementations.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional

DEFAULT_MIN_STOCK_LEVEL = 5


class MovementType(str, Enum):
    """Cause of an inventory movement."""
    PURCHASE = "purchase"
    SALE = "sale"
    ADJUSTMENT = "adjustment"
    RETURN = "return"


@dataclass
class Product:
    """A stocked product, owned by the user who created it."""
    id: str = ""
    name: str = ""
    description: Optional[str] = None
    price: Decimal = Decimal("0")
    stock_quantity: int = 0
    min_stock_level: Optional[int] = DEFAULT_MIN_STOCK_LEVEL
    category: Optional[str] = None
    barcode: Optional[str] = None
    user_id: str = ""
    created_at: str = ""
    updated_at: str = ""

    @property
    def threshold(self) -> int:
        if self.min_stock_level is None:
            return DEFAULT_MIN_STOCK_LEVEL
        return self.min_stock_level

    @property
    def is_low_stock(self) -> bool:
        """Derived, never stored: stock at or below the threshold."""
        return self.stock_quantity <= self.threshold


@dataclass
class InventoryMovement:
    """Immutable ledger entry for a single stock change."""
    id: str = ""
    product_id: str = ""
    movement_type: MovementType = MovementType.ADJUSTMENT
    quantity_change: int = 0
    previous_stock: int = 0
    new_stock: int = 0
    notes: Optional[str] = None
    user_id: str = ""
    created_at: str = ""


@dataclass
class Customer:
    """A customer record."""
    id: str = ""
    name: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    user_id: str = ""
    created_at: str = ""
    updated_at: str = ""


@dataclass
class SaleItem:
    """One line of a sale."""
    id: str = ""
    sale_id: str = ""
    product_id: str = ""
    product_name: Optional[str] = None
    quantity: int = 0
    unit_price: Decimal = Decimal("0")
    subtotal: Decimal = Decimal("0")


@dataclass
class Sale:
    """A completed sale. Read-only from the assistant's point of view."""
    id: str = ""
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None
    total_amount: Decimal = Decimal("0")
    payment_method: str = ""
    user_id: str = ""
    created_at: str = ""
