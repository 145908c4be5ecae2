"""
domain.models - Value objects returned by the data operations and held
in session memory.

Immutable data containers with no business logic and no dependencies on
infrastructure (no LangChain, no SQLite). Monetary fields are Decimal;
they are turned into text only when serialized at a boundary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional


# ---------------------------------------------------------------------------
# Products & stock
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ProductSummary:
    """One row of a product listing."""
    id: str
    name: str
    description: Optional[str]
    price: Decimal
    stock_quantity: int
    min_stock_level: Optional[int]
    category: Optional[str]
    barcode: Optional[str]
    recent_movements: int = 0


@dataclass(frozen=True)
class CreatedProduct:
    id: str
    name: str
    price: Decimal
    stock_quantity: int
    category: Optional[str]
    min_stock_level: int


@dataclass(frozen=True)
class StockChange:
    """Product side of a stock update."""
    id: str
    name: str
    previous_stock: int
    new_stock: int
    quantity_changed: int
    min_stock_level: int


@dataclass(frozen=True)
class MovementRef:
    id: str
    type: str
    created_at: str


@dataclass(frozen=True)
class StockUpdateResult:
    product: StockChange
    movement: MovementRef


# ---------------------------------------------------------------------------
# Customers & sales
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CustomerSummary:
    """A customer with totals over their three most recent sales."""
    id: str
    name: str
    email: Optional[str]
    phone: Optional[str]
    address: Optional[str]
    recent_sales: int = 0
    total_recent_sales: Decimal = Decimal("0")


@dataclass(frozen=True)
class CreatedCustomer:
    id: str
    name: str
    email: Optional[str]
    phone: Optional[str]


@dataclass(frozen=True)
class SaleLine:
    product: Optional[str]
    quantity: int
    unit_price: Decimal
    subtotal: Decimal


@dataclass(frozen=True)
class SaleSummary:
    id: str
    customer: str
    total_amount: Decimal
    payment_method: str
    items_count: int
    items: list[SaleLine] = field(default_factory=list)
    created_at: str = ""


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------

class ReportType(str, Enum):
    """Closed set of inventory report kinds."""
    LOW_STOCK = "low_stock"
    MOVEMENT_SUMMARY = "movement_summary"
    CATEGORY_SUMMARY = "category_summary"


@dataclass(frozen=True)
class LowStockEntry:
    id: str
    name: str
    stock_quantity: int
    min_stock_level: Optional[int]
    category: Optional[str]


@dataclass(frozen=True)
class LowStockReport:
    products: list[LowStockEntry] = field(default_factory=list)
    type: str = ReportType.LOW_STOCK.value


@dataclass(frozen=True)
class MovementStats:
    count: int = 0
    total_quantity: int = 0


@dataclass(frozen=True)
class MovementSummaryReport:
    period_days: int
    total_movements: int
    summary: dict[str, MovementStats] = field(default_factory=dict)
    type: str = ReportType.MOVEMENT_SUMMARY.value


@dataclass(frozen=True)
class CategoryStats:
    category: str
    product_count: int
    total_stock: int
    average_price: Decimal


@dataclass(frozen=True)
class CategorySummaryReport:
    categories: list[CategoryStats] = field(default_factory=list)
    type: str = ReportType.CATEGORY_SUMMARY.value


# ---------------------------------------------------------------------------
# Conversation memory
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Turn:
    """One message in a session's history."""
    role: str  # "user" or "assistant"
    content: str
    timestamp: str = ""


@dataclass(frozen=True)
class ProductRef:
    """The product the conversation is currently about."""
    id: str
    name: str
    stock_quantity: int
    min_stock_level: int


@dataclass(frozen=True)
class CustomerRef:
    id: str
    name: str


@dataclass(frozen=True)
class ContextRecord:
    """Structured "current focus" of a session.

    Fields are independently optional; updates replace only the fields
    they carry.
    """
    current_product: Optional[ProductRef] = None
    current_customer: Optional[CustomerRef] = None
    last_action: Optional[str] = None
    user_id: Optional[str] = None

    def is_empty(self) -> bool:
        return not any([
            self.current_product,
            self.current_customer,
            self.last_action,
            self.user_id,
        ])
