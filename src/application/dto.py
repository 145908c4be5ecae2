"""
application.dto - Data Transfer Objects for service input/output.

Parameter records that agent tools, REST endpoints and the CLI build
before calling a service, plus the result of one conversational turn.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from domain.entities import MovementType


@dataclass(frozen=True)
class ProductQuery:
    category: Optional[str] = None
    search: Optional[str] = None
    low_stock: bool = False


@dataclass(frozen=True)
class NewProduct:
    name: str
    price: Decimal
    stock_quantity: int
    user_id: str
    description: Optional[str] = None
    min_stock_level: Optional[int] = None
    category: Optional[str] = None
    barcode: Optional[str] = None


@dataclass(frozen=True)
class StockUpdateRequest:
    product_id: str
    quantity: int
    movement_type: MovementType
    user_id: str
    notes: Optional[str] = None


@dataclass(frozen=True)
class CustomerQuery:
    search: Optional[str] = None
    limit: int = 10


@dataclass(frozen=True)
class NewCustomer:
    name: str
    user_id: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


@dataclass(frozen=True)
class SalesQuery:
    customer_id: Optional[str] = None
    date_from: Optional[str] = None
    date_to: Optional[str] = None
    limit: int = 20


@dataclass(frozen=True)
class ReportRequest:
    type: str
    days: int = 30


@dataclass(frozen=True)
class TurnResult:
    """What a caller gets back from one conversational turn.

    text:          Final answer shown to the user (always present).
    succeeded:     False when the turn ended in an error.
    error_detail:  Underlying error message, for diagnostics.
    retryable:     True when the same message can simply be sent again
                   (deadline exceeded, upstream hiccup).
    """
    text: str
    succeeded: bool = True
    error_detail: Optional[str] = None
    retryable: bool = False
