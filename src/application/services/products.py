"""
application.services.products - Product listing, creation and stock changes.

Validates identifiers before touching the store and delegates the
transactional stock change to the InventoryRepository.
"""

from __future__ import annotations

import logging

from domain.entities import DEFAULT_MIN_STOCK_LEVEL, MovementType, Product
from domain.exceptions import InvalidActionError
from domain.identifiers import require_uuid
from domain.models import (
    CreatedProduct,
    MovementRef,
    ProductSummary,
    StockChange,
    StockUpdateResult,
)
from domain.ports import InventoryRepository, ProductRepository
from application.dto import NewProduct, ProductQuery, StockUpdateRequest

logger = logging.getLogger(__name__)

_SEARCH_FIRST_HINT = "Please search for the product first to get its proper ID."


class ProductService:
    """Product and stock operations exposed to the agent."""

    def __init__(
        self,
        product_repo: ProductRepository,
        inventory_repo: InventoryRepository,
    ):
        self._products = product_repo
        self._inventory = inventory_repo

    async def list_products(self, query: ProductQuery) -> list[ProductSummary]:
        """Newest-first product summaries matching *query*.

        The low-stock filter is applied after the search, using the
        derived rule (stock at or below min_stock_level, 5 when unset).
        """
        products = await self._products.search(
            category=query.category, search=query.search,
        )
        if query.low_stock:
            products = [p for p in products if p.is_low_stock]

        counts = await self._products.recent_movement_counts([p.id for p in products])
        return [
            ProductSummary(
                id=p.id,
                name=p.name,
                description=p.description,
                price=p.price,
                stock_quantity=p.stock_quantity,
                min_stock_level=p.min_stock_level,
                category=p.category,
                barcode=p.barcode,
                recent_movements=counts.get(p.id, 0),
            )
            for p in products
        ]

    async def create_product(self, request: NewProduct) -> CreatedProduct:
        require_uuid(request.user_id, "user ID")

        # Zero is treated like "not given", same as an omitted value.
        min_stock = request.min_stock_level or DEFAULT_MIN_STOCK_LEVEL
        product = await self._products.save(Product(
            name=request.name,
            description=request.description or None,
            price=request.price,
            stock_quantity=request.stock_quantity,
            min_stock_level=min_stock,
            category=request.category or None,
            barcode=request.barcode or None,
            user_id=request.user_id,
        ))
        return CreatedProduct(
            id=product.id,
            name=product.name,
            price=product.price,
            stock_quantity=product.stock_quantity,
            category=product.category,
            min_stock_level=min_stock,
        )

    async def update_stock(self, request: StockUpdateRequest) -> StockUpdateResult:
        """Apply a signed stock change and record it in the ledger.

        Raises:
            InvalidIdentifierError: product_id or user_id is not a UUID.
            NotFoundError: the product does not exist.
            InsufficientStockError: the stock would drop below zero.
        """
        require_uuid(request.product_id, "product ID", _SEARCH_FIRST_HINT)
        require_uuid(request.user_id, "user ID")
        try:
            movement_type = MovementType(request.movement_type)
        except ValueError:
            raise InvalidActionError(
                f"Invalid movement type: {request.movement_type!r}. "
                f"Use one of: {', '.join(m.value for m in MovementType)}."
            ) from None

        logger.info(
            "update_stock product=%s quantity=%+d type=%s user=%s",
            request.product_id, request.quantity, movement_type.value, request.user_id,
        )
        product, movement = await self._inventory.apply_stock_change(
            product_id=request.product_id,
            quantity=request.quantity,
            movement_type=movement_type,
            notes=request.notes or None,
            user_id=request.user_id,
        )
        return StockUpdateResult(
            product=StockChange(
                id=product.id,
                name=product.name,
                previous_stock=movement.previous_stock,
                new_stock=movement.new_stock,
                quantity_changed=movement.quantity_change,
                min_stock_level=product.threshold,
            ),
            movement=MovementRef(
                id=movement.id,
                type=movement.movement_type.value,
                created_at=movement.created_at,
            ),
        )
