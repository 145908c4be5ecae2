"""
agent.tools.get_products - Product search tool.

A search that narrows down to exactly one product makes that product the
session's current product, so follow-up requests like "add 10 to it"
can be resolved without another search.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from application.context import SessionContext
from application.dto import ProductQuery
from application.services.products import ProductService
from agent.tools.base import BaseTool, ToolInput, ToolResult, to_json
from domain.entities import DEFAULT_MIN_STOCK_LEVEL
from domain.models import ProductRef


class GetProductsInput(ToolInput):
    """Input schema for the get_products tool."""
    category: Optional[str] = Field(
        ..., description="Product category to filter by, or null for all categories.",
    )
    low_stock: Optional[bool] = Field(
        ..., description="true to show only products at or below their minimum stock level, else null.",
    )
    search: Optional[str] = Field(
        ..., description="Search term matched against product name, description or barcode, or null.",
    )


class GetProductsTool(BaseTool):
    """Search and list products."""

    name = "get_products"
    description = (
        "Search and retrieve products from the inventory. Can filter by category, "
        "search term, or show only low stock items. Use this to look up a product's "
        "ID before any stock operation."
    )

    def __init__(self, product_service: ProductService):
        self._service = product_service

    def get_schema(self) -> type[ToolInput]:
        return GetProductsInput

    async def execute(
        self,
        ctx: SessionContext,
        category: Optional[str] = None,
        low_stock: Optional[bool] = None,
        search: Optional[str] = None,
        **kwargs,
    ) -> ToolResult:
        products = await self._service.list_products(ProductQuery(
            category=category or None,
            search=search or None,
            low_stock=bool(low_stock),
        ))

        context = None
        if products:
            context = {"last_action": f"Retrieved {len(products)} products"}
            if search and len(products) == 1:
                p = products[0]
                context["current_product"] = ProductRef(
                    id=p.id,
                    name=p.name,
                    stock_quantity=p.stock_quantity,
                    min_stock_level=p.min_stock_level or DEFAULT_MIN_STOCK_LEVEL,
                )

        return ToolResult(
            output=to_json(products),
            context=context,
        )
