"""
agent.tools.create_product - Product creation tool.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import Field

from application.context import SessionContext
from application.dto import NewProduct
from application.services.products import ProductService
from agent.tools.base import BaseTool, ToolInput, ToolResult, to_json
from domain.models import ProductRef


class CreateProductInput(ToolInput):
    """Input schema for the create_product tool."""
    name: str = Field(..., description="Product name")
    description: Optional[str] = Field(..., description="Product description, or null.")
    price: Decimal = Field(..., description="Unit price, e.g. 19.99")
    stock_quantity: int = Field(..., description="Initial stock quantity")
    min_stock_level: Optional[int] = Field(
        ..., description="Minimum stock level for low-stock alerts, or null for the default of 5.",
    )
    category: Optional[str] = Field(..., description="Product category, or null.")
    barcode: Optional[str] = Field(..., description="Product barcode, or null.")
    user_id: str = Field(..., description="UUID of the user creating the product (from [USER_ID: ...]).")


class CreateProductTool(BaseTool):
    """Create a product."""

    name = "create_product"
    description = "Create a new product in the inventory system."

    def __init__(self, product_service: ProductService):
        self._service = product_service

    def get_schema(self) -> type[ToolInput]:
        return CreateProductInput

    async def execute(
        self,
        ctx: SessionContext,
        name: str = "",
        description: Optional[str] = None,
        price: Decimal = Decimal("0"),
        stock_quantity: int = 0,
        min_stock_level: Optional[int] = None,
        category: Optional[str] = None,
        barcode: Optional[str] = None,
        user_id: str = "",
        **kwargs,
    ) -> ToolResult:
        created = await self._service.create_product(NewProduct(
            name=name,
            description=description,
            price=Decimal(price),
            stock_quantity=stock_quantity,
            min_stock_level=min_stock_level,
            category=category,
            barcode=barcode,
            user_id=user_id,
        ))
        return ToolResult(
            output=to_json(created),
            context={
                "current_product": ProductRef(
                    id=created.id,
                    name=created.name,
                    stock_quantity=created.stock_quantity,
                    min_stock_level=created.min_stock_level,
                ),
                "last_action": f'Created product "{created.name}"',
                "user_id": user_id,
            },
        )
