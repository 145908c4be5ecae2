"""
agent.tools.update_stock - Stock change tool.

Every call writes one inventory movement. The product must be addressed by
its UUID; when the model leaves product_id empty the executor fills in the
session's current product before the call reaches this tool.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from application.context import SessionContext
from application.dto import StockUpdateRequest
from application.services.products import ProductService
from agent.tools.base import BaseTool, ToolInput, ToolResult, to_json
from domain.entities import MovementType
from domain.models import ProductRef


class UpdateStockInput(ToolInput):
    """Input schema for the update_stock tool."""
    product_id: str = Field(
        ..., description="UUID of the product. Never a product name; search first if unknown.",
    )
    quantity: int = Field(
        ..., description="Quantity change: positive to increase stock, negative to decrease.",
    )
    movement_type: MovementType = Field(..., description="Type of stock movement.")
    notes: Optional[str] = Field(..., description="Notes about the stock movement, or null.")
    user_id: str = Field(..., description="UUID of the user performing the update (from [USER_ID: ...]).")


class UpdateStockTool(BaseTool):
    """Change a product's stock level."""

    name = "update_stock"
    description = (
        "Update stock levels for a product. This creates an inventory movement record. "
        "Requires the product's UUID from a previous search or the current context."
    )

    def __init__(self, product_service: ProductService):
        self._service = product_service

    def get_schema(self) -> type[ToolInput]:
        return UpdateStockInput

    async def execute(
        self,
        ctx: SessionContext,
        product_id: str = "",
        quantity: int = 0,
        movement_type: MovementType = MovementType.ADJUSTMENT,
        notes: Optional[str] = None,
        user_id: str = "",
        **kwargs,
    ) -> ToolResult:
        movement_type = MovementType(movement_type)
        result = await self._service.update_stock(StockUpdateRequest(
            product_id=product_id,
            quantity=quantity,
            movement_type=movement_type,
            notes=notes,
            user_id=user_id,
        ))
        product = result.product
        return ToolResult(
            output=to_json(result),
            context={
                "current_product": ProductRef(
                    id=product.id,
                    name=product.name,
                    stock_quantity=product.new_stock,
                    min_stock_level=product.min_stock_level,
                ),
                "last_action": (
                    f'Updated stock for "{product.name}" by {quantity} ({movement_type.value})'
                ),
                "user_id": user_id,
            },
        )
