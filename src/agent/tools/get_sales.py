"""
agent.tools.get_sales - Sales history tool.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from application.context import SessionContext
from application.dto import SalesQuery
from application.services.sales import SalesService
from agent.tools.base import BaseTool, ToolInput, ToolResult, to_json


class GetSalesInput(ToolInput):
    """Input schema for the get_sales tool."""
    customer_id: Optional[str] = Field(..., description="Customer ID to filter by, or null.")
    date_from: Optional[str] = Field(..., description="Start date (inclusive) as YYYY-MM-DD, or null.")
    date_to: Optional[str] = Field(..., description="End date (inclusive) as YYYY-MM-DD, or null.")
    limit: Optional[int] = Field(..., description="Maximum number of sales to return, or null for 20.")


class GetSalesTool(BaseTool):
    """List sales with their line items."""

    name = "get_sales"
    description = "Retrieve sales history with optional filtering by customer or date range."

    def __init__(self, sales_service: SalesService):
        self._service = sales_service

    def get_schema(self) -> type[ToolInput]:
        return GetSalesInput

    async def execute(
        self,
        ctx: SessionContext,
        customer_id: Optional[str] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        limit: Optional[int] = None,
        **kwargs,
    ) -> ToolResult:
        sales = await self._service.list_sales(SalesQuery(
            customer_id=customer_id,
            date_from=date_from,
            date_to=date_to,
            limit=limit or 20,
        ))
        return ToolResult(
            output=to_json(sales),
            context={"last_action": f"Retrieved {len(sales)} sales records"},
        )
