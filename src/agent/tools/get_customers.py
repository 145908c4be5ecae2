"""
agent.tools.get_customers - Customer search tool.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from application.context import SessionContext
from application.dto import CustomerQuery
from application.services.customers import CustomerService
from agent.tools.base import BaseTool, ToolInput, ToolResult, to_json
from domain.models import CustomerRef


class GetCustomersInput(ToolInput):
    """Input schema for the get_customers tool."""
    search: Optional[str] = Field(
        ..., description="Search term for customer name, email, or phone, or null.",
    )
    limit: Optional[int] = Field(
        ..., description="Maximum number of customers to return, or null for 10.",
    )


class GetCustomersTool(BaseTool):
    """Search customers."""

    name = "get_customers"
    description = "Search and retrieve customer information."

    def __init__(self, customer_service: CustomerService):
        self._service = customer_service

    def get_schema(self) -> type[ToolInput]:
        return GetCustomersInput

    async def execute(
        self,
        ctx: SessionContext,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        **kwargs,
    ) -> ToolResult:
        customers = await self._service.list_customers(
            CustomerQuery(search=search or None, limit=limit or 10),
        )

        context = None
        if customers:
            context = {"last_action": f"Retrieved {len(customers)} customers"}
            if search and len(customers) == 1:
                context["current_customer"] = CustomerRef(
                    id=customers[0].id, name=customers[0].name,
                )

        return ToolResult(output=to_json(customers), context=context)
