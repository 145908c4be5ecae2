"""
agent.tools.create_customer - Customer creation tool.
"""

from __future__ import annotations

from typing import Optional

from pydantic import EmailStr, Field

from application.context import SessionContext
from application.dto import NewCustomer
from application.services.customers import CustomerService
from agent.tools.base import BaseTool, ToolInput, ToolResult, to_json
from domain.models import CustomerRef


class CreateCustomerInput(ToolInput):
    """Input schema for the create_customer tool."""
    name: str = Field(..., description="Customer name")
    email: Optional[EmailStr] = Field(..., description="Customer email address, or null.")
    phone: Optional[str] = Field(..., description="Customer phone number, or null.")
    address: Optional[str] = Field(..., description="Customer address, or null.")
    user_id: str = Field(..., description="UUID of the user creating the customer (from [USER_ID: ...]).")


class CreateCustomerTool(BaseTool):
    """Create a customer record."""

    name = "create_customer"
    description = "Create a new customer record."

    def __init__(self, customer_service: CustomerService):
        self._service = customer_service

    def get_schema(self) -> type[ToolInput]:
        return CreateCustomerInput

    async def execute(
        self,
        ctx: SessionContext,
        name: str = "",
        email: Optional[str] = None,
        phone: Optional[str] = None,
        address: Optional[str] = None,
        user_id: str = "",
        **kwargs,
    ) -> ToolResult:
        created = await self._service.create_customer(NewCustomer(
            name=name,
            email=email,
            phone=phone,
            address=address,
            user_id=user_id,
        ))
        return ToolResult(
            output=to_json(created),
            context={
                "current_customer": CustomerRef(id=created.id, name=created.name),
                "last_action": f'Created customer "{created.name}"',
                "user_id": user_id,
            },
        )
