"""
application.services.customers - Customer lookup and creation.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from domain.entities import Customer
from domain.identifiers import require_uuid
from domain.models import CreatedCustomer, CustomerSummary
from domain.ports import CustomerRepository
from application.dto import CustomerQuery, NewCustomer

logger = logging.getLogger(__name__)

RECENT_SALES_PER_CUSTOMER = 3


class CustomerService:
    """Customer operations exposed to the agent."""

    def __init__(self, customer_repo: CustomerRepository):
        self._customers = customer_repo

    async def list_customers(self, query: CustomerQuery) -> list[CustomerSummary]:
        customers = await self._customers.search(
            search=query.search, limit=query.limit or 10,
        )
        totals = await self._customers.recent_sale_totals(
            [c.id for c in customers], per_customer=RECENT_SALES_PER_CUSTOMER,
        )
        summaries = []
        for c in customers:
            recent = totals.get(c.id, [])
            summaries.append(CustomerSummary(
                id=c.id,
                name=c.name,
                email=c.email,
                phone=c.phone,
                address=c.address,
                recent_sales=len(recent),
                total_recent_sales=sum(recent, Decimal("0")),
            ))
        return summaries

    async def create_customer(self, request: NewCustomer) -> CreatedCustomer:
        require_uuid(request.user_id, "user ID")
        customer = await self._customers.save(Customer(
            name=request.name,
            email=request.email or None,
            phone=request.phone or None,
            address=request.address or None,
            user_id=request.user_id,
        ))
        return CreatedCustomer(
            id=customer.id,
            name=customer.name,
            email=customer.email,
            phone=customer.phone,
        )
