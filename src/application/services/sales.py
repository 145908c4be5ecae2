"""
application.services.sales - Read-only sales history.
"""

from __future__ import annotations

import logging

from domain.models import SaleLine, SaleSummary
from domain.ports import SalesRepository
from domain.time_utils import parse_iso_datetime
from application.dto import SalesQuery

logger = logging.getLogger(__name__)

WALK_IN_CUSTOMER = "Walk-in Customer"


class SalesService:
    """Sales history with line items, newest first."""

    def __init__(self, sales_repo: SalesRepository):
        self._sales = sales_repo

    async def list_sales(self, query: SalesQuery) -> list[SaleSummary]:
        sales = await self._sales.search(
            customer_id=query.customer_id or None,
            date_from=parse_iso_datetime(query.date_from),
            date_to=parse_iso_datetime(query.date_to),
            limit=query.limit or 20,
        )
        items = await self._sales.items_for([s.id for s in sales])

        summaries = []
        for sale in sales:
            lines = [
                SaleLine(
                    product=item.product_name,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    subtotal=item.subtotal,
                )
                for item in items.get(sale.id, [])
            ]
            summaries.append(SaleSummary(
                id=sale.id,
                customer=sale.customer_name or WALK_IN_CUSTOMER,
                total_amount=sale.total_amount,
                payment_method=sale.payment_method,
                items_count=len(lines),
                items=lines,
                created_at=sale.created_at,
            ))
        return summaries
