"""
application.services.reports - Inventory reports.

Three report kinds, selected by ReportType:
    low_stock         products at or below their minimum level
    movement_summary  ledger activity per movement type over N days
    category_summary  product count, stock and average price per category
"""

from __future__ import annotations

import logging
from typing import Union

from domain.exceptions import InvalidReportTypeError
from domain.models import (
    CategorySummaryReport,
    LowStockEntry,
    LowStockReport,
    MovementStats,
    MovementSummaryReport,
    ReportType,
)
from domain.ports import InventoryRepository, ProductRepository
from domain.time_utils import days_ago_iso
from application.dto import ReportRequest

logger = logging.getLogger(__name__)

DEFAULT_REPORT_DAYS = 30

InventoryReport = Union[LowStockReport, MovementSummaryReport, CategorySummaryReport]


class ReportService:
    """Builds inventory reports from the product table and the ledger."""

    def __init__(
        self,
        product_repo: ProductRepository,
        inventory_repo: InventoryRepository,
    ):
        self._products = product_repo
        self._inventory = inventory_repo

    async def inventory_report(self, request: ReportRequest) -> InventoryReport:
        try:
            report_type = ReportType(request.type)
        except ValueError:
            raise InvalidReportTypeError(
                f"Invalid report type: {request.type!r}. "
                f"Use one of: {', '.join(t.value for t in ReportType)}."
            ) from None

        logger.info("Generating %s report", report_type.value)
        if report_type is ReportType.LOW_STOCK:
            return await self._low_stock()
        if report_type is ReportType.MOVEMENT_SUMMARY:
            return await self._movement_summary(request.days or DEFAULT_REPORT_DAYS)
        return CategorySummaryReport(categories=await self._products.category_summary())

    async def _low_stock(self) -> LowStockReport:
        products = await self._products.list_low_stock()
        return LowStockReport(products=[
            LowStockEntry(
                id=p.id,
                name=p.name,
                stock_quantity=p.stock_quantity,
                min_stock_level=p.min_stock_level,
                category=p.category,
            )
            for p in products
        ])

    async def _movement_summary(self, days: int) -> MovementSummaryReport:
        movements = await self._inventory.list_since(days_ago_iso(days))
        counts: dict[str, int] = {}
        quantities: dict[str, int] = {}
        for m in movements:
            key = m.movement_type.value
            counts[key] = counts.get(key, 0) + 1
            quantities[key] = quantities.get(key, 0) + abs(m.quantity_change)
        return MovementSummaryReport(
            period_days=days,
            total_movements=len(movements),
            summary={
                key: MovementStats(count=counts[key], total_quantity=quantities[key])
                for key in counts
            },
        )
