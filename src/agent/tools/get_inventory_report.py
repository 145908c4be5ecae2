"""
agent.tools.get_inventory_report - Inventory reporting tool.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from application.context import SessionContext
from application.dto import ReportRequest
from application.services.reports import DEFAULT_REPORT_DAYS, ReportService
from agent.tools.base import BaseTool, ToolInput, ToolResult, to_json
from domain.models import ReportType


class GetInventoryReportInput(ToolInput):
    """Input schema for the get_inventory_report tool."""
    type: ReportType = Field(..., description="Type of report to generate.")
    days: Optional[int] = Field(
        ..., description="Number of days covered by movement_summary, or null for 30.",
    )


class GetInventoryReportTool(BaseTool):
    """Generate an inventory report."""

    name = "get_inventory_report"
    description = (
        "Generate inventory reports: low stock alerts (low_stock), stock movement "
        "summaries (movement_summary), and category analysis (category_summary)."
    )

    def __init__(self, report_service: ReportService):
        self._service = report_service

    def get_schema(self) -> type[ToolInput]:
        return GetInventoryReportInput

    async def execute(
        self,
        ctx: SessionContext,
        type: ReportType = ReportType.LOW_STOCK,
        days: Optional[int] = None,
        **kwargs,
    ) -> ToolResult:
        report_type = ReportType(type)
        report = await self._service.inventory_report(
            ReportRequest(type=report_type.value, days=days or DEFAULT_REPORT_DAYS),
        )
        return ToolResult(
            output=to_json(report),
            context={"last_action": f"Generated {report_type.value} report"},
        )
