"""Direct tool diagnostics, bypassing the language model."""

from typing import Optional

from fastapi import APIRouter, Depends, Response
from pydantic import ValidationError

from factory import ServiceFactory
from adapters.rest.dependencies import (
    CurrentUser, domain_http_error, get_current_user, get_factory,
)
from adapters.rest.schemas import DiagnosticsBody
from agent.tools.base import to_json
from agent.tools.create_product import CreateProductInput
from application.dto import CustomerQuery, NewProduct, ProductQuery, ReportRequest, SalesQuery
from domain.exceptions import DomainError, InvalidActionError
from domain.models import ReportType

router = APIRouter(prefix="/agent", tags=["diagnostics"])

AVAILABLE_ACTIONS = [
    "products - Get all products",
    "customers - Get customers",
    "sales - Get recent sales",
    "low-stock - Get low stock report",
    "categories - Get category summary",
]


def _json(payload: dict) -> Response:
    # Decimals stay exact strings, same as the tool output the agent sees.
    return Response(content=to_json(payload), media_type="application/json")


@router.get("/test")
async def run_read_action(
    action: Optional[str] = None,
    user: CurrentUser = Depends(get_current_user),
    factory: ServiceFactory = Depends(get_factory),
):
    try:
        if action == "products":
            data = await factory.create_product_service().list_products(ProductQuery())
            return _json({"success": True, "data": data, "count": len(data)})

        if action == "customers":
            data = await factory.create_customer_service().list_customers(CustomerQuery(limit=5))
            return _json({"success": True, "data": data, "count": len(data)})

        if action == "sales":
            data = await factory.create_sales_service().list_sales(SalesQuery(limit=5))
            return _json({"success": True, "data": data, "count": len(data)})

        if action in ("low-stock", "categories"):
            report_type = (
                ReportType.LOW_STOCK if action == "low-stock" else ReportType.CATEGORY_SUMMARY
            )
            report = await factory.create_report_service().inventory_report(
                ReportRequest(type=report_type.value),
            )
            return _json({"success": True, "data": report})
    except DomainError as exc:
        raise domain_http_error(exc)

    return _json({
        "message": "Agent Tools Test API",
        "available_actions": AVAILABLE_ACTIONS,
        "usage": "Add ?action=<action_name> to test specific tools",
    })


@router.post("/test")
async def run_write_action(
    body: DiagnosticsBody,
    user: CurrentUser = Depends(get_current_user),
    factory: ServiceFactory = Depends(get_factory),
):
    try:
        if body.action != "create-product":
            raise InvalidActionError(f"Invalid action: {body.action!r}")

        # Same validation the agent's create_product tool applies.
        try:
            args = CreateProductInput.model_validate({**body.data, "user_id": user.user_id})
        except ValidationError as exc:
            raise InvalidActionError(f"Invalid product data: {exc.error_count()} error(s)") from exc

        created = await factory.create_product_service().create_product(
            NewProduct(**args.model_dump()),
        )
    except DomainError as exc:
        raise domain_http_error(exc)

    return _json({
        "success": True,
        "message": "Product created successfully",
        "data": created,
    })
