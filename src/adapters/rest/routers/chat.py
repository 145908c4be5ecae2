"""Conversational agent endpoint."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from factory import ServiceFactory
from adapters.rest.dependencies import (
    CurrentUser, build_session_ctx, get_current_user, get_factory,
)
from adapters.rest.schemas import CapabilitiesOut, ChatBody, ChatOut

router = APIRouter(prefix="/agent", tags=["agent"])
logger = logging.getLogger(__name__)

CAPABILITIES = [
    "General conversation and question answering",
    "Product management and inventory control",
    "Stock level tracking and updates",
    "Customer management",
    "Sales analysis and reporting",
    "Inventory reporting and alerts",
    "Low stock monitoring",
    "Conversation memory and context awareness",
]


@router.post("/chat", response_model=ChatOut)
async def chat(
    body: ChatBody,
    user: CurrentUser = Depends(get_current_user),
    factory: ServiceFactory = Depends(get_factory),
):
    """Run one conversational turn for the signed-in user.

    Failures inside the turn still return 200: the agent's answer explains
    what went wrong and ``success`` is false.
    """
    message = (body.message or "").strip()
    if not message:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Message is required")

    ctx = build_session_ctx(user)
    logger.info("Chat user=%s | %s", user.user_id, message[:200])
    result = await factory.create_agent().submit_message(ctx, message)

    return ChatOut(
        success=result.succeeded,
        response=result.text,
        error=None if result.succeeded else "Failed to process request",
        details=result.error_detail,
        retryable=result.retryable,
        user=user.name,
        session_id=ctx.session_id,
    )


@router.get("/chat", response_model=CapabilitiesOut)
async def capabilities():
    return CapabilitiesOut(
        message="AI Agent Chat API is running",
        capabilities=CAPABILITIES,
    )
