"""Pydantic models for REST API request/response validation."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel


# --- Chat ---

class ChatBody(BaseModel):
    message: Optional[str] = None


class ChatOut(BaseModel):
    success: bool
    response: str
    error: Optional[str] = None
    details: Optional[str] = None
    retryable: bool = False
    user: Optional[str] = None
    session_id: str


class CapabilitiesOut(BaseModel):
    message: str
    capabilities: list[str]


# --- Diagnostics ---

class DiagnosticsBody(BaseModel):
    action: str
    data: dict[str, Any] = {}
