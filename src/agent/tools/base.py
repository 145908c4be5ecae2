"""
agent.tools.base - Base tool interface, input schema base and result container.

All agent tools inherit from BaseTool and return ToolResult.
"""

from __future__ import annotations

import dataclasses
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, get_args

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from application.context import SessionContext

_NULL_STRINGS = {"", "null", "none", "nil", "undefined"}


class ToolInput(BaseModel):
    """Base for tool argument schemas.

    Every declared parameter is required on the wire; optional ones are
    nullable and the model is expected to send null for them. On the way
    in, an absent optional parameter and the usual null spellings are all
    read as None.
    """
    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="before")
    @classmethod
    def fill_absent_nullable(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for name, info in cls.model_fields.items():
            if name not in data and type(None) in get_args(info.annotation):
                data[name] = None
        return data

    @field_validator("*", mode="before")
    @classmethod
    def null_strings_to_none(cls, v: object) -> object:
        return None if is_null_like(v) else v


def is_null_like(value: object) -> bool:
    """True for None and for the strings models send when they mean null."""
    if value is None:
        return True
    return isinstance(value, str) and value.strip().lower() in _NULL_STRINGS


@dataclass
class ToolResult:
    """Result returned by a tool execution.

    output:    JSON text shown to the reasoning model.
    context:   Session context fields to overwrite after the call, e.g.
               {"last_action": "...", "current_product": ProductRef(...)}.
    """
    output: str
    context: Optional[dict[str, Any]] = None


class BaseTool(ABC):
    """Abstract base for all agent tools."""

    name: str
    description: str

    @abstractmethod
    async def execute(self, ctx: SessionContext, **kwargs) -> ToolResult:
        """Execute the tool with the given session context and arguments."""
        ...

    @abstractmethod
    def get_schema(self) -> type[ToolInput]:
        """Return the Pydantic schema for this tool's input arguments."""
        ...


def to_json(data: Any) -> str:
    """Serialize a tool result; Decimals become strings here and nowhere earlier."""
    return json.dumps(_to_plain(data), default=_json_default, ensure_ascii=False)


def _to_plain(data: Any) -> Any:
    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        return dataclasses.asdict(data)
    if isinstance(data, (list, tuple)):
        return [_to_plain(item) for item in data]
    if isinstance(data, dict):
        return {key: _to_plain(value) for key, value in data.items()}
    return data


def _json_default(obj: Any) -> Any:
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, datetime):
        return obj.isoformat()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")
