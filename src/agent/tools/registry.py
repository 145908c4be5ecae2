"""
agent.tools.registry - Tool registration, discovery, and invocation.

Central registry that manages all available tools, validates their
arguments, writes their effects into session memory and provides
LangChain-compatible tool wrappers.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from langchain_core.tools import StructuredTool
from pydantic import ValidationError

from application.context import SessionContext
from agent.memory import SessionMemoryStore
from agent.tools.base import BaseTool
from domain.exceptions import InvalidActionError

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Manages tool registration and invocation."""

    def __init__(self, memory: Optional[SessionMemoryStore] = None):
        self._tools: dict[str, BaseTool] = {}
        self._memory = memory

    def register(self, tool: BaseTool) -> None:
        """Register a tool by its name."""
        self._tools[tool.name] = tool
        logger.debug("Registered tool: %s", tool.name)

    def get(self, name: str) -> BaseTool:
        """Get a tool by name."""
        if name not in self._tools:
            raise InvalidActionError(f"Tool '{name}' not registered")
        return self._tools[name]

    def all(self) -> list[BaseTool]:
        """Return all registered tools."""
        return list(self._tools.values())

    def names(self) -> list[str]:
        """Return all registered tool names."""
        return list(self._tools.keys())

    async def invoke(self, tool_name: str, ctx: SessionContext, /, **kwargs: Any) -> str:
        """Validate arguments, run a tool and record its effect.

        tool_name and ctx are positional-only so tool arguments such as
        ``name`` pass through **kwargs untouched.

        Returns the string output (what the LLM sees). Domain errors raised
        by the tool are not caught here; argument errors become
        InvalidActionError.
        """
        tool = self.get(tool_name)
        try:
            args = tool.get_schema().model_validate(kwargs)
        except ValidationError as exc:
            raise InvalidActionError(
                f"Invalid arguments for tool '{tool_name}': {_summarize(exc)}"
            ) from exc

        logger.info("Invoking tool %s (request=%s)", tool_name, ctx.request_id)
        result = await tool.execute(ctx, **args.model_dump())

        if result.context and self._memory is not None:
            self._memory.update_context(ctx.session_id, **result.context)
            logger.debug("Updated context for session %s: %s", ctx.session_id, sorted(result.context))

        return result.output

    def to_langchain_tools(self, ctx: SessionContext) -> list[StructuredTool]:
        """Convert all registered tools to LangChain StructuredTools.

        The executor only hands these to bind_tools() to advertise names and
        argument schemas; it dispatches tool calls itself through invoke().
        The wrappers still route back through invoke() with the bound
        context, so a caller that runs them directly gets the same
        validation and memory updates.
        """
        lc_tools = []
        for tool in self._tools.values():

            def _make_func(tool_name: str, context: SessionContext):
                async def func(**kwargs: Any) -> str:
                    return await self.invoke(tool_name, context, **kwargs)
                return func

            lc_tools.append(StructuredTool.from_function(
                coroutine=_make_func(tool.name, ctx),
                name=tool.name,
                description=tool.description,
                args_schema=tool.get_schema(),
            ))
        return lc_tools


def _summarize(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "input"
        parts.append(f"{loc}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)
