"""
agent.executor - Agent execution engine.

Runs one conversational turn: records the user message, builds the prompt
from session memory, lets the chat model pick tools until it produces a
final answer, and records that answer. No component construction and no
business logic here; all dependencies are injected by factory.py.

Turn states, logged as they happen:

    RECEIVED -> MEMORY_READ -> PROMPT_BUILT -> REASONING
             -> (TOOL_DISPATCH -> REASONING)* -> RESPONDED

RESPONDED is reached exactly once per turn, also when the turn fails: the
failure becomes the final answer and the caller gets succeeded=False.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from enum import Enum
from typing import Any, Optional

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import (
    AIMessage,
    BaseMessage,
    HumanMessage,
    SystemMessage,
    ToolMessage,
)

from application.context import SessionContext
from application.dto import TurnResult
from agent.memory import SessionMemoryStore
from agent.prompt import build_system_prompt, tag_user_message
from agent.tools.base import is_null_like
from agent.tools.registry import ToolRegistry
from domain.exceptions import (
    USER_CORRECTABLE,
    DomainError,
    RepositoryError,
    UnauthorizedError,
    UpstreamFailureError,
)

logger = logging.getLogger(__name__)

_GENERIC_FAILURE = (
    "I'm sorry, I ran into a problem while processing your request. "
    "Please try again, or rephrase your question."
)
_TIMEOUT_FAILURE = (
    "I'm sorry, that took too long to answer. Please try again in a moment."
)


class TurnState(str, Enum):
    RECEIVED = "RECEIVED"
    MEMORY_READ = "MEMORY_READ"
    PROMPT_BUILT = "PROMPT_BUILT"
    REASONING = "REASONING"
    TOOL_DISPATCH = "TOOL_DISPATCH"
    RESPONDED = "RESPONDED"


class AgentExecutor:
    """Runs the LLM + tool selection loop.

    Constructed by factory.py with all dependencies injected. Holds no
    per-session state itself; that lives in the SessionMemoryStore.
    """

    def __init__(
        self,
        llm: BaseChatModel,
        tools: ToolRegistry,
        memory: SessionMemoryStore,
        max_iterations: int = 5,
        timeout_seconds: Optional[float] = None,
    ):
        self._llm = llm
        self._tools = tools
        self._memory = memory
        self._max_iterations = max_iterations
        self._timeout_seconds = timeout_seconds

    async def submit_message(
        self,
        ctx: SessionContext,
        text: str,
        timeout: Optional[float] = None,
    ) -> TurnResult:
        """Handle one turn and return its final answer.

        Args:
            ctx:     Session context; user_id must come from authentication.
            text:    The user's message.
            timeout: Deadline in seconds for the whole turn. Defaults to the
                     executor's configured timeout; 0 or None there means no
                     deadline.

        Returns:
            TurnResult. Errors during the turn are reported through it,
            never raised, except a missing identity.

        Raises:
            UnauthorizedError: ctx carries no user id.
        """
        if not ctx.user_id:
            raise UnauthorizedError("A signed-in user is required to chat with the assistant.")

        ctx.new_request()
        session_id = ctx.session_id
        self._enter(ctx, TurnState.RECEIVED)
        logger.info(
            "Agent processing (user=%s, session=%s): %s",
            ctx.user_id, session_id, text[:80],
        )
        self._memory.append_turn(session_id, "user", text)
        self._memory.update_context(session_id, user_id=ctx.user_id)

        deadline = timeout if timeout is not None else self._timeout_seconds
        try:
            if deadline:
                answer = await asyncio.wait_for(self._reason(ctx, text), timeout=deadline)
            else:
                answer = await self._reason(ctx, text)
            result = TurnResult(text=answer)
        except asyncio.TimeoutError:
            logger.warning("Turn for session %s exceeded its %ss deadline", session_id, deadline)
            result = TurnResult(
                text=_TIMEOUT_FAILURE,
                succeeded=False,
                error_detail=f"Deadline of {deadline}s exceeded",
                retryable=True,
            )
        except USER_CORRECTABLE as exc:
            logger.info("Turn for session %s ended with %s: %s", session_id, type(exc).__name__, exc)
            result = TurnResult(
                text=f"I couldn't complete that request. {exc}",
                succeeded=False,
                error_detail=str(exc),
            )
        except (UpstreamFailureError, RepositoryError) as exc:
            logger.exception("Upstream failure for session %s", session_id)
            result = TurnResult(
                text=_GENERIC_FAILURE,
                succeeded=False,
                error_detail=str(exc),
                retryable=True,
            )
        except Exception as exc:
            logger.exception(
                "Agent execution failed for user %s, returning friendly error", ctx.user_id,
            )
            result = TurnResult(
                text=_GENERIC_FAILURE,
                succeeded=False,
                error_detail=f"{type(exc).__name__}: {exc}",
            )

        self._memory.append_turn(session_id, "assistant", result.text)
        self._enter(ctx, TurnState.RESPONDED)
        logger.debug("Agent response: %s", result.text[:100])
        return result

    async def _reason(self, ctx: SessionContext, text: str) -> str:
        """Drive the chat model until it answers without calling a tool."""
        self._enter(ctx, TurnState.MEMORY_READ)
        context = self._memory.render_context(ctx.session_id)

        self._enter(ctx, TurnState.PROMPT_BUILT)
        messages: list[BaseMessage] = [
            SystemMessage(content=build_system_prompt(self._tools, context)),
            HumanMessage(content=tag_user_message(ctx.user_id, text)),
        ]
        model = self._llm.bind_tools(self._tools.to_langchain_tools(ctx))

        for iteration in range(1, self._max_iterations + 1):
            self._enter(ctx, TurnState.REASONING)
            try:
                reply = await model.ainvoke(messages)
            except DomainError:
                raise
            except Exception as exc:
                raise UpstreamFailureError(f"Reasoning capability failed: {exc}") from exc
            messages.append(reply)

            tool_calls = getattr(reply, "tool_calls", None) or []
            if not tool_calls:
                content = _content_text(reply)
                raw_call = _parse_raw_tool_call(content, self._tools.names())
                if raw_call is None:
                    logger.info("Agent finished after %d reasoning round(s)", iteration)
                    return content
                # Some local models print the call as JSON instead of using
                # native function calling.
                name, args = raw_call
                logger.warning("Raw tool-call fallback triggered for tool '%s'", name)
                self._enter(ctx, TurnState.TOOL_DISPATCH)
                output = await self._dispatch(ctx, name, args)
                messages.append(HumanMessage(content=f"Result of {name}: {output}"))
                continue

            for call in tool_calls:
                self._enter(ctx, TurnState.TOOL_DISPATCH)
                output = await self._dispatch(ctx, call["name"], call.get("args") or {})
                messages.append(ToolMessage(
                    content=output,
                    tool_call_id=call.get("id") or call["name"],
                    name=call["name"],
                ))

        raise UpstreamFailureError(
            f"No final answer after {self._max_iterations} reasoning rounds"
        )

    async def _dispatch(self, ctx: SessionContext, name: str, args: dict[str, Any]) -> str:
        args = self._fill_arguments(ctx, name, dict(args))
        return await self._tools.invoke(name, ctx, **args)

    def _fill_arguments(
        self, ctx: SessionContext, name: str, args: dict[str, Any],
    ) -> dict[str, Any]:
        """Fill identifiers the model left out from what the session knows.

        user_id is always the authenticated user. A product_id that is
        missing or a null spelling ("null", "none", "") is taken from the
        session's current product.
        """
        fields = self._tools.get(name).get_schema().model_fields

        if "user_id" in fields:
            given = args.get("user_id")
            if not is_null_like(given) and given != ctx.user_id:
                logger.warning(
                    "Tool %s called with user_id %r, using authenticated user %s",
                    name, given, ctx.user_id,
                )
            args["user_id"] = ctx.user_id

        if "product_id" in fields and is_null_like(args.get("product_id")):
            current = self._memory.get_or_create(ctx.session_id).context.current_product
            if current is not None:
                logger.info(
                    "Tool %s called without product_id, using current product %s (%s)",
                    name, current.id, current.name,
                )
                args["product_id"] = current.id

        return args

    @staticmethod
    def _enter(ctx: SessionContext, state: TurnState) -> None:
        logger.debug("Turn %s (session=%s) -> %s", ctx.request_id, ctx.session_id, state.value)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _content_text(message: AIMessage) -> str:
    content = message.content
    if isinstance(content, str):
        return content
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


def _parse_raw_tool_call(
    output: str, tool_names: list[str],
) -> Optional[tuple[str, dict[str, Any]]]:
    """Detect a tool call that the model emitted as plain JSON text.

    Accepts {"name": ..., "parameters": {...}} (Ollama style) and
    {"name": ..., "arguments": {...}} (OpenAI style), optionally fenced
    in a ```json block. Returns None when the text is an ordinary answer.
    """
    raw = output.strip()
    raw = re.sub(r"^```(?:json)?\s*", "", raw)
    raw = re.sub(r"\s*```$", "", raw).strip()
    if not raw.startswith("{"):
        return None
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return None
    if not isinstance(parsed, dict) or parsed.get("name") not in tool_names:
        return None

    args = parsed.get("parameters") or parsed.get("arguments") or {}
    if isinstance(args, str):
        try:
            args = json.loads(args)
        except json.JSONDecodeError:
            args = {}
    if not isinstance(args, dict):
        return None
    return parsed["name"], args
