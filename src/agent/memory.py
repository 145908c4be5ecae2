"""
agent.memory - Per-session conversation memory.

One SessionMemoryStore is owned by the factory and injected into the tool
registry and the executor; there is no module-level session map.

Each session keeps the last few turns and a small structured context
record (current product, current customer, last action, user id). Idle
sessions expire after a TTL and the map is bounded in size. Concurrent
turns for the same session are not locked: last write wins.
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from dataclasses import dataclass, field, replace
from typing import Callable

from domain.models import ContextRecord, Turn
from domain.time_utils import utcnow_iso

logger = logging.getLogger(__name__)

DEFAULT_MAX_TURNS = 10
RENDERED_TURNS = 5


@dataclass
class Session:
    """Conversation state for one session key."""
    session_id: str
    turns: list[Turn] = field(default_factory=list)
    context: ContextRecord = field(default_factory=ContextRecord)
    last_active: float = 0.0


class SessionMemoryStore:
    """Process-local, bounded store of Sessions keyed by session id."""

    def __init__(
        self,
        max_turns: int = DEFAULT_MAX_TURNS,
        ttl_seconds: float = 3600.0,
        max_sessions: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._max_turns = max_turns
        self._ttl_seconds = ttl_seconds
        self._max_sessions = max_sessions
        self._clock = clock
        self._sessions: OrderedDict[str, Session] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def get_or_create(self, session_id: str) -> Session:
        """Return the session, creating an empty one if absent or expired."""
        self.evict_expired()
        now = self._clock()
        session = self._sessions.get(session_id)
        if session is None:
            while len(self._sessions) >= self._max_sessions:
                evicted, _ = self._sessions.popitem(last=False)
                logger.info("Session store full, evicted least recently used session %s", evicted)
            session = Session(session_id=session_id)
            self._sessions[session_id] = session
            logger.debug("Created session %s", session_id)
        else:
            self._sessions.move_to_end(session_id)
        session.last_active = now
        return session

    def append_turn(self, session_id: str, role: str, content: str) -> None:
        """Append a turn, then keep only the newest max_turns (oldest go first)."""
        if role not in ("user", "assistant"):
            raise ValueError(f"Unknown role: {role!r}")
        session = self.get_or_create(session_id)
        session.turns.append(Turn(role=role, content=content, timestamp=utcnow_iso()))
        if len(session.turns) > self._max_turns:
            session.turns = session.turns[-self._max_turns:]

    def update_context(self, session_id: str, **fields) -> ContextRecord:
        """Overwrite only the supplied context fields and return the result."""
        session = self.get_or_create(session_id)
        session.context = replace(session.context, **fields)
        return session.context

    def render_context(self, session_id: str) -> str:
        return render_session(self.get_or_create(session_id))

    def evict_expired(self) -> int:
        """Drop sessions idle for longer than the TTL. Returns how many."""
        cutoff = self._clock() - self._ttl_seconds
        expired = [sid for sid, s in self._sessions.items() if s.last_active < cutoff]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.info("Evicted %d idle session(s)", len(expired))
        return len(expired)

    def clear(self, session_id: str) -> None:
        """Forget a session entirely."""
        self._sessions.pop(session_id, None)


def render_session(session: Session, recent_turns: int = RENDERED_TURNS) -> str:
    """Render recent turns and the non-empty context fields as prompt text.

    Pure and deterministic: the same Session always renders the same way.
    Returns an empty string for a brand-new session.
    """
    lines: list[str] = []

    if session.turns:
        lines.append("")
        lines.append("## Recent Conversation:")
        for turn in session.turns[-recent_turns:]:
            lines.append(f"{turn.role.upper()}: {turn.content}")

    ctx = session.context
    if not ctx.is_empty():
        lines.append("")
        lines.append("## Current Context:")
        if ctx.current_product:
            p = ctx.current_product
            lines.append(f'- Currently discussing product: "{p.name}" (ID: {p.id})')
            lines.append(f"  - Current stock: {p.stock_quantity}")
            lines.append(f"  - Minimum level: {p.min_stock_level}")
        if ctx.current_customer:
            c = ctx.current_customer
            lines.append(f'- Currently discussing customer: "{c.name}" (ID: {c.id})')
        if ctx.last_action:
            lines.append(f"- Last action performed: {ctx.last_action}")
        if ctx.user_id:
            lines.append(f"- User ID: {ctx.user_id}")

    return "\n".join(lines)
