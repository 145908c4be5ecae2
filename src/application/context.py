"""
application.context - Request-scoped session context.

Every function receives its context explicitly. Two concurrent users
get two different SessionContext instances.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import uuid4


@dataclass
class SessionContext:
    """Per-request/session context passed through all layers.

    Attributes:
        user_id:     Authenticated user ID (UUID, provided by the adapter).
        session_id:  Key of the conversation memory. Defaults to user_id,
                     so one user has one conversation.
        request_id:  Unique per request, for tracing/logging.
    """
    user_id: str
    session_id: str = ""
    request_id: str = field(default_factory=lambda: uuid4().hex)

    def __post_init__(self) -> None:
        if not self.session_id:
            self.session_id = self.user_id

    def new_request(self) -> None:
        """Start a new request within the same session."""
        self.request_id = uuid4().hex
