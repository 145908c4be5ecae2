"""
domain.identifiers - UUID format checks for identifiers passed in by the agent.

The reasoning capability sometimes passes product names where an ID is
expected, so every operation that takes an ID validates it up front.
"""

from __future__ import annotations

import re

from domain.exceptions import InvalidIdentifierError

_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def is_valid_uuid(value: object) -> bool:
    return isinstance(value, str) and _UUID_RE.match(value) is not None


def require_uuid(value: object, label: str, hint: str = "") -> str:
    """Return *value* unchanged or raise InvalidIdentifierError."""
    if not is_valid_uuid(value):
        message = f'Invalid {label} format: "{value}". {label[:1].upper() + label[1:]} must be a valid UUID.'
        if hint:
            message = f"{message} {hint}"
        raise InvalidIdentifierError(message)
    return value
