"""
Shared FastAPI dependencies.

- get_factory(): returns the initialized ServiceFactory (set at startup).
- get_current_user(): JWT bearer token extraction and validation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from factory import ServiceFactory
from application.context import SessionContext
from domain.exceptions import (
    USER_CORRECTABLE,
    DomainError,
    NotFoundError,
    RepositoryError,
    UnauthorizedError,
    UpstreamFailureError,
)

logger = logging.getLogger(__name__)

# Module-level reference set by app lifespan
_factory: ServiceFactory | None = None


def set_factory(factory: ServiceFactory) -> None:
    global _factory
    _factory = factory


def get_factory() -> ServiceFactory:
    if _factory is None:
        raise RuntimeError("ServiceFactory not initialized.")
    return _factory


# --- JWT Bearer ---

_bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class CurrentUser:
    """Extracted from JWT payload. Passed to route handlers."""
    user_id: str
    name: Optional[str] = None


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    factory: ServiceFactory = Depends(get_factory),
) -> CurrentUser:
    """Validate JWT and return CurrentUser. Raises 401 on failure.

    Tokens are issued by the identity provider; the user id is read from
    the ``user_id`` claim, falling back to ``sub``.
    """
    if credentials is None:
        raise _unauthorized()
    try:
        payload = jwt.decode(
            credentials.credentials,
            factory.config.jwt_secret,
            algorithms=[factory.config.jwt_algorithm],
        )
    except JWTError as exc:
        logger.info("Rejected bearer token: %s", exc)
        raise _unauthorized()

    user_id = payload.get("user_id") or payload.get("sub")
    if not user_id:
        raise _unauthorized()
    return CurrentUser(
        user_id=str(user_id),
        name=payload.get("name") or payload.get("email"),
    )


def build_session_ctx(user: CurrentUser) -> SessionContext:
    """One conversation per user: the session is keyed by the user id."""
    return SessionContext(user_id=user.user_id)


# --- Domain error mapping ---

_NOT_FOUND = (NotFoundError,)
_UNAUTHORIZED = (UnauthorizedError,)


def domain_http_error(exc: DomainError) -> HTTPException:
    """Map a domain error to the HTTP status the client should see."""
    if isinstance(exc, _NOT_FOUND):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, _UNAUTHORIZED):
        code = status.HTTP_401_UNAUTHORIZED
    elif isinstance(exc, USER_CORRECTABLE):
        code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, UpstreamFailureError):
        code = status.HTTP_502_BAD_GATEWAY
    elif isinstance(exc, RepositoryError):
        code = status.HTTP_503_SERVICE_UNAVAILABLE
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return HTTPException(status_code=code, detail=str(exc))
