"""
Forge API - Authorization Guard
=================================

What:  Gates mutating routes behind a valid access token.
How:   A FastAPI dependency attached to the protected routes. It is resolved
       before the route handler is called, so a rejected request never
       reaches the handler.

States:
    no Authorization header              → 401
    token malformed / tampered / expired → 401
    valid token                          → request.state.subject set, handler runs

The header may carry "Bearer <token>" or the bare token.

The subject is made available to handlers, but no ownership check is done:
any authenticated user may change any note.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from forge_api.exceptions import InvalidTokenError, UnauthorizedError
from forge_api.services.token_codec import TokenCodec

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


@dataclass(frozen=True)
class AuthenticatedUser:
    subject: str


def extract_token(authorization: Optional[str]) -> Optional[str]:
    """Pull the token out of an Authorization header value."""
    if not authorization:
        return None
    value = authorization.strip()
    if value.lower().startswith(BEARER_PREFIX):
        value = value[len(BEARER_PREFIX):].strip()
    return value or None


async def require_authenticated_user(request: Request) -> AuthenticatedUser:
    """Resolve the caller from the Authorization header or raise UnauthorizedError."""
    token = extract_token(request.headers.get("Authorization"))
    if token is None:
        logger.info("Rejected %s %s: no token", request.method, request.url.path)
        raise UnauthorizedError(message="Missing or invalid token", context={"reason": "no_token"})

    codec: TokenCodec = request.app.state.token_codec
    try:
        claims = codec.decode(token)
    except InvalidTokenError as e:
        logger.info(
            "Rejected %s %s: invalid token (%s)",
            request.method,
            request.url.path,
            e.context.get("reason", "unknown"),
        )
        raise UnauthorizedError(message="Missing or invalid token", context=e.context) from e

    request.state.subject = claims.subject
    return AuthenticatedUser(subject=claims.subject)
