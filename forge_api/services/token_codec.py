"""
Forge API - Token Codec
=========================

What:  Issues and validates the signed, stateless access tokens.
How:   Compact JWTs signed with HS256 (PyJWT). The claims are the subject
       (the user's name at issuance) and an absolute expiry.

Validation order:
    PyJWT checks structure, signature and required claims; "exp" is then
    compared with the codec's clock, the same clock issue() uses. A tampered
    token is therefore always rejected as invalid, never as merely expired.
    Every failure surfaces as InvalidTokenError with the cause kept in context.

There is no server-side session store: a token stays valid until it expires,
even if the user it names changes afterwards.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt

from forge_api.exceptions import InvalidTokenError, TokenError

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_TTL = timedelta(minutes=2)

# Symmetric algorithms only: the key is a shared secret string
SUPPORTED_ALGORITHMS = ("HS256", "HS384", "HS512")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class TokenClaims:
    subject: str
    expires_at: datetime


class TokenCodec:
    """Signs and verifies access tokens with a process-wide symmetric key."""

    def __init__(
        self,
        secret: str,
        ttl: timedelta = DEFAULT_TOKEN_TTL,
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = utcnow,
    ):
        if algorithm not in SUPPORTED_ALGORITHMS:
            raise ValueError(
                f"Unsupported token algorithm '{algorithm}'. Must be one of: {SUPPORTED_ALGORITHMS}"
            )
        self._secret = secret
        self.ttl = ttl
        self.algorithm = algorithm
        self._clock = clock

    def issue(self, subject: str, ttl: Optional[timedelta] = None) -> str:
        """
        Build and sign a token for subject, expiring ttl (default: self.ttl) from now.

        Raises:
            TokenError: no signing key is configured or encoding failed.
        """
        if not self._secret:
            raise TokenError(context={"reason": "empty signing key"})

        expires_at = self._clock() + (ttl if ttl is not None else self.ttl)
        payload = {"sub": subject, "exp": int(expires_at.timestamp())}
        try:
            return jwt.encode(payload, self._secret, algorithm=self.algorithm)
        except (jwt.PyJWTError, TypeError, ValueError) as e:
            raise TokenError(context={"reason": str(e)}) from e

    def decode(self, token: str) -> TokenClaims:
        """
        Verify a token and return its claims.

        Raises:
            InvalidTokenError: malformed, bad signature, missing claims or expired.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp"], "verify_exp": False},
            )
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(context={"reason": type(e).__name__}) from e

        # Expiry is checked against the codec's own clock, after the signature
        exp = payload["exp"]
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            raise InvalidTokenError(context={"reason": "malformed exp"})
        if exp <= self._clock().timestamp():
            raise InvalidTokenError(context={"reason": "expired"})

        subject = payload["sub"]
        if not isinstance(subject, str) or not subject:
            raise InvalidTokenError(context={"reason": "empty subject"})

        return TokenClaims(
            subject=subject,
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
