"""
Forge API - Authentication Service
====================================

What:  Login (verify credentials, issue a token) and registration (hash the
       password, persist the user).
How:   Composes the credential store, the password hasher and the token codec.
       The hasher and codec are handed in by the app factory; the store works
       on the request's session.
Who:   Called by the /login and /register route handlers.

Login flow:
    ┌────────────┐    ┌──────────────┐    ┌──────────────┐
    │ find user  │───▶│ verify hash  │───▶│ issue token  │
    └────────────┘    └──────────────┘    └──────────────┘
       not found ─┐      mismatch ─┐        codec failure ──▶ InternalError
                  └────────────────┴──▶ UnauthorizedError("Invalid credentials")

Unknown user and wrong password produce the same error, and an unknown user
still pays for one bcrypt verification (against a throwaway digest), so
neither the response nor its timing reveals which names exist.

bcrypt is CPU bound, so hashing and verification run in the threadpool and
do not stall other requests on the event loop.
"""

import logging
import secrets
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from forge_api.exceptions import (
    InternalError,
    TokenError,
    UnauthorizedError,
    ValidationError,
)
from forge_api.models.user import User
from forge_api.services.password_hasher import MAX_PASSWORD_BYTES, PasswordHasher
from forge_api.services.token_codec import TokenCodec
from forge_api.services.user_store import UserStore, user_store

logger = logging.getLogger(__name__)


def _is_present(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def _require_credentials(name: Any, password: Any) -> None:
    if not _is_present(name) or not _is_present(password):
        raise ValidationError(
            message="Missing name or password",
            context={"name_present": _is_present(name), "password_present": _is_present(password)},
        )


class AuthService:
    """Credential verification and user registration."""

    def __init__(
        self,
        hasher: PasswordHasher,
        codec: TokenCodec,
        store: UserStore = user_store,
    ):
        self.hasher = hasher
        self.codec = codec
        self.store = store
        self._dummy_digest: Optional[str] = None

    def _verify_unknown_user(self, password: str) -> bool:
        """Verify against a throwaway digest built on first use; always False."""
        if self._dummy_digest is None:
            self._dummy_digest = self.hasher.hash(secrets.token_urlsafe(16))
        self.hasher.verify(password, self._dummy_digest)
        return False

    async def login(self, db: AsyncSession, name: Any, password: Any) -> str:
        """
        Verify name/password and return a freshly issued token.

        Raises:
            ValidationError: name or password missing, empty or not a string (400)
            UnauthorizedError: unknown user or wrong password (401)
            InternalError: the token could not be issued (500)
            DatabaseError: the lookup failed (500)
        """
        _require_credentials(name, password)

        user = await self.store.find_by_name(db, name)
        if user is None:
            # Unknown names cost one verification, like a wrong password
            await run_in_threadpool(self._verify_unknown_user, password)
            logger.info("Login failed: unknown user")
            raise UnauthorizedError(context={"reason": "unknown_user"})

        password_ok = await run_in_threadpool(self.hasher.verify, password, user.password_hash)
        if not password_ok:
            logger.info("Login failed: wrong password for %s", user.name)
            raise UnauthorizedError(context={"reason": "wrong_password"})

        try:
            token = self.codec.issue(user.name)
        except TokenError as e:
            raise InternalError(
                message="Could not issue a token. Please try again later.",
                context=e.context,
            ) from e

        logger.info("Login succeeded for %s", user.name)
        return token

    async def register(self, db: AsyncSession, name: Any, password: Any) -> User:
        """
        Hash the password and persist a new user.

        Raises:
            ValidationError: name or password missing, empty or not a string, or
                password too long (400)
            ConflictError: the name is taken (409)
            DatabaseError: the insert failed (500)
        """
        _require_credentials(name, password)
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(
                message=f"Password must be at most {MAX_PASSWORD_BYTES} bytes",
                field="password",
            )

        password_hash = await run_in_threadpool(self.hasher.hash, password)
        return await self.store.insert(db, name, password_hash)
