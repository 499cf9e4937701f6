"""
Forge API - Authentication Schemas
====================================

Request and response bodies for POST /login and POST /register.

Credentials is typed loosely and the body itself is optional: a missing body,
a missing field or a non-string value is reported by the auth service as a
400 with the usual error envelope, instead of FastAPI's generic 422.
"""

import uuid
from typing import Any, Optional

from pydantic import BaseModel, Field


class Credentials(BaseModel):
    name: Optional[Any] = Field(default=None, description="User name")
    password: Optional[Any] = Field(default=None, description="Plaintext password")


class TokenData(BaseModel):
    token: str = Field(description="Signed access token, valid for a short fixed window")


class LoginResponse(BaseModel):
    success: bool = True
    data: TokenData


class RegisteredUser(BaseModel):
    user: str = Field(description="Name of the created user")
    id: uuid.UUID = Field(description="Identifier of the created user")


class RegisterResponse(BaseModel):
    success: bool = True
    data: RegisteredUser
