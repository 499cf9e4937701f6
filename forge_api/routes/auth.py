"""
Forge API - Authentication Route Handlers
===========================================

What:  POST /login and POST /register.
How:   Read name/password from the JSON body and delegate to AuthService,
       which is built once by the app factory and read from app.state.

Responses:
    POST /login     200 {"success": true, "data": {"token": ...}}
                    400 missing fields | 401 invalid credentials | 500
    POST /register  200 {"success": true, "data": {"user": name, "id": ...}}
                    400 missing fields | 409 name taken | 500
"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from forge_api.database import get_db_session
from forge_api.schemas.auth import (
    Credentials,
    LoginResponse,
    RegisteredUser,
    RegisterResponse,
    TokenData,
)
from forge_api.schemas.note import ErrorResponse
from forge_api.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"description": "Missing name or password", "model": ErrorResponse},
        401: {"description": "Invalid credentials", "model": ErrorResponse},
    },
    summary="Exchange name and password for an access token",
)
async def login(
    credentials: Optional[Credentials] = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
    auth_service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    credentials = credentials or Credentials()
    token = await auth_service.login(db, credentials.name, credentials.password)
    return LoginResponse(data=TokenData(token=token))


@router.post(
    "/register",
    response_model=RegisterResponse,
    responses={
        400: {"description": "Missing name or password", "model": ErrorResponse},
        409: {"description": "Name already taken", "model": ErrorResponse},
    },
    summary="Create a user",
)
async def register(
    credentials: Optional[Credentials] = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
    auth_service: AuthService = Depends(get_auth_service),
) -> RegisterResponse:
    credentials = credentials or Credentials()
    user = await auth_service.register(db, credentials.name, credentials.password)
    return RegisterResponse(data=RegisteredUser(user=user.name, id=user.id))
