from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from contentkosh_api.core.deps import get_current_user
from contentkosh_api.core.security import CurrentUser
from contentkosh_api.db.session import get_async_session
from contentkosh_api.schemas.auth import (
    AuthResponse,
    LoginRequest,
    LogoutRequest,
    RefreshRequest,
    RegisterRequest,
    SignupRequest,
)
from contentkosh_api.schemas.common import ApiResponse, ok
from contentkosh_api.schemas.user import UserRead
from contentkosh_api.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


# PUBLIC_INTERFACE
@router.post(
    "/signup",
    response_model=ApiResponse[UserRead],
    status_code=status.HTTP_201_CREATED,
    summary="Sign up",
    description="Create a USER-role account. Tokens are obtained through /login.",
)
async def signup(
    payload: SignupRequest,
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    user = await AuthService(session).signup(payload)
    return ok(UserRead.model_validate(user), "User registered successfully")


# PUBLIC_INTERFACE
@router.post(
    "/register",
    response_model=ApiResponse[AuthResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Create an account (ADMIN by default) and return an access/refresh token pair.",
)
async def register(
    payload: RegisterRequest,
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    result = await AuthService(session).register(payload)
    return ok(result, "User registered successfully")


# PUBLIC_INTERFACE
@router.post(
    "/login",
    response_model=ApiResponse[AuthResponse],
    summary="Login",
    description="Authenticate with email and password.",
)
async def login(
    payload: LoginRequest,
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    result = await AuthService(session).login(payload)
    return ok(result, "Login successful")


# PUBLIC_INTERFACE
@router.post(
    "/refresh",
    response_model=ApiResponse[AuthResponse],
    summary="Refresh tokens",
    description="Exchange a refresh token for a new token pair. The old refresh token is revoked.",
)
async def refresh(
    payload: RefreshRequest,
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    result = await AuthService(session).refresh(payload.refresh_token)
    return ok(result, "Tokens refreshed successfully")


# PUBLIC_INTERFACE
@router.post(
    "/logout",
    response_model=ApiResponse[None],
    summary="Logout",
    description="Revoke the given refresh token. Always succeeds.",
)
async def logout(
    payload: Optional[LogoutRequest] = None,
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    await AuthService(session).logout(payload.refresh_token if payload else None)
    return ok(None, "Logged out successfully")


# PUBLIC_INTERFACE
@router.get(
    "/me",
    response_model=ApiResponse[UserRead],
    summary="Current user",
    description="Return the profile of the authenticated user.",
)
async def me(
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_async_session),
) -> ApiResponse:
    profile = await AuthService(session).get_profile(user.id)
    return ok(UserRead.model_validate(profile))
