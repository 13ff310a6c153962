"""Account routes - register, login, profile.

Account failures are ``DoubtError`` subclasses, so they render through the
shared error handlers with the same ``kind``/``detail`` body as the workflow.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from src.api.deps import get_current_principal, get_db_session
from src.api.schemas.auth import (
    LoginRequest,
    LoginResponse,
    MeResponse,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
    UserResponse,
)
from src.domain import Principal
from src.domain.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
    description="Create a student or tutor account. Tutors must list their expertise.",
)
async def register(
    payload: RegisterRequest,
    session: AsyncSession = Depends(get_db_session),
) -> RegisterResponse:
    """Register a new user."""
    result = await AuthService(session).register_user(
        email=payload.email,
        password=payload.password,
        full_name=payload.full_name,
        role=payload.role.value,
        expertise=payload.expertise,
    )

    return RegisterResponse(
        message="Registration successful",
        user=UserResponse(**result["user"]),
        tokens=TokenResponse(**result["token"]),
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="User login",
    description="Authenticate user with email and password, returns a JWT access token.",
)
async def login(
    payload: LoginRequest,
    session: AsyncSession = Depends(get_db_session),
) -> LoginResponse:
    """Authenticate user and return a token."""
    result = await AuthService(session).login(email=payload.email, password=payload.password)

    return LoginResponse(
        message="Login successful",
        user=UserResponse(**result["user"]),
        tokens=TokenResponse(**result["token"]),
    )


@router.get(
    "/me",
    response_model=MeResponse,
    summary="Get current user",
    description="Get the currently authenticated user's profile.",
)
async def get_me(
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_db_session),
) -> MeResponse:
    """Get current authenticated user's profile."""
    user_data = await AuthService(session).get_user_by_id(principal.user_id)
    return MeResponse(user=UserResponse(**user_data))
