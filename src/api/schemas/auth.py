"""Pydantic schemas for account endpoints."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, EmailStr, Field


class UserRole(str, Enum):
    """User role enum."""

    STUDENT = "student"
    TUTOR = "tutor"


# --- Request Schemas ---


class RegisterRequest(BaseModel):
    """Request schema for user registration."""

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(
        ...,
        min_length=8,
        max_length=72,
        description="Password (8 to 72 characters)",
    )
    full_name: str = Field(..., min_length=1, max_length=128, description="Display name")
    role: UserRole = Field(
        default=UserRole.STUDENT,
        description="User role (defaults to student)",
    )
    expertise: list[str] = Field(
        default_factory=list,
        description="Areas of expertise, required for tutors",
    )


class LoginRequest(BaseModel):
    """Request schema for user login."""

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., description="User password")


# --- Response Schemas ---


class TokenResponse(BaseModel):
    """Response schema containing the JWT access token."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Access token TTL in seconds")


class UserResponse(BaseModel):
    """Response schema for user data."""

    id: str = Field(..., description="User ID")
    email: str = Field(..., description="User email")
    full_name: str | None = Field(None, description="User's full name")
    role: str = Field(..., description="User role")
    expertise: list[str] = Field(default_factory=list, description="Tutor expertise areas")
    status: str = Field(..., description="Account status")
    created_at: datetime = Field(..., description="Account creation timestamp")
    last_login_at: datetime | None = Field(None, description="Last login timestamp")


class RegisterResponse(BaseModel):
    """Response schema for user registration."""

    message: str = Field(default="Registration successful")
    user: UserResponse
    tokens: TokenResponse


class LoginResponse(BaseModel):
    """Response schema for user login."""

    message: str = Field(default="Login successful")
    user: UserResponse
    tokens: TokenResponse


class MeResponse(BaseModel):
    """Response schema for current user info."""

    user: UserResponse
