"""Account service: registration, login and profile lookup for students and tutors."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import structlog
from passlib.context import CryptContext
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from src.core.auth import create_access_token
from src.core.config import get_settings
from src.domain.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DoubtError,
    NotFoundError,
    ValidationError,
)
from src.infrastructure.db.models import UserModel, UserRole, UserStatus

logger = structlog.get_logger()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class AuthError(DoubtError):
    """Base exception for account errors."""


class RegistrationError(AuthError, ValidationError):
    """Raised when registration input breaks an account rule."""


class UserExistsError(AuthError, ConflictError):
    """Raised when attempting to register with existing email."""


class InvalidCredentialsError(AuthError, AuthenticationError):
    """Raised when login credentials are invalid."""


class UserNotFoundError(AuthError, NotFoundError):
    """Raised when user is not found."""


class UserInactiveError(AuthError, AuthorizationError):
    """Raised when an operator has deactivated or suspended the account."""


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


class AuthService:
    """Service for account operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def register_user(
        self,
        *,
        email: str,
        password: str,
        full_name: str,
        role: str = "student",
        expertise: list[str] | None = None,
    ) -> dict:
        """
        Register a new student or tutor.

        Tutors must declare at least one area of expertise.

        Returns:
            dict with user data and access token
        """
        await logger.ainfo("register_attempt", email=email, role=role)

        try:
            user_role = UserRole(role)
        except ValueError as exc:
            raise RegistrationError(f"Invalid role: {role}") from exc

        areas = [area.strip() for area in expertise or [] if area and area.strip()]
        if user_role is UserRole.TUTOR and not areas:
            raise RegistrationError("Tutors must have at least one area of expertise")

        user = UserModel(
            email=email.lower(),
            hashed_password=hash_password(password),
            full_name=full_name,
            role=user_role,
            expertise=areas,
            status=UserStatus.ACTIVE,
        )

        try:
            self.session.add(user)
            await self.session.commit()
            await self.session.refresh(user)
        except IntegrityError as exc:
            await self.session.rollback()
            await logger.awarning("register_duplicate_email", email=email)
            raise UserExistsError(f"User with email {email} already exists") from exc

        await logger.ainfo("register_success", user_id=user.id, role=user_role.value)

        return {
            "user": self._user_to_dict(user),
            "token": self._issue_token(user),
        }

    async def login(self, *, email: str, password: str) -> dict:
        """
        Authenticate user with email and password.

        Returns:
            dict with user data and access token
        """
        await logger.ainfo("login_attempt", email=email)

        stmt = select(UserModel).where(UserModel.email == email.lower())
        user = (await self.session.execute(stmt)).scalar_one_or_none()

        if user is None or not verify_password(password, user.hashed_password):
            await logger.awarning("login_invalid_credentials", email=email)
            raise InvalidCredentialsError("Invalid email or password")

        if user.status != UserStatus.ACTIVE:
            await logger.awarning("login_inactive_user", email=email, status=user.status.value)
            raise UserInactiveError(f"Account is {user.status.value}")

        await self.session.execute(
            update(UserModel)
            .where(UserModel.id == user.id)
            .values(last_login_at=datetime.now(UTC))
        )
        await self.session.commit()
        await self.session.refresh(user)

        await logger.ainfo("login_success", user_id=user.id)

        return {
            "user": self._user_to_dict(user),
            "token": self._issue_token(user),
        }

    async def get_user_by_id(self, user_id: str) -> dict:
        """Get user by ID."""
        user = await self.session.get(UserModel, user_id)
        if user is None:
            raise UserNotFoundError(f"User {user_id} not found")
        return self._user_to_dict(user)

    def _issue_token(self, user: UserModel) -> dict:
        settings = get_settings()
        access_token = create_access_token(
            subject=user.id,
            role=user.role.value,
            email=user.email,
            expires_delta=timedelta(seconds=settings.access_token_ttl_seconds),
        )
        return {
            "access_token": access_token,
            "token_type": "bearer",
            "expires_in": settings.access_token_ttl_seconds,
        }

    def _user_to_dict(self, user: UserModel) -> dict:
        """Convert UserModel to dict for response; never includes the password hash."""
        return {
            "id": user.id,
            "email": user.email,
            "full_name": user.full_name,
            "role": user.role.value,
            "expertise": list(user.expertise or []),
            "status": user.status.value,
            "created_at": user.created_at,
            "last_login_at": user.last_login_at,
        }
