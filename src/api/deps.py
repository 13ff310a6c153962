from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from src.core.auth import Role, TokenError, create_access_token, decode_access_token
from src.domain import Principal
from src.domain.errors import AuthenticationError
from src.domain.services.doubts import DoubtService
from src.infrastructure.db.session import get_session

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),  # noqa: B008
) -> Principal:
    """Resolve the authenticated principal from a bearer token."""
    if credentials is None:
        raise AuthenticationError("No token, authorization denied")

    try:
        payload = decode_access_token(credentials.credentials)
    except TokenError as exc:
        raise AuthenticationError("Token is not valid") from exc

    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Token missing subject")

    return Principal(user_id=user_id, role=payload["role"], email=payload.get("email", ""))


def issue_smoke_token(user_id: str, *, role: Role, email: str | None = None) -> str:
    """Generate a signed token for manual smoke testing."""
    return create_access_token(user_id, role=role.value, email=email)


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """Provide an async SQLAlchemy session for API handlers."""
    async for session in get_session():
        yield session


def get_doubt_service(
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> DoubtService:
    return DoubtService(session)
