"""Domain services."""

from src.domain.services.auth_service import AuthService
from src.domain.services.doubts import DoubtService

__all__ = [
    "AuthService",
    "DoubtService",
]
