from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from src.domain.models import UserSummary
from src.infrastructure.db.models import UserModel


class UserDirectory:
    """Read-only lookup of display-safe user projections."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def summaries(self, user_ids: Iterable[str]) -> dict[str, UserSummary]:
        """Project every id to ``{id, name, email}``; unknown ids keep only their id."""
        wanted = {user_id for user_id in user_ids if user_id}
        if not wanted:
            return {}

        stmt = select(UserModel.id, UserModel.full_name, UserModel.email).where(
            UserModel.id.in_(wanted)
        )
        found = {
            row.id: UserSummary(id=row.id, name=row.full_name, email=row.email)
            for row in (await self.session.execute(stmt)).all()
        }
        return {user_id: found.get(user_id, UserSummary(id=user_id)) for user_id in wanted}
