"""Durable store for the doubt aggregate."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from src.domain.models import (
    Comment,
    Question,
    QuestionStatus,
    Rating,
    ReopenEntry,
    Reply,
    utcnow,
)
from src.infrastructure.db.models import QuestionModel

if TYPE_CHECKING:
    from sqlalchemy import Select

logger = structlog.get_logger()

CLAIMABLE_LABELS = ("unassigned", "open")


class QuestionRepository:
    """Loads and persists whole ``Question`` aggregates.

    Every write replaces the row's columns from the in-memory aggregate, so
    concurrent writers on the same question are last-writer-wins.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, question_id: str) -> Question | None:
        row = await self.session.get(QuestionModel, question_id)
        if row is None:
            return None
        return _to_domain(row)

    async def add(self, question: Question) -> Question:
        row = QuestionModel(id=question.id)
        _apply(row, question)
        self.session.add(row)
        await self._commit("question_add", question.id)
        return question

    async def save(self, question: Question) -> Question:
        question.updated_at = utcnow()
        row = await self.session.get(QuestionModel, question.id)
        if row is None:
            row = QuestionModel(id=question.id)
            self.session.add(row)
        _apply(row, question)
        await self._commit("question_save", question.id)
        return question

    async def list_by_student(self, student_id: str) -> list[Question]:
        stmt: Select[tuple[QuestionModel]] = (
            select(QuestionModel)
            .where(QuestionModel.student_id == student_id)
            .order_by(QuestionModel.created_at.desc())
        )
        return await self._fetch(stmt)

    async def list_by_tutor(
        self,
        tutor_id: str,
        *,
        statuses: Sequence[QuestionStatus] | None = None,
        recently_updated_first: bool = False,
    ) -> list[Question]:
        stmt: Select[tuple[QuestionModel]] = select(QuestionModel).where(
            QuestionModel.assigned_to_id == tutor_id
        )
        if statuses is not None:
            stmt = stmt.where(QuestionModel.status.in_([status.value for status in statuses]))
        if recently_updated_first:
            stmt = stmt.order_by(QuestionModel.updated_at.desc())
        else:
            stmt = stmt.order_by(QuestionModel.created_at.desc())
        return await self._fetch(stmt)

    async def list_claimable(self) -> list[Question]:
        stmt: Select[tuple[QuestionModel]] = (
            select(QuestionModel)
            .where(
                QuestionModel.status.in_(CLAIMABLE_LABELS),
                QuestionModel.assigned_to_id.is_(None),
            )
            .order_by(QuestionModel.created_at.desc())
        )
        return await self._fetch(stmt)

    async def _fetch(self, stmt: Select[tuple[QuestionModel]]) -> list[Question]:
        rows = (await self.session.execute(stmt)).scalars().all()
        return [_to_domain(row) for row in rows]

    async def _commit(self, event: str, question_id: str) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            await logger.aexception(f"{event}_failed", question_id=question_id)
            raise


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _timestamp(value: str | None) -> datetime:
    if not value:
        return utcnow()
    return _aware(datetime.fromisoformat(value))


def _apply(row: QuestionModel, question: Question) -> None:
    row.title = question.title
    row.description = question.description
    row.topic = question.topic
    row.student_id = question.student
    row.assigned_to_id = question.assigned_to
    row.status = question.status.value
    row.resolution = question.resolution
    row.rating = _rating_to_dict(question.rating)
    # New list objects so the JSON columns are flagged dirty
    row.comments = [_comment_to_dict(comment) for comment in question.comments]
    row.reopen_history = [_reopen_to_dict(entry) for entry in question.reopen_history]
    row.created_at = question.created_at
    row.updated_at = question.updated_at


def _to_domain(row: QuestionModel) -> Question:
    return Question(
        id=row.id,
        title=row.title,
        description=row.description,
        topic=row.topic,
        student=row.student_id,
        assigned_to=row.assigned_to_id,
        status=QuestionStatus.parse(row.status),
        resolution=row.resolution,
        rating=_rating_from_dict(row.rating),
        comments=[_comment_from_dict(item) for item in row.comments or []],
        reopen_history=[_reopen_from_dict(item) for item in row.reopen_history or []],
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


def _rating_to_dict(rating: Rating | None) -> dict[str, Any] | None:
    if rating is None:
        return None
    return {
        "score": rating.score,
        "feedback": rating.feedback,
        "rated_at": rating.rated_at.isoformat(),
    }


def _rating_from_dict(data: dict[str, Any] | None) -> Rating | None:
    if not data or not data.get("score"):
        return None
    return Rating(
        score=int(data["score"]),
        feedback=data.get("feedback") or "",
        rated_at=_timestamp(data.get("rated_at")),
    )


def _comment_to_dict(comment: Comment) -> dict[str, Any]:
    return {
        "id": comment.id,
        "user": comment.user,
        "text": comment.text,
        "created_at": comment.created_at.isoformat(),
        "replies": [
            {
                "id": reply.id,
                "user": reply.user,
                "text": reply.text,
                "created_at": reply.created_at.isoformat(),
            }
            for reply in comment.replies
        ],
    }


def _comment_from_dict(data: dict[str, Any]) -> Comment:
    return Comment(
        id=data["id"],
        user=data["user"],
        text=data["text"],
        created_at=_timestamp(data.get("created_at")),
        replies=[
            Reply(
                id=reply["id"],
                user=reply["user"],
                text=reply["text"],
                created_at=_timestamp(reply.get("created_at")),
            )
            for reply in data.get("replies", [])
        ],
    )


def _reopen_to_dict(entry: ReopenEntry) -> dict[str, Any]:
    return {
        "reason": entry.reason,
        "previous_status": entry.previous_status.value,
        "date": entry.date.isoformat(),
    }


def _reopen_from_dict(data: dict[str, Any]) -> ReopenEntry:
    return ReopenEntry(
        reason=data.get("reason", ""),
        previous_status=QuestionStatus.parse(data.get("previous_status", "resolved")),
        date=_timestamp(data.get("date")),
    )
