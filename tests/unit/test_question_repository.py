"""Unit tests for the question aggregate store."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from src.domain.models import (
    Comment,
    Question,
    QuestionStatus,
    Rating,
    ReopenEntry,
    Reply,
)
from src.infrastructure.db.models import QuestionModel
from src.infrastructure.repositories.questions import QuestionRepository
from src.infrastructure.repositories.users import UserDirectory

from tests.utils import STUDENT_ID, TUTOR_ID


def _question(question_id: str = "q-1", **overrides) -> Question:
    fields = {
        "id": question_id,
        "title": "Limits",
        "description": "What is lim sin(x)/x?",
        "topic": "calculus",
        "student": STUDENT_ID,
    }
    fields.update(overrides)
    return Question(**fields)


async def test_aggregate_survives_round_trip(
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    rated_at = datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC)
    question = _question(
        status=QuestionStatus.RESOLVED,
        assigned_to=TUTOR_ID,
        resolution="It tends to 1",
        rating=Rating(score=4, feedback="clear", rated_at=rated_at),
        comments=[
            Comment(
                id="c-2",
                user=TUTOR_ID,
                text="newest",
                replies=[Reply(id="r-1", user=STUDENT_ID, text="thanks")],
            ),
            Comment(id="c-1", user=STUDENT_ID, text="oldest"),
        ],
        reopen_history=[
            ReopenEntry(reason="unclear", previous_status=QuestionStatus.RESOLVED, date=rated_at)
        ],
    )

    async with session_factory() as session:
        await QuestionRepository(session).add(question)

    async with session_factory() as session:
        loaded = await QuestionRepository(session).get("q-1")

    assert loaded is not None
    assert loaded.status is QuestionStatus.RESOLVED
    assert loaded.assigned_to == TUTOR_ID
    assert loaded.rating == Rating(score=4, feedback="clear", rated_at=rated_at)
    assert [c.id for c in loaded.comments] == ["c-2", "c-1"]
    assert loaded.comments[0].replies[0].text == "thanks"
    assert loaded.reopen_history[0].reason == "unclear"
    assert loaded.created_at.tzinfo is not None


async def test_get_missing_returns_none(db: AsyncSession) -> None:
    assert await QuestionRepository(db).get("nope") is None


async def test_save_refreshes_updated_at(db: AsyncSession) -> None:
    repo = QuestionRepository(db)
    stale = datetime.now(UTC) - timedelta(days=1)
    question = _question(created_at=stale, updated_at=stale)
    await repo.add(question)

    question.comments.insert(0, Comment(id="c-1", user=STUDENT_ID, text="hello"))
    await repo.save(question)

    row = (await db.execute(select(QuestionModel).where(QuestionModel.id == "q-1"))).scalar_one()
    assert question.updated_at > stale
    assert row.comments[0]["text"] == "hello"


async def test_legacy_open_label_is_claimable(db: AsyncSession) -> None:
    now = datetime.now(UTC)
    db.add(
        QuestionModel(
            id="legacy",
            title="Old",
            description="Imported doubt",
            topic="history",
            student_id=STUDENT_ID,
            status="open",
            comments=[],
            reopen_history=[],
            created_at=now,
            updated_at=now,
        )
    )
    await db.commit()

    repo = QuestionRepository(db)
    loaded = await repo.get("legacy")
    claimable = await repo.list_claimable()

    assert loaded is not None
    assert loaded.status is QuestionStatus.UNASSIGNED
    assert loaded.is_claimable
    assert [q.id for q in claimable] == ["legacy"]


async def test_user_directory_projects_known_and_unknown(
    db: AsyncSession, seeded_users: list[dict]
) -> None:
    summaries = await UserDirectory(db).summaries([STUDENT_ID, "ghost"])

    assert summaries[STUDENT_ID].name == "Ana Student"
    assert summaries[STUDENT_ID].email == "ana@example.com"
    assert summaries["ghost"].name is None
    assert summaries["ghost"].email is None
