"""
Doubt workflow service.

Owns the question lifecycle (create, assign, status update, resolve, reopen,
rate), the role-scoped listings and the append-only comment/reply thread.
Every mutating call is a single load-validate-mutate-persist cycle against
the question store.
"""

from __future__ import annotations

import uuid
from dataclasses import asdict
from datetime import datetime
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from src.domain.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from src.domain.models import (
    Comment,
    Principal,
    Question,
    QuestionStatus,
    Rating,
    ReopenEntry,
    Reply,
    UserSummary,
    utcnow,
)
from src.domain.policy import DEFAULT_POLICY, AccessPolicy, Capability, ListScope
from src.infrastructure.repositories.questions import QuestionRepository
from src.infrastructure.repositories.users import UserDirectory

logger = structlog.get_logger()

REOPEN_COMMENT_TEMPLATE = "Doubt reopened. Reason: {reason}"
MIN_SCORE = 1
MAX_SCORE = 5


class DoubtService:
    """Domain logic for the doubt lifecycle and its discussion thread."""

    def __init__(
        self,
        session: AsyncSession,
        *,
        policy: AccessPolicy = DEFAULT_POLICY,
    ) -> None:
        self.session = session
        self.policy = policy
        self.questions = QuestionRepository(session)
        self.users = UserDirectory(session)

    # --- Lifecycle ---

    async def create_question(
        self,
        principal: Principal,
        *,
        title: str | None,
        description: str | None,
        topic: str | None,
    ) -> dict[str, Any]:
        self.policy.require(principal, Capability.ASK)
        message = "Please provide all required fields"
        title = _require_text(title, message)
        description = _require_text(description, message)
        topic = _require_text(topic, message)

        now = utcnow()
        question = Question(
            id=str(uuid.uuid4()),
            title=title,
            description=description,
            topic=topic,
            student=principal.user_id,
            status=QuestionStatus.UNASSIGNED,
            created_at=now,
            updated_at=now,
        )
        await self.questions.add(question)

        await logger.ainfo(
            "question_created",
            question_id=question.id,
            student_id=principal.user_id,
            topic=question.topic,
        )
        return await self._present_question(question)

    async def assign(self, principal: Principal, question_id: str) -> dict[str, Any]:
        self.policy.require(principal, Capability.CLAIM)
        question = await self._load(question_id)

        if not question.is_claimable:
            await logger.awarning(
                "assign_conflict",
                question_id=question_id,
                tutor_id=principal.user_id,
                status=question.status.value,
            )
            raise ConflictError("This doubt is already assigned or resolved")

        question.assigned_to = principal.user_id
        question.status = QuestionStatus.ASSIGNED
        await self.questions.save(question)

        await logger.ainfo("question_assigned", question_id=question_id, tutor_id=principal.user_id)
        return await self._present_question(question)

    async def update_status(
        self,
        principal: Principal,
        question_id: str,
        *,
        status: str | None,
        resolution: str | None = None,
    ) -> dict[str, Any]:
        """Generic status change by the assigned tutor.

        Does not touch the rating; ``rate`` re-checks the status itself.
        """
        status = _require_text(status, "Status is required")
        try:
            new_status = QuestionStatus.parse(status)
        except ValueError as exc:
            raise ValidationError(f"Unknown status: {status}") from exc

        question = await self._load(question_id)
        await self._require_assigned_tutor(
            principal, question, "Access denied. Only assigned tutor can update status."
        )

        if new_status.is_claimable:
            raise ConflictError("An assigned doubt cannot be moved back to a claimable status")

        previous = question.status
        question.status = new_status
        if resolution and resolution.strip():
            question.resolution = resolution
        await self.questions.save(question)

        await logger.ainfo(
            "question_status_updated",
            question_id=question_id,
            tutor_id=principal.user_id,
            previous_status=previous.value,
            status=new_status.value,
        )
        return await self._present_question(question)

    async def resolve(
        self,
        principal: Principal,
        question_id: str,
        *,
        comment: str | None = None,
    ) -> dict[str, Any]:
        question = await self._load(question_id)
        await self._require_assigned_tutor(
            principal, question, "Not authorized to resolve this doubt"
        )

        if comment and comment.strip():
            question.comments.insert(0, _new_comment(principal.user_id, comment))
        question.status = QuestionStatus.RESOLVED
        await self.questions.save(question)

        await logger.ainfo(
            "question_resolved",
            question_id=question_id,
            tutor_id=principal.user_id,
            with_comment=bool(comment and comment.strip()),
        )
        return await self._present_question(question)

    async def reopen(
        self,
        principal: Principal,
        question_id: str,
        *,
        reason: str | None,
    ) -> dict[str, Any]:
        reason = _require_text(reason, "A reason is required to reopen a doubt")

        question = await self._load(question_id)
        await self._require_owner(
            principal, question, "Only the student who created this doubt can reopen it"
        )
        if question.status is not QuestionStatus.RESOLVED:
            await logger.awarning(
                "reopen_conflict", question_id=question_id, status=question.status.value
            )
            raise ConflictError("Only resolved doubts can be reopened")

        now = utcnow()
        question.reopen_history.append(
            ReopenEntry(reason=reason, previous_status=question.status, date=now)
        )
        # The tutor stays assigned
        question.status = QuestionStatus.ASSIGNED
        question.comments.insert(
            0,
            _new_comment(principal.user_id, REOPEN_COMMENT_TEMPLATE.format(reason=reason), now),
        )
        await self.questions.save(question)

        await logger.ainfo(
            "question_reopened",
            question_id=question_id,
            student_id=principal.user_id,
            reopen_count=len(question.reopen_history),
        )
        return await self._present_question(question)

    async def rate(
        self,
        principal: Principal,
        question_id: str,
        *,
        score: int | None,
        feedback: str | None = None,
    ) -> dict[str, Any]:
        question = await self._load(question_id)
        await self._require_owner(
            principal, question, "Only the student who created this doubt can rate it"
        )
        if question.status is not QuestionStatus.RESOLVED:
            raise ConflictError("Only resolved doubts can be rated")
        if question.is_rated:
            await logger.awarning("rate_conflict", question_id=question_id)
            raise ConflictError("This doubt has already been rated")
        if (
            not isinstance(score, int)
            or isinstance(score, bool)
            or not MIN_SCORE <= score <= MAX_SCORE
        ):
            raise ValidationError("Please provide a valid rating score between 1 and 5")

        question.rating = Rating(score=score, feedback=feedback or "", rated_at=utcnow())
        await self.questions.save(question)

        await logger.ainfo("question_rated", question_id=question_id, score=score)
        return await self._present_question(question)

    # --- Queries ---

    async def get_question(self, principal: Principal, question_id: str) -> dict[str, Any]:
        question = await self._load(question_id)
        self._require_access(principal, question)
        return await self._present_question(question)

    async def list_questions(self, principal: Principal) -> list[dict[str, Any]]:
        scope = self.policy.list_scope(principal)
        if scope is ListScope.OWN:
            questions = await self.questions.list_by_student(principal.user_id)
        else:
            questions = await self.questions.list_by_tutor(principal.user_id)
        return await self._present_many(questions)

    async def list_mine(self, principal: Principal) -> list[dict[str, Any]]:
        self.policy.require(principal, Capability.LIST_OWN)
        questions = await self.questions.list_by_student(principal.user_id)
        return await self._present_many(questions)

    async def list_assigned(self, principal: Principal) -> list[dict[str, Any]]:
        self.policy.require(principal, Capability.LIST_ASSIGNED)
        questions = await self.questions.list_by_tutor(
            principal.user_id,
            statuses=QuestionStatus.tutor_workload(),
            recently_updated_first=True,
        )
        return await self._present_many(questions)

    async def list_available(self, principal: Principal) -> list[dict[str, Any]]:
        self.policy.require(principal, Capability.LIST_AVAILABLE)
        questions = await self.questions.list_claimable()
        return await self._present_many(questions)

    # --- Thread ---

    async def add_comment(
        self, principal: Principal, question_id: str, *, text: str | None
    ) -> list[dict[str, Any]]:
        text = _require_text(text, "Comment text is required")

        question = await self._load(question_id)
        self._require_access(principal, question)

        question.comments.insert(0, _new_comment(principal.user_id, text))
        await self.questions.save(question)

        await logger.ainfo(
            "comment_added",
            question_id=question_id,
            comment_id=question.comments[0].id,
            user_id=principal.user_id,
        )
        return await self._present_thread(question)

    async def add_reply(
        self,
        principal: Principal,
        question_id: str,
        comment_id: str,
        *,
        text: str | None,
    ) -> list[dict[str, Any]]:
        text = _require_text(text, "Reply text is required")

        question = await self._load(question_id)
        self._require_access(principal, question)
        comment = question.find_comment(comment_id)
        if comment is None:
            raise NotFoundError("Comment not found")

        comment.replies.insert(0, Reply(id=uuid.uuid4().hex, user=principal.user_id, text=text))
        await self.questions.save(question)

        await logger.ainfo(
            "reply_added",
            question_id=question_id,
            comment_id=comment_id,
            user_id=principal.user_id,
        )
        return await self._present_thread(question)

    async def get_comments(self, principal: Principal, question_id: str) -> list[dict[str, Any]]:
        question = await self._load(question_id)
        self._require_access(principal, question)
        return await self._present_thread(question)

    # --- Checks ---

    async def _load(self, question_id: str) -> Question:
        question = await self.questions.get(question_id)
        if question is None:
            raise NotFoundError("Question not found")
        return question

    async def _require_assigned_tutor(
        self, principal: Principal, question: Question, message: str
    ) -> None:
        if question.assigned_to is None or question.assigned_to != principal.user_id:
            await logger.awarning(
                "assigned_tutor_required",
                question_id=question.id,
                user_id=principal.user_id,
            )
            raise AuthorizationError(message)

    async def _require_owner(self, principal: Principal, question: Question, message: str) -> None:
        if question.student != principal.user_id:
            await logger.awarning(
                "question_owner_required",
                question_id=question.id,
                user_id=principal.user_id,
            )
            raise AuthorizationError(message)

    def _require_access(self, principal: Principal, question: Question) -> None:
        if principal.user_id in (question.student, question.assigned_to):
            return
        if question.is_claimable and self.policy.allows(principal, Capability.CLAIM):
            return
        raise AuthorizationError("You do not have access to this doubt")

    # --- Projection ---

    async def _present_question(self, question: Question) -> dict[str, Any]:
        people = await self.users.summaries(question.participants())
        return _serialize_question(question, people)

    async def _present_many(self, questions: list[Question]) -> list[dict[str, Any]]:
        ids: set[str] = set()
        for question in questions:
            ids.update(question.participants())
        people = await self.users.summaries(ids)
        return [_serialize_question(question, people) for question in questions]

    async def _present_thread(self, question: Question) -> list[dict[str, Any]]:
        people = await self.users.summaries(question.participants())
        return [_serialize_comment(comment, people) for comment in question.comments]


def _require_text(value: str | None, message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(message)
    return value.strip()


def _new_comment(user_id: str, text: str, created_at: datetime | None = None) -> Comment:
    return Comment(
        id=uuid.uuid4().hex,
        user=user_id,
        text=text.strip(),
        created_at=created_at or utcnow(),
    )


def _person(user_id: str | None, people: dict[str, UserSummary]) -> dict[str, Any] | None:
    if user_id is None:
        return None
    return asdict(people.get(user_id, UserSummary(id=user_id)))


def _serialize_comment(comment: Comment, people: dict[str, UserSummary]) -> dict[str, Any]:
    return {
        "id": comment.id,
        "user": _person(comment.user, people),
        "text": comment.text,
        "created_at": comment.created_at,
        "replies": [
            {
                "id": reply.id,
                "user": _person(reply.user, people),
                "text": reply.text,
                "created_at": reply.created_at,
            }
            for reply in comment.replies
        ],
    }


def _serialize_question(question: Question, people: dict[str, UserSummary]) -> dict[str, Any]:
    """Serialize the aggregate with every user id expanded to a summary."""
    rating = None
    if question.rating is not None:
        rating = {
            "score": question.rating.score,
            "feedback": question.rating.feedback,
            "rated_at": question.rating.rated_at,
        }
    return {
        "id": question.id,
        "title": question.title,
        "description": question.description,
        "topic": question.topic,
        "status": question.status.value,
        "student": _person(question.student, people),
        "assigned_to": _person(question.assigned_to, people),
        "resolution": question.resolution,
        "rating": rating,
        "comments": [_serialize_comment(comment, people) for comment in question.comments],
        "reopen_history": [
            {
                "reason": entry.reason,
                "previous_status": entry.previous_status.value,
                "date": entry.date,
            }
            for entry in question.reopen_history
        ],
        "created_at": question.created_at,
        "updated_at": question.updated_at,
    }
