from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import UTC, datetime


def utcnow() -> datetime:
    return datetime.now(UTC)


class QuestionStatus(str, enum.Enum):
    """Lifecycle states of a doubt.

    ``open`` is a legacy label for the claimable state and is folded into
    ``UNASSIGNED`` by :meth:`parse`.
    """

    UNASSIGNED = "unassigned"
    ASSIGNED = "assigned"
    RESOLVED = "resolved"
    CLOSED = "closed"

    @classmethod
    def aliases(cls) -> dict[str, QuestionStatus]:
        return {"open": cls.UNASSIGNED}

    @classmethod
    def parse(cls, label: str) -> QuestionStatus:
        """Map an external label to its status, raising ``ValueError`` if unknown."""
        normalized = label.strip().lower()
        alias = cls.aliases().get(normalized)
        if alias is not None:
            return alias
        return cls(normalized)

    @property
    def is_claimable(self) -> bool:
        return self is QuestionStatus.UNASSIGNED

    @classmethod
    def tutor_workload(cls) -> tuple[QuestionStatus, ...]:
        return (cls.ASSIGNED, cls.RESOLVED)


@dataclass(slots=True, frozen=True)
class Principal:
    """Authenticated caller of a workflow operation."""

    user_id: str
    role: str
    email: str = ""


@dataclass(slots=True, frozen=True)
class UserSummary:
    """Display-safe projection of a user account."""

    id: str
    name: str | None = None
    email: str | None = None


@dataclass(slots=True)
class Reply:
    id: str
    user: str
    text: str
    created_at: datetime = field(default_factory=utcnow)


@dataclass(slots=True)
class Comment:
    id: str
    user: str
    text: str
    replies: list[Reply] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)


@dataclass(slots=True, frozen=True)
class Rating:
    score: int
    feedback: str
    rated_at: datetime


@dataclass(slots=True, frozen=True)
class ReopenEntry:
    reason: str
    previous_status: QuestionStatus
    date: datetime


@dataclass(slots=True)
class Question:
    """The doubt aggregate: question, thread, rating and reopen audit trail.

    Comments and replies are kept newest-first. The position in the list is
    authoritative for ordering, timestamps are informational only.
    """

    id: str
    title: str
    description: str
    topic: str
    student: str
    status: QuestionStatus = QuestionStatus.UNASSIGNED
    assigned_to: str | None = None
    resolution: str | None = None
    rating: Rating | None = None
    comments: list[Comment] = field(default_factory=list)
    reopen_history: list[ReopenEntry] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def is_claimable(self) -> bool:
        return self.status.is_claimable and self.assigned_to is None

    @property
    def is_rated(self) -> bool:
        return self.rating is not None

    def find_comment(self, comment_id: str) -> Comment | None:
        return next((comment for comment in self.comments if comment.id == comment_id), None)

    def participants(self) -> set[str]:
        """Every user id referenced by the aggregate."""
        ids = {self.student}
        if self.assigned_to:
            ids.add(self.assigned_to)
        for comment in self.comments:
            ids.add(comment.user)
            ids.update(reply.user for reply in comment.replies)
        return ids
