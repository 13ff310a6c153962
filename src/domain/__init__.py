from src.domain.models import (
    Comment,
    Principal,
    Question,
    QuestionStatus,
    Rating,
    ReopenEntry,
    Reply,
    UserSummary,
)

__all__ = [
    "Comment",
    "Principal",
    "Question",
    "QuestionStatus",
    "Rating",
    "ReopenEntry",
    "Reply",
    "UserSummary",
]
