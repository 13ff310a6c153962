"""
Doubt workflow request/response schemas
"""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field, StrictInt


# --- Request Schemas ---


class QuestionCreate(BaseModel):
    """Schema for submitting a new doubt"""

    title: str | None = Field(None, max_length=255)
    description: str | None = None
    topic: str | None = Field(None, max_length=128)


class StatusUpdate(BaseModel):
    """Generic status change by the assigned tutor"""

    status: str | None = Field(None, description="unassigned, open, assigned, resolved or closed")
    resolution: str | None = None


class ResolveRequest(BaseModel):
    comment: str | None = Field(None, description="Optional closing comment")


class ReopenRequest(BaseModel):
    reason: str | None = None


class RateRequest(BaseModel):
    score: StrictInt | None = Field(None, description="Integer score from 1 to 5")
    feedback: str | None = None


class CommentCreate(BaseModel):
    """Comment or reply body; ``content`` is accepted as a legacy alias"""

    text: str | None = Field(None, validation_alias=AliasChoices("text", "content"))


# --- Response Schemas ---


class UserSummaryOut(BaseModel):
    """Display-safe user projection"""

    id: str
    name: str | None = None
    email: str | None = None


class ReplyOut(BaseModel):
    id: str
    user: UserSummaryOut
    text: str
    created_at: datetime


class CommentOut(BaseModel):
    id: str
    user: UserSummaryOut
    text: str
    replies: list[ReplyOut] = Field(default_factory=list)
    created_at: datetime


class RatingOut(BaseModel):
    score: int
    feedback: str
    rated_at: datetime


class ReopenEntryOut(BaseModel):
    reason: str
    previous_status: str
    date: datetime


class QuestionOut(BaseModel):
    """Full doubt aggregate with participants expanded"""

    id: str
    title: str
    description: str
    topic: str
    status: str
    student: UserSummaryOut
    assigned_to: UserSummaryOut | None = None
    resolution: str | None = None
    rating: RatingOut | None = None
    comments: list[CommentOut] = Field(default_factory=list)
    reopen_history: list[ReopenEntryOut] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
