"""
Doubt workflow endpoints
"""

from typing import Any

from fastapi import APIRouter, Depends, status
from src.api.deps import get_current_principal, get_doubt_service
from src.api.schemas.questions import (
    CommentCreate,
    CommentOut,
    QuestionCreate,
    QuestionOut,
    RateRequest,
    ReopenRequest,
    ResolveRequest,
    StatusUpdate,
)
from src.domain import Principal
from src.domain.services.doubts import DoubtService

router = APIRouter(prefix="/questions", tags=["questions"])


@router.post("", response_model=QuestionOut, status_code=status.HTTP_201_CREATED)
async def create_question(
    payload: QuestionCreate,
    principal: Principal = Depends(get_current_principal),
    service: DoubtService = Depends(get_doubt_service),
) -> Any:
    """
    Submit a new doubt (students only).
    """
    return await service.create_question(
        principal,
        title=payload.title,
        description=payload.description,
        topic=payload.topic,
    )


@router.get("", response_model=list[QuestionOut])
async def list_questions(
    principal: Principal = Depends(get_current_principal),
    service: DoubtService = Depends(get_doubt_service),
) -> Any:
    """
    Students get their own doubts, tutors the ones assigned to them.
    """
    return await service.list_questions(principal)


@router.get("/my-questions", response_model=list[QuestionOut])
async def list_my_questions(
    principal: Principal = Depends(get_current_principal),
    service: DoubtService = Depends(get_doubt_service),
) -> Any:
    return await service.list_mine(principal)


@router.get("/assigned", response_model=list[QuestionOut])
async def list_assigned_questions(
    principal: Principal = Depends(get_current_principal),
    service: DoubtService = Depends(get_doubt_service),
) -> Any:
    return await service.list_assigned(principal)


@router.get("/available", response_model=list[QuestionOut])
async def list_available_questions(
    principal: Principal = Depends(get_current_principal),
    service: DoubtService = Depends(get_doubt_service),
) -> Any:
    return await service.list_available(principal)


@router.get("/{question_id}", response_model=QuestionOut)
async def get_question(
    question_id: str,
    principal: Principal = Depends(get_current_principal),
    service: DoubtService = Depends(get_doubt_service),
) -> Any:
    return await service.get_question(principal, question_id)


@router.post("/{question_id}/assign", response_model=QuestionOut)
async def assign_tutor(
    question_id: str,
    principal: Principal = Depends(get_current_principal),
    service: DoubtService = Depends(get_doubt_service),
) -> Any:
    """
    Claim an unassigned doubt (tutors only).
    """
    return await service.assign(principal, question_id)


@router.put("/{question_id}/status", response_model=QuestionOut)
async def update_question_status(
    question_id: str,
    payload: StatusUpdate,
    principal: Principal = Depends(get_current_principal),
    service: DoubtService = Depends(get_doubt_service),
) -> Any:
    return await service.update_status(
        principal, question_id, status=payload.status, resolution=payload.resolution
    )


@router.post("/{question_id}/resolve", response_model=QuestionOut)
async def resolve_doubt(
    question_id: str,
    payload: ResolveRequest | None = None,
    principal: Principal = Depends(get_current_principal),
    service: DoubtService = Depends(get_doubt_service),
) -> Any:
    """
    Mark a doubt resolved (assigned tutor only).
    """
    comment = payload.comment if payload else None
    return await service.resolve(principal, question_id, comment=comment)


@router.put("/{question_id}/reopen", response_model=QuestionOut)
async def reopen_doubt(
    question_id: str,
    payload: ReopenRequest,
    principal: Principal = Depends(get_current_principal),
    service: DoubtService = Depends(get_doubt_service),
) -> Any:
    return await service.reopen(principal, question_id, reason=payload.reason)


@router.put("/{question_id}/rate", response_model=QuestionOut)
async def rate_doubt(
    question_id: str,
    payload: RateRequest,
    principal: Principal = Depends(get_current_principal),
    service: DoubtService = Depends(get_doubt_service),
) -> Any:
    return await service.rate(principal, question_id, score=payload.score, feedback=payload.feedback)


@router.get("/{question_id}/comments", response_model=list[CommentOut])
async def get_comments(
    question_id: str,
    principal: Principal = Depends(get_current_principal),
    service: DoubtService = Depends(get_doubt_service),
) -> Any:
    return await service.get_comments(principal, question_id)


@router.post(
    "/{question_id}/comments",
    response_model=list[CommentOut],
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    question_id: str,
    payload: CommentCreate,
    principal: Principal = Depends(get_current_principal),
    service: DoubtService = Depends(get_doubt_service),
) -> Any:
    return await service.add_comment(principal, question_id, text=payload.text)


@router.post(
    "/{question_id}/comments/{comment_id}/replies",
    response_model=list[CommentOut],
    status_code=status.HTTP_201_CREATED,
)
async def add_reply(
    question_id: str,
    comment_id: str,
    payload: CommentCreate,
    principal: Principal = Depends(get_current_principal),
    service: DoubtService = Depends(get_doubt_service),
) -> Any:
    return await service.add_reply(principal, question_id, comment_id, text=payload.text)
