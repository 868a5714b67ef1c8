"""Question routes."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from api.routes.auth import get_current_user
from core.dependencies import QuestionManagerDep
from schemas.question import (
    CreateQuestionRequest,
    DeleteQuestionResponse,
    QuestionInfo,
    QuestionStats,
    UpdateQuestionRequest,
)
from schemas.user import User

router = APIRouter(prefix="/api/questions", tags=["Question"])


@router.post(
    "",
    response_model=QuestionInfo,
    status_code=status.HTTP_201_CREATED,
    summary="Post a question",
)
def create_question(
    req: CreateQuestionRequest,
    question_manager: QuestionManagerDep,
    current_user: User = Depends(get_current_user),
) -> QuestionInfo:
    return question_manager.create_question(current_user, req.text, req.class_id)


@router.get("", response_model=List[QuestionInfo], summary="List a class's questions")
def list_questions(
    question_manager: QuestionManagerDep,
    class_id: Optional[str] = Query(default=None, alias="classId"),
    status_filter: Optional[str] = Query(default=None, alias="status"),
    include_deleted: Optional[str] = Query(default=None, alias="includeDeleted"),
    current_user: User = Depends(get_current_user),
) -> List[QuestionInfo]:
    """List questions of one class, newest first.

    ``status=deleted`` returns only deleted questions, ``includeDeleted=true``
    returns everything, any other ``status`` except ``all`` narrows the live
    questions to that status.
    """
    return question_manager.list_questions(
        current_user,
        class_id,
        status=status_filter,
        include_deleted=include_deleted,
    )


@router.get(
    "/stats/{class_id}",
    response_model=QuestionStats,
    summary="Question counts for a class",
)
def get_class_question_stats(
    class_id: str,
    question_manager: QuestionManagerDep,
    current_user: User = Depends(get_current_user),
) -> QuestionStats:
    return question_manager.get_class_question_stats(class_id)


@router.put("/{question_id}", response_model=QuestionInfo, summary="Update a question")
def update_question(
    question_id: str,
    req: UpdateQuestionRequest,
    question_manager: QuestionManagerDep,
    current_user: User = Depends(get_current_user),
) -> QuestionInfo:
    return question_manager.update_question(current_user, question_id, status=req.status)


@router.delete(
    "/{question_id}",
    response_model=DeleteQuestionResponse,
    summary="Soft-delete a question",
)
def delete_question(
    question_id: str,
    question_manager: QuestionManagerDep,
    current_user: User = Depends(get_current_user),
) -> DeleteQuestionResponse:
    question = question_manager.delete_question(question_id)
    return DeleteQuestionResponse(message="Question marked as deleted", question=question)
