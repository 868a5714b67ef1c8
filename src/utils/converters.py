"""Conversions between database models and API schemas."""

from typing import Optional

from models.class_model import ClassModel
from models.question import QuestionModel
from models.user import UserModel
from schemas.class_schema import ClassInfo
from schemas.question import ClassRef, QuestionInfo
from schemas.user import User, UserInfo


def model_to_user(model: UserModel) -> User:
    return User(
        user_id=model.user_id,
        name=model.name,
        email=model.email,
        role=model.role,
        password_hash=model.password_hash,
        created_at=model.created_at,
    )


def user_to_model(user: User) -> UserModel:
    return UserModel(
        user_id=user.user_id,
        name=user.name,
        email=user.email,
        role=user.role,
        password_hash=user.password_hash,
        created_at=user.created_at,
    )


def user_to_info(user: User) -> UserInfo:
    return UserInfo(
        id=user.user_id,
        name=user.name,
        email=user.email,
        role=user.role,
        created_at=user.created_at,
    )


def model_to_class_info(
    model: ClassModel,
    total_questions: Optional[int] = None,
    active_questions: Optional[int] = None,
) -> ClassInfo:
    """Build a ClassInfo, preferring freshly computed counters when given."""
    return ClassInfo(
        id=model.class_id,
        name=model.name,
        description=model.description,
        subject=model.subject,
        created_by=model.created_by,
        created_by_name=model.created_by_name,
        is_active=model.is_active,
        total_questions=(
            model.total_questions if total_questions is None else total_questions
        ),
        active_questions=(
            model.active_questions if active_questions is None else active_questions
        ),
        pending_questions=model.pending_questions or 0,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def model_to_question_info(model: QuestionModel, expand_class: bool = False) -> QuestionInfo:
    class_info = None
    if expand_class and model.class_ is not None:
        class_info = ClassRef(
            id=model.class_.class_id,
            name=model.class_.name,
            subject=model.class_.subject,
        )
    return QuestionInfo(
        id=model.question_id,
        text=model.text,
        author=model.author,
        author_id=model.author_id,
        class_id=model.class_id,
        class_name=model.class_name,
        status=model.status,
        deleted=model.deleted,
        created_at=model.created_at,
        updated_at=model.updated_at,
        class_info=class_info,
    )
