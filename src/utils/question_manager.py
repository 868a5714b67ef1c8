"""Question management and the class pending-counter bookkeeping.

A question is either live (pending, answered or important) or soft-deleted.
The owning class keeps a ``pending_questions`` counter equal to the number of
its live questions whose status is pending-like (pending or important).
Every write that can move a question in or out of that set adjusts the
counter in the same transaction, and status/deleted writes are conditional
on the values that were read so that two concurrent requests cannot both
apply the same delta.
"""

import logging
from datetime import datetime
from typing import List, Optional

import pytz
from sqlalchemy import and_, case, func, update
from sqlalchemy.orm import Session, joinedload

from config import (
    DEFAULT_QUESTION_STATUS,
    PENDING_STATUSES,
    STATUS_UPDATE_MAX_ATTEMPTS,
)
from core.exceptions import (
    ConflictError,
    InvalidArgumentError,
    QuestionNotFoundError,
)
from models.class_model import ClassModel
from models.question import QuestionModel
from schemas.question import QuestionInfo, QuestionStats
from schemas.user import User
from utils.converters import model_to_question_info
from utils.ids import generate_id, is_valid_id

logger = logging.getLogger(__name__)


def is_pending(status: str) -> bool:
    return status in PENDING_STATUSES


def pending_delta(old_status: str, new_status: str) -> int:
    """Change to a class's pending counter when a live question changes status."""
    if is_pending(old_status) and not is_pending(new_status):
        return -1
    if not is_pending(old_status) and is_pending(new_status):
        return 1
    return 0


class QuestionManager:
    """Manages question operations using SQLAlchemy."""

    def __init__(self, db: Session):
        """Initialize QuestionManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db

    def create_question(
        self, principal: User, text: Optional[str], class_id: Optional[str]
    ) -> QuestionInfo:
        """Post a question to an active class.

        Args:
            principal: The authenticated author.
            text: Question text; trimmed before storing.
            class_id: Owning class ID.

        Returns:
            The created question, status pending.

        Raises:
            InvalidArgumentError: If text or class_id is missing, the id is
                malformed, or the class is missing or inactive.
            ConflictError: If the class already has a question with this text.
        """
        text = (text or "").strip()
        if not text or not class_id:
            raise InvalidArgumentError("Question text and class ID are required")
        if not is_valid_id(class_id):
            raise InvalidArgumentError("Invalid class ID format")

        class_model = (
            self.db.query(ClassModel).filter(ClassModel.class_id == class_id).first()
        )
        if not class_model or not class_model.is_active:
            raise InvalidArgumentError("Invalid or inactive class")

        # Soft-deleted questions are part of the duplicate scope.
        existing = (
            self.db.query(QuestionModel)
            .filter(QuestionModel.class_id == class_id, QuestionModel.text == text)
            .first()
        )
        if existing:
            raise ConflictError("Similar question already posted in this class")

        now = datetime.now(pytz.utc).isoformat()
        question = QuestionModel(
            question_id=generate_id(),
            text=text,
            author=principal.name,
            author_id=principal.user_id,
            class_id=class_id,
            class_name=class_model.name,
            status=DEFAULT_QUESTION_STATUS,
            deleted=False,
            created_at=now,
            updated_at=now,
        )
        self.db.add(question)
        self._adjust_class_counters(class_id, total_questions=1, pending_questions=1)
        self.db.commit()
        self.db.refresh(question)
        logger.info("Question %s posted to class %s by %s", question.question_id, class_id, principal.user_id)
        return model_to_question_info(question)

    def list_questions(
        self,
        principal: User,
        class_id: Optional[str],
        status: Optional[str] = None,
        include_deleted: Optional[str] = None,
    ) -> List[QuestionInfo]:
        """List the questions of a class, newest first.

        Filters, first match wins:
            status == "deleted"      -> only deleted questions
            include_deleted == "true" -> every question, status ignored
            status other than "all"  -> that status, not deleted
            otherwise                -> every question that is not deleted
        """
        if not class_id:
            raise InvalidArgumentError("Class ID is required")
        if not is_valid_id(class_id):
            raise InvalidArgumentError("Invalid class ID format")

        query = (
            self.db.query(QuestionModel)
            .options(joinedload(QuestionModel.class_))
            .filter(QuestionModel.class_id == class_id)
        )
        if status == "deleted":
            query = query.filter(QuestionModel.deleted.is_(True))
        elif include_deleted == "true":
            pass
        elif status and status != "all":
            query = query.filter(
                QuestionModel.status == status, QuestionModel.deleted.is_(False)
            )
        else:
            query = query.filter(QuestionModel.deleted.is_(False))

        models = query.order_by(QuestionModel.created_at.desc()).all()
        return [model_to_question_info(m, expand_class=True) for m in models]

    def update_question(
        self, principal: User, question_id: str, status: Optional[str] = None
    ) -> QuestionInfo:
        """Change a question's status and keep the class counter in step.

        Raises:
            InvalidArgumentError: If the id is malformed.
            QuestionNotFoundError: If the question does not exist.
            ConflictError: If the question kept changing under us.
        """
        self._validate_question_id(question_id)

        for _ in range(STATUS_UPDATE_MAX_ATTEMPTS):
            question = self._get_question_model(question_id)
            old_status, was_deleted = question.status, question.deleted
            new_status = status or old_status

            result = self.db.execute(
                update(QuestionModel)
                .where(
                    QuestionModel.question_id == question_id,
                    QuestionModel.status == old_status,
                    QuestionModel.deleted.is_(was_deleted),
                )
                .values(status=new_status, updated_at=datetime.now(pytz.utc).isoformat())
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                self.db.rollback()
                logger.info("Question %s changed concurrently, retrying status update", question_id)
                continue

            # Deleted questions were already taken out of the counter.
            delta = 0 if was_deleted else pending_delta(old_status, new_status)
            if delta:
                self._adjust_class_counters(question.class_id, pending_questions=delta)
            self.db.commit()

            question = self._get_question_model(question_id)
            if new_status != old_status:
                logger.info("Question %s status %s -> %s", question_id, old_status, new_status)
            return model_to_question_info(question, expand_class=True)

        raise ConflictError("Question was modified concurrently, please retry")

    def delete_question(self, question_id: str) -> QuestionInfo:
        """Soft-delete a question.

        Deleting an already deleted question changes nothing.

        Raises:
            InvalidArgumentError: If the id is malformed.
            QuestionNotFoundError: If the question does not exist.
            ConflictError: If the question kept changing under us.
        """
        self._validate_question_id(question_id)

        for _ in range(STATUS_UPDATE_MAX_ATTEMPTS):
            question = self._get_question_model(question_id)
            if question.deleted:
                return model_to_question_info(question, expand_class=True)
            old_status = question.status

            result = self.db.execute(
                update(QuestionModel)
                .where(
                    QuestionModel.question_id == question_id,
                    QuestionModel.status == old_status,
                    QuestionModel.deleted.is_(False),
                )
                .values(deleted=True, updated_at=datetime.now(pytz.utc).isoformat())
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                self.db.rollback()
                logger.info("Question %s changed concurrently, retrying delete", question_id)
                continue

            if is_pending(old_status):
                self._adjust_class_counters(question.class_id, pending_questions=-1)
            self.db.commit()

            logger.info("Question %s marked as deleted", question_id)
            return model_to_question_info(
                self._get_question_model(question_id), expand_class=True
            )

        raise ConflictError("Question was modified concurrently, please retry")

    def get_class_question_stats(self, class_id: str) -> QuestionStats:
        """Count a class's questions by status in one aggregate query."""
        if not is_valid_id(class_id):
            raise InvalidArgumentError("Invalid class ID format")

        live = QuestionModel.deleted.is_(False)

        def count_where(condition):
            return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)

        row = (
            self.db.query(
                func.count(QuestionModel.question_id),
                count_where(and_(QuestionModel.status == "pending", live)),
                count_where(and_(QuestionModel.status == "answered", live)),
                count_where(and_(QuestionModel.status == "important", live)),
                count_where(QuestionModel.deleted.is_(True)),
                count_where(and_(QuestionModel.status.in_(PENDING_STATUSES), live)),
            )
            .filter(QuestionModel.class_id == class_id)
            .one()
        )
        total, pending, answered, important, deleted, pending_total = row
        return QuestionStats(
            total=total,
            pending=pending,
            answered=answered,
            important=important,
            deleted=deleted,
            pending_total=pending_total,
        )

    def _validate_question_id(self, question_id: str) -> None:
        if not is_valid_id(question_id):
            raise InvalidArgumentError("Invalid question ID format")

    def _get_question_model(self, question_id: str) -> QuestionModel:
        model = (
            self.db.query(QuestionModel)
            .options(joinedload(QuestionModel.class_))
            .filter(QuestionModel.question_id == question_id)
            .populate_existing()
            .first()
        )
        if not model:
            raise QuestionNotFoundError(question_id)
        return model

    def _adjust_class_counters(self, class_id: str, **deltas: int) -> None:
        """Add deltas to class counter columns with a single UPDATE ... SET n = n + d."""
        values = {
            field: getattr(ClassModel, field) + delta for field, delta in deltas.items()
        }
        self.db.execute(
            update(ClassModel)
            .where(ClassModel.class_id == class_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
