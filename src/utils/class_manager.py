"""Class management utilities."""

import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple

import pytz
from sqlalchemy import case, func, update
from sqlalchemy.orm import Session

from core.database import SessionLocal
from core.exceptions import (
    ClassNotFoundError,
    ConflictError,
    ForbiddenError,
    InvalidArgumentError,
)
from models.class_model import ClassModel
from models.question import QuestionModel
from schemas.class_schema import ClassInfo
from schemas.user import User
from utils.converters import model_to_class_info
from utils.ids import generate_id, is_valid_id

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "description", "subject")


def fold_name(value: str) -> str:
    """Comparison key for case-insensitive matching of names and search terms."""
    return value.strip().casefold()


def refresh_class_counters(class_id: str, total_questions: int, active_questions: int) -> None:
    """Write recomputed counters back onto the stored class.

    Runs after the response has been sent, on its own session. Failures are
    logged and dropped: the stored counters are only a cache of the question
    collection.
    """
    db = SessionLocal()
    try:
        db.execute(
            update(ClassModel)
            .where(ClassModel.class_id == class_id)
            .values(total_questions=total_questions, active_questions=active_questions)
            .execution_options(synchronize_session=False)
        )
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Failed to refresh counters for class %s", class_id)
    finally:
        db.close()


class ClassManager:
    """Manages class creation, lookup, edits and deactivation."""

    def __init__(self, db: Session):
        self.db = db

    def create_class(
        self,
        principal: User,
        name: Optional[str],
        description: Optional[str],
        subject: Optional[str],
    ) -> ClassInfo:
        """Create a new class owned by the requesting teacher.

        Raises:
            ForbiddenError: If the principal is not a teacher.
            InvalidArgumentError: If any field is empty after trimming.
            ConflictError: If an active class already uses the name.
        """
        if principal.role != "teacher":
            raise ForbiddenError("Only teachers can create classes")

        name, description, subject = (
            (value or "").strip() for value in (name, description, subject)
        )
        if not name or not description or not subject:
            raise InvalidArgumentError("Name, description, and subject are required")

        self._ensure_name_available(name)

        now = datetime.now(pytz.utc).isoformat()
        class_model = ClassModel(
            class_id=generate_id(),
            name=name,
            name_key=fold_name(name),
            description=description,
            subject=subject,
            created_by=principal.user_id,
            created_by_name=principal.name,
            is_active=True,
            total_questions=0,
            active_questions=0,
            pending_questions=0,
            created_at=now,
            updated_at=now,
        )
        self.db.add(class_model)
        self.db.commit()
        self.db.refresh(class_model)
        logger.info("Class %s '%s' created by %s", class_model.class_id, name, principal.user_id)
        return model_to_class_info(class_model)

    def list_classes(self, principal: User, search: Optional[str] = None) -> List[ClassInfo]:
        """List active classes, newest first, optionally filtered by a search term.

        The term matches case-insensitively as a substring of the name, the
        subject or the description.
        """
        models = (
            self.db.query(ClassModel)
            .filter(ClassModel.is_active.is_(True))
            .order_by(ClassModel.created_at.desc())
            .all()
        )
        # SQLite lower() only folds ASCII, so match in Python with casefold()
        term = fold_name(search or "")
        if term:
            models = [
                m for m in models
                if any(term in fold_name(value) for value in (m.name, m.subject, m.description))
            ]
        return self._with_fresh_counters(models)

    def list_my_classes(self, principal: User) -> List[ClassInfo]:
        if principal.role != "teacher":
            raise ForbiddenError("Only teachers can access this endpoint")
        models = (
            self.db.query(ClassModel)
            .filter(
                ClassModel.created_by == principal.user_id,
                ClassModel.is_active.is_(True),
            )
            .order_by(ClassModel.created_at.desc())
            .all()
        )
        return self._with_fresh_counters(models)

    def get_class(self, principal: User, class_id: str) -> ClassInfo:
        """Get an active class with counters computed from its questions.

        The caller is responsible for persisting the recomputed counters
        (see refresh_class_counters).

        Raises:
            InvalidArgumentError: If the id is malformed.
            ClassNotFoundError: If the class is missing or inactive.
        """
        model = self._get_class_model(class_id)
        if not model.is_active:
            raise ClassNotFoundError(class_id, "Class is not active")
        total, active = self._question_counts([model.class_id]).get(model.class_id, (0, 0))
        return model_to_class_info(model, total_questions=total, active_questions=active)

    def update_class(self, principal: User, class_id: str, changes: Dict[str, Optional[str]]) -> ClassInfo:
        """Apply a partial update to a class.

        Args:
            principal: The requesting user; must be the teacher who created it.
            class_id: Class ID.
            changes: Only the fields that were sent. Each one must be
                non-empty after trimming.

        Raises:
            InvalidArgumentError: If the id is malformed or a field is empty.
            ClassNotFoundError: If the class does not exist.
            ForbiddenError: If the principal is not the creating teacher.
            ConflictError: If the new name is taken by another active class.
        """
        model = self._get_class_model(class_id)
        self._ensure_owner(principal, model, "update")

        updates = {}
        for field in EDITABLE_FIELDS:
            if field not in changes:
                continue
            value = (changes[field] or "").strip()
            if not value:
                raise InvalidArgumentError(f"Class {field} cannot be empty")
            updates[field] = value

        if "name" in updates:
            self._ensure_name_available(updates["name"], exclude_class_id=model.class_id)

        for field, value in updates.items():
            setattr(model, field, value)
        if "name" in updates:
            model.name_key = fold_name(updates["name"])
        model.updated_at = datetime.now(pytz.utc).isoformat()
        self.db.commit()
        self.db.refresh(model)
        logger.info("Class %s updated (%s)", model.class_id, ", ".join(updates) or "no fields")
        return model_to_class_info(model)

    def deactivate_class(self, principal: User, class_id: str) -> ClassInfo:
        """Soft-delete a class. Its questions are left untouched."""
        model = self._get_class_model(class_id)
        self._ensure_owner(principal, model, "deactivate")

        model.is_active = False
        model.updated_at = datetime.now(pytz.utc).isoformat()
        self.db.commit()
        self.db.refresh(model)
        logger.info("Class %s deactivated by %s", model.class_id, principal.user_id)
        return model_to_class_info(model)

    def _get_class_model(self, class_id: str) -> ClassModel:
        if not is_valid_id(class_id):
            raise InvalidArgumentError("Invalid class ID format")
        model = (
            self.db.query(ClassModel)
            .filter(ClassModel.class_id == class_id)
            .first()
        )
        if not model:
            raise ClassNotFoundError(class_id)
        return model

    def _ensure_owner(self, principal: User, model: ClassModel, action: str) -> None:
        if principal.role != "teacher" or model.created_by != principal.user_id:
            raise ForbiddenError(f"Only the class creator can {action} this class")

    def _ensure_name_available(self, name: str, exclude_class_id: Optional[str] = None) -> None:
        query = self.db.query(ClassModel).filter(
            ClassModel.is_active.is_(True),
            ClassModel.name_key == fold_name(name),
        )
        if exclude_class_id:
            query = query.filter(ClassModel.class_id != exclude_class_id)
        if query.first():
            raise ConflictError("A class with this name already exists")

    def _question_counts(self, class_ids: List[str]) -> Dict[str, Tuple[int, int]]:
        """Count (all, not deleted) questions per class in one grouped query."""
        if not class_ids:
            return {}
        rows = (
            self.db.query(
                QuestionModel.class_id,
                func.count(QuestionModel.question_id),
                func.sum(case((QuestionModel.deleted.is_(False), 1), else_=0)),
            )
            .filter(QuestionModel.class_id.in_(class_ids))
            .group_by(QuestionModel.class_id)
            .all()
        )
        return {class_id: (total, active or 0) for class_id, total, active in rows}

    def _with_fresh_counters(self, models: List[ClassModel]) -> List[ClassInfo]:
        counts = self._question_counts([m.class_id for m in models])
        results = []
        for model in models:
            total, active = counts.get(model.class_id, (0, 0))
            results.append(
                model_to_class_info(model, total_questions=total, active_questions=active)
            )
        return results
