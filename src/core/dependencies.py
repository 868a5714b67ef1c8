"""Dependency injection module for FastAPI.

This module provides dependency injection functions for FastAPI routes.
Every manager gets a request-scoped DB session.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from core.database import get_db
from utils import class_manager
from utils import question_manager
from utils import user_manager


def get_user_manager(db: Session = Depends(get_db)) -> user_manager.UserManager:
    """Get UserManager instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        UserManager instance.
    """
    return user_manager.UserManager(db)


def get_class_manager(db: Session = Depends(get_db)) -> class_manager.ClassManager:
    """Get ClassManager instance with request-scoped DB session."""
    return class_manager.ClassManager(db)


def get_question_manager(
    db: Session = Depends(get_db),
) -> question_manager.QuestionManager:
    """Get QuestionManager instance with request-scoped DB session."""
    return question_manager.QuestionManager(db)


# Type aliases for dependency injection
UserManagerDep = Annotated[
    user_manager.UserManager, Depends(get_user_manager)
]
ClassManagerDep = Annotated[
    class_manager.ClassManager, Depends(get_class_manager)
]
QuestionManagerDep = Annotated[
    question_manager.QuestionManager, Depends(get_question_manager)
]
