"""User database model.

This module defines the User database model using SQLAlchemy.
"""

from sqlalchemy import Column, String
from .base import Base


class UserModel(Base):
    """User database model."""

    __tablename__ = "users"

    user_id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)  # stored lowercased
    password_hash = Column(String, nullable=False)
    role = Column(String, nullable=False)  # 'student', 'teacher', or 'TA'
    created_at = Column(String, nullable=False)  # ISO format string
