"""User management utilities.

This module provides user management functionality including user storage,
password hashing and credential checks. It backs the principal resolver in
api/routes/auth.py.
"""

import logging
from typing import Optional

import bcrypt
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from config import BCRYPT_ROUNDS, USER_ROLES
from core.exceptions import AuthenticationError, ConflictError, InvalidArgumentError
from models.user import UserModel
from schemas.user import User
from utils.converters import model_to_user, user_to_model
from utils.ids import generate_id

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_PASSWORD_BYTES = 72


def _password_bytes(password: str) -> bytes:
    password_bytes = password.encode("utf-8")
    if len(password_bytes) > BCRYPT_MAX_PASSWORD_BYTES:
        password_bytes = password_bytes[:BCRYPT_MAX_PASSWORD_BYTES]
    return password_bytes


class UserManager:
    """Manages user data persistence and operations using SQLAlchemy."""

    def __init__(self, db: Session):
        """Initialize UserManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain text password.

        Returns:
            Hashed password (bcrypt hash string).
        """
        salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
        return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against a bcrypt hash.

        Args:
            plain_password: Plain text password to verify.
            hashed_password: Bcrypt hash string to verify against.

        Returns:
            True if password matches, False otherwise.
        """
        try:
            return bcrypt.checkpw(
                _password_bytes(plain_password), hashed_password.encode("utf-8")
            )
        except ValueError as e:
            logger.error("Password verification error: %s", e)
            return False

    def create_user(self, name: str, email: str, password: str, role: str) -> User:
        """Create a new user.

        Args:
            name: Display name.
            email: Login email, matched case-insensitively.
            password: Plain text password.
            role: User role ('student', 'teacher', or 'TA').

        Returns:
            Created User object.

        Raises:
            InvalidArgumentError: If a field is empty or the role is unknown.
            ConflictError: If the email is already registered.
        """
        name = (name or "").strip()
        email = (email or "").strip().lower()
        if not name or not email or not password:
            raise InvalidArgumentError("Name, email, and password are required")
        if role not in USER_ROLES:
            raise InvalidArgumentError(
                f"Invalid role: {role}. Must be one of {', '.join(USER_ROLES)}."
            )

        existing = self.db.query(UserModel).filter(UserModel.email == email).first()
        if existing:
            raise ConflictError("User already exists")

        user = User(
            user_id=generate_id(),
            name=name,
            email=email,
            role=role,
            password_hash=self.hash_password(password),
        )

        # Two concurrent registrations can both pass the check above; the
        # unique constraint on email catches the loser.
        try:
            model = user_to_model(user)
            self.db.add(model)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError("User already exists") from e

        logger.info("Created user %s (%s)", user.user_id, role)
        return user

    def authenticate(self, email: str, password: str) -> User:
        """Return the user for a correct email/password pair.

        Raises:
            AuthenticationError: If the email is unknown or the password is wrong.
        """
        model = (
            self.db.query(UserModel)
            .filter(UserModel.email == (email or "").strip().lower())
            .first()
        )
        if model is None or not self.verify_password(password or "", model.password_hash):
            raise AuthenticationError("Invalid email or password")
        return model_to_user(model)

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        """Get a user by user ID.

        Args:
            user_id: User ID to look up.

        Returns:
            User object if found, None otherwise.
        """
        model = self.db.query(UserModel).filter(UserModel.user_id == user_id).first()
        if model:
            return model_to_user(model)
        return None
