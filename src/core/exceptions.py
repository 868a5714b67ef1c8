"""Custom exception classes for the VidyaVichar backend.

Every error a manager can raise on purpose derives from VidyaVicharError and
carries the HTTP status it is reported with. The handlers registered in
app.py render them as ``{"message": ...}``.
"""

from fastapi import status


class VidyaVicharError(Exception):
    """Base exception for all VidyaVichar errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        """Initialize the exception.

        Args:
            message: Human readable message returned to the client.
        """
        self.message = message
        super().__init__(message)


class InvalidArgumentError(VidyaVicharError):
    """Raised for a malformed id or a missing/empty required field."""

    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(VidyaVicharError):
    """Raised when a class name or question text is already taken."""

    status_code = status.HTTP_400_BAD_REQUEST


class ForbiddenError(VidyaVicharError):
    """Raised when a role or ownership check fails."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(VidyaVicharError):
    """Raised when a referenced entity is missing or inactive."""

    status_code = status.HTTP_404_NOT_FOUND


class AuthenticationError(VidyaVicharError):
    """Raised when credentials are wrong or the token cannot be resolved."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ClassNotFoundError(NotFoundError):
    """Raised when a requested class cannot be found."""

    def __init__(self, class_id: str, message: str = "Class not found"):
        self.class_id = class_id
        super().__init__(message)


class QuestionNotFoundError(NotFoundError):
    """Raised when a requested question cannot be found."""

    def __init__(self, question_id: str):
        self.question_id = question_id
        super().__init__("Question not found")
