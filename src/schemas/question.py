"""Question request and response schemas."""

from typing import Literal, Optional

from schemas.common import CamelModel

QuestionStatus = Literal["pending", "answered", "important"]


class ClassRef(CamelModel):
    """The owning class, expanded to its name and subject."""

    id: str
    name: str
    subject: str


class QuestionInfo(CamelModel):
    id: str
    text: str
    author: str
    author_id: str
    class_id: str
    class_name: str
    status: QuestionStatus
    deleted: bool
    created_at: str
    updated_at: str
    class_info: Optional[ClassRef] = None


class CreateQuestionRequest(CamelModel):
    text: Optional[str] = None
    class_id: Optional[str] = None


class UpdateQuestionRequest(CamelModel):
    status: Optional[QuestionStatus] = None


class DeleteQuestionResponse(CamelModel):
    message: str
    question: QuestionInfo


class QuestionStats(CamelModel):
    total: int = 0
    pending: int = 0
    answered: int = 0
    important: int = 0
    deleted: int = 0
    pending_total: int = 0
