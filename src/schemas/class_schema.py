"""Class request and response schemas."""

from typing import Optional

from pydantic import Field

from schemas.common import CamelModel


class ClassInfo(CamelModel):
    id: str
    name: str
    description: str
    subject: str
    created_by: str
    created_by_name: str
    is_active: bool
    total_questions: int = 0
    active_questions: int = 0
    pending_questions: int = 0
    created_at: str
    updated_at: str


class CreateClassRequest(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    subject: Optional[str] = None


class UpdateClassRequest(CamelModel):
    """Partial update; only the fields that were sent are applied."""

    name: Optional[str] = None
    description: Optional[str] = None
    subject: Optional[str] = None


class DeactivateClassResponse(CamelModel):
    message: str
    class_info: ClassInfo = Field(alias="class")
