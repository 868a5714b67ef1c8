from sqlalchemy import Boolean, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from .base import Base


class ClassModel(Base):
    __tablename__ = "classes"

    class_id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    # casefold()ed name, compared for uniqueness among active classes
    name_key = Column(String, nullable=False, index=True)
    description = Column(String, nullable=False)
    subject = Column(String, nullable=False)
    created_by = Column(String, ForeignKey("users.user_id"), index=True, nullable=False)
    created_by_name = Column(String, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    # Denormalized counters, reconciled on read
    total_questions = Column(Integer, nullable=False, default=0)
    active_questions = Column(Integer, nullable=False, default=0)
    pending_questions = Column(Integer, nullable=False, default=0)

    created_at = Column(String, nullable=False)
    updated_at = Column(String, nullable=False)

    # No cascade: questions outlive a deactivated class
    questions = relationship("QuestionModel", back_populates="class_")
