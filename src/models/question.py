from sqlalchemy import Boolean, Column, ForeignKey, Index, String
from sqlalchemy.orm import relationship
from .base import Base


class QuestionModel(Base):
    __tablename__ = "questions"
    __table_args__ = (
        Index("ix_questions_class_deleted_status", "class_id", "deleted", "status"),
        Index("ix_questions_class_created_at", "class_id", "created_at"),
    )

    question_id = Column(String, primary_key=True, index=True)
    text = Column(String, nullable=False)
    author = Column(String, nullable=False)
    author_id = Column(String, ForeignKey("users.user_id"), nullable=False)
    class_id = Column(String, ForeignKey("classes.class_id"), nullable=False)
    class_name = Column(String, nullable=False)
    status = Column(String, nullable=False, default="pending")  # 'pending', 'answered', 'important'
    deleted = Column(Boolean, nullable=False, default=False)
    created_at = Column(String, nullable=False)
    updated_at = Column(String, nullable=False)

    class_ = relationship("ClassModel", back_populates="questions")
