from .base import Base
from .user import UserModel
from .class_model import ClassModel
from .question import QuestionModel

__all__ = ["Base", "UserModel", "ClassModel", "QuestionModel"]
