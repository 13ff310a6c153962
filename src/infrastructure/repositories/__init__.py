from .questions import QuestionRepository
from .users import UserDirectory

__all__ = ["QuestionRepository", "UserDirectory"]
