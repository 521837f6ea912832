"""
Question type strategies.

Each question type has one strategy class that owns:
- validate(): structural checks against the type's QuestionRules
- is_correct(): comparison of a submitted answer with the stored key

Strategies register themselves with @register. Every QuestionType must
have a strategy; importing this package fails otherwise.
"""

from typing import TYPE_CHECKING

from ..models import QuestionType

if TYPE_CHECKING:
    from .base import QuestionStrategy


# Strategy registry - populated by @register decorator
STRATEGIES: dict[QuestionType, "QuestionStrategy"] = {}


def register(question_type: QuestionType):
    """Decorator to register a question strategy."""
    def decorator(cls):
        STRATEGIES[question_type] = cls()
        return cls
    return decorator


def get_strategy(question_type: "str | QuestionType") -> "QuestionStrategy | None":
    """Get the strategy for a question type."""
    if isinstance(question_type, str) and not isinstance(question_type, QuestionType):
        try:
            question_type = QuestionType(question_type)
        except ValueError:
            return None
    return STRATEGIES.get(question_type)


# Import strategies to trigger registration
from . import choice
from . import text
from . import complex_types

_missing = [t.value for t in QuestionType if t not in STRATEGIES]
if _missing:
    raise RuntimeError(f"No strategy registered for question types: {', '.join(_missing)}")

__all__ = [
    "STRATEGIES",
    "get_strategy",
    "register",
]
