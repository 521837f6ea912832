"""
Structural bounds for each question type.

VALIDATION_RULES is the single source of truth for option counts and
answer shapes. Strategies receive their QuestionRules as an argument and
never read this table directly, so callers can substitute their own.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from config import Settings, get_settings

from .models import QuestionType

# True/False encoding: index 0 is "True", index 1 is "False".
TRUE_FALSE_TRUE_VALUE = 0
TRUE_FALSE_FALSE_VALUE = 1
TRUE_FALSE_OPTIONS = ("True", "False")


@dataclass(frozen=True)
class QuestionRules:
    """Bounds and answer-shape flags for one question type."""

    min_options: int
    max_options: int
    requires_correct_answer: bool
    allows_multiple_correct: bool
    uses_text_answer: bool = False
    uses_json_answer: bool = False
    requires_pairs: bool = False
    requires_sequence: bool = False
    fixed_options: tuple[str, ...] | None = None


VALIDATION_RULES: Mapping[QuestionType, QuestionRules] = MappingProxyType({
    QuestionType.MULTIPLE_CHOICE: QuestionRules(
        min_options=2,
        max_options=6,
        requires_correct_answer=True,
        allows_multiple_correct=True,
    ),
    QuestionType.SINGLE_CHOICE: QuestionRules(
        min_options=2,
        max_options=6,
        requires_correct_answer=True,
        allows_multiple_correct=False,
    ),
    QuestionType.TRUE_FALSE: QuestionRules(
        min_options=2,
        max_options=2,
        requires_correct_answer=True,
        allows_multiple_correct=False,
        fixed_options=TRUE_FALSE_OPTIONS,
    ),
    QuestionType.FILL_BLANK: QuestionRules(
        min_options=0,
        max_options=0,
        requires_correct_answer=True,
        allows_multiple_correct=False,
        uses_text_answer=True,
    ),
    QuestionType.ESSAY: QuestionRules(
        min_options=0,
        max_options=0,
        requires_correct_answer=False,
        allows_multiple_correct=False,
        uses_text_answer=True,
    ),
    QuestionType.MATCHING: QuestionRules(
        min_options=2,
        max_options=10,
        requires_correct_answer=True,
        allows_multiple_correct=False,
        uses_json_answer=True,
        requires_pairs=True,
    ),
    QuestionType.ORDERING: QuestionRules(
        min_options=2,
        max_options=8,
        requires_correct_answer=True,
        allows_multiple_correct=False,
        uses_json_answer=True,
        requires_sequence=True,
    ),
})


@dataclass(frozen=True)
class QuizLimits:
    """Bounds that do not depend on the question type."""

    question_min_length: int = 10
    question_max_length: int = 500
    min_points: float = 1
    max_points: float = 10
    default_points: float = 1
    max_questions: int = 50
    max_total_points: float = 100
    type_variety_min_questions: int = 5

    @classmethod
    def from_settings(cls, settings: Settings) -> QuizLimits:
        return cls(
            question_min_length=settings.question_min_length,
            question_max_length=settings.question_max_length,
            min_points=settings.min_points,
            max_points=settings.max_points,
            default_points=settings.default_points,
            max_questions=settings.max_questions,
            max_total_points=settings.max_total_points,
            type_variety_min_questions=settings.type_variety_min_questions,
        )


def default_limits() -> QuizLimits:
    """Limits built from the cached application settings."""
    return QuizLimits.from_settings(get_settings())
