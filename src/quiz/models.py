"""
Data contracts shared by the validator and the scorer.

Questions and answers themselves stay plain mappings; only the
results the engine hands back are typed here.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any


class QuestionType(str, Enum):
    """Supported question types."""

    MULTIPLE_CHOICE = "multiple_choice"
    SINGLE_CHOICE = "single_choice"
    TRUE_FALSE = "true_false"
    FILL_BLANK = "fill_blank"
    ESSAY = "essay"
    MATCHING = "matching"
    ORDERING = "ordering"


class DifficultyLevel(str, Enum):
    """Author-assigned difficulty."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class MediaType(str, Enum):
    """Kinds of media a question may embed."""

    IMAGE = "image"
    AUDIO = "audio"
    VIDEO = "video"


class ErrorCode(str, Enum):
    """Stable machine-readable codes carried by every ValidationError."""

    # Basic fields
    INVALID_QUESTION = "INVALID_QUESTION"
    QUESTION_REQUIRED = "QUESTION_REQUIRED"
    TYPE_REQUIRED = "TYPE_REQUIRED"
    UNSUPPORTED_TYPE = "UNSUPPORTED_TYPE"
    UNKNOWN_TYPE = "UNKNOWN_TYPE"
    POINTS_RANGE = "POINTS_RANGE"
    MEDIA_TYPE_REQUIRED = "MEDIA_TYPE_REQUIRED"
    INVALID_MEDIA_TYPE = "INVALID_MEDIA_TYPE"
    INVALID_DIFFICULTY = "INVALID_DIFFICULTY"

    # Choice
    OPTIONS_ARRAY_REQUIRED = "OPTIONS_ARRAY_REQUIRED"
    INSUFFICIENT_OPTIONS = "INSUFFICIENT_OPTIONS"
    TOO_MANY_OPTIONS = "TOO_MANY_OPTIONS"
    EMPTY_OPTIONS = "EMPTY_OPTIONS"
    NO_CORRECT_ANSWER = "NO_CORRECT_ANSWER"
    INVALID_CORRECT_INDEX = "INVALID_CORRECT_INDEX"
    MULTIPLE_CORRECT_NOT_ALLOWED = "MULTIPLE_CORRECT_NOT_ALLOWED"
    INVALID_TRUEFALSE_OPTIONS = "INVALID_TRUEFALSE_OPTIONS"
    INVALID_TRUEFALSE_ANSWER = "INVALID_TRUEFALSE_ANSWER"

    # Text
    BLANK_ANSWER_REQUIRED = "BLANK_ANSWER_REQUIRED"

    # Matching
    MATCHING_PAIRS_REQUIRED = "MATCHING_PAIRS_REQUIRED"
    INSUFFICIENT_PAIRS = "INSUFFICIENT_PAIRS"
    TOO_MANY_PAIRS = "TOO_MANY_PAIRS"
    INVALID_PAIRS = "INVALID_PAIRS"
    MATCHING_ANSWER_REQUIRED = "MATCHING_ANSWER_REQUIRED"
    INVALID_MATCHING_ANSWER = "INVALID_MATCHING_ANSWER"
    INVALID_MATCHING_INDEX = "INVALID_MATCHING_INDEX"

    # Ordering
    ORDERING_ITEMS_REQUIRED = "ORDERING_ITEMS_REQUIRED"
    INSUFFICIENT_ITEMS = "INSUFFICIENT_ITEMS"
    TOO_MANY_ITEMS = "TOO_MANY_ITEMS"
    EMPTY_ITEMS = "EMPTY_ITEMS"
    DUPLICATE_ITEMS = "DUPLICATE_ITEMS"
    ORDERING_ANSWER_REQUIRED = "ORDERING_ANSWER_REQUIRED"
    INVALID_SEQUENCE = "INVALID_SEQUENCE"
    INVALID_SEQUENCE_ITEMS = "INVALID_SEQUENCE_ITEMS"
    INCOMPLETE_SEQUENCE = "INCOMPLETE_SEQUENCE"
    DUPLICATE_SEQUENCE_ITEMS = "DUPLICATE_SEQUENCE_ITEMS"
    SEQUENCE_LENGTH_MISMATCH = "SEQUENCE_LENGTH_MISMATCH"

    # Quiz
    NO_QUESTIONS = "NO_QUESTIONS"
    INVALID_QUIZ_SETTINGS = "INVALID_QUIZ_SETTINGS"
    TITLE_REQUIRED = "TITLE_REQUIRED"
    TITLE_TOO_SHORT = "TITLE_TOO_SHORT"
    TITLE_TOO_LONG = "TITLE_TOO_LONG"
    DESCRIPTION_REQUIRED = "DESCRIPTION_REQUIRED"
    DESCRIPTION_TOO_SHORT = "DESCRIPTION_TOO_SHORT"
    CATEGORY_REQUIRED = "CATEGORY_REQUIRED"
    DURATION_RANGE = "DURATION_RANGE"
    MAX_ATTEMPTS_RANGE = "MAX_ATTEMPTS_RANGE"
    PASSING_SCORE_RANGE = "PASSING_SCORE_RANGE"


@dataclass(frozen=True)
class ValidationError:
    """A blocking diagnostic."""

    field: str
    message: str
    code: str


@dataclass(frozen=True)
class ValidationWarning:
    """An advisory diagnostic. Never affects validity."""

    field: str
    message: str
    suggestion: str | None = None


@dataclass(frozen=True)
class Diagnostics:
    """Errors and warnings collected by one check."""

    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationWarning] = field(default_factory=list)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a question or a quiz."""

    is_valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationWarning] = field(default_factory=list)

    @classmethod
    def from_diagnostics(cls, diagnostics: Diagnostics) -> ValidationResult:
        return cls(
            is_valid=not diagnostics.errors,
            errors=list(diagnostics.errors),
            warnings=list(diagnostics.warnings),
        )

    @property
    def error_codes(self) -> list[str]:
        return [e.code for e in self.errors]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ScoreResult:
    """Outcome of scoring one submitted answer."""

    is_correct: bool
    points_earned: float
    provisional: bool = False  # essays await manual grading
    fault: str | None = None  # set when the stored answer key could not be used

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def create_error(field: str, message: str, code: ErrorCode | str) -> ValidationError:
    """Build a ValidationError, normalizing the code to its string value."""
    if isinstance(code, ErrorCode):
        code = code.value
    return ValidationError(field=field, message=message, code=code)


def create_warning(field: str, message: str, suggestion: str | None = None) -> ValidationWarning:
    """Build a ValidationWarning."""
    return ValidationWarning(field=field, message=message, suggestion=suggestion)
