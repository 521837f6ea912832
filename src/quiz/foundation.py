"""
Generic checks and shape helpers reused by every question strategy.
"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from typing import Any

from .models import (
    DifficultyLevel,
    Diagnostics,
    ErrorCode,
    MediaType,
    QuestionType,
    ValidationError,
    ValidationWarning,
    create_error,
    create_warning,
)
from .rules import QuizLimits, default_limits


class AnswerKeyError(ValueError):
    """A stored correct answer could not be interpreted."""


# ============================================================================
# Shape helpers
# ============================================================================


def coerce_question_type(value: Any) -> QuestionType | None:
    """Map a raw question_type tag onto QuestionType, or None if it is not an exact tag."""
    if isinstance(value, QuestionType):
        return value
    if not isinstance(value, str):
        return None
    try:
        return QuestionType(value)
    except ValueError:
        return None


def is_index(value: Any) -> bool:
    """True for non-negative ints. bool is excluded even though it subclasses int."""
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def has_text(value: Any) -> bool:
    """True for strings with at least one non-whitespace character."""
    return isinstance(value, str) and bool(value.strip())


def find_duplicates(items: list[Any]) -> list[Any]:
    """Items that occur more than once, in first-repeat order."""
    seen: set[Any] = set()
    duplicates: list[Any] = []
    for item in items:
        if item in seen and item not in duplicates:
            duplicates.append(item)
        seen.add(item)
    return duplicates


def points_of(question: Mapping[str, Any], default: float) -> float | None:
    """
    Point value of a question.

    Returns the default when points are unset and None when they are set
    to something that is not a finite number.
    """
    points = question.get("points")
    if points is None:
        return default
    if is_number(points):
        return points
    return None


def load_answer_key(value: Any) -> Any:
    """
    Return a stored answer key as Python data.

    Keys arrive either already deserialized or as JSON text (the storage
    layer keeps matching and ordering keys in a JSON column). Text that is
    not valid JSON raises AnswerKeyError.
    """
    if isinstance(value, (str, bytes, bytearray)):
        try:
            return json.loads(value)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise AnswerKeyError(f"answer key is not valid JSON: {e}") from e
        except RecursionError as e:
            raise AnswerKeyError("answer key is nested too deeply to read") from e
    return value


# ============================================================================
# Result aggregation
# ============================================================================


def combine_validation_results(*parts: Diagnostics) -> Diagnostics:
    """Concatenate diagnostics in order. Duplicates are kept."""
    errors: list[ValidationError] = []
    warnings: list[ValidationWarning] = []
    for part in parts:
        errors.extend(part.errors)
        warnings.extend(part.warnings)
    return Diagnostics(errors=errors, warnings=warnings)


def is_validation_successful(errors: list[ValidationError]) -> bool:
    return len(errors) == 0


# ============================================================================
# Basic field validation
# ============================================================================


def validate_basic_fields(
    question: Any,
    limits: QuizLimits | None = None,
) -> Diagnostics:
    """
    Checks every question gets regardless of type.

    Covers prompt text, the question_type tag, points, media and
    difficulty. A missing or unrecognized type is reported here; the
    orchestrator then skips type-specific validation.
    """
    limits = limits or default_limits()
    errors: list[ValidationError] = []
    warnings: list[ValidationWarning] = []

    if not isinstance(question, Mapping):
        errors.append(create_error(
            "question",
            "Question must be an object with named fields",
            ErrorCode.INVALID_QUESTION,
        ))
        return Diagnostics(errors, warnings)

    text = question.get("question")
    if not has_text(text):
        errors.append(create_error(
            "question",
            "Question text is required",
            ErrorCode.QUESTION_REQUIRED,
        ))
    elif len(text) < limits.question_min_length:
        warnings.append(create_warning(
            "question",
            "Question might be too short",
            "Consider adding more context to help students understand what is being asked",
        ))
    elif len(text) > limits.question_max_length:
        warnings.append(create_warning(
            "question",
            "Question is quite long",
            "Consider breaking this into multiple questions or simplifying the language",
        ))

    raw_type = question.get("question_type")
    if raw_type is None or (isinstance(raw_type, str) and not raw_type.strip()):
        errors.append(create_error(
            "question_type",
            "Question type is required",
            ErrorCode.TYPE_REQUIRED,
        ))
    elif coerce_question_type(raw_type) is None:
        errors.append(create_error(
            "question_type",
            f"Unsupported question type: {raw_type}",
            ErrorCode.UNSUPPORTED_TYPE,
        ))

    points = question.get("points")
    if points is not None:
        if not is_number(points) or not limits.min_points <= points <= limits.max_points:
            errors.append(create_error(
                "points",
                f"Points must be between {limits.min_points:g} and {limits.max_points:g}",
                ErrorCode.POINTS_RANGE,
            ))

    media_url = question.get("media_url")
    media_type = question.get("media_type")
    if media_url and not media_type:
        errors.append(create_error(
            "media_type",
            "Media type is required when media URL is provided",
            ErrorCode.MEDIA_TYPE_REQUIRED,
        ))
    elif media_type and (
        not isinstance(media_type, str) or media_type not in {m.value for m in MediaType}
    ):
        errors.append(create_error(
            "media_type",
            f"Unsupported media type: {media_type}",
            ErrorCode.INVALID_MEDIA_TYPE,
        ))

    difficulty = question.get("difficulty_level")
    if difficulty is not None and (
        not isinstance(difficulty, str) or difficulty not in {d.value for d in DifficultyLevel}
    ):
        errors.append(create_error(
            "difficulty_level",
            "Difficulty must be one of: easy, medium, hard",
            ErrorCode.INVALID_DIFFICULTY,
        ))

    return Diagnostics(errors, warnings)
