"""
Question and quiz validation.

validate_question() runs the generic field checks, then hands the
question to the strategy registered for its type. validate_quiz_form()
does that for every question of a quiz and adds checks that only make
sense across questions. Nothing here raises for malformed input: every
problem becomes a ValidationError or ValidationWarning.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from typing import Any

from loguru import logger

from .foundation import (
    coerce_question_type,
    combine_validation_results,
    has_text,
    is_number,
    points_of,
    validate_basic_fields,
)
from .models import (
    Diagnostics,
    ErrorCode,
    QuestionType,
    ValidationError,
    ValidationResult,
    ValidationWarning,
    create_error,
    create_warning,
)
from .rules import VALIDATION_RULES, QuestionRules, QuizLimits, default_limits
from .strategies import get_strategy

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 200
DESCRIPTION_MIN_LENGTH = 10
DURATION_MAX_MINUTES = 480  # 8 hours
MAX_ATTEMPTS_LIMIT = 10


@dataclass(frozen=True)
class ValidationSummary:
    """Per-question validity counts for a quiz."""

    total_questions: int
    valid_questions: int
    questions_with_warnings: int
    questions_with_errors: int


def validate_question(
    question: Any,
    rules: Mapping[QuestionType, QuestionRules] | None = None,
    limits: QuizLimits | None = None,
) -> ValidationResult:
    """
    Validate a single authored question.

    Args:
        question: Question mapping as collected by the editing form
        rules: Per-type rules table (defaults to VALIDATION_RULES)
        limits: Type-independent bounds (defaults to configured limits)

    Returns:
        ValidationResult with is_valid, errors and warnings
    """
    rules = VALIDATION_RULES if rules is None else rules
    basic = validate_basic_fields(question, limits)

    if not isinstance(question, Mapping):
        return ValidationResult.from_diagnostics(basic)

    question_type = coerce_question_type(question.get("question_type"))
    if question_type is None:
        return ValidationResult.from_diagnostics(basic)

    return ValidationResult.from_diagnostics(
        combine_validation_results(basic, _validate_by_type(question, question_type, rules))
    )


def _validate_by_type(
    question: Mapping[str, Any],
    question_type: QuestionType,
    rules: Mapping[QuestionType, QuestionRules],
) -> Diagnostics:
    type_rules = rules.get(question_type)
    if type_rules is None:
        return Diagnostics(errors=[create_error(
            "question_type",
            f"Unsupported question type: {question_type.value}",
            ErrorCode.UNSUPPORTED_TYPE,
        )])

    strategy = get_strategy(question_type)
    if strategy is None:
        return Diagnostics(errors=[create_error(
            "question_type",
            f"Unknown question type: {question_type.value}",
            ErrorCode.UNKNOWN_TYPE,
        )])

    return strategy.validate(question, type_rules)


def validate_quiz_form(
    questions: Any,
    rules: Mapping[QuestionType, QuestionRules] | None = None,
    limits: QuizLimits | None = None,
) -> ValidationResult:
    """
    Validate every question of a quiz plus quiz-level structure.

    Diagnostics from question n (1-based) have their field prefixed with
    "question_<n>." so the form can place them.
    """
    limits = limits or default_limits()

    if not isinstance(questions, Sequence) or isinstance(questions, (str, bytes)) or not questions:
        return ValidationResult(
            is_valid=False,
            errors=[create_error(
                "questions",
                "At least one question is required",
                ErrorCode.NO_QUESTIONS,
            )],
        )

    errors: list[ValidationError] = []
    warnings: list[ValidationWarning] = []

    for number, question in enumerate(questions, start=1):
        result = validate_question(question, rules, limits)
        prefix = f"question_{number}."
        errors.extend(replace(e, field=prefix + e.field) for e in result.errors)
        warnings.extend(replace(w, field=prefix + w.field) for w in result.warnings)

    quiz_level = validate_quiz_level(questions, limits)
    errors.extend(quiz_level.errors)
    warnings.extend(quiz_level.warnings)

    logger.debug(
        f"Validated quiz form: {len(questions)} questions, "
        f"{len(errors)} errors, {len(warnings)} warnings"
    )
    return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)


def validate_quiz_level(questions: Sequence[Any], limits: QuizLimits) -> Diagnostics:
    """Checks on relationships between questions and overall quiz shape."""
    warnings: list[ValidationWarning] = []
    mappings = [q for q in questions if isinstance(q, Mapping)]

    texts = [q["question"].strip().lower() for q in mappings if has_text(q.get("question"))]
    if len(set(texts)) < len(texts):
        warnings.append(create_warning(
            "questions",
            "Some questions appear to be duplicates",
            "Review questions for potential duplicates",
        ))

    types = {coerce_question_type(q.get("question_type")) for q in mappings} - {None}
    if len(types) == 1 and len(questions) > limits.type_variety_min_questions:
        warnings.append(create_warning(
            "questions",
            "Quiz uses only one question type",
            "Consider adding variety with different question types",
        ))

    total_points = 0.0
    for q in mappings:
        points = points_of(q, limits.default_points)
        if points is not None:
            total_points += points
    if total_points > limits.max_total_points:
        warnings.append(create_warning(
            "questions",
            f"Total quiz points exceed {limits.max_total_points:g}",
            "Consider if this point total is appropriate for your grading scale",
        ))

    if len(questions) > limits.max_questions:
        warnings.append(create_warning(
            "questions",
            "Quiz is quite long",
            "Consider breaking into multiple shorter quizzes",
        ))

    return Diagnostics([], warnings)


def validate_quiz_settings(quiz: Any) -> ValidationResult:
    """
    Validate quiz metadata: title, description, category, duration,
    attempts and passing score.
    """
    errors: list[ValidationError] = []

    if not isinstance(quiz, Mapping):
        return ValidationResult(
            is_valid=False,
            errors=[create_error("quiz", "Quiz settings must be an object", ErrorCode.INVALID_QUIZ_SETTINGS)],
        )

    title = quiz.get("title")
    if not has_text(title):
        errors.append(create_error("title", "Quiz title is required", ErrorCode.TITLE_REQUIRED))
    elif len(title.strip()) < TITLE_MIN_LENGTH:
        errors.append(create_error(
            "title",
            f"Quiz title must be at least {TITLE_MIN_LENGTH} characters",
            ErrorCode.TITLE_TOO_SHORT,
        ))
    elif len(title.strip()) > TITLE_MAX_LENGTH:
        errors.append(create_error(
            "title",
            f"Quiz title must be less than {TITLE_MAX_LENGTH} characters",
            ErrorCode.TITLE_TOO_LONG,
        ))

    description = quiz.get("description")
    if not has_text(description):
        errors.append(create_error(
            "description", "Quiz description is required", ErrorCode.DESCRIPTION_REQUIRED
        ))
    elif len(description.strip()) < DESCRIPTION_MIN_LENGTH:
        errors.append(create_error(
            "description",
            f"Description must be at least {DESCRIPTION_MIN_LENGTH} characters",
            ErrorCode.DESCRIPTION_TOO_SHORT,
        ))

    if not has_text(quiz.get("category")):
        errors.append(create_error("category", "Please select a category", ErrorCode.CATEGORY_REQUIRED))

    duration = quiz.get("duration_minutes")
    if not is_number(duration) or not 1 <= duration <= DURATION_MAX_MINUTES:
        errors.append(create_error(
            "duration_minutes",
            f"Duration must be between 1 and {DURATION_MAX_MINUTES} minutes",
            ErrorCode.DURATION_RANGE,
        ))

    max_attempts = quiz.get("max_attempts")
    if max_attempts is not None and (
        not is_number(max_attempts) or not 0 <= max_attempts <= MAX_ATTEMPTS_LIMIT
    ):
        errors.append(create_error(
            "max_attempts",
            f"Max attempts must be between 0 and {MAX_ATTEMPTS_LIMIT}",
            ErrorCode.MAX_ATTEMPTS_RANGE,
        ))

    passing_score = quiz.get("passing_score")
    if passing_score is not None and (
        not is_number(passing_score) or not 0 <= passing_score <= 100
    ):
        errors.append(create_error(
            "passing_score",
            "Passing score must be a percentage between 0 and 100",
            ErrorCode.PASSING_SCORE_RANGE,
        ))

    return ValidationResult(is_valid=not errors, errors=errors)


def get_validation_summary(
    questions: Sequence[Any],
    rules: Mapping[QuestionType, QuestionRules] | None = None,
    limits: QuizLimits | None = None,
) -> ValidationSummary:
    """Count valid, warned and failing questions without quiz-level checks."""
    if not isinstance(questions, Sequence) or isinstance(questions, (str, bytes)):
        return ValidationSummary(0, 0, 0, 0)

    limits = limits or default_limits()
    results = [validate_question(q, rules, limits) for q in questions]
    return ValidationSummary(
        total_questions=len(results),
        valid_questions=sum(1 for r in results if r.is_valid),
        questions_with_warnings=sum(1 for r in results if r.warnings),
        questions_with_errors=sum(1 for r in results if not r.is_valid),
    )
