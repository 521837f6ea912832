"""
Text strategies: fill_blank and essay.

Both take free text instead of options. Fill-in-the-blank answers are
matched case-insensitively; essays are never auto-graded.
"""

import re
from collections.abc import Mapping
from typing import Any

from ..foundation import AnswerKeyError, has_text, is_number
from ..models import (
    Diagnostics,
    ErrorCode,
    QuestionType,
    ValidationError,
    ValidationWarning,
    create_error,
    create_warning,
)
from ..rules import QuestionRules
from . import register

BLANK_PATTERN = re.compile(r"_{3,}")
MAX_BLANKS = 3
FILL_BLANK_ANSWER_MAX_LENGTH = 100
FILL_BLANK_ANSWER_MIN_LENGTH = 2
ESSAY_MIN_POINTS = 3
ESSAY_PROMPT_MIN_LENGTH = 50
ESSAY_SAMPLE_MIN_LENGTH = 100
ESSAY_SAMPLE_MAX_LENGTH = 2000


def stored_text_answer(question: Mapping[str, Any]) -> str | None:
    """The stored text answer; correct_answer_text wins over correct_answer."""
    for key in ("correct_answer_text", "correct_answer"):
        value = question.get(key)
        if has_text(value):
            return value
    return None


def normalize_text_answer(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip().lower()


# ============================================================================
# Validation
# ============================================================================


def validate_fill_blank_question(question: Mapping[str, Any], rules: QuestionRules) -> Diagnostics:
    """Validate a fill-in-the-blank question."""
    errors: list[ValidationError] = []
    warnings: list[ValidationWarning] = []
    prompt = question.get("question")
    prompt = prompt if isinstance(prompt, str) else ""

    blanks = BLANK_PATTERN.findall(prompt)
    if not blanks:
        warnings.append(create_warning(
            "question",
            "Consider adding underscores (___) to indicate where students should fill in the blank",
            "Use _____ to show students exactly where to type their answer",
        ))
    elif len(blanks) > MAX_BLANKS:
        warnings.append(create_warning(
            "question",
            "Too many blanks in a single question",
            "Consider splitting into multiple fill-in-the-blank questions for clarity",
        ))

    answer = stored_text_answer(question)
    if answer is None:
        if rules.requires_correct_answer:
            errors.append(create_error(
                "correct_answer",
                "Correct answer text is required for fill-in-the-blank questions",
                ErrorCode.BLANK_ANSWER_REQUIRED,
            ))
        return Diagnostics(errors, warnings)

    if len(answer) > FILL_BLANK_ANSWER_MAX_LENGTH:
        warnings.append(create_warning(
            "correct_answer",
            "Answer is quite long for a fill-in-the-blank",
            "Consider if this would be better as an essay question",
        ))
    elif len(answer.strip()) < FILL_BLANK_ANSWER_MIN_LENGTH:
        warnings.append(create_warning(
            "correct_answer",
            "Very short answer - ensure it provides sufficient context",
            "Consider if students will understand what is expected",
        ))

    return Diagnostics(errors, warnings)


def validate_essay_question(question: Mapping[str, Any], rules: QuestionRules) -> Diagnostics:
    """Validate an essay question. No key is required, only advice is given."""
    warnings: list[ValidationWarning] = []
    sample = stored_text_answer(question)
    has_guidelines = has_text(question.get("explanation"))

    if sample is None and not has_guidelines:
        warnings.append(create_warning(
            "explanation",
            "Consider providing a grading rubric or sample answer",
            "This helps ensure consistent grading and provides guidance to students",
        ))

    prompt = question.get("question")
    if isinstance(prompt, str) and len(prompt) < ESSAY_PROMPT_MIN_LENGTH:
        warnings.append(create_warning(
            "question",
            "Essay question might benefit from more context",
            "Detailed questions help students understand expectations",
        ))

    if not has_guidelines:
        warnings.append(create_warning(
            "explanation",
            "Essay questions benefit from grading guidelines",
            "Provide key points or criteria that should be included in good answers",
        ))

    if sample is not None:
        if len(sample) < ESSAY_SAMPLE_MIN_LENGTH:
            warnings.append(create_warning(
                "correct_answer",
                "Sample answer is quite short",
                "Consider providing a more comprehensive sample answer",
            ))
        elif len(sample) > ESSAY_SAMPLE_MAX_LENGTH:
            warnings.append(create_warning(
                "correct_answer",
                "Sample answer is very long",
                "Consider if this question scope is appropriate for the assessment",
            ))

    points = question.get("points")
    if is_number(points) and points < ESSAY_MIN_POINTS:
        warnings.append(create_warning(
            "points",
            "Essay questions typically warrant more points",
            "Consider if the point value reflects the effort required",
        ))

    return Diagnostics([], warnings)


# ============================================================================
# Strategies
# ============================================================================


@register(QuestionType.FILL_BLANK)
class FillBlankStrategy:
    """Fill in the blank: trimmed, case-insensitive text match."""

    def validate(self, question: Mapping[str, Any], rules: QuestionRules) -> Diagnostics:
        return validate_fill_blank_question(question, rules)

    def is_correct(self, question: Mapping[str, Any], submitted: Any) -> bool:
        expected = stored_text_answer(question)
        if expected is None:
            raise AnswerKeyError("fill-in-the-blank question has no stored answer")
        return normalize_text_answer(submitted) == normalize_text_answer(expected)


@register(QuestionType.ESSAY)
class EssayStrategy:
    """Essay: any non-blank response counts, pending manual grading."""

    def validate(self, question: Mapping[str, Any], rules: QuestionRules) -> Diagnostics:
        return validate_essay_question(question, rules)

    def is_correct(self, question: Mapping[str, Any], submitted: Any) -> bool:
        return has_text(submitted)
