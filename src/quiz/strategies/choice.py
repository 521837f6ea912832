"""
Choice strategies: multiple_choice, single_choice and true_false.

- multiple_choice: options is a list of strings, the key is a list of
  option indices (one or more correct).
- single_choice: same options, the key is exactly one option index.
- true_false: options are exactly "True" and "False", the key is
  0 for True and 1 for False.
"""

from collections.abc import Mapping
from typing import Any

from ..foundation import (
    AnswerKeyError,
    coerce_question_type,
    find_duplicates,
    has_text,
    is_index,
    load_answer_key,
)
from ..models import (
    Diagnostics,
    ErrorCode,
    QuestionType,
    ValidationError,
    ValidationWarning,
    create_error,
    create_warning,
)
from ..rules import (
    TRUE_FALSE_FALSE_VALUE,
    TRUE_FALSE_OPTIONS,
    TRUE_FALSE_TRUE_VALUE,
    QuestionRules,
)
from . import register


def _string_options(question: Mapping[str, Any]) -> list[str] | None:
    """The options list if it is a list of strings, else None."""
    options = question.get("options")
    if not isinstance(options, (list, tuple)):
        return None
    if any(not isinstance(opt, str) for opt in options):
        return None
    return list(options)


def _index_set(value: Any) -> frozenset[int] | None:
    """Normalize a single index or a list of indices to a set, or None if malformed."""
    if is_index(value):
        return frozenset({value})
    if isinstance(value, (list, tuple)) and all(is_index(v) for v in value):
        return frozenset(value)
    return None


def true_false_value(value: Any) -> int | None:
    """
    Map a true/false answer onto the stored encoding.

    Python bools are translated explicitly: True == 1 in Python, and 1
    means False here.
    """
    if isinstance(value, bool):
        return TRUE_FALSE_TRUE_VALUE if value else TRUE_FALSE_FALSE_VALUE
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized == TRUE_FALSE_OPTIONS[TRUE_FALSE_TRUE_VALUE].lower():
            return TRUE_FALSE_TRUE_VALUE
        if normalized == TRUE_FALSE_OPTIONS[TRUE_FALSE_FALSE_VALUE].lower():
            return TRUE_FALSE_FALSE_VALUE
        return None
    if is_index(value) and value in (TRUE_FALSE_TRUE_VALUE, TRUE_FALSE_FALSE_VALUE):
        return value
    return None


# ============================================================================
# Validation
# ============================================================================


def validate_choice_question(question: Mapping[str, Any], rules: QuestionRules) -> Diagnostics:
    """Validate a multiple_choice or single_choice question."""
    errors: list[ValidationError] = []
    warnings: list[ValidationWarning] = []

    options = _string_options(question)
    if options is None:
        errors.append(create_error(
            "options",
            "Options must be an array of text values",
            ErrorCode.OPTIONS_ARRAY_REQUIRED,
        ))
        return Diagnostics(errors, warnings)

    if len(options) < rules.min_options:
        errors.append(create_error(
            "options",
            f"At least {rules.min_options} options are required",
            ErrorCode.INSUFFICIENT_OPTIONS,
        ))

    if len(options) > rules.max_options:
        errors.append(create_error(
            "options",
            f"Maximum {rules.max_options} options allowed",
            ErrorCode.TOO_MANY_OPTIONS,
        ))

    if any(not has_text(opt) for opt in options):
        errors.append(create_error(
            "options",
            "All options must have text",
            ErrorCode.EMPTY_OPTIONS,
        ))

    if find_duplicates(options):
        warnings.append(create_warning(
            "options",
            "Duplicate options detected",
            "Consider making each option unique to avoid confusion",
        ))

    if coerce_question_type(question.get("question_type")) == QuestionType.MULTIPLE_CHOICE:
        _validate_multiple_key(question.get("correct_answer"), options, rules, errors, warnings)
    else:
        _validate_single_key(question.get("correct_answer"), options, errors)

    return Diagnostics(errors, warnings)


def _validate_multiple_key(
    correct: Any,
    options: list[str],
    rules: QuestionRules,
    errors: list[ValidationError],
    warnings: list[ValidationWarning],
) -> None:
    if not isinstance(correct, (list, tuple)) or len(correct) == 0:
        errors.append(create_error(
            "correct_answer",
            "At least one correct answer must be selected",
            ErrorCode.NO_CORRECT_ANSWER,
        ))
        return

    if any(not is_index(i) for i in correct):
        errors.append(create_error(
            "correct_answer",
            "Correct answers must be option positions (0, 1, 2, ...)",
            ErrorCode.INVALID_CORRECT_INDEX,
        ))
        return

    out_of_range = sorted({i for i in correct if i >= len(options)})
    if out_of_range:
        errors.append(create_error(
            "correct_answer",
            f"Correct answer refers to missing options: {', '.join(map(str, out_of_range))}",
            ErrorCode.INVALID_CORRECT_INDEX,
        ))

    selected = set(correct)
    if len(selected) > 1 and not rules.allows_multiple_correct:
        errors.append(create_error(
            "correct_answer",
            "Only one correct answer may be selected",
            ErrorCode.MULTIPLE_CORRECT_NOT_ALLOWED,
        ))

    if len(options) > 1 and selected == set(range(len(options))):
        warnings.append(create_warning(
            "correct_answer",
            "Every option is marked correct",
            "Add at least one incorrect option so the question discriminates",
        ))


def _validate_single_key(correct: Any, options: list[str], errors: list[ValidationError]) -> None:
    if not is_index(correct):
        errors.append(create_error(
            "correct_answer",
            "A correct answer must be selected",
            ErrorCode.NO_CORRECT_ANSWER,
        ))
    elif correct >= len(options):
        errors.append(create_error(
            "correct_answer",
            f"Correct answer refers to a missing option: {correct}",
            ErrorCode.INVALID_CORRECT_INDEX,
        ))


def validate_true_false_question(question: Mapping[str, Any], rules: QuestionRules) -> Diagnostics:
    """Validate a true_false question and its 0 = True / 1 = False key."""
    errors: list[ValidationError] = []
    warnings: list[ValidationWarning] = []
    expected = tuple(rules.fixed_options or TRUE_FALSE_OPTIONS)

    options = _string_options(question)
    if options is None or len(options) != len(expected) or set(options) != set(expected):
        errors.append(create_error(
            "options",
            'True/False questions must have exactly "True" and "False" options',
            ErrorCode.INVALID_TRUEFALSE_OPTIONS,
        ))
    elif tuple(options) != expected:
        warnings.append(create_warning(
            "options",
            f"Options are not listed as {' / '.join(expected)}",
            "The answer key always uses 0 for True and 1 for False; list True first",
        ))

    correct = question.get("correct_answer")
    if isinstance(correct, bool):
        errors.append(create_error(
            "correct_answer",
            "Correct answer must be 0 (True) or 1 (False), not a boolean",
            ErrorCode.INVALID_TRUEFALSE_ANSWER,
        ))
    elif correct not in (TRUE_FALSE_TRUE_VALUE, TRUE_FALSE_FALSE_VALUE) or not is_index(correct):
        errors.append(create_error(
            "correct_answer",
            "Correct answer must be either True (0) or False (1)",
            ErrorCode.INVALID_TRUEFALSE_ANSWER,
        ))

    return Diagnostics(errors, warnings)


# ============================================================================
# Strategies
# ============================================================================


@register(QuestionType.MULTIPLE_CHOICE)
class MultipleChoiceStrategy:
    """Multiple choice: one or more correct option indices, compared as sets."""

    def validate(self, question: Mapping[str, Any], rules: QuestionRules) -> Diagnostics:
        return validate_choice_question(question, rules)

    def is_correct(self, question: Mapping[str, Any], submitted: Any) -> bool:
        key = _index_set(load_answer_key(question.get("correct_answer")))
        if not key:
            raise AnswerKeyError("multiple choice key must be one or more option indices")
        return _index_set(submitted) == key


@register(QuestionType.SINGLE_CHOICE)
class SingleChoiceStrategy:
    """Single choice: exactly one correct option index."""

    def validate(self, question: Mapping[str, Any], rules: QuestionRules) -> Diagnostics:
        return validate_choice_question(question, rules)

    def is_correct(self, question: Mapping[str, Any], submitted: Any) -> bool:
        key = load_answer_key(question.get("correct_answer"))
        if not is_index(key):
            raise AnswerKeyError("single choice key must be an option index")
        return is_index(submitted) and submitted == key


@register(QuestionType.TRUE_FALSE)
class TrueFalseStrategy:
    """True/false: 0 is True, 1 is False."""

    def validate(self, question: Mapping[str, Any], rules: QuestionRules) -> Diagnostics:
        return validate_true_false_question(question, rules)

    def is_correct(self, question: Mapping[str, Any], submitted: Any) -> bool:
        key = question.get("correct_answer")
        if not is_index(key) or key not in (TRUE_FALSE_TRUE_VALUE, TRUE_FALSE_FALSE_VALUE):
            raise AnswerKeyError("true/false key must be 0 (True) or 1 (False)")
        return true_false_value(submitted) == key
