"""
Complex strategies: matching and ordering.

Matching questions list {left, right} pairs; the key maps each left
index to the index of the right item it belongs with.

Ordering questions list items; the key is the full item sequence in
its correct order.

Both keys may be stored as JSON text and are deserialized on use.
"""

import re
from collections.abc import Mapping
from typing import Any

from ..foundation import (
    AnswerKeyError,
    combine_validation_results,
    find_duplicates,
    has_text,
    is_number,
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
from ..rules import QuestionRules
from . import register

ORDERING_ITEM_MAX_LENGTH = 100
COMPLEX_MIN_POINTS = 2

_INT_TEXT = re.compile(r"^-?\d+$")


def _to_int(value: Any) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and _INT_TEXT.match(value.strip()):
        return int(value.strip())
    return None


def matching_key(value: Any) -> dict[int, int]:
    """
    Normalize a matching key to {left_index: right_index}.

    Accepts a mapping (keys may be digit strings, as JSON objects produce)
    or a list whose position is the left index. Anything else raises
    AnswerKeyError. Index bounds are not checked here.
    """
    if isinstance(value, Mapping):
        pairs = value.items()
    elif isinstance(value, (list, tuple)):
        pairs = enumerate(value)
    else:
        raise AnswerKeyError(f"matching key must be a mapping or list, got {type(value).__name__}")

    key: dict[int, int] = {}
    for left, right in pairs:
        left_idx, right_idx = _to_int(left), _to_int(right)
        if left_idx is None or right_idx is None:
            raise AnswerKeyError(f"matching key entry is not an index pair: {left!r} -> {right!r}")
        key[left_idx] = right_idx
    return key


def ordering_key(value: Any) -> list[str]:
    """Normalize an ordering key to a list of item strings, or raise AnswerKeyError."""
    if not isinstance(value, (list, tuple)) or any(not isinstance(item, str) for item in value):
        raise AnswerKeyError("ordering key must be a list of item texts")
    return list(value)


def _is_blank_answer(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (Mapping, list, tuple)):
        return len(value) == 0
    return False


# ============================================================================
# Validation
# ============================================================================


def validate_matching_question(question: Mapping[str, Any], rules: QuestionRules) -> Diagnostics:
    """Validate matching pairs and the left -> right key."""
    errors: list[ValidationError] = []
    warnings: list[ValidationWarning] = []

    options = question.get("options")
    if not isinstance(options, (list, tuple)):
        errors.append(create_error(
            "options",
            "Matching questions require an array of pairs",
            ErrorCode.MATCHING_PAIRS_REQUIRED,
        ))
        return Diagnostics(errors, warnings)

    if len(options) < rules.min_options:
        errors.append(create_error(
            "options",
            f"At least {rules.min_options} matching pairs are required",
            ErrorCode.INSUFFICIENT_PAIRS,
        ))

    if len(options) > rules.max_options:
        errors.append(create_error(
            "options",
            f"Maximum {rules.max_options} matching pairs allowed",
            ErrorCode.TOO_MANY_PAIRS,
        ))

    valid_pairs = [
        pair for pair in options
        if isinstance(pair, Mapping) and has_text(pair.get("left")) and has_text(pair.get("right"))
    ]
    if len(valid_pairs) != len(options):
        errors.append(create_error(
            "options",
            "All matching pairs must have both left and right values",
            ErrorCode.INVALID_PAIRS,
        ))

    if find_duplicates([pair["left"].strip() for pair in valid_pairs]):
        warnings.append(create_warning(
            "options",
            "Duplicate left items detected",
            "Each left item should be unique to avoid confusion",
        ))

    if find_duplicates([pair["right"].strip() for pair in valid_pairs]):
        warnings.append(create_warning(
            "options",
            "Duplicate right items detected",
            "Each right item should be unique to avoid confusion",
        ))

    raw = question.get("correct_answer")
    if _is_blank_answer(raw):
        errors.append(create_error(
            "correct_answer",
            "Matching questions must have correct matching pairs defined",
            ErrorCode.MATCHING_ANSWER_REQUIRED,
        ))
        return Diagnostics(errors, warnings)

    try:
        key = matching_key(load_answer_key(raw))
    except AnswerKeyError as e:
        errors.append(create_error(
            "correct_answer",
            f"Matching answer could not be read: {e}",
            ErrorCode.INVALID_MATCHING_ANSWER,
        ))
        return Diagnostics(errors, warnings)

    if not key:
        errors.append(create_error(
            "correct_answer",
            "Matching questions must have correct matching pairs defined",
            ErrorCode.MATCHING_ANSWER_REQUIRED,
        ))
        return Diagnostics(errors, warnings)

    max_index = len(options) - 1
    for left, right in key.items():
        if not 0 <= left <= max_index:
            errors.append(create_error(
                "correct_answer",
                f"Invalid left item index in matching: {left}",
                ErrorCode.INVALID_MATCHING_INDEX,
            ))
        if not 0 <= right <= max_index:
            errors.append(create_error(
                "correct_answer",
                f"Invalid right item index in matching: {right}",
                ErrorCode.INVALID_MATCHING_INDEX,
            ))

    if find_duplicates(list(key.values())):
        warnings.append(create_warning(
            "correct_answer",
            "Several left items are matched to the same right item",
            "Each right item is usually used exactly once",
        ))

    if len(key) < len(options):
        warnings.append(create_warning(
            "correct_answer",
            "Not every left item has a match",
            "Unmatched left items cannot be answered correctly",
        ))

    return Diagnostics(errors, warnings)


def validate_ordering_question(question: Mapping[str, Any], rules: QuestionRules) -> Diagnostics:
    """Validate ordering items and the correct sequence."""
    errors: list[ValidationError] = []
    warnings: list[ValidationWarning] = []

    options = question.get("options")
    if not isinstance(options, (list, tuple)) or any(not isinstance(item, str) for item in options):
        errors.append(create_error(
            "options",
            "Ordering questions require an array of items",
            ErrorCode.ORDERING_ITEMS_REQUIRED,
        ))
        return Diagnostics(errors, warnings)
    options = list(options)

    if len(options) < rules.min_options:
        errors.append(create_error(
            "options",
            f"At least {rules.min_options} items are required for ordering",
            ErrorCode.INSUFFICIENT_ITEMS,
        ))

    if len(options) > rules.max_options:
        errors.append(create_error(
            "options",
            f"Maximum {rules.max_options} items allowed for ordering",
            ErrorCode.TOO_MANY_ITEMS,
        ))

    if any(not has_text(item) for item in options):
        errors.append(create_error(
            "options",
            "All ordering items must have text",
            ErrorCode.EMPTY_ITEMS,
        ))

    # A repeated item makes the correct sequence ambiguous.
    if find_duplicates(options):
        errors.append(create_error(
            "options",
            "All ordering items must be unique",
            ErrorCode.DUPLICATE_ITEMS,
        ))

    if any(len(item) > ORDERING_ITEM_MAX_LENGTH for item in options):
        warnings.append(create_warning(
            "options",
            "Some items are very long",
            "Consider shortening items for better usability in ordering tasks",
        ))

    raw = question.get("correct_answer")
    if _is_blank_answer(raw):
        errors.append(create_error(
            "correct_answer",
            "Ordering questions must have a correct sequence defined",
            ErrorCode.ORDERING_ANSWER_REQUIRED,
        ))
        return Diagnostics(errors, warnings)

    try:
        sequence = ordering_key(load_answer_key(raw))
    except AnswerKeyError as e:
        errors.append(create_error(
            "correct_answer",
            f"Correct sequence could not be read: {e}",
            ErrorCode.INVALID_SEQUENCE,
        ))
        return Diagnostics(errors, warnings)

    if not sequence:
        errors.append(create_error(
            "correct_answer",
            "Ordering questions must have a correct sequence defined",
            ErrorCode.ORDERING_ANSWER_REQUIRED,
        ))
        return Diagnostics(errors, warnings)

    unknown = [item for item in sequence if item not in options]
    if unknown:
        errors.append(create_error(
            "correct_answer",
            f"Correct sequence contains items not in options: {', '.join(unknown)}",
            ErrorCode.INVALID_SEQUENCE_ITEMS,
        ))

    missing = [item for item in dict.fromkeys(options) if item not in sequence]
    if missing:
        errors.append(create_error(
            "correct_answer",
            f"Some options are missing from correct sequence: {', '.join(missing)}",
            ErrorCode.INCOMPLETE_SEQUENCE,
        ))

    repeated = find_duplicates(sequence)
    if repeated:
        errors.append(create_error(
            "correct_answer",
            f"Duplicate items in correct sequence: {', '.join(repeated)}",
            ErrorCode.DUPLICATE_SEQUENCE_ITEMS,
        ))

    if len(sequence) != len(options):
        errors.append(create_error(
            "correct_answer",
            "Correct sequence must include all items exactly once",
            ErrorCode.SEQUENCE_LENGTH_MISMATCH,
        ))

    return Diagnostics(errors, warnings)


def validate_complex_question_structure(question: Mapping[str, Any]) -> Diagnostics:
    """Advice shared by matching and ordering questions."""
    warnings: list[ValidationWarning] = []

    if not has_text(question.get("explanation")):
        warnings.append(create_warning(
            "explanation",
            "Complex questions benefit from detailed explanations",
            "Explanations help students understand the reasoning behind correct matches/sequences",
        ))

    points = question.get("points")
    if is_number(points) and points < COMPLEX_MIN_POINTS:
        warnings.append(create_warning(
            "points",
            "Complex questions typically warrant more points",
            "Consider if the point value reflects the cognitive effort required",
        ))

    return Diagnostics([], warnings)


# ============================================================================
# Strategies
# ============================================================================


@register(QuestionType.MATCHING)
class MatchingStrategy:
    """Matching: every left -> right assignment must agree with the key."""

    def validate(self, question: Mapping[str, Any], rules: QuestionRules) -> Diagnostics:
        return combine_validation_results(
            validate_matching_question(question, rules),
            validate_complex_question_structure(question),
        )

    def is_correct(self, question: Mapping[str, Any], submitted: Any) -> bool:
        key = matching_key(load_answer_key(question.get("correct_answer")))
        if not key:
            raise AnswerKeyError("matching key is empty")
        options = question.get("options")
        if isinstance(options, (list, tuple)):
            bound = len(options)
            if any(not (0 <= i < bound and 0 <= j < bound) for i, j in key.items()):
                raise AnswerKeyError("matching key refers to pairs that do not exist")

        try:
            answer = matching_key(submitted)
        except AnswerKeyError:
            return False
        return answer == key


@register(QuestionType.ORDERING)
class OrderingStrategy:
    """Ordering: the submitted sequence must equal the key position by position."""

    def validate(self, question: Mapping[str, Any], rules: QuestionRules) -> Diagnostics:
        return combine_validation_results(
            validate_ordering_question(question, rules),
            validate_complex_question_structure(question),
        )

    def is_correct(self, question: Mapping[str, Any], submitted: Any) -> bool:
        key = ordering_key(load_answer_key(question.get("correct_answer")))
        if not key:
            raise AnswerKeyError("ordering key is empty")
        if not isinstance(submitted, (list, tuple)):
            return False
        return list(submitted) == key
