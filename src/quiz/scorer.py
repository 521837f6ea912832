"""
Answer scoring.

score_question() compares one submitted answer with a question's stored
key and reports the points earned. It never raises: a question whose key
cannot be read is scored as incorrect and logged, so one corrupt question
cannot abort the scoring of a whole attempt. Summing results across an
attempt is left to the caller.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from loguru import logger

from .foundation import AnswerKeyError, coerce_question_type, points_of
from .models import QuestionType, ScoreResult
from .rules import QuizLimits, default_limits
from .strategies import get_strategy


def score_question(
    question: Mapping[str, Any],
    submitted: Any,
    limits: QuizLimits | None = None,
) -> ScoreResult:
    """
    Score a submitted answer against a frozen question.

    Args:
        question: The question as it existed when the answer was captured
        submitted: The learner's answer, shaped like the question's key
        limits: Supplies the default point value (defaults to configured limits)

    Returns:
        ScoreResult. Essay results are provisional; faulted results carry
        a description in ``fault`` and earn nothing.
    """
    limits = limits or default_limits()

    try:
        return _score(question, submitted, limits)
    except AnswerKeyError as e:
        return _fault(question, str(e))
    except Exception as e:
        logger.exception(f"Unexpected error scoring question {_question_id(question)}")
        return ScoreResult(is_correct=False, points_earned=0, fault=f"unexpected error: {e}")


def _score(question: Any, submitted: Any, limits: QuizLimits) -> ScoreResult:
    if not isinstance(question, Mapping):
        raise AnswerKeyError("question is not a mapping")

    question_type = coerce_question_type(question.get("question_type"))
    strategy = get_strategy(question_type) if question_type else None
    if strategy is None:
        raise AnswerKeyError(f"unsupported question type: {question.get('question_type')!r}")

    points = points_of(question, limits.default_points)
    if points is None or points < 0:
        raise AnswerKeyError(f"points value is not usable: {question.get('points')!r}")

    is_correct = strategy.is_correct(question, submitted)
    return ScoreResult(
        is_correct=is_correct,
        points_earned=points if is_correct else 0,
        provisional=question_type == QuestionType.ESSAY,
    )


def _fault(question: Any, reason: str) -> ScoreResult:
    logger.warning(
        f"Answer key for question {_question_id(question)} could not be used, "
        f"scoring as incorrect: {reason}"
    )
    return ScoreResult(is_correct=False, points_earned=0, fault=reason)


def _question_id(question: Any) -> str:
    if isinstance(question, Mapping) and question.get("id") is not None:
        return str(question["id"])
    return "<unknown>"


def freeze_question(question: Mapping[str, Any]) -> Mapping[str, Any]:
    """
    Snapshot a question for an attempt.

    The copy is detached from the live question and read-only all the
    way down: mappings become MappingProxyType and lists become tuples.
    """
    return _freeze(question)


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return copy.deepcopy(value)
