"""
Quiz question validation and answer scoring.

This module provides:
- validate_question / validate_quiz_form: authoring-time checks that turn
  every problem into a ValidationError or ValidationWarning
- score_question: attempt-time comparison of a submitted answer with the
  stored key

Question Types:
- multiple_choice: one or more correct option indices
- single_choice: exactly one correct option index
- true_false: options "True"/"False", key 0 (True) or 1 (False)
- fill_blank: free text, matched case-insensitively
- essay: free text, graded manually
- matching: left -> right index pairs
- ordering: items in their correct sequence
"""

from .foundation import (
    AnswerKeyError,
    combine_validation_results,
    is_validation_successful,
    validate_basic_fields,
)
from .models import (
    DifficultyLevel,
    ErrorCode,
    MediaType,
    QuestionType,
    ScoreResult,
    ValidationError,
    ValidationResult,
    ValidationWarning,
    create_error,
    create_warning,
)
from .rules import VALIDATION_RULES, QuestionRules, QuizLimits, default_limits
from .scorer import freeze_question, score_question
from .strategies import get_strategy
from .validator import (
    ValidationSummary,
    get_validation_summary,
    validate_question,
    validate_quiz_form,
    validate_quiz_settings,
)

__all__ = [
    "AnswerKeyError",
    "DifficultyLevel",
    "ErrorCode",
    "MediaType",
    "QuestionRules",
    "QuestionType",
    "QuizLimits",
    "ScoreResult",
    "VALIDATION_RULES",
    "ValidationError",
    "ValidationResult",
    "ValidationSummary",
    "ValidationWarning",
    "combine_validation_results",
    "create_error",
    "create_warning",
    "default_limits",
    "freeze_question",
    "get_strategy",
    "get_validation_summary",
    "is_validation_successful",
    "score_question",
    "validate_basic_fields",
    "validate_question",
    "validate_quiz_form",
    "validate_quiz_settings",
]
