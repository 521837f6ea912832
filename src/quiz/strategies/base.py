"""
Base protocol for question strategies.
"""

from collections.abc import Mapping
from typing import Any, Protocol

from ..models import Diagnostics
from ..rules import QuestionRules


class QuestionStrategy(Protocol):
    """Protocol for question type strategies."""

    def validate(self, question: Mapping[str, Any], rules: QuestionRules) -> Diagnostics:
        """Collect errors and warnings for an authored question. Never raises."""
        ...

    def is_correct(self, question: Mapping[str, Any], submitted: Any) -> bool:
        """
        Compare a submitted answer with the question's stored key.

        A malformed submission is simply incorrect. A stored key that cannot
        be interpreted raises AnswerKeyError; the scorer turns that into a
        failed answer.
        """
        ...
