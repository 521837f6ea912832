"""
Unit tests for answer scoring.

score_question() must never raise: unusable keys degrade to an incorrect
result with a fault description.
"""

from types import MappingProxyType

import pytest
from loguru import logger

from src.quiz.models import QuestionType, ScoreResult
from src.quiz.rules import QuizLimits
from src.quiz.scorer import freeze_question, score_question
from src.quiz.strategies import STRATEGIES


@pytest.fixture
def log_messages():
    """Collect loguru output at WARNING and above."""
    messages = []
    sink_id = logger.add(messages.append, level="WARNING", format="{message}")
    yield messages
    logger.remove(sink_id)


class TestScoreQuestion:
    """Test correctness and points per question type."""

    def test_multiple_choice(self, multiple_choice_question, limits):
        assert score_question(multiple_choice_question, [2, 0], limits) == ScoreResult(True, 2)
        assert score_question(multiple_choice_question, [0], limits) == ScoreResult(False, 0)

    def test_single_choice(self, single_choice_question, limits):
        assert score_question(single_choice_question, 2, limits).points_earned == 1

    def test_true_false_with_python_bool(self, true_false_question, limits):
        result = score_question(true_false_question, False, limits)

        assert result.is_correct is True
        assert result.points_earned == 1

    def test_fill_blank_tolerates_case_and_spacing(self, fill_blank_question, limits):
        assert score_question(fill_blank_question, "  paris ", limits).is_correct is True

    def test_essay_is_provisional(self, essay_question, limits):
        result = score_question(essay_question, "Chlorophyll absorbs light.", limits)

        assert result == ScoreResult(True, 5, provisional=True)

    def test_essay_blank_response(self, essay_question, limits):
        result = score_question(essay_question, "   ", limits)

        assert result.is_correct is False
        assert result.points_earned == 0
        assert result.provisional is True

    def test_matching(self, matching_question, limits):
        assert score_question(matching_question, {"0": 0, "1": 1, "2": 2}, limits).points_earned == 3
        assert score_question(matching_question, {"0": 1, "1": 0, "2": 2}, limits).points_earned == 0

    def test_ordering(self, ordering_question, limits):
        result = score_question(ordering_question, ["Mercury", "Venus", "Earth"], limits)

        assert result == ScoreResult(True, 3)

    def test_unset_points_use_default(self, single_choice_question):
        del single_choice_question["points"]

        result = score_question(single_choice_question, 2, QuizLimits(default_points=4))

        assert result.points_earned == 4

    def test_question_is_not_mutated(self, matching_question, limits):
        before = dict(matching_question)

        score_question(matching_question, [0, 1, 2], limits)

        assert matching_question == before


class TestScoringFaults:
    """Test that unusable questions degrade instead of raising."""

    def test_corrupt_matching_key(self, matching_question, limits, log_messages):
        matching_question["correct_answer"] = "{not json"

        result = score_question(matching_question, {"0": 0}, limits)

        assert result.is_correct is False
        assert result.points_earned == 0
        assert result.fault
        assert any("q-ma-001" in str(m) for m in log_messages)

    def test_corrupt_ordering_key(self, ordering_question, limits):
        ordering_question["correct_answer"] = '{"first": "Mercury"}'

        result = score_question(ordering_question, ["Mercury", "Venus", "Earth"], limits)

        assert result.is_correct is False
        assert result.fault is not None

    def test_fill_blank_without_key(self, fill_blank_question, limits):
        del fill_blank_question["correct_answer_text"]

        result = score_question(fill_blank_question, "Paris", limits)

        assert result.is_correct is False
        assert result.fault is not None

    def test_unknown_type(self, limits):
        result = score_question({"id": "x", "question_type": "hotspot"}, [1], limits)

        assert result.is_correct is False
        assert "unsupported question type" in result.fault

    def test_unusable_points(self, single_choice_question, limits):
        single_choice_question["points"] = "lots"

        result = score_question(single_choice_question, 2, limits)

        assert result.is_correct is False
        assert "points" in result.fault

    @pytest.mark.parametrize("question", [None, "question", 3])
    def test_non_mapping_question(self, question, limits):
        result = score_question(question, 0, limits)

        assert result.is_correct is False
        assert result.fault is not None

    def test_unexpected_error_is_logged_once(self, single_choice_question, limits, log_messages, monkeypatch):
        def explode(question, submitted):
            raise RuntimeError("strategy blew up")

        monkeypatch.setattr(STRATEGIES[QuestionType.SINGLE_CHOICE], "is_correct", explode)

        result = score_question(single_choice_question, 2, limits)

        assert result.is_correct is False
        assert result.fault.startswith("unexpected error")
        assert len([m for m in log_messages if "q-sc-001" in str(m)]) == 1

    def test_to_dict(self, limits):
        result = score_question({"question_type": "hotspot"}, None, limits)

        assert result.to_dict()["points_earned"] == 0
        assert result.to_dict()["is_correct"] is False


class TestFreezeQuestion:
    """Test attempt-time question snapshots."""

    def test_snapshot_is_read_only(self, matching_question):
        frozen = freeze_question(matching_question)

        assert isinstance(frozen, MappingProxyType)
        assert isinstance(frozen["options"], tuple)
        assert isinstance(frozen["options"][0], MappingProxyType)
        with pytest.raises(TypeError):
            frozen["points"] = 10

    def test_snapshot_is_detached(self, ordering_question):
        frozen = freeze_question(ordering_question)

        ordering_question["options"].append("Mars")
        ordering_question["correct_answer"] = ["Earth"]

        assert frozen["options"] == ("Earth", "Mercury", "Venus")
        assert frozen["correct_answer"] == ("Mercury", "Venus", "Earth")

    def test_frozen_question_scores_like_live_question(self, ordering_question, matching_question, limits):
        for question, answer in (
            (ordering_question, ["Mercury", "Venus", "Earth"]),
            (matching_question, [0, 1, 2]),
        ):
            assert score_question(freeze_question(question), answer, limits) == score_question(
                question, answer, limits
            )

    def test_freezing_twice(self, multiple_choice_question):
        once = freeze_question(multiple_choice_question)

        assert freeze_question(once) == once
