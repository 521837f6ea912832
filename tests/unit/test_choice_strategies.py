"""
Unit tests for the choice strategies.

Tests validate() and is_correct() for multiple_choice, single_choice
and true_false.
"""

import pytest

from src.quiz.foundation import AnswerKeyError
from src.quiz.models import ErrorCode, QuestionType
from src.quiz.rules import VALIDATION_RULES
from src.quiz.strategies import get_strategy
from src.quiz.strategies.choice import true_false_value


def codes(diagnostics):
    return [e.code for e in diagnostics.errors]


class TestMultipleChoiceStrategy:
    """Test the multiple choice strategy."""

    @pytest.fixture
    def strategy(self):
        return get_strategy(QuestionType.MULTIPLE_CHOICE)

    @pytest.fixture
    def rules(self):
        return VALIDATION_RULES[QuestionType.MULTIPLE_CHOICE]

    def test_valid_question(self, strategy, rules, multiple_choice_question):
        result = strategy.validate(multiple_choice_question, rules)

        assert result.errors == []
        assert result.warnings == []

    def test_options_must_be_list_of_strings(self, strategy, rules, multiple_choice_question):
        multiple_choice_question["options"] = "2, 4, 7"

        assert codes(strategy.validate(multiple_choice_question, rules)) == [
            ErrorCode.OPTIONS_ARRAY_REQUIRED.value
        ]

    def test_too_many_options(self, strategy, rules, multiple_choice_question):
        multiple_choice_question["options"] = [str(n) for n in range(7)]

        assert ErrorCode.TOO_MANY_OPTIONS.value in codes(strategy.validate(multiple_choice_question, rules))

    def test_empty_option(self, strategy, rules, multiple_choice_question):
        multiple_choice_question["options"] = ["2", " ", "7"]

        assert ErrorCode.EMPTY_OPTIONS.value in codes(strategy.validate(multiple_choice_question, rules))

    def test_duplicate_options_warn(self, strategy, rules, multiple_choice_question):
        multiple_choice_question["options"] = ["2", "2", "7", "9"]
        result = strategy.validate(multiple_choice_question, rules)

        assert result.errors == []
        assert "Duplicate" in result.warnings[0].message

    @pytest.mark.parametrize("correct", [None, [], 0])
    def test_no_correct_answer(self, strategy, rules, multiple_choice_question, correct):
        multiple_choice_question["correct_answer"] = correct

        assert codes(strategy.validate(multiple_choice_question, rules)) == [
            ErrorCode.NO_CORRECT_ANSWER.value
        ]

    @pytest.mark.parametrize("correct", [[4], [-1], ["0"], [True]])
    def test_invalid_correct_index(self, strategy, rules, multiple_choice_question, correct):
        multiple_choice_question["correct_answer"] = correct

        assert codes(strategy.validate(multiple_choice_question, rules)) == [
            ErrorCode.INVALID_CORRECT_INDEX.value
        ]

    def test_all_options_correct_warns(self, strategy, rules, multiple_choice_question):
        multiple_choice_question["correct_answer"] = [0, 1, 2, 3]
        result = strategy.validate(multiple_choice_question, rules)

        assert result.errors == []
        assert result.warnings[0].field == "correct_answer"

    def test_multiple_correct_rejected_when_rules_forbid(self, strategy, multiple_choice_question):
        rules = VALIDATION_RULES[QuestionType.SINGLE_CHOICE]

        assert ErrorCode.MULTIPLE_CORRECT_NOT_ALLOWED.value in codes(
            strategy.validate(multiple_choice_question, rules)
        )

    def test_is_correct_compares_as_sets(self, strategy, multiple_choice_question):
        assert strategy.is_correct(multiple_choice_question, [2, 0]) is True
        assert strategy.is_correct(multiple_choice_question, [0]) is False
        assert strategy.is_correct(multiple_choice_question, [0, 2, 3]) is False

    def test_is_correct_malformed_submission(self, strategy, multiple_choice_question):
        assert strategy.is_correct(multiple_choice_question, "0,2") is False
        assert strategy.is_correct(multiple_choice_question, None) is False

    def test_is_correct_missing_key_raises(self, strategy, multiple_choice_question):
        multiple_choice_question["correct_answer"] = []

        with pytest.raises(AnswerKeyError):
            strategy.is_correct(multiple_choice_question, [0])


class TestSingleChoiceStrategy:
    """Test the single choice strategy."""

    @pytest.fixture
    def strategy(self):
        return get_strategy(QuestionType.SINGLE_CHOICE)

    @pytest.fixture
    def rules(self):
        return VALIDATION_RULES[QuestionType.SINGLE_CHOICE]

    def test_valid_question(self, strategy, rules, single_choice_question):
        assert strategy.validate(single_choice_question, rules).errors == []

    def test_insufficient_options(self, strategy, rules, single_choice_question):
        single_choice_question["options"] = ["only one"]
        single_choice_question["correct_answer"] = 0

        assert codes(strategy.validate(single_choice_question, rules)) == [
            ErrorCode.INSUFFICIENT_OPTIONS.value
        ]

    def test_missing_answer(self, strategy, rules, single_choice_question):
        del single_choice_question["correct_answer"]

        assert codes(strategy.validate(single_choice_question, rules)) == [
            ErrorCode.NO_CORRECT_ANSWER.value
        ]

    def test_answer_out_of_range(self, strategy, rules, single_choice_question):
        single_choice_question["correct_answer"] = 4

        assert codes(strategy.validate(single_choice_question, rules)) == [
            ErrorCode.INVALID_CORRECT_INDEX.value
        ]

    def test_is_correct(self, strategy, single_choice_question):
        assert strategy.is_correct(single_choice_question, 2) is True
        assert strategy.is_correct(single_choice_question, 1) is False
        assert strategy.is_correct(single_choice_question, "2") is False

    def test_is_correct_missing_key_raises(self, strategy, single_choice_question):
        single_choice_question["correct_answer"] = None

        with pytest.raises(AnswerKeyError):
            strategy.is_correct(single_choice_question, 2)


class TestTrueFalseStrategy:
    """Test the true/false strategy and its 0 = True / 1 = False encoding."""

    @pytest.fixture
    def strategy(self):
        return get_strategy(QuestionType.TRUE_FALSE)

    @pytest.fixture
    def rules(self):
        return VALIDATION_RULES[QuestionType.TRUE_FALSE]

    def test_valid_question(self, strategy, rules, true_false_question):
        result = strategy.validate(true_false_question, rules)

        assert result.errors == []
        assert result.warnings == []

    def test_yes_no_options_rejected(self, strategy, rules, true_false_question):
        true_false_question["options"] = ["Yes", "No"]

        assert codes(strategy.validate(true_false_question, rules)) == [
            ErrorCode.INVALID_TRUEFALSE_OPTIONS.value
        ]

    def test_reversed_options_warn(self, strategy, rules, true_false_question):
        true_false_question["options"] = ["False", "True"]
        result = strategy.validate(true_false_question, rules)

        assert result.errors == []
        assert result.warnings[0].field == "options"

    @pytest.mark.parametrize("correct", [2, -1, "0", None, True, False])
    def test_invalid_answer(self, strategy, rules, true_false_question, correct):
        true_false_question["correct_answer"] = correct

        assert codes(strategy.validate(true_false_question, rules)) == [
            ErrorCode.INVALID_TRUEFALSE_ANSWER.value
        ]

    @pytest.mark.parametrize("value,expected", [
        (True, 0),
        (False, 1),
        (0, 0),
        (1, 1),
        ("true", 0),
        (" FALSE ", 1),
        (2, None),
        ("yes", None),
        (None, None),
    ])
    def test_true_false_value(self, value, expected):
        assert true_false_value(value) == expected

    def test_python_false_matches_false_key(self, strategy, true_false_question):
        assert strategy.is_correct(true_false_question, False) is True
        assert strategy.is_correct(true_false_question, True) is False

    def test_index_submission(self, strategy, true_false_question):
        assert strategy.is_correct(true_false_question, 1) is True
        assert strategy.is_correct(true_false_question, 0) is False

    def test_bool_key_raises(self, strategy, true_false_question):
        true_false_question["correct_answer"] = True

        with pytest.raises(AnswerKeyError):
            strategy.is_correct(true_false_question, 0)
