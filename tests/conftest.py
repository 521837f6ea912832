"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import pytest
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.quiz.rules import QuizLimits  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def limits():
    """Default limits, independent of environment and .env overrides."""
    return QuizLimits()


@pytest.fixture
def multiple_choice_question():
    """Provide a valid multiple choice question."""
    return {
        "id": "q-mc-001",
        "question": "Which of these numbers are prime?",
        "question_type": "multiple_choice",
        "options": ["2", "4", "7", "9"],
        "correct_answer": [0, 2],
        "points": 2,
    }


@pytest.fixture
def single_choice_question():
    """Provide a valid single choice question."""
    return {
        "id": "q-sc-001",
        "question": "Which layer of the OSI model handles routing?",
        "question_type": "single_choice",
        "options": ["Physical", "Data Link", "Network", "Transport"],
        "correct_answer": 2,
        "points": 1,
    }


@pytest.fixture
def true_false_question():
    """Provide a valid true/false question whose answer is False."""
    return {
        "id": "q-tf-001",
        "question": "The Earth is the largest planet in the solar system.",
        "question_type": "true_false",
        "options": ["True", "False"],
        "correct_answer": 1,
        "points": 1,
    }


@pytest.fixture
def fill_blank_question():
    """Provide a valid fill-in-the-blank question."""
    return {
        "id": "q-fb-001",
        "question": "The capital of France is _____.",
        "question_type": "fill_blank",
        "correct_answer_text": "Paris",
        "points": 1,
    }


@pytest.fixture
def essay_question():
    """Provide a valid essay question."""
    return {
        "id": "q-es-001",
        "question": "Explain how photosynthesis converts light into chemical energy.",
        "question_type": "essay",
        "explanation": "Mention chlorophyll, light reactions and the Calvin cycle.",
        "points": 5,
    }


@pytest.fixture
def matching_question():
    """Provide a valid matching question with its key stored as JSON text."""
    return {
        "id": "q-ma-001",
        "question": "Match each country with its capital city.",
        "question_type": "matching",
        "options": [
            {"left": "France", "right": "Paris"},
            {"left": "Japan", "right": "Tokyo"},
            {"left": "Kenya", "right": "Nairobi"},
        ],
        "correct_answer": '{"0": 0, "1": 1, "2": 2}',
        "explanation": "Each country is paired with its capital.",
        "points": 3,
    }


@pytest.fixture
def ordering_question():
    """Provide a valid ordering question."""
    return {
        "id": "q-or-001",
        "question": "Put the planets in order from the Sun outward.",
        "question_type": "ordering",
        "options": ["Earth", "Mercury", "Venus"],
        "correct_answer": ["Mercury", "Venus", "Earth"],
        "explanation": "Mercury is closest, then Venus, then Earth.",
        "points": 3,
    }
