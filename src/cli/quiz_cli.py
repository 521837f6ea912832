"""
Quizcheck CLI - validate and score quiz content from the terminal.

Reads questions from JSON files, either a bare list of questions or an
object {"questions": [...], "quiz": {...}} where "quiz" holds the quiz
settings.

Usage:
    quizcheck validate quiz.json            # Validate questions and settings
    quizcheck validate quiz.json --strict   # Fail on warnings too
    quizcheck score quiz.json answers.json  # Score a set of answers
    quizcheck rules                         # Show per-type rules
"""

from __future__ import annotations

import json
import sys
from collections.abc import Mapping
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated, Any

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

# Local imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))
from config import get_settings
from src.quiz import (
    VALIDATION_RULES,
    ValidationResult,
    default_limits,
    freeze_question,
    get_validation_summary,
    score_question,
    validate_quiz_form,
    validate_quiz_settings,
)
from src.quiz.foundation import points_of

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="quizcheck",
    help="Quiz question validation and answer scoring",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()


def _load_json(path: Path) -> Any:
    """Read a JSON file, exiting with code 1 if it cannot be read."""
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        console.print(f"[red]✗ Cannot read {path}: {e}[/]")
        raise typer.Exit(1) from e
    except json.JSONDecodeError as e:
        console.print(f"[red]✗ {path} is not valid JSON: {e}[/]")
        raise typer.Exit(1) from e


def _split_payload(data: Any) -> tuple[Any, Mapping[str, Any] | None]:
    """Separate the question list from optional quiz settings."""
    if isinstance(data, Mapping):
        return data.get("questions"), data.get("quiz")
    return data, None


# =============================================================================
# Validation Commands
# =============================================================================


@app.command()
def validate(
    path: Annotated[Path, typer.Argument(help="JSON file with quiz questions")],
    strict: Annotated[
        bool, typer.Option("--strict", "-s", help="Fail on warnings")
    ] = False,
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Output report path")
    ] = None,
) -> None:
    """
    Validate quiz questions (and quiz settings when present).

    Exit codes:
        0 - Quiz valid
        1 - Validation errors found, or the file could not be read
        2 - Warnings found (with --strict)
    """
    console.print(f"[cyan]🔍 Validating {path}...[/]")

    questions, quiz = _split_payload(_load_json(path))
    limits = default_limits()

    result = validate_quiz_form(questions, limits=limits)
    if quiz is not None:
        settings_result = validate_quiz_settings(quiz)
        result = ValidationResult(
            is_valid=result.is_valid and settings_result.is_valid,
            errors=[*result.errors, *_prefixed(settings_result.errors)],
            warnings=[*result.warnings, *_prefixed(settings_result.warnings)],
        )

    _print_validation_report(result, questions, output)

    if result.errors:
        raise typer.Exit(1)
    if result.warnings and strict:
        raise typer.Exit(2)


def _prefixed(diagnostics: list) -> list:
    """Place quiz settings diagnostics under the "quiz." field prefix."""
    return [replace(d, field=f"quiz.{d.field}") for d in diagnostics]


def _print_validation_report(
    result: ValidationResult, questions: Any, output: Path | None
) -> None:
    """Print validation results."""
    if result.errors:
        console.print("\n[red bold]ERRORS:[/]")
        for error in result.errors:
            console.print(f"  [red]✗[/] {error.field}: {error.message} [dim]({error.code})[/]")

    if result.warnings:
        console.print("\n[yellow bold]WARNINGS:[/]")
        for warning in result.warnings:
            console.print(f"  [yellow]⚠[/] {warning.field}: {warning.message}")
            if warning.suggestion:
                console.print(f"    [dim]{warning.suggestion}[/]")

    if not result.errors and not result.warnings:
        console.print("\n[green]✓ Quiz valid![/]")

    console.print(f"\n[dim]Errors: {len(result.errors)} | Warnings: {len(result.warnings)}[/]")

    if output:
        report: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            **result.to_dict(),
            "summary": {
                "error_count": len(result.errors),
                "warning_count": len(result.warnings),
                "status": "pass" if result.is_valid else "fail",
            },
        }
        if isinstance(questions, list):
            summary = get_validation_summary(questions)
            report["summary"].update(
                total_questions=summary.total_questions,
                valid_questions=summary.valid_questions,
                questions_with_warnings=summary.questions_with_warnings,
                questions_with_errors=summary.questions_with_errors,
            )

        output.write_text(json.dumps(report, indent=2), encoding="utf-8")
        console.print(f"[dim]Report written to {output}[/]")


# =============================================================================
# Scoring Commands
# =============================================================================


@app.command()
def score(
    questions_path: Annotated[Path, typer.Argument(help="JSON file with quiz questions")],
    answers_path: Annotated[
        Path, typer.Argument(help="JSON answers keyed by question id, or a list in question order")
    ],
) -> None:
    """
    Score submitted answers against the stored keys.

    Questions whose key cannot be used are scored as incorrect and flagged.
    """
    questions, _ = _split_payload(_load_json(questions_path))
    answers = _load_json(answers_path)
    if isinstance(answers, Mapping) and "answers" in answers:
        answers = answers["answers"]

    if not isinstance(questions, list):
        console.print("[red]✗ No question list found[/]")
        raise typer.Exit(1)

    limits = default_limits()
    table = Table(title="📝 Score")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Question", style="cyan")
    table.add_column("Type", style="white")
    table.add_column("Result", justify="center")
    table.add_column("Points", style="green", justify="right")
    table.add_column("Note", style="dim")

    earned = 0.0
    possible = 0.0
    for number, question in enumerate(questions, start=1):
        submitted = _answer_for(answers, question, number - 1)
        frozen = freeze_question(question) if isinstance(question, Mapping) else question
        result = score_question(frozen, submitted, limits)
        earned += result.points_earned

        if isinstance(question, Mapping):
            points = points_of(question, limits.default_points)
            if points is not None:
                possible += points
            label = str(question.get("id", number))
            question_type = str(question.get("question_type", "?"))
        else:
            label, question_type = str(number), "?"

        if result.fault:
            mark, note = "[yellow]![/]", result.fault
        elif result.is_correct:
            mark, note = "[green]✓[/]", "pending manual grading" if result.provisional else ""
        else:
            mark, note = "[red]✗[/]", ""
        table.add_row(str(number), label, question_type, mark, f"{result.points_earned:g}", note)

    console.print(table)
    console.print(f"\n[bold]Total:[/] {earned:g} / {possible:g}")


def _answer_for(answers: Any, question: Any, position: int) -> Any:
    if isinstance(answers, Mapping):
        if isinstance(question, Mapping) and question.get("id") is not None:
            return answers.get(str(question["id"]))
        return answers.get(str(position + 1))
    if isinstance(answers, list) and position < len(answers):
        return answers[position]
    return None


# =============================================================================
# Info Commands
# =============================================================================


@app.command()
def rules() -> None:
    """Show option bounds and answer shapes for every question type."""
    table = Table(title="📋 Question Rules")
    table.add_column("Type", style="cyan")
    table.add_column("Options", justify="center")
    table.add_column("Key required", justify="center")
    table.add_column("Multiple correct", justify="center")
    table.add_column("Answer", style="white")

    for question_type, type_rules in VALIDATION_RULES.items():
        if type_rules.uses_text_answer:
            answer = "text"
        elif type_rules.requires_pairs:
            answer = "index pairs"
        elif type_rules.requires_sequence:
            answer = "sequence"
        else:
            answer = "option index"
        table.add_row(
            question_type.value,
            f"{type_rules.min_options}-{type_rules.max_options}",
            "yes" if type_rules.requires_correct_answer else "no",
            "yes" if type_rules.allows_multiple_correct else "no",
            answer,
        )

    console.print(table)

    limits = default_limits()
    console.print(
        f"\n[dim]Points {limits.min_points:g}-{limits.max_points:g} "
        f"(default {limits.default_points:g}) | "
        f"Prompt {limits.question_min_length}-{limits.question_max_length} chars | "
        f"Max {limits.max_questions} questions[/]"
    )


# =============================================================================
# Entry Point
# =============================================================================


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Verbose output")
    ] = False,
) -> None:
    """
    Quiz question validation and answer scoring.

    \b
    Quick Start:
      quizcheck validate quiz.json             # Validate a quiz
      quizcheck score quiz.json answers.json   # Score answers
      quizcheck rules                          # Show rules
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else get_settings().log_level,
        format="<level>{message}</level>",
    )


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
