"""Summaries of a generation run for the console and for report files."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from testgen.models import GenerationResult

# Console report shows at most this many test names per class
MAX_TESTS_PER_CLASS = 20


def statistics_table(result: GenerationResult) -> Table:
    stats = result.statistics
    table = Table(title="Test Generation Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")

    table.add_row("Files analyzed", str(stats.files_analyzed))
    table.add_row("Files skipped", str(stats.files_skipped))
    table.add_row("Test cases generated", str(stats.test_cases_generated))
    table.add_row("Test files created", str(stats.test_files_created))
    table.add_row("Test files updated", str(stats.test_files_updated))
    table.add_row("Classes covered", str(stats.classes_covered))
    table.add_row("Methods covered", str(stats.methods_covered))
    table.add_row("Coverage estimate", f"{stats.coverage_percentage:.1f}%")
    table.add_row("Dependencies detected", str(stats.dependencies_detected))
    table.add_row("Tests with mocks", str(stats.mocks_generated))
    table.add_row("Assertions", str(stats.assertions_generated))
    if stats.existing_test_files:
        table.add_row("Existing test files", str(stats.existing_test_files))
        table.add_row("Existing test methods", str(stats.existing_test_methods))
    table.add_row("Duration", f"{result.duration:.2f}s")
    return table


def test_case_tree(result: GenerationResult) -> Tree:
    """Generated files -> classes -> test names."""
    tree = Tree("[bold]Generated tests[/bold]")
    for file in result.generated_files:
        file_node = tree.add(f"[cyan]{file.file_path}[/cyan] ({file.test_framework})")
        by_class: dict[str, list[str]] = {}
        for case in file.test_cases:
            by_class.setdefault(case.target_class, []).append(case.test_name)
        for class_name, names in by_class.items():
            class_node = file_node.add(f"[bold]{class_name}[/bold] ({len(names)} tests)")
            for name in names[:MAX_TESTS_PER_CLASS]:
                class_node.add(name)
            if len(names) > MAX_TESTS_PER_CLASS:
                class_node.add(f"[dim]... {len(names) - MAX_TESTS_PER_CLASS} more[/dim]")
    return tree


def timings_table(result: GenerationResult) -> Table:
    table = Table(title="Phase Timings")
    table.add_column("Phase", style="cyan")
    table.add_column("Seconds", justify="right")
    for phase, seconds in result.statistics.phase_timings.items():
        table.add_row(phase, f"{seconds:.3f}")
    return table


def render_summary(result: GenerationResult, console: Console, show_tests: bool = True) -> None:
    """Print statistics, generated tests, problems and phase timings."""
    console.print(statistics_table(result))

    if show_tests and result.generated_files:
        console.print(test_case_tree(result))

    for error in result.errors:
        console.print(f"[red]Error:[/red] {error}")
    for warning in result.warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}")

    if result.statistics.phase_timings:
        console.print(timings_table(result))


def write_report(result: GenerationResult, path: Path) -> Path:
    """Write the full result as indented JSON; returns the path written."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(result.to_dict(), indent=2, default=str), encoding="utf-8")
    return path


__all__ = ["render_summary", "statistics_table", "test_case_tree", "timings_table", "write_report"]
