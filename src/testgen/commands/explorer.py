"""testgen list-tests and preview commands - read-only views of test content."""

from __future__ import annotations

import sys
from pathlib import Path

import click


@click.command("list-tests")
@click.option(
    "-p",
    "--project",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    help="Project root (default: current directory)",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_tests(project: Path, as_json: bool) -> None:
    """List test files and their test methods.

    Scans the conventional test directories (tests, test, Tests, __tests__,
    spec) directly under the project root.
    """
    import json

    from rich.tree import Tree

    from testgen.explorer import explore
    from testgen.logging import console, print_info

    entries = explore(project.resolve())

    if as_json:
        console.print_json(json.dumps([entry.to_dict() for entry in entries]))
        return

    if not entries:
        print_info("No tests found")
        print_info("Run 'testgen generate' to create some")
        return

    tree = Tree(f"[bold]{project.resolve().name}[/bold]")
    for entry in entries:
        file_node = tree.add(f"[cyan]{entry.path.name}[/cyan] ({len(entry.methods)} tests)")
        for method in entry.methods:
            file_node.add(f"{method.name} [dim]line {method.line}[/dim]")
    console.print(tree)


@click.command("preview")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "-p",
    "--project",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Project root used to detect frameworks (default: the file's directory)",
)
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    help="Path to testgen.config.json",
)
@click.option("--plain", is_flag=True, help="Print without syntax highlighting")
def preview(file: Path, project: Path | None, config_path: Path | None, plain: bool) -> None:
    """Show the test file that would be generated for FILE.

    Nothing is written to disk.
    """
    import asyncio

    from rich.syntax import Syntax

    from testgen.commands.generate import resolve_config
    from testgen.errors import ExitCode, TestGenError
    from testgen.generators import CSharpTestGenerator
    from testgen.logging import console, print_error, print_warning
    from testgen.parser import CSharpAnalyzer
    from testgen.scanner import analyze_project_structure

    file = file.resolve()
    project = project.resolve() if project is not None else file.parent

    analyzer = CSharpAnalyzer()
    if not analyzer.can_analyze(file):
        print_error(f"No analyzer available for {file.name}")
        sys.exit(ExitCode.FAILURE)

    try:
        config = resolve_config(project, config_path)
        result = asyncio.run(analyzer.analyze(file))
        result.project_structure = analyze_project_structure(project)

        generator = CSharpTestGenerator(config)
        cases = generator.generate_tests(result)
        if not cases:
            print_warning(f"No tests would be generated for {file.name}")
            return
        content = generator.render_file(result, cases)
    except TestGenError as e:
        print_error(e.message)
        sys.exit(e.exit_code)

    if plain:
        click.echo(content, nl=False)
    else:
        console.print(Syntax(content, "csharp", line_numbers=True))


__all__ = ["list_tests", "preview"]
