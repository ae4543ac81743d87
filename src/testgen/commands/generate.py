"""testgen generate command - analyze a project and write test files."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from testgen.cli import TestGenContext
    from testgen.config import TestGenConfig


def resolve_config(project: Path, config_path: Path | None) -> TestGenConfig:
    """Explicit config file, else ``testgen.config.json`` in the project, else defaults.

    Raises:
        ConfigError: An explicit config file is missing or invalid.
    """
    from testgen.config import CONFIG_FILE_NAME, TestGenConfig

    if config_path is not None:
        return TestGenConfig.load(config_path)
    project_config = project / CONFIG_FILE_NAME
    if project_config.exists():
        return TestGenConfig.load(project_config)
    return TestGenConfig()


@click.command("generate")
@click.option(
    "-p",
    "--project",
    type=click.Path(path_type=Path),
    default=".",
    help="Project root to analyze (default: current directory)",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(path_type=Path),
    help="Output directory for generated tests (default: from config)",
)
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    help="Path to testgen.config.json",
)
@click.option(
    "-t",
    "--types",
    "file_types",
    multiple=True,
    help="File types to analyze, e.g. csharp (repeatable)",
)
@click.option(
    "-f",
    "--files",
    multiple=True,
    type=click.Path(path_type=Path),
    help="Analyze only these files (repeatable)",
)
@click.option("--overwrite", is_flag=True, help="Overwrite existing test files")
@click.option("--no-backup", is_flag=True, help="Do not back up the output directory")
@click.option("--ignore-existing", is_flag=True, help="Do not look for existing tests")
@click.option("--skip-validation", is_flag=True, help="Skip validation of generated files")
@click.option("--silent", is_flag=True, help="Only print errors")
@click.pass_obj
def generate(
    ctx: TestGenContext | None,
    project: Path,
    output: Path | None,
    config_path: Path | None,
    file_types: tuple[str, ...],
    files: tuple[Path, ...],
    overwrite: bool,
    no_backup: bool,
    ignore_existing: bool,
    skip_validation: bool,
    silent: bool,
) -> None:
    """Generate test files for a C# project.

    \b
    Examples:
        testgen generate -p ./src/MyApp
        testgen generate -p . -o ./tests/Generated --no-backup
        testgen generate -f Services/OrderService.cs
    """
    import asyncio

    from testgen.engine import TestGeneratorEngine
    from testgen.errors import ExitCode, TestGenError
    from testgen.logging import (
        console,
        create_progress,
        print_error,
        print_info,
        print_success,
        print_warning,
        setup_logging,
    )
    from testgen.models import GenerationRequest
    from testgen.reporting import render_summary, write_report

    project = project.resolve()
    if not project.is_dir():
        print_error(f"Project path does not exist: {project}")
        sys.exit(ExitCode.FAILURE)

    missing = [f for f in files if not f.exists()]
    if missing:
        print_error(f"File not found: {missing[0]}")
        sys.exit(ExitCode.FAILURE)

    try:
        config = resolve_config(project, config_path)
    except TestGenError as e:
        print_error(e.message)
        sys.exit(e.exit_code)

    if silent:
        setup_logging("quiet")
    elif config.logging.log_to_file:
        verbosity = ctx.verbosity if ctx is not None else "normal"
        setup_logging(verbosity, log_file=project / config.logging.log_file_path)

    output_path = output if output is not None else Path(config.project.output_path)
    if not output_path.is_absolute():
        output_path = project / output_path

    request = GenerationRequest(
        project_path=project,
        output_path=output_path,
        configuration=config,
        file_types=list(file_types),
        files_to_analyze=[f.resolve() for f in files],
        analyze_existing_tests=not ignore_existing,
        overwrite_existing=overwrite,
        create_backups=not no_backup,
        validate_generated=not skip_validation,
    )
    engine = TestGeneratorEngine(config)

    if silent:
        result = asyncio.run(engine.generate(request))
    else:
        print_info(f"Generating tests for [bold]{project}[/bold]")
        with create_progress() as progress:
            task = progress.add_task("Starting...", total=None)

            def on_progress(message: str) -> None:
                progress.update(task, description=message)

            result = asyncio.run(engine.generate(request, progress=on_progress))

    if config.output.generate_reports and "json" in config.output.report_formats:
        report_path = write_report(result, output_path.parent / "testgen-report.json")
        if not silent:
            print_info(f"Report written to {report_path}")

    if not silent:
        render_summary(result, console)

    if not result.success:
        for error in result.errors:
            print_error(error)
        sys.exit(ExitCode.FAILURE)

    if not silent:
        if result.warnings:
            print_warning(f"Completed with {len(result.warnings)} warnings")
        print_success(
            f"Generated {result.statistics.test_cases_generated} test cases "
            f"in {len(result.generated_files)} files"
        )


__all__ = ["generate", "resolve_config"]
