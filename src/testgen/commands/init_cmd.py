"""testgen init command - create testgen.config.json for a project."""

from __future__ import annotations

import sys
from pathlib import Path

import click


@click.command("init")
@click.option(
    "-p",
    "--project",
    type=click.Path(path_type=Path),
    default=".",
    help="Project root (default: current directory)",
)
@click.option("--force", is_flag=True, help="Overwrite an existing testgen.config.json")
def init(project: Path, force: bool) -> None:
    """Create a configuration file derived from the project structure.

    Detected test and mocking frameworks become the configured defaults.
    """
    from testgen.config import CONFIG_FILE_NAME, TestGenConfig
    from testgen.errors import ExitCode
    from testgen.logging import print_error, print_info, print_success, print_warning
    from testgen.scanner import analyze_project_structure

    project = project.resolve()
    if not project.is_dir():
        print_error(f"Project path does not exist: {project}")
        sys.exit(ExitCode.FAILURE)

    config_path = project / CONFIG_FILE_NAME
    if config_path.exists() and not force:
        print_warning(f"Configuration file already exists: {config_path}")
        print_info("Use --force to overwrite existing configuration")
        sys.exit(ExitCode.FAILURE)

    structure = analyze_project_structure(project)
    config = TestGenConfig.create_default(project, structure)

    try:
        config.save(config_path)
    except PermissionError:
        print_error(f"Permission denied: {config_path}")
        sys.exit(ExitCode.FAILURE)
    except OSError as e:
        print_error(f"Failed to create config file: {e}")
        sys.exit(ExitCode.FAILURE)

    print_success(f"Created {config_path}")
    framework = config.project.test_frameworks.get("csharp", "xunit")
    print_info(f"Test framework: {framework}, mocking: {config.generation.mock_framework}")
    print_info("\nNext steps:")
    print_info(f"  1. Edit {CONFIG_FILE_NAME} to customize settings")
    print_info("  2. Run 'testgen validate' to check it")
    print_info("  3. Run 'testgen generate' to write tests")


__all__ = ["init"]
