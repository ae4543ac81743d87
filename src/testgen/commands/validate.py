"""testgen validate command - check a configuration file."""

from __future__ import annotations

import sys
from pathlib import Path

import click


@click.command("validate")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    default="testgen.config.json",
    help="Configuration file to check (default: ./testgen.config.json)",
)
@click.option("--json", "as_json", is_flag=True, help="Output the result as JSON")
def validate(config_path: Path, as_json: bool) -> None:
    """Validate a configuration file.

    Errors make the configuration unusable; warnings are reported only.
    """
    import json

    from testgen.config import TestGenConfig
    from testgen.errors import ExitCode, TestGenError
    from testgen.logging import console, print_error, print_success, print_warning

    try:
        config = TestGenConfig.load(config_path)
    except TestGenError as e:
        if as_json:
            console.print_json(json.dumps(e.to_dict()))
        else:
            print_error(e.message)
        sys.exit(ExitCode.FAILURE)

    result = config.validate_config()

    if as_json:
        console.print_json(json.dumps(result.to_dict()))
    else:
        for error in result.errors:
            print_error(error)
        for warning in result.warnings:
            print_warning(warning)
        if result.is_valid:
            print_success(f"Configuration is valid: {config_path}")

    if not result.is_valid:
        sys.exit(ExitCode.FAILURE)


__all__ = ["validate"]
