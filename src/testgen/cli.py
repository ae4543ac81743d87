"""testgen CLI - generate C# test skeletons from source analysis."""

from __future__ import annotations

from typing import Literal

from dotenv import load_dotenv

# Load .env file before any other imports that might use env vars
load_dotenv()

import click  # noqa: E402

from testgen import __version__  # noqa: E402
from testgen.commands.lazy import LazyGroup  # noqa: E402

VerbosityLevel = Literal["quiet", "normal", "verbose"]


class TestGenContext:
    """Shared context for CLI commands."""

    __test__ = False

    def __init__(self) -> None:
        self.verbosity: VerbosityLevel = "normal"
        self.debug: bool = False


pass_context = click.make_pass_decorator(TestGenContext, ensure=True)


# Define lazy subcommands: name -> (module_path, attribute_name)
LAZY_COMMANDS: dict[str, tuple[str, str]] = {
    "generate": ("testgen.commands.generate", "generate"),
    "init": ("testgen.commands.init_cmd", "init"),
    "validate": ("testgen.commands.validate", "validate"),
    # Read-only views of test content
    "list-tests": ("testgen.commands.explorer", "list_tests"),
    "preview": ("testgen.commands.explorer", "preview"),
}


@click.group(cls=LazyGroup, lazy_subcommands=LAZY_COMMANDS)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-error output")
@click.option("--debug", is_flag=True, help="Show full tracebacks on errors")
@click.version_option(version=__version__, prog_name="testgen")
@pass_context
def cli(ctx: TestGenContext, verbose: bool, quiet: bool, debug: bool) -> None:
    """testgen - test case generator for C# projects.

    \b
    Generation:
      generate     Analyze a project and write test files
      preview      Show the tests generated for one file

    \b
    Configuration:
      init         Create testgen.config.json for a project
      validate     Check a configuration file

    \b
    Explorer:
      list-tests   List existing test files and methods

    Use 'testgen <command> --help' for details.
    """
    from testgen.logging import setup_logging

    ctx.debug = debug

    if quiet:
        ctx.verbosity = "quiet"
    elif verbose:
        ctx.verbosity = "verbose"
    else:
        ctx.verbosity = "normal"

    setup_logging(ctx.verbosity)


def main() -> None:
    """Entry point for the CLI."""
    import sys

    debug_mode = "--debug" in sys.argv

    try:
        cli()
    except click.ClickException:
        raise
    except KeyboardInterrupt:
        sys.exit(130)
    except Exception as e:
        from testgen.errors import ExitCode, TestGenError
        from testgen.logging import print_error, print_info

        if isinstance(e, TestGenError):
            print_error(e.message)
            exit_code = e.exit_code
        else:
            print_error(f"Error: {e}")
            exit_code = ExitCode.FAILURE

        if debug_mode:
            print_info("")
            print_info("Full traceback (--debug mode):")
            import traceback

            traceback.print_exc()
        else:
            print_info("Run with --debug for full traceback.")

        sys.exit(exit_code)


if __name__ == "__main__":
    main()
