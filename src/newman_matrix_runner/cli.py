"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys

import click

from newman_matrix_runner.configuration import (
    DEFAULT_DEFAULTS_FILENAME,
    ConfigurationError,
    ReportNaming,
    load_default_settings,
    resolve_configuration,
    write_placeholder_defaults,
)
from newman_matrix_runner.run_execution import (
    RunExecutionError,
    ShellCommandInvoker,
    describe_outcome,
    run_test_matrix,
)

EXIT_OK = 0
EXIT_INVOCATION_FAILED = 1
EXIT_CONFIGURATION_ERROR = 2
EXIT_INTERNAL_ERROR = 3
EXIT_INTERRUPTED = 130

_LOGGER = logging.getLogger(__name__)


class CliError(Exception):
    """Custom CLI error."""

    def __init__(self, message: str, exit_code: int = EXIT_CONFIGURATION_ERROR) -> None:
        super().__init__(message)
        self.exit_code = exit_code


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="newman-matrix-runner")
def cli() -> None:
    """Run newman collections against every environment of a test suite."""


@cli.command(name="generate-defaults")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_DEFAULTS_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML defaults file to write",
)
def generate_defaults(output_path: str) -> None:
    """Generate a commented defaults file."""
    try:
        resolved_output = write_placeholder_defaults(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(
    name="run",
    context_settings={"ignore_unknown_options": True},
    epilog=(
        "Flags: --l:<suite root> --e:<environment file> --t:<test file> "
        "--i:<iterations 1-10> --T:<json|html|xml|none> --n:<report directory> "
        "--N:<newman command>"
    ),
)
@click.option(
    "--defaults",
    "defaults_path",
    required=False,
    type=click.Path(path_type=str),
    help="YAML file with process-wide defaults",
)
@click.option(
    "--timeout",
    "timeout_seconds",
    required=False,
    type=click.FloatRange(min=0, min_open=True),
    help="Kill an invocation that runs longer than this many seconds",
)
@click.option(
    "--fail-fast",
    is_flag=True,
    default=False,
    help="Stop the matrix after the first failed invocation.",
)
@click.option(
    "--report-naming",
    type=click.Choice([naming.value for naming in ReportNaming]),
    default=ReportNaming.PER_ENVIRONMENT.value,
    show_default=True,
    help="Number report files per environment or per invocation",
)
@click.option("--verbose", is_flag=True, default=False, help="Enable debug logging on stderr.")
@click.argument("flags", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def run_matrix(  # pylint: disable=too-many-arguments
    ctx: click.Context,
    defaults_path: str | None,
    timeout_seconds: float | None,
    fail_fast: bool,
    report_naming: str,
    verbose: bool,
    flags: tuple[str, ...],
) -> None:
    """Invoke newman for every environment and test suite of a suite root."""
    _configure_logging(verbose)
    try:
        configuration = resolve_configuration(
            flags,
            load_default_settings(defaults_path),
            report_naming=ReportNaming(report_naming),
        )
    except ConfigurationError as exc:
        raise CliError(str(exc)) from exc

    _LOGGER.debug(
        "Resolved %d environment(s) and %d test suite(s)",
        len(configuration.environments),
        len(configuration.tests),
    )
    try:
        outcome = run_test_matrix(
            configuration,
            invoker=ShellCommandInvoker(timeout_seconds=timeout_seconds),
            output_sink=click.echo,
            stop_on_first_failure=fail_fast,
        )
    except RunExecutionError as exc:
        raise CliError(str(exc), exit_code=EXIT_INTERNAL_ERROR) from exc
    except KeyboardInterrupt as exc:
        raise CliError("Interrupted.", exit_code=EXIT_INTERRUPTED) from exc

    click.echo("")
    click.echo(describe_outcome(outcome))
    if outcome.exit_code != EXIT_OK:
        ctx.exit(EXIT_INVOCATION_FAILED)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        result = cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return exc.exit_code
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Interrupted.", err=True)
        return EXIT_INTERRUPTED
    except Exception as exc:  # pylint: disable=broad-exception-caught
        _LOGGER.debug("Unhandled error", exc_info=True)
        click.echo(f"Internal error: {exc}", err=True)
        return EXIT_INTERNAL_ERROR
    return result if isinstance(result, int) else EXIT_OK
