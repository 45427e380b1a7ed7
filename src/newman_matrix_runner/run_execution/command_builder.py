"""Matrix enumeration and test tool command construction."""

from __future__ import annotations

import shlex
from collections.abc import Iterator
from pathlib import Path

from newman_matrix_runner.configuration.runtime_settings import ReportNaming, RunConfiguration

from .run_contracts import MatrixEntry

REPORT_FILE_PREFIX = "testResult_"


def iter_matrix(configuration: RunConfiguration) -> Iterator[MatrixEntry]:
    """Yield every (environment, test) pair, environment-major and test-minor."""
    sequence = 0
    for env_counter, environment in enumerate(configuration.environments, start=1):
        for test_counter, test in enumerate(configuration.tests, start=1):
            sequence += 1
            yield MatrixEntry(
                sequence=sequence,
                env_counter=env_counter,
                test_counter=test_counter,
                environment=environment,
                test=test,
            )


def build_report_path(configuration: RunConfiguration, entry: MatrixEntry) -> str:
    """Return the report file path requested from the tool for one matrix entry."""
    if configuration.report_naming is ReportNaming.PER_INVOCATION:
        stem = f"{REPORT_FILE_PREFIX}{entry.env_counter}_{entry.test_counter}"
    else:
        stem = f"{REPORT_FILE_PREFIX}{entry.env_counter}"
    file_name = f"{stem}{configuration.report_file_extension}"
    return str(Path(configuration.report_file_location) / file_name)


def build_invocation_command(configuration: RunConfiguration, entry: MatrixEntry) -> str:
    """Build the shell command line for one matrix entry.

    The executable command is kept verbatim so launchers such as `npx newman` work;
    file path arguments are shell-quoted.
    """
    arguments = [
        "-n",
        str(configuration.iterations),
        "-e",
        shlex.quote(entry.environment),
        "-c",
        shlex.quote(entry.test),
    ]
    if configuration.reports_enabled:
        if configuration.report_code:
            arguments.append(configuration.report_code)
        arguments.append(shlex.quote(build_report_path(configuration, entry)))
    return " ".join([configuration.executable_command, *arguments])
