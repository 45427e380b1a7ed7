"""Run execution use-case service."""

from __future__ import annotations

import logging
import sys

from newman_matrix_runner.configuration.runtime_settings import RunConfiguration

from .command_builder import build_invocation_command, iter_matrix
from .run_contracts import (
    InvocationOutcome,
    InvocationStatus,
    MatrixEntry,
    MatrixOutcome,
    RunRecord,
)
from .shell_invoker import CommandInvoker, OutputSink, ShellCommandInvoker

_LOGGER = logging.getLogger(__name__)

SECTION_SEPARATOR = "-" * 52


class RunExecutionError(Exception):
    """Raised when the matrix run cannot be completed."""


def run_test_matrix(
    configuration: RunConfiguration,
    *,
    invoker: CommandInvoker | None = None,
    output_sink: OutputSink | None = None,
    stop_on_first_failure: bool = False,
) -> MatrixOutcome:
    """Invoke the test tool once per (environment, test) pair and aggregate the outcome.

    Invocations run strictly one after another. A failed invocation never stops the
    matrix unless `stop_on_first_failure` is set.

    Raises:
      RunExecutionError: If an invocation fails for reasons other than the tool itself.
    """
    resolved_invoker = invoker or ShellCommandInvoker()
    sink = output_sink or _write_stdout_line

    records: list[RunRecord] = []
    current_env_counter = 0
    for entry in iter_matrix(configuration):
        if entry.env_counter != current_env_counter:
            current_env_counter = entry.env_counter
            sink("")
            sink(SECTION_SEPARATOR)
            sink(f"Setting Environment File: {entry.environment}")

        record = _run_entry(configuration, entry, resolved_invoker, sink)
        records.append(record)
        if stop_on_first_failure and not record.outcome.succeeded:
            _LOGGER.info("Stopping after failed invocation %d", entry.sequence)
            return MatrixOutcome(records=tuple(records), stopped_early=True)

    return MatrixOutcome(records=tuple(records))


def describe_outcome(outcome: MatrixOutcome) -> str:
    """Return a one-line summary of a matrix outcome."""
    summary = f"{len(outcome.records)} invocation(s), {outcome.failed_count} failed"
    if outcome.stopped_early:
        summary += " (stopped after first failure)"
    return summary


def _run_entry(
    configuration: RunConfiguration,
    entry: MatrixEntry,
    invoker: CommandInvoker,
    sink: OutputSink,
) -> RunRecord:
    sink(f"Setting Test Suite File: {entry.test}")
    command = build_invocation_command(configuration, entry)
    sink(f"Executing Command: {command}")
    sink("")
    try:
        outcome = invoker.invoke(command, sink)
    except Exception as exc:
        raise RunExecutionError(f"Invocation failed unexpectedly: {command}: {exc}") from exc
    sink(_describe_invocation(outcome))
    _LOGGER.debug("Invocation %d finished with %s", entry.sequence, outcome.status.value)
    return RunRecord(entry=entry, command=command, outcome=outcome)


def _describe_invocation(outcome: InvocationOutcome) -> str:
    if outcome.status is InvocationStatus.LAUNCH_FAILED:
        return f"Launch failed: {outcome.error_message}"
    if outcome.status is InvocationStatus.TIMED_OUT:
        return f"Timed out: {outcome.error_message}"
    return f"ExitCode: {outcome.exit_code}"


def _write_stdout_line(line: str) -> None:
    sys.stdout.write(f"{line}\n")
    sys.stdout.flush()
