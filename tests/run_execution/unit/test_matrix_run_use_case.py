"""Matrix run use-case tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from newman_matrix_runner.configuration import (
    DefaultSettings,
    ReportType,
    RunConfiguration,
    resolve_configuration,
)
from newman_matrix_runner.run_execution import (
    InvocationOutcome,
    RunExecutionError,
    describe_outcome,
    run_test_matrix,
)


class _ScriptedInvoker:
    """Records commands and returns scripted outcomes by invocation number."""

    def __init__(self, outcomes: dict[int, InvocationOutcome] | None = None) -> None:
        self.commands: list[str] = []
        self._outcomes = outcomes or {}

    def invoke(self, command: str, output_sink) -> InvocationOutcome:
        self.commands.append(command)
        output_sink(f"tool output {len(self.commands)}")
        return self._outcomes.get(len(self.commands), InvocationOutcome.from_exit_code(0))


def _configuration(environments: int = 2, tests: int = 2, **overrides) -> RunConfiguration:
    values = {
        "location": "/suite",
        "environments": tuple(f"/suite/env/e{index}" for index in range(1, environments + 1)),
        "tests": tuple(f"/suite/tests/t{index}" for index in range(1, tests + 1)),
        "iterations": 1,
        "report_type": ReportType.NONE,
        "report_file_location": "",
        "executable_command": "tool",
    }
    values.update(overrides)
    return RunConfiguration(**values)


def test_runs_every_pair_in_environment_major_order() -> None:
    invoker = _ScriptedInvoker()

    outcome = run_test_matrix(
        _configuration(environments=2, tests=3), invoker=invoker, output_sink=lambda _: None
    )

    assert len(invoker.commands) == 6
    assert invoker.commands[0].endswith("-e /suite/env/e1 -c /suite/tests/t1")
    assert invoker.commands[2].endswith("-e /suite/env/e1 -c /suite/tests/t3")
    assert invoker.commands[3].endswith("-e /suite/env/e2 -c /suite/tests/t1")
    assert [record.entry.sequence for record in outcome.records] == [1, 2, 3, 4, 5, 6]
    assert outcome.exit_code == 0


def test_failure_sets_exit_code_one_and_matrix_continues() -> None:
    invoker = _ScriptedInvoker({2: InvocationOutcome.from_exit_code(42)})

    outcome = run_test_matrix(_configuration(), invoker=invoker, output_sink=lambda _: None)

    assert len(invoker.commands) == 4
    assert outcome.exit_code == 1
    assert outcome.failed_count == 1
    assert outcome.stopped_early is False


def test_launch_failure_counts_as_failure_without_aborting() -> None:
    invoker = _ScriptedInvoker({1: InvocationOutcome.launch_failed(OSError("no such file"))})
    lines: list[str] = []

    outcome = run_test_matrix(_configuration(), invoker=invoker, output_sink=lines.append)

    assert len(invoker.commands) == 4
    assert outcome.exit_code == 1
    assert "Launch failed: no such file" in lines


def test_stop_on_first_failure_skips_remaining_pairs() -> None:
    invoker = _ScriptedInvoker({2: InvocationOutcome.from_exit_code(1)})

    outcome = run_test_matrix(
        _configuration(),
        invoker=invoker,
        output_sink=lambda _: None,
        stop_on_first_failure=True,
    )

    assert len(invoker.commands) == 2
    assert outcome.stopped_early is True
    assert outcome.exit_code == 1
    assert "stopped after first failure" in describe_outcome(outcome)


def test_empty_matrix_runs_nothing_and_succeeds() -> None:
    invoker = _ScriptedInvoker()

    outcome = run_test_matrix(
        _configuration(tests=0), invoker=invoker, output_sink=lambda _: None
    )

    assert invoker.commands == []
    assert outcome.exit_code == 0


def test_writes_progress_headers_and_exit_codes_to_sink() -> None:
    invoker = _ScriptedInvoker({1: InvocationOutcome.from_exit_code(3)})
    lines: list[str] = []

    run_test_matrix(
        _configuration(environments=1, tests=1), invoker=invoker, output_sink=lines.append
    )

    assert "Setting Environment File: /suite/env/e1" in lines
    assert "Setting Test Suite File: /suite/tests/t1" in lines
    assert "Executing Command: tool -n 1 -e /suite/env/e1 -c /suite/tests/t1" in lines
    assert "tool output 1" in lines
    assert lines[-1] == "ExitCode: 3"


def test_environment_header_is_written_once_per_environment() -> None:
    lines: list[str] = []

    run_test_matrix(
        _configuration(environments=2, tests=3),
        invoker=_ScriptedInvoker(),
        output_sink=lines.append,
    )

    headers = [line for line in lines if line.startswith("Setting Environment File")]
    assert headers == [
        "Setting Environment File: /suite/env/e1",
        "Setting Environment File: /suite/env/e2",
    ]


def test_reports_are_numbered_by_environment() -> None:
    invoker = _ScriptedInvoker()
    configuration = _configuration(report_type=ReportType.XML, report_file_location="/out")

    run_test_matrix(configuration, invoker=invoker, output_sink=lambda _: None)

    assert [command.split()[-1] for command in invoker.commands] == [
        "/out/testResult_1.xml",
        "/out/testResult_1.xml",
        "/out/testResult_2.xml",
        "/out/testResult_2.xml",
    ]
    assert all(" -t " in command for command in invoker.commands)


def test_unexpected_invoker_error_aborts_the_run() -> None:
    class _BrokenInvoker:
        def invoke(self, command: str, output_sink) -> InvocationOutcome:
            raise RuntimeError("sink closed")

    with pytest.raises(RunExecutionError, match="sink closed"):
        run_test_matrix(_configuration(), invoker=_BrokenInvoker(), output_sink=lambda _: None)


def test_json_suite_scenario_from_discovered_files(tmp_path: Path) -> None:
    suite = tmp_path / "suite"
    (suite / "env").mkdir(parents=True)
    (suite / "tests").mkdir()
    (suite / "env" / "e1").write_text("{}", encoding="utf-8")
    (suite / "tests" / "t1").write_text("{}", encoding="utf-8")
    (suite / "tests" / "t2").write_text("{}", encoding="utf-8")
    configuration = resolve_configuration(
        [f"--l:{suite}", "--T:json", "--n:/out"],
        DefaultSettings(executable_command="tool"),
    )
    invoker = _ScriptedInvoker()

    outcome = run_test_matrix(configuration, invoker=invoker, output_sink=lambda _: None)

    assert outcome.exit_code == 0
    assert sorted(command.split(" /out/")[0] for command in invoker.commands) == [
        f"tool -n 1 -e {suite}/env/e1 -c {suite}/tests/t1",
        f"tool -n 1 -e {suite}/env/e1 -c {suite}/tests/t2",
    ]
    for command in invoker.commands:
        tokens = command.split()
        assert "-H" not in tokens
        assert "-t" not in tokens
