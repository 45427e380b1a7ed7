"""Run execution domain exports."""

from .command_builder import build_invocation_command, build_report_path, iter_matrix
from .matrix_run_use_case import RunExecutionError, describe_outcome, run_test_matrix
from .run_contracts import (
    InvocationOutcome,
    InvocationStatus,
    MatrixEntry,
    MatrixOutcome,
    RunRecord,
)
from .shell_invoker import CommandInvoker, OutputSink, ShellCommandInvoker

__all__ = [
    "InvocationOutcome",
    "InvocationStatus",
    "MatrixEntry",
    "MatrixOutcome",
    "RunRecord",
    "CommandInvoker",
    "OutputSink",
    "ShellCommandInvoker",
    "RunExecutionError",
    "build_invocation_command",
    "build_report_path",
    "describe_outcome",
    "iter_matrix",
    "run_test_matrix",
]
