"""Run execution entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class InvocationStatus(str, Enum):
    """Outcome status of one test tool invocation."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    LAUNCH_FAILED = "launch_failed"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class InvocationOutcome:
    """Result of running one command through an invoker."""

    status: InvocationStatus
    exit_code: int | None
    error_message: str | None

    @property
    def succeeded(self) -> bool:
        return self.status is InvocationStatus.SUCCEEDED

    @staticmethod
    def from_exit_code(exit_code: int) -> InvocationOutcome:
        return InvocationOutcome(
            status=InvocationStatus.SUCCEEDED if exit_code == 0 else InvocationStatus.FAILED,
            exit_code=exit_code,
            error_message=None,
        )

    @staticmethod
    def launch_failed(error: Exception) -> InvocationOutcome:
        return InvocationOutcome(
            status=InvocationStatus.LAUNCH_FAILED,
            exit_code=None,
            error_message=str(error),
        )

    @staticmethod
    def timed_out(timeout_seconds: float) -> InvocationOutcome:
        return InvocationOutcome(
            status=InvocationStatus.TIMED_OUT,
            exit_code=None,
            error_message=f"Invocation exceeded timeout of {timeout_seconds:g} seconds.",
        )


@dataclass(frozen=True)
class MatrixEntry:
    """One (environment, test) pair of the run matrix."""

    sequence: int
    env_counter: int
    test_counter: int
    environment: str
    test: str


@dataclass(frozen=True)
class RunRecord:
    """One executed invocation of the matrix."""

    entry: MatrixEntry
    command: str
    outcome: InvocationOutcome


@dataclass(frozen=True)
class MatrixOutcome:
    """Aggregated outcome of one matrix run."""

    records: tuple[RunRecord, ...]
    stopped_early: bool = False

    @property
    def failed_count(self) -> int:
        return sum(1 for record in self.records if not record.outcome.succeeded)

    @property
    def exit_code(self) -> int:
        return 1 if self.failed_count else 0
