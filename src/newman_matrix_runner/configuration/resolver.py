"""Resolve command line flags and defaults into a validated run configuration."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from pathlib import Path

from .loader import ConfigurationError
from .flag_tokens import FlagToken, iter_flag_tokens
from .runtime_settings import (
    MAX_ITERATIONS,
    MIN_ITERATIONS,
    DefaultSettings,
    ReportNaming,
    ReportType,
    RunConfiguration,
)

_LOGGER = logging.getLogger(__name__)

_INTEGER_PATTERN = re.compile(r"[+-]?\d+", re.ASCII)


@dataclass
class _PendingConfiguration:
    """Mutable settings while flags are still being applied."""

    location: str
    iterations: int
    report_type: ReportType
    report_file_location: str
    executable_command: str
    environments: list[str] = field(default_factory=list)
    tests: list[str] = field(default_factory=list)

    @classmethod
    def from_defaults(cls, defaults: DefaultSettings) -> _PendingConfiguration:
        return cls(
            location=defaults.location,
            iterations=defaults.iterations,
            report_type=defaults.report_type,
            report_file_location=defaults.report_file_location,
            executable_command=defaults.executable_command,
        )


def resolve_configuration(
    args: Sequence[str],
    defaults: DefaultSettings,
    *,
    report_naming: ReportNaming = ReportNaming.PER_ENVIRONMENT,
) -> RunConfiguration:
    """Apply flags over defaults, discover suite files and validate the result.

    Raises:
      ConfigurationError: If the resolved settings cannot drive a run.
    """
    pending = _PendingConfiguration.from_defaults(defaults)
    for raw_token, token in iter_flag_tokens(args):
        if token is None or not _apply_flag(pending, token):
            _LOGGER.debug("Ignoring unrecognised argument: %r", raw_token)

    if pending.report_type is not ReportType.NONE and not pending.report_file_location:
        raise ConfigurationError(
            "--n:[report file location] flag is required when a report type is set."
        )

    location = Path(pending.location)
    if not location.is_dir():
        raise ConfigurationError(
            f"--l: location is invalid, directory does not exist: {pending.location}"
        )

    configuration = RunConfiguration(
        location=pending.location,
        environments=tuple(pending.environments),
        tests=tuple(pending.tests),
        iterations=pending.iterations,
        report_type=pending.report_type,
        report_file_location=pending.report_file_location,
        executable_command=pending.executable_command,
        report_naming=report_naming,
    )
    return replace(
        configuration,
        environments=configuration.environments
        or _discover_files(
            configuration.env_location, "test location does not have a valid 'env' directory"
        ),
        tests=configuration.tests
        or _discover_files(
            configuration.test_location, "test location does not have a valid 'tests' directory"
        ),
    )


def parse_iterations(value: str) -> int:
    """Parse an iteration count, falling back to 1 when invalid or out of range.

    Only optionally signed ASCII digits count as a number; forms such as `1_0` do not.
    """
    stripped = value.strip()
    if not _INTEGER_PATTERN.fullmatch(stripped):
        return MIN_ITERATIONS
    iterations = int(stripped)
    if iterations < MIN_ITERATIONS or iterations > MAX_ITERATIONS:
        return MIN_ITERATIONS
    return iterations


def _apply_flag(pending: _PendingConfiguration, token: FlagToken) -> bool:
    flag, value = token.flag, token.value
    if flag == "l":
        pending.location = value
    elif flag == "e":
        pending.environments.append(value)
    elif flag == "t":
        pending.tests.append(value)
    elif flag == "i":
        pending.iterations = parse_iterations(value)
    elif flag == "T":
        pending.report_type = ReportType.from_token(value)
    elif flag == "n":
        pending.report_file_location = value
    elif flag == "N":
        pending.executable_command = value
    else:
        return False
    return True


def _discover_files(directory: Path, missing_message: str) -> tuple[str, ...]:
    """List regular files of a suite directory in filesystem enumeration order."""
    if not directory.is_dir():
        raise ConfigurationError(f"{missing_message}: {directory}")
    discovered = tuple(str(entry) for entry in directory.iterdir() if entry.is_file())
    _LOGGER.debug("Discovered %d file(s) in %s", len(discovered), directory)
    return discovered
