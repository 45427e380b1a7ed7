"""Process-wide defaults loader service."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from .runtime_settings import MAX_ITERATIONS, MIN_ITERATIONS, DefaultSettings, ReportType


class ConfigurationError(Exception):
    """Raised when the run configuration is invalid or incomplete."""


_FALLBACK_DEFAULTS = DefaultSettings()


def load_default_settings(defaults_path: Path | str | None = None) -> DefaultSettings:
    """Load the defaults file, or return built-in defaults when no path is given.

    Every key of the defaults file is optional; missing keys keep the built-in value.
    """
    if defaults_path is None:
        return _FALLBACK_DEFAULTS

    path = Path(defaults_path)
    if not path.exists():
        raise ConfigurationError(f"Defaults file not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Failed to read defaults file {path}: {exc}") from exc
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:  # pragma: no cover - exercised indirectly
        raise ConfigurationError(f"Failed to parse defaults file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Defaults file root must be a mapping.")

    return DefaultSettings(
        location=_optional_string(
            parsed.get("default_location"), "default_location", _FALLBACK_DEFAULTS.location
        ),
        iterations=_parse_iterations(parsed.get("default_iterations")),
        report_type=_parse_report_type(parsed.get("default_report_type")),
        report_file_location=_optional_string(
            parsed.get("default_report_file_location"),
            "default_report_file_location",
            _FALLBACK_DEFAULTS.report_file_location,
        ),
        executable_command=_optional_string(
            parsed.get("default_newman_command"),
            "default_newman_command",
            _FALLBACK_DEFAULTS.executable_command,
        ),
    )


def _parse_iterations(value: Any) -> int:
    if value is None:
        return _FALLBACK_DEFAULTS.iterations
    iterations = _require_int(value, "default_iterations")
    if iterations < MIN_ITERATIONS or iterations > MAX_ITERATIONS:
        raise ConfigurationError(
            f"default_iterations must be between {MIN_ITERATIONS} and {MAX_ITERATIONS}."
        )
    return iterations


def _parse_report_type(value: Any) -> ReportType:
    if value is None:
        return _FALLBACK_DEFAULTS.report_type
    ordinal = _require_int(value, "default_report_type")
    try:
        return ReportType.from_ordinal(ordinal)
    except ValueError as exc:
        allowed = ", ".join(f"{member.value} ({member.name.lower()})" for member in ReportType)
        raise ConfigurationError(f"default_report_type must be one of {allowed}.") from exc


def _require_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    return value


def _optional_string(value: Any, field_name: str, fallback: str) -> str:
    if value is None:
        return fallback
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    return value.strip()
