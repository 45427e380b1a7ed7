"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_DEFAULTS_FILENAME,
    build_placeholder_defaults,
    write_placeholder_defaults,
)
from .flag_tokens import FlagToken, parse_flag_token
from .loader import ConfigurationError, load_default_settings
from .resolver import parse_iterations, resolve_configuration
from .runtime_settings import (
    REPORT_FORMATS,
    DefaultSettings,
    ReportFormat,
    ReportNaming,
    ReportType,
    RunConfiguration,
)

__all__ = [
    "DefaultSettings",
    "ReportFormat",
    "ReportNaming",
    "ReportType",
    "REPORT_FORMATS",
    "RunConfiguration",
    "FlagToken",
    "parse_flag_token",
    "ConfigurationError",
    "load_default_settings",
    "parse_iterations",
    "resolve_configuration",
    "DEFAULT_DEFAULTS_FILENAME",
    "build_placeholder_defaults",
    "write_placeholder_defaults",
]
