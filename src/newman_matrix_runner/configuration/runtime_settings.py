"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from pathlib import Path

MIN_ITERATIONS = 1
MAX_ITERATIONS = 10


class ReportType(IntEnum):
    """Report output requested from the test tool.

    The integer values are the ordinals accepted by the defaults file.
    """

    NONE = 0
    HTML = 1
    JSON = 2
    XML = 3

    @classmethod
    def from_ordinal(cls, ordinal: int) -> ReportType:
        return cls(ordinal)

    @classmethod
    def from_token(cls, value: str) -> ReportType:
        """Map a `--T` flag value to a report type; unknown values mean no report."""
        return _REPORT_TYPES_BY_TOKEN.get(value, cls.NONE)


class ReportNaming(str, Enum):
    """How report file names are numbered."""

    PER_ENVIRONMENT = "per-environment"
    PER_INVOCATION = "per-invocation"


@dataclass(frozen=True)
class ReportFormat:
    """Tool flag and file extension used to request one report type."""

    code: str
    extension: str


_REPORT_TYPES_BY_TOKEN = {
    "json": ReportType.JSON,
    "html": ReportType.HTML,
    "xml": ReportType.XML,
}

REPORT_FORMATS: dict[ReportType, ReportFormat] = {
    ReportType.NONE: ReportFormat(code="", extension=""),
    ReportType.HTML: ReportFormat(code="-H", extension=".html"),
    ReportType.JSON: ReportFormat(code="", extension=".json"),
    ReportType.XML: ReportFormat(code="-t", extension=".xml"),
}


@dataclass(frozen=True)
class DefaultSettings:
    """Process-wide defaults applied before command line flags."""

    location: str = "."
    iterations: int = 1
    report_type: ReportType = ReportType.NONE
    report_file_location: str = ""
    executable_command: str = "newman"


@dataclass(frozen=True)
class RunConfiguration:  # pylint: disable=too-many-instance-attributes
    """Validated settings for one matrix run."""

    location: str
    environments: tuple[str, ...]
    tests: tuple[str, ...]
    iterations: int
    report_type: ReportType
    report_file_location: str
    executable_command: str
    report_naming: ReportNaming = ReportNaming.PER_ENVIRONMENT

    @property
    def report_code(self) -> str:
        return REPORT_FORMATS[self.report_type].code

    @property
    def report_file_extension(self) -> str:
        return REPORT_FORMATS[self.report_type].extension

    @property
    def env_location(self) -> Path:
        return Path(self.location) / "env"

    @property
    def test_location(self) -> Path:
        return Path(self.location) / "tests"

    @property
    def reports_enabled(self) -> bool:
        return self.report_type is not ReportType.NONE
