"""Defaults file scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_DEFAULTS_FILENAME = "newman-runner.yaml"

_DEFAULTS_SCAFFOLD_TEMPLATE = """# Process-wide defaults for newman-matrix-runner.
# Every key is optional. Command line flags (--l:, --i:, --T:, --n:, --N:) override them.

# Suite root holding the env/ and tests/ directories.
default_location: "."

# Iterations passed to the test tool (1-10).
default_iterations: 1

# Report type ordinal: 0 none, 1 html, 2 json, 3 xml.
default_report_type: 0

# Directory for report files; required whenever a report type is set.
default_report_file_location: ""

# Test tool command or path, e.g. a local node_modules/.bin/newman.
default_newman_command: "newman"
"""


def build_placeholder_defaults() -> str:
    """Build a commented defaults file template."""
    return _DEFAULTS_SCAFFOLD_TEMPLATE


def write_placeholder_defaults(output_path: Path | str) -> Path:
    """Write the defaults file template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Defaults file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_defaults(), encoding="utf-8")
    return destination.resolve()
