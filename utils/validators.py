"""
Input validators for the inspection report CLI.
Provides validation functions for file paths and user inputs.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple


def validate_input_path(path: str) -> Tuple[bool, Optional[str], Optional[Path]]:
    """
    Validate inspection record path.

    Args:
        path: Path string

    Returns:
        Tuple of (is_valid, error_message, Path object)
    """
    input_path = Path(path)

    if not input_path.exists():
        return False, f"File not found: {path}", None

    if not input_path.is_file():
        return False, f"Not a file: {path}", None

    if input_path.suffix.lower() != ".json":
        return False, f"Invalid file type: {input_path.suffix or 'none'} (expected .json)", None

    if input_path.stat().st_size == 0:
        return False, "File is empty", None

    return True, None, input_path


def validate_output_path(path: Optional[str]) -> Tuple[bool, Optional[str], Optional[Path]]:
    """
    Validate report output path.

    Args:
        path: Path string (optional; None means the default report directory)

    Returns:
        Tuple of (is_valid, error_message, Path object)
    """
    if not path:
        return True, None, None

    output_path = Path(path)

    if output_path.suffix.lower() != ".pdf":
        return False, f"Output must be a .pdf file: {path}", None

    if output_path.exists() and output_path.is_dir():
        return False, f"Output path is a directory: {path}", None

    return True, None, output_path


def validate_inspection_type(value: str) -> Tuple[bool, Optional[str], str]:
    """
    Validate inspection type input.

    Returns:
        Tuple of (is_valid, error_message, normalized_value)
    """
    valid_types = ["initial", "final"]
    normalized = (value or "").lower().strip()

    if normalized not in valid_types:
        return False, f"Invalid inspection type. Must be one of: {valid_types}", value

    return True, None, normalized


def validate_timestamp(value: Optional[str]) -> Tuple[bool, Optional[str], Optional[datetime]]:
    """
    Validate an ISO 8601 timestamp for the report footer.

    Returns:
        Tuple of (is_valid, error_message, datetime)
    """
    if not value:
        return True, None, None

    try:
        return True, None, datetime.fromisoformat(value.strip())
    except ValueError:
        return False, f"Invalid timestamp: {value} (expected ISO 8601, e.g. 2024-05-01T09:30)", None

