"""
Utilities Module - Common helper functions.
==========================================

Provides utility functions for:
- File I/O (JSON, with atomic writes)
- Lenient decoding of the API's JSON-in-string fields
- Display formatting (dates, initials, truncation)
"""

import json
import os
import tempfile
from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional, Union

from researchconnect.shared.logging import get_logger

logger = get_logger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Directory Management
# ─────────────────────────────────────────────────────────────────────────────


def ensure_directory(path: Path) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path

    Returns:
        The path (for chaining)
    """
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


# ─────────────────────────────────────────────────────────────────────────────
# JSON File I/O
# ─────────────────────────────────────────────────────────────────────────────


def load_json(file_path: Path) -> Any:
    """
    Load data from a JSON file.

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If file is not valid JSON
    """
    with open(Path(file_path), "r", encoding="utf-8") as f:
        return json.load(f)


def save_json(file_path: Path, data: Any, indent: int = 2) -> None:
    """
    Save data to a JSON file atomically.

    The data is written to a temporary file in the same directory and then
    moved over the target, so readers never see a half-written file.

    Args:
        file_path: Path to JSON file
        data: Data to save (must be JSON serializable)
        indent: Indentation level (default: 2)
    """
    file_path = Path(file_path)
    ensure_directory(file_path.parent)

    fd, tmp_name = tempfile.mkstemp(dir=file_path.parent, prefix=f".{file_path.name}.")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=indent, ensure_ascii=False, default=str)
        os.replace(tmp_name, file_path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.debug(f"Saved JSON to {file_path}")


# ─────────────────────────────────────────────────────────────────────────────
# JSON-in-string Fields
# ─────────────────────────────────────────────────────────────────────────────


def parse_json_list(value: Union[str, list, None]) -> list[Any]:
    """
    Decode a JSON-encoded list field.

    Preference records store lists as JSON strings. Malformed input, or a
    value that decodes to something other than a list, yields ``[]``.

    Example:
        >>> parse_json_list('["Machine Learning", "Algorithms"]')
        ['Machine Learning', 'Algorithms']
        >>> parse_json_list("not json")
        []
    """
    if isinstance(value, list):
        return list(value)
    if not value:
        return []
    try:
        decoded = json.loads(value)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring malformed JSON list: {value!r}")
        return []
    return decoded if isinstance(decoded, list) else []


def parse_json_object(value: Union[str, dict, None]) -> dict[str, Any]:
    """Decode a JSON-encoded object field, yielding ``{}`` when malformed."""
    if isinstance(value, dict):
        return dict(value)
    if not value:
        return {}
    try:
        decoded = json.loads(value)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring malformed JSON object: {value!r}")
        return {}
    return decoded if isinstance(decoded, dict) else {}


# ─────────────────────────────────────────────────────────────────────────────
# Display Helpers
# ─────────────────────────────────────────────────────────────────────────────


def parse_date(value: Union[str, date, datetime, None]) -> Optional[date]:
    """
    Parse an ISO date or timestamp into a ``date``.

    Accepts ``YYYY-MM-DD`` and full ISO timestamps (a trailing ``Z`` is
    allowed). Returns ``None`` for empty or unparsable input.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def format_date(value: Union[str, date, datetime, None]) -> str:
    """
    Format a date for display.

    Example:
        >>> format_date("2026-10-19T08:30:00Z")
        'Oct 19, 2026'
        >>> format_date("")
        'N/A'
    """
    parsed = parse_date(value)
    if parsed is None:
        return "N/A"
    return f"{parsed.strftime('%b')} {parsed.day}, {parsed.year}"


def initials(name: str) -> str:
    """Uppercase initials of a name, or ``"?"`` when empty."""
    parts = (name or "").split()
    if not parts:
        return "?"
    return "".join(part[0] for part in parts).upper()


def truncate_text(text: str, max_length: int = 100, suffix: str = "...") -> str:
    """
    Truncate text to a maximum length.

    Args:
        text: Text to truncate
        max_length: Maximum length
        suffix: Suffix to add if truncated

    Returns:
        Truncated text
    """
    if len(text) <= max_length:
        return text
    return text[: max_length - len(suffix)] + suffix
