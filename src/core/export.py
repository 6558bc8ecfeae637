"""Copy and file-export actions built on the summary generator."""

import logging
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Callable, Optional, Union

from src.shared.errors import ExportError
from .models import SessionResult
from .summary import generate_export_content, generate_summary

logger = logging.getLogger(__name__)

ClipboardWriter = Callable[[str], None]


def export_filename(today: Optional[date] = None) -> str:
    """Return ``credit-calculation-YYYY-MM-DD.txt`` for today's UTC date."""
    today = today or datetime.now(timezone.utc).date()
    return f"credit-calculation-{today.isoformat()}.txt"


def export_as_file(
    result: Optional[SessionResult],
    directory: Union[str, Path],
    today: Optional[date] = None,
) -> Optional[Path]:
    """
    Write the summary to a dated UTF-8 text file.

    Args:
        result: Stored calculation result; nothing is written when None
        directory: Destination directory
        today: Date used in the file name (defaults to today, UTC)

    Returns:
        Path of the written file, or None when there is no result

    Raises:
        ExportError: If the file cannot be written
    """
    if result is None:
        return None

    path = Path(directory) / export_filename(today)
    try:
        path.write_text(generate_export_content(result), encoding="utf-8")
    except OSError as e:
        logger.error(f"Failed to export summary to {path}: {e}")
        raise ExportError(f"Could not write {path.name}: {e}") from e

    logger.info(f"Exported summary to {path}")
    return path


def copy_to_clipboard(
    result: Optional[SessionResult], writer: ClipboardWriter
) -> Optional[str]:
    """
    Hand the summary text to a clipboard writer.

    Args:
        result: Stored calculation result; nothing is copied when None
        writer: Callable that places text on the clipboard

    Returns:
        The copied text, or None when there is no result

    Raises:
        ExportError: If the writer fails
    """
    if result is None:
        return None

    summary = generate_summary(result)
    try:
        writer(summary)
    except Exception as e:
        logger.error(f"Failed to copy summary to clipboard: {e}")
        raise ExportError(f"Could not copy summary: {e}") from e
    return summary
