"""
Report Writer

Names and writes downloaded report files.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Union

from ..core.constants import FileConstants
from ..core.utils import format_bytes

logger = logging.getLogger(__name__)


def report_filename(sequence: int, started: datetime) -> str:
    """
    Build the deterministic file name for one export cycle.

    Args:
        sequence: Cycle sequence number, starting at 0
        started: Wall-clock time the cycle started

    Returns:
        str: e.g. ``generated_report_0_20240131T120000.pdf``
    """
    timestamp = started.strftime(FileConstants.TIMESTAMP_FORMAT)
    return f"{FileConstants.REPORT_PREFIX}_{sequence}_{timestamp}{FileConstants.REPORT_EXTENSION}"


def write_report(content: bytes, sequence: int, started: datetime,
                 output_dir: Union[str, Path] = ".") -> Path:
    """
    Write report bytes verbatim to a new file.

    The file is created exclusively; an existing file with the same name
    raises FileExistsError instead of being overwritten.

    Args:
        content: Raw report bytes
        sequence: Cycle sequence number
        started: Wall-clock time the cycle started
        output_dir: Directory to write into (created if missing)

    Returns:
        Path: Path of the written file
    """
    directory = Path(output_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / report_filename(sequence, started)

    with open(path, 'xb') as f:
        f.write(content)

    logger.debug(f"Report saved to: {path} ({format_bytes(len(content))})")
    return path
