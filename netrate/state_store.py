"""
Persisted counter files for netrate

Reads are best effort: a missing or malformed file counts as 0, so the first
run (or a deleted state file) starts from a zero baseline. Writes are not:
a failed write raises WriteError, because the next tick's baseline would be
wrong.
"""

import logging
from pathlib import Path
from typing import Union

from .counter_source import parse_counter
from .errors import NetRateError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class WriteError(NetRateError):
    """An output file could not be created or written"""

    def __init__(self, path: PathLike, reason: str):
        self.path = Path(path)
        super().__init__(f'Failed to write into "{path}": {reason}')


def load_counter(path: PathLike) -> int:
    """Return the counter stored in path, or 0 if it can't be read"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return parse_counter(f.read().strip())
    except (OSError, UnicodeDecodeError, ValueError) as e:
        logger.debug(f"Using 0 for {path}: {e}")
        return 0


def store_text(path: PathLike, text: str) -> None:
    """Create or truncate path and write text into it"""
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        raise WriteError(path, e.strerror or str(e)) from e


def store_counter(path: PathLike, value: int) -> None:
    """Write the decimal text of value into path"""
    store_text(path, str(value))
