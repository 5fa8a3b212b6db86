"""Delivery of the finished agenda to stdout or a file."""

import logging
import sys
from typing import Optional, TextIO

from gcalorg.exceptions import OutputWriteError

logger = logging.getLogger(__name__)

STDOUT_SENTINEL = "-"


def write_document(text: str, path: str = "", stdout: Optional[TextIO] = None) -> None:
    """Print ``text`` when ``path`` is empty or ``-``, otherwise write it verbatim.

    Raises:
        OutputWriteError: If the file cannot be written
    """
    if not path or path == STDOUT_SENTINEL:
        print(text, file=stdout or sys.stdout)
        return

    logger.info(f"Writing agenda to {path}")
    try:
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(text)
    except OSError as e:
        raise OutputWriteError(path, e) from e
