"""Log handlers for tablebridge.

Classes:
    ConsoleHandler: Stream handler sending errors to stderr
    RotatingFileHandler: Size-rotated file handler that creates its directory
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Union


class ConsoleHandler(logging.StreamHandler):
    """Console handler writing to stdout, with ERROR and above on stderr."""

    def __init__(self, *, use_stderr_for_errors: bool = True) -> None:
        super().__init__(sys.stdout)
        self.use_stderr_for_errors = use_stderr_for_errors

    def emit(self, record: logging.LogRecord) -> None:
        if self.use_stderr_for_errors and record.levelno >= logging.ERROR:
            original_stream = self.stream
            self.stream = sys.stderr
            try:
                super().emit(record)
            finally:
                self.stream = original_stream
        else:
            super().emit(record)


class RotatingFileHandler(logging.handlers.RotatingFileHandler):
    """Rotating file handler that creates missing parent directories."""

    def __init__(
        self,
        filename: Union[str, Path],
        *,
        maxBytes: int = 10485760,
        backupCount: int = 5,
        encoding: str = "utf-8",
    ) -> None:
        path = Path(filename)
        path.parent.mkdir(parents=True, exist_ok=True)
        super().__init__(
            str(path),
            maxBytes=maxBytes,
            backupCount=backupCount,
            encoding=encoding,
        )
