import logging
import sys
from pathlib import Path
from typing import Optional, Union


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the console readable:
    - all task_ledger logs pass
    - uvicorn access/error logs pass at INFO+
    - any other third party (sqlalchemy, jose) only at WARNING+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name.startswith("task_ledger") or name == "__main__":
            return True
        if name.startswith("uvicorn"):
            return record.levelno >= logging.INFO
        return record.levelno >= logging.WARNING


def setup_logging(
    *,
    level: int = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
) -> None:
    """
    Configure the root logger with a console handler and, when ``log_file``
    is given, a file handler that keeps everything at DEBUG.

    Call this ONCE, before the app starts serving.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_file), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        root.addHandler(fh)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)
