import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s │ %(message)s"
DATE_FORMAT = "%H:%M:%S"
MAX_BYTES = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 2


def setup_logging(level: str = "WARNING", log_file: Path | None = None) -> bool:
    """
    Configure the root logger once for the whole run.

    Returns False when the log file could not be opened; console logging is
    set up regardless and the run goes on without the file.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    error = None

    if log_file is not None:
        try:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            handlers.append(RotatingFileHandler(
                log_file,
                mode="a",
                maxBytes=MAX_BYTES,
                backupCount=BACKUP_COUNT,
                encoding="utf-8",
            ))
        except OSError as e:
            error = e

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
        force=True,
    )

    if error is not None:
        logging.getLogger(__name__).error(f"could not open log file {log_file}: {error}")
        return False
    return True
