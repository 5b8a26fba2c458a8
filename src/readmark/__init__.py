"""readmark - position reconciliation and annotation integrity for long-form text.

Keeps user selections and persisted marks pointing at the right characters
while a document moves between its raw, cleaned (markdown) and rendered
(display) representations, and while it is edited in place.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

__version__ = "0.1.0"


def setup_logging(
    log_dir: Path | None = None,
    console_level: str | None = None,
    file_level: str | None = None,
) -> Path:
    """Configure logging to both console and rotating file.

    Defaults come from ``get_settings().logging``. Library code never calls
    this; applications embedding readmark do, once, at startup.

    Returns:
        Path of the log file.
    """
    from readmark.config import get_settings

    cfg = get_settings().logging
    log_dir = log_dir if log_dir is not None else cfg.log_dir
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "readmark.log"

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # File handler - detailed logging with rotation (10MB, keep 5 backups)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(file_level or cfg.file_level)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    # Console handler - less verbose
    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level or cfg.level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logging.info("Logging configured. Log file: %s", log_file.absolute())
    return log_file
