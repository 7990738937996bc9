# --------------------------------------------------------------
#  logging_config.py
# --------------------------------------------------------------
import logging
from logging.handlers import RotatingFileHandler
from typing import Optional

from marginaltrees.config import LoggingConfig

FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(config: Optional[LoggingConfig] = None) -> logging.Logger:
    """Attach *console* and optional rotating *file* handlers to the package logger.

    *   **Console handler** - human-readable output at the configured level.
    *   **File handler** - plaintext log, rotated at ``config.max_bytes``.

    Calling this repeatedly replaces the handlers instead of stacking them.
    """
    config = config or LoggingConfig()
    level = logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level '{config.level}'")

    package_logger = logging.getLogger("marginaltrees")
    for handler in package_logger.handlers:
        handler.close()
    package_logger.handlers = []
    package_logger.setLevel(level)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(FORMAT, "%H:%M:%S"))
    package_logger.addHandler(console_handler)

    if config.log_file is not None:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            config.log_file,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FORMAT, "%Y-%m-%d %H:%M:%S"))
        package_logger.addHandler(file_handler)

    package_logger.propagate = False
    package_logger.debug(f"Logging configured at level {config.level}")
    return package_logger
