from __future__ import annotations

import logging
import logging.config
from logging.handlers import RotatingFileHandler
from pathlib import Path
import sys

from foldersync.config import load_structured_file
from foldersync.errors import ConfigurationError


DEFAULT_LOG_DIR = Path("log")
LOG_FILE_NAME = "foldersync.log"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(
    log_dir: Path = DEFAULT_LOG_DIR,
    verbose: bool = False,
    log_config: Path | None = None,
) -> logging.Logger:
    logger = logging.getLogger("foldersync")

    if log_config is not None:
        document = load_structured_file(log_config)
        try:
            logging.config.dictConfig(document)
        except (ValueError, TypeError, AttributeError, ImportError) as exc:
            raise ConfigurationError(f"Invalid logging config {log_config}: {exc}") from exc
        return logger

    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigurationError(f"Cannot create log directory {log_dir}: {exc}") from exc

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False
    formatter = logging.Formatter(LOG_FORMAT)

    file_handler = RotatingFileHandler(
        log_dir / LOG_FILE_NAME, maxBytes=1_000_000, backupCount=3, encoding="utf-8"
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.addHandler(console_handler)

    return logger
