import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

PACKAGE_LOGGER = "gallery"
LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


def configure_logging(config) -> Path:
    """Attach console and rotating file handlers to the ``gallery`` logger.

    Every module logger lives under ``gallery.*`` and so does the Flask app
    logger, so one set of handlers covers both. Returns the log file path.
    """

    log_path = Path(config.get("LOG_DIR") or "logs") / config.get("LOG_FILE", "gallery.log")
    log_path.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(LOG_FORMAT)
    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=config.get("LOG_MAX_BYTES", 5 * 1024 * 1024),
        backupCount=config.get("LOG_BACKUP_COUNT", 5),
    )
    stream_handler = logging.StreamHandler()
    for handler in (stream_handler, file_handler):
        handler.setFormatter(formatter)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(str(config.get("LOG_LEVEL", "INFO")).upper())

    # Each create_app() call replaces the handlers of the previous one
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    package_logger.addHandler(stream_handler)
    package_logger.addHandler(file_handler)
    return log_path


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
    return logging.getLogger(name)
