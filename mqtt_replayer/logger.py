import logging
from logging.handlers import TimedRotatingFileHandler

LOGGER_NAME = "mqtt_replayer"
LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"


def setup_logger(verbose: bool = False, log_file: str = None) -> logging.Logger:
    """
    Configure the package logger: console output, plus an optional file
    rotated at midnight. Verbose mode shows the per-event DEBUG lines.
    Calling it again only adjusts the level.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    if not logger.handlers:
        formatter = logging.Formatter(LOG_FORMAT)

        ch = logging.StreamHandler()
        ch.setFormatter(formatter)
        logger.addHandler(ch)

        if log_file:
            fh = TimedRotatingFileHandler(
                filename=log_file,
                when="midnight",
                interval=1,
                backupCount=7,
                encoding="utf-8",
            )
            fh.setFormatter(formatter)
            logger.addHandler(fh)

    return logger
