import os
import sys
import logging
from logging.handlers import RotatingFileHandler

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"


def get_logger(name, console=False):
    """
    Return the named component logger, attaching a rotating file handler
    (and optionally a stdout handler) the first time it is requested.
    """
    logger = logging.getLogger(name)
    if getattr(logger, "_enquest_configured", False):
        return logger

    log_dir = os.getenv("ENQUEST_LOG_DIR", "logs")
    os.makedirs(log_dir, exist_ok=True)

    formatter = logging.Formatter(LOG_FORMAT)

    rotating_handler = RotatingFileHandler(
        os.path.join(log_dir, f"{name.lower()}.log"),
        mode='a',
        maxBytes=5*1024*1024,
        backupCount=3,
        encoding='utf-8'
    )
    rotating_handler.setFormatter(formatter)
    logger.addHandler(rotating_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    logger.setLevel(os.getenv("ENQUEST_LOG_LEVEL", "DEBUG").upper())
    logger._enquest_configured = True
    return logger
