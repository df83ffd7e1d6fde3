import logging

from . import config

ROOT_LOGGER_NAME = "tabular_ml"


def setup_logger(level=None):
    """
    Configure the package root logger and return it.

    The stream handler is attached only on the first call. The level is set
    from ``config.LOG_LEVEL`` at that point, or from ``level`` when given.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)

    if not any(getattr(h, "_tabular_ml", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(config.LOG_FORMAT))
        handler._tabular_ml = True
        logger.addHandler(handler)
        logger.setLevel(level or config.LOG_LEVEL)
    elif level is not None:
        logger.setLevel(level)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the package namespace, e.g. ``tabular_ml.dataset``."""
    setup_logger()
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
