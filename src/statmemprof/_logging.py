import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "statmemprof"


def set_log_level(level: int) -> None:
    """Set the level of the package logger, installing a rich handler once."""
    logger = logging.getLogger(LOGGER_NAME)
    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        handler = RichHandler(console=Console(stderr=True), show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.propagate = False
    logger.setLevel(level)
