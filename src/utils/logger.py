import logging
import os

from rich.logging import RichHandler


class PaddedNameFormatter(logging.Formatter):
    """
    Pads logger names to the widest name seen so far, so messages line up.
    """

    name_width = 12

    def format(self, record):
        PaddedNameFormatter.name_width = max(
            PaddedNameFormatter.name_width, len(record.name)
        )
        record.name = record.name.ljust(PaddedNameFormatter.name_width)
        return super().format(record)


def _log_level() -> int:
    if os.getenv("DEBUG"):
        return logging.DEBUG
    return logging.INFO


def get_logger(name=None) -> logging.Logger:
    """
    Return the module logger, attaching a RichHandler the first time it is asked for.
    """
    logger = logging.getLogger(name or "restro")
    level = _log_level()
    logger.setLevel(level)

    if logger.handlers:
        return logger

    handler = RichHandler(
        show_time=True,
        show_level=True,
        show_path=False,
        rich_tracebacks=True,
        markup=False,
        log_time_format="[%X]",
    )
    handler.setFormatter(PaddedNameFormatter("%(name)s | %(message)s"))
    handler.setLevel(level)
    logger.addHandler(handler)
    logger.propagate = False
    logger.debug("logger %s ready", logger.name)

    return logger
