"""
Logging configuration for the fractal viewer.

Library modules only ask for a logger through get_logger(); handlers are
installed once by the command line entry point.
"""

import logging
import logging.handlers

LOGGER_NAME = "fractalview"


def get_logger(name=None):
    """
    Return the package logger, or a child of it when name is given.

    Module names (``fractalview.renderer``) are used as they are, short
    names are put under the package logger.
    """
    if not name:
        return logging.getLogger(LOGGER_NAME)
    if name == LOGGER_NAME or name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def _build_formatter():
    return logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(threadName)s %(levelname)s %(name)s - %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


def configure_logging(level=logging.INFO, console=True, log_file=None,
                      rotate_bytes=5 * 1024 * 1024, rotate_count=3):
    """
    Install handlers on the package logger.

    Calling it again replaces the previous handlers, so the CLI can be
    invoked several times from the same process (tests do this).

    Args:
        level: Logging level for the logger and its handlers
        console: Attach a stderr stream handler
        log_file: Path of a rotating log file, or None to skip file logging
        rotate_bytes: Size at which the log file is rotated
        rotate_count: Number of rotated files to keep

    Returns:
        The configured package logger
    """
    logger = get_logger()
    logger.setLevel(level)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    fmt = _build_formatter()
    if console:
        ch = logging.StreamHandler()
        ch.setLevel(level)
        ch.setFormatter(fmt)
        logger.addHandler(ch)
    if log_file:
        fh = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=rotate_bytes, backupCount=rotate_count, encoding="utf-8"
        )
        fh.setLevel(level)
        fh.setFormatter(fmt)
        logger.addHandler(fh)
    return logger
