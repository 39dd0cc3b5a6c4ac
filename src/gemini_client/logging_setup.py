from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "gemini_client"


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Attach a stderr rich handler to the package logger.

    Library code only ever calls ``logging.getLogger(__name__)``; this is for
    the CLI and for applications that want the same output.  Calling it again
    replaces the previously installed handler.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(console=Console(stderr=True), show_path=verbose)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    return logger
