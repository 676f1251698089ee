"""Logging setup for the CLI."""

import logging

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Route repostale logs to stderr. WARNING by default, DEBUG with --verbose."""
    level = logging.DEBUG if verbose else logging.WARNING
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger("repostale")
    root.handlers[:] = [handler]
    root.setLevel(level)
