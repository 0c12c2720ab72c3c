"""Console logging for the genkan command line."""

from __future__ import annotations

import logging

LOGGER_NAME = "genkan"


def configure_logging(*, verbose: bool = False) -> logging.Logger:
    """Attach a console handler to the ``genkan`` logger.

    Calling this more than once only adjusts the level; a second handler is
    never added.

    Parameters
    ----------
    verbose : bool, optional
        Emit ``DEBUG`` records (cache hits, per-image progress) instead of
        stopping at ``INFO``.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
    logger.addHandler(handler)
    return logger


__all__ = ["LOGGER_NAME", "configure_logging"]
