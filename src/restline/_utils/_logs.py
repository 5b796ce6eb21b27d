import logging
import sys
from typing import Optional

from .constants import LOG_FORMAT, LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)


def setup_logging(debug: bool = False, *, handler: Optional[logging.Handler] = None) -> None:
    """Attach a stream handler to the ``restline`` logger.

    Calling this more than once replaces the handler installed by the
    previous call instead of stacking duplicates.
    """
    for existing in list(logger.handlers):
        if getattr(existing, "_restline_handler", False):
            logger.removeHandler(existing)

    handler = handler or logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._restline_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)


def mask_headers(headers: dict[str, str]) -> dict[str, str]:
    """Copy of ``headers`` with the Authorization value hidden, for log output."""
    return {
        key: ("***" if key.lower() == "authorization" else value)
        for key, value in headers.items()
    }
