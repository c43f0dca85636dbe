import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from loguru import logger


def setup_logging(level: str = "INFO") -> None:
    """Configure loguru logging with the specified level."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    )


@contextmanager
def log_span(message: str, *args: Any, **context: Any) -> Iterator[None]:
    """Log a debug message on entry and a trace message with the elapsed time on exit.

    Keyword arguments are bound via logger.contextualize, so every message logged
    inside the span carries them as extra fields.
    """
    with logger.contextualize(**context):
        logger.debug(message, *args)
        start_time = time.monotonic()
        try:
            yield
        except BaseException:
            elapsed = time.monotonic() - start_time
            logger.trace(message + " [failed after {:.5f} sec]", *args, elapsed)
            raise
        else:
            elapsed = time.monotonic() - start_time
            logger.trace(message + " [done in {:.5f} sec]", *args, elapsed)
