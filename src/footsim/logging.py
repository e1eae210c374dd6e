"""Logging helpers for footsim."""

from __future__ import annotations

import logging
from typing import Iterable


def configure_logging(
    level: int | str = logging.INFO, handlers: Iterable[logging.Handler] | None = None
) -> None:
    """Configure root logging for command line and embedded sessions.

    Adjustment traces and simulation summaries are emitted at DEBUG, request
    lifecycle messages at INFO.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=list(handlers) if handlers else None,
    )
