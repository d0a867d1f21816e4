# Copyright (c) Syntropy Systems
"""Default hook strategies for experiments."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from scientist.errors import ResultError
    from scientist.result import Result

logger = logging.getLogger(__name__)


def to_bool(ok: object) -> bool:
    """Validate that a comparator or ignore rule produced a bool."""
    if isinstance(ok, bool):
        return ok
    msg = f"[scientist] bad result type: {ok!r} ({type(ok).__name__})"
    raise TypeError(msg)


def default_comparator(control: object, candidate: object) -> bool:
    """Equality comparison of the two values."""
    return bool(control == candidate)


def identity_cleaner(value: object) -> object:
    """Return the value unchanged."""
    return value


def noop_before_run() -> None:
    """Do nothing before a trial."""


def noop_publisher(result: Result) -> None:
    """Discard the result."""
    _ = result


def log_result_errors(*errors: ResultError) -> None:
    """Log every orchestration error at WARNING."""
    for error in errors:
        logger.warning(
            "Experiment %r failed during %s: %s",
            error.experiment,
            error.operation,
            error,
            exc_info=error.error,
        )
