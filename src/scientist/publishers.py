# Copyright (c) Syntropy Systems
"""Publishers that send trial results to a sink."""
from __future__ import annotations

import logging
import threading
from contextlib import suppress
from typing import TYPE_CHECKING

from pydantic import ValidationError

from scientist.models.result import ResultRecord

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from scientist.result import Result

logger = logging.getLogger(__name__)


class JSONLPublisher:
    """Appends one JSON line per trial to a results file."""

    path: Path
    _lock: threading.Lock

    def __init__(self, path: Path) -> None:
        """Initialize publisher.

        Args:
            path: JSONL file to append to; parent directories are created

        """
        self.path = path
        self._lock = threading.Lock()

    def __call__(self, result: Result) -> None:
        """Append the result to the file."""
        record = ResultRecord.from_result(result)
        line = record.model_dump_json() + "\n"
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a") as f:
                _ = f.write(line)
                _ = f.flush()


class LoggingPublisher:
    """Logs a one-line summary of each trial.

    Trials with unignored mismatches are logged at WARNING.
    """

    _logger: logging.Logger
    _level: int

    def __init__(self, logger: logging.Logger | None = None, level: int = logging.INFO) -> None:
        """Initialize publisher.

        Args:
            logger: Logger to write to (default: this module's logger)
            level: Level for trials without unignored mismatches

        """
        self._logger = logger or logging.getLogger(__name__)
        self._level = level

    def __call__(self, result: Result) -> None:
        """Log the result summary."""
        level = logging.WARNING if result.mismatched else self._level
        self._logger.log(
            level,
            "Experiment %r: control=%s (%.6fs) matched=%s mismatched=%s ignored=%s",
            result.experiment.name,
            result.control.name,
            result.control.runtime.total_seconds(),
            [o.name for o in result.matched],
            [o.name for o in result.mismatched],
            [o.name for o in result.ignored],
        )


def publish_all(*publishers: Callable[[Result], None]) -> Callable[[Result], None]:
    """Combine several publishers into one that calls each in order.

    Every publisher runs even if an earlier one raised; the first error is
    re-raised afterwards so the trial records a publish error.
    """

    def publish(result: Result) -> None:
        first_error: Exception | None = None
        for publisher in publishers:
            try:
                publisher(result)
            except Exception as exc:  # noqa: BLE001
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error

    return publish


def read_results(results_path: Path) -> list[ResultRecord]:
    """Read published results from a JSONL file, tolerating bad lines.

    Args:
        results_path: Path to results.jsonl file

    Returns:
        List of parsed result records

    """
    records: list[ResultRecord] = []

    if not results_path.exists():
        return records

    with results_path.open() as f:
        for raw_line in f:
            line = raw_line.strip()
            if line:
                with suppress(ValidationError):
                    records.append(ResultRecord.model_validate_json(line))

    return records
