# Copyright (c) Syntropy Systems
"""Pydantic records for published experiment results."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from pydantic import Field

from .base import JSONValue, ScientistBaseModel, to_json_value

if TYPE_CHECKING:
    from scientist.errors import ResultError
    from scientist.observation import Observation
    from scientist.result import Result

logger = logging.getLogger(__name__)


def _describe(error: BaseException) -> str:
    return str(error) or type(error).__name__


class ObservationRecord(ScientistBaseModel):
    """Serialized observation of one behavior."""

    name: str
    started: datetime
    runtime_seconds: float
    value: JSONValue = None
    error_type: str | None = None
    error: str | None = None

    @classmethod
    def from_observation(cls, observation: Observation) -> ObservationRecord:
        """Build a record, passing the value through the experiment's cleaner."""
        try:
            value = observation.cleaned_value()
        except Exception:
            logger.exception(
                "Cleaner failed for %r in experiment %r; publishing raw value",
                observation.name,
                observation.experiment.name,
            )
            value = observation.value

        error = observation.error
        return cls(
            name=observation.name,
            started=observation.started,
            runtime_seconds=observation.runtime.total_seconds(),
            value=to_json_value(value),
            error_type=type(error).__name__ if error is not None else None,
            error=_describe(error) if error is not None else None,
        )


class ResultErrorRecord(ScientistBaseModel):
    """Serialized orchestration error."""

    operation: str
    experiment: str
    error_type: str
    message: str

    @classmethod
    def from_error(cls, error: ResultError) -> ResultErrorRecord:
        """Build a record from a ResultError."""
        return cls(
            operation=error.operation.value,
            experiment=error.experiment,
            error_type=type(error.error).__name__,
            message=_describe(error.error),
        )


class ResultRecord(ScientistBaseModel):
    """One line of a results.jsonl file."""

    experiment: str
    control: ObservationRecord
    candidates: list[ObservationRecord] = Field(default_factory=list)
    ignored: list[str] = Field(default_factory=list)
    mismatched: list[str] = Field(default_factory=list)
    errors: list[ResultErrorRecord] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: Result) -> ResultRecord:
        """Build a record from a trial Result."""
        return cls(
            experiment=result.experiment.name,
            control=ObservationRecord.from_observation(result.control),
            candidates=[ObservationRecord.from_observation(c) for c in result.candidates],
            ignored=[o.name for o in result.ignored],
            mismatched=[o.name for o in result.mismatched],
            errors=[ResultErrorRecord.from_error(e) for e in result.errors],
        )

    @property
    def matched(self) -> list[str]:
        """Names of candidates that agreed with the control."""
        skipped = set(self.ignored) | set(self.mismatched)
        return [c.name for c in self.candidates if c.name not in skipped]

    def candidate(self, name: str) -> ObservationRecord | None:
        """Look up a candidate record by behavior name."""
        for record in self.candidates:
            if record.name == name:
                return record
        return None
