# Copyright (c) Syntropy Systems
"""Exceptions raised and recorded by scientist."""

from __future__ import annotations

from enum import Enum

from typing_extensions import override


class ScientistError(Exception):
    """Base class for scientist errors."""


class BehaviorNotFoundError(ScientistError, LookupError):
    """A trial asked for a behavior the experiment never registered."""

    name: str
    experiment: str

    def __init__(self, name: str, experiment: str) -> None:
        self.name = name
        self.experiment = experiment
        super().__init__(f"Behavior {name!r} not found for experiment {experiment!r}")


class BehaviorExistsError(ScientistError, ValueError):
    """A behavior name was registered twice on the same experiment."""

    def __init__(self, name: str, experiment: str) -> None:
        self.name = name
        self.experiment = experiment
        super().__init__(f"Behavior {name!r} already exists for experiment {experiment!r}")


class BehaviorFault(ScientistError):
    """Abnormal termination of a behavior, converted into an ordinary error."""


class Operation(str, Enum):
    """Orchestration step during which a ResultError occurred."""

    BEFORE_RUN = "before_run"
    COMPARE = "compare"
    IGNORE = "ignore"
    PUBLISH = "publish"

    @override
    def __str__(self) -> str:
        return self.value


class ResultError(ScientistError):
    """Failure of a comparator, ignore rule, before-run hook or publisher.

    Never used for a behavior's own error; those stay on the Observation.
    """

    operation: Operation
    experiment: str
    error: Exception

    def __init__(self, operation: Operation, experiment: str, error: Exception) -> None:
        self.operation = Operation(operation)
        self.experiment = experiment
        self.error = error
        super().__init__(operation, experiment, error)
        self.__cause__ = error

    @override
    def __str__(self) -> str:
        return str(self.error)

    @override
    def __repr__(self) -> str:
        return (
            f"ResultError(operation={self.operation.value!r}, "
            f"experiment={self.experiment!r}, error={self.error!r})"
        )
