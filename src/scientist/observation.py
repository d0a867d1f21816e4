# Copyright (c) Syntropy Systems
"""Observing a single behavior: value, error and timing."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from scientist.errors import BehaviorFault, BehaviorNotFoundError

if TYPE_CHECKING:
    from scientist.experiment import Behavior, Experiment


@dataclass(frozen=True, eq=False)
class Observation:
    """Outcome of running one behavior once."""

    experiment: Experiment = field(repr=False)
    name: str
    started: datetime
    runtime: timedelta
    value: object = None
    error: BaseException | None = None

    @property
    def failed(self) -> bool:
        """Whether the behavior raised or could not be run."""
        return self.error is not None

    def cleaned_value(self) -> object:
        """Return the value passed through the experiment's cleaner."""
        return self.experiment.cleaner(self.value)


def fault_to_error(fault: BaseException) -> Exception:
    """Convert an abnormal termination into an ordinary error.

    A fault carrying a string becomes a BehaviorFault with that text, a
    fault carrying an exception yields that exception, anything else is
    formatted generically.
    """
    if isinstance(fault, Exception):
        return fault

    payload = fault.args[0] if len(fault.args) == 1 else None
    if isinstance(payload, str):
        error: Exception = BehaviorFault(payload)
    elif isinstance(payload, Exception):
        return payload
    else:
        error = BehaviorFault(repr(fault))
    error.__cause__ = fault
    return error


def run_behavior(behavior: Behavior) -> tuple[object, Exception | None]:
    """Invoke a behavior behind a fault barrier.

    Returns (value, None) on success and (None, error) otherwise.
    KeyboardInterrupt is left to propagate.
    """
    try:
        return behavior(), None
    except Exception as exc:  # noqa: BLE001
        return None, exc
    except KeyboardInterrupt:
        raise
    except BaseException as fault:  # noqa: BLE001
        return None, fault_to_error(fault)


def observe(experiment: Experiment, name: str) -> Observation:
    """Run the named behavior of an experiment and record what happened."""
    started = datetime.now(timezone.utc)
    start = time.perf_counter()

    behavior = experiment.behaviors.get(name)
    if behavior is None:
        return Observation(
            experiment=experiment,
            name=name,
            started=started,
            runtime=timedelta(seconds=time.perf_counter() - start),
            error=BehaviorNotFoundError(name, experiment.name),
        )

    value, error = run_behavior(behavior)
    runtime = timedelta(seconds=time.perf_counter() - start)

    return Observation(
        experiment=experiment,
        name=name,
        started=started,
        runtime=runtime,
        value=value,
        error=error,
    )
