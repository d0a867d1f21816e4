# Copyright (c) Syntropy Systems
"""Experiment runner: one trial of control against candidates."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

from scientist.errors import Operation, ResultError
from scientist.hooks import to_bool
from scientist.observation import Observation, observe
from scientist.result import Result

if TYPE_CHECKING:
    from scientist.experiment import Experiment

logger = logging.getLogger(__name__)

CONTROL_BEHAVIOR = "control"
CANDIDATE_BEHAVIOR = "candidate"


def run(experiment: Experiment, control_name: str = CONTROL_BEHAVIOR) -> Result:
    """Run one trial of an experiment.

    The control is observed first, then every other registered behavior.
    Failures of the comparator, ignore rules, before-run hook or publisher
    are recorded on ``Result.errors`` and never raised.
    """
    errors: list[ResultError] = []

    try:
        experiment.before_run()
    except Exception as exc:  # noqa: BLE001
        errors.append(ResultError(Operation.BEFORE_RUN, experiment.name, exc))

    candidate_names = [n for n in experiment.behaviors if n != control_name]
    control, candidates = _observe_all(experiment, control_name, candidate_names)

    result = Result(
        experiment=experiment,
        control=control,
        observations=[control, *candidates],
        candidates=candidates,
        errors=errors,
    )

    for candidate in candidates:
        try:
            mismatched = _mismatching(experiment, control, candidate)
        except Exception as exc:  # noqa: BLE001
            mismatched = True
            errors.append(ResultError(Operation.COMPARE, experiment.name, exc))

        if not mismatched:
            continue

        try:
            ignored = _ignoring(experiment, control, candidate)
        except Exception as exc:  # noqa: BLE001
            ignored = False
            errors.append(ResultError(Operation.IGNORE, experiment.name, exc))

        if ignored:
            result.ignored.append(candidate)
        else:
            result.mismatched.append(candidate)

    try:
        experiment.publisher(result)
    except Exception as exc:  # noqa: BLE001
        errors.append(ResultError(Operation.PUBLISH, experiment.name, exc))

    logger.debug(
        "Experiment %r: %d candidate(s), %d mismatched, %d ignored, %d error(s)",
        experiment.name,
        len(result.candidates),
        len(result.mismatched),
        len(result.ignored),
        len(errors),
    )

    if errors:
        try:
            experiment.error_reporter(*errors)
        except Exception:
            logger.exception("Error reporter failed for experiment %r", experiment.name)

    return result


def _observe_all(
    experiment: Experiment,
    control_name: str,
    candidate_names: list[str],
) -> tuple[Observation, list[Observation]]:
    """Observe the control and candidates, concurrently if configured."""
    if not experiment.concurrent or not candidate_names:
        control = observe(experiment, control_name)
        return control, [observe(experiment, name) for name in candidate_names]

    # Control stays on the calling thread so its timing is its own.
    with ThreadPoolExecutor(
        max_workers=experiment.max_workers,
        thread_name_prefix=f"scientist-{experiment.name}",
    ) as pool:
        futures = {name: pool.submit(observe, experiment, name) for name in candidate_names}
        control = observe(experiment, control_name)
        candidates = [futures[name].result() for name in candidate_names]

    return control, candidates


def _mismatching(experiment: Experiment, control: Observation, candidate: Observation) -> bool:
    matching = to_bool(experiment.comparator(control.value, candidate.value))
    return not matching


def _ignoring(experiment: Experiment, control: Observation, candidate: Observation) -> bool:
    for ignore in experiment.ignores:
        if to_bool(ignore(control.value, candidate.value)):
            return True
    return False
