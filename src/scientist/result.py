# Copyright (c) Syntropy Systems
"""Aggregate outcome of a single experiment trial."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from scientist.errors import ResultError
    from scientist.experiment import Experiment
    from scientist.observation import Observation


@dataclass(eq=False)
class Result:
    """Result of one trial.

    ``observations`` holds the control first, then every candidate in
    registration order. ``ignored`` and ``mismatched`` are disjoint subsets
    of ``candidates``.
    """

    experiment: Experiment = field(repr=False)
    control: Observation
    observations: list[Observation] = field(default_factory=list)
    candidates: list[Observation] = field(default_factory=list)
    ignored: list[Observation] = field(default_factory=list)
    mismatched: list[Observation] = field(default_factory=list)
    errors: list[ResultError] = field(default_factory=list)

    @property
    def matched(self) -> list[Observation]:
        """Candidates that agreed with the control."""
        return [
            c
            for c in self.candidates
            if not any(c is o for o in self.ignored)
            and not any(c is o for o in self.mismatched)
        ]

    @property
    def has_mismatches(self) -> bool:
        """Whether any candidate disagreed with the control unignored."""
        return bool(self.mismatched)

    def candidate(self, name: str) -> Observation | None:
        """Look up a candidate observation by behavior name."""
        for observation in self.candidates:
            if observation.name == name:
                return observation
        return None
