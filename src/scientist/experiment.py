# Copyright (c) Syntropy Systems
"""Experiment definition: behaviors plus pluggable hooks."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, TypeVar

from typing_extensions import TypeAlias, override

from scientist.errors import BehaviorExistsError
from scientist.hooks import (
    default_comparator,
    identity_cleaner,
    log_result_errors,
    noop_before_run,
    noop_publisher,
)
from scientist.runner import CANDIDATE_BEHAVIOR, CONTROL_BEHAVIOR, run

if TYPE_CHECKING:
    from scientist.config import ScientistConfig
    from scientist.result import Result

Behavior: TypeAlias = Callable[[], object]
Comparator: TypeAlias = Callable[[object, object], bool]
IgnoreRule: TypeAlias = Callable[[object, object], bool]
Cleaner: TypeAlias = Callable[[object], object]
BeforeRun: TypeAlias = Callable[[], None]
Publisher: TypeAlias = Callable[["Result"], None]
ErrorReporter: TypeAlias = Callable[..., None]

F = TypeVar("F", bound=Callable[..., object])


class Experiment:
    """A named set of behaviors compared against a control.

    Example:
        exp = Experiment("widget-permissions")
        exp.use(lambda: model.check_user(user).valid)
        exp.candidate(lambda: user.can(Permission.READ, model))
        allowed = exp.run()

    """

    name: str
    behaviors: dict[str, Behavior]
    comparator: Comparator
    cleaner: Cleaner
    ignores: list[IgnoreRule]
    before_run: BeforeRun
    publisher: Publisher
    error_reporter: ErrorReporter
    concurrent: bool
    max_workers: int | None

    def __init__(
        self,
        name: str,
        *,
        concurrent: bool = False,
        max_workers: int | None = None,
    ) -> None:
        """Initialize an experiment.

        Args:
            name: Experiment name, used in errors and published results
            concurrent: Run candidates on worker threads alongside the control
            max_workers: Thread pool size for concurrent mode

        """
        self.name = name
        self.behaviors = {}
        self.comparator = default_comparator
        self.cleaner = identity_cleaner
        self.ignores = []
        self.before_run = noop_before_run
        self.publisher = noop_publisher
        self.error_reporter = log_result_errors
        self.concurrent = concurrent
        self.max_workers = max_workers

    @classmethod
    def from_config(cls, name: str, config: ScientistConfig) -> Experiment:
        """Create an experiment using the concurrency settings of a config."""
        return cls(name, concurrent=config.concurrent, max_workers=config.max_workers)

    @property
    def behavior_names(self) -> list[str]:
        """Registered behavior names in registration order."""
        return list(self.behaviors)

    def behavior(self, name: str, fn: Behavior) -> Behavior:
        """Register a behavior under a unique name."""
        if name in self.behaviors:
            raise BehaviorExistsError(name, self.name)
        self.behaviors[name] = fn
        return fn

    def use(self, fn: Behavior) -> Behavior:
        """Register the control behavior."""
        return self.behavior(CONTROL_BEHAVIOR, fn)

    def candidate(self, fn: Behavior, name: str = CANDIDATE_BEHAVIOR) -> Behavior:
        """Register a candidate behavior."""
        return self.behavior(name, fn)

    def compare(self, fn: F) -> F:
        """Replace the comparator."""
        self.comparator = fn
        return fn

    def clean(self, fn: F) -> F:
        """Replace the cleaner used to normalize values for display."""
        self.cleaner = fn
        return fn

    def ignore(self, fn: F) -> F:
        """Append an ignore rule; rules are evaluated in registration order."""
        self.ignores.append(fn)
        return fn

    def before_run_hook(self, fn: F) -> F:
        """Replace the hook called before each trial."""
        self.before_run = fn
        return fn

    def publish(self, fn: F) -> F:
        """Replace the publisher."""
        self.publisher = fn
        return fn

    def report_errors(self, fn: F) -> F:
        """Replace the reporter that receives a trial's ResultErrors."""
        self.error_reporter = fn
        return fn

    def trial(self, control_name: str = CONTROL_BEHAVIOR) -> Result:
        """Run one trial and return the full Result."""
        return run(self, control_name)

    def run(self, control_name: str = CONTROL_BEHAVIOR) -> object:
        """Run one trial and return what the control returned.

        The control's own error is re-raised unchanged, so the call site
        behaves exactly as if only the control had run.
        """
        result = self.trial(control_name)
        if result.control.error is not None:
            raise result.control.error
        return result.control.value

    @override
    def __repr__(self) -> str:
        return f"Experiment(name={self.name!r}, behaviors={self.behavior_names!r})"


__all__ = [
    "Behavior",
    "BeforeRun",
    "Cleaner",
    "Comparator",
    "ErrorReporter",
    "Experiment",
    "IgnoreRule",
    "Publisher",
]
