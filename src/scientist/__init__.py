"""
scientist - Carefully refactor critical paths.

Run a candidate implementation next to the control, compare what they
return, and report divergences without changing what the caller sees.
"""

from scientist.errors import (
    BehaviorExistsError,
    BehaviorFault,
    BehaviorNotFoundError,
    Operation,
    ResultError,
)
from scientist.experiment import Experiment
from scientist.hooks import to_bool
from scientist.observation import Observation, observe
from scientist.result import Result
from scientist.runner import run

__version__ = "0.1.0"
__all__ = [
    "BehaviorExistsError",
    "BehaviorFault",
    "BehaviorNotFoundError",
    "Experiment",
    "Observation",
    "Operation",
    "Result",
    "ResultError",
    "__version__",
    "observe",
    "run",
    "to_bool",
]
