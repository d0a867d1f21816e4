# Copyright (c) Syntropy Systems
"""Configuration management for scientist."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import cast

import yaml

NO_PROJECT_MSG = "No .scientist directory found. Run 'scientist init' first."


@dataclass
class ScientistConfig:
    """Configuration for scientist."""

    # Run candidates on worker threads alongside the control
    concurrent: bool = False

    # Worker thread count in concurrent mode (None lets the executor decide)
    max_workers: int | None = None

    # JSONL file published results are appended to, relative to .scientist
    results_file: str = "results.jsonl"


def find_scientist_dir(start_path: Path | None = None) -> Path | None:
    """Find the nearest .scientist directory by walking up from start_path.

    Returns None if no .scientist directory is found.
    """
    if start_path is None:
        start_path = Path.cwd()

    current = start_path.resolve()

    while current != current.parent:
        scientist_dir = current / ".scientist"
        if scientist_dir.is_dir():
            return scientist_dir
        current = current.parent

    # Check root
    scientist_dir = current / ".scientist"
    if scientist_dir.is_dir():
        return scientist_dir

    return None


def get_global_config_dir() -> Path:
    """Get the global scientist config directory (~/.scientist)."""
    return Path.home() / ".scientist"


def load_config(scientist_dir: Path | None = None) -> ScientistConfig:
    """Load configuration from .scientist/config.yaml or defaults.

    Looks for config in:
    1. Provided scientist_dir
    2. Nearest .scientist directory walking up
    3. ~/.scientist/config.yaml
    4. Defaults

    Keys with the wrong type keep their default: `concurrent` must be a
    bool, `max_workers` a positive int and `results_file` a non-empty
    string. A misconfigured file never switches an experiment into
    concurrent mode by accident.
    """
    config = ScientistConfig()

    config_path = None

    if scientist_dir is not None:
        config_path = scientist_dir / "config.yaml"
    else:
        found_dir = find_scientist_dir()
        if found_dir is not None:
            config_path = found_dir / "config.yaml"
        else:
            global_config = get_global_config_dir() / "config.yaml"
            if global_config.exists():
                config_path = global_config

    if config_path is not None and config_path.exists():
        with config_path.open() as f:
            data = cast("dict[str, object]", yaml.safe_load(f) or {})

        concurrent = data.get("concurrent")
        if isinstance(concurrent, bool):
            config.concurrent = concurrent
        max_workers = data.get("max_workers")
        if isinstance(max_workers, int) and not isinstance(max_workers, bool) and max_workers > 0:
            config.max_workers = max_workers
        results_file = data.get("results_file")
        if isinstance(results_file, str) and results_file:
            config.results_file = results_file

    return config


def require_scientist_dir() -> Path:
    """Get scientist directory or raise an error if not found."""
    scientist_dir = find_scientist_dir()
    if scientist_dir is None:
        raise RuntimeError(NO_PROJECT_MSG)
    return scientist_dir


def get_results_path(scientist_dir: Path | None = None) -> Path:
    """Get the path to the published results file."""
    if scientist_dir is None:
        scientist_dir = require_scientist_dir()

    config = load_config(scientist_dir)
    return scientist_dir / config.results_file
