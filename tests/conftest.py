# Copyright (c) Syntropy Systems
"""Pytest fixtures for scientist tests."""

import os
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest
import yaml

from scientist import Experiment

# Store original cwd at module load time
_original_cwd = Path.cwd()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def scientist_project(temp_dir: Path) -> Generator[Path, None, None]:
    """Create a temporary scientist project directory."""
    scientist_dir = temp_dir / ".scientist"
    scientist_dir.mkdir()

    with (scientist_dir / "config.yaml").open("w") as f:
        yaml.dump({"results_file": "results.jsonl"}, f)

    # Change to temp directory
    os.chdir(temp_dir)

    yield temp_dir

    # Always return to original cwd
    os.chdir(_original_cwd)


@pytest.fixture
def experiment() -> Experiment:
    """Experiment whose control returns 5 and that reports errors nowhere."""
    exp = Experiment("widget-permissions")
    exp.use(lambda: 5)
    exp.report_errors(lambda *errors: None)
    return exp
