# Copyright (c) Syntropy Systems
"""scientist init command."""

from dataclasses import asdict
from pathlib import Path

import typer
import yaml
from rich.console import Console

from scientist.config import ScientistConfig

console = Console()


def init(
    path: Path = typer.Argument(
        Path(),
        help="Directory to initialize (default: current directory)",
    ),
) -> None:
    """Initialize a new scientist project.

    Creates a .scientist directory with a default configuration.
    """
    target = path.resolve()
    scientist_dir = target / ".scientist"

    if scientist_dir.exists():
        console.print(f"[yellow]Already initialized:[/yellow] {scientist_dir}")
        return

    scientist_dir.mkdir(parents=True)

    config = asdict(ScientistConfig())
    config_path = scientist_dir / "config.yaml"
    with config_path.open("w") as f:
        yaml.dump(config, f, default_flow_style=False)

    console.print(f"[green]Initialized scientist project:[/green] {scientist_dir}")
    console.print(f"  [dim]config:[/dim] {config_path}")
    console.print(f"  [dim]results:[/dim] {scientist_dir / config['results_file']}")
