# Copyright (c) Syntropy Systems
"""scientist report and mismatches commands."""
from __future__ import annotations

import json
from pathlib import Path
from statistics import mean
from typing import TYPE_CHECKING, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from scientist.config import get_results_path
from scientist.publishers import read_results

if TYPE_CHECKING:
    from scientist.models.result import ObservationRecord, ResultRecord

console = Console()

VALUE_WIDTH = 60


def resolve_results_file(file: Path | None) -> Path:
    """Use the given file or the project's configured results file."""
    if file is not None:
        return file
    try:
        return get_results_path()
    except RuntimeError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e


def format_runtime(seconds: list[float]) -> str:
    """Format the mean of runtimes in milliseconds."""
    if not seconds:
        return "-"
    return f"{mean(seconds) * 1000:.2f}ms"


def format_outcome(record: ObservationRecord) -> str:
    """Render an observation's value or error for a table cell."""
    if record.error is not None:
        return f"[red]{escape(f'{record.error_type}: {record.error}')}[/red]"
    text = json.dumps(record.value, default=str)
    if len(text) > VALUE_WIDTH:
        text = text[: VALUE_WIDTH - 3] + "..."
    return escape(text)


def group_by_experiment(records: list[ResultRecord]) -> dict[str, list[ResultRecord]]:
    """Group records by experiment name, in order of first appearance."""
    grouped: dict[str, list[ResultRecord]] = {}
    for record in records:
        grouped.setdefault(record.experiment, []).append(record)
    return grouped


def report(
    file: Optional[Path] = typer.Option(
        None,
        "--file", "-f",
        help="Results file (default: from .scientist/config.yaml)",
    ),
) -> None:
    """Summarize published results per experiment."""
    results_path = resolve_results_file(file)
    records = read_results(results_path)

    if not records:
        console.print(f"[dim]No results in {results_path}[/dim]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Experiment", style="cyan")
    table.add_column("Trials", justify="right")
    table.add_column("Matched", justify="right")
    table.add_column("Mismatched", justify="right")
    table.add_column("Ignored", justify="right")
    table.add_column("Errors", justify="right")
    table.add_column("Runtime (ctl/cand)", justify="right", style="dim")

    for name, trials in group_by_experiment(records).items():
        matched = sum(len(r.matched) for r in trials)
        mismatched = sum(len(r.mismatched) for r in trials)
        ignored = sum(len(r.ignored) for r in trials)
        errors = sum(len(r.errors) for r in trials)
        control_runtimes = [r.control.runtime_seconds for r in trials]
        candidate_runtimes = [c.runtime_seconds for r in trials for c in r.candidates]

        table.add_row(
            name,
            str(len(trials)),
            f"[green]{matched}[/green]",
            f"[red]{mismatched}[/red]" if mismatched else "0",
            f"[yellow]{ignored}[/yellow]" if ignored else "0",
            f"[red]{errors}[/red]" if errors else "0",
            f"{format_runtime(control_runtimes)}/{format_runtime(candidate_runtimes)}",
        )

    console.print(table)


def mismatches(
    experiment: str = typer.Argument(..., help="Experiment name"),
    file: Optional[Path] = typer.Option(
        None,
        "--file", "-f",
        help="Results file (default: from .scientist/config.yaml)",
    ),
    limit: int = typer.Option(
        20,
        "--limit", "-n",
        min=1,
        help="Number of most recent mismatches to show",
    ),
) -> None:
    """Show recent mismatched candidates for an experiment."""
    results_path = resolve_results_file(file)
    trials = group_by_experiment(read_results(results_path)).get(experiment)

    if not trials:
        console.print(f"[red]No results for experiment:[/red] {experiment}")
        raise typer.Exit(1)

    rows: list[tuple[ResultRecord, ObservationRecord]] = []
    for record in trials:
        for name in record.mismatched:
            candidate = record.candidate(name)
            if candidate is not None:
                rows.append((record, candidate))

    if not rows:
        console.print(f"[green]No mismatches for experiment '{experiment}'[/green]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Started", style="dim")
    table.add_column("Candidate", style="cyan")
    table.add_column("Control")
    table.add_column("Candidate value")

    for record, candidate in rows[-limit:]:
        table.add_row(
            record.control.started.strftime("%Y-%m-%d %H:%M:%S"),
            candidate.name,
            format_outcome(record.control),
            format_outcome(candidate),
        )

    console.print(f"\n[bold]{experiment}[/bold]: {len(rows)} mismatch(es)\n")
    console.print(table)
