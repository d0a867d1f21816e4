# Copyright (c) Syntropy Systems
"""Main CLI entry point for scientist."""

import typer

from scientist.cli.init_cmd import init
from scientist.cli.report import mismatches, report

app = typer.Typer(
    name="scientist",
    help=(
        "Carefully refactor critical paths. Inspect experiment results "
        "published by your application."
    ),
    no_args_is_help=True,
    add_completion=False,
)

# Register commands
_ = app.command()(init)
_ = app.command()(report)
_ = app.command()(mismatches)


if __name__ == "__main__":
    app()
