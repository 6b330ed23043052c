"""Main CLI implementation using Typer."""

import asyncio
import os
import sys
from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from modelhost.bootstrap.config import ConfigManager
from modelhost.bootstrap.engine import Bootstrapper
from modelhost.bootstrap.handoff import handoff
from modelhost.errors import BootstrapError
from modelhost.utils.logging import setup_logging


# Create Typer app
app = typer.Typer(
    name="modelhost",
    help="Prepare the local model server, then exec the downstream binary",
    add_completion=False,
)

# stdout is handed to the downstream process untouched
stderr_console = Console(stderr=True)


def _fail(error: BootstrapError) -> NoReturn:
    """Print a diagnostic for a fatal error and exit non-zero."""
    stderr_console.print(f"[red]Error:[/red] {escape(str(error))}")
    if error.hint:
        stderr_console.print(f"[yellow]Hint:[/yellow] {escape(error.hint)}")
    raise typer.Exit(1) from error


@app.command(
    context_settings={
        "allow_extra_args": True,
        "ignore_unknown_options": True,
        "help_option_names": [],
    },
    add_help_option=False,
)
def launch(ctx: typer.Context):
    """Reconcile the model server and hand off; every argument is forwarded."""
    environ = dict(os.environ)
    try:
        manager = ConfigManager(environ)
        config = manager.load()
        setup_logging(config.log_level)

        bootstrapper = Bootstrapper(config, manager.home)
        plan = asyncio.run(bootstrapper.run(list(ctx.args), environ))
        handoff(plan)
    except BootstrapError as e:
        _fail(e)


def main():
    """Main entry point for CLI."""
    # A leading "--" ends option parsing, so later tokens (another "--"
    # included) reach ctx.args unchanged.
    app(args=["--", *sys.argv[1:]])
