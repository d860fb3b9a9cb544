"""deployutil CLI - Main entry point.

Commands:
- run: Execute a provisioning recipe once per host
- list: List recipes and their completion state
- status: Show where a recipe keeps its log and completion flag
- reset: Remove a completion flag so a recipe runs again
- logs: View a recipe's run log
- config: Show the effective settings
"""

import logging
from typing import Annotated

import typer

from deployutil import __version__
from deployutil.commands import (
    config_command,
    list_command,
    logs_command,
    reset_command,
    run_command,
    status_command,
)

app = typer.Typer(
    help="deployutil - Idempotent host provisioning.\n\n"
    "Each recipe runs its steps in order, stops at the first failure, and "
    "records completion so later runs do nothing.",
    no_args_is_help=True,
)

RecipeArgument = Annotated[str, typer.Argument(help="Recipe name or alias (see 'deployutil list')")]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"deployutil {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log every command as it runs")
    ] = False,
) -> None:
    """deployutil - Idempotent host provisioning."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@app.command()
def run(recipe: RecipeArgument) -> None:
    """Run a provisioning recipe.

    Does nothing if the recipe has already completed on this host.

    Examples:
        deployutil run rstudio-generic
        DEPLOYUTIL_LOGDIR=/tmp/logs deployutil run r-code-fragments
    """
    run_command(recipe)


@app.command("list")
def list_recipes() -> None:
    """List provisioning recipes."""
    list_command()


@app.command()
def status(recipe: RecipeArgument) -> None:
    """Show whether a recipe has completed.

    Exits 0 when completed and 1 otherwise.
    """
    status_command(recipe)


@app.command()
def reset(
    recipe: RecipeArgument,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Don't ask for confirmation")] = False,
) -> None:
    """Remove a recipe's completion flag so it runs again."""
    reset_command(recipe, yes)


@app.command()
def logs(
    recipe: RecipeArgument,
    lines: Annotated[int, typer.Option("--lines", "-n", min=0, help="Number of lines to show (0 for all)")] = 50,
) -> None:
    """View a recipe's run log.

    Examples:
        deployutil logs rstudio-jags
        deployutil logs rstudio-jags -n 0
    """
    logs_command(recipe, lines)


@app.command("config")
def show_config(recipe: RecipeArgument) -> None:
    """Show the effective settings for a recipe."""
    config_command(recipe)


cli = app


if __name__ == "__main__":
    app()
