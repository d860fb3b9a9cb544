"""Rich display utilities for the deployutil CLI."""

from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from deployutil.engine.models import RunResult, RunStatus
from deployutil.recipes import Recipe

console = Console()
err_console = Console(stderr=True)


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]✓[/] {message}")


def print_fatal(message: str) -> None:
    """Print a fatal failure that could not reach the run log."""
    err_console.print(f"** {message}.", style="bold red", markup=False, highlight=False, soft_wrap=True)


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[bold blue]ℹ[/] {message}")


def print_recipe_list(recipes: list[tuple[str, Recipe, bool]]) -> None:
    """Print a table of recipes with their completion state."""
    table = Table(title="Provisioning recipes")
    table.add_column("Alias", style="cyan")
    table.add_column("Name")
    table.add_column("Description")
    table.add_column("Status")

    for alias, recipe, done in recipes:
        status = "[green]completed[/]" if done else "[dim]not run[/]"
        table.add_row(alias, recipe.name, recipe.description, status)

    console.print(table)


def print_status(name: str, label: str, log_path: Path, status_path: Path, done: bool) -> None:
    """Print where a run keeps its state and whether it has completed."""
    state = "[bold green]completed[/]" if done else "[bold yellow]not completed[/]"
    console.print(
        Panel(
            f"[bold]Run:[/] {name}\n"
            f"[bold]Label:[/] {label}\n"
            f"[bold]State:[/] {state}\n"
            f"[bold]Log:[/] {log_path}\n"
            f"[bold]Status flag:[/] {status_path}",
            title="[bold]deployutil[/]",
            border_style="green" if done else "yellow",
        )
    )


def print_run_result(result: RunResult) -> None:
    """Print the outcome of a provisioning run."""
    if result.status is RunStatus.FAILED:
        body = (
            f"[bold red]Provisioning failed[/]\n\n"
            f"[bold]Run:[/] {result.name}\n"
            f"[bold]Failed step:[/] {result.failed_step or '-'}\n"
            f"[bold]Steps completed:[/] {result.steps_completed}"
        )
        border = "red"
    elif result.status is RunStatus.SKIPPED:
        body = f"[bold yellow]Already provisioned[/]\n\n[bold]Run:[/] {result.name}"
        border = "yellow"
    else:
        body = (
            f"[bold green]Provisioning completed successfully![/]\n\n"
            f"[bold]Run:[/] {result.name}\n"
            f"[bold]Steps completed:[/] {result.steps_completed}"
        )
        border = "green"

    console.print()
    console.print(Panel(body, title="[bold]deployutil[/]", border_style=border))
