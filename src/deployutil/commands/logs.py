"""Logs command - view a recipe's run log."""

from rich.console import Console
from rich.panel import Panel

from deployutil.commands.resolve import resolve_recipe
from deployutil.engine.journal import is_failure_line, read_log_lines

console = Console()


def logs_command(recipe_name: str, lines: int) -> None:
    """View the last lines of a recipe's run log.

    Args:
        recipe_name: Recipe name or alias
        lines: Number of lines to show (0 for all)
    """
    config, recipe = resolve_recipe(recipe_name)
    identity = recipe.identity(config)
    log_path = config.run_paths(identity.name).log_path

    try:
        all_lines = read_log_lines(log_path)
    except FileNotFoundError:
        console.print(f"[yellow]No log file found at:[/] {log_path}")
        return

    console.print(Panel(f"[bold]{identity.name}[/] / {log_path}", border_style="blue"))
    log_lines = all_lines[-lines:] if lines else all_lines
    if len(log_lines) < len(all_lines):
        console.print(f"[dim](showing last {lines} lines)[/]")

    for line in log_lines:
        style = "bold red" if is_failure_line(line) else None
        console.print(line, style=style, markup=False, highlight=False, soft_wrap=True)
