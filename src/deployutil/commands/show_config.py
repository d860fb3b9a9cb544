"""Config command - show the effective settings for a recipe."""

from rich.table import Table

from deployutil.commands.resolve import resolve_recipe
from deployutil.display import console


def config_command(recipe_name: str) -> None:
    """Print every setting with the environment variable that overrides it."""
    config, recipe = resolve_recipe(recipe_name)
    identity = recipe.identity(config)
    paths = config.run_paths(identity.name)

    resolved = {
        "ourname": identity.name,
        "label": identity.label,
        "logpath": paths.log_path,
        "statuspath": paths.status_path,
        "installerpath": config.resolved_installer_path(),
    }

    table = Table(title=f"Settings for {identity.name}")
    table.add_column("Variable", style="cyan")
    table.add_column("Value")

    for field, value in config.model_dump().items():
        if field in resolved:
            value = resolved[field]
        table.add_row(f"DEPLOYUTIL_{field.upper()}", "-" if value is None else str(value))

    console.print(table)
