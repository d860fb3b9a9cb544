"""Reset command implementation."""

import typer

from deployutil.commands.resolve import resolve_recipe
from deployutil.display import print_fatal, print_info, print_success


def reset_command(recipe_name: str, yes: bool) -> None:
    """Remove a recipe's completion flag so the next run executes again.

    Nothing the previous run installed is undone.
    """
    config, recipe = resolve_recipe(recipe_name)
    identity = recipe.identity(config)
    status_path = config.run_paths(identity.name).status_path

    if not status_path.exists():
        print_info(f"{identity.name} has no completion flag at {status_path}")
        return

    if not yes and not typer.confirm(f"Remove {status_path} so {identity.name} runs again?"):
        print_info("Left the completion flag in place")
        return

    try:
        status_path.unlink()
    except OSError as e:
        print_fatal(f"Couldn't remove the completion flag {status_path}: {e.strerror or e}")
        raise SystemExit(1)
    print_success(f"Removed {status_path}")
