"""Status command implementation."""

from deployutil.commands.resolve import resolve_recipe
from deployutil.display import print_status
from deployutil.engine.runner import ProvisioningRunner


def status_command(recipe_name: str) -> None:
    """Show a recipe's log and flag locations and whether it has completed.

    Exits 0 if the completion flag exists, 1 otherwise, so scripts can
    test for completion.
    """
    config, recipe = resolve_recipe(recipe_name)
    identity = recipe.identity(config)
    paths = config.run_paths(identity.name)
    done = ProvisioningRunner.check_already_done(paths)

    print_status(identity.name, identity.label, paths.log_path, paths.status_path, done)
    raise SystemExit(0 if done else 1)
