"""List command implementation."""

from deployutil.config import load_config
from deployutil.display import print_fatal, print_recipe_list
from deployutil.engine.runner import ProvisioningRunner
from deployutil.exceptions import ConfigurationError
from deployutil.recipes import list_recipes


def list_command() -> None:
    """List registered recipes and whether each has completed on this host."""
    try:
        config = load_config()
    except ConfigurationError as e:
        print_fatal(e.message)
        raise SystemExit(1)

    rows = [
        (alias, recipe, ProvisioningRunner.check_already_done(recipe.paths(config)))
        for alias, recipe in list_recipes()
    ]
    print_recipe_list(rows)
