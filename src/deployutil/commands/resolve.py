"""Shared lookup of configuration and recipe for CLI commands."""

from deployutil.config import DeployConfig, load_config
from deployutil.display import print_fatal
from deployutil.exceptions import ConfigurationError
from deployutil.recipes import Recipe, get_recipe


def resolve_recipe(recipe_name: str) -> tuple[DeployConfig, Recipe]:
    """Load the configuration and find a recipe, exiting 1 if either fails."""
    try:
        config = load_config()
        recipe = get_recipe(recipe_name)
    except ConfigurationError as e:
        print_fatal(e.message)
        raise SystemExit(1)
    return config, recipe
