"""Provisioning recipes.

Recipes are registered under the name of the script they replace, which
also names their log and status files, plus a short alias.
"""

from deployutil.exceptions import RecipeNotFoundError
from deployutil.recipes.base import Recipe
from deployutil.recipes.code_fragments import CODE_FRAGMENTS
from deployutil.recipes.rstudio import GENERIC, JAGS

RECIPES: dict[str, Recipe] = {recipe.name: recipe for recipe in (GENERIC, JAGS, CODE_FRAGMENTS)}

ALIASES: dict[str, str] = {
    "rstudio-generic": GENERIC.name,
    "rstudio-jags": JAGS.name,
    "r-code-fragments": CODE_FRAGMENTS.name,
}


def get_recipe(name: str) -> Recipe:
    """Look up a recipe by name or alias.

    Raises:
        RecipeNotFoundError: If nothing is registered under ``name``
    """
    recipe = RECIPES.get(ALIASES.get(name, name))
    if recipe is None:
        raise RecipeNotFoundError(name)
    return recipe


def list_recipes() -> list[tuple[str, Recipe]]:
    """(alias, recipe) pairs in registration order."""
    by_name = {target: alias for alias, target in ALIASES.items()}
    return [(by_name.get(name, name), recipe) for name, recipe in RECIPES.items()]


__all__ = ["ALIASES", "RECIPES", "Recipe", "get_recipe", "list_recipes"]
