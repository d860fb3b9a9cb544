"""R code fragment recipe.

Copies a subdirectory of R code out of a Git repository and makes it
available to every user through a symlink in their home directory.
"""

from deployutil.actions import clone_repository_subtree, symlink_into_home_directories
from deployutil.config import DeployConfig
from deployutil.engine.models import Step
from deployutil.recipes.base import Recipe


def build_code_fragments(config: DeployConfig) -> list[Step]:
    return [
        clone_repository_subtree(
            config.sourcerepo,
            config.sourcebranch,
            config.sourcedir,
            config.destdir,
        ),
        symlink_into_home_directories(config.destdir, config.destlink, config.adduserconf),
    ]


CODE_FRAGMENTS = Recipe(
    name="fetch_r_code_fragments",
    label="R code fragment retrieval",
    description="Copy R code from a Git repository and symlink it into every home directory",
    build=build_code_fragments,
)
