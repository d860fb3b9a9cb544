"""Recipe definition: a named, data-only step-list builder."""

from collections.abc import Callable
from dataclasses import dataclass

from deployutil.config import DeployConfig
from deployutil.engine.models import RunIdentity, RunPaths, Step


@dataclass(frozen=True)
class Recipe:
    """A named provisioning recipe.

    ``name`` doubles as the default run name, so it also names the log
    file and the completion flag unless DEPLOYUTIL_OURNAME overrides it.
    """

    name: str
    label: str
    description: str
    build: Callable[[DeployConfig], list[Step]]

    def identity(self, config: DeployConfig) -> RunIdentity:
        return config.identity(self.name, self.label)

    def paths(self, config: DeployConfig) -> RunPaths:
        return config.run_paths(self.identity(config).name)

    def steps(self, config: DeployConfig) -> list[Step]:
        return self.build(config)
