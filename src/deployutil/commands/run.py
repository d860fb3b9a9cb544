"""Run command implementation."""

from deployutil.commands.resolve import resolve_recipe
from deployutil.display import print_fatal, print_run_result
from deployutil.engine.container import Container
from deployutil.exceptions import PrepareError


def run_command(recipe_name: str) -> None:
    """Run a provisioning recipe.

    Exits 0 when the run succeeds or had already completed, and 1 on any
    fatal failure, whether during setup or in a step.
    """
    config, recipe = resolve_recipe(recipe_name)
    identity = recipe.identity(config)
    paths = config.run_paths(identity.name)
    steps = recipe.steps(config)

    with Container.provisioning_runner(command_timeout=config.command_timeout) as runner:
        try:
            runner.prepare(paths)
        except PrepareError as e:
            print_fatal(e.message)
            raise SystemExit(1)

        result = runner.run(identity, paths, steps)

    print_run_result(result)
    raise SystemExit(result.exit_code)
