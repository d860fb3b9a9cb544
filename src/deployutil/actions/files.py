"""Generated file steps: render a helper script and run it."""

from pathlib import Path
from typing import Any

from jinja2 import Environment, PackageLoader, StrictUndefined

from deployutil.engine.models import Step, StepContext
from deployutil.exceptions import StepFailedError


def _get_environment() -> Environment:
    """Get Jinja2 environment configured for generated scripts."""
    return Environment(
        loader=PackageLoader("deployutil", "templates"),
        keep_trailing_newline=True,
        trim_blocks=False,
        lstrip_blocks=False,
        undefined=StrictUndefined,
    )


def render_template(template_name: str, **context: Any) -> str:
    """Render a bundled template.

    Args:
        template_name: Template filename (e.g., "install.r.j2")
        **context: Template variables

    Returns:
        Rendered template content
    """
    template = _get_environment().get_template(template_name)
    return template.render(**context)  # type: ignore[no-any-return]


def write_generated_file(
    path: Path,
    template_name: str,
    template_context: dict[str, Any],
    *,
    mode: int = 0o755,
) -> Step:
    """Render a template to ``path`` and set its permissions."""

    def action(context: StepContext) -> None:
        content = render_template(template_name, **template_context)
        try:
            path.write_text(content, encoding="utf-8")
            path.chmod(mode)
        except OSError as e:
            raise StepFailedError(e.strerror or str(e)) from e

    return Step(
        description=f"Setting up the {path.name} script at {path}",
        action=action,
        failure=f"Could not make an executable script at {path}",
    )


def run_generated_command(argv: list[str], *, description: str, failure: str) -> Step:
    """Run a helper produced by an earlier step."""
    command = list(argv)

    def action(context: StepContext) -> None:
        if not Path(command[0]).exists():
            raise StepFailedError(f"{command[0]} does not exist")
        context.run(command)

    return Step(description=description, action=action, failure=failure)
