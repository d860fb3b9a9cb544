"""Package manager steps: apt sources, signing keys, index refresh and installs."""

from collections.abc import Iterable
from pathlib import Path

from deployutil.engine.models import Step, StepContext
from deployutil.exceptions import StepFailedError


def unique_packages(packages: Iterable[str]) -> list[str]:
    """Drop repeated package names, keeping first-seen order."""
    seen: set[str] = set()
    ordered: list[str] = []
    for package in packages:
        if package in seen:
            continue
        seen.add(package)
        ordered.append(package)
    return ordered


def register_package_source(
    source_line: str,
    list_path: Path,
    *,
    name: str = "package repository",
) -> Step:
    """Write one apt source line to a sources.list.d file.

    The file is replaced rather than appended to.
    """

    def action(context: StepContext) -> None:
        try:
            list_path.write_text(source_line + "\n", encoding="utf-8")
        except OSError as e:
            raise StepFailedError(f"{list_path}: {e.strerror or e}") from e

    return Step(
        description=f"Adding the {name} to the apt sources as '{source_line}'",
        action=action,
        failure=f"Could not add the {name} to the apt sources as '{source_line}'",
    )


def trust_signing_key(
    key_id: str,
    keyserver: str,
    *,
    name: str = "package signing key",
) -> Step:
    """Fetch a signing key from a key server into apt's trust store."""

    def action(context: StepContext) -> None:
        context.run(["apt-key", "adv", "--keyserver", keyserver, "--recv-keys", key_id])

    return Step(
        description=f"Adding the {name} {key_id} from {keyserver}",
        action=action,
        failure=f"Failed when adding the {name} {key_id} from {keyserver}",
    )


def refresh_package_index() -> Step:
    """Re-synchronize apt's package metadata."""

    def action(context: StepContext) -> None:
        context.run(["apt-get", "update"])

    return Step(
        description="Refreshing the Ubuntu (apt) package information",
        action=action,
        failure="Could not refresh the Ubuntu (apt) package information",
    )


def install_packages(packages: Iterable[str]) -> Step:
    """Install a fixed, explicit set of apt packages non-interactively."""
    names = unique_packages(packages)
    if not names:
        raise ValueError("install_packages needs at least one package")

    def action(context: StepContext) -> None:
        context.run(["apt-get", "install", "-y", *names])

    return Step(
        description=f"Installing {len(names)} apt packages",
        action=action,
        failure=f"Failed when installing the apt packages {' '.join(names)}",
    )


def reconfigure_runtime(argv: list[str], *, description: str, failure: str) -> Step:
    """Have a runtime re-detect its configuration after installation."""
    command = list(argv)

    def action(context: StepContext) -> None:
        context.run(command)

    return Step(description=description, action=action, failure=failure)
