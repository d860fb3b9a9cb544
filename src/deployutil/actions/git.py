"""Git steps: copy one subdirectory of a remote repository."""

import shutil
from pathlib import Path

from deployutil.engine.models import Step, StepContext
from deployutil.exceptions import StepFailedError


def clone_repository_subtree(
    repo_url: str,
    branch: str,
    subdir: Path,
    destination: Path,
) -> Step:
    """Shallow-clone ``branch`` of ``repo_url`` and copy ``subdir`` to ``destination``.

    ``subdir`` is relative to the scratch directory the clone runs in, so it
    starts with the directory git derives from the URL (e.g. ``pecan/...``).
    An existing destination fails the step before anything is cloned.
    """

    def action(context: StepContext) -> None:
        if destination.exists() or destination.is_symlink():
            raise StepFailedError(f"the destination {destination} already exists")

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StepFailedError(
                f"no destination directory for {destination}: {e.strerror or e}"
            ) from e

        workdir = context.scratch_dir
        context.run(
            ["git", "clone", "--depth", "1", "--branch", branch, repo_url],
            cwd=workdir,
        )
        context.log.progress(
            f"Made a local shallow clone of the {branch} branch from the {repo_url} Git repository"
        )

        source = workdir / subdir
        if not source.is_dir():
            raise StepFailedError(f"couldn't find the {subdir} directory to copy")

        try:
            shutil.copytree(source, destination, symlinks=True)
        except (OSError, shutil.Error) as e:
            raise StepFailedError(f"couldn't copy from {subdir} to {destination}: {e}") from e
        context.log.progress(f"Copied from {subdir} to {destination}")

    return Step(
        description=f"Copying {subdir} from the {branch} branch of {repo_url} to {destination}",
        action=action,
        failure=f"Failed when copying {subdir} from the {branch} branch of {repo_url} to {destination}",
    )
