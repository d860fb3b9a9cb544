"""Home directory steps: symlink a shared directory into every user's home."""

import shlex
from pathlib import Path

from deployutil.engine.models import Step, StepContext
from deployutil.exceptions import StepFailedError

# Entry under the home root that never belongs to a user.
RESERVED_ENTRY = "lost+found"


def read_default_home(adduser_conf: Path) -> Path:
    """Read DHOME, the default home directory root, from adduser.conf.

    The file is a list of shell-style ``KEY=value`` assignments; only the
    last DHOME assignment counts, as it would when the file is sourced.

    Raises:
        StepFailedError: If the file is unreadable or sets no DHOME
    """
    try:
        content = adduser_conf.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise StepFailedError(
            f"can't pick up the default user account settings from {adduser_conf}"
        ) from e

    dhome = ""
    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        if key.strip() != "DHOME":
            continue
        try:
            words = shlex.split(value, comments=True)
        except ValueError:
            words = [value.strip()]
        dhome = words[0] if words else ""

    if not dhome:
        raise StepFailedError(
            f"can't find the default user home directory location in {adduser_conf}"
        )
    return Path(dhome)


def home_directories(root: Path) -> list[Path]:
    """Entries under ``root`` that get a link, in name order.

    Hidden entries are left out, as a shell ``root/*`` glob would.
    """
    return sorted(
        entry
        for entry in root.iterdir()
        if entry.name != RESERVED_ENTRY and not entry.name.startswith(".")
    )


def symlink_into_home_directories(target: Path, link_name: str, adduser_conf: Path) -> Step:
    """Create ``<home>/<link_name>`` pointing at ``target`` for every home."""

    def action(context: StepContext) -> None:
        root = read_default_home(adduser_conf)
        try:
            homes = home_directories(root)
        except OSError as e:
            raise StepFailedError(f"can't list the home directories in {root}: {e.strerror or e}") from e

        for home in homes:
            link = home / link_name
            try:
                link.symlink_to(target)
            except OSError as e:
                raise StepFailedError(
                    f"couldn't make a symbolic link {link} for {target}: {e.strerror or e}"
                ) from e
            context.log.progress(f"Symlinked {target} as {link}")

    return Step(
        description=f"Symlinking {target} as {link_name} in every home directory",
        action=action,
        failure=f"Failed when symlinking {target} into the home directories",
    )
