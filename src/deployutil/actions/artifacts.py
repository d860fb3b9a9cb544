"""Artifact steps: download a .deb into the scratch directory and install it."""

import logging

import httpx

from deployutil.engine.models import Step, StepContext
from deployutil.exceptions import StepFailedError

logger = logging.getLogger(__name__)


def artifact_url(base_url: str, filename: str) -> str:
    """Join a download location and an artifact filename."""
    return f"{base_url.rstrip('/')}/{filename}"


def download_artifact(
    url: str,
    filename: str,
    *,
    timeout: float = 60.0,
    name: str = "artifact",
    transport: httpx.BaseTransport | None = None,
) -> Step:
    """Fetch one file into the run's scratch directory.

    Connect and read waits are bounded by ``timeout`` seconds.
    """

    def action(context: StepContext) -> None:
        destination = context.scratch_dir / filename
        try:
            with httpx.Client(
                transport=transport,
                timeout=httpx.Timeout(timeout),
                follow_redirects=True,
            ) as client:
                with client.stream("GET", url) as response:
                    response.raise_for_status()
                    with open(destination, "wb") as f:
                        for chunk in response.iter_bytes():
                            f.write(chunk)
        except httpx.HTTPStatusError as e:
            raise StepFailedError(f"HTTP status: {e.response.status_code}", e.response.status_code) from e
        except httpx.TimeoutException as e:
            raise StepFailedError(f"timed out after {timeout:g}s", 124) from e
        except httpx.HTTPError as e:
            raise StepFailedError(f"{type(e).__name__}: {e}") from e

        logger.debug("Downloaded %s to %s", url, destination)

    return Step(
        description=f"Downloading the {name} from {url}",
        action=action,
        failure=f"Couldn't download the {name} from {url}",
    )


def install_artifact(filename: str, *, name: str = "artifact") -> Step:
    """Install a downloaded .deb with gdebi, resolving its dependencies."""

    def action(context: StepContext) -> None:
        package = context.scratch_dir / filename
        if not package.is_file():
            raise StepFailedError(f"{package} is missing")
        context.run(["gdebi", "-n", str(package)], cwd=context.scratch_dir)

    return Step(
        description=f"Installing the {name} from {filename}",
        action=action,
        failure=f"Failed when installing the {name}",
    )
