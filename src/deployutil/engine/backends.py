"""Command backend implementations.

Concrete implementations of the CommandBackend protocol.
"""

import logging
import subprocess
from datetime import datetime, timezone

from deployutil.engine.protocols import Command, CommandBackend, CommandResult

logger = logging.getLogger(__name__)


def _as_text(output: str | bytes | None) -> str:
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode(errors="replace")
    return output


class SubprocessBackend(CommandBackend):
    """Execute commands as child processes.

    By default the child inherits stdout and stderr, so package manager
    progress stays visible to whoever is watching the run. Pass
    ``capture_output=True`` to collect the output in the result instead.
    """

    def __init__(self, capture_output: bool = False) -> None:
        self._capture_output = capture_output

    def run(self, command: Command) -> CommandResult:
        """Execute a command, never through a shell."""
        start_time = datetime.now(timezone.utc)
        logger.debug("Running %s (cwd=%s, timeout=%s)", command.argv, command.cwd, command.timeout)

        try:
            result = subprocess.run(
                command.argv,
                capture_output=self._capture_output,
                text=True,
                cwd=command.cwd,
                timeout=command.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            duration = (datetime.now(timezone.utc) - start_time).total_seconds()
            return CommandResult(
                argv=command.argv,
                # Status GNU timeout reports.
                exit_code=124,
                stdout=_as_text(e.stdout),
                stderr=f"Timeout: execution exceeded {command.timeout}s limit",
                duration_seconds=duration,
                timed_out=True,
            )
        except FileNotFoundError:
            duration = (datetime.now(timezone.utc) - start_time).total_seconds()
            # Same status a shell reports for a missing program.
            return CommandResult(
                argv=command.argv,
                exit_code=127,
                stderr=f"Command not found: {command.argv[0]}",
                duration_seconds=duration,
            )

        duration = (datetime.now(timezone.utc) - start_time).total_seconds()
        logger.debug("%s exited with %d after %.1fs", command.argv[0], result.returncode, duration)

        return CommandResult(
            argv=command.argv,
            exit_code=result.returncode,
            stdout=_as_text(result.stdout),
            stderr=_as_text(result.stderr),
            duration_seconds=duration,
        )
