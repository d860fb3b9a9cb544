"""Provisioning runner with dependency injection.

ProvisioningRunner sequences, logs and gates a list of steps. All host
mutations (apt sources, packages, symlinks) happen inside step actions;
the runner itself only touches the run log, the completion flag and the
directories holding them.
"""

import logging
from collections.abc import Callable, Sequence
from datetime import datetime
from typing import Any

from rich.console import Console

from deployutil.engine.journal import RunLog
from deployutil.engine.models import RunIdentity, RunPaths, RunResult, Step, StepContext
from deployutil.engine.protocols import CommandBackend
from deployutil.engine.scratch import ScratchDirectory
from deployutil.exceptions import DirectoryUnavailableError, StepError

logger = logging.getLogger(__name__)

# Content of the completion flag. Only its existence is meaningful.
STATUS_FLAG_CONTENT = "OK\n"


def _local_now() -> datetime:
    return datetime.now().astimezone()


def format_timestamp(moment: datetime) -> str:
    """Format a timestamp the way date(1) prints it."""
    return moment.strftime("%a %b %d %H:%M:%S %Z %Y").replace("  ", " ")


class ProvisioningRunner:
    """Executes idempotent, logged provisioning runs.

    A run with an existing completion flag never executes a step. Otherwise
    steps run strictly in order, the first failure aborts the run, and the
    flag is written only after every step has succeeded. Nothing is
    retried and nothing is rolled back.
    """

    def __init__(
        self,
        backend: CommandBackend,
        command_timeout: float | None = None,
        clock: Callable[[], datetime] = _local_now,
        console: Console | None = None,
    ) -> None:
        """Initialize runner with dependencies.

        Args:
            backend: Backend used by step actions to run external commands
            command_timeout: Seconds before any external command is abandoned
            clock: Source of the run's start timestamp
            console: Console echoing log lines (defaults to stderr)
        """
        self._backend = backend
        self._command_timeout = command_timeout
        self._clock = clock
        self._console = console
        self._log: RunLog | None = None

    @property
    def log(self) -> RunLog | None:
        return self._log

    def prepare(self, paths: RunPaths) -> RunLog:
        """Create the log and status directories and open the log.

        Raises:
            DirectoryUnavailableError: If a directory cannot be created
            LogUnwritableError: If the log cannot be opened for appending
        """
        for directory, purpose in (
            (paths.log_path.parent, "log files"),
            (paths.status_path.parent, "config files"),
        ):
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise DirectoryUnavailableError(str(directory), purpose) from e

        if self._log is not None:
            self._log.close()
        self._log = RunLog(paths.log_path, console=self._console)
        return self._log

    @staticmethod
    def check_already_done(paths: RunPaths) -> bool:
        """True iff the completion flag exists."""
        return paths.status_path.exists()

    def run(self, identity: RunIdentity, paths: RunPaths, steps: Sequence[Step]) -> RunResult:
        """Execute a provisioning run.

        Args:
            identity: Name and label of the run
            paths: Log and completion flag locations
            steps: Ordered steps; later steps may rely on earlier ones

        Returns:
            Exactly one skipped, succeeded or failed RunResult

        Raises:
            PrepareError: If the run was not prepared and preparing fails
        """
        log = self._log if self._log is not None else self.prepare(paths)

        try:
            started_at = self._clock()
            timestamp = format_timestamp(started_at)
        except (OSError, OverflowError, ValueError) as e:
            logger.debug("Clock failure: %s", e)
            message = "Couldn't get the current time to make log entries"
            log.error(message)
            return RunResult.failed(identity.name, message)

        if self.check_already_done(paths):
            message = f"Re-run on {timestamp}, but {identity.name} has already run"
            log.notice(message)
            return RunResult.skipped(identity.name, message, started_at=started_at)

        log.progress(f"Started the {identity.label} at {timestamp}")

        completed = 0
        with ScratchDirectory(prefix=f"{identity.name}_") as scratch:
            context = StepContext(
                identity=identity,
                backend=self._backend,
                log=log,
                scratch=scratch,
                command_timeout=self._command_timeout,
            )
            for step in steps:
                log.progress(step.description)
                try:
                    step.action(context)
                except Exception as e:
                    if not isinstance(e, (StepError, OSError)):
                        logger.debug("Unexpected error in step %r", step.description, exc_info=True)
                    message = step.failure_message(e)
                    log.error(message)
                    return RunResult.failed(
                        identity.name,
                        message,
                        failed_step=step.description,
                        steps_completed=completed,
                        started_at=started_at,
                    )
                completed += 1

        try:
            paths.status_path.write_text(STATUS_FLAG_CONTENT, encoding="utf-8")
        except OSError as e:
            logger.debug("Cannot write %s: %s", paths.status_path, e)
            message = f"You must manually create a {paths.status_path} file to prevent repeated runs"
            log.error(message)
            return RunResult.failed(
                identity.name, message, steps_completed=completed, started_at=started_at
            )

        message = f"Successfully completed {identity.label}"
        log.notice(message)
        return RunResult.succeeded(
            identity.name, message, steps_completed=completed, started_at=started_at
        )

    def close(self) -> None:
        """Close the run log."""
        if self._log is not None:
            self._log.close()
            self._log = None

    def __enter__(self) -> "ProvisioningRunner":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
