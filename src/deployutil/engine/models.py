"""Data model for provisioning runs."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from deployutil.engine.protocols import Command, CommandBackend
from deployutil.exceptions import CommandFailedError, CommandTimeoutError, StepError

if TYPE_CHECKING:
    from deployutil.engine.journal import RunLog
    from deployutil.engine.scratch import ScratchDirectory


class RunIdentity(BaseModel):
    """Identifies a run for logging and status-file naming."""

    model_config = ConfigDict(frozen=True)

    name: str
    label: str


class RunPaths(BaseModel):
    """Locations of the append-only log and the completion flag."""

    model_config = ConfigDict(frozen=True)

    log_path: Path
    status_path: Path


class RunStatus(str, Enum):
    """Outcome of one provisioning run."""

    SKIPPED = "skipped"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class RunResult(BaseModel):
    """Result of a provisioning run.

    Exactly one is produced per invocation. ``exit_code`` carries process
    exit semantics: skipped and succeeded runs are both normal terminations.
    """

    model_config = ConfigDict(frozen=True)

    status: RunStatus
    name: str
    message: str
    exit_code: int = 0
    failed_step: str | None = None
    steps_completed: int = 0
    started_at: datetime | None = None

    @classmethod
    def skipped(cls, name: str, message: str, started_at: datetime | None = None) -> RunResult:
        return cls(status=RunStatus.SKIPPED, name=name, message=message, started_at=started_at)

    @classmethod
    def succeeded(
        cls, name: str, message: str, steps_completed: int, started_at: datetime | None = None
    ) -> RunResult:
        return cls(
            status=RunStatus.SUCCEEDED,
            name=name,
            message=message,
            steps_completed=steps_completed,
            started_at=started_at,
        )

    @classmethod
    def failed(
        cls,
        name: str,
        message: str,
        failed_step: str | None = None,
        steps_completed: int = 0,
        started_at: datetime | None = None,
    ) -> RunResult:
        return cls(
            status=RunStatus.FAILED,
            name=name,
            message=message,
            exit_code=1,
            failed_step=failed_step,
            steps_completed=steps_completed,
            started_at=started_at,
        )

    @property
    def ok(self) -> bool:
        return self.status is not RunStatus.FAILED


@dataclass
class StepContext:
    """What a step action may use while it runs.

    Actions never touch the runner directly; they get the command backend,
    the run log for extra progress lines, and the run's scratch directory.
    """

    identity: RunIdentity
    backend: CommandBackend
    log: RunLog
    scratch: ScratchDirectory
    command_timeout: float | None = None

    @property
    def scratch_dir(self) -> Path:
        """The run's scratch directory, created on first use."""
        return self.scratch.path

    def run(self, argv: list[str], cwd: Path | None = None) -> None:
        """Run an external command, raising if it does not succeed.

        Raises:
            CommandTimeoutError: If the command exceeded the timeout
            CommandFailedError: If the command exited with a non-zero status
        """
        command = Command(argv=argv, cwd=cwd, timeout=self.command_timeout)
        result = self.backend.run(command)
        if result.timed_out:
            raise CommandTimeoutError(command.argv, self.command_timeout or 0.0)
        if result.exit_code != 0:
            raise CommandFailedError(command.argv, result.exit_code, result.stderr)


StepAction = Callable[[StepContext], None]


@dataclass(frozen=True)
class Step:
    """One ordered unit of provisioning work.

    Attributes:
        description: Progress sentence logged before the action runs
        action: Callable doing the work; raises StepError on failure
        failure: Sentence logged with the ``**`` marker if the action fails
    """

    description: str
    action: StepAction
    failure: str

    def failure_message(self, error: Exception) -> str:
        """Combine the step's failure sentence with what went wrong."""
        if isinstance(error, StepError):
            detail = error.detail
        elif isinstance(error, OSError):
            detail = error.strerror or str(error)
        else:
            detail = f"{type(error).__name__}: {error}"
        if detail:
            return f"{self.failure} ({detail})"
        return self.failure
