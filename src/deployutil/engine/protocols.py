"""Protocols for the provisioning engine.

Defines the command value objects and the backend contract that runs
them, enabling dependency injection and testability.
"""

from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field


class Command(BaseModel):
    """One external program invocation.

    Arguments are kept as a list and handed to the OS unmodified, so
    configuration values can never be interpreted by a shell.
    """

    model_config = ConfigDict(frozen=True)

    argv: list[str] = Field(min_length=1)
    cwd: Path | None = None
    timeout: float | None = None


class CommandResult(BaseModel):
    """Result of running a Command.

    Frozen because results are immutable facts about past executions.
    """

    model_config = ConfigDict(frozen=True)

    argv: list[str]
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    duration_seconds: float = 0.0
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.exit_code == 0 and not self.timed_out


@runtime_checkable
class CommandBackend(Protocol):
    """Protocol for command execution backends.

    Implementations handle the actual process execution.
    Examples: SubprocessBackend, MockBackend
    """

    def run(self, command: Command) -> CommandResult:
        """Execute a command and return the result."""
        ...
