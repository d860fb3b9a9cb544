"""Mock implementations for testing the engine layer.

Provides an in-memory command backend that can be used in tests
without subprocess side effects.
"""

from collections.abc import Callable

from deployutil.engine.protocols import Command, CommandBackend, CommandResult


class MockBackend:
    """Mock command backend for testing.

    Records all commands without actually executing anything.
    Returns a configurable exit code, optionally per program name, and
    can run a side effect (e.g. create the directory a clone would create).
    """

    def __init__(self, exit_code: int = 0) -> None:
        """Initialize with the default exit code to return.

        Args:
            exit_code: Exit code for commands with no specific override
        """
        self.exit_code = exit_code
        self.commands: list[Command] = []
        self._exit_codes: dict[str, int] = {}
        self._side_effects: dict[str, Callable[[Command], None]] = {}

    def run(self, command: Command) -> CommandResult:
        """Record the command and return the configured result."""
        self.commands.append(command)
        program = command.argv[0]

        side_effect = self._side_effects.get(program)
        if side_effect is not None:
            side_effect(command)

        exit_code = self._exit_codes.get(program, self.exit_code)
        return CommandResult(
            argv=command.argv,
            exit_code=exit_code,
            stderr="" if exit_code == 0 else f"{program} failed",
        )

    def fail(self, program: str, exit_code: int = 1) -> None:
        """Make every later invocation of ``program`` fail."""
        self._exit_codes[program] = exit_code

    def on(self, program: str, side_effect: Callable[[Command], None]) -> None:
        """Run ``side_effect`` whenever ``program`` is invoked."""
        self._side_effects[program] = side_effect

    @property
    def programs(self) -> list[str]:
        """Program names in invocation order."""
        return [c.argv[0] for c in self.commands]

    def reset(self) -> None:
        """Clear all recorded commands."""
        self.commands.clear()


# Verify protocol compliance at import time
assert isinstance(MockBackend(), CommandBackend)
