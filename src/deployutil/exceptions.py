"""deployutil exception hierarchy.

Provides a unified exception hierarchy for the provisioning engine and CLI.
This enables:
- One-line, user-facing failure messages in the run log
- Programmatic error handling in library usage
- Clear distinction between setup failures and step failures

Usage:
    from deployutil.exceptions import PrepareError, StepError

    try:
        runner.prepare(paths)
    except PrepareError as e:
        print(f"** {e.message}.")
"""


class DeployUtilError(Exception):
    """Base exception for all deployutil errors.

    All deployutil-specific exceptions inherit from this class, allowing
    callers to catch every provisioning error with a single except clause.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


# Configuration Errors


class ConfigurationError(DeployUtilError):
    """Invalid deployutil configuration.

    Raised when a DEPLOYUTIL_* environment variable holds a value
    that fails validation.
    """

    pass


class RecipeNotFoundError(ConfigurationError):
    """Recipe not found.

    Raised when a recipe name doesn't match any registered recipe.
    """

    def __init__(self, recipe_name: str) -> None:
        self.recipe_name = recipe_name
        super().__init__(f"No provisioning recipe is called {recipe_name}")


# Prepare Errors


class PrepareError(DeployUtilError):
    """Base class for setup failures before the run log is usable.

    These are always fatal and must be reported on stderr, since the
    log file itself may be the thing that is broken.
    """

    pass


class DirectoryUnavailableError(PrepareError):
    """A directory for log or status files cannot be created."""

    def __init__(self, path: str, purpose: str = "files") -> None:
        self.path = path
        self.purpose = purpose
        super().__init__(f"No directory {path} for {purpose}")


class LogUnwritableError(PrepareError):
    """The run log cannot be opened for appending."""

    def __init__(self, path: str, reason: str = "") -> None:
        self.path = path
        self.reason = reason
        message = f"Failed when writing the log file {path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


# Step Errors


class StepError(DeployUtilError):
    """Base class for failures raised by step actions.

    Attributes:
        detail: Short explanation appended to the step's failure sentence
        exit_code: Status of the failing operation (not the process exit code)
    """

    def __init__(self, detail: str = "", exit_code: int = 1) -> None:
        self.detail = detail
        self.exit_code = exit_code
        super().__init__(detail)


class StepFailedError(StepError):
    """A step action failed for a reason it can describe itself."""

    pass


class CommandFailedError(StepError):
    """An external command exited with a non-zero status."""

    def __init__(self, argv: list[str], exit_code: int, stderr: str = "") -> None:
        self.argv = list(argv)
        self.stderr = stderr
        super().__init__(f"status: {exit_code}", exit_code)


class CommandTimeoutError(StepError):
    """An external command exceeded its time limit.

    Uses exit code 124, the status GNU timeout reports.
    """

    def __init__(self, argv: list[str], timeout_seconds: float) -> None:
        self.argv = list(argv)
        self.timeout_seconds = timeout_seconds
        super().__init__(f"timed out after {timeout_seconds:g}s", 124)
