"""deployutil - Idempotent host provisioning.

Runs ordered provisioning recipes once per host, recording progress in an
append-only log and completion in a status flag.
"""

from deployutil.exceptions import (
    CommandFailedError,
    CommandTimeoutError,
    ConfigurationError,
    DeployUtilError,
    DirectoryUnavailableError,
    LogUnwritableError,
    PrepareError,
    RecipeNotFoundError,
    StepError,
    StepFailedError,
)

__version__ = "0.1.0"

__all__ = [
    # Base exception
    "DeployUtilError",
    # Configuration errors
    "ConfigurationError",
    "RecipeNotFoundError",
    # Prepare errors
    "PrepareError",
    "DirectoryUnavailableError",
    "LogUnwritableError",
    # Step errors
    "StepError",
    "StepFailedError",
    "CommandFailedError",
    "CommandTimeoutError",
    # Version
    "__version__",
]
