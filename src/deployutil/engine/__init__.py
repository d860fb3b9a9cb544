"""Provisioning engine.

This module provides idempotent provisioning runs with clean architecture:

- ProvisioningRunner: Sequences, logs and gates an ordered list of steps
- CommandBackend: Protocol for external command execution
- RunLog: Append-only run log echoed to stderr
- ScratchDirectory: Working directory removed on every exit path
"""

from deployutil.engine.backends import SubprocessBackend
from deployutil.engine.container import Container
from deployutil.engine.journal import RunLog
from deployutil.engine.models import (
    RunIdentity,
    RunPaths,
    RunResult,
    RunStatus,
    Step,
    StepContext,
)
from deployutil.engine.protocols import Command, CommandBackend, CommandResult
from deployutil.engine.runner import ProvisioningRunner
from deployutil.engine.scratch import ScratchDirectory

__all__ = [
    # Core classes
    "ProvisioningRunner",
    "RunLog",
    "ScratchDirectory",
    # Data model
    "RunIdentity",
    "RunPaths",
    "RunResult",
    "RunStatus",
    "Step",
    "StepContext",
    # Protocols
    "Command",
    "CommandBackend",
    "CommandResult",
    # Implementations
    "SubprocessBackend",
    # DI
    "Container",
]
