"""Composition root for engine dependency injection.

Centralizes the creation and wiring of engine components.
This is the single place where the concrete command backend is bound
to the protocol.

Usage:
    # Default usage (production)
    runner = Container.provisioning_runner(command_timeout=3600)

    # Testing with mocks
    Container.set_backend(MockBackend())
    runner = Container.provisioning_runner()

    # Reset to defaults
    Container.reset()
"""

from deployutil.engine.backends import SubprocessBackend
from deployutil.engine.protocols import CommandBackend
from deployutil.engine.runner import ProvisioningRunner


class Container:
    """Service container for engine dependencies.

    Provides lazy initialization of the default backend and
    allows overriding it for testing purposes.
    """

    _backend: CommandBackend | None = None

    @classmethod
    def backend(cls) -> CommandBackend:
        """Get the command backend.

        Returns SubprocessBackend by default.
        """
        if cls._backend is None:
            cls._backend = SubprocessBackend()
        return cls._backend

    @classmethod
    def provisioning_runner(cls, command_timeout: float | None = None) -> ProvisioningRunner:
        """Create a ProvisioningRunner with the current backend."""
        return ProvisioningRunner(backend=cls.backend(), command_timeout=command_timeout)

    @classmethod
    def set_backend(cls, backend: CommandBackend | None) -> None:
        """Override the command backend.

        Pass None to reset to default on next access.
        """
        cls._backend = backend

    @classmethod
    def reset(cls) -> None:
        """Reset all overrides to defaults.

        Call this in test teardown to ensure clean state.
        """
        cls._backend = None
