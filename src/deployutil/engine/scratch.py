"""Scoped scratch directory for download and clone steps."""

import logging
import shutil
import signal
import tempfile
import threading
from pathlib import Path
from types import FrameType
from typing import Any

logger = logging.getLogger(__name__)

# Signals that must not leave a scratch directory behind.
CLEANUP_SIGNALS = (signal.SIGTERM, signal.SIGINT, signal.SIGQUIT)


class ScratchDirectory:
    """Temporary working directory owned by one run.

    The directory is created on first access to ``path`` and removed when
    the context exits, whether normally, by exception, or because the
    process received SIGTERM, SIGINT or SIGQUIT. Signals are turned into
    SystemExit inside the context so the removal runs on the way out.

    Usage:
        with ScratchDirectory(prefix="setup_rstudio_") as scratch:
            download_into(scratch.path)
    """

    def __init__(self, prefix: str = "deployutil_scratch_", base_dir: Path | None = None) -> None:
        self.prefix = prefix
        self.base_dir = base_dir
        self._path: Path | None = None
        self._previous_handlers: dict[int, Any] = {}

    @property
    def created(self) -> bool:
        return self._path is not None

    @property
    def path(self) -> Path:
        """The directory, created on first use."""
        if self._path is None:
            self._path = Path(tempfile.mkdtemp(prefix=self.prefix, dir=self.base_dir))
            logger.debug("Created scratch directory %s", self._path)
        return self._path

    def cleanup(self) -> None:
        """Remove the directory if it was created."""
        if self._path is None:
            return
        shutil.rmtree(self._path, ignore_errors=True)
        logger.debug("Removed scratch directory %s", self._path)
        self._path = None

    def _handle_signal(self, signum: int, frame: FrameType | None) -> None:
        self.cleanup()
        raise SystemExit(128 + signum)

    def _install_handlers(self) -> None:
        # Handlers can only be installed from the main thread.
        if threading.current_thread() is not threading.main_thread():
            return
        for signum in CLEANUP_SIGNALS:
            self._previous_handlers[signum] = signal.signal(signum, self._handle_signal)

    def _restore_handlers(self) -> None:
        for signum, handler in self._previous_handlers.items():
            # None means the previous handler was not installed from Python.
            signal.signal(signum, handler if handler is not None else signal.SIG_DFL)
        self._previous_handlers.clear()

    def __enter__(self) -> "ScratchDirectory":
        self._install_handlers()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        try:
            self.cleanup()
        finally:
            self._restore_handlers()
