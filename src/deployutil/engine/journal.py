"""Run log - append-only, human-readable record of a provisioning run."""

import logging
from pathlib import Path
from typing import Any, TextIO

from rich.console import Console

from deployutil.exceptions import LogUnwritableError

logger = logging.getLogger(__name__)

FAILURE_MARKER = "**"


class RunLog:
    """Append-only log for provisioning runs.

    Every line is written to the log file and echoed to stderr, so an
    operator watching the run sees exactly what the log records.
    The file is flushed after each write for crash safety.

    Line shapes:
        progress: "Refreshing the apt package information..."
        notice:   "Successfully completed generic R and RStudio."
        error:    "** Failed when installing the apt packages (status: 100)."

    Usage:
        with RunLog(Path("/var/local/log/setup.log")) as log:
            log.progress("Started the generic R and RStudio at Mon Jun 4 ...")
            log.error("Could not refresh the apt package information")
    """

    def __init__(self, path: Path, console: Console | None = None) -> None:
        """Open the log for appending.

        Args:
            path: Log file path; its directory must already exist
            console: Console used to echo lines (defaults to stderr)

        Raises:
            LogUnwritableError: If the file cannot be opened for appending
        """
        self.path = path
        self._console = console or Console(stderr=True)

        try:
            self._file_handle: TextIO | None = open(self.path, "a", encoding="utf-8")
        except OSError as e:
            raise LogUnwritableError(str(path), e.strerror or str(e)) from e

    def _write(self, line: str, style: str | None = None) -> None:
        self._console.print(line, style=style, markup=False, highlight=False, soft_wrap=True)
        if self._file_handle is None:
            logger.warning("Run log %s is closed, dropped: %s", self.path, line)
            return
        self._file_handle.write(line + "\n")
        self._file_handle.flush()

    def progress(self, message: str) -> None:
        """Record a step that is starting."""
        self._write(f"{message}...")

    def notice(self, message: str) -> None:
        """Record a terminal, non-error outcome."""
        self._write(f"{message}.", style="bold")

    def error(self, message: str) -> None:
        """Record a fatal failure with the failure marker."""
        self._write(f"{FAILURE_MARKER} {message}.", style="bold red")

    def close(self) -> None:
        """Close log file handle."""
        if self._file_handle:
            self._file_handle.close()
            self._file_handle = None

    def __enter__(self) -> "RunLog":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()


def read_log_lines(path: Path) -> list[str]:
    """Read every entry of a run log.

    Raises:
        FileNotFoundError: If the log doesn't exist
    """
    if not path.exists():
        raise FileNotFoundError(f"Log not found: {path}")

    return path.read_text(encoding="utf-8").splitlines()


def is_failure_line(line: str) -> bool:
    """True if a log line records a failure."""
    return line.startswith(f"{FAILURE_MARKER} ")
