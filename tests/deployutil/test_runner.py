"""Tests for ProvisioningRunner."""

import os
import signal
from collections.abc import Iterator
from datetime import datetime, timezone
from pathlib import Path

import pytest
from rich.console import Console

from deployutil.actions.apt import install_packages
from deployutil.actions.homes import symlink_into_home_directories
from deployutil.engine.mocks import MockBackend
from deployutil.engine.models import RunIdentity, RunPaths, RunStatus, Step, StepContext
from deployutil.engine.runner import STATUS_FLAG_CONTENT, ProvisioningRunner, format_timestamp
from deployutil.exceptions import (
    DirectoryUnavailableError,
    LogUnwritableError,
    StepFailedError,
)

START = datetime(2018, 6, 4, 12, 0, 0, tzinfo=timezone.utc)


def _fixed_clock() -> datetime:
    return START


def _failing_clock() -> datetime:
    raise OSError("clock unavailable")


def _command_step(argv: list[str], description: str, failure: str) -> Step:
    def action(context: StepContext) -> None:
        context.run(argv)

    return Step(description=description, action=action, failure=failure)


@pytest.fixture
def runner(quiet_console: Console) -> Iterator[ProvisioningRunner]:
    backend = MockBackend()
    with ProvisioningRunner(backend, clock=_fixed_clock, console=quiet_console) as runner:
        yield runner


@pytest.fixture
def steps() -> list[Step]:
    return [
        _command_step(["apt-get", "update"], "Refreshing packages", "Could not refresh packages"),
        _command_step(["apt-get", "install", "-y", "r-base"], "Installing R", "Failed installing R"),
        _command_step(["R", "CMD", "javareconf"], "Configuring Java", "Failed configuring Java"),
    ]


def _log_lines(paths: RunPaths) -> list[str]:
    return paths.log_path.read_text().splitlines()


def test_format_timestamp() -> None:
    assert format_timestamp(START) == "Mon Jun 04 12:00:00 UTC 2018"


class TestFreshRun:
    """A run on a host without a completion flag."""

    def test_all_steps_succeed(
        self,
        runner: ProvisioningRunner,
        identity: RunIdentity,
        run_paths: RunPaths,
        steps: list[Step],
    ) -> None:
        result = runner.run(identity, run_paths, steps)

        assert result.status is RunStatus.SUCCEEDED
        assert result.exit_code == 0
        assert result.steps_completed == 3
        assert result.started_at == START
        assert run_paths.status_path.read_text() == STATUS_FLAG_CONTENT
        assert _log_lines(run_paths) == [
            "Started the test provisioning at Mon Jun 04 12:00:00 UTC 2018...",
            "Refreshing packages...",
            "Installing R...",
            "Configuring Java...",
            "Successfully completed test provisioning.",
        ]

    def test_steps_run_in_order(
        self,
        runner: ProvisioningRunner,
        identity: RunIdentity,
        run_paths: RunPaths,
        steps: list[Step],
    ) -> None:
        runner.run(identity, run_paths, steps)
        backend = runner._backend
        assert [c.argv for c in backend.commands] == [
            ["apt-get", "update"],
            ["apt-get", "install", "-y", "r-base"],
            ["R", "CMD", "javareconf"],
        ]

    def test_creates_log_and_status_directories(
        self, runner: ProvisioningRunner, identity: RunIdentity, run_paths: RunPaths
    ) -> None:
        assert not run_paths.log_path.parent.exists()
        runner.run(identity, run_paths, [])
        assert run_paths.log_path.parent.is_dir()
        assert run_paths.status_path.is_file()

    def test_empty_step_list_succeeds(
        self, runner: ProvisioningRunner, identity: RunIdentity, run_paths: RunPaths
    ) -> None:
        result = runner.run(identity, run_paths, [])
        assert result.ok
        assert result.steps_completed == 0


class TestAlreadyDone:
    """A run on a host where the completion flag already exists."""

    def test_skips_every_step(
        self,
        runner: ProvisioningRunner,
        identity: RunIdentity,
        run_paths: RunPaths,
        steps: list[Step],
    ) -> None:
        run_paths.log_path.parent.mkdir(parents=True)
        run_paths.log_path.write_text("Earlier run...\n")
        run_paths.status_path.parent.mkdir(parents=True)
        run_paths.status_path.write_text(STATUS_FLAG_CONTENT)

        result = runner.run(identity, run_paths, steps)

        assert result.status is RunStatus.SKIPPED
        assert result.exit_code == 0
        assert runner._backend.commands == []
        assert _log_lines(run_paths) == [
            "Earlier run...",
            "Re-run on Mon Jun 04 12:00:00 UTC 2018, but test_run has already run.",
        ]

    def test_second_run_is_skipped(
        self,
        runner: ProvisioningRunner,
        identity: RunIdentity,
        run_paths: RunPaths,
        steps: list[Step],
    ) -> None:
        assert runner.run(identity, run_paths, steps).status is RunStatus.SUCCEEDED
        assert runner.run(identity, run_paths, steps).status is RunStatus.SKIPPED
        assert len(runner._backend.commands) == 3


class TestFailures:
    """Runs that stop at the first failing step."""

    def test_command_failure_aborts(
        self,
        runner: ProvisioningRunner,
        identity: RunIdentity,
        run_paths: RunPaths,
        steps: list[Step],
    ) -> None:
        runner._backend.fail("apt-get", 100)

        result = runner.run(identity, run_paths, steps)

        assert result.status is RunStatus.FAILED
        assert result.exit_code == 1
        assert result.failed_step == "Refreshing packages"
        assert result.steps_completed == 0
        assert runner._backend.programs == ["apt-get"]
        assert not run_paths.status_path.exists()
        assert _log_lines(run_paths)[-1] == "** Could not refresh packages (status: 100)."

    def test_package_install_failure(
        self, runner: ProvisioningRunner, identity: RunIdentity, run_paths: RunPaths
    ) -> None:
        """Test a failed apt install is the last, marked log entry."""
        runner._backend.fail("apt-get", 100)
        steps = [install_packages(["r-base", "r-cran-rjags"])]

        result = runner.run(identity, run_paths, steps)

        assert not result.ok
        assert not run_paths.status_path.exists()
        assert _log_lines(run_paths)[-1] == (
            "** Failed when installing the apt packages r-base r-cran-rjags (status: 100)."
        )

    def test_failure_in_middle_keeps_earlier_work(
        self,
        runner: ProvisioningRunner,
        identity: RunIdentity,
        run_paths: RunPaths,
        steps: list[Step],
    ) -> None:
        runner._backend.fail("R", 2)

        result = runner.run(identity, run_paths, steps)

        assert result.steps_completed == 2
        assert result.failed_step == "Configuring Java"
        assert _log_lines(run_paths)[-2:] == [
            "Configuring Java...",
            "** Failed configuring Java (status: 2).",
        ]

    def test_step_failed_error(
        self, runner: ProvisioningRunner, identity: RunIdentity, run_paths: RunPaths
    ) -> None:
        def action(context: StepContext) -> None:
            raise StepFailedError("the destination /usr/local/src/R already exists")

        step = Step(description="Copying code", action=action, failure="Failed when copying code")
        result = runner.run(identity, run_paths, [step])

        assert not result.ok
        assert _log_lines(run_paths)[-1] == (
            "** Failed when copying code (the destination /usr/local/src/R already exists)."
        )

    def test_os_error_in_action(
        self, runner: ProvisioningRunner, identity: RunIdentity, run_paths: RunPaths, tmp_path: Path
    ) -> None:
        def action(context: StepContext) -> None:
            (tmp_path / "missing" / "file").write_text("x")

        step = Step(description="Writing", action=action, failure="Could not write")
        result = runner.run(identity, run_paths, [step])

        assert not result.ok
        assert _log_lines(run_paths)[-1] == "** Could not write (No such file or directory)."

    def test_unexpected_exception_fails_run(
        self, runner: ProvisioningRunner, identity: RunIdentity, run_paths: RunPaths
    ) -> None:
        """Test an exception outside the step error types still yields a failed result."""

        def action(context: StepContext) -> None:
            raise RuntimeError("unexpected state")

        later = _command_step(["apt-get", "update"], "Refreshing", "Could not refresh")
        step = Step(description="Checking", action=action, failure="Failed when checking")
        result = runner.run(identity, run_paths, [step, later])

        assert not result.ok
        assert result.failed_step == "Checking"
        assert runner._backend.commands == []
        assert not run_paths.status_path.exists()
        last = _log_lines(run_paths)[-1]
        assert last.startswith("** ")
        assert last == "** Failed when checking (RuntimeError: unexpected state)."

    def test_non_utf8_adduser_conf_fails_cleanly(
        self,
        runner: ProvisioningRunner,
        identity: RunIdentity,
        run_paths: RunPaths,
        tmp_path: Path,
    ) -> None:
        """Test a Latin-1 adduser.conf without DHOME is reported, not raised."""
        conf = tmp_path / "adduser.conf"
        conf.write_bytes(b"# caf\xe9 settings\nDSHELL=/bin/bash\n")
        step = symlink_into_home_directories(tmp_path / "R", "code", conf)

        result = runner.run(identity, run_paths, [step])

        assert not result.ok
        assert _log_lines(run_paths)[-1].startswith("** Failed when symlinking")

    def test_rerun_after_failure_starts_over(
        self,
        runner: ProvisioningRunner,
        identity: RunIdentity,
        run_paths: RunPaths,
        steps: list[Step],
    ) -> None:
        runner._backend.fail("R", 1)
        runner.run(identity, run_paths, steps)

        runner._backend.fail("R", 0)
        runner._backend.reset()
        result = runner.run(identity, run_paths, steps)

        assert result.status is RunStatus.SUCCEEDED
        assert runner._backend.programs == ["apt-get", "apt-get", "R"]
        assert sum(line.startswith("Started the") for line in _log_lines(run_paths)) == 2

    def test_command_timeout(
        self, quiet_console: Console, identity: RunIdentity, run_paths: RunPaths
    ) -> None:
        """Test a timed out command is reported with its limit."""

        class TimingOutBackend(MockBackend):
            def run(self, command):
                result = super().run(command)
                return result.model_copy(update={"exit_code": 124, "timed_out": True})

        runner = ProvisioningRunner(
            TimingOutBackend(), command_timeout=90, clock=_fixed_clock, console=quiet_console
        )
        step = _command_step(["apt-get", "update"], "Refreshing", "Could not refresh")
        result = runner.run(identity, run_paths, [step])
        runner.close()

        assert not result.ok
        assert _log_lines(run_paths)[-1] == "** Could not refresh (timed out after 90s)."

    def test_clock_failure(
        self, quiet_console: Console, identity: RunIdentity, run_paths: RunPaths, steps: list[Step]
    ) -> None:
        backend = MockBackend()
        with ProvisioningRunner(backend, clock=_failing_clock, console=quiet_console) as runner:
            result = runner.run(identity, run_paths, steps)

        assert not result.ok
        assert backend.commands == []
        assert _log_lines(run_paths) == [
            "** Couldn't get the current time to make log entries."
        ]

    def test_status_flag_unwritable(
        self, runner: ProvisioningRunner, identity: RunIdentity, run_paths: RunPaths
    ) -> None:
        def action(context: StepContext) -> None:
            run_paths.status_path.parent.rmdir()

        step = Step(description="Removing config dir", action=action, failure="unused")
        result = runner.run(identity, run_paths, [step])

        assert not result.ok
        assert result.steps_completed == 1
        assert _log_lines(run_paths)[-1] == (
            f"** You must manually create a {run_paths.status_path} file to prevent repeated runs."
        )


class TestScratchDirectory:
    """The scratch directory is removed on every exit path."""

    def _recording_step(self, seen: list[Path], fail: bool = False) -> Step:
        def action(context: StepContext) -> None:
            (context.scratch_dir / "download.deb").write_bytes(b"deb")
            seen.append(context.scratch_dir)
            if fail:
                raise StepFailedError("boom")

        return Step(description="Downloading", action=action, failure="Couldn't download")

    def test_removed_after_success(
        self, runner: ProvisioningRunner, identity: RunIdentity, run_paths: RunPaths
    ) -> None:
        seen: list[Path] = []
        runner.run(identity, run_paths, [self._recording_step(seen)])
        assert seen and not seen[0].exists()
        assert seen[0].name.startswith("test_run_")

    def test_removed_after_failure(
        self, runner: ProvisioningRunner, identity: RunIdentity, run_paths: RunPaths
    ) -> None:
        seen: list[Path] = []
        runner.run(identity, run_paths, [self._recording_step(seen, fail=True)])
        assert seen and not seen[0].exists()

    def test_removed_on_termination_signal(
        self, runner: ProvisioningRunner, identity: RunIdentity, run_paths: RunPaths
    ) -> None:
        """Test SIGTERM during a step removes the directory and exits with 143."""
        seen: list[Path] = []

        def action(context: StepContext) -> None:
            (context.scratch_dir / "download.deb").write_bytes(b"deb")
            seen.append(context.scratch_dir)
            os.kill(os.getpid(), signal.SIGTERM)

        step = Step(description="Downloading", action=action, failure="Couldn't download")
        with pytest.raises(SystemExit) as exc_info:
            runner.run(identity, run_paths, [step])

        assert exc_info.value.code == 128 + signal.SIGTERM
        assert seen and not seen[0].exists()
        assert not run_paths.status_path.exists()

    def test_steps_share_one_directory(
        self, runner: ProvisioningRunner, identity: RunIdentity, run_paths: RunPaths
    ) -> None:
        seen: list[Path] = []
        runner.run(identity, run_paths, [self._recording_step(seen), self._recording_step(seen)])
        assert seen[0] == seen[1]


class TestPrepare:
    """Setup failures before the run log is usable."""

    def test_log_directory_unavailable(self, runner: ProvisioningRunner, tmp_path: Path) -> None:
        blocker = tmp_path / "log"
        blocker.write_text("not a directory")
        paths = RunPaths(log_path=blocker / "sub" / "x.log", status_path=tmp_path / "etc" / "x.status")

        with pytest.raises(DirectoryUnavailableError) as exc_info:
            runner.prepare(paths)
        assert exc_info.value.message == f"No directory {blocker / 'sub'} for log files"

    def test_status_directory_unavailable(self, runner: ProvisioningRunner, tmp_path: Path) -> None:
        blocker = tmp_path / "etc"
        blocker.write_text("not a directory")
        paths = RunPaths(log_path=tmp_path / "log" / "x.log", status_path=blocker / "x.status")

        with pytest.raises(DirectoryUnavailableError) as exc_info:
            runner.prepare(paths)
        assert exc_info.value.purpose == "config files"

    def test_log_unwritable(self, runner: ProvisioningRunner, tmp_path: Path) -> None:
        log_path = tmp_path / "log" / "x.log"
        log_path.mkdir(parents=True)
        paths = RunPaths(log_path=log_path, status_path=tmp_path / "etc" / "x.status")

        with pytest.raises(LogUnwritableError):
            runner.prepare(paths)

    def test_check_already_done(self, run_paths: RunPaths) -> None:
        assert not ProvisioningRunner.check_already_done(run_paths)
        run_paths.status_path.parent.mkdir(parents=True)
        run_paths.status_path.touch()
        assert ProvisioningRunner.check_already_done(run_paths)
