"""Shared pytest fixtures for deployutil tests.

Provides common fixtures for mocking engine components and pointing
every host path at a temporary directory.
"""

import io
from collections.abc import Iterator
from pathlib import Path

import pytest
from rich.console import Console

from deployutil.engine import Container
from deployutil.engine.journal import RunLog
from deployutil.engine.mocks import MockBackend
from deployutil.engine.models import RunIdentity, RunPaths, StepContext
from deployutil.engine.scratch import ScratchDirectory


@pytest.fixture
def mock_backend() -> Iterator[MockBackend]:
    """Fixture that sets up and tears down a mock backend via Container.

    Yields:
        MockBackend instance configured to return successful results
    """
    backend = MockBackend()
    Container.set_backend(backend)
    yield backend
    Container.reset()


@pytest.fixture
def quiet_console() -> Console:
    """Console writing to memory so log echoes stay out of test output."""
    return Console(file=io.StringIO(), width=200)


@pytest.fixture
def run_paths(tmp_path: Path) -> RunPaths:
    """Log and status paths in directories that don't exist yet."""
    return RunPaths(
        log_path=tmp_path / "log" / "test_run.log",
        status_path=tmp_path / "etc" / "test_run.status",
    )


@pytest.fixture
def identity() -> RunIdentity:
    return RunIdentity(name="test_run", label="test provisioning")


@pytest.fixture
def step_context(
    tmp_path: Path, identity: RunIdentity, quiet_console: Console
) -> Iterator[StepContext]:
    """A StepContext with a mock backend, a real log and a scratch directory.

    Yields:
        StepContext whose log is written to tmp_path/step.log
    """
    scratch = ScratchDirectory(base_dir=tmp_path)
    log = RunLog(tmp_path / "step.log", console=quiet_console)
    yield StepContext(identity=identity, backend=MockBackend(), log=log, scratch=scratch)
    log.close()
    scratch.cleanup()


@pytest.fixture
def deploy_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every DEPLOYUTIL_* path setting inside tmp_path.

    Returns:
        The temporary root directory
    """
    home_root = tmp_path / "home"
    for user in ("alice", "bob"):
        (home_root / user).mkdir(parents=True)
    (tmp_path / "sources.list.d").mkdir()
    adduser_conf = tmp_path / "adduser.conf"
    adduser_conf.write_text(f'DSHELL=/bin/bash\nDHOME="{home_root}"\n')

    settings = {
        "LOGDIR": tmp_path / "log",
        "CONFIGDIR": tmp_path / "etc",
        "APTSOURCESDIR": tmp_path / "sources.list.d",
        "BINDIR": tmp_path / "bin",
        "DESTDIR": tmp_path / "src" / "R",
        "ADDUSERCONF": adduser_conf,
    }
    for key, value in settings.items():
        monkeypatch.setenv(f"DEPLOYUTIL_{key}", str(value))
    for key in ("OURNAME", "LABEL", "LOGPATH", "STATUSPATH", "INSTALLERPATH"):
        monkeypatch.delenv(f"DEPLOYUTIL_{key}", raising=False)
    return tmp_path
