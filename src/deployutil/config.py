"""Provisioning configuration with environment variable support.

Every setting can be overridden through a DEPLOYUTIL_-prefixed environment
variable, e.g. DEPLOYUTIL_CRANMIRROR or DEPLOYUTIL_LOGDIR. The settings are
read once at process start and then passed explicitly to recipe builders,
so no step ever looks at the environment itself.

Example:
    ```bash
    export DEPLOYUTIL_LOGDIR=/tmp/deploy-logs
    export DEPLOYUTIL_RELEASENAME=bionic
    deployutil run rstudio-jags
    ```
"""

from pathlib import Path

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from deployutil.engine.models import RunIdentity, RunPaths
from deployutil.exceptions import ConfigurationError


class DeployConfig(BaseSettings):
    """Settings shared by all provisioning recipes.

    Path settings left unset are derived from the run name:
    the log goes to LOGDIR/<name>.log and the completion flag to
    CONFIGDIR/<name>.status.
    """

    # Run identity overrides (recipe defaults when unset)
    ourname: str | None = Field(default=None, description="Short, machine-intelligible run name")
    label: str | None = Field(default=None, description="Human-readable label for log messages")

    # Package sources
    cranmirror: str = Field(default="https://cloud.r-project.org/", description="CRAN mirror URL")
    releasename: str = Field(default="xenial", description="Base release codename")
    aptsourcesdir: Path = Field(
        default=Path("/etc/apt/sources.list.d"),
        description="Directory for additional apt source lists",
    )
    keyserver: str = Field(default="keyserver.ubuntu.com", description="Key server for apt-key")
    signingkey: str = Field(default="E084DAB9", description="CRAN package signing key ID")

    # RStudio Server artifact
    rstudiourl: str = Field(default="https://download2.rstudio.org/", description="RStudio download URL")
    rstudiodeb: str | None = Field(default=None, description="RStudio Server .deb filename")

    # Logging and status
    logdir: Path = Field(default=Path("/var/local/log"), description="Directory for log files")
    logpath: Path | None = Field(default=None, description="Permanent log for the run")
    configdir: Path = Field(default=Path("/usr/local/etc"), description="Directory for config files")
    statuspath: Path | None = Field(default=None, description="Flag file created on success")

    # Generated littler helper
    libdir: Path = Field(default=Path("/usr/local/lib/R/site-library"), description="R library directory")
    bindir: Path = Field(default=Path("/usr/local/bin"), description="Local executable directory")
    installer: str = Field(default="install.r", description="CRAN package installation script name")
    installerpath: Path | None = Field(default=None, description="Path to the installation script")

    # Code fragment retrieval
    sourcerepo: str = Field(default="https://github.com/mekevans/pecan.git", description="Source Git repository")
    sourcebranch: str = Field(default="working", description="Source Git branch")
    sourcedir: Path = Field(default=Path("pecan/modules/data.land/R"), description="Subdirectory to copy")
    destdir: Path = Field(default=Path("/usr/local/src/R"), description="Absolute destination directory")
    destlink: str = Field(default="code", description="Symlink name created in each home directory")
    adduserconf: Path = Field(default=Path("/etc/adduser.conf"), description="Default user account settings")

    # Bounded waits for external collaborators
    command_timeout: float = Field(default=3600.0, gt=0, description="Seconds before a command is abandoned")
    download_timeout: float = Field(default=60.0, gt=0, description="Connect/read timeout for downloads")

    model_config = SettingsConfigDict(
        env_prefix="DEPLOYUTIL_",
        case_sensitive=False,
    )

    def identity(self, default_name: str, default_label: str) -> RunIdentity:
        """Resolve the run identity, preferring explicit overrides."""
        return RunIdentity(name=self.ourname or default_name, label=self.label or default_label)

    def run_paths(self, name: str) -> RunPaths:
        """Resolve the log and status paths for a run called ``name``."""
        return RunPaths(
            log_path=self.logpath or self.logdir / f"{name}.log",
            status_path=self.statuspath or self.configdir / f"{name}.status",
        )

    def resolved_installer_path(self) -> Path:
        """Where the generated CRAN installation script is written."""
        return self.installerpath or self.bindir / self.installer


def load_config(**overrides: object) -> DeployConfig:
    """Load configuration from the environment.

    Args:
        **overrides: Explicit values taking precedence over the environment

    Returns:
        Validated DeployConfig

    Raises:
        ConfigurationError: If any DEPLOYUTIL_* value fails validation
    """
    try:
        return DeployConfig(**overrides)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid deployutil configuration: {e}") from e
