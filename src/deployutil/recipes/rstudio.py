"""R and RStudio Server recipes for Ubuntu.

Both recipes add CRAN to the apt sources, trust the CRAN signing key,
install R and its system dependencies through apt, and install RStudio
Server from its .deb. The package selection follows
https://msperlin.github.io/2017-06-01-Instaling-R-in-Linux/.

The generic recipe also writes a littler script
(http://dirk.eddelbuettel.com/code/littler.examples.html) to install CRAN
packages that apt does not provide. The JAGS recipe adds ``r-cran-rjags``,
which pulls in the Ubuntu-packaged JAGS as a dependency.
"""

from deployutil.actions import (
    artifact_url,
    download_artifact,
    install_artifact,
    install_packages,
    reconfigure_runtime,
    refresh_package_index,
    register_package_source,
    run_generated_command,
    trust_signing_key,
    write_generated_file,
)
from deployutil.config import DeployConfig
from deployutil.engine.models import Step
from deployutil.recipes.base import Recipe

GENERIC_RSTUDIO_DEB = "rstudio-server-1.1.453-amd64.deb"
JAGS_RSTUDIO_DEB = "rstudio-server-1.0.153-amd64.deb"

# System libraries and toolchains shared by both recipes.
BASE_PACKAGES = [
    "default-jdk",
    "default-jre",
    "freeglut3-dev",
    "gdebi-core",
    "libcurl4-openssl-dev",
    "libgdal-dev",
    "libglu1-mesa-dev",
    "libgsl-dev",
    "libproj-dev",
    "libssl-dev",
    "libx11-dev",
    "libxml2-dev",
    "mesa-common-dev",
    "openjdk-7-*",
    "r-base",
    "r-base-dev",
    "xml2",
]

GENERIC_R_PACKAGES = [
    "r-cran-littler",
    "r-cran-mass",
    "r-cran-mgcv",
    "r-cran-plyr",
    "r-cran-reshape",
    "r-cran-reshape2",
    "r-cran-rgl",
    "r-cran-rglpk",
    "r-cran-rjava",
    "r-cran-rmysql",
    "r-cran-rsymphony",
    "r-cran-xml",
]

JAGS_R_PACKAGES = [
    "r-cran-coda",
    "r-cran-littler",
    "r-cran-plyr",
    "r-cran-reshape",
    "r-cran-reshape2",
    "r-cran-rgl",
    "r-cran-rglpk",
    "r-cran-rjags",
    "r-cran-rjava",
    "r-cran-rmysql",
    "r-cran-rsymphony",
    "r-cran-xml",
]

# CRAN packages the generic recipe installs through littler.
EXTRA_CRAN_PACKAGES = ["lme4", "MuMIn"]


def cran_source_line(config: DeployConfig) -> str:
    return f"deb {config.cranmirror.rstrip('/')}/bin/linux/ubuntu {config.releasename}/"


def _r_setup_steps(config: DeployConfig, packages: list[str]) -> list[Step]:
    return [
        register_package_source(
            cran_source_line(config),
            config.aptsourcesdir / "cran.list",
            name="CRAN mirror",
        ),
        trust_signing_key(
            config.signingkey,
            config.keyserver,
            name="Ubuntu-specific signing key for CRAN deb packages",
        ),
        refresh_package_index(),
        install_packages(packages),
        reconfigure_runtime(
            ["R", "CMD", "javareconf"],
            description="Detecting the current Java setup and updating the corresponding configuration in R",
            failure="Failed when trying to detect the current Java setup and update the corresponding configuration in R",
        ),
    ]


def _rstudio_server_steps(config: DeployConfig, default_deb: str) -> list[Step]:
    deb = config.rstudiodeb or default_deb
    return [
        download_artifact(
            artifact_url(config.rstudiourl, deb),
            deb,
            timeout=config.download_timeout,
            name="RStudio Server .deb file",
        ),
        install_artifact(deb, name="RStudio Server"),
    ]


def build_generic(config: DeployConfig) -> list[Step]:
    installer_path = config.resolved_installer_path()
    return [
        *_r_setup_steps(config, BASE_PACKAGES + GENERIC_R_PACKAGES),
        write_generated_file(
            installer_path,
            "install.r.j2",
            {
                "installer": config.installer,
                "cran_mirror": config.cranmirror,
                "lib_dir": str(config.libdir),
            },
        ),
        run_generated_command(
            [str(installer_path), *EXTRA_CRAN_PACKAGES],
            description=f"Installing extra R packages {' '.join(EXTRA_CRAN_PACKAGES)}",
            failure="Failed when installing additional R packages",
        ),
        *_rstudio_server_steps(config, GENERIC_RSTUDIO_DEB),
    ]


def build_jags(config: DeployConfig) -> list[Step]:
    return [
        *_r_setup_steps(config, BASE_PACKAGES + JAGS_R_PACKAGES),
        *_rstudio_server_steps(config, JAGS_RSTUDIO_DEB),
    ]


GENERIC = Recipe(
    name="setup_rstudio_generic",
    label="generic R and RStudio",
    description="R from CRAN, extra CRAN packages via littler, RStudio Server",
    build=build_generic,
)

JAGS = Recipe(
    name="setup_rstudio_jags",
    label="JAGS R and RStudio",
    description="R from CRAN with JAGS and rjags, RStudio Server",
    build=build_jags,
)
