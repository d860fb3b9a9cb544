"""Step action builders.

Each builder returns a Step whose action performs one kind of host
mutation through the step context: package manager calls, downloads,
generated files, Git copies and home directory symlinks.
"""

from deployutil.actions.apt import (
    install_packages,
    reconfigure_runtime,
    refresh_package_index,
    register_package_source,
    trust_signing_key,
    unique_packages,
)
from deployutil.actions.artifacts import artifact_url, download_artifact, install_artifact
from deployutil.actions.files import render_template, run_generated_command, write_generated_file
from deployutil.actions.git import clone_repository_subtree
from deployutil.actions.homes import read_default_home, symlink_into_home_directories

__all__ = [
    "artifact_url",
    "clone_repository_subtree",
    "download_artifact",
    "install_artifact",
    "install_packages",
    "read_default_home",
    "reconfigure_runtime",
    "refresh_package_index",
    "register_package_source",
    "render_template",
    "run_generated_command",
    "symlink_into_home_directories",
    "trust_signing_key",
    "unique_packages",
    "write_generated_file",
]
