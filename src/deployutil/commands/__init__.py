"""deployutil CLI commands.

Each command module contains the business logic for a CLI command.
The cli.py module handles Typer decorators and argument parsing,
then delegates to these command functions.
"""

from deployutil.commands.list import list_command
from deployutil.commands.logs import logs_command
from deployutil.commands.reset import reset_command
from deployutil.commands.run import run_command
from deployutil.commands.show_config import config_command
from deployutil.commands.status import status_command

__all__ = [
    "config_command",
    "list_command",
    "logs_command",
    "reset_command",
    "run_command",
    "status_command",
]
