"""
CLI Commands.

Organized by domain/feature area.
"""

from projecthub.cli.commands.config import app as config_app
from projecthub.cli.commands.db import app as db_app
from projecthub.cli.commands.export import app as export_app

__all__ = [
    "config_app",
    "db_app",
    "export_app",
]
