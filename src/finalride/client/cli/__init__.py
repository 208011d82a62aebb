"""Command-line interface for FinalRide.

This module provides the main CLI entry point and assembles all commands.

Commands:
- upload: Upload a file (optionally encrypted and chunked)
- download: Download a file by manifest reference or link
- info: Show a manifest summary
- config: View or change settings
- status: Check the Swarm gateway
"""

from __future__ import annotations

import click

from finalride.client.cli.config import (
    get_config_dir,
    get_config_file,
    load_config,
    save_config,
    setup_logging,
)
from finalride.client.cli.download import download, info
from finalride.client.cli.settings import config_group
from finalride.client.cli.status import status
from finalride.client.cli.upload import upload


@click.group()
@click.version_option(package_name="finalride")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logs.")
def cli(verbose: bool) -> None:
    """FinalRide - End-to-end encrypted file transfer over Swarm."""
    setup_logging(verbose)


# Transfer commands
cli.add_command(upload)
cli.add_command(download)
cli.add_command(info)
cli.add_command(status)

# Settings commands
cli.add_command(config_group)


def main() -> None:
    """Entry point for the CLI."""
    cli()


__all__ = [
    "cli",
    "main",
    "get_config_dir",
    "get_config_file",
    "load_config",
    "save_config",
]
