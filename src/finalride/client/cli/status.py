"""Gateway status command for the FinalRide CLI.

Commands:
- status: Check whether the configured Swarm gateway is reachable
"""

from __future__ import annotations

import sys

import click

from finalride.client.api import SwarmClient
from finalride.client.cli.config import load_config
from finalride.core.errors import FinalRideError


@click.command()
def status() -> None:
    """Check whether the Swarm gateway is online.

    Exits with status 1 when the gateway cannot be reached or reports an error.
    """
    try:
        config = load_config()
    except FinalRideError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Gateway: {config.swarm_api}")
    with SwarmClient(config) as client:
        online = client.health_check()

    if not online:
        click.echo("Status: offline")
        sys.exit(1)
    click.echo("Status: online")
