"""Configuration commands for the FinalRide CLI.

Commands:
- config show: Print the effective configuration
- config set: Change one setting
- config path: Print the config file location
"""

from __future__ import annotations

import dataclasses
import json
import sys
from typing import Any

import click

from finalride.client.cli.config import get_config_file, load_config, save_config
from finalride.core.config import TransferConfig
from finalride.core.errors import ConfigError, FinalRideError

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def parse_value(name: str, raw: str) -> Any:
    """Convert a command-line string to the type of config field name.

    Raises:
        ConfigError: If name is not a setting or raw does not parse.
    """
    defaults = TransferConfig()
    if name == "extra" or name not in {f.name for f in dataclasses.fields(TransferConfig)}:
        raise ConfigError(f"Unknown setting: {name}")
    current = getattr(defaults, name)
    if isinstance(current, bool):
        lowered = raw.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        raise ConfigError(f"{name} must be true or false, got {raw!r}")
    try:
        if isinstance(current, int):
            return int(raw)
        if isinstance(current, float):
            return float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e
    return raw


@click.group(name="config")
def config_group() -> None:
    """View or change settings."""


@config_group.command()
def show() -> None:
    """Print the effective configuration as JSON."""
    try:
        config = load_config()
    except FinalRideError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(json.dumps(config.to_dict(), indent=2))


@config_group.command(name="set")
@click.argument("name")
@click.argument("value")
def set_value(name: str, value: str) -> None:
    """Set setting NAME to VALUE."""
    try:
        config = load_config()
        data = config.to_dict()
        data[name] = parse_value(name, value)
        save_config(TransferConfig.from_dict(data))
    except FinalRideError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(f"{name} = {data[name]}")


@config_group.command()
def path() -> None:
    """Print the config file location."""
    click.echo(str(get_config_file()))
