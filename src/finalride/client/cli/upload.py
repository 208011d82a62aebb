"""Upload command for the FinalRide CLI.

Commands:
- upload: Store a file on Swarm and print its download link
"""

from __future__ import annotations

import sys
import time
from pathlib import Path

import click

from finalride.client.api import SwarmClient
from finalride.client.cli.config import load_config
from finalride.client.cli.formatting import format_duration, format_size, format_speed
from finalride.client.cli.progress import ProgressBar
from finalride.client.transfer import FileUploader
from finalride.client.types import TransferError
from finalride.core.errors import FinalRideError


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--encrypt/--no-encrypt",
    default=None,
    help="Force encryption on or off (default: encrypt_default from config).",
)
@click.option("--no-progress", is_flag=True, help="Disable progress bar.")
def upload(file: Path, encrypt: bool | None, no_progress: bool) -> None:
    """Upload FILE to Swarm.

    The file is optionally encrypted with a fresh key, split into pieces if
    larger than the configured chunk size, and described by a manifest whose
    reference is printed along with a shareable download link.
    """
    try:
        config = load_config()
    except FinalRideError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    should_encrypt = config.encrypt_default if encrypt is None else encrypt
    size = file.stat().st_size

    click.echo(f"File: {file.name}")
    click.echo(f"Size: {format_size(size)} ({size} bytes)")
    click.echo(f"Encryption: {should_encrypt}")

    progress = ProgressBar("Uploading", enabled=not no_progress)
    start = time.monotonic()
    try:
        with SwarmClient(config) as client:
            uploader = FileUploader(client, config, progress_callback=progress)
            result = uploader.upload_file(file, encrypt_data=should_encrypt)
    except (TransferError, FinalRideError) as e:
        progress.close()
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    progress.close()
    elapsed = time.monotonic() - start

    manifest = result.manifest
    click.echo("\nUPLOAD SUCCESSFUL!")
    click.echo(f"Metadata reference: {result.reference}")
    click.echo(f"Encrypted: {manifest.encrypted}")
    click.echo(f"Chunked: {manifest.chunked}")
    if manifest.chunked:
        click.echo(f"Chunks: {manifest.piece_count}")
    click.echo(f"Total time: {format_duration(elapsed)}")
    click.echo(f"Average speed: {format_speed(result.size, elapsed)}")
    click.echo(f"Shareable Download Link:\n{result.download_url}")
