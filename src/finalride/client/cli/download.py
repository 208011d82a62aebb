"""Download commands for the FinalRide CLI.

Commands:
- download: Fetch, verify and decrypt a file by manifest reference or link
- info: Show what a manifest describes without downloading the file
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
from finalride.client.links import extract_reference
from finalride.client.transfer import FileDownloader
from finalride.client.types import TransferError
from finalride.core.errors import DigestMismatch, FinalRideError


@click.command()
@click.argument("reference")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write to this path instead of the manifest's filename.",
)
@click.option(
    "--dir",
    "-d",
    "directory",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory for the file (default: download_dir from config).",
)
@click.option("--no-progress", is_flag=True, help="Disable progress bar.")
def download(
    reference: str, output: Path | None, directory: Path | None, no_progress: bool
) -> None:
    """Download a file by manifest REFERENCE or shareable link.

    Encryption and chunking are detected from the manifest. Every piece is
    checked against its recorded SHA-256 digest before reassembly.
    """
    try:
        config = load_config()
    except FinalRideError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    reference = extract_reference(reference)
    click.echo(f"Metadata reference: {reference}")

    progress = ProgressBar("Downloading", enabled=not no_progress)
    start = time.monotonic()
    try:
        with SwarmClient(config) as client:
            downloader = FileDownloader(client, config, progress_callback=progress)
            result = downloader.download_to(
                reference,
                directory=directory or Path(config.download_dir).expanduser(),
                output=output,
            )
    except DigestMismatch as e:
        progress.close()
        click.echo(f"Error: {e}. The stored data is corrupted or was tampered with.", err=True)
        sys.exit(1)
    except OSError as e:
        progress.close()
        click.echo(f"Error writing file: {e}", err=True)
        sys.exit(1)
    except (TransferError, FinalRideError) as e:
        progress.close()
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    progress.close()
    elapsed = time.monotonic() - start

    click.echo("\nDOWNLOAD SUCCESSFUL!")
    click.echo(f"File saved: {result.local_path}")
    click.echo(f"Size: {format_size(result.size)}")
    click.echo(f"Encrypted: {result.manifest.encrypted}")
    click.echo(f"Total time: {format_duration(elapsed)}")
    click.echo(f"Average speed: {format_speed(result.size, elapsed)}")


@click.command()
@click.argument("reference")
def info(reference: str) -> None:
    """Show the manifest behind a REFERENCE or shareable link."""
    try:
        config = load_config()
        with SwarmClient(config) as client:
            manifest = FileDownloader(client, config).fetch_manifest(extract_reference(reference))
    except (TransferError, FinalRideError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Filename:    {manifest.filename}")
    click.echo(f"Encrypted:   {manifest.encrypted}")
    click.echo(f"Chunked:     {manifest.chunked}")
    click.echo(f"Chunks:      {manifest.piece_count}")
