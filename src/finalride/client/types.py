"""Shared types and dataclasses for transfer operations.

This module provides:
- TransferError, UploadError, DownloadError: Exception classes
- TransferProgress: Progress tracking dataclass
- UploadResult, DownloadResult: Operation result dataclasses
- Type aliases for callbacks
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from finalride.core.manifest import Manifest


class TransferError(Exception):
    """Base exception for transfer errors."""


class UploadError(TransferError):
    """Failed to store a file or one of its pieces."""


class DownloadError(TransferError):
    """Failed to fetch a manifest, a file or one of its pieces."""


@dataclass
class TransferProgress:
    """Progress information for a transfer."""

    filename: str
    current_piece: int
    total_pieces: int
    bytes_transferred: int
    total_bytes: int
    operation: str  # "upload" or "download"


# Type alias for progress callback
ProgressCallback = Callable[[TransferProgress], None]


@dataclass
class UploadResult:
    """Result of a file upload."""

    reference: str
    manifest: Manifest
    size: int
    stored_size: int
    download_url: str | None = None


@dataclass
class DownloadResult:
    """Result of a file download."""

    reference: str
    manifest: Manifest
    data: bytes
    local_path: Path | None = None

    @property
    def size(self) -> int:
        """Size of the recovered plaintext in bytes."""
        return len(self.data)
