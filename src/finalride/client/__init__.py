"""Client module - Swarm gateway access and file transfer.

Components:
- **SwarmClient**: HTTP access to the gateway's /bzz endpoints
- **FileUploader / FileDownloader**: drive the protocol core end to end
- **PiecePool**: concurrent per-piece transfer with all-or-nothing results
"""

from finalride.client.api import APIError, NotFoundError, SwarmClient
from finalride.client.links import extract_reference
from finalride.client.pool import PiecePool
from finalride.client.retry import retry_with_backoff
from finalride.client.transfer import FileDownloader, FileUploader, safe_filename, should_chunk
from finalride.client.types import (
    DownloadError,
    DownloadResult,
    ProgressCallback,
    TransferError,
    TransferProgress,
    UploadError,
    UploadResult,
)

__all__ = [
    "APIError",
    "DownloadError",
    "DownloadResult",
    "FileDownloader",
    "FileUploader",
    "NotFoundError",
    "PiecePool",
    "ProgressCallback",
    "SwarmClient",
    "TransferError",
    "TransferProgress",
    "UploadError",
    "UploadResult",
    "extract_reference",
    "retry_with_backoff",
    "safe_filename",
    "should_chunk",
]
