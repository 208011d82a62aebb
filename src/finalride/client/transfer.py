"""File upload and download over Swarm.

This module drives the protocol core:

    upload:   encrypt? -> split? -> store pieces -> build manifest -> store manifest
    download: fetch manifest -> fetch + verify pieces -> reassemble -> decrypt?

It provides:
- FileUploader: stores a payload and returns the manifest reference
- FileDownloader: resolves a manifest reference back into the original bytes
"""

from __future__ import annotations

import contextlib
import logging
from pathlib import Path, PurePosixPath, PureWindowsPath

import httpx

from finalride.client.api import APIError, SwarmClient
from finalride.client.pool import PiecePool
from finalride.client.retry import retry_with_backoff
from finalride.client.types import (
    DownloadError,
    DownloadResult,
    ProgressCallback,
    TransferProgress,
    UploadError,
    UploadResult,
)
from finalride.core.chunking import reassemble, split
from finalride.core.config import TransferConfig
from finalride.core.crypto import compute_hash, decrypt, encrypt, generate_key, verify_hash
from finalride.core.manifest import Manifest

logger = logging.getLogger(__name__)

STORE_ERRORS: tuple[type[Exception], ...] = (APIError, httpx.HTTPError)
DEFAULT_FILENAME = "download.bin"


def should_chunk(size: int, threshold: int) -> bool:
    """Split only payloads strictly larger than the threshold."""
    return size > threshold


def safe_filename(name: str) -> str:
    """Reduce a manifest filename to a bare name that stays in the target directory."""
    base = PureWindowsPath(PurePosixPath(name).name).name
    if base in ("", ".", ".."):
        return DEFAULT_FILENAME
    return base


class FileUploader:
    """Handles upload with optional encryption and chunking."""

    def __init__(
        self,
        client: SwarmClient,
        config: TransferConfig,
        progress_callback: ProgressCallback | None = None,
    ) -> None:
        """Initialize the uploader.

        Args:
            client: Gateway client used to store blobs.
            config: Chunk size, encryption default, workers and retries.
            progress_callback: Optional callback for progress updates.
        """
        self._client = client
        self._config = config
        self._progress_callback = progress_callback

    def upload_file(self, local_path: Path, encrypt_data: bool | None = None) -> UploadResult:
        """Upload a local file.

        Raises:
            UploadError: If the file is missing or a store call fails.
        """
        local_path = Path(local_path)
        if not local_path.is_file():
            raise UploadError(f"File not found: {local_path}")
        return self.upload_bytes(local_path.read_bytes(), local_path.name, encrypt_data)

    def upload_bytes(
        self,
        data: bytes,
        filename: str,
        encrypt_data: bool | None = None,
    ) -> UploadResult:
        """Store a payload and its manifest.

        The manifest is stored only after every piece has been stored, so a
        failed upload never leaves a manifest behind.

        Args:
            data: Plaintext payload.
            filename: Name recorded in the manifest.
            encrypt_data: Encrypt before storing; None uses the config default.

        Returns:
            UploadResult with the manifest reference.

        Raises:
            UploadError: If a store call fails after retries.
        """
        if encrypt_data is None:
            encrypt_data = self._config.encrypt_default

        key: bytes | None = None
        payload = data
        if encrypt_data:
            key = generate_key()
            payload = encrypt(data, key)

        logger.info(
            f"Uploading {filename}: {len(data)} bytes, "
            f"encrypted={encrypt_data}, chunk threshold={self._config.chunk_size}"
        )

        if should_chunk(len(payload), self._config.chunk_size):
            pieces, digests = split(payload, self._config.chunk_size)
            logger.info(f"Split {filename} into {len(pieces)} pieces")
            refs = self._store_pieces(pieces, filename, len(payload))
            manifest = Manifest.for_chunks(filename, refs, digests, key=key)
        else:
            file_id = self._store(payload, "file", filename)
            self._report(filename, 1, 1, len(payload), len(payload))
            manifest = Manifest.for_single(filename, file_id, compute_hash(payload), key=key)

        reference = self._store(manifest.to_json(), "manifest", f"{filename}.manifest.json")
        logger.info(f"Uploaded {filename}: manifest {reference}")

        return UploadResult(
            reference=reference,
            manifest=manifest,
            size=len(data),
            stored_size=len(payload),
            download_url=self._config.download_url(reference),
        )

    def _store_pieces(
        self, pieces: dict[int, bytes], filename: str, total_bytes: int
    ) -> dict[int, str]:
        done = [0, 0]  # pieces, bytes

        def on_result(number: int, _ref: str) -> None:
            done[0] += 1
            done[1] += len(pieces[number])
            self._report(filename, done[0], len(pieces), done[1], total_bytes)

        pool: PiecePool[bytes, str] = PiecePool(
            lambda number, piece: self._store(
                piece, f"piece {number}", f"{filename}.part{number}"
            ),
            max_workers=self._config.workers,
            name="Upload",
        )
        return pool.run(pieces, on_result=on_result)

    def _store(self, data: bytes, label: str, name: str) -> str:
        try:
            reference: str = retry_with_backoff(
                lambda: self._client.upload(data, name=name),
                max_retries=self._config.max_retries,
                description=f"upload {label}",
            )
        except STORE_ERRORS as e:
            raise UploadError(f"Failed to upload {label}: {e}") from e
        logger.debug(f"Stored {label} ({len(data)} bytes)")
        return reference

    def _report(
        self, filename: str, current: int, total: int, transferred: int, total_bytes: int
    ) -> None:
        if self._progress_callback:
            self._progress_callback(TransferProgress(
                filename=filename,
                current_piece=current,
                total_pieces=total,
                bytes_transferred=transferred,
                total_bytes=total_bytes,
                operation="upload",
            ))


class FileDownloader:
    """Handles download with verification, reassembly and decryption."""

    def __init__(
        self,
        client: SwarmClient,
        config: TransferConfig,
        progress_callback: ProgressCallback | None = None,
    ) -> None:
        """Initialize the downloader.

        Args:
            client: Gateway client used to fetch blobs.
            config: Worker count and retry settings.
            progress_callback: Optional callback for progress updates.
        """
        self._client = client
        self._config = config
        self._progress_callback = progress_callback

    def fetch_manifest(self, reference: str) -> Manifest:
        """Fetch and validate a manifest.

        Raises:
            DownloadError: If the manifest cannot be fetched.
            MalformedManifest: If it is not a consistent manifest.
        """
        raw = self._fetch(reference, "manifest")
        return Manifest.from_json(raw)

    def download(self, reference: str) -> DownloadResult:
        """Fetch a file by manifest reference and return its plaintext.

        Every piece is verified against its recorded digest as soon as it
        arrives; a single mismatch aborts the whole download before any
        reassembly or decryption.

        Raises:
            DownloadError: If a fetch fails after retries.
            MalformedManifest: If the manifest is inconsistent.
            DigestMismatch: If any piece or the file fails its integrity check.
            AuthenticationFailed: If decryption does not verify.
        """
        manifest = self.fetch_manifest(reference)
        key = manifest.key_bytes()

        logger.info(
            f"Downloading {manifest.filename}: encrypted={manifest.encrypted}, "
            f"pieces={manifest.piece_count}"
        )

        if manifest.chunked:
            pieces = self._fetch_pieces(manifest)
            payload = reassemble(pieces)
        else:
            payload = self._fetch(str(manifest.file_id), "file")
            verify_hash(payload, str(manifest.file_hash), "file")
            self._report(manifest.filename, 1, 1, len(payload))

        data = decrypt(payload, key) if key is not None else payload
        logger.info(f"Downloaded {manifest.filename}: {len(data)} bytes")
        return DownloadResult(reference=reference, manifest=manifest, data=data)

    def download_to(
        self,
        reference: str,
        directory: Path,
        output: Path | None = None,
    ) -> DownloadResult:
        """Download a file and write it atomically.

        Writes to a temporary file (.tmp) first, then renames it over the
        target, so an interrupted download never leaves a partial file.

        Args:
            reference: Manifest reference.
            directory: Directory for the file when output is not given.
            output: Explicit destination path.
        """
        result = self.download(reference)
        if output:
            local_path = Path(output)
        else:
            local_path = Path(directory) / safe_filename(result.manifest.filename)
        local_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = local_path.with_name(local_path.name + ".tmp")

        try:
            tmp_path.write_bytes(result.data)
            tmp_path.replace(local_path)
        except Exception:
            if tmp_path.exists():
                with contextlib.suppress(OSError):
                    tmp_path.unlink()
            raise

        result.local_path = local_path
        return result

    def _fetch_pieces(self, manifest: Manifest) -> dict[int, bytes]:
        refs = manifest.piece_refs()
        hashes = manifest.piece_hashes()
        done = [0, 0]  # pieces, bytes

        def fetch_verified(number: int, ref: str) -> bytes:
            data = self._fetch(ref, f"piece {number}")
            verify_hash(data, hashes[number], f"piece {number}")
            return data

        def on_result(_number: int, data: bytes) -> None:
            done[0] += 1
            done[1] += len(data)
            self._report(manifest.filename, done[0], len(refs), done[1])

        pool: PiecePool[str, bytes] = PiecePool(
            fetch_verified,
            max_workers=self._config.workers,
            name="Download",
        )
        return pool.run(refs, on_result=on_result)

    def _fetch(self, reference: str, label: str) -> bytes:
        try:
            data: bytes = retry_with_backoff(
                lambda: self._client.download(reference),
                max_retries=self._config.max_retries,
                description=f"download {label}",
            )
        except STORE_ERRORS as e:
            raise DownloadError(f"Failed to download {label}: {e}") from e
        return data

    def _report(self, filename: str, current: int, total: int, transferred: int) -> None:
        if self._progress_callback:
            self._progress_callback(TransferProgress(
                filename=filename,
                current_piece=current,
                total_pieces=total,
                bytes_transferred=transferred,
                total_bytes=0,
                operation="download",
            ))
