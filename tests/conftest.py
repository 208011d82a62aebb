"""Shared fixtures: an in-memory stand-in for the Swarm gateway."""

from __future__ import annotations

import hashlib
import threading

import pytest

from finalride.client.api import NotFoundError
from finalride.core.config import TransferConfig


class MemoryStore:
    """Thread-safe in-memory blob store with the SwarmClient interface."""

    def __init__(self) -> None:
        self.blobs: dict[str, bytes] = {}
        self.uploads: list[bytes] = []
        self.names: list[str | None] = []
        self._lock = threading.Lock()

    def upload(self, data: bytes, name: str | None = None) -> str:
        reference = hashlib.sha256(data).hexdigest()
        with self._lock:
            self.blobs[reference] = bytes(data)
            self.uploads.append(bytes(data))
            self.names.append(name)
        return reference

    def download(self, reference: str) -> bytes:
        with self._lock:
            if reference not in self.blobs:
                raise NotFoundError("Failed to download from Swarm: reference not found", 404)
            return self.blobs[reference]

    def corrupt(self, reference: str, index: int = 0) -> None:
        """Flip one bit of a stored blob."""
        with self._lock:
            data = bytearray(self.blobs[reference])
            data[index] ^= 0x01
            self.blobs[reference] = bytes(data)

    def close(self) -> None:
        pass

    def __enter__(self) -> MemoryStore:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


@pytest.fixture
def store() -> MemoryStore:
    """Empty in-memory store."""
    return MemoryStore()


@pytest.fixture
def config() -> TransferConfig:
    """Config with a 1 MB chunk size and no retry delays worth waiting for."""
    return TransferConfig(
        swarm_api="http://gateway.test",
        chunk_size_mb=1,
        workers=3,
        max_retries=0,
    )
