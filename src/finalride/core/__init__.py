"""Core module - Stateless crypto, chunking, and manifest protocol."""

from finalride.core.chunking import (
    DEFAULT_CHUNK_SIZE,
    Chunk,
    check_contiguous,
    iter_chunks,
    reassemble,
    split,
)
from finalride.core.config import TransferConfig
from finalride.core.crypto import (
    KEY_SIZE,
    NONCE_SIZE,
    TAG_SIZE,
    compute_hash,
    decode_key,
    decrypt,
    encode_key,
    encrypt,
    generate_key,
    verify_hash,
)
from finalride.core.errors import (
    AuthenticationFailed,
    ConfigError,
    DigestMismatch,
    EntropyUnavailable,
    FinalRideError,
    IncompletePieceSet,
    InvalidChunkSize,
    MalformedEnvelope,
    MalformedManifest,
)
from finalride.core.manifest import Manifest

__all__ = [
    # Chunking
    "DEFAULT_CHUNK_SIZE",
    "Chunk",
    "check_contiguous",
    "iter_chunks",
    "reassemble",
    "split",
    # Config
    "TransferConfig",
    # Crypto
    "KEY_SIZE",
    "NONCE_SIZE",
    "TAG_SIZE",
    "compute_hash",
    "decode_key",
    "decrypt",
    "encode_key",
    "encrypt",
    "generate_key",
    "verify_hash",
    # Errors
    "AuthenticationFailed",
    "ConfigError",
    "DigestMismatch",
    "EntropyUnavailable",
    "FinalRideError",
    "IncompletePieceSet",
    "InvalidChunkSize",
    "MalformedEnvelope",
    "MalformedManifest",
    # Manifest
    "Manifest",
]
