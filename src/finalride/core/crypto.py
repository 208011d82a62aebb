"""Cryptographic functions for FinalRide.

This module provides:
- Random 256-bit key generation
- Authenticated encryption using AES-256-GCM
- SHA-256 digests for integrity checks
- Base64 key encoding for the manifest
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from finalride.core.errors import (
    AuthenticationFailed,
    DigestMismatch,
    EntropyUnavailable,
    MalformedEnvelope,
    MalformedManifest,
)

KEY_SIZE = 32  # 256 bits (AES-256)
NONCE_SIZE = 12  # 96 bits (recommended for AES-GCM)
TAG_SIZE = 16


def _random_bytes(size: int) -> bytes:
    try:
        data = os.urandom(size)
    except (NotImplementedError, OSError) as e:
        raise EntropyUnavailable(f"Secure random source unavailable: {e}") from e
    if len(data) != size:
        raise EntropyUnavailable(f"Random source returned {len(data)} of {size} bytes")
    return data


def _check_key(key: bytes) -> None:
    if len(key) != KEY_SIZE:
        raise ValueError(f"Invalid key: must be {KEY_SIZE} bytes, got {len(key)}")


def generate_key() -> bytes:
    """Generate a random 256-bit encryption key.

    Returns:
        32 bytes from the operating system's secure random source.

    Raises:
        EntropyUnavailable: If the random source cannot supply bytes.
    """
    return _random_bytes(KEY_SIZE)


def encrypt(plaintext: bytes, key: bytes) -> bytes:
    """Encrypt data using AES-256-GCM with a fresh random nonce.

    Args:
        plaintext: Data to encrypt.
        key: 32-byte encryption key.

    Returns:
        Envelope in format: nonce (NONCE_SIZE) || ciphertext || auth_tag (TAG_SIZE),
        so it is always NONCE_SIZE + TAG_SIZE bytes longer than the plaintext.

    Raises:
        EntropyUnavailable: If no nonce could be generated.
    """
    _check_key(key)
    nonce = _random_bytes(NONCE_SIZE)
    aesgcm = AESGCM(key)
    ciphertext = aesgcm.encrypt(nonce, plaintext, None)
    return nonce + ciphertext


def decrypt(envelope: bytes, key: bytes) -> bytes:
    """Decrypt an envelope produced by encrypt().

    Args:
        envelope: Data in format: nonce (12 bytes) || ciphertext || auth_tag (16 bytes)
        key: 32-byte encryption key.

    Returns:
        Decrypted plaintext data.

    Raises:
        MalformedEnvelope: If the envelope is shorter than the nonce.
        AuthenticationFailed: If the tag does not verify.
    """
    if len(envelope) < NONCE_SIZE:
        raise MalformedEnvelope(
            f"Encrypted data too short: {len(envelope)} bytes, need at least {NONCE_SIZE}"
        )
    _check_key(key)

    nonce = envelope[:NONCE_SIZE]
    ciphertext = envelope[NONCE_SIZE:]
    aesgcm = AESGCM(key)
    try:
        return aesgcm.decrypt(nonce, ciphertext, None)
    except InvalidTag as e:
        raise AuthenticationFailed("Decryption failed: wrong key or tampered data") from e


def compute_hash(data: bytes) -> str:
    """Compute SHA-256 hash of data.

    Returns:
        Hex-encoded SHA-256 hash string (64 characters).
    """
    return hashlib.sha256(data).hexdigest()


def verify_hash(data: bytes, expected: str, label: str) -> None:
    """Check data against a recorded digest.

    Raises:
        DigestMismatch: If the digest of data differs from expected.
    """
    actual = compute_hash(data)
    if actual != expected.lower():
        raise DigestMismatch(label, expected, actual)


def encode_key(key: bytes) -> str:
    """Encode a key as standard base64 for storage in a manifest."""
    return base64.b64encode(key).decode("ascii")


def decode_key(key_b64: str) -> bytes:
    """Decode a base64 key taken from a manifest.

    Raises:
        MalformedManifest: If the text is not base64 or not a 32-byte key.
    """
    try:
        key = base64.b64decode(key_b64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedManifest("Invalid key format: not valid base64") from e
    if len(key) != KEY_SIZE:
        raise MalformedManifest(f"Invalid key: must be {KEY_SIZE} bytes, got {len(key)}")
    return key
