"""Typed errors raised by the FinalRide core.

None of these are recovered inside the core: they surface to the caller,
which decides whether to retry, re-fetch or abort.
"""

from __future__ import annotations


class FinalRideError(Exception):
    """Base exception for all FinalRide errors."""


class EntropyUnavailable(FinalRideError):
    """The secure random source could not supply bytes."""


class MalformedEnvelope(FinalRideError):
    """Ciphertext envelope is too short to contain a nonce."""


class AuthenticationFailed(FinalRideError):
    """AEAD tag did not verify (wrong key, corruption or tampering)."""


class InvalidChunkSize(FinalRideError, ValueError):
    """Piece size is not a positive integer."""


class DigestMismatch(FinalRideError):
    """Fetched bytes do not match the digest recorded in the manifest.

    Attributes:
        label: What failed, "piece <n>" for a chunk or "file" for a single blob.
        expected: Digest recorded in the manifest.
        actual: Digest of the bytes actually received.
    """

    def __init__(self, label: str, expected: str, actual: str) -> None:
        self.label = label
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Integrity check failed for {label}: "
            f"expected {expected[:16]}..., got {actual[:16]}..."
        )


class MalformedManifest(FinalRideError, ValueError):
    """Manifest is structurally inconsistent and must not be acted on."""


class IncompletePieceSet(FinalRideError):
    """Piece numbers are not exactly 1..n (gap, or not starting at 1)."""


class ConfigError(FinalRideError):
    """Configuration value is missing or invalid."""
