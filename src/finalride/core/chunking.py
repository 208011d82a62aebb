"""Fixed-size chunking for FinalRide.

Pieces are numbered from 1 in payload order. Each piece carries the SHA-256
digest of its exact bytes, which is what gets stored and later re-checked.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass

from finalride.core.crypto import compute_hash
from finalride.core.errors import IncompletePieceSet, InvalidChunkSize

MB = 1024 * 1024
DEFAULT_CHUNK_SIZE = 10 * MB


@dataclass(frozen=True)
class Chunk:
    """A numbered piece of a payload with its digest."""

    number: int
    data: bytes
    hash: str

    @property
    def size(self) -> int:
        """Return the size of this chunk in bytes."""
        return len(self.data)


def _check_size(max_piece_size: int) -> None:
    if (
        isinstance(max_piece_size, bool)
        or not isinstance(max_piece_size, int)
        or max_piece_size <= 0
    ):
        raise InvalidChunkSize(f"Chunk size must be a positive integer, got {max_piece_size!r}")


def iter_chunks(payload: bytes, max_piece_size: int) -> Iterator[Chunk]:
    """Split payload into fixed-size chunks.

    Args:
        payload: Raw bytes to chunk.
        max_piece_size: Maximum chunk size in bytes. The last chunk may be smaller.

    Yields:
        Chunk objects numbered from 1.

    Raises:
        InvalidChunkSize: If max_piece_size is not a positive integer.
    """
    _check_size(max_piece_size)
    view = memoryview(payload)
    for number, offset in enumerate(range(0, len(payload), max_piece_size), start=1):
        data = bytes(view[offset : offset + max_piece_size])
        yield Chunk(number=number, data=data, hash=compute_hash(data))


def split(payload: bytes, max_piece_size: int) -> tuple[dict[int, bytes], dict[int, str]]:
    """Split payload into pieces and their digests.

    Returns:
        (pieces, digests), both keyed by piece number. Empty payload gives
        two empty dicts.
    """
    pieces: dict[int, bytes] = {}
    digests: dict[int, str] = {}
    for chunk in iter_chunks(payload, max_piece_size):
        pieces[chunk.number] = chunk.data
        digests[chunk.number] = chunk.hash
    return pieces, digests


def check_contiguous(numbers: Iterable[int]) -> list[int]:
    """Return piece numbers sorted, requiring exactly 1..n.

    Raises:
        IncompletePieceSet: On a gap or a set not starting at 1.
    """
    ordered = sorted(numbers)
    if ordered != list(range(1, len(ordered) + 1)):
        missing = sorted(set(range(1, (ordered[-1] if ordered else 0) + 1)) - set(ordered))
        raise IncompletePieceSet(
            f"Piece numbers must be 1..{len(ordered)}; got {ordered[:10]}"
            + (f", missing {missing[:10]}" if missing else "")
        )
    return ordered


def reassemble(pieces: Mapping[int, bytes]) -> bytes:
    """Join pieces in ascending numeric order.

    Raises:
        IncompletePieceSet: If the piece numbers are not exactly 1..n.
    """
    return b"".join(pieces[number] for number in check_contiguous(list(pieces)))
