"""Transfer manifest: the self-describing record of an upload.

A manifest says whether the stored bytes are encrypted (and with which key),
and where to find them: either one reference plus a whole-payload digest, or
one reference and one digest per numbered piece. It is built once, after
every piece is stored, and serialized as JSON:

    {
      "filename": "report.pdf",
      "encrypted": true,
      "key": "<base64>",
      "chunked": true,
      "chunk_ids": {"1": "<ref>", "2": "<ref>"},
      "chunk_hashes": {"1": "<sha256>", "2": "<sha256>"}
    }

Fields that do not apply are omitted, never sent as null.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    ValidationError,
    field_serializer,
    field_validator,
    model_validator,
)

from finalride.core.chunking import check_contiguous
from finalride.core.crypto import decode_key, encode_key
from finalride.core.errors import IncompletePieceSet, MalformedManifest

_PIECE_KEY = re.compile(r"^[1-9][0-9]*$")
_HEX_DIGEST = re.compile(r"^[0-9a-f]{64}$")
_OPTIONAL_FIELDS = ("key", "file_id", "chunk_ids", "chunk_hashes", "file_hash")


class Manifest(BaseModel):
    """Serializable description of how to fetch and rebuild a file."""

    model_config = ConfigDict(frozen=True, strict=True)

    filename: str
    encrypted: bool
    key: str | None = None
    chunked: bool
    file_id: str | None = None
    chunk_ids: Mapping[str, str] | None = None
    chunk_hashes: Mapping[str, str] | None = None
    file_hash: str | None = None

    @model_validator(mode="before")
    @classmethod
    def drop_empty_fields(cls, data: Any) -> Any:
        # Other writers omit empty values; treat "" and {} the same as absent.
        if isinstance(data, dict):
            data = {
                k: v
                for k, v in data.items()
                if not (k in _OPTIONAL_FIELDS and (v is None or v == "" or v == {}))
            }
        return data

    @field_validator("chunk_ids", "chunk_hashes")
    @classmethod
    def freeze_piece_maps(cls, value: Mapping[str, str] | None) -> Mapping[str, str] | None:
        # Piece maps are read-only once validated.
        return MappingProxyType(dict(value)) if value is not None else None

    @field_serializer("chunk_ids", "chunk_hashes")
    def dump_piece_map(self, value: Mapping[str, str] | None) -> dict[str, str] | None:
        return dict(value) if value is not None else None

    @model_validator(mode="after")
    def check_consistency(self) -> Manifest:
        if not self.filename:
            raise ValueError("filename must not be empty")

        if self.encrypted and self.key is None:
            raise ValueError("encrypted manifest has no key")
        if not self.encrypted and self.key is not None:
            raise ValueError("unencrypted manifest must not carry a key")
        if self.key is not None:
            try:
                decode_key(self.key)
            except MalformedManifest as e:
                raise ValueError(str(e)) from e

        if self.chunked:
            if self.file_id is not None or self.file_hash is not None:
                raise ValueError("chunked manifest must not carry file_id/file_hash")
            if not self.chunk_ids:
                raise ValueError("chunked manifest has no chunk_ids")
            if self.chunk_hashes is None or set(self.chunk_hashes) != set(self.chunk_ids):
                raise ValueError("chunk_hashes must cover exactly the pieces in chunk_ids")
            for piece, ref in self.chunk_ids.items():
                if not _PIECE_KEY.match(piece):
                    raise ValueError(f"invalid piece number {piece!r}")
                if not ref:
                    raise ValueError(f"piece {piece} has an empty reference")
            for digest in self.chunk_hashes.values():
                _check_digest(digest)
            try:
                check_contiguous(int(piece) for piece in self.chunk_ids)
            except IncompletePieceSet as e:
                raise ValueError(str(e)) from e
        else:
            if self.chunk_ids is not None or self.chunk_hashes is not None:
                raise ValueError("single-file manifest must not carry chunk_ids/chunk_hashes")
            if self.file_id is None or self.file_hash is None:
                raise ValueError("single-file manifest needs both file_id and file_hash")
            _check_digest(self.file_hash)
        return self

    # === Construction ===

    @classmethod
    def for_single(
        cls,
        filename: str,
        file_id: str,
        file_hash: str,
        key: bytes | None = None,
    ) -> Manifest:
        """Build a manifest for a payload stored as one blob.

        Args:
            filename: Original file name.
            file_id: Object-store reference of the stored bytes.
            file_hash: SHA-256 of the stored (possibly encrypted) bytes.
            key: Encryption key, or None if the payload is plaintext.
        """
        return cls.from_dict({
            "filename": filename,
            "encrypted": key is not None,
            "key": encode_key(key) if key is not None else None,
            "chunked": False,
            "file_id": file_id,
            "file_hash": file_hash,
        })

    @classmethod
    def for_chunks(
        cls,
        filename: str,
        chunk_ids: Mapping[int, str],
        chunk_hashes: Mapping[int, str],
        key: bytes | None = None,
    ) -> Manifest:
        """Build a manifest for a payload stored as numbered pieces.

        Args:
            filename: Original file name.
            chunk_ids: Piece number to object-store reference.
            chunk_hashes: Piece number to SHA-256 of the stored piece.
            key: Encryption key, or None if the payload is plaintext.
        """
        return cls.from_dict({
            "filename": filename,
            "encrypted": key is not None,
            "key": encode_key(key) if key is not None else None,
            "chunked": True,
            "chunk_ids": {str(n): ref for n, ref in chunk_ids.items()},
            "chunk_hashes": {str(n): digest for n, digest in chunk_hashes.items()},
        })

    # === Serialization ===

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Manifest:
        """Validate a decoded manifest document.

        Raises:
            MalformedManifest: If the document is inconsistent.
        """
        if not isinstance(data, Mapping):
            raise MalformedManifest("Manifest must be a JSON object")
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            raise MalformedManifest(f"Invalid manifest: {_summarize(e)}") from e

    @classmethod
    def from_json(cls, raw: bytes | str) -> Manifest:
        """Parse and validate a serialized manifest.

        Raises:
            MalformedManifest: If the text is not valid JSON or is inconsistent.
        """
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedManifest(f"Manifest is not valid JSON: {e}") from e
        return cls.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        """Return the wire document, omitting fields that do not apply."""
        return self.model_dump(exclude_none=True)

    def to_json(self) -> bytes:
        """Serialize to indented UTF-8 JSON."""
        return self.model_dump_json(indent=2, exclude_none=True).encode("utf-8")

    # === Accessors ===

    @property
    def piece_count(self) -> int:
        """Number of stored pieces (1 for a single-blob upload)."""
        return len(self.chunk_ids) if self.chunk_ids else 1

    def piece_refs(self) -> dict[int, str]:
        """Piece number to reference, with integer keys."""
        return {int(n): ref for n, ref in (self.chunk_ids or {}).items()}

    def piece_hashes(self) -> dict[int, str]:
        """Piece number to digest, with integer keys."""
        return {int(n): digest for n, digest in (self.chunk_hashes or {}).items()}

    def key_bytes(self) -> bytes | None:
        """Return the decoded encryption key, or None if not encrypted.

        Raises:
            MalformedManifest: If the stored key is not a base64 32-byte key.
        """
        if self.key is None:
            return None
        return decode_key(self.key)


def _check_digest(digest: str) -> None:
    if not _HEX_DIGEST.match(digest):
        raise ValueError(f"invalid SHA-256 digest {digest[:20]!r}")


def _summarize(error: ValidationError) -> str:
    messages = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"])
        messages.append(f"{location}: {item['msg']}" if location else item["msg"])
    return "; ".join(messages)
