"""Tests for the transfer manifest model."""

from __future__ import annotations

import json
from typing import Any

import pytest

from finalride.core.crypto import compute_hash, encode_key, generate_key
from finalride.core.errors import MalformedManifest
from finalride.core.manifest import Manifest

HASH_A = compute_hash(b"a")
HASH_B = compute_hash(b"b")


def single_doc(**overrides: Any) -> dict[str, Any]:
    """A valid single-file manifest document."""
    doc: dict[str, Any] = {
        "filename": "report.pdf",
        "encrypted": False,
        "chunked": False,
        "file_id": "ref-file",
        "file_hash": HASH_A,
    }
    doc.update(overrides)
    return doc


def chunked_doc(**overrides: Any) -> dict[str, Any]:
    """A valid chunked, encrypted manifest document."""
    doc: dict[str, Any] = {
        "filename": "movie.mkv",
        "encrypted": True,
        "key": encode_key(generate_key()),
        "chunked": True,
        "chunk_ids": {"1": "ref-1", "2": "ref-2"},
        "chunk_hashes": {"1": HASH_A, "2": HASH_B},
    }
    doc.update(overrides)
    return doc


class TestConstruction:
    """Tests for building manifests after an upload."""

    def test_for_single_plaintext(self) -> None:
        """Single-file manifest without encryption has no key."""
        manifest = Manifest.for_single("a.txt", "ref", HASH_A)
        assert manifest.encrypted is False
        assert manifest.key is None
        assert manifest.chunked is False
        assert manifest.piece_count == 1
        assert manifest.key_bytes() is None

    def test_for_single_encrypted(self) -> None:
        """Key is stored as base64 and decodes back."""
        key = generate_key()
        manifest = Manifest.for_single("a.txt", "ref", HASH_A, key=key)
        assert manifest.encrypted is True
        assert manifest.key_bytes() == key

    def test_for_chunks_int_keys(self) -> None:
        """Integer piece numbers become decimal strings on the wire."""
        manifest = Manifest.for_chunks("big.bin", {1: "r1", 2: "r2"}, {1: HASH_A, 2: HASH_B})
        assert manifest.chunk_ids == {"1": "r1", "2": "r2"}
        assert manifest.piece_refs() == {1: "r1", 2: "r2"}
        assert manifest.piece_hashes() == {1: HASH_A, 2: HASH_B}
        assert manifest.piece_count == 2

    def test_immutable(self) -> None:
        """Manifests cannot be changed after construction."""
        manifest = Manifest.for_single("a.txt", "ref", HASH_A)
        with pytest.raises(Exception):
            manifest.filename = "b.txt"  # type: ignore[misc]

    def test_piece_maps_read_only(self) -> None:
        """Validated piece maps cannot be edited in place."""
        manifest = Manifest.from_dict(chunked_doc())
        with pytest.raises(TypeError):
            manifest.chunk_ids["1"] = "other"  # type: ignore[index]
        with pytest.raises(TypeError):
            manifest.chunk_hashes["3"] = HASH_A  # type: ignore[index]
        assert type(manifest.to_dict()["chunk_ids"]) is dict


class TestSerialization:
    """Tests for the JSON wire format."""

    def test_single_omits_chunk_fields(self) -> None:
        """Fields that do not apply are absent, not null."""
        data = json.loads(Manifest.for_single("a.txt", "ref", HASH_A).to_json())
        assert data == {
            "filename": "a.txt",
            "encrypted": False,
            "chunked": False,
            "file_id": "ref",
            "file_hash": HASH_A,
        }

    def test_chunked_omits_single_fields(self) -> None:
        """Chunked manifests carry no file_id/file_hash."""
        doc = chunked_doc()
        data = json.loads(Manifest.from_dict(doc).to_json())
        assert data == doc
        assert "file_id" not in data
        assert "file_hash" not in data

    def test_json_roundtrip(self) -> None:
        """from_json(to_json()) should give an equal manifest."""
        manifest = Manifest.from_dict(chunked_doc())
        assert Manifest.from_json(manifest.to_json()) == manifest

    def test_field_order(self) -> None:
        """Serialized field order follows the wire format."""
        keys = list(json.loads(Manifest.from_dict(chunked_doc()).to_json()))
        assert keys == ["filename", "encrypted", "key", "chunked", "chunk_ids", "chunk_hashes"]

    def test_empty_optional_values_treated_as_absent(self) -> None:
        """Writers that emit "" or {} for unused fields are accepted."""
        manifest = Manifest.from_dict(single_doc(key="", chunk_ids={}, chunk_hashes={}))
        assert manifest.key is None
        assert manifest.chunk_ids is None

    def test_unknown_fields_ignored(self) -> None:
        """Extra fields from newer writers do not break loading."""
        manifest = Manifest.from_dict(single_doc(comment="hello"))
        assert "comment" not in manifest.to_dict()


class TestValidation:
    """Tests for rejecting inconsistent manifests."""

    def test_not_json(self) -> None:
        """Non-JSON input should be malformed."""
        with pytest.raises(MalformedManifest):
            Manifest.from_json(b"<html>not found</html>")

    def test_not_object(self) -> None:
        """A JSON array is not a manifest."""
        with pytest.raises(MalformedManifest):
            Manifest.from_json(b"[1, 2]")

    def test_chunked_without_chunk_ids(self) -> None:
        """chunked=true with no piece references is malformed."""
        doc = chunked_doc()
        del doc["chunk_ids"]
        with pytest.raises(MalformedManifest):
            Manifest.from_dict(doc)

    def test_chunked_with_empty_chunk_ids(self) -> None:
        """chunked=true with an empty map is malformed."""
        with pytest.raises(MalformedManifest):
            Manifest.from_dict(chunked_doc(chunk_ids={}, chunk_hashes={}))

    def test_encrypted_without_key(self) -> None:
        """encrypted=true with no key is malformed."""
        doc = chunked_doc()
        del doc["key"]
        with pytest.raises(MalformedManifest):
            Manifest.from_dict(doc)

    def test_key_without_encryption(self) -> None:
        """A key on an unencrypted manifest is inconsistent."""
        with pytest.raises(MalformedManifest):
            Manifest.from_dict(single_doc(key=encode_key(generate_key())))

    def test_invalid_key(self) -> None:
        """Key must be base64 of 32 bytes."""
        with pytest.raises(MalformedManifest):
            Manifest.from_dict(chunked_doc(key="c2hvcnQ="))

    def test_both_modes_rejected(self) -> None:
        """Single-file and chunked fields are never both populated."""
        with pytest.raises(MalformedManifest):
            Manifest.from_dict(chunked_doc(file_id="ref", file_hash=HASH_A))
        with pytest.raises(MalformedManifest):
            Manifest.from_dict(
                single_doc(chunk_ids={"1": "r"}, chunk_hashes={"1": HASH_A})
            )

    def test_single_without_file_hash(self) -> None:
        """Single-file manifests need a whole-file digest."""
        doc = single_doc()
        del doc["file_hash"]
        with pytest.raises(MalformedManifest):
            Manifest.from_dict(doc)

    def test_hash_keys_must_match(self) -> None:
        """Every piece needs exactly one digest."""
        with pytest.raises(MalformedManifest):
            Manifest.from_dict(chunked_doc(chunk_hashes={"1": HASH_A}))

    @pytest.mark.parametrize("piece", ["0", "01", "-1", "a", ""])
    def test_bad_piece_numbers(self, piece: str) -> None:
        """Piece keys must be positive decimal integers."""
        with pytest.raises(MalformedManifest):
            Manifest.from_dict(
                chunked_doc(chunk_ids={piece: "r"}, chunk_hashes={piece: HASH_A})
            )

    def test_gap_in_pieces(self) -> None:
        """Piece numbers must be contiguous from 1."""
        with pytest.raises(MalformedManifest):
            Manifest.from_dict(
                chunked_doc(
                    chunk_ids={"1": "r1", "3": "r3"},
                    chunk_hashes={"1": HASH_A, "3": HASH_B},
                )
            )

    def test_bad_digest(self) -> None:
        """Digests must be SHA-256 hex."""
        with pytest.raises(MalformedManifest):
            Manifest.from_dict(single_doc(file_hash="xyz"))

    def test_wrong_types(self) -> None:
        """Strings are not booleans."""
        with pytest.raises(MalformedManifest):
            Manifest.from_dict(single_doc(encrypted="false"))

    def test_empty_filename(self) -> None:
        """A manifest must name its file."""
        with pytest.raises(MalformedManifest):
            Manifest.from_dict(single_doc(filename=""))

    def test_malformed_is_value_error(self) -> None:
        """Callers can catch MalformedManifest as ValueError."""
        with pytest.raises(ValueError):
            Manifest.from_dict(single_doc(chunked=True))
