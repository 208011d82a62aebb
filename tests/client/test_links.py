"""Tests for download link parsing."""

import pytest

from finalride.client.links import extract_reference


class TestExtractReference:
    """Tests for extract_reference."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("abc123", "abc123"),
            ("  abc123\n", "abc123"),
            ("http://localhost:8080?download=abc123", "abc123"),
            ("http://localhost:8080/?download=abc123&lang=en", "abc123"),
            ("https://share.example/#/file?download=abc123", "abc123"),
        ],
    )
    def test_extract(self, text: str, expected: str) -> None:
        """Should return the bare manifest reference."""
        assert extract_reference(text) == expected
