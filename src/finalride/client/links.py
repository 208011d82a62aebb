"""Shareable download links.

A link is the configured template with the manifest reference substituted.
Users may paste either a bare reference or a full link back into download.
"""

from __future__ import annotations

from urllib.parse import parse_qs, urlsplit

LINK_PARAM = "download"


def extract_reference(text: str) -> str:
    """Return the manifest reference from a bare reference or a download link.

    Examples:
        >>> extract_reference("http://localhost:8080?download=abc123&x=1")
        'abc123'
        >>> extract_reference("abc123")
        'abc123'
    """
    text = text.strip()
    if f"{LINK_PARAM}=" not in text:
        return text

    values = parse_qs(urlsplit(text).query).get(LINK_PARAM)
    if values and values[0]:
        return values[0]

    # Templates may put the parameter in the fragment or path instead
    tail = text.split(f"{LINK_PARAM}=", 1)[1]
    return tail.split("&", 1)[0].split("#", 1)[0]
