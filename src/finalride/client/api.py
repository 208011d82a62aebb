"""HTTP client for a Swarm (Bee) gateway.

This module provides:
- SwarmClient: stores opaque blobs and fetches them back by reference
"""

from __future__ import annotations

import logging

import httpx

from finalride.core.config import TransferConfig

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base exception for gateway errors."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(APIError):
    """Reference not found on the gateway."""


class SwarmClient:
    """HTTP client for the Swarm ``/bzz`` endpoints.

    References are treated as opaque strings: whatever the gateway returns
    from an upload is handed back verbatim for the download.
    """

    def __init__(self, config: TransferConfig) -> None:
        """Initialize the client.

        Args:
            config: Transfer configuration (gateway URL and timeout).
        """
        self._client = httpx.Client(
            base_url=config.swarm_api,
            timeout=config.timeout,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> SwarmClient:
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.close()

    def _handle_response(self, response: httpx.Response, action: str) -> httpx.Response:
        """Raise an APIError for non-success responses."""
        if response.status_code == 404:
            raise NotFoundError(f"Failed to {action}: reference not found", 404)
        if response.status_code >= 400:
            detail = response.text.strip() or response.reason_phrase
            raise APIError(
                f"Failed to {action}: {response.status_code} - {detail}",
                response.status_code,
            )
        return response

    def health_check(self) -> bool:
        """Check if the gateway is reachable and healthy."""
        try:
            response = self._client.get("/health")
            return response.status_code == 200
        except httpx.RequestError:
            return False

    def upload(self, data: bytes, name: str | None = None) -> str:
        """Store a blob.

        Args:
            data: Bytes to store.
            name: Optional display name for the gateway.

        Returns:
            Reference of the stored blob.

        Raises:
            APIError: If the gateway does not accept the upload.
        """
        params = {"name": name} if name else None
        response = self._handle_response(
            self._client.post(
                "/bzz",
                content=data,
                params=params,
                headers={"Content-Type": "application/octet-stream"},
            ),
            "upload to Swarm",
        )
        if response.status_code != 201:
            raise APIError(
                f"Failed to upload to Swarm: unexpected status {response.status_code}",
                response.status_code,
            )
        try:
            reference = response.json()["reference"]
        except (ValueError, KeyError, TypeError) as e:
            raise APIError("Failed to upload to Swarm: response has no reference") from e
        if not isinstance(reference, str) or not reference:
            raise APIError("Failed to upload to Swarm: empty reference")
        logger.debug(f"Stored {len(data)} bytes as {reference[:16]}...")
        return reference

    def download(self, reference: str) -> bytes:
        """Fetch a blob by reference.

        Raises:
            NotFoundError: If the reference is unknown.
            APIError: For any other gateway error.
        """
        response = self._handle_response(
            self._client.get(f"/bzz/{reference}"),
            "download from Swarm",
        )
        logger.debug(f"Fetched {len(response.content)} bytes from {reference[:16]}...")
        return response.content
