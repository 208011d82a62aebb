"""Shared configuration for FinalRide.

This module defines the settings consumed by the upload/download layer and
the CLI. The protocol core never reads configuration.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any

from finalride.core.chunking import MB
from finalride.core.errors import ConfigError

DEFAULT_SWARM_API = "http://localhost:1633"
DEFAULT_DOWNLOAD_LINK = "http://localhost:8080?download=%s"


@dataclass
class TransferConfig:
    """Settings for talking to a Swarm gateway and shaping uploads.

    Attributes:
        swarm_api: Base URL of the Bee/Swarm HTTP API.
        download_link: Shareable link template with one placeholder
            (``%s`` or ``{}``) for the manifest reference.
        chunk_size_mb: Payloads larger than this are split into pieces of this size.
        encrypt_default: Whether uploads are encrypted unless told otherwise.
        download_dir: Default directory for downloaded files.
        workers: Concurrent piece transfers.
        timeout: HTTP timeout in seconds.
        max_retries: Retries per piece for failed store calls.
        extra: Unrecognized keys, kept so that saving does not drop them.
    """

    swarm_api: str = DEFAULT_SWARM_API
    download_link: str = DEFAULT_DOWNLOAD_LINK
    chunk_size_mb: int = 10
    encrypt_default: bool = True
    download_dir: str = "."
    workers: int = 4
    timeout: float = 60.0
    max_retries: int = 3
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Normalize and validate values."""
        self.swarm_api = self.swarm_api.rstrip("/")
        if not self.swarm_api.startswith(("http://", "https://")):
            raise ConfigError(f"swarm_api must be an http(s) URL, got {self.swarm_api!r}")
        if _placeholder_count(self.download_link) != 1:
            raise ConfigError(
                "download_link must contain exactly one '%s' or '{}' placeholder"
            )
        for name in ("chunk_size_mb", "workers"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")
        if not isinstance(self.encrypt_default, bool):
            raise ConfigError(
                f"encrypt_default must be true or false, got {self.encrypt_default!r}"
            )
        if not isinstance(self.download_dir, str) or not self.download_dir:
            raise ConfigError(f"download_dir must be a path string, got {self.download_dir!r}")
        if self.max_retries < 0:
            raise ConfigError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout}")

    @property
    def chunk_size(self) -> int:
        """Chunking threshold and piece size in bytes."""
        return self.chunk_size_mb * MB

    def download_url(self, reference: str) -> str:
        """Render the shareable link for a manifest reference."""
        if "%s" in self.download_link:
            return self.download_link.replace("%s", reference, 1)
        return self.download_link.replace("{}", reference, 1)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TransferConfig:
        """Create from a decoded config file.

        Raises:
            ConfigError: If a value has the wrong type or is out of range.
        """
        known = {f.name for f in fields(cls)} - {"extra"}
        kwargs = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        try:
            return cls(**kwargs, extra=extra)
        except (TypeError, AttributeError) as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    def to_dict(self) -> dict[str, Any]:
        """Return the config file document, including preserved extra keys."""
        data = dict(self.extra)
        for f in fields(self):
            if f.name != "extra":
                data[f.name] = getattr(self, f.name)
        return data


def _placeholder_count(template: str) -> int:
    return template.count("%s") + template.count("{}")
