"""FinalRide - End-to-end encrypted, chunked file transfer over Swarm."""

__version__ = "0.1.0"
