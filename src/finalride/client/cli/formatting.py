"""Human-readable sizes, speeds and durations for CLI output."""

from __future__ import annotations

KB = 1024
MB = 1024 * KB
GB = 1024 * MB


def format_size(size: int) -> str:
    """Format a byte count, e.g. 1536 -> '1.50 KB'."""
    if size >= GB:
        return f"{size / GB:.2f} GB"
    if size >= MB:
        return f"{size / MB:.2f} MB"
    if size >= KB:
        return f"{size / KB:.2f} KB"
    return f"{size} B"


def format_speed(byte_count: int, seconds: float) -> str:
    """Format a transfer rate."""
    rate = byte_count / max(seconds, 1e-6)
    if rate >= GB:
        return f"{rate / GB:.2f} GB/s"
    if rate >= MB:
        return f"{rate / MB:.2f} MB/s"
    if rate >= KB:
        return f"{rate / KB:.2f} KB/s"
    return f"{rate:.2f} B/s"


def format_duration(seconds: float) -> str:
    """Format elapsed time as ms, s or m."""
    if seconds < 1:
        return f"{int(seconds * 1000)}ms"
    if seconds < 60:
        return f"{seconds:.2f}s"
    return f"{seconds / 60:.2f}m"
