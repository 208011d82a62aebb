"""Progress bar for piece transfers."""

from __future__ import annotations

from typing import Any

import click

from finalride.client.types import TransferProgress


class ProgressBar:
    """Adapts TransferProgress callbacks to a click progress bar.

    The bar is opened on the first update, once the piece count is known.
    """

    def __init__(self, label: str, enabled: bool = True) -> None:
        self._label = label
        self._enabled = enabled
        self._bar: Any = None
        self._shown = 0

    def __call__(self, progress: TransferProgress) -> None:
        if not self._enabled:
            return
        if self._bar is None:
            self._bar = click.progressbar(
                length=progress.total_pieces,
                label=self._label,
                show_pos=True,
                width=30,
            )
            self._bar.__enter__()
        self._bar.update(progress.current_piece - self._shown)
        self._shown = progress.current_piece

    def close(self) -> None:
        """Finish the bar if one was opened."""
        if self._bar is not None:
            self._bar.__exit__(None, None, None)
            self._bar = None
