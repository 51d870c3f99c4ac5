"""Cooperative cancellation for validation passes."""

from __future__ import annotations


class PassCancelled(Exception):
    """Raised at a checkpoint once the owning pass has been superseded."""


class CancellationToken:
    """Shared flag a pass polls before and after every suspension point."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise PassCancelled()
