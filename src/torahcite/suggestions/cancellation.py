"""Cooperative cancellation for long analyzer passes."""

from __future__ import annotations


class CancellationToken:
    """Flag a caller flips to stop an in-progress pass.

    The analyzer checks it before dispatching each window; windows
    already talking to the gateway finish, but their results are
    discarded.
    """

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True
