"""In-flight request coalescing.

RequestCoalescer lets concurrent callers asking for the same key share
one underlying call. A sliding-window pass resolves the same reference
from several overlapping windows at once; without coalescing each of
them would miss the still-empty cache and hit the network.

Single event loop only.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class _Pending(Generic[T]):
    key: str
    done: asyncio.Event = field(default_factory=asyncio.Event)
    result: T | None = None
    error: BaseException | None = None
    abandoned: bool = False


class RequestCoalescer(Generic[T]):
    """Shares one in-flight coroutine among callers with the same key.

    Usage::

        coalescer = RequestCoalescer[Outcome[CanonicalText]]()
        outcome = await coalescer.run("text:Genesis 1:1", fetch)
    """

    def __init__(self) -> None:
        self._pending: dict[str, _Pending[T]] = {}

    async def run(
        self,
        key: str,
        operation: Callable[[], Awaitable[T]],
    ) -> T:
        """Run ``operation`` unless an identical one is already running.

        The dict check and insert happen with no await in between, so
        no lock is needed on a single loop. Cancelling the caller that
        owns the call cancels only that caller: waiters see the call
        abandoned and the first of them runs it again.
        """
        while (existing := self._pending.get(key)) is not None:
            await existing.done.wait()
            if existing.abandoned:
                continue
            if existing.error is not None:
                raise existing.error
            return existing.result  # type: ignore[return-value]

        pending = _Pending[T](key=key)
        self._pending[key] = pending
        try:
            result = await operation()
            pending.result = result
            return result
        except asyncio.CancelledError:
            pending.abandoned = True
            raise
        except BaseException as exc:
            pending.error = exc
            raise
        finally:
            self._pending.pop(key, None)
            pending.done.set()

    @property
    def in_flight_keys(self) -> list[str]:
        """Keys with an operation currently running."""
        return list(self._pending)
