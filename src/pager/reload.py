"""Registry of browser reload listeners."""

from __future__ import annotations

import asyncio
import threading
from uuid import UUID, uuid4

RELOAD_EVENT = "data: reload\n\n"


class ReloadRegistry:
    """Maps connection handles to single-slot notification channels.

    A channel holds at most one pending signal; broadcasting to a channel
    that already has one leaves it as is. ``register``, ``unregister`` and
    ``broadcast`` may be called from independent tasks; ``broadcast`` and
    ``wait`` must run on the event loop that owns the channels.
    """

    def __init__(self) -> None:
        self._channels: dict[UUID, asyncio.Queue[None]] = {}
        self._lock = threading.Lock()

    def register(self) -> UUID:
        handle = uuid4()
        with self._lock:
            self._channels[handle] = asyncio.Queue(maxsize=1)
        return handle

    def unregister(self, handle: UUID) -> None:
        with self._lock:
            self._channels.pop(handle, None)

    def broadcast(self) -> int:
        """Signal every listener without blocking; returns how many were newly signalled."""
        with self._lock:
            channels = list(self._channels.values())
        signalled = 0
        for channel in channels:
            try:
                channel.put_nowait(None)
            except asyncio.QueueFull:
                continue
            signalled += 1
        return signalled

    async def wait(self, handle: UUID) -> None:
        """Block until the listener's channel fires.

        Raises:
            KeyError: If ``handle`` is not registered.
        """
        with self._lock:
            channel = self._channels[handle]
        await channel.get()

    def __len__(self) -> int:
        with self._lock:
            return len(self._channels)

    def __contains__(self, handle: object) -> bool:
        with self._lock:
            return handle in self._channels


async def stream_reload_events(registry: ReloadRegistry):
    """Yield one server-sent reload event per signal until the stream closes.

    The listener is registered on first iteration and unregistered when the
    generator is closed or cancelled.
    """
    handle = registry.register()
    try:
        while True:
            await registry.wait(handle)
            yield RELOAD_EVENT
    finally:
        registry.unregister(handle)
