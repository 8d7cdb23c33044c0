"""Watch the content directory, debounce changes, rebuild and notify listeners."""

from __future__ import annotations

import asyncio
import logging
import os
import threading
from pathlib import Path
from typing import Callable, Iterator

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver, ObservedWatch

from pager.build import build_site
from pager.config import GENERATED_FILENAMES, OUTPUT_FILENAME, PAGER_DEBOUNCE_MS
from pager.exceptions import BuildError, WatchError
from pager.reload import ReloadRegistry

logger = logging.getLogger(__name__)

_RELEVANT_EVENTS = frozenset(
    {EVENT_TYPE_CREATED, EVENT_TYPE_DELETED, EVENT_TYPE_MODIFIED, EVENT_TYPE_MOVED}
)


class WatchSession:
    """State of one ``serve`` invocation.

    Owns the watchdog observer and its per-directory subscriptions, the
    debounce loop and the reload registry. The loop has three states:
    idle (waiting for an event), debouncing (restarting a quiet-period timer
    on every further event) and rebuilding (running the build in a worker
    thread). Events arriving while a build runs queue up and start the next
    debounce cycle once it finishes, so builds never overlap.
    """

    def __init__(
        self,
        directory: Path,
        *,
        build: Callable[[Path], object] = build_site,
        registry: ReloadRegistry | None = None,
        debounce_ms: int = PAGER_DEBOUNCE_MS,
    ) -> None:
        self.directory = Path(directory).resolve()
        self.registry = registry if registry is not None else ReloadRegistry()
        self.rebuilds = 0
        self._build = build
        self._delay = debounce_ms / 1000
        self._events: asyncio.Queue[Path] = asyncio.Queue()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._observer: BaseObserver | None = None
        self._handler = _ChangeHandler(self)
        self._watches: dict[Path, ObservedWatch] = {}
        self._watch_lock = threading.Lock()

    @property
    def watched_directories(self) -> list[Path]:
        with self._watch_lock:
            return sorted(self._watches)

    def start(self) -> None:
        """Start the observer. Must be called from the event loop that runs :meth:`run`.

        Raises:
            WatchError: If the observer cannot subscribe to the content directory.
        """
        self._loop = asyncio.get_running_loop()
        self._observer = Observer()
        try:
            for path in _iter_watch_dirs(self.directory):
                self.watch_directory(path)
            self._observer.start()
        except OSError as exc:
            raise WatchError(f"cannot watch {self.directory}: {exc}") from exc
        logger.debug("Watching %d directories under %s", len(self._watches), self.directory)

    def stop(self) -> None:
        if self._observer is None:
            return
        self._observer.stop()
        if self._observer.is_alive():
            self._observer.join()
        self._observer = None
        with self._watch_lock:
            self._watches.clear()

    def watch_directory(self, path: Path) -> None:
        """Subscribe to one directory (non-recursively) if not already watched."""
        if self._observer is None:
            return
        with self._watch_lock:
            if path in self._watches:
                return
            self._watches[path] = self._observer.schedule(self._handler, str(path), recursive=False)

    def forget_directory(self, path: Path) -> None:
        with self._watch_lock:
            watches = {p: w for p, w in self._watches.items() if p == path or path in p.parents}
            for watched in watches:
                del self._watches[watched]
        if self._observer is None:
            return
        for watch in watches.values():
            try:
                self._observer.unschedule(watch)
            except KeyError:
                # The emitter already went away with the directory.
                continue

    def notify(self, path: Path) -> None:
        """Hand a change from the observer thread to the event loop."""
        if self._loop is None or self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self.schedule_rebuild, path)

    def schedule_rebuild(self, path: Path) -> None:
        """Queue a change; must be called on the event loop."""
        logger.debug("Change detected: %s", path)
        self._events.put_nowait(path)

    async def run(self) -> None:
        """Debounce queued changes into rebuilds until cancelled."""
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        while True:
            await self._events.get()
            await self._debounce()
            await self.rebuild()

    async def _debounce(self) -> None:
        while True:
            try:
                await asyncio.wait_for(self._events.get(), timeout=self._delay)
            except asyncio.TimeoutError:
                return

    async def rebuild(self) -> bool:
        """Run one build and signal every listener, whatever the outcome."""
        self.rebuilds += 1
        try:
            await asyncio.to_thread(self._build, self.directory)
        except BuildError as exc:
            logger.error("Build error: %s", exc)
            succeeded = False
        except Exception:
            logger.exception("Unexpected error while rebuilding %s", self.directory)
            succeeded = False
        else:
            logger.info("Rebuilt %s", OUTPUT_FILENAME)
            succeeded = True
        self.registry.broadcast()
        return succeeded


class _ChangeHandler(FileSystemEventHandler):
    def __init__(self, session: WatchSession) -> None:
        self.session = session

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.event_type not in _RELEVANT_EVENTS:
            return
        src_path = Path(os.fsdecode(event.src_path))
        if event.event_type == EVENT_TYPE_MOVED:
            path = Path(os.fsdecode(event.dest_path))
        else:
            path = src_path

        if event.is_directory:
            if event.event_type == EVENT_TYPE_MODIFIED:
                return
            if event.event_type in (EVENT_TYPE_DELETED, EVENT_TYPE_MOVED):
                self.session.forget_directory(src_path)
            if event.event_type in (EVENT_TYPE_CREATED, EVENT_TYPE_MOVED) and not _is_hidden(
                path, self.session.directory
            ):
                self._watch_tree(path)
        elif path.name in GENERATED_FILENAMES:
            return

        self.session.notify(path)

    def _watch_tree(self, root: Path) -> None:
        try:
            for directory in _iter_watch_dirs(root):
                self.session.watch_directory(directory)
        except OSError as exc:
            logger.warning("cannot watch new directory %s: %s", root, exc)


def _is_hidden(path: Path, root: Path) -> bool:
    """True if any component of ``path`` below ``root`` starts with a dot."""
    try:
        parts = path.relative_to(root).parts
    except ValueError:
        parts = (path.name,)
    return any(part.startswith(".") for part in parts)


def _iter_watch_dirs(root: Path) -> Iterator[Path]:
    """Yield ``root`` and its subdirectories, skipping hidden ones."""
    for current, dirnames, _ in os.walk(root):
        dirnames[:] = sorted(name for name in dirnames if not name.startswith("."))
        yield Path(current)
