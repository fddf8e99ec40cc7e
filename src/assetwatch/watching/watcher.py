"""OS file notifications wired to the event sequencer.

Uses watchdog's native observer (inotify, FSEvents, ReadDirectoryChangesW)
by default. Tests can pass ``PollingObserver`` instead.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from assetwatch.errors import AssetWatchError
from assetwatch.logging import get_logger
from assetwatch.watching.events import ChangeKind, FileChangeEvent

if TYPE_CHECKING:
    from watchdog.observers.api import BaseObserver

    from assetwatch.watching.sequencer import EventSequencer

log = get_logger("watching")

_KINDS = {
    "created": ChangeKind.CREATED,
    "deleted": ChangeKind.DELETED,
    "moved": ChangeKind.RENAMED,
    "modified": ChangeKind.MODIFIED,
}


def translate(event: FileSystemEvent) -> FileChangeEvent | None:
    """Convert a watchdog event, or return None for kinds we do not handle.

    Directory modifications (a child changed) and open/close events are
    dropped here.
    """
    kind = _KINDS.get(event.event_type)
    if kind is None:
        return None
    if kind is ChangeKind.MODIFIED and event.is_directory:
        return None

    src = Path(os.fsdecode(event.src_path))
    if kind is ChangeKind.RENAMED:
        dest = Path(os.fsdecode(event.dest_path))
        return FileChangeEvent(path=dest, kind=kind, is_directory=event.is_directory, old_path=src)
    return FileChangeEvent(path=src, kind=kind, is_directory=event.is_directory)


class _Handler(FileSystemEventHandler):
    def __init__(self, controller: WatchController) -> None:
        super().__init__()
        self._controller = controller

    def on_any_event(self, event: FileSystemEvent) -> None:
        try:
            change = translate(event)
            if change is not None:
                self._controller.sequencer.submit(change)
        except Exception as e:
            self._controller.report_error(e)


class WatchController:
    """Owns the observer lifecycle for one project root.

    Example:
        with WatchController(settings.root, sequencer):
            ...  # events flow into the sequencer until the block exits
    """

    def __init__(
        self,
        root: Path,
        sequencer: EventSequencer,
        observer_factory: Callable[[], BaseObserver] = Observer,
        on_error: Callable[[BaseException], None] | None = None,
    ) -> None:
        self.root = root
        self.sequencer = sequencer
        self._observer_factory = observer_factory
        self._on_error = on_error
        self._observer: BaseObserver | None = None
        self.error_count = 0

    @property
    def running(self) -> bool:
        return self._observer is not None and self._observer.is_alive()

    def start(self) -> None:
        """Start delivering notifications.

        Raises:
            AssetWatchError: If the OS refuses to watch the root.
        """
        if self._observer is not None:
            log.warning("WatchController already running")
            return
        observer = self._observer_factory()
        try:
            observer.schedule(_Handler(self), str(self.root), recursive=True)
            observer.start()
        except OSError as e:
            raise AssetWatchError(f"Cannot watch {self.root}: {e}") from e
        self._observer = observer
        log.info("Watching %s", self.root)

    def stop(self, timeout: float | None = 5.0) -> None:
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join(timeout)
        self._observer = None
        log.info("Stopped watching %s", self.root)

    def _stopped_thread(self) -> str | None:
        """Name of the first observer thread that is no longer running."""
        assert self._observer is not None
        if not self._observer.is_alive():
            return "observer"
        for emitter in self._observer.emitters:
            if not emitter.is_alive():
                return f"emitter for {emitter.watch.path}"
        return None

    def check_health(self) -> bool:
        """Restart an observer whose thread or emitter threads died on their own.

        An emitter stops when reading OS notifications fails, while the
        observer thread keeps running without delivering anything.

        Returns:
            False if a thread had stopped (the observer is restarted if possible).
        """
        if self._observer is None:
            return True
        stopped = self._stopped_thread()
        if stopped is None:
            return True
        self.report_error(AssetWatchError(f"file notification {stopped} stopped unexpectedly"))
        observer, self._observer = self._observer, None
        observer.stop()
        observer.join(5.0)
        try:
            self.start()
        except AssetWatchError as e:
            self.report_error(e)
        return False

    def report_error(self, error: BaseException) -> None:
        """Record a watcher-level failure; watching carries on."""
        self.error_count += 1
        log.error("Error while watching %s: %s", self.root, error)
        if self._on_error is not None:
            try:
                self._on_error(error)
            except Exception as e:
                log.error("Error in watch error callback: %s", e)

    def __enter__(self) -> WatchController:
        self.start()
        return self

    def __exit__(self, *args: object) -> None:
        self.stop()
