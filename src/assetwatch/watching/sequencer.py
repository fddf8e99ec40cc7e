"""Coalescing and serialization of filesystem notifications.

Notifications may arrive on several threads at once. ``submit`` only does
the duplicate check and a queue put; every compile and rebuild runs on one
dedicated worker thread, strictly in submission order.
"""

from __future__ import annotations

import queue
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path, PurePath
from typing import TYPE_CHECKING

from assetwatch.config.schema import Settings
from assetwatch.logging import TRACE, get_logger
from assetwatch.watching.events import ChangeKind, FileChangeEvent

if TYPE_CHECKING:
    from assetwatch.sync import AssetSynchronizer

log = get_logger("watching.sequencer")

# Identical notifications closer together than this are dropped (seconds)
DEBOUNCE_WINDOW = 0.1

_STOP = object()


class Action(Enum):
    """Work scheduled for an accepted event."""

    COMPILE = "compile"
    REBUILD = "rebuild"


@dataclass
class _LastEvent:
    signature: tuple[str, str, ChangeKind] | None = None
    at: float = 0.0


def _in_scope(path: Path, is_directory: bool, settings: Settings) -> bool:
    """False for the root itself, paths outside it, or paths inside an ignored folder."""
    try:
        relative = settings.relative_path(path)
    except ValueError:
        return False
    if relative in (PurePath(""), PurePath(".")):
        return False

    directory = relative.parent
    if directory in (PurePath(""), PurePath(".")):
        if settings.ignore_root_files and not is_directory:
            return False
    elif settings.is_ignored_dir(directory):
        return False
    return not (is_directory and settings.is_ignored_dir(relative))


def plan(event: FileChangeEvent, settings: Settings) -> tuple[Action, ...]:
    """Decide what an event should trigger.

    Pure function of the event and settings:
    - events outside the root, error events and events in ignored folders
      trigger nothing; neither do file events directly at the root when
      ``ignore_root_files`` is set
    - a modified shader source is compiled and nothing else
    - a created or renamed shader source is compiled, then checked as an asset
    - a tracked file (old or new name for renames) or a directory that was
      created, deleted or renamed triggers a rebuild
    """
    if event.kind is ChangeKind.ERROR:
        return ()

    in_scope = _in_scope(event.path, event.is_directory, settings)
    old_in_scope = event.old_path is not None and _in_scope(
        event.old_path, event.is_directory, settings
    )
    if not (in_scope or old_in_scope):
        return ()

    is_shader = in_scope and not event.is_directory and settings.is_shader(event.path)

    if event.kind is ChangeKind.MODIFIED:
        return (Action.COMPILE,) if is_shader else ()

    actions: list[Action] = []
    if is_shader and event.kind is not ChangeKind.DELETED:
        actions.append(Action.COMPILE)

    if event.is_directory:
        actions.append(Action.REBUILD)
    elif (in_scope and settings.is_tracked(event.path)) or (
        old_in_scope and settings.is_tracked(event.old_path)  # type: ignore[arg-type]
    ):
        actions.append(Action.REBUILD)

    return tuple(actions)


class EventSequencer:
    """Single-worker queue turning notifications into compiles and rebuilds.

    Example:
        sequencer = EventSequencer(settings, synchronizer)
        sequencer.start()
        sequencer.submit(FileChangeEvent(path, ChangeKind.CREATED))
        sequencer.wait_idle()
        sequencer.stop()
    """

    def __init__(
        self,
        settings: Settings,
        synchronizer: AssetSynchronizer,
        clock: Callable[[], float] = time.monotonic,
        debounce_window: float = DEBOUNCE_WINDOW,
    ) -> None:
        self._settings = settings
        self._sync = synchronizer
        self._clock = clock
        self._window = debounce_window

        self._last = _LastEvent()
        self._last_lock = threading.Lock()

        self._queue: queue.Queue[object] = queue.Queue()
        self._pending = 0
        self._idle = threading.Condition()
        self._accepting = False
        self._worker: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._worker is not None and self._worker.is_alive()

    def start(self) -> None:
        """Start the worker thread."""
        if self.running:
            log.warning("EventSequencer already running")
            return
        with self._idle:
            self._accepting = True
        self._worker = threading.Thread(target=self._run, name="assetwatch-worker", daemon=True)
        self._worker.start()
        log.debug("EventSequencer started")

    def stop(self, timeout: float | None = None) -> None:
        """Stop after all work queued so far has finished."""
        if self._worker is None:
            return
        with self._idle:
            self._accepting = False
        self._queue.put(_STOP)
        self._worker.join(timeout)
        if self._worker.is_alive():
            log.warning("Worker still busy after %.1fs", timeout or 0.0)
        else:
            self._worker = None
            log.debug("EventSequencer stopped")

    def is_duplicate(self, event: FileChangeEvent) -> bool:
        """Check and record an event against the last accepted one.

        The record is only replaced when the event is accepted.
        """
        now = self._clock()
        signature = event.signature
        with self._last_lock:
            if signature == self._last.signature and now - self._last.at < self._window:
                return True
            self._last = _LastEvent(signature=signature, at=now)
            return False

    def submit(self, event: FileChangeEvent) -> bool:
        """Accept a notification from any thread.

        Returns:
            True if work was queued for the event.
        """
        if self.is_duplicate(event):
            log.log(TRACE, "Dropped duplicate %s %s", event.kind.value, event.path)
            return False

        actions = plan(event, self._settings)
        if not actions:
            return False

        with self._idle:
            if not self._accepting:
                log.warning("Sequencer not running, dropped %s %s", event.kind.value, event.path)
                return False
            self._pending += 1
            self._queue.put((event, actions))
        return True

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Block until every queued unit has finished.

        Returns:
            False if the timeout expired first.
        """
        with self._idle:
            return self._idle.wait_for(lambda: self._pending == 0, timeout)

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            if item is _STOP:
                break
            event, actions = item  # type: ignore[misc]
            try:
                self.handle(event, actions)
            except Exception:
                log.exception("Error handling %s %s", event.kind.value, event.path)
            finally:
                with self._idle:
                    self._pending -= 1
                    self._idle.notify_all()

    def handle(self, event: FileChangeEvent, actions: tuple[Action, ...]) -> None:
        """Run the planned actions for one event, in order."""
        try:
            relative: PurePath = self._settings.relative_path(event.path)
        except ValueError:
            # Renamed out of the root
            relative = event.path
        when = datetime.fromtimestamp(event.timestamp)

        for action in actions:
            if action is Action.COMPILE:
                if event.kind is ChangeKind.MODIFIED:
                    self._sync.reporter.shader_changed(relative, when)
                self._sync.compile(event.path)
            elif action is Action.REBUILD:
                if self._sync.rebuild():
                    self._sync.reporter.change(event.kind, relative, when)
