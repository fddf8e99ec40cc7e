"""File watching for assetwatch.

Filesystem notifications are translated to FileChangeEvent values, coalesced
by the EventSequencer and handled one at a time on its worker thread.
"""

from assetwatch.watching.events import ChangeKind, FileChangeEvent
from assetwatch.watching.sequencer import DEBOUNCE_WINDOW, Action, EventSequencer, plan
from assetwatch.watching.watcher import WatchController, translate

__all__ = [
    "DEBOUNCE_WINDOW",
    "Action",
    "ChangeKind",
    "EventSequencer",
    "FileChangeEvent",
    "WatchController",
    "plan",
    "translate",
]
