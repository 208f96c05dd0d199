"""Watch the scan directory and report batches of changed items."""

import logging
import os
import threading
from pathlib import Path
from typing import Callable, Iterable

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from .config import Config
from .scanner import is_item

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[set[Path]], None]

WATCHED_EVENT_TYPES = frozenset(
    {EVENT_TYPE_CREATED, EVENT_TYPE_MODIFIED, EVENT_TYPE_DELETED, EVENT_TYPE_MOVED}
)


class ChangeBatcher:
    """Collects changed paths and flushes them after a quiet period.

    Every new path restarts the timer, so a burst of events (an editor
    saving through a temporary file, a ``git checkout``) is reported once.
    The callback runs on the timer thread.
    """

    def __init__(self, on_batch: ChangeCallback, delay: float = 0.5) -> None:
        self.on_batch = on_batch
        self.delay = delay
        self._paths: set[Path] = set()
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None

    @property
    def pending(self) -> frozenset[Path]:
        with self._lock:
            return frozenset(self._paths)

    def add(self, path: Path) -> None:
        with self._lock:
            self._paths.add(path)
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.delay, self.flush)
            self._timer.daemon = True
            self._timer.start()

    def flush(self) -> None:
        """Deliver the pending batch now, if there is one."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            batch, self._paths = self._paths, set()

        if batch:
            logger.info("Reporting %d changed item(s)", len(batch))
            self.on_batch(batch)

    def cancel(self) -> None:
        """Drop the pending batch without reporting it."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._paths.clear()


def _event_paths(event: FileSystemEvent) -> list[str]:
    paths = [event.src_path]
    dest = getattr(event, "dest_path", "")
    if dest:
        paths.append(dest)
    return [os.fsdecode(path) for path in paths]


class ItemChangeHandler(FileSystemEventHandler):
    """Feeds item file events into a ChangeBatcher."""

    def __init__(self, batcher: ChangeBatcher, extensions: Iterable[str] = ()) -> None:
        super().__init__()
        self.batcher = batcher
        self.extensions = tuple(extensions)

    def accepts(self, path: Path) -> bool:
        """Visible files with a configured extension."""
        return not path.name.startswith(".") and is_item(path, self.extensions)

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in WATCHED_EVENT_TYPES:
            return
        for raw in _event_paths(event):
            path = Path(raw)
            if self.accepts(path):
                logger.debug("%s: %s", event.event_type, path)
                self.batcher.add(path)


class DirectoryWatcher:
    """Runs a watchdog observer over the scan directory.

    ``on_change`` receives each batch of changed item paths on a background
    thread; callers living on an event loop must marshal it themselves.
    """

    def __init__(
        self,
        root: Path,
        on_change: ChangeCallback,
        extensions: Iterable[str] = (),
        recursive: bool = True,
        debounce_seconds: float = 0.5,
    ) -> None:
        self.root = root
        self.recursive = recursive
        self.batcher = ChangeBatcher(on_change, delay=debounce_seconds)
        self.handler = ItemChangeHandler(self.batcher, extensions)
        self._observer: Observer | None = None

    @classmethod
    def from_config(cls, config: Config, on_change: ChangeCallback) -> "DirectoryWatcher":
        return cls(
            config.scan_directory,
            on_change,
            extensions=config.items.extensions,
            recursive=config.items.recursive,
            debounce_seconds=config.watcher.debounce_seconds,
        )

    @property
    def running(self) -> bool:
        return self._observer is not None

    def start(self) -> bool:
        """Begin watching. Returns False if the root cannot be watched."""
        if self._observer is not None:
            return True
        if not self.root.is_dir():
            logger.warning("Not watching missing directory: %s", self.root)
            return False

        observer = Observer()
        observer.schedule(self.handler, str(self.root), recursive=self.recursive)
        observer.daemon = True
        observer.start()
        self._observer = observer
        logger.info("Watching %s", self.root)
        return True

    def stop(self) -> None:
        """Stop watching and drop changes not yet reported."""
        self.batcher.cancel()
        observer, self._observer = self._observer, None
        if observer is None:
            return
        observer.stop()
        observer.join(timeout=1.0)
        logger.info("Stopped watching %s", self.root)

    def __enter__(self) -> "DirectoryWatcher":
        self.start()
        return self

    def __exit__(self, *args) -> None:
        self.stop()
