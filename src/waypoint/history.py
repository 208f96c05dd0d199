"""Selection history with browser-style back/forward navigation."""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

logger = logging.getLogger(__name__)

Handle = Any


class HistoryError(Exception):
    """Base class for selection history errors."""


class NavigationError(HistoryError):
    """Raised when moving back or forward is not possible."""


def display_name(handle: Any) -> str:
    """Derive a presentation name for a selection handle.

    Paths (anything with a ``name`` attribute) use that name. Groups of
    handles from a multi-item selection are shown as their member names,
    sorted and comma separated.
    """
    if isinstance(handle, (frozenset, set, tuple)):
        return ", ".join(sorted(display_name(member) for member in handle))
    name = getattr(handle, "name", None)
    if isinstance(name, str) and name:
        return name
    return str(handle)


@dataclass(frozen=True)
class HistoryEntry:
    """One recorded selection."""

    handle: Handle
    display_name: str = field(compare=False)

    @classmethod
    def for_handle(cls, handle: Handle) -> "HistoryEntry":
        return cls(handle=handle, display_name=display_name(handle))


class HistoryStore:
    """Ordered record of selections and the cursor pointing into it.

    Entries are kept in the order they were selected. Recording a new
    selection while the cursor is behind the tail drops everything after
    the cursor first, like a web browser does with its forward history.

    Navigation (``move_back``, ``move_forward``, ``select_index``) moves
    the cursor and then asks the environment to re-select the entry through
    the apply-selection callback. Observers registered with ``subscribe``
    are called with no arguments after every change.
    """

    def __init__(
        self, apply_selection: Callable[[Handle], None] | None = None
    ) -> None:
        self._entries: list[HistoryEntry] = []
        self._current_index: int = -1
        self._apply_selection = apply_selection
        self._observers: list[Callable[[], None]] = []

    def __len__(self) -> int:
        return len(self._entries)

    def set_apply_selection(
        self, callback: Callable[[Handle], None] | None
    ) -> None:
        """Install the callback that re-selects a handle after navigation."""
        self._apply_selection = callback

    # Observers

    def subscribe(self, callback: Callable[[], None]) -> None:
        """Register a change observer."""
        if callback not in self._observers:
            self._observers.append(callback)

    def unsubscribe(self, callback: Callable[[], None]) -> None:
        """Remove a change observer. Unknown callbacks are ignored."""
        if callback in self._observers:
            self._observers.remove(callback)

    def _notify(self) -> None:
        for callback in list(self._observers):
            try:
                callback()
            except Exception:
                logger.warning("History observer %r failed", callback, exc_info=True)

    # Mutation

    def record_selection(self, handle: Handle) -> bool:
        """Record a selection made outside of history navigation.

        Returns False when ``handle`` is already the current entry, in which
        case nothing changes.
        """
        if handle is None:
            raise ValueError("Cannot record an empty selection")

        current = self.current_handle
        if current is not None and current == handle:
            return False

        # Drop the forward branch
        del self._entries[self._current_index + 1 :]
        self._entries.append(HistoryEntry.for_handle(handle))
        self._current_index = len(self._entries) - 1
        logger.debug(
            "Recorded selection %r at index %d", handle, self._current_index
        )

        self._notify()
        return True

    def can_move_back(self) -> bool:
        return self._current_index > 0

    def can_move_forward(self) -> bool:
        return self._current_index < len(self._entries) - 1

    def move_back(self) -> HistoryEntry:
        """Step the cursor back one entry and re-select it."""
        if not self.can_move_back():
            raise NavigationError("No earlier selection in history")
        return self._move_to(self._current_index - 1)

    def move_forward(self) -> HistoryEntry:
        """Step the cursor forward one entry and re-select it."""
        if not self.can_move_forward():
            raise NavigationError("No later selection in history")
        return self._move_to(self._current_index + 1)

    def select_index(self, index: int) -> HistoryEntry:
        """Jump the cursor to ``index`` and re-select that entry."""
        self._check_index(index)
        return self._move_to(index)

    def _move_to(self, index: int) -> HistoryEntry:
        previous = self._current_index
        self._current_index = index
        entry = self._entries[index]

        if self._apply_selection is not None:
            try:
                self._apply_selection(entry.handle)
            except Exception:
                self._current_index = previous
                raise

        logger.debug("Navigated from index %d to %d", previous, index)
        self._notify()
        return entry

    # Read-only accessors

    @property
    def current_index(self) -> int:
        """Cursor position, or -1 when nothing has been recorded."""
        return self._current_index

    @property
    def current_entry(self) -> HistoryEntry | None:
        if self._current_index < 0:
            return None
        return self._entries[self._current_index]

    @property
    def current_handle(self) -> Handle | None:
        entry = self.current_entry
        return entry.handle if entry is not None else None

    def entry_count(self) -> int:
        return len(self._entries)

    def is_empty(self) -> bool:
        return not self._entries

    def entries(self) -> tuple[HistoryEntry, ...]:
        """Snapshot of all entries, oldest first."""
        return tuple(self._entries)

    def name_at(self, index: int) -> str:
        self._check_index(index)
        return self._entries[index].display_name

    def handle_at(self, index: int) -> Handle:
        self._check_index(index)
        return self._entries[index].handle

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._entries):
            raise IndexError(
                f"History index {index} out of range (0..{len(self._entries) - 1})"
            )
