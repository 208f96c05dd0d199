"""Item list widget: the selection source that history follows."""

import logging
from pathlib import Path
from typing import Callable

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.message import Message
from textual.widgets import Label, ListItem, ListView, Static

logger = logging.getLogger(__name__)

# Maximum items to display before showing "Show more" item
MAX_DISPLAY_ITEMS = 500


class Item(ListItem):
    """A list item representing a file."""

    def __init__(self, file_path: Path, label: str | None = None) -> None:
        super().__init__()
        self.file_path = file_path
        self.label = label or file_path.name

    def compose(self) -> ComposeResult:
        yield Label(self.label, markup=False)


class ShowMoreItemsItem(ListItem):
    """A list item that triggers loading the full item collection."""

    DEFAULT_CSS = """
    ShowMoreItemsItem {
        color: $text-muted;
        text-style: italic;
    }
    """

    def __init__(self, total_count: int, displayed_count: int) -> None:
        super().__init__()
        self.total_count = total_count
        self.remaining = total_count - displayed_count

    def compose(self) -> ComposeResult:
        yield Label(f"... show {self.remaining} more ({self.total_count} total)")


class ItemList(Vertical):
    """Widget listing selectable items.

    Besides posting Textual messages, the list notifies plain callbacks
    registered with ``subscribe`` whenever the selection changes, and can be
    told to select an item with ``select``. ``record_on`` decides whether a
    cursor move ("highlight") or only Enter/click ("select") counts as a
    selection change.
    """

    DEFAULT_CSS = """
    ItemList {
        width: 1fr;
        height: 1fr;
    }

    ItemList > #item-header {
        background: $primary-background;
        color: $accent;
        text-style: bold;
        padding: 0 1;
        height: 1;
    }

    ItemList > #item-list-view {
        height: 1fr;
    }

    ItemList ListItem {
        padding: 0 1;
    }

    ItemList ListItem:hover {
        background: $boost;
    }

    ItemList ListItem.--highlight {
        background: $accent;
    }
    """

    class ItemHighlighted(Message):
        """Message emitted when an item is highlighted (cursor moved)."""

        def __init__(self, file_path: Path) -> None:
            super().__init__()
            self.file_path = file_path

    class ItemSelected(Message):
        """Message emitted when an item is selected (Enter or click)."""

        def __init__(self, file_path: Path) -> None:
            super().__init__()
            self.file_path = file_path

    def __init__(
        self,
        record_on: str = "highlight",
        max_display: int = MAX_DISPLAY_ITEMS,
        root: Path | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.record_on = record_on
        self.max_display = max_display
        self.root = root
        self._items: list[Path] = []
        self._all_items: list[Path] = []
        self._listeners: list[Callable[[Path | None], None]] = []
        self._reported: Path | None = None

    def compose(self) -> ComposeResult:
        yield Static("ITEMS", id="item-header")
        yield ListView(id="item-list-view")

    @property
    def list_view(self) -> ListView:
        return self.query_one("#item-list-view", ListView)

    @property
    def items(self) -> list[Path]:
        """Items currently shown in the list."""
        return list(self._items)

    # Selection environment

    def subscribe(self, callback: Callable[[Path | None], None]) -> None:
        """Register a callback for selection changes."""
        if callback not in self._listeners:
            self._listeners.append(callback)

    def unsubscribe(self, callback: Callable[[Path | None], None]) -> None:
        """Remove a selection callback."""
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _report(self, file_path: Path | None) -> None:
        """Tell listeners about a selection change, once per distinct item."""
        if file_path == self._reported:
            return
        self._reported = file_path
        for callback in list(self._listeners):
            callback(file_path)

    def select(self, handle: Path) -> bool:
        """Move the cursor to ``handle``.

        Returns True if a selection change will be reported for it.
        """
        if handle not in self._all_items:
            logger.warning("Cannot select missing item: %s", handle)
            return False

        if handle not in self._items:
            # Hidden behind "show more": rebuild the list first
            self.run_worker(self._show_all_items(handle), group="item-select")
        else:
            index = self._items.index(handle)
            list_view = self.list_view
            if list_view.index == index:
                return False
            list_view.index = index

        if self.record_on == "select":
            # Enter/click is not simulated, so nothing will be reported
            self._reported = handle
            return False
        return handle != self._reported

    # Content

    def _label_for(self, file_path: Path) -> str:
        if self.root is not None:
            try:
                return str(file_path.relative_to(self.root))
            except ValueError:
                pass
        return file_path.name

    async def _rebuild(self, display_items: list[Path], total: int) -> None:
        list_view = self.list_view
        await list_view.clear()
        rows: list[ListItem] = [
            Item(file_path, self._label_for(file_path)) for file_path in display_items
        ]
        if total > len(display_items):
            rows.append(ShowMoreItemsItem(total, len(display_items)))
        await list_view.extend(rows)

    def _highlight(self, index: int) -> None:
        # The rebuilt rows are new widgets, so always post a fresh highlight
        list_view = self.list_view
        list_view.index = None
        list_view.index = index

    async def update_items(self, items: list[Path]) -> None:
        """Replace the listed items, keeping the highlighted one if present.

        Re-highlighting the same item after a reload is not reported as a
        selection change.
        """
        previous = self.get_highlighted_item()

        self._all_items = items
        display_items = items[: self.max_display]
        if previous in items and previous not in display_items:
            display_items = items
        self._items = display_items

        await self._rebuild(display_items, len(items))
        self.query_one("#item-header", Static).update(f"ITEMS ({len(items)})")

        if not display_items:
            self._report(None)
        elif previous in display_items:
            self._highlight(display_items.index(previous))
        else:
            self._highlight(0)

    async def _show_all_items(self, target: Path | None = None) -> None:
        """Expand the list to show all items, then highlight ``target``."""
        shown = len(self._items)
        self._items = self._all_items
        await self._rebuild(self._items, len(self._items))

        if target is None:
            # Keep the cursor where the "show more" row was
            target = self._items[shown] if shown < len(self._items) else None
        if target in self._items:
            self._highlight(self._items.index(target))

    def get_highlighted_item(self) -> Path | None:
        """Get the currently highlighted item path."""
        item = self.list_view.highlighted_child
        if isinstance(item, Item):
            return item.file_path
        return None

    def on_list_view_highlighted(self, event: ListView.Highlighted) -> None:
        """Handle item highlight (cursor moved)."""
        if not isinstance(event.item, Item):
            return
        # Skip highlights the cursor has already moved past
        if event.item is not self.list_view.highlighted_child:
            return
        self.post_message(self.ItemHighlighted(event.item.file_path))
        if self.record_on == "highlight":
            self._report(event.item.file_path)

    async def on_list_view_selected(self, event: ListView.Selected) -> None:
        """Handle item selection (click or Enter on highlighted item)."""
        if isinstance(event.item, ShowMoreItemsItem):
            await self._show_all_items()
            return
        if isinstance(event.item, Item):
            self.post_message(self.ItemSelected(event.item.file_path))
            if self.record_on == "select":
                self._report(event.item.file_path)
