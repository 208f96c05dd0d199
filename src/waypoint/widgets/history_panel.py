"""History panel: recorded selections with back/forward buttons."""

import asyncio

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widgets import Button, Label, ListItem, ListView, Static

from ..history import HistoryStore

CURRENT_MARKER = "▶"


class HistoryRow(ListItem):
    """A list item representing one history entry."""

    def __init__(self, index: int, name: str, current: bool) -> None:
        super().__init__(classes="current" if current else "")
        self.index = index
        self.entry_name = name
        self.current = current

    def compose(self) -> ComposeResult:
        marker = CURRENT_MARKER if self.current else " "
        yield Label(f"{marker} {self.index + 1}. {self.entry_name}", markup=False)


class HistoryPanel(Vertical):
    """Widget rendering a HistoryStore."""

    DEFAULT_CSS = """
    HistoryPanel {
        width: 1fr;
        height: 1fr;
    }

    HistoryPanel > #history-header {
        background: $primary-background;
        color: $warning;
        text-style: bold;
        padding: 0 1;
        height: 1;
    }

    HistoryPanel > #history-buttons {
        height: auto;
        padding: 0 1;
    }

    HistoryPanel Button {
        min-width: 12;
        margin-right: 1;
    }

    HistoryPanel > #history-list-view {
        height: 1fr;
    }

    HistoryPanel ListItem {
        padding: 0 1;
    }

    HistoryPanel ListItem.current {
        text-style: bold;
    }
    """

    class BackRequested(Message):
        """Message emitted when the Back button is pressed."""

        pass

    class ForwardRequested(Message):
        """Message emitted when the Forward button is pressed."""

        pass

    class EntryChosen(Message):
        """Message emitted when a history row is picked."""

        def __init__(self, index: int) -> None:
            super().__init__()
            self.index = index

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._render_lock = asyncio.Lock()

    def compose(self) -> ComposeResult:
        yield Static("HISTORY", id="history-header")
        with Horizontal(id="history-buttons"):
            yield Button("◀ Back", id="history-back", disabled=True)
            yield Button("Forward ▶", id="history-forward", disabled=True)
        yield ListView(id="history-list-view")

    @property
    def list_view(self) -> ListView:
        return self.query_one("#history-list-view", ListView)

    async def show_history(self, store: HistoryStore) -> None:
        """Re-render from the store's read-only accessors.

        Renders run one at a time and each reads the store when it starts,
        so the last render always reflects the latest state.
        """
        async with self._render_lock:
            count = store.entry_count()
            current = store.current_index

            header = self.query_one("#history-header", Static)
            if count:
                header.update(f"HISTORY ({current + 1}/{count})")
            else:
                header.update("HISTORY")

            self.query_one("#history-back", Button).disabled = not store.can_move_back()
            self.query_one("#history-forward", Button).disabled = not store.can_move_forward()

            list_view = self.list_view
            await list_view.clear()
            await list_view.extend(
                HistoryRow(index, store.name_at(index), index == current)
                for index in range(count)
            )
            if count:
                list_view.index = current

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "history-back":
            self.post_message(self.BackRequested())
        elif event.button.id == "history-forward":
            self.post_message(self.ForwardRequested())
        event.stop()

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        """Handle a row being picked (click or Enter)."""
        if isinstance(event.item, HistoryRow):
            self.post_message(self.EntryChosen(event.item.index))
        event.stop()

    def on_list_view_highlighted(self, event: ListView.Highlighted) -> None:
        # Keep cursor moves inside the panel from reaching the app
        event.stop()
