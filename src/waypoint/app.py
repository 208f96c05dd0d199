"""Main Textual application for Waypoint."""

import logging
from pathlib import Path

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.timer import Timer
from textual.widgets import Footer, Header
from textual.worker import Worker

from .actions import NavigationActionsMixin
from .bridge import SelectionBridge
from .config import Config
from .history import HistoryStore
from .scanner import scan_items
from .watcher import DirectoryWatcher
from .widgets import (
    HistoryPanel,
    ItemList,
    Preview,
    invalidate_file_cache,
    load_file_content,
)

logger = logging.getLogger(__name__)


class WaypointApp(NavigationActionsMixin, App):
    """Waypoint - Selection History Browser TUI."""

    TITLE = "Waypoint"
    SUB_TITLE = "Selection History Browser"

    CSS = """
    #main-container {
        width: 100%;
        height: 1fr;
    }

    #item-list {
        width: 40%;
        height: 100%;
        border: solid $accent;
    }

    #item-list:focus-within {
        border: solid cyan;
    }

    #right-panel {
        width: 60%;
        height: 100%;
    }

    #history-panel {
        height: 40%;
        border: solid $warning;
    }

    #history-panel:focus-within {
        border: solid yellow;
    }

    #preview {
        height: 60%;
        border: solid $success;
    }

    #preview:focus-within {
        border: solid green;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("alt+left", "go_back", "Back"),
        Binding("alt+right", "go_forward", "Forward"),
        Binding("b", "go_back", "Back", show=False),
        Binding("f", "go_forward", "Forward", show=False),
        Binding("u", "rescan", "Rescan"),
        Binding("tab", "focus_next", "Next Panel", show=False),
        Binding("shift+tab", "focus_previous", "Prev Panel", show=False),
        Binding("?", "help", "Help"),
    ]

    # Focus order: items -> history -> preview
    FOCUS_ORDER = [
        "item-list-view",
        "history-list-view",
        "preview",
    ]

    def __init__(self, config: Config) -> None:
        super().__init__()
        self.config = config
        self.history = HistoryStore()
        self._bridge: SelectionBridge | None = None
        self._watcher: DirectoryWatcher | None = None
        self._preview_timer: Timer | None = None  # For debouncing preview updates
        self._pending_preview_path: Path | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-container"):
            yield ItemList(
                record_on=self.config.history.record_on,
                max_display=self.config.items.max_display,
                root=self.config.scan_directory,
                id="item-list",
                classes="panel",
            )
            with Vertical(id="right-panel"):
                yield HistoryPanel(id="history-panel", classes="panel")
                yield Preview(id="preview", classes="panel")
        yield Footer()

    async def on_mount(self) -> None:
        """Wire history to the item list and start loading items."""
        item_list = self.query_one("#item-list", ItemList)

        self._bridge = SelectionBridge(self.history, item_list)
        self._bridge.attach()
        self.history.subscribe(self._on_history_changed)
        self._on_history_changed()

        item_list.list_view.focus()

        if self.config.watcher.enabled:
            self._watcher = DirectoryWatcher.from_config(self.config, self._on_file_change)
            self._watcher.start()

        self.notify("Scanning items...")
        self.run_worker(self._background_scan, exclusive=True, thread=True)

    async def on_unmount(self) -> None:
        """Release the selection subscription and the watcher."""
        self.history.unsubscribe(self._on_history_changed)
        if self._bridge is not None:
            self._bridge.detach()
            self._bridge = None
        if self._watcher is not None:
            self._watcher.stop()
            self._watcher = None

    def _background_scan(self) -> list[Path]:
        """List items in a background thread."""
        return scan_items(self.config)

    async def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        """Handle background worker completion."""
        worker_name = event.worker.name

        if event.state.name == "ERROR":
            if worker_name == "_background_scan":
                logger.error("Item scan failed: %s", event.worker.error)
                self.notify(f"Scan failed: {event.worker.error}", severity="error")
            return

        if event.state.name != "SUCCESS":
            return

        if worker_name == "_background_scan":
            items = event.worker.result or []
            item_list = self.query_one("#item-list", ItemList)
            await item_list.update_items(items)
            if not items:
                self.query_one("#preview", Preview).clear()
            logger.info("Listed %d item(s)", len(items))

        elif worker_name == "_load_preview":
            file_path = self._pending_preview_path
            self._pending_preview_path = None

            if file_path is None:
                return

            # Verify this item is still the highlighted one
            item_list = self.query_one("#item-list", ItemList)
            if item_list.get_highlighted_item() != file_path:
                return

            result = event.worker.result
            if result:
                content, error = result
                preview = self.query_one("#preview", Preview)
                preview.show_content(file_path, content, error)

    def _on_history_changed(self) -> None:
        """Schedule a re-render of the history panel after any history change."""
        panel = self.query_one("#history-panel", HistoryPanel)
        self.call_later(panel.show_history, self.history)

    def _on_file_change(self, paths: set[Path]) -> None:
        """Handle a batch of file changes (called from the watcher thread)."""
        self.call_from_thread(self._handle_file_change, paths)

    def _handle_file_change(self, paths: set[Path]) -> None:
        """Drop stale previews and rescan on the main thread."""
        for path in paths:
            invalidate_file_cache(path)

        current = self.history.current_handle
        if current in paths and not current.exists():
            self.notify(
                f"{current.name} was removed; it stays in history",
                severity="warning",
            )

        self.run_worker(self._background_scan, exclusive=True, thread=True)

    def action_rescan(self) -> None:
        """Manually rescan the item directory."""
        self.notify("Rescanning...")
        self.run_worker(self._background_scan, exclusive=True, thread=True)

    def on_item_list_item_highlighted(self, event: ItemList.ItemHighlighted) -> None:
        """Update the preview with debouncing."""
        if self._preview_timer is not None:
            self._preview_timer.stop()
            self._preview_timer = None

        file_path = event.file_path

        # Debounce: wait 50ms before updating preview
        self._preview_timer = self.set_timer(
            0.05,
            lambda: self._do_preview_update(file_path),
        )

    def _do_preview_update(self, file_path: Path) -> None:
        """Load the preview after the debounce delay."""
        self._preview_timer = None

        item_list = self.query_one("#item-list", ItemList)
        if item_list.get_highlighted_item() != file_path:
            return

        self.run_worker(
            lambda: load_file_content(file_path),
            name="_load_preview",
            thread=True,
            group="preview",
        )
        self._pending_preview_path = file_path


def run_app(config: Config) -> None:
    """Run the Waypoint application."""
    app = WaypointApp(config)
    app.run()
