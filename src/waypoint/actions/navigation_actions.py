"""Navigation action handlers for WaypointApp."""

from __future__ import annotations

from ..history import NavigationError
from ..widgets import HistoryPanel, ItemList, Preview


class NavigationActionsMixin:
    """Mixin providing navigation actions (focus, back, forward, history rows, help)."""

    def _get_focus_widget(self, widget_id: str):
        """Get a focusable widget by ID."""
        if widget_id == "item-list-view":
            return self.query_one("#item-list", ItemList).list_view
        elif widget_id == "history-list-view":
            return self.query_one("#history-panel", HistoryPanel).list_view
        elif widget_id == "preview":
            return self.query_one("#preview", Preview).scroll_view
        return None

    def _get_current_focus_index(self) -> int:
        """Get the index of the currently focused widget in FOCUS_ORDER."""
        focused = self.focused
        if focused is None:
            return -1

        for index, widget_id in enumerate(self.FOCUS_ORDER):
            if self._get_focus_widget(widget_id) is focused:
                return index
        return -1

    def action_focus_next(self) -> None:
        """Focus the next panel in clockwise order."""
        current = self._get_current_focus_index()
        next_index = (current + 1) % len(self.FOCUS_ORDER)
        widget = self._get_focus_widget(self.FOCUS_ORDER[next_index])
        if widget:
            widget.focus()

    def action_focus_previous(self) -> None:
        """Focus the previous panel in counter-clockwise order."""
        current = self._get_current_focus_index()
        prev_index = (current - 1) % len(self.FOCUS_ORDER)
        widget = self._get_focus_widget(self.FOCUS_ORDER[prev_index])
        if widget:
            widget.focus()

    def action_go_back(self) -> None:
        """Go back to the previous selection."""
        try:
            self.history.move_back()
        except NavigationError as e:
            self.notify(str(e), severity="warning")

    def action_go_forward(self) -> None:
        """Go forward to the next selection."""
        try:
            self.history.move_forward()
        except NavigationError as e:
            self.notify(str(e), severity="warning")

    def on_history_panel_back_requested(
        self, event: HistoryPanel.BackRequested
    ) -> None:
        self.action_go_back()

    def on_history_panel_forward_requested(
        self, event: HistoryPanel.ForwardRequested
    ) -> None:
        self.action_go_forward()

    def on_history_panel_entry_chosen(self, event: HistoryPanel.EntryChosen) -> None:
        """Jump to a history row picked from the panel."""
        try:
            self.history.select_index(event.index)
        except IndexError:
            # Stale row from before the last refresh
            self.notify("History entry no longer exists", severity="warning")
            return

        self.query_one("#item-list", ItemList).list_view.focus()

    def action_help(self) -> None:
        """Show help information."""
        self.notify(
            "alt+left/b=Back, alt+right/f=Forward, Enter on history row=Jump, u=Rescan, tab=Next panel, q=Quit",
            timeout=5,
        )
