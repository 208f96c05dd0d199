"""Waypoint widgets."""

from .history_panel import HistoryPanel
from .item_list import ItemList
from .preview import Preview, invalidate_file_cache, load_file_content

__all__ = [
    "HistoryPanel",
    "ItemList",
    "Preview",
    "invalidate_file_cache",
    "load_file_content",
]
