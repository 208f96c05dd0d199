"""Item content preview widget."""

from collections import OrderedDict
from pathlib import Path

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical, VerticalScroll
from textual.widgets import Static

# Files larger than this are shown truncated
MAX_PREVIEW_BYTES = 64 * 1024


class FileCache:
    """LRU cache for file contents with mtime-based invalidation."""

    def __init__(self, max_size: int = 10) -> None:
        self._cache: OrderedDict[str, tuple[float, str]] = OrderedDict()
        self._max_size = max_size

    def __len__(self) -> int:
        return len(self._cache)

    def get(self, path: Path) -> str | None:
        """Get cached content if valid, or None if not cached/stale."""
        key = str(path)
        if key not in self._cache:
            return None

        cached_mtime, content = self._cache[key]

        try:
            current_mtime = path.stat().st_mtime
            if current_mtime != cached_mtime:
                del self._cache[key]
                return None
        except OSError:
            # File no longer accessible
            del self._cache[key]
            return None

        self._cache.move_to_end(key)
        return content

    def put(self, path: Path, mtime: float, content: str) -> None:
        """Cache file content."""
        key = str(path)

        if len(self._cache) >= self._max_size and key not in self._cache:
            self._cache.popitem(last=False)

        self._cache[key] = (mtime, content)
        self._cache.move_to_end(key)

    def invalidate(self, path: Path) -> None:
        """Invalidate cache entry for a specific file."""
        self._cache.pop(str(path), None)


# Shared cache instance
_file_cache = FileCache(max_size=10)


def invalidate_file_cache(path: Path) -> None:
    """Invalidate cache for a file (call when file changes)."""
    _file_cache.invalidate(path)


def load_file_content(file_path: Path) -> tuple[str | None, str | None]:
    """Load file content for preview (can be called from worker thread).

    Returns:
        Tuple of (content, error_message). Exactly one of them is None.
    """
    content = _file_cache.get(file_path)
    if content is not None:
        return (content, None)

    try:
        mtime = file_path.stat().st_mtime
        with open(file_path, "rb") as f:
            raw = f.read(MAX_PREVIEW_BYTES + 1)
    except OSError as e:
        return (None, f"Error reading file: {e}")

    truncated = len(raw) > MAX_PREVIEW_BYTES
    raw = raw[:MAX_PREVIEW_BYTES]
    try:
        content = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        # A multi-byte character cut off by truncation is not binary
        if not truncated or e.start < len(raw) - 3:
            return (None, "Binary file, no preview")
        content = raw[: e.start].decode("utf-8")

    if truncated:
        content += "\n\n[... truncated]"

    _file_cache.put(file_path, mtime, content)
    return (content, None)


class Preview(Vertical):
    """Widget displaying the content of the current item."""

    DEFAULT_CSS = """
    Preview {
        width: 1fr;
        height: 1fr;
    }

    Preview > #preview-header {
        background: $primary-background;
        color: $success;
        text-style: bold;
        padding: 0 1;
        height: 1;
    }

    Preview > VerticalScroll {
        height: 1fr;
    }

    Preview #preview-content {
        padding: 0 1;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._current_file: Path | None = None

    def compose(self) -> ComposeResult:
        yield Static("PREVIEW", id="preview-header")
        with VerticalScroll(id="preview-scroll"):
            yield Static("", id="preview-content")

    @property
    def scroll_view(self) -> VerticalScroll:
        return self.query_one("#preview-scroll", VerticalScroll)

    def clear(self) -> None:
        self._current_file = None
        self.query_one("#preview-header", Static).update("PREVIEW")
        self.query_one("#preview-content", Static).update("")

    def show_content(
        self, file_path: Path, content: str | None, error: str | None
    ) -> None:
        """Display pre-loaded content (no I/O, safe for main thread)."""
        self._current_file = file_path
        self.query_one("#preview-header", Static).update(
            Text(f"PREVIEW - {file_path.name}")
        )
        self.query_one("#preview-content", Static).update(
            Text(error if error else (content or ""))
        )
        self.scroll_view.scroll_home(animate=False)

    def get_current_file(self) -> Path | None:
        """Get the currently displayed file path."""
        return self._current_file
