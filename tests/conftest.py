"""Shared fixtures for waypoint tests."""

import pytest

from waypoint.bridge import SelectionBridge
from waypoint.history import HistoryStore


class FakeEnvironment:
    """In-memory selection source.

    ``echo`` controls what happens after ``select``:
    "sync" reports the change before ``select`` returns, "queued" holds it
    until ``flush()``, "none" never reports it and says so.
    """

    def __init__(self, echo: str = "sync") -> None:
        self.echo = echo
        self.selected = None
        self.listeners = []
        self.commands = []
        self.queue = []

    def subscribe(self, callback):
        if callback not in self.listeners:
            self.listeners.append(callback)

    def unsubscribe(self, callback):
        if callback in self.listeners:
            self.listeners.remove(callback)

    def select(self, handle):
        self.commands.append(handle)
        self.selected = handle
        if self.echo == "sync":
            self._emit(handle)
            return True
        if self.echo == "queued":
            self.queue.append(handle)
            return True
        return False

    def flush(self):
        pending, self.queue = self.queue, []
        for handle in pending:
            self._emit(handle)

    def user_selects(self, handle):
        """Simulate the user picking an item outside of history."""
        self.selected = handle
        self._emit(handle)

    def _emit(self, handle):
        for callback in list(self.listeners):
            callback(handle)


@pytest.fixture
def store():
    return HistoryStore()


@pytest.fixture
def environment():
    return FakeEnvironment()


@pytest.fixture
def bridge(store, environment):
    """A bridge attached for the duration of the test."""
    with SelectionBridge(store, environment) as attached:
        yield attached


@pytest.fixture
def sample_items(tmp_path):
    """Create sample item files in a temp directory."""
    docs = tmp_path / "docs"
    docs.mkdir()

    (docs / "alpha.md").write_text("# Alpha\n")
    (docs / "beta.md").write_text("# Beta\n")
    (docs / "notes.txt").write_text("plain notes\n")
    (docs / "image.png").write_bytes(b"\x89PNG\r\n")
    (docs / ".hidden.md").write_text("hidden\n")

    sub = docs / "subdir"
    sub.mkdir()
    (sub / "deep.md").write_text("# Deep\n")

    hidden_dir = docs / ".git"
    hidden_dir.mkdir()
    (hidden_dir / "HEAD.md").write_text("ref\n")

    return docs


@pytest.fixture
def sample_config(tmp_path, sample_items):
    """Create a Config pointing to sample_items directory."""
    from waypoint.config import Config

    return Config(
        scan_directory=sample_items,
        data_directory=tmp_path / "data",
    )
