"""End-to-end checks of history wiring inside the Textual app."""

import asyncio

import pytest

from waypoint.app import WaypointApp
from waypoint.config import HistoryConfig, WatcherConfig
from waypoint.widgets import HistoryPanel, ItemList, preview


@pytest.fixture
def app_config(sample_config):
    sample_config.watcher = WatcherConfig(enabled=False)
    return sample_config


def run(scenario):
    asyncio.run(scenario())


async def _settle(pilot, rounds=3):
    for _ in range(rounds):
        await pilot.pause()


async def _wait_for_items(app, pilot):
    await app.workers.wait_for_complete()
    await _settle(pilot)



def names(store):
    return [entry.display_name for entry in store.entries()]


def test_first_item_is_recorded_on_load(app_config):
    async def scenario():
        app = WaypointApp(app_config)
        async with app.run_test() as pilot:
            await _wait_for_items(app, pilot)
            assert names(app.history) == ["alpha.md"]
            assert app.history.current_index == 0

    run(scenario)


def test_back_does_not_record_navigation_echo(app_config):
    async def scenario():
        app = WaypointApp(app_config)
        async with app.run_test() as pilot:
            await _wait_for_items(app, pilot)

            await pilot.press("down")
            await pilot.pause()
            assert names(app.history) == ["alpha.md", "beta.md"]

            await pilot.press("b")
            await pilot.pause()
            item_list = app.query_one("#item-list", ItemList)
            assert item_list.get_highlighted_item().name == "alpha.md"
            assert names(app.history) == ["alpha.md", "beta.md"]
            assert app.history.current_index == 0
            assert app.history.can_move_forward()

            await pilot.press("f")
            await pilot.pause()
            assert item_list.get_highlighted_item().name == "beta.md"
            assert app.history.current_index == 1

    run(scenario)


def test_new_selection_after_back_drops_forward_branch(app_config):
    async def scenario():
        app = WaypointApp(app_config)
        async with app.run_test() as pilot:
            await _wait_for_items(app, pilot)

            for _ in range(3):
                await pilot.press("down")
                await pilot.pause()
            assert names(app.history) == ["alpha.md", "beta.md", "notes.txt", "deep.md"]

            await pilot.press("b")
            await pilot.pause()
            await pilot.press("b")
            await pilot.pause()
            assert app.history.current_index == 1

            await pilot.press("up")
            await pilot.pause()
            assert names(app.history) == ["alpha.md", "beta.md", "alpha.md"]
            assert app.history.current_index == 2
            assert not app.history.can_move_forward()

    run(scenario)


def test_back_at_start_warns_and_keeps_state(app_config):
    async def scenario():
        app = WaypointApp(app_config)
        async with app.run_test() as pilot:
            await _wait_for_items(app, pilot)
            await pilot.press("b")
            await pilot.pause()
            assert names(app.history) == ["alpha.md"]
            assert app.history.current_index == 0

    run(scenario)


def test_history_panel_reflects_store(app_config):
    async def scenario():
        app = WaypointApp(app_config)
        async with app.run_test() as pilot:
            await _wait_for_items(app, pilot)
            await pilot.press("down")
            await _settle(pilot)

            panel = app.query_one("#history-panel", HistoryPanel)
            assert panel.query_one("#history-back").disabled is False
            assert panel.query_one("#history-forward").disabled is True
            assert len(panel.list_view.children) == 2

    run(scenario)


def test_history_panel_catches_up_with_rapid_changes(app_config):
    async def scenario():
        app = WaypointApp(app_config)
        async with app.run_test() as pilot:
            await _wait_for_items(app, pilot)
            await pilot.press("down", "down", "b")
            await _settle(pilot)

            assert names(app.history) == ["alpha.md", "beta.md", "notes.txt"]
            panel = app.query_one("#history-panel", HistoryPanel)
            rows = list(panel.list_view.children)
            assert [row.entry_name for row in rows] == names(app.history)
            assert [row.current for row in rows] == [False, True, False]
            assert panel.list_view.index == 1

    run(scenario)


def test_rescan_keeps_highlight_without_recording(app_config):
    async def scenario():
        app = WaypointApp(app_config)
        async with app.run_test() as pilot:
            await _wait_for_items(app, pilot)
            await pilot.press("down")
            await pilot.pause()
            await pilot.press("down")
            await pilot.pause()
            await pilot.press("b")
            await pilot.pause()
            assert app.history.current_index == 1

            # Sorts before every existing item, shifting all indices
            (app_config.scan_directory / "aardvark.md").write_text("# Aardvark\n")
            await pilot.press("u")
            await _wait_for_items(app, pilot)

            item_list = app.query_one("#item-list", ItemList)
            assert item_list.items[0].name == "aardvark.md"
            assert item_list.list_view.index == 2
            assert item_list.get_highlighted_item().name == "beta.md"
            assert names(app.history) == ["alpha.md", "beta.md", "notes.txt"]
            assert app.history.current_index == 1
            assert app.history.can_move_forward()

    run(scenario)


def test_select_mode_navigation_does_not_block_next_selection(app_config):
    async def scenario():
        app_config.history = HistoryConfig(record_on="select")
        app = WaypointApp(app_config)
        async with app.run_test() as pilot:
            await _wait_for_items(app, pilot)
            assert app.history.is_empty()

            await pilot.press("enter")
            await pilot.pause()
            await pilot.press("down")
            await pilot.pause()
            assert names(app.history) == ["alpha.md"]

            await pilot.press("down")
            await pilot.pause()
            await pilot.press("enter")
            await pilot.pause()
            assert names(app.history) == ["alpha.md", "notes.txt"]

            await pilot.press("b")
            await pilot.pause()
            item_list = app.query_one("#item-list", ItemList)
            assert item_list.get_highlighted_item().name == "alpha.md"
            assert app.history.current_index == 0
            assert not app._bridge.suppression_active

            # Re-confirming the entry navigated to changes nothing
            await pilot.press("enter")
            await pilot.pause()
            assert names(app.history) == ["alpha.md", "notes.txt"]
            assert app.history.current_index == 0

            # The next genuine selection is recorded
            await pilot.press("down")
            await pilot.pause()
            await pilot.press("enter")
            await pilot.pause()
            assert names(app.history) == ["alpha.md", "beta.md"]
            assert app.history.current_index == 1

    run(scenario)


def test_removed_current_item_stays_in_history(app_config):
    async def scenario():
        app = WaypointApp(app_config)
        async with app.run_test() as pilot:
            await _wait_for_items(app, pilot)
            alpha = app_config.scan_directory / "alpha.md"
            preview._file_cache.put(alpha, alpha.stat().st_mtime, "cached")

            alpha.unlink()
            app._handle_file_change({alpha})
            await _wait_for_items(app, pilot)

            assert str(alpha) not in preview._file_cache._cache
            item_list = app.query_one("#item-list", ItemList)
            assert alpha not in item_list.items
            assert names(app.history) == ["alpha.md", "beta.md"]
            assert app.history.handle_at(0) == alpha

    run(scenario)
