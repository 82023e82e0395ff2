from __future__ import annotations

from vidshelf.models import VideoRecord, ViewMode
from vidshelf.navigation import (
    NavIntent,
    columns_for_width,
    navigate,
    next_grid_index,
    next_list_index,
)
from vidshelf.reconcile import load_library
from vidshelf.state import NO_SELECTION, LibraryState, select_index


def _state(count: int, mode: ViewMode) -> LibraryState:
    videos = [
        VideoRecord(id=f"v{index:02d}", filename=f"{index:02d}.mp4", title=f"{index:02d}", path="")
        for index in range(count)
    ]
    state = LibraryState(view_mode=mode)
    load_library(state, videos)
    return state


def test_list_next_wraps_to_start() -> None:
    assert next_list_index(4, 5, NavIntent.NEXT) == 0
    assert next_list_index(1, 5, NavIntent.NEXT) == 2


def test_list_previous_wraps_to_end() -> None:
    assert next_list_index(0, 5, NavIntent.PREVIOUS) == 4


def test_list_ignores_grid_intents() -> None:
    assert next_list_index(2, 5, NavIntent.UP) == 2


def test_list_without_selection_starts_at_zero() -> None:
    assert next_list_index(NO_SELECTION, 3, NavIntent.PREVIOUS) == 0


def test_empty_sequence_has_no_target() -> None:
    assert next_list_index(0, 0, NavIntent.NEXT) == NO_SELECTION
    assert next_grid_index(0, 0, 3, NavIntent.DOWN) == NO_SELECTION


def test_grid_down_wraps_to_top_of_column() -> None:
    # 3 columns, 7 items: rows [0 1 2] [3 4 5] [6]
    assert next_grid_index(1, 7, 3, NavIntent.DOWN) == 4
    assert next_grid_index(4, 7, 3, NavIntent.DOWN) == 1
    assert next_grid_index(6, 7, 3, NavIntent.DOWN) == 0


def test_grid_up_wraps_to_last_item_in_column() -> None:
    assert next_grid_index(0, 7, 3, NavIntent.UP) == 6
    assert next_grid_index(1, 7, 3, NavIntent.UP) == 4
    assert next_grid_index(5, 7, 3, NavIntent.UP) == 2


def test_grid_right_wraps_within_row() -> None:
    assert next_grid_index(0, 7, 3, NavIntent.RIGHT) == 1
    assert next_grid_index(2, 7, 3, NavIntent.RIGHT) == 0
    assert next_grid_index(6, 7, 3, NavIntent.RIGHT) == 6


def test_grid_left_wraps_within_row() -> None:
    assert next_grid_index(3, 7, 3, NavIntent.LEFT) == 5
    assert next_grid_index(6, 7, 3, NavIntent.LEFT) == 6
    assert next_grid_index(4, 7, 3, NavIntent.LEFT) == 3


def test_grid_targets_stay_in_bounds() -> None:
    length, columns = 11, 4
    for index in range(length):
        for intent in (NavIntent.UP, NavIntent.DOWN, NavIntent.LEFT, NavIntent.RIGHT):
            assert 0 <= next_grid_index(index, length, columns, intent) < length


def test_grid_right_cycles_back_after_full_row() -> None:
    length, columns = 12, 4
    for start in range(length):
        index = start
        for _ in range(columns):
            index = next_grid_index(index, length, columns, NavIntent.RIGHT)
        assert index == start


def test_single_row_grid_wraps_right_and_left() -> None:
    assert next_grid_index(3, 4, 8, NavIntent.RIGHT) == 0
    assert next_grid_index(0, 4, 8, NavIntent.LEFT) == 3


def test_grid_ignores_list_intents() -> None:
    assert next_grid_index(2, 7, 3, NavIntent.NEXT) == 2


def test_navigate_selects_record_in_list_mode() -> None:
    state = _state(3, ViewMode.LIST)
    select_index(state, 2)
    video = navigate(state, NavIntent.NEXT)
    assert video is not None
    assert video.id == "v00"
    assert state.cursor == 0


def test_navigate_grid_uses_columns() -> None:
    state = _state(7, ViewMode.GRID)
    select_index(state, 1)
    navigate(state, NavIntent.DOWN, columns=3)
    assert state.cursor == 4


def test_navigate_without_selection_starts_at_first() -> None:
    state = _state(3, ViewMode.GRID)
    video = navigate(state, NavIntent.UP, columns=2)
    assert video is not None
    assert state.cursor == 0


def test_navigate_empty_library() -> None:
    state = _state(0, ViewMode.LIST)
    assert navigate(state, NavIntent.NEXT) is None
    assert state.cursor == NO_SELECTION


def test_navigate_mismatched_intent_keeps_selection() -> None:
    state = _state(3, ViewMode.LIST)
    select_index(state, 1)
    navigate(state, NavIntent.DOWN)
    assert state.cursor == 1


def test_columns_for_width() -> None:
    assert columns_for_width(100, 28) == 3
    assert columns_for_width(10, 28) == 1
    assert columns_for_width(100, 0) == 1


def test_grid_right_stays_in_short_last_row() -> None:
    # 3 columns, 7 items: right never leaves the current row
    index = 0
    for _ in range(7):
        index = next_grid_index(index, 7, 3, NavIntent.RIGHT)
    assert index == 1
    assert next_grid_index(6, 7, 3, NavIntent.RIGHT) == 6
    assert next_grid_index(4, 7, 3, NavIntent.RIGHT) == 5
