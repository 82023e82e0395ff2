from __future__ import annotations

from enum import Enum

from .models import VideoRecord, ViewMode
from .state import NO_SELECTION, LibraryState, select_index


class NavIntent(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    PREVIOUS = "previous"
    NEXT = "next"


GRID_INTENTS = frozenset({NavIntent.UP, NavIntent.DOWN, NavIntent.LEFT, NavIntent.RIGHT})
LIST_INTENTS = frozenset({NavIntent.PREVIOUS, NavIntent.NEXT})


def next_list_index(index: int, length: int, intent: NavIntent) -> int:
    if length <= 0:
        return NO_SELECTION
    if intent not in LIST_INTENTS:
        return index
    if index < 0 or index >= length:
        return 0
    step = -1 if intent is NavIntent.PREVIOUS else 1
    candidate = index + step
    if candidate < 0:
        return length - 1
    if candidate >= length:
        return 0
    return candidate


def next_grid_index(index: int, length: int, columns: int, intent: NavIntent) -> int:
    if length <= 0:
        return NO_SELECTION
    if intent not in GRID_INTENTS:
        return index
    if index < 0 or index >= length:
        return 0
    columns = max(1, columns)
    column = index % columns
    row_start = index - column

    if intent is NavIntent.DOWN:
        candidate = index + columns
        if candidate >= length:
            return column
        return candidate

    if intent is NavIntent.UP:
        candidate = index - columns
        if candidate >= 0:
            return candidate
        last_row_start = ((length - 1) // columns) * columns
        candidate = last_row_start + column
        if candidate > length - 1:
            candidate -= columns
        return candidate

    if intent is NavIntent.RIGHT:
        if column == columns - 1 or index == length - 1:
            return row_start
        return index + 1

    if column == 0:
        return min(row_start + columns - 1, length - 1)
    return index - 1


def navigate(state: LibraryState, intent: NavIntent, columns: int = 1) -> VideoRecord | None:
    """Move the selection and return the newly selected record."""
    length = len(state.visible)
    if length == 0:
        return None
    current = state.cursor
    if state.view_mode is ViewMode.GRID:
        target = next_grid_index(current, length, columns, intent)
    else:
        target = next_list_index(current, length, intent)
    if target == NO_SELECTION:
        return state.selected
    return select_index(state, target)


def columns_for_width(container_width: int, item_width: int) -> int:
    if item_width <= 0:
        return 1
    return max(1, container_width // item_width)
