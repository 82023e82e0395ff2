from __future__ import annotations

from vidshelf.models import (
    FilterCriteria,
    SortDirection,
    SortField,
    SortSpec,
    TagRecord,
    VideoRecord,
    ViewMode,
)
from vidshelf.reconcile import load_library
from vidshelf.state import (
    NO_SELECTION,
    LibraryState,
    clear_tag_filter,
    cycle_sort_field,
    library_stats,
    select_index,
    select_video,
    set_rating_filter,
    set_search_text,
    set_sort,
    tag_counts,
    toggle_directory,
    toggle_sort_direction,
    toggle_tag_filter,
    toggle_view_mode,
)


def _video(video_id: str, rating: int = 0, *tags: str, **kwargs) -> VideoRecord:
    return VideoRecord(
        id=video_id,
        filename=f"{video_id}.mp4",
        title=video_id,
        path=kwargs.pop("path", f"/videos/{video_id}.mp4"),
        rating=rating,
        tags=tags,
        **kwargs,
    )


def _state(*videos: VideoRecord) -> LibraryState:
    state = LibraryState()
    load_library(state, videos)
    return state


def test_select_index_clamps_and_clears() -> None:
    state = _state(_video("a"), _video("b"), _video("c"))
    assert select_index(state, 10).id == "c"
    assert select_index(state, -5).id == "a"
    assert select_index(state, NO_SELECTION) is None
    assert state.selected_id is None
    assert state.cursor == NO_SELECTION


def test_select_index_on_empty_visible() -> None:
    state = _state()
    assert select_index(state, 0) is None
    assert state.selected_id is None


def test_selection_follows_record_after_resort() -> None:
    state = _state(_video("a", 1), _video("b", 5), _video("c", 3))
    select_video(state, "c")
    assert state.cursor == 2
    set_sort(state, SortSpec(SortField.RATING, SortDirection.DESC))
    assert state.selected_id == "c"
    assert state.cursor == 1


def test_selection_cleared_when_filtered_out() -> None:
    state = _state(_video("a", 1), _video("b", 5))
    select_video(state, "a")
    set_rating_filter(state, 3)
    assert [video.id for video in state.visible] == ["b"]
    assert state.selected_id is None
    assert state.selected is None


def test_select_video_ignores_hidden_records() -> None:
    state = _state(_video("a", 1), _video("b", 5))
    set_rating_filter(state, 3)
    assert select_video(state, "a") is None
    assert state.selected_id is None


def test_rating_filter_is_clamped() -> None:
    state = _state(_video("a", 5))
    set_rating_filter(state, 9)
    assert state.filter.min_rating == 5


def test_search_text_recomputes_visible() -> None:
    state = _state(_video("alpha"), _video("beta"))
    set_search_text(state, "ALP")
    assert [video.id for video in state.visible] == ["alpha"]
    set_search_text(state, "")
    assert len(state.visible) == 2


def test_toggle_tag_filter_round_trip() -> None:
    state = _state(_video("a", 0, "cat"), _video("b", 0, "dog"))
    assert toggle_tag_filter(state, "cat") is True
    assert [video.id for video in state.visible] == ["a"]
    assert toggle_tag_filter(state, "cat") is False
    assert len(state.visible) == 2
    toggle_tag_filter(state, "dog")
    clear_tag_filter(state)
    assert state.filter.required_tags == frozenset()


def test_toggle_directory() -> None:
    state = _state(_video("a", path="/m/a.mp4"), _video("b", path="/n/b.mp4"))
    assert toggle_directory(state, "/m") is True
    assert [video.id for video in state.visible] == ["a"]
    assert toggle_directory(state, "/m") is False
    assert len(state.visible) == 2


def test_cycle_sort_field_wraps() -> None:
    state = _state(_video("a"))
    fields = [cycle_sort_field(state) for _ in SortField]
    assert fields[-1] is SortField.TITLE
    assert fields[0] is SortField.FILENAME


def test_toggle_sort_direction_reverses_visible() -> None:
    state = _state(_video("a"), _video("b"), _video("c"))
    assert toggle_sort_direction(state) is SortDirection.DESC
    assert [video.id for video in state.visible] == ["c", "b", "a"]


def test_toggle_view_mode() -> None:
    state = _state()
    assert toggle_view_mode(state) is ViewMode.LIST
    assert toggle_view_mode(state) is ViewMode.GRID


def test_filter_is_empty() -> None:
    assert FilterCriteria().is_empty
    assert FilterCriteria(search_text="  ").is_empty
    assert not FilterCriteria(min_rating=1).is_empty


def test_tag_counts_follow_registry_order() -> None:
    state = LibraryState()
    load_library(
        state,
        [_video("a", 0, "cat", "dog"), _video("b", 0, "cat")],
        [TagRecord("unused"), TagRecord("cat")],
    )
    assert tag_counts(state) == [("unused", 0), ("cat", 2), ("dog", 1)]


def test_library_stats() -> None:
    state = _state(
        _video("a", 0, "cat", size=100, duration=60.0),
        _video("b", 0, size=50, duration=30.0),
    )
    stats = library_stats(state)
    assert stats.total_videos == 2
    assert stats.total_tags == 1
    assert stats.total_duration == 90.0
    assert stats.total_size == 150
