from __future__ import annotations

from vidshelf.errors import Outcome
from vidshelf.models import FilterCriteria, SortDirection, SortField, SortSpec, VideoRecord
from vidshelf.reconcile import find_by_path, load_library, on_external_add, on_external_remove
from vidshelf.state import LibraryState, select_video


def _video(video_id: str, rating: int = 0, *tags: str) -> VideoRecord:
    return VideoRecord(
        id=video_id,
        filename=f"{video_id}.mp4",
        title=video_id,
        path=f"/videos/{video_id}.mp4",
        rating=rating,
        tags=tags,
    )


def test_load_library_skips_duplicate_ids() -> None:
    state = LibraryState()
    load_library(state, [_video("a", 1), _video("a", 5), _video("b")])
    assert len(state.videos) == 2
    assert state.videos["a"].rating == 1


def test_load_library_registers_video_tags() -> None:
    state = LibraryState()
    load_library(state, [_video("a", 0, "cat"), _video("b", 0, "dog", "cat")])
    assert list(state.tags) == ["cat", "dog"]


def test_external_add_respects_filter_and_sort() -> None:
    state = LibraryState(
        filter=FilterCriteria(min_rating=3),
        sort=SortSpec(SortField.RATING, SortDirection.DESC),
    )
    load_library(state, [_video("a", 5), _video("b", 3)])
    assert on_external_add(state, _video("c", 4, "new")) is Outcome.APPLIED
    assert [video.id for video in state.visible] == ["a", "c", "b"]
    assert "new" in state.tags
    assert on_external_add(state, _video("d", 1)) is Outcome.APPLIED
    assert "d" in state.videos
    assert [video.id for video in state.visible] == ["a", "c", "b"]


def test_external_add_is_idempotent() -> None:
    state = LibraryState()
    load_library(state, [_video("a", 2)])
    assert on_external_add(state, _video("a", 5)) is Outcome.NOOP
    assert state.videos["a"].rating == 2


def test_external_remove_clears_selection() -> None:
    state = LibraryState()
    load_library(state, [_video("a"), _video("b")])
    select_video(state, "a")
    assert on_external_remove(state, "a") is Outcome.APPLIED
    assert state.selected_id is None
    assert [video.id for video in state.visible] == ["b"]


def test_external_remove_keeps_other_selection() -> None:
    state = LibraryState()
    load_library(state, [_video("a"), _video("b"), _video("c")])
    select_video(state, "c")
    on_external_remove(state, "a")
    assert state.selected_id == "c"
    assert state.cursor == 1


def test_external_remove_unknown_id() -> None:
    state = LibraryState()
    load_library(state, [_video("a")])
    assert on_external_remove(state, "zzz") is Outcome.NOT_FOUND
    assert len(state.videos) == 1


def test_external_remove_keeps_tag_registry() -> None:
    state = LibraryState()
    load_library(state, [_video("a", 0, "cat")])
    on_external_remove(state, "a")
    assert "cat" in state.tags


def test_find_by_path() -> None:
    state = LibraryState()
    load_library(state, [_video("a"), _video("b")])
    assert find_by_path(state, "/videos/b.mp4").id == "b"
    assert find_by_path(state, "/nowhere.mp4") is None


def test_load_library_drops_unknown_filter_tags() -> None:
    state = LibraryState(filter=FilterCriteria(required_tags=frozenset({"cat"})))
    load_library(state, [_video("a", 0, "dog"), _video("b")])
    assert state.filter.required_tags == frozenset()
    assert [video.id for video in state.visible] == ["a", "b"]
