from __future__ import annotations

from vidshelf.models import FilterCriteria, SortDirection, SortField, SortSpec, VideoRecord
from vidshelf.pipeline import compute_visible, matches_directories, sort_videos


def _video(video_id: str, **kwargs) -> VideoRecord:
    kwargs.setdefault("filename", f"{video_id}.mp4")
    kwargs.setdefault("title", video_id)
    kwargs.setdefault("path", f"/videos/{video_id}.mp4")
    return VideoRecord(id=video_id, **kwargs)


def _ids(videos: list[VideoRecord]) -> list[str]:
    return [video.id for video in videos]


def test_rating_filter_and_descending_sort() -> None:
    videos = [_video(f"v{rating}", rating=rating) for rating in [0, 3, 5, 2, 4]]
    visible = compute_visible(
        videos,
        FilterCriteria(min_rating=3),
        SortSpec(SortField.RATING, SortDirection.DESC),
    )
    assert [video.rating for video in visible] == [5, 4, 3]


def test_zero_min_rating_keeps_unrated() -> None:
    videos = [_video("a", rating=0), _video("b", rating=2)]
    visible = compute_visible(videos, FilterCriteria(), SortSpec())
    assert _ids(visible) == ["a", "b"]


def test_search_matches_any_field_case_insensitive() -> None:
    videos = [
        _video("a", title="Holiday in Rome"),
        _video("b", filename="ROME_trip.mkv"),
        _video("c", description="Day trip to rome"),
        _video("d", tags=("rome",)),
        _video("e", title="Paris"),
    ]
    visible = compute_visible(videos, FilterCriteria(search_text="  RoMe "), SortSpec())
    assert sorted(_ids(visible)) == ["a", "b", "c", "d"]


def test_search_text_override_wins_over_criteria() -> None:
    videos = [_video("a", title="cats"), _video("b", title="dogs")]
    visible = compute_visible(
        videos, FilterCriteria(search_text="cats"), SortSpec(), search_text="dogs"
    )
    assert _ids(visible) == ["b"]


def test_required_tags_use_and_semantics() -> None:
    videos = [
        _video("a", tags=("cat", "funny")),
        _video("b", tags=("cat",)),
        _video("c", tags=("funny",)),
    ]
    visible = compute_visible(
        videos, FilterCriteria(required_tags=frozenset({"cat", "funny"})), SortSpec()
    )
    assert _ids(visible) == ["a"]


def test_empty_filter_keeps_everything() -> None:
    videos = {video.id: video for video in [_video("b"), _video("a"), _video("c")]}
    visible = compute_visible(videos, FilterCriteria(), SortSpec())
    assert _ids(visible) == ["a", "b", "c"]


def test_title_sort_is_case_insensitive() -> None:
    videos = [_video("1", title="banana"), _video("2", title="Apple"), _video("3", title="cherry")]
    ordered = sort_videos(videos, SortSpec(SortField.TITLE))
    assert _ids(ordered) == ["2", "1", "3"]


def test_descending_is_reverse_of_ascending() -> None:
    videos = [
        _video("a", size=30),
        _video("b", size=10),
        _video("c", size=30),
        _video("d", size=20),
    ]
    ascending = sort_videos(videos, SortSpec(SortField.SIZE, SortDirection.ASC))
    descending = sort_videos(videos, SortSpec(SortField.SIZE, SortDirection.DESC))
    assert _ids(descending) == list(reversed(_ids(ascending)))


def test_unknown_duration_sorts_first_ascending() -> None:
    videos = [_video("a", duration=40.0), _video("b", duration=5.0), _video("c")]
    ordered = sort_videos(videos, SortSpec(SortField.DURATION))
    assert _ids(ordered) == ["c", "b", "a"]


def test_directory_filter_matches_nested_paths() -> None:
    video = _video("a", path="/media/movies/2023/a.mp4")
    assert matches_directories(video, ["/media/movies"])
    assert matches_directories(video, [])
    assert not matches_directories(video, ["/media/shows"])
    assert not matches_directories(video, ["/media/mov"])


def test_filters_combine() -> None:
    videos = [
        _video("a", rating=4, tags=("cat",), path="/m/a.mp4"),
        _video("b", rating=2, tags=("cat",), path="/m/b.mp4"),
        _video("c", rating=5, tags=("dog",), path="/m/c.mp4"),
        _video("d", rating=5, tags=("cat",), path="/other/d.mp4"),
    ]
    criteria = FilterCriteria(
        min_rating=3,
        required_tags=frozenset({"cat"}),
        directories=frozenset({"/m"}),
    )
    assert _ids(compute_visible(videos, criteria, SortSpec())) == ["a"]


def test_empty_directory_set_disables_directory_filter() -> None:
    videos = [_video("a", path="/m/a.mp4"), _video("b", path="/n/b.mp4")]
    visible = compute_visible(videos, FilterCriteria(directories=frozenset()), SortSpec())
    assert _ids(visible) == ["a", "b"]
