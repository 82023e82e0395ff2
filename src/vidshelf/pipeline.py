from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import PurePath
from typing import Any

from .models import FilterCriteria, SortDirection, SortSpec, VideoRecord


def compute_visible(
    videos: Mapping[str, VideoRecord] | Iterable[VideoRecord],
    criteria: FilterCriteria,
    sort: SortSpec,
    *,
    search_text: str | None = None,
) -> list[VideoRecord]:
    records = videos.values() if isinstance(videos, Mapping) else videos
    query = criteria.search_text if search_text is None else search_text
    needle = query.strip().casefold()

    kept = [
        video
        for video in records
        if matches_rating(video, criteria.min_rating)
        and matches_text(video, needle)
        and matches_tags(video, criteria.required_tags)
        and matches_directories(video, criteria.directories)
    ]
    return sort_videos(kept, sort)


def matches_rating(video: VideoRecord, min_rating: int) -> bool:
    if min_rating <= 0:
        return True
    return video.rating >= min_rating


def matches_text(video: VideoRecord, needle: str) -> bool:
    if not needle:
        return True
    fields = (video.title, video.filename, video.description, *video.tags)
    return any(needle in value.casefold() for value in fields if value)


def matches_tags(video: VideoRecord, required: Iterable[str]) -> bool:
    return all(video.has_tag(tag) for tag in required)


def matches_directories(video: VideoRecord, directories: Iterable[str]) -> bool:
    selected = list(directories)
    if not selected:
        return True
    path = PurePath(video.path)
    return any(_is_under(path, PurePath(directory)) for directory in selected)


def sort_videos(videos: list[VideoRecord], sort: SortSpec) -> list[VideoRecord]:
    attribute = sort.field.attribute
    ordered = sorted(videos, key=lambda video: _sort_key(getattr(video, attribute, None)))
    if sort.direction is SortDirection.DESC:
        ordered.reverse()
    return ordered


def _sort_key(value: Any) -> tuple[int, Any]:
    # Missing values sort after everything comparable.
    if value is None:
        return (1, 0)
    if isinstance(value, str):
        return (0, value.casefold())
    return (0, value)


def _is_under(path: PurePath, directory: PurePath) -> bool:
    if path == directory:
        return True
    return directory in path.parents
