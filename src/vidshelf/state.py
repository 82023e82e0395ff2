"""Process-wide library state and the helpers that keep it coherent.

The canonical collection is the only place records are stored.  The visible
sequence is derived from it by :func:`recompute` and the selection is kept
as a video id, so every projection is rebuilt rather than patched.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field, replace

from .models import (
    RATING_MAX,
    FilterCriteria,
    SortDirection,
    SortField,
    SortSpec,
    TagRecord,
    VideoRecord,
    ViewMode,
)
from .pipeline import compute_visible

NO_SELECTION = -1


@dataclass
class LibraryStats:
    total_videos: int
    total_tags: int
    total_duration: float
    total_size: int


@dataclass
class LibraryState:
    videos: dict[str, VideoRecord] = field(default_factory=dict)
    tags: dict[str, TagRecord] = field(default_factory=dict)
    filter: FilterCriteria = field(default_factory=FilterCriteria)
    sort: SortSpec = field(default_factory=SortSpec)
    view_mode: ViewMode = ViewMode.GRID
    selected_id: str | None = None
    visible: list[VideoRecord] = field(default_factory=list)

    @property
    def cursor(self) -> int:
        if self.selected_id is None:
            return NO_SELECTION
        for index, video in enumerate(self.visible):
            if video.id == self.selected_id:
                return index
        return NO_SELECTION

    @property
    def selected(self) -> VideoRecord | None:
        if self.selected_id is None:
            return None
        return self.videos.get(self.selected_id)


def recompute(state: LibraryState) -> None:
    state.visible = compute_visible(state.videos, state.filter, state.sort)
    if state.selected_id is None:
        return
    if not any(video.id == state.selected_id for video in state.visible):
        state.selected_id = None


def select_index(state: LibraryState, index: int) -> VideoRecord | None:
    if index == NO_SELECTION:
        state.selected_id = None
        return None
    if not state.visible:
        return None
    index = max(0, min(index, len(state.visible) - 1))
    video = state.visible[index]
    state.selected_id = video.id
    return video


def select_video(state: LibraryState, video_id: str) -> VideoRecord | None:
    for video in state.visible:
        if video.id == video_id:
            state.selected_id = video_id
            return video
    return None


def clear_selection(state: LibraryState) -> None:
    state.selected_id = None


def register_tags(state: LibraryState, names: tuple[str, ...] | list[str]) -> None:
    for name in names:
        if name not in state.tags:
            state.tags[name] = TagRecord(name)


def is_tag_referenced(state: LibraryState, name: str) -> bool:
    return any(video.has_tag(name) for video in state.videos.values())


def set_filter(state: LibraryState, criteria: FilterCriteria) -> None:
    state.filter = criteria
    recompute(state)


def set_rating_filter(state: LibraryState, min_rating: int) -> None:
    min_rating = max(0, min(RATING_MAX, min_rating))
    set_filter(state, replace(state.filter, min_rating=min_rating))


def set_search_text(state: LibraryState, text: str) -> None:
    set_filter(state, replace(state.filter, search_text=text))


def toggle_tag_filter(state: LibraryState, name: str) -> bool:
    """Toggle ``name`` in the required tags; returns True when now required."""
    required = set(state.filter.required_tags)
    if name in required:
        required.discard(name)
        active = False
    else:
        required.add(name)
        active = True
    set_filter(state, replace(state.filter, required_tags=frozenset(required)))
    return active


def clear_tag_filter(state: LibraryState) -> None:
    set_filter(state, replace(state.filter, required_tags=frozenset()))


def toggle_directory(state: LibraryState, directory: str) -> bool:
    selected = set(state.filter.directories)
    if directory in selected:
        selected.discard(directory)
        active = False
    else:
        selected.add(directory)
        active = True
    set_filter(state, replace(state.filter, directories=frozenset(selected)))
    return active


def set_sort(state: LibraryState, sort: SortSpec) -> None:
    state.sort = sort
    recompute(state)


def cycle_sort_field(state: LibraryState) -> SortField:
    fields = list(SortField)
    position = fields.index(state.sort.field)
    next_field = fields[(position + 1) % len(fields)]
    set_sort(state, replace(state.sort, field=next_field))
    return next_field


def toggle_sort_direction(state: LibraryState) -> SortDirection:
    direction = state.sort.direction.flipped()
    set_sort(state, replace(state.sort, direction=direction))
    return direction


def set_view_mode(state: LibraryState, mode: ViewMode) -> None:
    state.view_mode = mode


def toggle_view_mode(state: LibraryState) -> ViewMode:
    mode = ViewMode.LIST if state.view_mode is ViewMode.GRID else ViewMode.GRID
    state.view_mode = mode
    return mode


def tag_counts(state: LibraryState) -> list[tuple[str, int]]:
    counts: Counter[str] = Counter()
    for video in state.videos.values():
        counts.update(video.tags)
    return [(name, counts.get(name, 0)) for name in state.tags]


def library_stats(state: LibraryState) -> LibraryStats:
    videos = list(state.videos.values())
    return LibraryStats(
        total_videos=len(videos),
        total_tags=len(state.tags),
        total_duration=sum(video.duration for video in videos),
        total_size=sum(video.size for video in videos),
    )
