from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import replace

from .errors import Outcome
from .models import TagRecord, VideoRecord
from .state import LibraryState, recompute, register_tags

logger = logging.getLogger(__name__)


def load_library(
    state: LibraryState,
    videos: Iterable[VideoRecord],
    tags: Iterable[TagRecord] = (),
) -> None:
    state.videos = {}
    state.tags = {}
    for tag in tags:
        state.tags.setdefault(tag.name, tag)
    for video in videos:
        if video.id in state.videos:
            logger.warning("Skipping duplicate video id %s (%s)", video.id, video.path)
            continue
        state.videos[video.id] = video
        register_tags(state, video.tags)
    stale = state.filter.required_tags - set(state.tags)
    if stale:
        logger.info("Dropping unknown tags from filter: %s", ", ".join(sorted(stale)))
        state.filter = replace(
            state.filter, required_tags=state.filter.required_tags - stale
        )
    recompute(state)


def on_external_add(state: LibraryState, record: VideoRecord) -> Outcome:
    if record.id in state.videos:
        return Outcome.NOOP
    state.videos[record.id] = record
    register_tags(state, record.tags)
    recompute(state)
    return Outcome.APPLIED


def on_external_remove(state: LibraryState, video_id: str) -> Outcome:
    if state.videos.pop(video_id, None) is None:
        return Outcome.NOT_FOUND
    if state.selected_id == video_id:
        state.selected_id = None
    recompute(state)
    return Outcome.APPLIED


def find_by_path(state: LibraryState, path: str) -> VideoRecord | None:
    for video in state.videos.values():
        if video.path == path:
            return video
    return None
