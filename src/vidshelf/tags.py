from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum

from .errors import DuplicateTagError, Outcome
from .models import TagRecord
from .state import LibraryState, is_tag_referenced, recompute, register_tags

logger = logging.getLogger(__name__)


class TagAction(Enum):
    ADD = "add"
    REMOVE = "remove"


@dataclass(frozen=True)
class TagChange:
    video_id: str
    tag: str
    action: TagAction


def normalize_tag_name(value: str) -> str:
    return value.strip()


def parse_tag_input(text: str) -> list[str]:
    names: list[str] = []
    for part in text.split():
        name = normalize_tag_name(part)
        if name and name not in names:
            names.append(name)
    return names


def add_tag(state: LibraryState, video_id: str, tag: str) -> Outcome:
    name = normalize_tag_name(tag)
    video = state.videos.get(video_id)
    if video is None:
        return Outcome.NOT_FOUND
    if not name or video.has_tag(name):
        return Outcome.NOOP
    state.videos[video_id] = replace(video, tags=(*video.tags, name))
    register_tags(state, [name])
    recompute(state)
    return Outcome.APPLIED


def remove_tag(state: LibraryState, video_id: str, tag: str) -> Outcome:
    name = normalize_tag_name(tag)
    video = state.videos.get(video_id)
    if video is None:
        return Outcome.NOT_FOUND
    if not video.has_tag(name):
        return Outcome.NOOP
    state.videos[video_id] = replace(
        video, tags=tuple(existing for existing in video.tags if existing != name)
    )
    if not is_tag_referenced(state, name):
        logger.debug("Pruning unreferenced tag %r", name)
        state.tags.pop(name, None)
        _drop_from_filter(state, name)
    recompute(state)
    return Outcome.APPLIED


def rename_tag(state: LibraryState, old: str, new: str) -> Outcome:
    old_name = normalize_tag_name(old)
    new_name = normalize_tag_name(new)
    if not new_name or new_name == old_name:
        return Outcome.NOOP
    if old_name not in state.tags and not is_tag_referenced(state, old_name):
        return Outcome.NOT_FOUND
    if new_name in state.tags or is_tag_referenced(state, new_name):
        raise DuplicateTagError(new_name)

    renamed: dict[str, TagRecord] = {}
    for name, record in state.tags.items():
        if name == old_name:
            renamed[new_name] = TagRecord(new_name)
        else:
            renamed[name] = record
    state.tags = renamed
    register_tags(state, [new_name])
    for video_id, video in list(state.videos.items()):
        if video.has_tag(old_name):
            state.videos[video_id] = replace(
                video,
                tags=tuple(new_name if name == old_name else name for name in video.tags),
            )
    required = state.filter.required_tags
    if old_name in required:
        state.filter = replace(
            state.filter, required_tags=frozenset((required - {old_name}) | {new_name})
        )
    recompute(state)
    return Outcome.APPLIED


def delete_tag(state: LibraryState, tag: str) -> Outcome:
    name = normalize_tag_name(tag)
    if name not in state.tags and not is_tag_referenced(state, name):
        return Outcome.NOT_FOUND
    state.tags.pop(name, None)
    for video_id, video in list(state.videos.items()):
        if video.has_tag(name):
            state.videos[video_id] = replace(
                video, tags=tuple(existing for existing in video.tags if existing != name)
            )
    _drop_from_filter(state, name)
    recompute(state)
    return Outcome.APPLIED


def apply_tag_changes(state: LibraryState, changes: list[TagChange]) -> list[Outcome]:
    outcomes: list[Outcome] = []
    for change in changes:
        if change.action is TagAction.ADD:
            outcomes.append(add_tag(state, change.video_id, change.tag))
        else:
            outcomes.append(remove_tag(state, change.video_id, change.tag))
    return outcomes


def plan_bulk_changes(
    state: LibraryState, video_ids: list[str], text: str
) -> list[TagChange]:
    """Turn ``+tag -tag`` input into changes for the given videos.

    Bare names count as additions. Changes that would not alter a video are
    left out.
    """
    changes: list[TagChange] = []
    for token in text.split():
        action = TagAction.REMOVE if token.startswith("-") else TagAction.ADD
        name = normalize_tag_name(token.lstrip("+-"))
        if not name:
            continue
        for video_id in video_ids:
            video = state.videos.get(video_id)
            if video is None:
                continue
            has_tag = video.has_tag(name)
            if action is TagAction.ADD and not has_tag:
                changes.append(TagChange(video_id, name, action))
            elif action is TagAction.REMOVE and has_tag:
                changes.append(TagChange(video_id, name, action))
    return changes


def _drop_from_filter(state: LibraryState, name: str) -> None:
    required = state.filter.required_tags
    if name in required:
        state.filter = replace(state.filter, required_tags=required - {name})
