"""Owning shell around :class:`LibraryState`.

Every user mutation is applied to the local state first and then persisted
through the store.  When the store call fails the caller gets an
:class:`ExternalFailure`; the local change stays in place.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from typing import Any

from . import edits, reconcile, state as library, tags
from .errors import ExternalFailure, NotFoundError, Outcome, StoreError
from .models import FilterCriteria, SortSpec, VideoRecord, ViewMode
from .navigation import NavIntent, navigate
from .state import LibraryState
from .store import LibraryStore, StoreEvent, StoreEventKind

logger = logging.getLogger(__name__)


class LibraryController:
    def __init__(self, store: LibraryStore, state: LibraryState | None = None) -> None:
        self.store = store
        self.state = state or LibraryState()

    async def load(self) -> None:
        videos = await self._call("list videos", self.store.list_videos())
        tag_records = await self._call("list tags", self.store.list_tags())
        selected_id = self.state.selected_id
        reconcile.load_library(self.state, videos, tag_records)
        if selected_id is not None:
            library.select_video(self.state, selected_id)
        logger.info("Library loaded: %d videos, %d tags", len(videos), len(tag_records))

    async def add_tags(self, video_id: str, text: str) -> list[str]:
        """Add every whitespace-separated tag in ``text``; returns the ones added."""
        added: list[str] = []
        for name in tags.parse_tag_input(text):
            outcome = tags.add_tag(self.state, video_id, name)
            if outcome is Outcome.NOT_FOUND:
                break
            if outcome is Outcome.APPLIED:
                added.append(name)
        unsaved: list[str] = []
        for name in added:
            try:
                await self._call("add tag", self.store.add_tag_to_video(video_id, name))
            except ExternalFailure:
                unsaved.append(name)
        if unsaved:
            raise ExternalFailure("add tag", f"tags not saved: {', '.join(unsaved)}")
        return added

    async def remove_tag(self, video_id: str, tag: str) -> Outcome:
        outcome = tags.remove_tag(self.state, video_id, tag)
        if outcome.changed:
            await self._call("remove tag", self.store.remove_tag_from_video(video_id, tag))
        return outcome

    async def rename_tag(self, old: str, new: str) -> Outcome:
        outcome = tags.rename_tag(self.state, old, new)
        if outcome.changed:
            await self._call("rename tag", self.store.rename_tag(old.strip(), new.strip()))
        return outcome

    async def delete_tag(self, tag: str) -> Outcome:
        outcome = tags.delete_tag(self.state, tag)
        if outcome.changed:
            await self._call("delete tag", self.store.delete_tag(tag.strip()))
        return outcome

    async def apply_tag_changes(self, changes: list[tags.TagChange]) -> tuple[int, int]:
        """Apply a batch of tag changes; returns ``(succeeded, failed)``."""
        outcomes = tags.apply_tag_changes(self.state, changes)
        succeeded = 0
        failures: list[ExternalFailure] = []
        for change, outcome in zip(changes, outcomes):
            if not outcome.changed:
                continue
            if change.action is tags.TagAction.ADD:
                call = self.store.add_tag_to_video(change.video_id, change.tag)
            else:
                call = self.store.remove_tag_from_video(change.video_id, change.tag)
            try:
                await self._call("bulk tag", call)
            except ExternalFailure as exc:
                failures.append(exc)
                continue
            succeeded += 1
        return succeeded, len(failures)

    async def update_video(self, video_id: str, **fields: Any) -> Outcome:
        cleaned = edits.validate_fields(fields)
        outcome = edits.update_video(self.state, video_id, **cleaned)
        if outcome.changed:
            await self._call("update video", self.store.update_video(video_id, cleaned))
        return outcome

    async def set_rating(self, video_id: str, rating: int) -> Outcome:
        return await self.update_video(video_id, rating=rating)

    async def handle_event(self, event: StoreEvent) -> Outcome:
        if event.kind is StoreEventKind.VIDEO_ADDED and event.path:
            record = await self._call("fetch video", self.store.get_video_by_path(event.path))
            if record is None:
                logger.warning("Added video is not in the store: %s", event.path)
                return Outcome.NOT_FOUND
            return reconcile.on_external_add(self.state, record)
        if event.kind is StoreEventKind.VIDEO_REMOVED and event.path:
            video = reconcile.find_by_path(self.state, event.path)
            if video is None:
                return Outcome.NOT_FOUND
            return reconcile.on_external_remove(self.state, video.id)
        logger.debug("Ignoring store event %s", event.kind.value)
        return Outcome.NOOP

    def navigate(self, intent: NavIntent, columns: int = 1) -> VideoRecord | None:
        return navigate(self.state, intent, columns)

    def select_index(self, index: int) -> VideoRecord | None:
        return library.select_index(self.state, index)

    def set_filter(self, criteria: FilterCriteria) -> None:
        library.set_filter(self.state, criteria)

    def set_sort(self, sort: SortSpec) -> None:
        library.set_sort(self.state, sort)

    def set_view_mode(self, mode: ViewMode) -> None:
        library.set_view_mode(self.state, mode)

    async def _call(self, operation: str, call: Awaitable[Any]) -> Any:
        try:
            return await call
        except (StoreError, NotFoundError, OSError) as exc:
            logger.error("Store call failed (%s): %s", operation, exc)
            raise ExternalFailure(operation, str(exc)) from exc
