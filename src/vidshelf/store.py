"""Library store interface and the bundled JSON-file implementation.

The store is the source of truth for persisted library data.  The core only
talks to it through :class:`LibraryStore`; notifications about files that
appear or disappear are pushed to subscribers as :class:`StoreEvent`.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Protocol

from .errors import NotFoundError, StoreError
from .models import TagRecord, VideoRecord, unique_tags, video_from_dict, video_to_dict
from .paths import library_path

logger = logging.getLogger(__name__)

STORE_VERSION = 1


class StoreEventKind(Enum):
    VIDEO_ADDED = "video_added"
    VIDEO_REMOVED = "video_removed"
    SCAN_PROGRESS = "scan_progress"
    THUMBNAIL_PROGRESS = "thumbnail_progress"


@dataclass(frozen=True)
class StoreEvent:
    kind: StoreEventKind
    path: str | None = None
    message: str | None = None
    current: int | None = None
    total: int | None = None


Listener = Callable[[StoreEvent], None]


class LibraryStore(Protocol):
    async def list_videos(self) -> list[VideoRecord]: ...

    async def list_tags(self) -> list[TagRecord]: ...

    async def get_video_by_path(self, path: str) -> VideoRecord | None: ...

    async def update_video(self, video_id: str, fields: dict[str, Any]) -> VideoRecord: ...

    async def add_tag_to_video(self, video_id: str, tag: str) -> None: ...

    async def remove_tag_from_video(self, video_id: str, tag: str) -> None: ...

    async def rename_tag(self, old: str, new: str) -> None: ...

    async def delete_tag(self, tag: str) -> None: ...

    def subscribe(self, listener: Listener) -> Callable[[], None]: ...


class JsonLibraryStore:
    def __init__(self, path: Path | None = None) -> None:
        self.path = path or library_path()
        self._videos: dict[str, VideoRecord] | None = None
        self._tags: list[str] = []
        self._listeners: list[Listener] = []

    async def list_videos(self) -> list[VideoRecord]:
        return list(self._load().values())

    async def list_tags(self) -> list[TagRecord]:
        self._load()
        return [TagRecord(name) for name in self._tags]

    async def get_video_by_path(self, path: str) -> VideoRecord | None:
        for video in self._load().values():
            if video.path == path:
                return video
        return None

    async def update_video(self, video_id: str, fields: dict[str, Any]) -> VideoRecord:
        videos = self._load()
        video = self._require(video_id)
        try:
            updated = replace(video, **fields)
        except TypeError as exc:
            raise StoreError(f"Invalid fields for video {video_id}: {exc}") from exc
        videos[video_id] = updated
        self._save()
        return updated

    async def add_tag_to_video(self, video_id: str, tag: str) -> None:
        videos = self._load()
        video = self._require(video_id)
        if tag not in self._tags:
            self._tags.append(tag)
        if not video.has_tag(tag):
            videos[video_id] = replace(video, tags=(*video.tags, tag))
        self._save()

    async def remove_tag_from_video(self, video_id: str, tag: str) -> None:
        videos = self._load()
        video = self._require(video_id)
        videos[video_id] = replace(
            video, tags=tuple(name for name in video.tags if name != tag)
        )
        if not any(other.has_tag(tag) for other in videos.values()):
            self._tags = [name for name in self._tags if name != tag]
        self._save()

    async def rename_tag(self, old: str, new: str) -> None:
        videos = self._load()
        if old not in self._tags:
            raise NotFoundError("Tag", old)
        if new in self._tags and new != old:
            raise StoreError(f"Tag already exists: {new}")
        self._tags = [new if name == old else name for name in self._tags]
        for video_id, video in list(videos.items()):
            if video.has_tag(old):
                videos[video_id] = replace(
                    video, tags=tuple(new if name == old else name for name in video.tags)
                )
        self._save()

    async def delete_tag(self, tag: str) -> None:
        videos = self._load()
        self._tags = [name for name in self._tags if name != tag]
        for video_id, video in list(videos.items()):
            if video.has_tag(tag):
                videos[video_id] = replace(
                    video, tags=tuple(name for name in video.tags if name != tag)
                )
        self._save()

    async def add_video(self, video: VideoRecord) -> None:
        videos = self._load()
        if video.id in videos:
            raise StoreError(f"Video id already exists: {video.id}")
        videos[video.id] = video
        for tag in video.tags:
            if tag not in self._tags:
                self._tags.append(tag)
        self._save()
        self._emit(StoreEvent(StoreEventKind.VIDEO_ADDED, path=video.path))

    async def remove_video(self, path: str) -> bool:
        videos = self._load()
        removed = [video_id for video_id, video in videos.items() if video.path == path]
        if not removed:
            return False
        for video_id in removed:
            del videos[video_id]
        self._save()
        self._emit(StoreEvent(StoreEventKind.VIDEO_REMOVED, path=path))
        return True

    def report_progress(
        self,
        kind: StoreEventKind,
        *,
        current: int | None = None,
        total: int | None = None,
        message: str | None = None,
    ) -> None:
        if kind not in {StoreEventKind.SCAN_PROGRESS, StoreEventKind.THUMBNAIL_PROGRESS}:
            raise ValueError(f"Not a progress event: {kind.value}")
        self._emit(StoreEvent(kind, message=message, current=current, total=total))

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: StoreEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    def _require(self, video_id: str) -> VideoRecord:
        video = self._load().get(video_id)
        if video is None:
            raise NotFoundError("Video", video_id)
        return video

    def _load(self) -> dict[str, VideoRecord]:
        if self._videos is not None:
            return self._videos
        if not self.path.exists():
            self._videos = {}
            self._tags = []
            return self._videos
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StoreError(f"Failed to read library: {self.path} ({exc})") from exc
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise StoreError(f"Library file is not valid JSON: {self.path}") from exc
        if not isinstance(data, dict):
            raise StoreError(f"Library file must be a JSON object: {self.path}")
        self._videos, self._tags = _parse_library_data(data)
        logger.info("Loaded %d videos from %s", len(self._videos), self.path)
        return self._videos

    def _save(self) -> None:
        videos = self._videos or {}
        payload = {
            "version": STORE_VERSION,
            "videos": [video_to_dict(video) for video in videos.values()],
            "tags": list(self._tags),
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps(payload, ensure_ascii=False, indent=2),
                encoding="utf-8",
            )
        except OSError as exc:
            raise StoreError(f"Failed to write library: {self.path} ({exc})") from exc


def _parse_library_data(data: dict[str, Any]) -> tuple[dict[str, VideoRecord], list[str]]:
    videos: dict[str, VideoRecord] = {}
    entries = data.get("videos")
    for entry in entries if isinstance(entries, list) else []:
        if not isinstance(entry, dict):
            continue
        try:
            video = video_from_dict(entry)
        except ValueError as exc:
            logger.warning("Skipping library entry: %s", exc)
            continue
        videos.setdefault(video.id, video)
    tags = list(unique_tags(data.get("tags")))
    for video in videos.values():
        for tag in video.tags:
            if tag not in tags:
                tags.append(tag)
    return videos, tags
