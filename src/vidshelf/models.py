from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

RATING_MIN = 0
RATING_MAX = 5

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class ViewMode(Enum):
    GRID = "grid"
    LIST = "list"


class SortField(Enum):
    TITLE = "title"
    FILENAME = "filename"
    DATE = "date"
    SIZE = "size"
    DURATION = "duration"
    RATING = "rating"
    WIDTH = "width"
    HEIGHT = "height"

    @property
    def attribute(self) -> str:
        if self is SortField.DATE:
            return "added_at"
        return self.value

    @property
    def label(self) -> str:
        return self.value.capitalize()


class SortDirection(Enum):
    ASC = "ASC"
    DESC = "DESC"

    def flipped(self) -> SortDirection:
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


@dataclass(frozen=True)
class ChapterThumbnail:
    path: str
    timestamp: float


@dataclass(frozen=True)
class VideoRecord:
    id: str
    filename: str
    title: str
    path: str
    description: str = ""
    size: int = 0
    duration: float = 0.0
    width: int = 0
    height: int = 0
    fps: float = 0.0
    codec: str = ""
    rating: int = 0
    tags: tuple[str, ...] = ()
    added_at: datetime = _EPOCH
    thumbnail_path: str | None = None
    chapter_thumbnails: tuple[ChapterThumbnail, ...] = ()

    def has_tag(self, name: str) -> bool:
        return name in self.tags


@dataclass(frozen=True)
class TagRecord:
    name: str


@dataclass(frozen=True)
class FilterCriteria:
    min_rating: int = 0
    required_tags: frozenset[str] = field(default_factory=frozenset)
    search_text: str = ""
    directories: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_empty(self) -> bool:
        return (
            self.min_rating == 0
            and not self.required_tags
            and not self.search_text.strip()
            and not self.directories
        )


@dataclass(frozen=True)
class SortSpec:
    field: SortField = SortField.TITLE
    direction: SortDirection = SortDirection.ASC


def video_from_dict(data: dict[str, Any]) -> VideoRecord:
    video_id = data.get("id")
    if isinstance(video_id, bool) or not isinstance(video_id, (str, int)):
        raise ValueError("Video entry is missing an id")
    path = _as_str(data.get("path")) or ""
    filename = _as_str(data.get("filename")) or path.replace("\\", "/").rsplit("/", 1)[-1]
    return VideoRecord(
        id=str(video_id),
        filename=filename,
        title=_as_str(data.get("title")) or filename,
        path=path,
        description=_as_str(data.get("description")) or "",
        size=_as_int(data.get("size")) or 0,
        duration=_as_float(data.get("duration")) or 0.0,
        width=_as_int(data.get("width")) or 0,
        height=_as_int(data.get("height")) or 0,
        fps=_as_float(data.get("fps")) or 0.0,
        codec=_as_str(data.get("codec")) or "",
        rating=clamp_rating(_as_int(data.get("rating")) or 0),
        tags=unique_tags(data.get("tags")),
        added_at=_as_datetime(data.get("added_at")),
        thumbnail_path=_as_str(data.get("thumbnail_path")),
        chapter_thumbnails=_parse_chapters(data.get("chapter_thumbnails")),
    )


def video_to_dict(video: VideoRecord) -> dict[str, Any]:
    return {
        "id": video.id,
        "filename": video.filename,
        "title": video.title,
        "path": video.path,
        "description": video.description,
        "size": video.size,
        "duration": video.duration,
        "width": video.width,
        "height": video.height,
        "fps": video.fps,
        "codec": video.codec,
        "rating": video.rating,
        "tags": list(video.tags),
        "added_at": video.added_at.isoformat(),
        "thumbnail_path": video.thumbnail_path,
        "chapter_thumbnails": [
            {"path": chapter.path, "timestamp": chapter.timestamp}
            for chapter in video.chapter_thumbnails
        ],
    }


def clamp_rating(value: int) -> int:
    return max(RATING_MIN, min(RATING_MAX, value))


def unique_tags(value: Any) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    seen: dict[str, None] = {}
    for item in value:
        name = _as_str(item)
        if name is not None:
            seen.setdefault(name, None)
    return tuple(seen)


def _parse_chapters(value: Any) -> tuple[ChapterThumbnail, ...]:
    # The store may hand chapters over as a JSON-encoded string.
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            return ()
    if not isinstance(value, list):
        return ()
    chapters: list[ChapterThumbnail] = []
    for item in value:
        if not isinstance(item, dict):
            continue
        path = _as_str(item.get("path")) or _as_str(item.get("thumbnail_path"))
        timestamp = _as_float(item.get("timestamp"))
        if path is None or timestamp is None:
            continue
        chapters.append(ChapterThumbnail(path=path, timestamp=timestamp))
    return tuple(chapters)


def _as_str(value: Any) -> str | None:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return None


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _as_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    return None


def _as_datetime(value: Any) -> datetime:
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = f"{text[:-1]}+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return _EPOCH
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    else:
        return _EPOCH
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
