from __future__ import annotations

from dataclasses import dataclass

from .formatting import format_timestamp
from .models import ChapterThumbnail, VideoRecord


@dataclass(frozen=True)
class PreviewFrame:
    path: str
    timestamp: float | None
    label: str


class PreviewCycle:
    """Steps through the thumbnails of a single video."""

    def __init__(self, video_id: str, frames: list[PreviewFrame]) -> None:
        self.video_id = video_id
        self._frames = frames
        self._index = 0

    @classmethod
    def for_video(cls, video: VideoRecord) -> PreviewCycle:
        return cls(video.id, preview_frames(video))

    @property
    def frames(self) -> list[PreviewFrame]:
        return list(self._frames)

    @property
    def current(self) -> PreviewFrame | None:
        if not self._frames:
            return None
        return self._frames[self._index]

    @property
    def can_cycle(self) -> bool:
        return len(self._frames) > 1

    def advance(self) -> PreviewFrame | None:
        if not self._frames:
            return None
        self._index = (self._index + 1) % len(self._frames)
        return self._frames[self._index]


def preview_frames(video: VideoRecord) -> list[PreviewFrame]:
    frames: list[PreviewFrame] = []
    if video.thumbnail_path:
        frames.append(PreviewFrame(video.thumbnail_path, None, "Main"))
    for chapter in sorted(video.chapter_thumbnails, key=_chapter_time):
        frames.append(
            PreviewFrame(chapter.path, chapter.timestamp, format_timestamp(chapter.timestamp))
        )
    return frames


def _chapter_time(chapter: ChapterThumbnail) -> float:
    return chapter.timestamp
