from __future__ import annotations

from dataclasses import replace
from typing import Any

from .errors import Outcome
from .models import RATING_MAX, RATING_MIN
from .state import LibraryState, recompute

EDITABLE_FIELDS = frozenset({"title", "description", "rating"})


def validate_fields(fields: dict[str, Any]) -> dict[str, Any]:
    unknown = set(fields) - EDITABLE_FIELDS
    if unknown:
        raise ValueError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")
    cleaned: dict[str, Any] = {}
    for key, value in fields.items():
        if key == "rating":
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError("Rating must be an integer")
            if not RATING_MIN <= value <= RATING_MAX:
                raise ValueError(f"Rating must be between {RATING_MIN} and {RATING_MAX}")
            cleaned[key] = value
        else:
            if not isinstance(value, str):
                raise ValueError(f"{key} must be text")
            cleaned[key] = value.strip()
    return cleaned


def update_video(state: LibraryState, video_id: str, **fields: Any) -> Outcome:
    cleaned = validate_fields(fields)
    video = state.videos.get(video_id)
    if video is None:
        return Outcome.NOT_FOUND
    changes = {key: value for key, value in cleaned.items() if getattr(video, key) != value}
    if not changes:
        return Outcome.NOOP
    state.videos[video_id] = replace(video, **changes)
    recompute(state)
    return Outcome.APPLIED


def set_rating(state: LibraryState, video_id: str, rating: int) -> Outcome:
    return update_video(state, video_id, rating=rating)
