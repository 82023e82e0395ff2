from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .models import FilterCriteria, SortDirection, SortField, SortSpec, ViewMode
from .paths import config_path

CONFIG_VERSION = 1
DEFAULT_CARD_WIDTH = 28
DEFAULT_PREVIEW_INTERVAL = 1.5


@dataclass
class AppConfig:
    version: int = CONFIG_VERSION
    library_path: str | None = None
    view_mode: str | None = None
    sort_field: str | None = None
    sort_direction: str | None = None
    save_filter_state: bool | None = None
    min_rating: int | None = None
    required_tags: list[str] = field(default_factory=list)
    search_text: str | None = None
    directories: list[str] = field(default_factory=list)
    card_width: int | None = None
    preview_interval: float | None = None


def load_config(path: Path | None = None) -> tuple[AppConfig, str | None]:
    path = path or config_path()
    if not path.exists():
        return AppConfig(), None
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        return AppConfig(), f"Failed to read config: {path} ({exc})"
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return AppConfig(), f"Config file is not valid JSON: {path}"
    if not isinstance(data, dict):
        return AppConfig(), f"Config file must be a JSON object: {path}"
    return _parse_config_data(data), None


def save_config(config: AppConfig, path: Path | None = None) -> str | None:
    path = path or config_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        return f"Failed to create config directory: {path.parent} ({exc})"
    payload = _config_to_dict(config)
    try:
        path.write_text(
            json.dumps(payload, ensure_ascii=True, indent=2),
            encoding="utf-8",
        )
    except OSError as exc:
        return f"Failed to write config: {path} ({exc})"
    return None


def filter_state_enabled(config: AppConfig) -> bool:
    return config.save_filter_state is not False


def filter_from_config(config: AppConfig) -> FilterCriteria:
    if not filter_state_enabled(config):
        return FilterCriteria()
    return FilterCriteria(
        min_rating=config.min_rating or 0,
        required_tags=frozenset(config.required_tags),
        search_text=config.search_text or "",
        directories=frozenset(config.directories),
    )


def store_filter(config: AppConfig, criteria: FilterCriteria) -> None:
    if not filter_state_enabled(config):
        return
    config.min_rating = criteria.min_rating or None
    config.required_tags = sorted(criteria.required_tags)
    config.search_text = criteria.search_text.strip() or None
    config.directories = sorted(criteria.directories)


def sort_from_config(config: AppConfig) -> SortSpec:
    field_value = _enum_value(SortField, config.sort_field) or SortField.TITLE
    direction = _enum_value(SortDirection, config.sort_direction) or SortDirection.ASC
    return SortSpec(field_value, direction)


def view_mode_from_config(config: AppConfig) -> ViewMode:
    return _enum_value(ViewMode, config.view_mode) or ViewMode.GRID


def _parse_config_data(data: dict[str, Any]) -> AppConfig:
    return AppConfig(
        version=_as_int(data.get("version")) or CONFIG_VERSION,
        library_path=_as_str(data.get("library_path")),
        view_mode=_as_choice(data.get("view_mode"), ViewMode),
        sort_field=_as_choice(data.get("sort_field"), SortField),
        sort_direction=_as_choice(data.get("sort_direction"), SortDirection),
        save_filter_state=_as_bool(data.get("save_filter_state")),
        min_rating=_as_rating(data.get("min_rating")),
        required_tags=_as_str_list(data.get("required_tags")),
        search_text=_as_str(data.get("search_text")),
        directories=_as_str_list(data.get("directories")),
        card_width=_as_positive_int(data.get("card_width")),
        preview_interval=_as_positive_float(data.get("preview_interval")),
    )


def _config_to_dict(config: AppConfig) -> dict[str, Any]:
    data: dict[str, Any] = {"version": config.version}
    _set_if(data, "library_path", config.library_path)
    _set_if(data, "view_mode", config.view_mode)
    _set_if(data, "sort_field", config.sort_field)
    _set_if(data, "sort_direction", config.sort_direction)
    _set_if(data, "save_filter_state", config.save_filter_state)
    _set_if(data, "min_rating", config.min_rating)
    _set_if(data, "required_tags", config.required_tags or None)
    _set_if(data, "search_text", config.search_text)
    _set_if(data, "directories", config.directories or None)
    _set_if(data, "card_width", config.card_width)
    _set_if(data, "preview_interval", config.preview_interval)
    return data


def _set_if(data: dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        data[key] = value


def _enum_value(enum_type: type, value: str | None) -> Any:
    if value is None:
        return None
    try:
        return enum_type(value)
    except ValueError:
        return None


def _as_choice(value: Any, enum_type: type) -> str | None:
    text = _as_str(value)
    if text is None or _enum_value(enum_type, text) is None:
        return None
    return text


def _as_str(value: Any) -> str | None:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return None


def _as_str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    items = [_as_str(item) for item in value]
    return [item for item in items if item is not None]


def _as_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    return None


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _as_rating(value: Any) -> int | None:
    number = _as_int(value)
    if number is None or not 0 <= number <= 5:
        return None
    return number


def _as_positive_int(value: Any) -> int | None:
    number = _as_int(value)
    if number is None or number <= 0:
        return None
    return number


def _as_positive_float(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if value <= 0:
        return None
    return float(value)
