from __future__ import annotations

_SIZE_UNITS = ["B", "KB", "MB", "GB", "TB"]


def format_duration(seconds: float) -> str:
    if not seconds or seconds < 0:
        return "00:00:00"
    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_timestamp(seconds: float) -> str:
    total = max(0, int(seconds))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_file_size(size: int) -> str:
    if size <= 0:
        return "0 B"
    value = float(size)
    exponent = 0
    while value >= 1024 and exponent < len(_SIZE_UNITS) - 1:
        value /= 1024
        exponent += 1
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[exponent]}"


def format_resolution(width: int, height: int) -> str:
    if width <= 0 or height <= 0:
        return "-"
    return f"{width}x{height}"


def format_rating(rating: int, *, width: int = 5) -> str:
    rating = max(0, min(width, rating))
    return "★" * rating + "☆" * (width - rating)
