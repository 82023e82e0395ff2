from __future__ import annotations

from rich.text import Text
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.widgets import Label, ListItem, Static

from ..formatting import format_duration, format_file_size, format_rating, format_resolution
from ..models import VideoRecord, ViewMode
from ..navigation import columns_for_width

_TITLE_STYLE = "#c0caf5"
_SELECTED_STYLE = "bold #1a1b26 on #7aa2f7"
_RATING_STYLE = "#e0af68"
_META_STYLE = "#565f89"
_TAG_STYLE = "#bb9af7"
_TAG_ACTIVE_STYLE = "bold #9ece6a"
_COUNT_STYLE = "#565f89"

_VIDEO_ICON = "\uf008"
_TAG_ICON = "\uf02b"
_TAG_ACTIVE_ICON = "\uf02c"


class VideoTile(Static):
    def __init__(self, video: VideoRecord, mode: ViewMode, selected: bool = False) -> None:
        self.video = video
        self._mode = mode
        self._selected = selected
        super().__init__(self._render_label(), classes="video-tile")
        self.set_class(selected, "selected")

    def set_selected(self, selected: bool) -> None:
        if self._selected == selected:
            return
        self._selected = selected
        self.set_class(selected, "selected")
        self.update(self._render_label())

    def _render_label(self) -> Text:
        if self._mode is ViewMode.GRID:
            return format_card_label(self.video, self._selected)
        return format_row_label(self.video, self._selected)


class VideoView(VerticalScroll, can_focus=True):
    """Scrollable grid or list of video tiles."""

    BINDINGS = [
        Binding("up", "app.navigate('up')", "Up", show=False),
        Binding("down", "app.navigate('down')", "Down", show=False),
        Binding("left", "app.navigate('left')", "Left", show=False),
        Binding("right", "app.navigate('right')", "Right", show=False),
    ]

    def __init__(self, *, card_width: int, id: str | None = None) -> None:
        super().__init__(id=id)
        self.card_width = card_width
        self.mode = ViewMode.GRID
        self._tiles: list[VideoTile] = []

    @property
    def columns(self) -> int:
        if self.mode is ViewMode.LIST:
            return 1
        return columns_for_width(self.scrollable_content_region.width, self.card_width)

    async def show(
        self, videos: list[VideoRecord], mode: ViewMode, selected_index: int
    ) -> None:
        self.mode = mode
        self.set_class(mode is ViewMode.GRID, "grid-mode")
        self.set_class(mode is ViewMode.LIST, "list-mode")
        self._sync_columns()
        await self.remove_children()
        self._tiles = [
            VideoTile(video, mode, index == selected_index)
            for index, video in enumerate(videos)
        ]
        if self._tiles:
            await self.mount_all(self._tiles)
        else:
            await self.mount(Static("No videos match the current filter.", classes="empty"))
        self.scroll_to_index(selected_index)

    def highlight(self, previous: int, current: int) -> None:
        if 0 <= previous < len(self._tiles):
            self._tiles[previous].set_selected(False)
        if 0 <= current < len(self._tiles):
            self._tiles[current].set_selected(True)
        self.scroll_to_index(current)

    def scroll_to_index(self, index: int) -> None:
        if not 0 <= index < len(self._tiles):
            return
        tile = self._tiles[index]
        self.call_after_refresh(self.scroll_to_widget, tile, animate=False)

    def on_resize(self) -> None:
        self._sync_columns()

    def _sync_columns(self) -> None:
        if self.mode is ViewMode.GRID:
            self.styles.grid_size_columns = self.columns


class TagListItem(ListItem):
    def __init__(self, name: str, count: int, active: bool) -> None:
        self.tag_name = name
        super().__init__(Label(format_tag_label(name, count, active)), classes="tag-item")


def format_card_label(video: VideoRecord, selected: bool) -> Text:
    label = Text(no_wrap=True, overflow="ellipsis")
    title_style = _SELECTED_STYLE if selected else _TITLE_STYLE
    label.append(f"{_VIDEO_ICON} ", style=title_style)
    label.append(video.title, style=title_style)
    label.append("\n")
    label.append(format_rating(video.rating), style=_RATING_STYLE)
    label.append("\n")
    label.append(
        f"{format_duration(video.duration)}  {format_file_size(video.size)}",
        style=_META_STYLE,
    )
    label.append("\n")
    label.append(" ".join(f"#{tag}" for tag in video.tags), style=_TAG_STYLE)
    return label


def format_row_label(video: VideoRecord, selected: bool) -> Text:
    label = Text(no_wrap=True, overflow="ellipsis")
    title_style = _SELECTED_STYLE if selected else _TITLE_STYLE
    label.append(f"{_VIDEO_ICON} ", style=title_style)
    label.append(video.title, style=title_style)
    label.append("  ")
    label.append(format_rating(video.rating), style=_RATING_STYLE)
    label.append("  ")
    label.append(
        "  ".join(
            [
                format_duration(video.duration),
                format_file_size(video.size),
                format_resolution(video.width, video.height),
            ]
        ),
        style=_META_STYLE,
    )
    if video.tags:
        label.append("  ")
        label.append(" ".join(f"#{tag}" for tag in video.tags), style=_TAG_STYLE)
    return label


def format_tag_label(name: str, count: int, active: bool) -> Text:
    icon = _TAG_ACTIVE_ICON if active else _TAG_ICON
    style = _TAG_ACTIVE_STYLE if active else _TAG_STYLE
    label = Text()
    label.append(icon, style=style)
    label.append(" ")
    label.append(name, style=style)
    label.append(f" ({count})", style=_COUNT_STYLE)
    return label


def format_details(video: VideoRecord) -> Text:
    text = Text()
    text.append(video.title, style=f"bold {_TITLE_STYLE}")
    text.append("\n")
    text.append(format_rating(video.rating), style=_RATING_STYLE)
    text.append("\n\n")
    rows = [
        ("File", video.filename),
        ("Path", video.path),
        ("Duration", format_duration(video.duration)),
        ("Size", format_file_size(video.size)),
        ("Resolution", format_resolution(video.width, video.height)),
        ("FPS", f"{video.fps:g}" if video.fps else "-"),
        ("Codec", video.codec or "-"),
        ("Added", video.added_at.strftime("%Y-%m-%d %H:%M")),
        ("Tags", ", ".join(video.tags) or "-"),
    ]
    for key, value in rows:
        text.append(f"{key:<11}", style=_META_STYLE)
        text.append(f"{value}\n")
    if video.description:
        text.append("\n")
        text.append(video.description)
    return text
