from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Awaitable
from pathlib import Path
from typing import Any

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.theme import Theme
from textual.timer import Timer
from textual.widgets import Input, Label, ListView, Static
from textual_image.widget import Image as PreviewImage

from .config import (
    DEFAULT_CARD_WIDTH,
    DEFAULT_PREVIEW_INTERVAL,
    AppConfig,
    filter_from_config,
    load_config,
    save_config,
    sort_from_config,
    store_filter,
    view_mode_from_config,
)
from .controller import LibraryController
from .errors import DuplicateTagError, ExternalFailure, Outcome
from .formatting import format_duration, format_file_size
from .models import FilterCriteria, SortDirection, SortField, SortSpec, ViewMode
from .navigation import NavIntent
from .paths import config_path, default_log_path, library_path
from .preview import PreviewCycle, PreviewFrame
from .state import (
    LibraryState,
    clear_tag_filter,
    cycle_sort_field,
    library_stats,
    set_rating_filter,
    set_search_text,
    tag_counts,
    toggle_sort_direction,
    toggle_tag_filter,
    toggle_view_mode,
)
from .store import JsonLibraryStore, StoreEvent
from .tags import plan_bulk_changes
from .ui.screens import (
    ConfirmScreen,
    DetailsEdit,
    HelpScreen,
    TextPromptScreen,
    VideoDetailsScreen,
)
from .ui.video_view import TagListItem, VideoView, format_details

logger = logging.getLogger(__name__)

TIP_TEXT = "Tip: press ? for help (and / to search)"
HELP_TEXT = """Keyboard shortcuts
q  quit
?  help
/  search (title, filename, description, tags)
esc  back to the video view
ctrl+r  reload library

Video view
arrow keys  move selection (grid wraps per row/column, list wraps at the ends)
v  toggle grid/list view
s  cycle sort field
o  toggle sort order
0-5  set rating of the selected video
e  edit title/description/rating
a  add tags (space separated)
x  remove a tag from the selected video
B  bulk tags for all visible videos (+tag -tag)

Filters
f  cycle minimum rating filter
c  clear tag filter

Tag sidebar
enter  toggle tag in the filter (all selected tags must match)
R  rename highlighted tag
X  delete highlighted tag
"""

TOKYO_NIGHT_THEME = Theme(
    name="tokyo-night",
    primary="#7aa2f7",
    secondary="#7dcfff",
    accent="#bb9af7",
    warning="#e0af68",
    error="#f7768e",
    success="#9ece6a",
    foreground="#c0caf5",
    background="#1a1b26",
    surface="#1f2335",
    panel="#24283b",
    boost="#2f334d",
    variables={
        "block-cursor-background": "#7aa2f7",
        "block-cursor-foreground": "#1a1b26",
        "footer-key-foreground": "#7aa2f7",
        "input-selection-background": "#7aa2f7 30%",
        "button-color-foreground": "#1a1b26",
        "button-focus-text-style": "bold",
    },
)

_NAV_KEYS = {
    ViewMode.GRID: {
        "up": NavIntent.UP,
        "down": NavIntent.DOWN,
        "left": NavIntent.LEFT,
        "right": NavIntent.RIGHT,
    },
    ViewMode.LIST: {
        "up": NavIntent.PREVIOUS,
        "left": NavIntent.PREVIOUS,
        "down": NavIntent.NEXT,
        "right": NavIntent.NEXT,
    },
}


class VidshelfApp(App):
    BINDINGS = [
        ("q", "quit", "Quit"),
        ("?", "help", "Help"),
        ("/", "search", "Search"),
        ("escape", "focus_videos", "Videos"),
        ("ctrl+r", "reload", "Reload"),
        ("v", "toggle_view", "View"),
        ("s", "cycle_sort", "Sort"),
        ("o", "toggle_order", "Order"),
        ("f", "cycle_rating_filter", "Rating Filter"),
        ("c", "clear_tag_filter", "Clear Tags"),
        ("e", "edit_details", "Edit"),
        ("a", "add_tags", "Add Tags"),
        ("x", "remove_tag", "Remove Tag"),
        ("B", "bulk_tags", "Bulk Tags"),
        ("R", "rename_tag", "Rename Tag"),
        ("X", "delete_tag", "Delete Tag"),
        *(
            Binding(str(rating), f"set_rating({rating})", f"Rate {rating}", show=False)
            for rating in range(6)
        ),
    ]

    CSS = """
    Screen {
        background: $background;
        color: $text;
    }

    #root {
        height: 100%;
    }

    #search {
        margin: 0 1;
    }

    #main {
        height: 1fr;
        padding: 0 1;
    }

    #sidebar, #details {
        padding: 1 1;
        background: $surface;
    }

    #sidebar {
        width: 24%;
        border: round $secondary;
    }

    #videos {
        width: 1fr;
        border: round $primary;
        background: $panel;
    }

    #videos:focus {
        border: round $accent;
    }

    #details {
        width: 32%;
        border: round $accent;
    }

    #tag_list {
        height: 1fr;
        background: $surface;
    }

    #thumb_image {
        height: 14;
        width: 100%;
    }

    VideoView.grid-mode {
        layout: grid;
        grid-size: 4;
        grid-rows: 6;
        grid-gutter: 0 1;
    }

    VideoView.list-mode {
        layout: vertical;
    }

    VideoView.grid-mode .video-tile {
        height: 6;
        padding: 0 1;
        border: round $surface;
    }

    VideoView.list-mode .video-tile {
        height: 1;
    }

    .video-tile.selected {
        background: $boost;
    }

    VideoView.grid-mode .video-tile.selected {
        border: round $primary;
    }

    #status_bar {
        height: 1;
        padding: 0 1;
        color: $text-muted;
    }

    #status_bar.error {
        color: $error;
    }

    .hidden {
        display: none;
    }
    """

    def __init__(
        self,
        store: JsonLibraryStore,
        config: AppConfig | None = None,
        *,
        config_file: Path | None = None,
        directories: list[str] | None = None,
        view_mode: ViewMode | None = None,
        sort: SortSpec | None = None,
    ) -> None:
        super().__init__()
        self.register_theme(TOKYO_NIGHT_THEME)
        self.theme = TOKYO_NIGHT_THEME.name
        self.config = config or AppConfig()
        self._config_file = config_file
        criteria = filter_from_config(self.config)
        if directories:
            criteria = FilterCriteria(
                min_rating=criteria.min_rating,
                required_tags=criteria.required_tags,
                search_text=criteria.search_text,
                directories=frozenset(directories),
            )
        state = LibraryState(
            filter=criteria,
            sort=sort or sort_from_config(self.config),
            view_mode=view_mode or view_mode_from_config(self.config),
        )
        self.store = store
        self.controller = LibraryController(store, state)
        self._unsubscribe = None
        self._card_width = self.config.card_width or DEFAULT_CARD_WIDTH
        self._preview_interval = self.config.preview_interval or DEFAULT_PREVIEW_INTERVAL
        self._preview_cycle: PreviewCycle | None = None
        self._preview_timer: Timer | None = None
        self._video_view: VideoView | None = None
        self._tag_list: ListView | None = None
        self._filter_status: Label | None = None
        self._stats: Static | None = None
        self._details_text: Static | None = None
        self._thumb_image: PreviewImage | None = None
        self._thumb_fallback: Static | None = None
        self._status_bar: Static | None = None
        self._search_input: Input | None = None

    @property
    def state(self) -> LibraryState:
        return self.controller.state

    def compose(self) -> ComposeResult:
        with Vertical(id="root"):
            yield Input(
                value=self.state.filter.search_text,
                placeholder="Search title, filename, description, tags",
                id="search",
                compact=True,
            )
            with Horizontal(id="main"):
                with Vertical(id="sidebar"):
                    yield Label("", id="filter_status")
                    yield ListView(id="tag_list")
                    yield Static("", id="stats")
                yield VideoView(card_width=self._card_width, id="videos")
                with Vertical(id="details"):
                    yield PreviewImage(None, id="thumb_image")
                    yield Static("No thumbnail.", id="thumb_fallback", classes="hidden")
                    yield Static("Select a video to see its details.", id="details_text")
            yield Static(TIP_TEXT, id="status_bar")

    def on_mount(self) -> None:
        self._video_view = self.query_one("#videos", VideoView)
        self._tag_list = self.query_one("#tag_list", ListView)
        self._filter_status = self.query_one("#filter_status", Label)
        self._stats = self.query_one("#stats", Static)
        self._details_text = self.query_one("#details_text", Static)
        self._thumb_image = self.query_one("#thumb_image", PreviewImage)
        self._thumb_fallback = self.query_one("#thumb_fallback", Static)
        self._status_bar = self.query_one("#status_bar", Static)
        self._search_input = self.query_one("#search", Input)
        self._unsubscribe = self.store.subscribe(self._on_store_event)
        self._video_view.focus()
        self.run_worker(self._load_library(), exclusive=True, group="load")

    def on_unmount(self) -> None:
        self._stop_preview()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def action_navigate(self, key: str) -> None:
        view = self._video_view
        intent = _NAV_KEYS[self.state.view_mode].get(key)
        if view is None or intent is None:
            return
        previous = self.state.cursor
        video = self.controller.navigate(intent, view.columns)
        view.highlight(previous, self.state.cursor)
        if self.state.cursor != previous:
            self._show_selected()
        elif video is None:
            self._set_status("Nothing to select.")

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id != "search":
            return
        if event.value == self.state.filter.search_text:
            return
        set_search_text(self.state, event.value)
        self._filter_changed()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "search":
            self.action_focus_videos()

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        if event.list_view.id != "tag_list":
            return
        item = event.item
        if not isinstance(item, TagListItem):
            return
        active = toggle_tag_filter(self.state, item.tag_name)
        self._set_status(f"{'Filtering by' if active else 'Removed filter'} #{item.tag_name}")
        self._filter_changed(focus_tag=item.tag_name)

    def action_help(self) -> None:
        self.push_screen(HelpScreen(HELP_TEXT))

    def action_search(self) -> None:
        if self._search_input is not None:
            self._search_input.focus()

    def action_focus_videos(self) -> None:
        if self._video_view is not None:
            self._video_view.focus()

    def action_reload(self) -> None:
        self.run_worker(self._load_library(), exclusive=True, group="load")

    async def action_toggle_view(self) -> None:
        mode = toggle_view_mode(self.state)
        self.config.view_mode = mode.value
        self._persist_config()
        await self._render_videos()
        self._set_status(f"View: {mode.value}")

    async def action_cycle_sort(self) -> None:
        field = cycle_sort_field(self.state)
        self.config.sort_field = field.value
        self._persist_config()
        await self._refresh_all()
        self._set_status(f"Sort: {field.label} ({self.state.sort.direction.value.lower()})")

    async def action_toggle_order(self) -> None:
        direction = toggle_sort_direction(self.state)
        self.config.sort_direction = direction.value
        self._persist_config()
        await self._refresh_all()
        self._set_status(f"Sort: {self.state.sort.field.label} ({direction.value.lower()})")

    def action_cycle_rating_filter(self) -> None:
        rating = (self.state.filter.min_rating + 1) % 6
        set_rating_filter(self.state, rating)
        self._filter_changed()
        self._set_status(f"Minimum rating: {rating}" if rating else "Rating filter cleared")

    def action_clear_tag_filter(self) -> None:
        clear_tag_filter(self.state)
        self._filter_changed()
        self._set_status("Tag filter cleared")

    def action_set_rating(self, rating: int) -> None:
        video = self._require_selection()
        if video is None:
            return
        self._spawn(
            self.controller.set_rating(video.id, rating),
            success=f"Rating set to {rating}" if rating else "Rating removed",
        )

    def action_edit_details(self) -> None:
        video = self._require_selection()
        if video is None:
            return

        def handle(result: DetailsEdit | None) -> None:
            if result is None:
                return
            self._spawn(
                self.controller.update_video(
                    video.id,
                    title=result.title,
                    description=result.description,
                    rating=result.rating,
                ),
                success="Video details updated",
            )

        self.push_screen(VideoDetailsScreen(video), handle)

    def action_add_tags(self) -> None:
        video = self._require_selection()
        if video is None:
            return

        def handle(value: str | None) -> None:
            if value is None:
                return
            self._spawn(self._add_tags(video.id, value))

        self.push_screen(
            TextPromptScreen(
                f"Add tags to {video.title}",
                placeholder="tag1 tag2",
                hint="Separate several tags with spaces.",
                submit_label="Add",
            ),
            handle,
        )

    def action_remove_tag(self) -> None:
        video = self._require_selection()
        if video is None:
            return
        if not video.tags:
            self._set_status("The selected video has no tags.")
            return

        def handle(value: str | None) -> None:
            if value is None:
                return
            self._spawn(self.controller.remove_tag(video.id, value), success=f"Removed #{value}")

        self.push_screen(
            TextPromptScreen(
                f"Remove tag from {video.title}",
                value=video.tags[0] if len(video.tags) == 1 else "",
                hint=f"Tags: {', '.join(video.tags)}",
                submit_label="Remove",
            ),
            handle,
        )

    def action_bulk_tags(self) -> None:
        video_ids = [video.id for video in self.state.visible]
        if not video_ids:
            self._set_status("No visible videos.")
            return

        def handle(value: str | None) -> None:
            if value is None:
                return
            changes = plan_bulk_changes(self.state, video_ids, value)
            if not changes:
                self._set_status("No changes.")
                return
            self._spawn(self._apply_bulk(changes))

        self.push_screen(
            TextPromptScreen(
                f"Bulk tags for {len(video_ids)} visible videos",
                placeholder="+tag -tag",
                hint="+name adds, -name removes. Bare names are added.",
                submit_label="Apply",
            ),
            handle,
        )

    def action_rename_tag(self) -> None:
        name = self._highlighted_tag()
        if name is None:
            self._set_status("Highlight a tag in the sidebar first.")
            return

        def handle(value: str | None) -> None:
            if value is None or value == name:
                return
            self._spawn(self.controller.rename_tag(name, value), success=f"Renamed #{name} to #{value}")

        self.push_screen(
            TextPromptScreen(f"Rename #{name} to:", value=name, submit_label="Rename"),
            handle,
        )

    def action_delete_tag(self) -> None:
        name = self._highlighted_tag()
        if name is None:
            self._set_status("Highlight a tag in the sidebar first.")
            return

        def handle(confirmed: bool) -> None:
            if confirmed:
                self._spawn(self.controller.delete_tag(name), success=f"Deleted #{name}")

        self.push_screen(ConfirmScreen(f"Delete tag #{name} from every video?"), handle)

    async def _load_library(self) -> None:
        self._set_status("Loading library...")
        criteria = self.state.filter
        try:
            await self.controller.load()
        except ExternalFailure as exc:
            self._set_status(str(exc), error=True)
            return
        self._sync_filter_config(criteria)
        await self._refresh_all()
        self._set_status(f"Loaded {len(self.state.videos)} videos from {self.store.path}")

    async def _add_tags(self, video_id: str, text: str) -> None:
        added = await self.controller.add_tags(video_id, text)
        if not added:
            self._set_status("No new tags.")
        elif len(added) == 1:
            self._set_status(f"Added #{added[0]}")
        else:
            self._set_status(f"Added {len(added)} tags")

    async def _apply_bulk(self, changes: list[Any]) -> None:
        succeeded, failed = await self.controller.apply_tag_changes(changes)
        if failed:
            self._set_status(
                f"Bulk tags applied ({succeeded} saved, {failed} failed to save)", error=True
            )
        else:
            self._set_status(f"Bulk tags applied ({succeeded} changes)")

    def _spawn(self, work: Awaitable[Any], *, success: str | None = None) -> None:
        self.run_worker(self._run_mutation(work, success), group="mutation")

    async def _run_mutation(self, work: Awaitable[Any], success: str | None) -> None:
        criteria = self.state.filter
        try:
            result = await work
        except DuplicateTagError as exc:
            self._set_status(str(exc), error=True)
            return
        except ExternalFailure as exc:
            # Local change is kept; only report the failed save.
            self._sync_filter_config(criteria)
            self._set_status(f"{exc} (local change kept)", error=True)
            await self._refresh_all()
            return
        except ValueError as exc:
            self._set_status(str(exc), error=True)
            return
        self._sync_filter_config(criteria)
        await self._refresh_all()
        if result is Outcome.NOT_FOUND:
            self._set_status("Not found.", error=True)
        elif result is Outcome.NOOP:
            self._set_status("Nothing changed.")
        elif success:
            self._set_status(success)

    def _on_store_event(self, event: StoreEvent) -> None:
        self.call_later(self._apply_store_event, event)

    async def _apply_store_event(self, event: StoreEvent) -> None:
        try:
            outcome = await self.controller.handle_event(event)
        except ExternalFailure as exc:
            self._set_status(str(exc), error=True)
            return
        if outcome.changed:
            await self._refresh_all()
            name = Path(event.path or "").name
            self._set_status(f"Library updated: {event.kind.value.replace('_', ' ')} {name}")

    def _filter_changed(self, focus_tag: str | None = None) -> None:
        store_filter(self.config, self.state.filter)
        self._persist_config()
        self.run_worker(self._refresh_all(focus_tag=focus_tag), group="render")

    async def _refresh_all(self, focus_tag: str | None = None) -> None:
        await self._render_sidebar(focus_tag)
        await self._render_videos()

    async def _render_videos(self) -> None:
        if self._video_view is None:
            return
        await self._video_view.show(self.state.visible, self.state.view_mode, self.state.cursor)
        self._show_selected()

    async def _render_sidebar(self, focus_tag: str | None = None) -> None:
        if self._tag_list is None:
            return
        current = focus_tag or self._highlighted_tag()
        required = self.state.filter.required_tags
        items = [
            TagListItem(name, count, name in required) for name, count in tag_counts(self.state)
        ]
        highlight = next(
            (index for index, item in enumerate(items) if item.tag_name == current), None
        )
        await self._tag_list.clear()
        if items:
            await self._tag_list.extend(items)
            if highlight is not None:
                self._tag_list.index = highlight
        self._update_filter_status()
        self._update_stats()

    def _update_filter_status(self) -> None:
        if self._filter_status is None:
            return
        criteria = self.state.filter
        sort = self.state.sort
        lines = [
            f"Showing {len(self.state.visible)} of {len(self.state.videos)}",
            f"Sort: {sort.field.label} ({sort.direction.value.lower()})",
            f"Min rating: {criteria.min_rating or 'any'}",
        ]
        if criteria.required_tags:
            lines.append("Tags: " + ", ".join(sorted(criteria.required_tags)))
        if criteria.directories:
            lines.append("Dirs: " + ", ".join(sorted(criteria.directories)))
        self._filter_status.update("\n".join(lines))

    def _update_stats(self) -> None:
        if self._stats is None:
            return
        stats = library_stats(self.state)
        self._stats.update(
            f"{stats.total_videos} videos, {stats.total_tags} tags\n"
            f"{format_duration(stats.total_duration)}  {format_file_size(stats.total_size)}"
        )

    def _show_selected(self) -> None:
        self._stop_preview()
        video = self.state.selected
        if video is None:
            if self._details_text is not None:
                self._details_text.update("Select a video to see its details.")
            self._set_preview_frame(None)
            return
        if self._details_text is not None:
            self._details_text.update(format_details(video))
        self._preview_cycle = PreviewCycle.for_video(video)
        self._set_preview_frame(self._preview_cycle.current)
        if self._preview_cycle.can_cycle:
            self._preview_timer = self.set_interval(self._preview_interval, self._advance_preview)

    def _advance_preview(self) -> None:
        cycle = self._preview_cycle
        if cycle is None:
            return
        self._set_preview_frame(cycle.advance())

    def _stop_preview(self) -> None:
        if self._preview_timer is not None:
            self._preview_timer.stop()
            self._preview_timer = None
        self._preview_cycle = None

    def _set_preview_frame(self, frame: PreviewFrame | None) -> None:
        if self._thumb_image is None or self._thumb_fallback is None:
            return
        path = Path(frame.path) if frame is not None else None
        if path is None or not path.is_file():
            self._thumb_image.add_class("hidden")
            self._thumb_fallback.remove_class("hidden")
            message = "No thumbnail." if frame is None else f"Missing thumbnail:\n{frame.path}"
            self._thumb_fallback.update(message)
            return
        self._thumb_fallback.add_class("hidden")
        self._thumb_image.remove_class("hidden")
        _update_image_widget(self._thumb_image, path)
        self._thumb_image.tooltip = frame.label

    def _require_selection(self):
        video = self.state.selected
        if video is None:
            self._set_status("Select a video first.")
        return video

    def _highlighted_tag(self) -> str | None:
        if self._tag_list is None:
            return None
        item = self._tag_list.highlighted_child
        if isinstance(item, TagListItem):
            return item.tag_name
        return None

    def _sync_filter_config(self, previous: FilterCriteria) -> None:
        if self.state.filter == previous:
            return
        store_filter(self.config, self.state.filter)
        self._persist_config()

    def _persist_config(self) -> None:
        error = save_config(self.config, self._config_file)
        if error:
            logger.warning(error)
            self._set_status(error, error=True)

    def _set_status(self, message: str, *, error: bool = False) -> None:
        if self._status_bar is None:
            return
        self._status_bar.set_class(error, "error")
        self._status_bar.update(Text(message))


def _update_image_widget(widget: PreviewImage, path: Path) -> None:
    setter = getattr(widget, "set_image", None)
    if callable(setter):
        setter(path)
        return
    if hasattr(widget, "image"):
        setattr(widget, "image", path)
        return
    widget.update(str(path))


def _cli_help_text() -> str:
    return (
        "vidshelf - browse, filter, tag and rate a local video library\n\n"
        "Usage: vidshelf [LIBRARY] [--view grid|list] [--sort FIELD] [--desc]\n"
        "                [--dir DIRECTORY ...] [--log-file PATH]\n\n"
        "LIBRARY defaults to:\n"
        f"  {library_path()}\n"
        "Settings are stored in:\n"
        f"  {config_path()}\n\n"
        f"Sort fields: {', '.join(field.value for field in SortField)}\n\n"
        + HELP_TEXT
    )


def _configure_logging(log_file: Path | None) -> None:
    path = log_file or default_log_path()
    logging.basicConfig(
        filename=str(path),
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    if any(arg in {"-help", "--help", "-h"} for arg in sys.argv[1:]):
        print(_cli_help_text())
        return
    parser = argparse.ArgumentParser(prog="vidshelf", add_help=False)
    parser.add_argument("library", nargs="?", help="Path to the library JSON file")
    parser.add_argument("--view", choices=[mode.value for mode in ViewMode])
    parser.add_argument("--sort", choices=[field.value for field in SortField])
    parser.add_argument("--desc", action="store_true", help="Sort descending")
    parser.add_argument("--dir", action="append", default=[], help="Only show videos under DIR")
    parser.add_argument("--log-file", help="Write logs to this file")
    args = parser.parse_args()

    _configure_logging(Path(args.log_file).expanduser() if args.log_file else None)
    config, error = load_config()
    if error:
        logger.warning(error)
    if args.library:
        path = Path(args.library).expanduser()
    elif config.library_path:
        path = Path(config.library_path).expanduser()
    else:
        path = library_path()

    sort = None
    if args.sort or args.desc:
        base = sort_from_config(config)
        sort = SortSpec(
            SortField(args.sort) if args.sort else base.field,
            SortDirection.DESC if args.desc else base.direction,
        )
    view_mode = ViewMode(args.view) if args.view else None
    directories = [str(Path(value).expanduser()) for value in args.dir]
    app = VidshelfApp(
        JsonLibraryStore(path),
        config,
        directories=directories,
        view_mode=view_mode,
        sort=sort,
    )
    app.run()
