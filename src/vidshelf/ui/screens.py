from __future__ import annotations

from dataclasses import dataclass

from textual import events
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Static

from ..models import RATING_MAX, RATING_MIN, VideoRecord


class HelpScreen(ModalScreen[None]):
    BINDINGS = [("escape", "close", "Close"), ("?", "close", "Close")]

    CSS = """
    HelpScreen {
        align: center middle;
        background: $surface 80%;
    }

    #help_dialog {
        width: 70%;
        max-width: 80;
        height: 80%;
        max-height: 90%;
        padding: 1 2;
        border: heavy $accent;
        background: $panel;
    }

    #help_scroll {
        height: 1fr;
    }

    #help_text {
        width: 100%;
    }

    #help_close {
        color: $text;
        background: $panel;
        border: round $accent;
    }

    #help_close:hover {
        background: $boost;
        color: $text;
    }
    """

    def __init__(self, help_text: str) -> None:
        super().__init__()
        self._help_text = help_text

    def compose(self) -> ComposeResult:
        with Vertical(id="help_dialog"):
            with VerticalScroll(id="help_scroll"):
                yield Static(self._help_text, id="help_text", markup=False)
            yield Button("Close", id="help_close")

    def on_mount(self) -> None:
        self.query_one("#help_scroll", VerticalScroll).focus()

    def action_close(self) -> None:
        self.dismiss(None)

    def on_key(self, event: events.Key) -> None:
        key = event.key
        character = event.character or ""
        if key == "escape" or key == "?" or character == "?":
            self.action_close()
            event.stop()
            return
        if key in {"up", "down", "pageup", "pagedown", "tab", "shift+tab"}:
            return
        event.stop()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "help_close":
            self.dismiss(None)


class TextPromptScreen(ModalScreen[str | None]):
    """Single-line prompt used for tag names and bulk tag edits."""

    BINDINGS = [("escape", "cancel", "Cancel")]

    CSS = """
    TextPromptScreen {
        align: center middle;
        background: $surface 80%;
    }

    #prompt_dialog {
        width: 70%;
        max-width: 80;
        padding: 1 2;
        border: heavy $accent;
        background: $panel;
    }

    #prompt_hint {
        color: $text-muted;
    }

    #prompt_error {
        color: $error;
        height: 1;
    }
    """

    def __init__(
        self,
        title: str,
        *,
        value: str = "",
        placeholder: str = "",
        hint: str = "",
        submit_label: str = "OK",
    ) -> None:
        super().__init__()
        self._title = title
        self._value = value
        self._placeholder = placeholder
        self._hint = hint
        self._submit_label = submit_label

    def compose(self) -> ComposeResult:
        with Vertical(id="prompt_dialog"):
            yield Label(self._title)
            yield Input(value=self._value, placeholder=self._placeholder, id="prompt_input")
            if self._hint:
                yield Static(self._hint, id="prompt_hint", markup=False)
            yield Label("", id="prompt_error")
            with Horizontal():
                yield Button(self._submit_label, id="prompt_submit")
                yield Button("Cancel", id="prompt_cancel")

    def on_mount(self) -> None:
        self.query_one("#prompt_input", Input).focus()

    def action_cancel(self) -> None:
        self.dismiss(None)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "prompt_cancel":
            self.dismiss(None)
        elif event.button.id == "prompt_submit":
            self._submit()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "prompt_input":
            self._submit()

    def _submit(self) -> None:
        input_widget = self.query_one("#prompt_input", Input)
        error_label = self.query_one("#prompt_error", Label)
        value = input_widget.value.strip()
        if not value:
            error_label.update("Please enter a value.")
            return
        self.dismiss(value)


class ConfirmScreen(ModalScreen[bool]):
    BINDINGS = [("escape", "cancel", "Cancel")]

    CSS = """
    ConfirmScreen {
        align: center middle;
        background: $surface 80%;
    }

    #confirm_dialog {
        width: 70%;
        max-width: 80;
        padding: 1 2;
        border: heavy $accent;
        background: $panel;
    }
    """

    def __init__(self, message: str, confirm_label: str = "Delete") -> None:
        super().__init__()
        self._message = message
        self._confirm_label = confirm_label

    def compose(self) -> ComposeResult:
        with Vertical(id="confirm_dialog"):
            yield Label(self._message)
            with Horizontal():
                yield Button(self._confirm_label, id="confirm_ok")
                yield Button("Cancel", id="confirm_cancel")

    def action_cancel(self) -> None:
        self.dismiss(False)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "confirm_cancel":
            self.dismiss(False)
        elif event.button.id == "confirm_ok":
            self.dismiss(True)


@dataclass(frozen=True)
class DetailsEdit:
    title: str
    description: str
    rating: int


class VideoDetailsScreen(ModalScreen[DetailsEdit | None]):
    BINDINGS = [("escape", "cancel", "Cancel")]

    CSS = """
    VideoDetailsScreen {
        align: center middle;
        background: $surface 80%;
    }

    #details_dialog {
        width: 80%;
        max-width: 100;
        padding: 1 2;
        border: heavy $accent;
        background: $panel;
    }

    #details_error {
        color: $error;
        height: 1;
    }
    """

    def __init__(self, video: VideoRecord) -> None:
        super().__init__()
        self._video = video

    def compose(self) -> ComposeResult:
        with Vertical(id="details_dialog"):
            yield Label(f"Edit {self._video.filename}")
            yield Label("Title")
            yield Input(value=self._video.title, id="details_title")
            yield Label("Description")
            yield Input(value=self._video.description, id="details_description")
            yield Label(f"Rating ({RATING_MIN}-{RATING_MAX})")
            yield Input(value=str(self._video.rating), id="details_rating")
            yield Label("", id="details_error")
            with Horizontal():
                yield Button("Save", id="details_save")
                yield Button("Cancel", id="details_cancel")

    def on_mount(self) -> None:
        self.query_one("#details_title", Input).focus()

    def action_cancel(self) -> None:
        self.dismiss(None)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "details_cancel":
            self.dismiss(None)
        elif event.button.id == "details_save":
            self._submit()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._submit()

    def _submit(self) -> None:
        error_label = self.query_one("#details_error", Label)
        title = self.query_one("#details_title", Input).value.strip()
        description = self.query_one("#details_description", Input).value.strip()
        rating_text = self.query_one("#details_rating", Input).value.strip() or "0"
        if not title:
            error_label.update("Title cannot be empty.")
            return
        rating = _parse_rating(rating_text)
        if rating is None:
            error_label.update(f"Rating must be a number from {RATING_MIN} to {RATING_MAX}.")
            return
        self.dismiss(DetailsEdit(title=title, description=description, rating=rating))


def _parse_rating(value: str) -> int | None:
    if not value.isdigit():
        return None
    rating = int(value)
    if not RATING_MIN <= rating <= RATING_MAX:
        return None
    return rating
