"""Video list widget - multi-line rows for the active tab's videos."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from rich.text import Text
from textual import events
from textual.app import ComposeResult
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Label, OptionList
from textual.widgets.option_list import Option

from yttui.youtube.models import Video


def _format_duration(seconds: int) -> str:
    """Format seconds as MM:SS, or HH:MM:SS from one hour up."""
    seconds = max(0, int(seconds))
    hours, rem = divmod(seconds, 3600)
    minutes, secs = divmod(rem, 60)
    if hours:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


def _format_views(count: int) -> str:
    if count >= 1_000_000:
        return f"{count / 1_000_000:.1f}M"
    if count >= 1_000:
        return f"{count / 1_000:.1f}K"
    return str(count)


def _format_date(published_at: datetime) -> str:
    return published_at.strftime("%a. %d.%m.%Y")


def _video_prompt(video: Video, watched: bool) -> Text:
    text = Text()
    text.append(video.title, style="bold")
    if watched:
        text.append(" [WATCHED]", style="bold green")
    text.append("\n")
    text.append(f"  Creator: {video.creator}\n", style="cyan")
    text.append(f"  Duration: {_format_duration(video.duration_seconds)}", style="magenta")
    text.append(f"  Uploaded: {_format_date(video.published_at)}", style="yellow")
    text.append(f"  Views: {_format_views(video.view_count)}", style="dim")
    return text


class _VideoOptions(OptionList):
    """OptionList whose mouse wheel steps the selection instead of scrolling."""

    def on_mouse_scroll_up(self, event: events.MouseScrollUp) -> None:
        event.prevent_default()
        event.stop()
        self.post_message(VideoList.Wheel(-1))

    def on_mouse_scroll_down(self, event: events.MouseScrollDown) -> None:
        event.prevent_default()
        event.stop()
        self.post_message(VideoList.Wheel(1))


class VideoList(Widget):
    """Displays the active list of videos.

    Rows are options of an OptionList, so a clicked row's option index is
    the video's index in the list.
    """

    class Wheel(Message):
        """Mouse wheel over the rows: -1 up, 1 down."""

        def __init__(self, direction: int) -> None:
            super().__init__()
            self.direction = direction

    DEFAULT_CSS = """
    VideoList {
        height: 1fr;
        padding: 0 1;
    }
    VideoList .vl-header {
        text-style: bold;
        height: 1;
    }
    VideoList OptionList {
        height: 1fr;
        border: none;
    }
    VideoList OptionList > .option-list--option {
        padding: 0 1 1 1;
    }
    VideoList .vl-empty {
        text-style: italic;
        color: $text-muted;
        text-align: center;
        margin: 1 0;
    }
    """

    def compose(self) -> ComposeResult:
        yield Label("Videos (0/0)", id="vl-header", classes="vl-header")
        options = _VideoOptions(id="vl-options")
        options.can_focus = False
        yield options
        yield Label("No videos to display", id="vl-empty", classes="vl-empty")

    def update_videos(
        self,
        videos: list[Video],
        total: int,
        is_watched: Callable[[str], bool],
    ) -> None:
        """Rebuild the rows."""
        options = self.query_one("#vl-options", OptionList)
        empty_label = self.query_one("#vl-empty", Label)
        self.query_one("#vl-header", Label).update(f"Videos ({len(videos)}/{total})")

        options.clear_options()
        if not videos:
            empty_label.display = True
            options.display = False
            return

        empty_label.display = False
        options.display = True
        options.add_options([
            Option(_video_prompt(video, is_watched(video.id)))
            for video in videos
        ])

    def highlight(self, index: int) -> None:
        options = self.query_one("#vl-options", OptionList)
        if options.option_count:
            options.highlighted = index
