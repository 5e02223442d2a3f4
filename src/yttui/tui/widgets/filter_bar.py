"""Filter bar widget - one-line summary of the active filters."""

from __future__ import annotations

from rich.text import Text
from textual.widgets import Static

from yttui.view import ViewState


def describe_filters(state: ViewState) -> Text:
    """Summarize search text, filters, hide-watched and sort for display."""
    text = Text()

    def add(name: str, value: str, style: str = "") -> None:
        if text.plain:
            text.append("  |  ", style="dim")
        text.append(f"{name}: ", style="cyan")
        text.append(value, style=style)

    criteria = state.filters
    if state.search_text:
        add("Search", state.search_text)
    if criteria.creator:
        add("Channel", criteria.creator)
    if criteria.min_duration is not None or criteria.max_duration is not None:
        low = f"{criteria.min_duration}s" if criteria.min_duration is not None else "0s"
        high = f"{criteria.max_duration}s" if criteria.max_duration is not None else "∞"
        add("Duration", f"{low} - {high}")
    if criteria.after_date:
        if criteria.after_timestamp() is None:
            add("After", f"{criteria.after_date} (invalid, ignored)", "red")
        else:
            add("After", criteria.after_date)
    add(
        "Hide Watched",
        "Yes" if state.hide_watched else "No",
        "green" if state.hide_watched else "dim",
    )
    add("Sort", state.sort_mode.label, "magenta")
    return text


class FilterBar(Static):
    """Shows the filters applied to the Current View list."""

    DEFAULT_CSS = """
    FilterBar {
        height: 1;
        padding: 0 1;
        background: $surface;
    }
    """

    def update_state(self, state: ViewState) -> None:
        self.update(describe_filters(state))
