"""Header bar widget - app name on the left, sort and fetch state on the right."""

from rich.table import Table
from rich.text import Text
from textual.reactive import reactive
from textual.widget import Widget


def header_status(sort_label: str, loading: bool) -> Text:
    """Right-hand side of the header: current sort and fetch state."""
    text = Text()
    if sort_label:
        text.append(f"Sort: {sort_label}", style="dim")
        text.append("   ")
    if loading:
        text.append("Loading...", style="bold yellow")
    else:
        text.append("Ready", style="bold green")
    return text


class HeaderBar(Widget):
    """Single-row header, repainted whenever the sort or fetch state changes."""

    DEFAULT_CSS = """
    HeaderBar {
        dock: top;
        height: 1;
        background: $primary;
        color: $text;
        padding: 0 1;
    }
    HeaderBar.-loading {
        background: $primary-darken-2;
    }
    """

    sort_label: reactive[str] = reactive("")
    loading: reactive[bool] = reactive(False)

    def watch_loading(self, loading: bool) -> None:
        self.set_class(loading, "-loading")

    def render(self) -> Table:
        grid = Table.grid(expand=True)
        grid.add_column(justify="left")
        grid.add_column(justify="right")
        grid.add_row(
            Text("YouTube TUI", style="bold"),
            header_status(self.sort_label, self.loading),
        )
        return grid
