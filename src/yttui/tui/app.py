"""yt-tui - Textual terminal dashboard for browsing YouTube videos.

Lists recommended videos, runs platform searches, shows watch history and
opens the selected video in mpv.
"""

from __future__ import annotations

import logging
from pathlib import Path

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Vertical
from textual.screen import ModalScreen
from textual.widgets import Input, Label, OptionList, Tab as TabWidget, Tabs

from yttui.config import Config
from yttui.history import HistoryError, WatchHistory
from yttui.player import PlayerError, open_in_mpv
from yttui.tui.widgets.controls import ControlsBar
from yttui.tui.widgets.filter_bar import FilterBar
from yttui.tui.widgets.header_bar import HeaderBar
from yttui.tui.widgets.video_list import VideoList
from yttui.view import FilterCriteria, Tab, ViewEngine
from yttui.youtube.client import YouTubeAPIError, YouTubeClient
from yttui.youtube.models import Video

logger = logging.getLogger(__name__)

DEFAULT_STATUS = "Press ? for help"


def parse_filter_inputs(
    creator: str, min_duration: str, max_duration: str, after_date: str,
) -> FilterCriteria:
    """Build FilterCriteria from the filter form's raw text.

    Blank fields are unconstrained. Raises ValueError for durations that
    aren't whole non-negative numbers of seconds.
    """
    def seconds(value: str, name: str) -> int | None:
        value = value.strip()
        if not value:
            return None
        if not value.isdigit():
            raise ValueError(f"{name} must be a whole number of seconds")
        return int(value)

    return FilterCriteria(
        creator=creator.strip() or None,
        min_duration=seconds(min_duration, "Min duration"),
        max_duration=seconds(max_duration, "Max duration"),
        after_date=after_date.strip() or None,
    )


class FilterScreen(ModalScreen[FilterCriteria | None]):
    """Modal form for editing the Current View filters."""

    DEFAULT_CSS = """
    FilterScreen {
        align: center middle;
    }
    FilterScreen > Container {
        width: 70;
        height: auto;
        border: thick $accent;
        background: $surface;
        padding: 1 2;
    }
    FilterScreen .flt-title {
        text-style: bold;
        margin-bottom: 1;
    }
    FilterScreen .flt-footer {
        color: $text-muted;
        margin-top: 1;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, criteria: FilterCriteria):
        super().__init__()
        self._criteria = criteria

    def compose(self) -> ComposeResult:
        c = self._criteria
        with Container():
            yield Label("Filters", classes="flt-title")
            yield Label("Channel contains:")
            yield Input(c.creator or "", placeholder="any channel", id="flt-creator")
            yield Label("Min duration (seconds):")
            yield Input(_opt_str(c.min_duration), placeholder="no minimum", id="flt-min")
            yield Label("Max duration (seconds):")
            yield Input(_opt_str(c.max_duration), placeholder="no maximum", id="flt-max")
            yield Label("Published after (RFC 3339):")
            yield Input(c.after_date or "", placeholder="2024-01-01T00:00:00Z", id="flt-after")
            yield Label("[Enter] Apply  [Esc] Cancel", classes="flt-footer", markup=False)

    def on_mount(self) -> None:
        self.query_one("#flt-creator", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        try:
            criteria = parse_filter_inputs(
                self.query_one("#flt-creator", Input).value,
                self.query_one("#flt-min", Input).value,
                self.query_one("#flt-max", Input).value,
                self.query_one("#flt-after", Input).value,
            )
        except ValueError as e:
            self.app.notify(str(e), severity="error", timeout=3)
            return
        self.dismiss(criteria)

    def action_cancel(self) -> None:
        self.dismiss(None)


class HelpScreen(ModalScreen):
    """Help screen showing all keybindings."""

    DEFAULT_CSS = """
    HelpScreen {
        align: center middle;
    }
    HelpScreen > Container {
        width: 60;
        height: auto;
        max-height: 24;
        border: thick $primary;
        background: $surface;
        padding: 1 2;
    }
    HelpScreen .help-title {
        text-style: bold;
        text-align: center;
        margin-bottom: 1;
    }
    HelpScreen .help-line {
        height: 1;
    }
    HelpScreen .help-footer {
        text-align: center;
        margin-top: 1;
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("escape", "dismiss_help", "Close"),
        Binding("question_mark", "dismiss_help", "Close"),
    ]

    HELP_LINES = [
        ("Up/K", "Previous video (wraps)"),
        ("Down/J", "Next video (wraps)"),
        ("Enter", "Play selected video in mpv"),
        ("W", "Mark selected as watched"),
        ("", ""),
        ("/", "Search the list (or YouTube on Search tab)"),
        ("Esc", "Leave search input"),
        ("F", "Edit filters"),
        ("S", "Cycle sort mode"),
        ("H", "Toggle hide watched"),
        ("", ""),
        ("1/2/3", "Current View / Search / History"),
        ("Tab", "Next tab (Shift+Tab: previous)"),
        ("R", "Refresh recommendations"),
        ("Q", "Quit"),
    ]

    def compose(self) -> ComposeResult:
        with Container():
            yield Label("Keybindings", classes="help-title")
            for key, desc in self.HELP_LINES:
                if not key:
                    yield Label("", classes="help-line")
                else:
                    yield Label(f"  [{key:>8}]  {desc}", classes="help-line", markup=False)
            yield Label("Press [?] or [Esc] to close", classes="help-footer", markup=False)

    def action_dismiss_help(self) -> None:
        self.dismiss()


def _opt_str(value: int | None) -> str:
    return "" if value is None else str(value)


class YtTuiApp(App):
    """yt-tui terminal UI."""

    TITLE = "YouTube TUI"
    AUTO_FOCUS = None

    CSS = """
    #main {
        height: 1fr;
    }
    #tabs {
        height: 2;
    }
    #filter-query, #platform-query {
        margin: 0 1;
    }
    #status {
        dock: bottom;
        height: 1;
        padding: 0 1;
        color: $text-muted;
    }
    #status.error {
        color: $error;
    }
    """

    BINDINGS = [
        Binding("q", "quit_app", "Quit", show=False),
        Binding("ctrl+c", "quit_app", "Quit", show=False, priority=True),
        Binding("up,k", "move_up", "Up", show=False),
        Binding("down,j", "move_down", "Down", show=False),
        Binding("enter", "play_selected", "Play", show=False),
        Binding("slash", "focus_search", "Search", show=False),
        Binding("escape", "leave_input", "Leave Input", show=False),
        Binding("s", "cycle_sort", "Sort", show=False),
        Binding("h", "toggle_hide_watched", "Hide Watched", show=False),
        Binding("w", "mark_watched", "Mark Watched", show=False),
        Binding("f", "show_filters", "Filters", show=False),
        Binding("r", "refresh", "Refresh", show=False),
        Binding("1", "select_tab('primary')", "Current View", show=False),
        Binding("2", "select_tab('search')", "Search", show=False),
        Binding("3", "select_tab('history')", "History", show=False),
        Binding("tab", "next_tab", "Next Tab", show=False, priority=True),
        Binding("shift+tab", "previous_tab", "Previous Tab", show=False, priority=True),
        Binding("question_mark", "show_help", "Help", show=False),
    ]

    def __init__(
        self,
        config: Config,
        history: WatchHistory,
        history_path: Path | None = None,
        client: YouTubeClient | None = None,
        hide_watched: bool | None = None,
    ):
        super().__init__()
        self.config = config
        self.history = history
        self.history_path = history_path
        self.client = client
        self.engine = ViewEngine(
            history,
            hide_watched=config.hide_watched if hide_watched is None else hide_watched,
            filters=FilterCriteria.from_settings(config.default_filters),
        )
        self._shown_videos: list[Video] | None = None
        self._refresh_pending = False
        self._search_pending = False
        self._history_pending = False

    def compose(self) -> ComposeResult:
        yield HeaderBar()
        with Vertical(id="main"):
            tabs = Tabs(
                *(TabWidget(tab.label, id=f"tab-{tab.value}") for tab in Tab),
                id="tabs",
            )
            tabs.can_focus = False
            yield tabs
            yield Input(placeholder="Filter the list (press /)", id="filter-query")
            yield Input(placeholder="Search YouTube, then press Enter", id="platform-query")
            yield FilterBar(id="filter-bar")
            yield VideoList()
        yield Label(DEFAULT_STATUS, id="status")
        yield ControlsBar()

    async def on_mount(self) -> None:
        if self.client is None:
            self.client = YouTubeClient.from_config(self.config)
        self.query_one("#platform-query", Input).display = False
        self._sync_view()
        self._start_refresh()

    async def on_unmount(self) -> None:
        if self.client:
            await self.client.close()

    # --- View sync ---

    def _sync_view(self, rebuild: bool = False) -> None:
        """Push engine state into the widgets."""
        state = self.engine.state
        videos = self.engine.active_list()
        video_list = self.query_one(VideoList)
        if rebuild or videos is not self._shown_videos:
            self._shown_videos = videos
            total = len(state.primary_items) if state.active_tab is Tab.PRIMARY else len(videos)
            video_list.update_videos(videos, total, self.history.is_watched)
        video_list.highlight(state.selected_index)
        self.query_one(FilterBar).update_state(state)
        self.query_one(HeaderBar).sort_label = state.sort_mode.label

    def _set_status(self, message: str, error: bool = False) -> None:
        status = self.query_one("#status", Label)
        status.update(message)
        status.set_class(error, "error")
        if error:
            logger.warning(message)
            self.notify(message, severity="error", timeout=3)

    def _update_loading(self) -> None:
        self.query_one(HeaderBar).loading = (
            self._refresh_pending or self._search_pending or self._history_pending
        )

    # --- Background fetches ---

    def _start_refresh(self) -> None:
        if self._refresh_pending:
            return
        self._refresh_pending = True
        self._update_loading()
        self._set_status("Fetching recommended videos...")
        self._fetch_primary()

    @work(group="refresh")
    async def _fetch_primary(self) -> None:
        try:
            videos = await self.client.fetch_recommended(self.config.max_results)
        except YouTubeAPIError as e:
            self._set_status(f"Error fetching videos: {e}", error=True)
            return
        finally:
            self._refresh_pending = False
            self._update_loading()

        if not videos:
            self._set_status("Warning: No videos found. Check your API key permissions.")
            return
        self.engine.set_primary_items(videos)
        self._set_status(f"Loaded {len(videos)} videos")
        self._sync_view()

    def _start_search(self) -> None:
        query = self.query_one("#platform-query", Input).value.strip()
        if not query or self._search_pending:
            return
        self._search_pending = True
        self._update_loading()
        self._set_status("Searching YouTube...")
        self._run_search(query)

    @work(group="search")
    async def _run_search(self, query: str) -> None:
        try:
            videos = await self.client.search(query, self.config.max_results)
        except YouTubeAPIError as e:
            self._set_status(f"Search failed: {e}", error=True)
            return
        finally:
            self._search_pending = False
            self._update_loading()

        self.engine.set_active_list_contents(Tab.SEARCH, videos)
        self._set_status(f"Found {len(videos)} videos")
        self._sync_view()

    def _start_history_load(self) -> None:
        if self._history_pending:
            return
        watched = self.history.all_watched_with_timestamps()
        if not watched:
            self._set_status("No watch history")
            return
        self._history_pending = True
        self._update_loading()
        self._set_status("Loading watch history...")
        self._load_history([video_id for video_id, _ in watched])

    @work(group="history")
    async def _load_history(self, video_ids: list[str]) -> None:
        try:
            videos = await self.client.fetch_by_ids(video_ids)
        except YouTubeAPIError as e:
            self._set_status(f"Failed to load history: {e}", error=True)
            return
        finally:
            self._history_pending = False
            self._update_loading()

        self.engine.set_active_list_contents(
            Tab.HISTORY, self.history.sort_by_watch_time(videos),
        )
        self._set_status(f"Loaded {len(videos)} watched videos")
        self._sync_view()

    # --- Playback ---

    def _play(self, video: Video) -> None:
        try:
            open_in_mpv(video.canonical_url)
        except PlayerError as e:
            self._set_status(f"Failed to open video: {e}", error=True)
            return
        self.engine.mark_current_watched()
        if self._save_history():
            self._set_status(f"Opened: {video.title}")
        self._sync_view(rebuild=True)

    def _save_history(self) -> bool:
        if self.history_path is None:
            return True
        try:
            self.history.save(self.history_path)
        except HistoryError as e:
            self._set_status(f"Failed to save history: {e}", error=True)
            return False
        return True

    # --- Tabs ---

    def _switch_tab(self, tab: Tab) -> None:
        self.engine.switch_tab(tab)
        filter_input = self.query_one("#filter-query", Input)
        platform_input = self.query_one("#platform-query", Input)
        filter_input.display = tab is Tab.PRIMARY
        platform_input.display = tab is Tab.SEARCH

        if tab is Tab.SEARCH:
            platform_input.focus()
            if not self.engine.state.search_results and platform_input.value.strip():
                self._start_search()
        else:
            self.set_focus(None)
            if tab is Tab.HISTORY and not self.engine.state.history_items:
                self._start_history_load()
        self._sync_view()

    def on_tabs_tab_activated(self, event: Tabs.TabActivated) -> None:
        if event.tab is None or event.tab.id is None:
            return
        self._switch_tab(Tab(event.tab.id.removeprefix("tab-")))

    def _activate_tab(self, tab: Tab) -> None:
        tabs = self.query_one(Tabs)
        tab_id = f"tab-{tab.value}"
        if tabs.active == tab_id:
            self._switch_tab(tab)
        else:
            # TabActivated handler performs the switch
            tabs.active = tab_id

    # --- Widget events ---

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "filter-query":
            self.engine.set_search_text(event.value)
            self._sync_view()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "platform-query":
            self._start_search()
        elif event.input.id == "filter-query":
            self.set_focus(None)

    def on_video_list_wheel(self, event: VideoList.Wheel) -> None:
        if event.direction < 0:
            self.action_move_up()
        else:
            self.action_move_down()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        if self.engine.select(event.option_index):
            video = self.engine.current_selection()
            if video:
                self._play(video)

    # --- Actions ---

    def action_quit_app(self) -> None:
        self.exit()

    def action_move_up(self) -> None:
        self.engine.move_previous()
        self._sync_view()

    def action_move_down(self) -> None:
        self.engine.move_next()
        self._sync_view()

    def action_play_selected(self) -> None:
        video = self.engine.current_selection()
        if video:
            self._play(video)

    def action_focus_search(self) -> None:
        tab = self.engine.state.active_tab
        if tab is Tab.PRIMARY:
            self.query_one("#filter-query", Input).focus()
        elif tab is Tab.SEARCH:
            self.query_one("#platform-query", Input).focus()

    def action_leave_input(self) -> None:
        self.set_focus(None)

    def action_cycle_sort(self) -> None:
        mode = self.engine.cycle_sort_mode()
        self._set_status(f"Sort: {mode.label}")
        self._sync_view()

    def action_toggle_hide_watched(self) -> None:
        self.engine.toggle_hide_watched()
        state = "on" if self.engine.state.hide_watched else "off"
        self._set_status(f"Hide watched: {state}")
        self._sync_view()

    def action_mark_watched(self) -> None:
        video = self.engine.mark_current_watched()
        if video is None:
            return
        if self._save_history():
            self._set_status(f"Marked as watched: {video.title}")
        self._sync_view(rebuild=True)

    def action_show_filters(self) -> None:
        self.push_screen(FilterScreen(self.engine.state.filters), self._on_filters_set)

    def _on_filters_set(self, criteria: FilterCriteria | None) -> None:
        if criteria is None:
            return
        self.engine.set_filters(criteria)
        if criteria.after_date and criteria.after_timestamp() is None:
            self._set_status(f"Ignoring after-date filter: {criteria.after_date!r} is not a timestamp")
        else:
            self._set_status("Filters updated")
        self._sync_view()

    def action_refresh(self) -> None:
        self._start_refresh()

    def action_select_tab(self, name: str) -> None:
        self._activate_tab(Tab(name))

    def action_next_tab(self) -> None:
        self._activate_tab(self.engine.state.active_tab.next())

    def action_previous_tab(self) -> None:
        self._activate_tab(self.engine.state.active_tab.previous())

    def action_show_help(self) -> None:
        self.push_screen(HelpScreen())
