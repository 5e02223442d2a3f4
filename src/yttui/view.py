"""View engine - derives the list the TUI renders and navigates.

Holds the raw video collections plus the transient UI state (search text,
filters, sort mode, hide-watched flag, active tab) and keeps a selection
cursor valid for whichever list the active tab shows.

Filtering and sorting only apply to the Current View (primary) list. Search
results and watch history are shown exactly as fetched.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from yttui.youtube.models import Video, parse_rfc3339

if TYPE_CHECKING:
    from yttui.config import FilterSettings
    from yttui.history import WatchHistory

logger = logging.getLogger(__name__)


class Tab(Enum):
    PRIMARY = "primary"
    SEARCH = "search"
    HISTORY = "history"

    @property
    def label(self) -> str:
        return _TAB_LABELS[self]

    def next(self) -> Tab:
        tabs = list(Tab)
        return tabs[(tabs.index(self) + 1) % len(tabs)]

    def previous(self) -> Tab:
        tabs = list(Tab)
        return tabs[(tabs.index(self) - 1) % len(tabs)]


class SortMode(Enum):
    NEWEST = "newest"
    VIEWS = "views"
    OLDEST = "oldest"
    CREATOR = "creator"

    @property
    def label(self) -> str:
        return _SORT_LABELS[self]

    def next(self) -> SortMode:
        modes = list(SortMode)
        return modes[(modes.index(self) + 1) % len(modes)]


_TAB_LABELS = {
    Tab.PRIMARY: "Current View",
    Tab.SEARCH: "Search",
    Tab.HISTORY: "History",
}

_SORT_LABELS = {
    SortMode.NEWEST: "Date (newest)",
    SortMode.VIEWS: "Views (highest)",
    SortMode.OLDEST: "Upload Date (oldest)",
    SortMode.CREATOR: "Creator (A-Z)",
}


@dataclass(frozen=True)
class FilterCriteria:
    """Optional predicates for the primary list. None means unconstrained."""

    creator: str | None = None
    min_duration: int | None = None
    max_duration: int | None = None
    after_date: str | None = None

    @classmethod
    def from_settings(cls, settings: FilterSettings) -> FilterCriteria:
        return cls(
            creator=settings.channel or None,
            min_duration=settings.min_duration,
            max_duration=settings.max_duration,
            after_date=settings.after_date or None,
        )

    def after_timestamp(self) -> datetime | None:
        """The after-date as a datetime, or None if absent or unparseable."""
        return parse_rfc3339(self.after_date)

    @property
    def is_empty(self) -> bool:
        return (
            not self.creator
            and self.min_duration is None
            and self.max_duration is None
            and self.after_timestamp() is None
        )


def filter_videos(
    videos: Iterable[Video],
    search_text: str = "",
    criteria: FilterCriteria | None = None,
    hide_watched: bool = False,
    is_watched: Callable[[str], bool] | None = None,
) -> list[Video]:
    """Apply the predicate pipeline in its fixed order.

    search text, creator, min duration, max duration, after date, watched.
    """
    criteria = criteria or FilterCriteria()
    result = list(videos)

    if search_text:
        query = search_text.lower()
        result = [
            v for v in result
            if query in v.title.lower()
            or query in v.creator.lower()
            or query in v.description.lower()
        ]

    if criteria.creator:
        creator = criteria.creator.lower()
        result = [v for v in result if creator in v.creator.lower()]

    if criteria.min_duration is not None:
        result = [v for v in result if v.duration_seconds >= criteria.min_duration]

    if criteria.max_duration is not None:
        result = [v for v in result if v.duration_seconds <= criteria.max_duration]

    after = criteria.after_timestamp()
    if after is not None:
        result = [v for v in result if v.published_at >= after]

    if hide_watched and is_watched is not None:
        result = [v for v in result if not is_watched(v.id)]

    return result


def sort_videos(videos: Iterable[Video], mode: SortMode) -> list[Video]:
    """Stable sort; equal keys keep their incoming order."""
    if mode is SortMode.NEWEST:
        return sorted(videos, key=lambda v: v.published_at, reverse=True)
    if mode is SortMode.VIEWS:
        return sorted(videos, key=lambda v: v.view_count, reverse=True)
    if mode is SortMode.OLDEST:
        return sorted(videos, key=lambda v: v.published_at)
    return sorted(videos, key=lambda v: v.creator)


@dataclass
class ViewState:
    """Everything the list view depends on."""

    primary_items: list[Video] = field(default_factory=list)
    derived_items: list[Video] = field(default_factory=list)
    search_results: list[Video] = field(default_factory=list)
    history_items: list[Video] = field(default_factory=list)
    selected_index: int = 0
    active_tab: Tab = Tab.PRIMARY
    search_text: str = ""
    sort_mode: SortMode = SortMode.NEWEST
    hide_watched: bool = False
    filters: FilterCriteria = field(default_factory=FilterCriteria)


class ViewEngine:
    """State transitions for the video list.

    Every method runs synchronously and leaves ``selected_index`` valid for
    the active list: inside it, or 0 when the list is empty.
    """

    def __init__(
        self,
        history: WatchHistory,
        hide_watched: bool = False,
        filters: FilterCriteria | None = None,
    ):
        self.history = history
        self.state = ViewState(
            hide_watched=hide_watched,
            filters=filters or FilterCriteria(),
        )

    # --- Derived list ---

    def recompute_derived(self) -> None:
        """Rebuild the derived list. No-op unless the primary tab is active."""
        state = self.state
        if state.active_tab is not Tab.PRIMARY:
            return
        filtered = filter_videos(
            state.primary_items,
            search_text=state.search_text,
            criteria=state.filters,
            hide_watched=state.hide_watched,
            is_watched=self.history.is_watched,
        )
        state.derived_items = sort_videos(filtered, state.sort_mode)
        state.selected_index = min(
            state.selected_index, max(len(state.derived_items) - 1, 0),
        )
        logger.debug(
            "Derived %d of %d videos (sort=%s)",
            len(state.derived_items), len(state.primary_items), state.sort_mode.value,
        )

    def set_primary_items(self, videos: list[Video]) -> None:
        self.state.primary_items = list(videos)
        self.recompute_derived()

    def set_search_text(self, text: str) -> None:
        self.state.search_text = text
        self.recompute_derived()

    def push_search_char(self, ch: str) -> None:
        self.set_search_text(self.state.search_text + ch)

    def pop_search_char(self) -> None:
        self.set_search_text(self.state.search_text[:-1])

    def clear_search(self) -> None:
        self.set_search_text("")

    def set_filters(self, criteria: FilterCriteria) -> None:
        self.state.filters = criteria
        self.recompute_derived()

    def toggle_hide_watched(self) -> None:
        self.state.hide_watched = not self.state.hide_watched
        self.recompute_derived()

    def cycle_sort_mode(self) -> SortMode:
        self.state.sort_mode = self.state.sort_mode.next()
        self.recompute_derived()
        return self.state.sort_mode

    # --- Tabs and selection ---

    def active_list(self, tab: Tab | None = None) -> list[Video]:
        """The backing list for a tab (the active tab by default)."""
        tab = tab or self.state.active_tab
        if tab is Tab.SEARCH:
            return self.state.search_results
        if tab is Tab.HISTORY:
            return self.state.history_items
        return self.state.derived_items

    def switch_tab(self, tab: Tab) -> None:
        self.state.active_tab = tab
        self.state.selected_index = 0
        self.recompute_derived()

    def set_active_list_contents(self, tab: Tab, videos: list[Video]) -> None:
        """Replace the search or history list and reset the selection."""
        if tab is Tab.PRIMARY:
            self.set_primary_items(videos)
            return
        if tab is Tab.SEARCH:
            self.state.search_results = list(videos)
        else:
            self.state.history_items = list(videos)
        self.state.selected_index = 0

    def move_next(self) -> None:
        items = self.active_list()
        if not items:
            return
        self.state.selected_index = (self.state.selected_index + 1) % len(items)

    def move_previous(self) -> None:
        items = self.active_list()
        if not items:
            return
        if self.state.selected_index == 0:
            self.state.selected_index = len(items) - 1
        else:
            self.state.selected_index -= 1

    def select(self, index: int) -> bool:
        """Select a row by index. Out-of-range indices are ignored."""
        if 0 <= index < len(self.active_list()):
            self.state.selected_index = index
            return True
        return False

    def current_selection(self) -> Video | None:
        items = self.active_list()
        if 0 <= self.state.selected_index < len(items):
            return items[self.state.selected_index]
        return None

    # --- Watched state ---

    def mark_current_watched(self) -> Video | None:
        """Mark the selected video watched, from any tab.

        On the primary tab with hide-watched on, the video drops out of the
        list immediately.
        """
        video = self.current_selection()
        if video is None:
            return None
        self.history.mark_watched(video.id)
        if self.state.hide_watched and self.state.active_tab is Tab.PRIMARY:
            self.recompute_derived()
        return video
