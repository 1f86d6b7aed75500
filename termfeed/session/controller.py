"""Key handling for the interactive reader.

Keys are dispatched on the input mode first and, in normal mode, on the
current view. Key names come from termfeed.tui.keys: printable characters
as themselves, plus "enter", "esc", "tab", "shift+tab", "backspace", "up",
"down", "pageup", "pagedown", "home" and "end".
"""

import logging
from typing import Any, Callable, Dict, List, Optional

import click

from termfeed.errors import TermfeedError
from termfeed.models.schemas import (
    AddFeedToCategory,
    CreateCategory,
    InputMode,
    RenameCategory,
    TimeFilter,
    View,
)
from termfeed.session.state import AppState

logger = logging.getLogger(__name__)

STARTER_FEEDS = {
    "1": "https://news.ycombinator.com/rss",
    "2": "https://feeds.feedburner.com/TechCrunch",
    "3": "https://rss.nytimes.com/services/xml/rss/nyt/HomePage.xml",
}

AGE_CYCLE: List[Optional[TimeFilter]] = [
    None,
    TimeFilter.TODAY,
    TimeFilter.THIS_WEEK,
    TimeFilter.THIS_MONTH,
    TimeFilter.OLDER,
]
TRISTATE_CYCLE: List[Optional[bool]] = [None, True, False]
LENGTH_CYCLE: List[Optional[int]] = [None, 100, 500, 1000]

PAGE = 10


def _next_in_cycle(cycle: List[Any], current: Any) -> Any:
    try:
        return cycle[(cycle.index(current) + 1) % len(cycle)]
    except ValueError:
        return cycle[0]


def _attempt(state: AppState, action: str, func: Callable[..., Any], *args: Any) -> bool:
    """Run ``func``; report a TermfeedError as a transient message. True on success."""
    try:
        func(*args)
    except TermfeedError as e:
        state.set_error(f"Failed to {action}: {e}")
        return False
    return True


def _move(current: Optional[int], delta: int, length: int) -> Optional[int]:
    if length == 0:
        return current
    if current is None:
        return 0
    return max(0, min(length - 1, current + delta))


def _start_input(state: AppState, mode: InputMode, initial: str = "") -> None:
    state.input = initial
    state.input_mode = mode


def _refresh(state: AppState) -> None:
    _attempt(state, "refresh feeds", state.refresh_feeds)


def _open_link(state: AppState) -> None:
    _attempt(state, "open link", state.open_current_item_in_browser)


def _open_category_management(state: AppState) -> None:
    state.view = View.CATEGORY_MANAGEMENT
    state.categories.reset_selection()


# ---- Normal mode, per view ----


def _dashboard_keys(state: AppState, key: str) -> None:
    if key == "f":
        state.input_mode = InputMode.FILTER_MODE
    elif key == "c":
        state.cycle_category_filter()
    elif key == "C":
        _open_category_management(state)
    elif key == "tab":
        state.view = View.FEED_LIST
    elif key == "a":
        _start_input(state, InputMode.INSERT_URL)
    elif key == "r":
        _refresh(state)
    elif key == "/":
        _start_input(state, InputMode.SEARCH_MODE)
    elif key in STARTER_FEEDS:
        if not state.feeds:
            _attempt(state, "add feed", state.add_feed, STARTER_FEEDS[key])
    elif key == "up":
        state.selected_item = _move(state.selected_item, -1, len(state.visible_items()))
    elif key == "down":
        state.selected_item = _move(state.selected_item, 1, len(state.visible_items()))
    elif key == "enter":
        if state.selected_item is None:
            return
        items = state.visible_items()
        if 0 <= state.selected_item < len(items):
            feed_idx, item_idx = items[state.selected_item]
            _attempt(state, "mark item as read", state.enter_detail_view, feed_idx, item_idx)
    elif key == "o":
        if state.selected_item is None:
            return
        pair = state.visible_item(state.selected_item)
        if pair is not None and pair[1].link:
            _attempt(state, "open link", _launch, pair[1].link)


def _launch(url: str) -> None:
    click.launch(url)


def _feed_list_keys(state: AppState, key: str) -> None:
    if key in ("tab", "shift+tab", "h", "esc", "home"):
        state.view = View.DASHBOARD
        state.selected_item = None
    elif key == "a":
        _start_input(state, InputMode.INSERT_URL)
    elif key == "d":
        _attempt(state, "remove feed", state.remove_current_feed)
    elif key == "/":
        _start_input(state, InputMode.SEARCH_MODE)
    elif key == "r":
        _refresh(state)
    elif key == "up":
        state.selected_feed = _move(state.selected_feed, -1, len(state.feeds))
    elif key == "down":
        state.selected_feed = _move(state.selected_feed, 1, len(state.feeds))
    elif key == "enter":
        if state.current_feed() is not None:
            state.selected_item = 0
            state.view = View.FEED_ITEMS
    elif key == "C":
        _open_category_management(state)
    elif key == "c":
        feed = state.current_feed()
        if feed is not None:
            state.category_action = AddFeedToCategory(feed.url)
            _open_category_management(state)


def _feed_items_keys(state: AppState, key: str) -> None:
    feed = state.current_feed()
    item_count = len(feed.items) if feed is not None else 0

    if key in ("esc", "h", "backspace"):
        state.view = View.FEED_LIST
        state.selected_item = None
    elif key == "home":
        state.view = View.DASHBOARD
        state.selected_item = None
    elif key == "/":
        _start_input(state, InputMode.SEARCH_MODE)
    elif key == "r":
        _refresh(state)
    elif key == "up":
        if state.selected_item is not None:
            state.selected_item = _move(state.selected_item, -1, item_count)
    elif key == "down":
        if state.selected_item is not None:
            state.selected_item = _move(state.selected_item, 1, item_count)
    elif key == "enter":
        if state.selected_feed is not None and state.current_item() is not None:
            _attempt(
                state, "mark item as read", state.enter_detail_view,
                state.selected_feed, state.selected_item,
            )
    elif key == "o":
        _open_link(state)


def _feed_item_detail_keys(state: AppState, key: str) -> None:
    if key in ("esc", "h", "backspace"):
        if state.is_searching:
            state.exit_detail_view(View.DASHBOARD)
            state.selected_item = 0
        else:
            state.exit_detail_view(View.FEED_ITEMS)
    elif key == "home":
        state.exit_detail_view(View.DASHBOARD)
        state.selected_item = None
    elif key == "up":
        state.scroll_detail(-1)
    elif key == "down":
        state.scroll_detail(1)
    elif key == "pageup":
        state.scroll_detail(-PAGE)
    elif key == "pagedown":
        state.scroll_detail(PAGE)
    elif key == "g":
        state.detail_scroll = 0
    elif key in ("G", "end"):
        state.detail_scroll = state.detail_max_scroll
    elif key == "r":
        _refresh(state)
    elif key == "o":
        _open_link(state)


def _category_management_keys(state: AppState, key: str) -> None:
    categories = state.categories
    selected = categories.selected
    action = state.category_action

    if key == "esc":
        state.view = View.FEED_LIST
        state.category_action = None
    elif key == "n":
        state.category_action = CreateCategory()
        _start_input(state, InputMode.CATEGORY_NAME_INPUT)
    elif key == "e" and selected is not None and selected < len(categories):
        state.category_action = RenameCategory(selected)
        _start_input(state, InputMode.CATEGORY_NAME_INPUT, categories[selected].name)
    elif key == "d" and selected is not None:
        _attempt(state, "delete category", categories.delete, selected)
    elif key == "enter":
        if isinstance(action, AddFeedToCategory) and selected is not None:
            if _attempt(state, "assign feed to category", categories.assign_feed, action.url, selected):
                state.view = View.FEED_LIST
                state.category_action = None
    elif key == "r":
        if isinstance(action, AddFeedToCategory) and selected is not None:
            _attempt(state, "remove feed from category", categories.remove_feed, action.url, selected)
    elif key == " " and selected is not None:
        _attempt(state, "toggle category", categories.toggle_expanded, selected)
    elif key == "up":
        categories.move_selection(-1)
    elif key == "down":
        categories.move_selection(1)


VIEW_HANDLERS: Dict[View, Callable[[AppState, str], None]] = {
    View.DASHBOARD: _dashboard_keys,
    View.FEED_LIST: _feed_list_keys,
    View.FEED_ITEMS: _feed_items_keys,
    View.FEED_ITEM_DETAIL: _feed_item_detail_keys,
    View.CATEGORY_MANAGEMENT: _category_management_keys,
}


# ---- Text-entry and filter modes ----


def _edit_input(state: AppState, key: str) -> None:
    if key == "backspace":
        state.input = state.input[:-1]
    elif len(key) == 1 and key.isprintable():
        state.input += key


def _insert_url_keys(state: AppState, key: str) -> None:
    if key == "enter":
        url = state.input.strip()
        if url:
            _attempt(state, "add feed", state.add_feed, url)
        state.input = ""
        state.input_mode = InputMode.NORMAL
    elif key == "esc":
        state.input = ""
        state.input_mode = InputMode.NORMAL
    else:
        _edit_input(state, key)


def _search_keys(state: AppState, key: str) -> None:
    if key == "enter":
        state.search(state.input.strip())
        state.selected_item = 0
        state.view = View.DASHBOARD
        state.input_mode = InputMode.NORMAL
    elif key == "esc":
        state.input = ""
        state.clear_search()
        state.input_mode = InputMode.NORMAL
    else:
        _edit_input(state, key)


def _filter_keys(state: AppState, key: str) -> None:
    options = state.filter_options

    if key == "esc":
        state.input_mode = InputMode.NORMAL
        return
    if key == "c":
        state.cycle_category_filter()
        return

    if key == "t":
        options.age = _next_in_cycle(AGE_CYCLE, options.age)
    elif key == "a":
        options.has_author = _next_in_cycle(TRISTATE_CYCLE, options.has_author)
    elif key == "r":
        options.read_status = _next_in_cycle(TRISTATE_CYCLE, options.read_status)
    elif key == "l":
        options.min_length = _next_in_cycle(LENGTH_CYCLE, options.min_length)
    elif key == "x":
        options.reset()
    else:
        return
    state.apply_filters()


def _category_name_keys(state: AppState, key: str) -> None:
    if key == "enter":
        action = state.category_action
        name = state.input
        if isinstance(action, CreateCategory):
            _attempt(state, "create category", state.categories.create, name)
        elif isinstance(action, RenameCategory):
            _attempt(state, "rename category", state.categories.rename, action.index, name)
        state.input = ""
        state.input_mode = InputMode.NORMAL
        state.category_action = None
    elif key == "esc":
        state.input = ""
        state.input_mode = InputMode.NORMAL
        state.category_action = None
    else:
        _edit_input(state, key)


MODE_HANDLERS: Dict[InputMode, Callable[[AppState, str], None]] = {
    InputMode.INSERT_URL: _insert_url_keys,
    InputMode.SEARCH_MODE: _search_keys,
    InputMode.FILTER_MODE: _filter_keys,
    InputMode.CATEGORY_NAME_INPUT: _category_name_keys,
}


def handle_key(state: AppState, key: str) -> bool:
    """Apply one key press to ``state``.

    Returns:
        True if the reader should exit
    """
    if state.input_mode is InputMode.NORMAL:
        if key == "q":
            logger.info("Quit requested")
            return True
        VIEW_HANDLERS[state.view](state, key)
    else:
        MODE_HANDLERS[state.input_mode](state, key)
    return False
