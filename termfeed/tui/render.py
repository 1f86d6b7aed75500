"""Screen rendering with rich.

Rendering only reads the session state, except for the detail view, which
reports the scrollable height back so scrolling can be clamped.
"""

from typing import List, Optional, Tuple

from rich.console import Group, RenderableType
from rich.layout import Layout
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from termfeed.models.schemas import AddFeedToCategory, Feed, FeedItem, InputMode, View
from termfeed.services.text import html_to_text
from termfeed.session.state import AppState

SPINNER = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"

HEADER_HEIGHT = 3
FOOTER_HEIGHT = 3
# Panel borders plus the title/meta block above the body text.
DETAIL_CHROME = 8

HELP = {
    View.DASHBOARD: "↑↓ select  enter open  / search  f filter  c category  tab feeds  a add  r refresh  C categories  q quit",
    View.FEED_LIST: "↑↓ select  enter items  a add  d delete  c assign category  C categories  tab dashboard  q quit",
    View.FEED_ITEMS: "↑↓ select  enter read  o open  esc back  home dashboard  q quit",
    View.FEED_ITEM_DETAIL: "↑↓ scroll  pgup/pgdn page  g/G top/bottom  o open  esc back  q quit",
    View.CATEGORY_MANAGEMENT: "↑↓ select  n new  e rename  d delete  space expand  enter assign  r unassign  esc back",
}

MODE_PROMPTS = {
    InputMode.INSERT_URL: "Feed URL: ",
    InputMode.SEARCH_MODE: "Search: ",
    InputMode.CATEGORY_NAME_INPUT: "Category name: ",
}

FILTER_HELP = "c category  t age  a author  r read  l length  x clear  esc done"


def _item_row(state: AppState, feed: Feed, item: FeedItem, ref: Tuple[int, int]) -> List[str]:
    marker = " " if state.is_read(*ref) else "●"
    return [marker, item.title, feed.title, item.formatted_date or ""]


def _item_table(state: AppState, refs: List[Tuple[int, int]], selected: Optional[int], height: int) -> Table:
    table = Table(expand=True, show_edge=False, box=None, pad_edge=False)
    table.add_column("", width=1)
    table.add_column("Title", ratio=5, no_wrap=True)
    table.add_column("Feed", ratio=2, no_wrap=True)
    table.add_column("Published", ratio=1, no_wrap=True)

    start = 0
    if selected is not None and selected >= height:
        start = selected - height + 1

    for position in range(start, min(len(refs), start + height)):
        ref = refs[position]
        feed_idx, item_idx = ref
        if feed_idx >= len(state.feeds) or item_idx >= len(state.feeds[feed_idx].items):
            continue
        feed = state.feeds[feed_idx]
        style = "reverse" if position == selected else ""
        table.add_row(*_item_row(state, feed, feed.items[item_idx], ref), style=style)
    return table


def _dashboard(state: AppState, height: int) -> RenderableType:
    refs = state.visible_items()
    if state.is_searching:
        title = f"Search: {state.search_query} ({len(refs)} results)"
    else:
        active, shown, total = state.filter_stats()
        title = "Dashboard" if not active else f"Dashboard ({shown}/{total}) {state.filter_options.summary()}"

    if not refs:
        if not state.feeds:
            body: RenderableType = Text(
                "No feeds yet. Press 'a' to add one, or 1/2/3 for Hacker News, TechCrunch or NYTimes."
            )
        else:
            body = Text("Nothing matches.")
    else:
        body = _item_table(state, refs, state.selected_item, height)
    return Panel(body, title=title, border_style="cyan")


def _feed_list(state: AppState, height: int) -> RenderableType:
    table = Table(expand=True, show_edge=False, box=None)
    table.add_column("Feed", ratio=3, no_wrap=True)
    table.add_column("Items", justify="right")
    table.add_column("Category", ratio=1, no_wrap=True)
    table.add_column("URL", ratio=3, no_wrap=True)

    for idx, feed in enumerate(state.feeds[:height]):
        cat_idx = state.categories.category_for_feed(feed.url)
        category = state.categories[cat_idx].name if cat_idx is not None else ""
        style = "reverse" if idx == state.selected_feed else ""
        table.add_row(feed.title, str(len(feed.items)), category, feed.url, style=style)

    return Panel(table, title=f"Feeds ({len(state.feeds)})", border_style="green")


def _feed_items(state: AppState, height: int) -> RenderableType:
    feed = state.current_feed()
    if feed is None:
        return Panel(Text("No feed selected."), title="Items")
    refs = [(state.selected_feed, idx) for idx in range(len(feed.items))]
    return Panel(_item_table(state, refs, state.selected_item, height), title=feed.title, border_style="green")


def _detail(state: AppState, width: int, height: int) -> RenderableType:
    feed = state.current_feed()
    item = state.current_item()
    if feed is None or item is None:
        return Panel(Text("No item selected."), title="Item")

    meta = Text()
    meta.append(item.title + "\n", style="bold")
    meta.append(feed.title, style="cyan")
    if item.author:
        meta.append(f" · {item.author}")
    if item.formatted_date:
        meta.append(f" · {item.formatted_date}")
    if item.link:
        meta.append("\n" + item.link, style="underline blue")

    body = html_to_text(item.description or "", max(20, min(state.config.wrap_width, width - 4)))
    lines = body.splitlines() or ["(no content)"]
    viewport = max(1, height - DETAIL_CHROME)
    state.update_detail_max_scroll(len(lines), viewport)

    visible = "\n".join(lines[state.detail_scroll:state.detail_scroll + viewport])
    return Panel(Group(meta, Text(""), Text(visible)), title="Item", border_style="magenta")


def _categories(state: AppState) -> RenderableType:
    manager = state.categories
    text = Text()
    if not len(manager):
        text.append("No categories. Press 'n' to create one.")

    for idx, category in enumerate(manager):
        style = "reverse" if idx == manager.selected else ""
        arrow = "▾" if category.expanded else "▸"
        text.append(f"{arrow} {category.name} ({category.feed_count()})\n", style=style)
        if category.expanded:
            for url in sorted(category.feeds):
                text.append(f"    {url}\n", style="dim")

    title = "Categories"
    pending = state.category_action
    if isinstance(pending, AddFeedToCategory):
        title = f"Categories: assign {pending.url}"
    return Panel(text, title=title, border_style="yellow")


def _header(state: AppState) -> RenderableType:
    text = Text("termfeed", style="bold")
    text.append(f"  {len(state.feeds)} feeds · {len(state.dashboard_items)} items")
    if state.is_loading:
        text.append(f"  {SPINNER[state.loading_indicator % len(SPINNER)]} refreshing")
    return Panel(text, border_style="blue")


def _footer(state: AppState) -> RenderableType:
    if state.error:
        return Panel(Text(state.error, style="bold red"), border_style="red")
    if state.input_mode in MODE_PROMPTS:
        return Panel(Text(MODE_PROMPTS[state.input_mode] + state.input + "█"), border_style="white")
    if state.input_mode is InputMode.FILTER_MODE:
        return Panel(Text(f"{state.filter_options.summary()}   [{FILTER_HELP}]"), border_style="white")
    return Panel(Text(HELP[state.view], style="dim"), border_style="white")


def render(state: AppState, width: int, height: int) -> Layout:
    """Build the whole screen for a terminal of ``width`` x ``height``."""
    body_height = max(1, height - HEADER_HEIGHT - FOOTER_HEIGHT)
    rows = max(1, body_height - 2)

    if state.view is View.DASHBOARD:
        body = _dashboard(state, rows)
    elif state.view is View.FEED_LIST:
        body = _feed_list(state, rows)
    elif state.view is View.FEED_ITEMS:
        body = _feed_items(state, rows)
    elif state.view is View.FEED_ITEM_DETAIL:
        body = _detail(state, width, body_height)
    else:
        body = _categories(state)

    layout = Layout()
    layout.split_column(
        Layout(_header(state), size=HEADER_HEIGHT),
        Layout(body),
        Layout(_footer(state), size=FOOTER_HEIGHT),
    )
    return layout
