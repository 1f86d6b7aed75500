"""termfeed - terminal feed reader entry point.

Parses the command line, sets up configuration and logging, then either
imports an OPML file and exits or runs the interactive loop until 'q'.
"""

import sys
from typing import Optional

import click
from rich.console import Console
from rich.live import Live

from termfeed.config import AppConfig, load_config, set_config
from termfeed.errors import TermfeedError
from termfeed.logging_config import logger, setup_logging
from termfeed.models.schemas import InputMode, View
from termfeed.services.opml import import_opml
from termfeed.session.controller import handle_key
from termfeed.session.state import AppState
from termfeed.storage.state_store import StateStore
from termfeed.tui.keys import KeyReader
from termfeed.tui.render import render


def run_import(path: str, config: AppConfig) -> int:
    """Bookmark every feed listed in the OPML file at ``path``."""
    store = StateStore(config.data_dir)
    state = AppState.from_store(store, config=config)

    urls = import_opml(path)
    added = state.import_urls(urls)
    logger.info(f"OPML import from {path}: {added} new of {len(urls)} feeds")
    click.echo(f"Imported {added} new feed(s) ({len(urls) - added} already bookmarked)")
    return 0


def _refreshes(state: AppState) -> bool:
    return state.input_mode is InputMode.NORMAL and state.view is not View.CATEGORY_MANAGEMENT


def run_interactive(config: AppConfig, console: Optional[Console] = None) -> int:
    """Run the reader until the user quits."""
    console = console or Console()
    store = StateStore(config.data_dir)
    state = AppState.from_store(store, config=config)

    with console.status(f"Loading {len(state.bookmarks)} feeds..."):
        state.load_bookmarked_feeds()

    with KeyReader() as keys, Live(
        render(state, console.size.width, console.size.height),
        console=console,
        screen=True,
        auto_refresh=False,
    ) as live:
        while True:
            key = keys.read_key(config.tick_seconds)
            if key is None:
                state.tick()
            else:
                if key == "r" and _refreshes(state):
                    # Draw the spinner before the blocking refresh starts.
                    state.is_loading = True
                    live.update(render(state, console.size.width, console.size.height), refresh=True)
                if handle_key(state, key):
                    break
            live.update(render(state, console.size.width, console.size.height), refresh=True)

    logger.info("Reader stopped")
    return 0


@click.command()
@click.option(
    "--import",
    "import_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Import feeds from an OPML file and exit",
)
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory for bookmarks, categories and read state (default: ~/.termfeed)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level for the log file in the data directory",
)
def main(import_path: Optional[str], data_dir: Optional[str], log_level: Optional[str]) -> None:
    """Read RSS and Atom feeds in the terminal."""
    try:
        config = load_config(data_dir=data_dir, log_level=log_level)
    except ValueError as e:
        raise click.ClickException(str(e))

    set_config(config)
    setup_logging(config)
    logger.info(f"Starting {config.name} with data dir {config.data_dir}")

    try:
        if import_path is not None:
            code = run_import(import_path, config)
        elif not sys.stdin.isatty():
            raise click.ClickException("termfeed needs an interactive terminal (or use --import)")
        else:
            code = run_interactive(config)
    except KeyboardInterrupt:
        logger.info("Reader stopped by user")
        code = 0
    except TermfeedError as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        raise click.ClickException(str(e))

    sys.exit(code)


if __name__ == "__main__":
    main()
