"""JSON storage for termfeed.

Three files live in the data directory (~/.termfeed, or TERMFEED_DATA_DIR):

    bookmarks.json   ordered list of feed URLs
    categories.json  list of {id, name, feeds, expanded}
    read_items.json  list of durable item keys

Feed contents are never stored. A missing or corrupt file loads as an empty
collection so a bad file can never stop the reader from starting.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, List

from termfeed.errors import PersistenceError
from termfeed.models.schemas import FeedCategory

logger = logging.getLogger(__name__)

BOOKMARKS_FILE = "bookmarks.json"
CATEGORIES_FILE = "categories.json"
READ_ITEMS_FILE = "read_items.json"


class StateStore:
    """Reads and writes the persisted collections under ``data_dir``."""

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    # ---- Bookmarks ----

    def load_bookmarks(self) -> List[str]:
        data = self._read_list(BOOKMARKS_FILE)
        return [str(url) for url in data if isinstance(url, str) and url.strip()]

    def save_bookmarks(self, bookmarks: List[str]) -> None:
        self._write(BOOKMARKS_FILE, list(bookmarks))

    # ---- Categories ----

    def load_categories(self) -> List[FeedCategory]:
        categories = []
        for entry in self._read_list(CATEGORIES_FILE):
            try:
                categories.append(FeedCategory.from_dict(entry))
            except (KeyError, TypeError, AttributeError) as e:
                logger.warning(f"Skipping malformed category entry {entry!r}: {e}")
        return categories

    def save_categories(self, categories: List[FeedCategory]) -> None:
        self._write(CATEGORIES_FILE, [c.to_dict() for c in categories])

    # ---- Read items ----

    def load_read_items(self) -> List[str]:
        return [str(key) for key in self._read_list(READ_ITEMS_FILE) if isinstance(key, str)]

    def save_read_items(self, keys: List[str]) -> None:
        self._write(READ_ITEMS_FILE, list(keys))

    # ---- Internals ----

    def _read_list(self, name: str) -> List[Any]:
        path = self.data_dir / name
        if not path.exists():
            return []

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable state file {path}: {e}")
            return []

        if not isinstance(data, list):
            logger.warning(f"Ignoring state file {path}: expected a JSON list")
            return []
        return data

    def _write(self, name: str, payload: Any) -> None:
        path = self.data_dir / name
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, prefix=f".{name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(payload, handle, indent=2)
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            logger.error(f"Failed to save {path}: {e}")
            raise PersistenceError(f"Failed to save {name}: {e}") from e

        logger.debug(f"Saved {path}")
