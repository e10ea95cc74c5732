"""Bookmarks kept on the visitor's side.

Bookmarks live under a single key of a small key/value storage, as a JSON
object mapping tool slug to ``{"slug", "name"}``. The storage is passed in:
the web app uses the signed session cookie, the CLI a local JSON file.
A cookie only holds about 4KB, so a store can be given a size budget for
the encoded value, measured as a quoted JSON string since that is how a
session embeds it. Adding past the budget raises ``BookmarkLimitReached``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict
from typing import MutableMapping
from typing import Optional
from typing import Protocol

from .errors import BookmarkLimitReached

logger = logging.getLogger(__name__)

BOOKMARKS_KEY = "bookmarks"


class Storage(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...


class MemoryStorage:
    def __init__(self) -> None:
        self._items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value


class SessionStorage:
    """Storage over a request session, which travels in a signed cookie."""

    def __init__(self, session: MutableMapping) -> None:
        self._session = session

    def get_item(self, key: str) -> Optional[str]:
        return self._session.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._session[key] = value


class JsonFileStorage:
    """All keys in one JSON file on disk."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text())
        except json.JSONDecodeError as exc:
            logger.warning(f"Ignoring unreadable storage file {self.path}: {exc}")
            return {}
        return data if isinstance(data, dict) else {}

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2))


class BookmarkStore:
    def __init__(self, storage: Storage, key: str = BOOKMARKS_KEY, max_bytes: Optional[int] = None) -> None:
        self.storage = storage
        self.key = key
        self.max_bytes = max_bytes

    def all(self) -> Dict[str, Dict[str, str]]:
        raw = self.storage.get_item(self.key)
        if not raw:
            return {}
        if not isinstance(raw, str):
            logger.warning("Discarding bookmarks value that is not a string")
            return {}
        try:
            bookmarks = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding unreadable bookmarks value")
            return {}
        if not isinstance(bookmarks, dict):
            logger.warning("Discarding bookmarks value that is not an object")
            return {}

        valid = {
            slug: entry
            for slug, entry in bookmarks.items()
            if isinstance(entry, dict) and isinstance(entry.get("slug"), str)
        }
        if len(valid) != len(bookmarks):
            logger.warning(f"Dropped {len(bookmarks) - len(valid)} malformed bookmark entries")
        return valid

    @staticmethod
    def _encode(bookmarks: Dict[str, Dict[str, str]]) -> str:
        return json.dumps(bookmarks, separators=(",", ":"))

    def is_bookmarked(self, slug: str) -> bool:
        return slug in self.all()

    def toggle(self, slug: str, name: str) -> bool:
        """Bookmark ``slug``, or remove it if already bookmarked. Returns the new state."""
        bookmarks = self.all()
        if slug in bookmarks:
            del bookmarks[slug]
            self.storage.set_item(self.key, self._encode(bookmarks))
            return False

        bookmarks[slug] = {"slug": slug, "name": name}
        encoded = self._encode(bookmarks)
        size = len(json.dumps(encoded))
        if self.max_bytes is not None and size > self.max_bytes:
            raise BookmarkLimitReached(f"Bookmarks would need {size} bytes, limit is {self.max_bytes}")
        self.storage.set_item(self.key, encoded)
        return True

    def remove(self, slug: str) -> None:
        bookmarks = self.all()
        if bookmarks.pop(slug, None) is not None:
            self.storage.set_item(self.key, self._encode(bookmarks))
