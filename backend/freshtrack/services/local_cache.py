"""
Local item cache — the JSON blobs a device keeps before its first sign-in.

A cache is a flat key/value map of JSON-decoded values, mirroring the
browser's localStorage (`foodItems`, `deletedItems`). The migration endpoint
wraps the blob the browser posts and tells the browser to clear its own copy
once the cache here has been emptied.
"""

from typing import Any

ITEMS_KEY = "foodItems"
DELETED_ITEMS_KEY = "deletedItems"


class MemoryItemCache:
    """Key/value cache held in a dict."""

    def __init__(self, data: dict[str, Any] | None = None):
        self._data: dict[str, Any] = dict(data or {})

    def get_json(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set_json(self, key: str, value: Any) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)
