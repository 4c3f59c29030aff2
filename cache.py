"""
cache.py — Read-through query cache

Screens read entity collections through a QueryCache keyed by tuples such as
('artifacts',), ('artifact', id) and ('notes',). Mutations call invalidate()
on exactly the keys they could have made stale; the next read re-fetches.

Entries live inside a caller-supplied mapping (st.session_state in the app,
a plain dict in tests), so each browser session has its own cache.
"""

import logging
from typing import Any, Callable, Hashable, MutableMapping, Tuple

logger = logging.getLogger(__name__)

ARTIFACTS_KEY = ("artifacts",)
NOTES_KEY = ("notes",)


def artifact_key(artifact_id: str) -> Tuple[str, str]:
    return ("artifact", artifact_id)


class QueryCache:
    def __init__(self, state: MutableMapping, namespace: str = "query_cache"):
        if namespace not in state:
            state[namespace] = {}
        self._entries = state[namespace]

    def get(self, key: Hashable, loader: Callable[[], Any]) -> Any:
        """Return the cached value for key, calling loader on a miss."""
        key = tuple(key)
        if key in self._entries:
            return self._entries[key]
        logger.debug("Cache miss for %s", key)
        value = loader()
        self._entries[key] = value
        return value

    def peek(self, key: Hashable, default: Any = None) -> Any:
        return self._entries.get(tuple(key), default)

    def contains(self, key: Hashable) -> bool:
        return tuple(key) in self._entries

    def invalidate(self, *keys: Hashable) -> None:
        for key in keys:
            if self._entries.pop(tuple(key), None) is not None:
                logger.debug("Invalidated %s", tuple(key))
