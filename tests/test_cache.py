"""Tests for the read-through query cache."""

from cache import ARTIFACTS_KEY, NOTES_KEY, QueryCache, artifact_key


def test_loader_called_once_until_invalidated() -> None:
    state = {}
    cache = QueryCache(state)
    calls = []

    def loader():
        calls.append(1)
        return len(calls)

    assert cache.get(ARTIFACTS_KEY, loader) == 1
    assert cache.get(ARTIFACTS_KEY, loader) == 1

    cache.invalidate(ARTIFACTS_KEY)

    assert cache.get(ARTIFACTS_KEY, loader) == 2


def test_invalidate_only_touches_named_keys() -> None:
    cache = QueryCache({})
    cache.get(ARTIFACTS_KEY, lambda: ["a"])
    cache.get(NOTES_KEY, lambda: ["n"])
    cache.get(artifact_key("1"), lambda: {"id": "1"})

    cache.invalidate(artifact_key("1"), ARTIFACTS_KEY)

    assert not cache.contains(ARTIFACTS_KEY)
    assert not cache.contains(artifact_key("1"))
    assert cache.peek(NOTES_KEY) == ["n"]


def test_entries_live_in_the_given_state() -> None:
    """Two caches over the same session state share entries."""
    state = {}
    QueryCache(state).get(NOTES_KEY, lambda: [1, 2])

    assert QueryCache(state).peek(NOTES_KEY) == [1, 2]
    assert QueryCache({}).peek(NOTES_KEY) is None
