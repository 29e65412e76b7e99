from __future__ import annotations

import queue
import threading

import pytest

from treeview_state import (
    DEBUG_MODE_KEY,
    VIEW_STATE_KEY,
    DebugModeState,
    InjectionKey,
    NotProvidedError,
    ViewStateCache,
    inject,
    provide,
    use_debug_mode,
    use_view_state,
)


def test_inject_without_provider_fails_loudly() -> None:
    with pytest.raises(NotProvidedError, match="view_state"):
        use_view_state()
    with pytest.raises(NotProvidedError):
        use_debug_mode()


def test_provided_values_are_injected_by_identity() -> None:
    cache = ViewStateCache()
    debug = DebugModeState()

    with provide(VIEW_STATE_KEY, cache) as provided, provide(DEBUG_MODE_KEY, debug):
        assert provided is cache
        assert use_view_state() is cache
        assert use_debug_mode() is debug

    with pytest.raises(NotProvidedError):
        use_view_state()


def test_keys_with_same_name_are_distinct() -> None:
    other = InjectionKey("view_state")
    with provide(other, "not a cache"):
        with pytest.raises(NotProvidedError):
            use_view_state()
        assert inject(other) == "not a cache"


def test_inner_scope_shadows_outer_scope() -> None:
    outer = ViewStateCache()
    inner = ViewStateCache()

    with provide(VIEW_STATE_KEY, outer):
        with provide(VIEW_STATE_KEY, inner):
            assert use_view_state() is inner
        assert use_view_state() is outer


def test_inject_default_is_returned_when_missing() -> None:
    assert inject(DEBUG_MODE_KEY, default=None) is None


def test_provide_requires_an_injection_key() -> None:
    with pytest.raises(TypeError):
        with provide("view_state", ViewStateCache()):  # type: ignore[arg-type]
            pass


def test_scope_is_removed_after_error() -> None:
    with pytest.raises(KeyError):
        with provide(VIEW_STATE_KEY, ViewStateCache()):
            raise KeyError("boom")
    with pytest.raises(NotProvidedError):
        use_view_state()


def test_provided_values_are_isolated_per_thread() -> None:
    cache_main = ViewStateCache()
    cache_thread = ViewStateCache()
    q: queue.Queue[object] = queue.Queue()

    def _worker() -> None:
        q.put(inject(VIEW_STATE_KEY, default=None))
        with provide(VIEW_STATE_KEY, cache_thread):
            q.put(use_view_state())

    with provide(VIEW_STATE_KEY, cache_main):
        t = threading.Thread(target=_worker)
        t.start()
        t.join()
        assert q.get(timeout=1) is None
        assert q.get(timeout=1) is cache_thread
        assert use_view_state() is cache_main
