from __future__ import annotations

import ipywidgets as widgets
import pytest

from treeview_state import (
    DEBUG_MODE_KEY,
    VIEW_STATE_KEY,
    DebugModeState,
    NotProvidedError,
    ViewStateCache,
    ViewStateToolbar,
    format_zoom,
    provide,
)


def test_format_zoom() -> None:
    assert format_zoom(1.0) == "100%"
    assert format_zoom(1.25) == "125%"
    assert format_zoom(0.25) == "25%"


def test_toolbar_requires_a_cache() -> None:
    with pytest.raises(NotProvidedError):
        ViewStateToolbar()


def test_toolbar_uses_injected_cache() -> None:
    cache = ViewStateCache()
    with provide(VIEW_STATE_KEY, cache):
        toolbar = ViewStateToolbar()

    assert toolbar.cache is cache
    assert toolbar.debug_checkbox is None
    assert isinstance(toolbar.widget, widgets.HBox)
    assert len(toolbar.widget.children) == 4


def test_zoom_buttons_update_cache_and_readout() -> None:
    cache = ViewStateCache()
    cache.select_key("a")
    toolbar = ViewStateToolbar(cache)
    assert toolbar.zoom_label.value == "100%"

    toolbar.zoom_in_button.click()

    assert cache.get_zoom() == pytest.approx(1.25)
    assert cache.has_user_interacted() is True
    assert toolbar.zoom_label.value == "125%"

    toolbar.zoom_out_button.click()
    toolbar.zoom_out_button.click()

    assert cache.get_zoom() == pytest.approx(0.8)
    assert toolbar.zoom_label.value == "80%"


def test_zoom_in_stops_at_maximum() -> None:
    cache = ViewStateCache()
    cache.select_key("a")
    toolbar = ViewStateToolbar(cache)

    for _ in range(20):
        toolbar.zoom_in_button.click()

    assert cache.get_zoom() == 4.0
    assert toolbar.zoom_label.value == "400%"


def test_reset_button_restores_defaults() -> None:
    cache = ViewStateCache()
    cache.select_key("a")
    cache.apply_pan_delta(30, 40)
    toolbar = ViewStateToolbar(cache)
    toolbar.zoom_in_button.click()

    toolbar.reset_button.click()

    assert cache.snapshot().is_default()
    assert toolbar.zoom_label.value == "100%"


def test_readout_follows_example_switches() -> None:
    cache = ViewStateCache()
    cache.select_key("a")
    cache.set_zoom(2)
    toolbar = ViewStateToolbar(cache)
    assert toolbar.zoom_label.value == "200%"

    cache.select_key("b")
    assert toolbar.zoom_label.value == "100%"

    cache.select_key("a")
    assert toolbar.zoom_label.value == "200%"


def test_debug_checkbox_is_linked_to_injected_state() -> None:
    cache = ViewStateCache()
    debug = DebugModeState(True)
    with provide(VIEW_STATE_KEY, cache), provide(DEBUG_MODE_KEY, debug):
        toolbar = ViewStateToolbar()

    assert toolbar.debug_checkbox is not None
    assert toolbar.debug_checkbox.value is True
    assert len(toolbar.widget.children) == 5

    debug.select_node("n")
    toolbar.debug_checkbox.value = False
    assert debug.enabled is False
    assert debug.selection is None

    debug.enabled = True
    assert toolbar.debug_checkbox.value is True


def test_close_detaches_from_cache() -> None:
    cache = ViewStateCache()
    cache.select_key("a")
    toolbar = ViewStateToolbar(cache, debug_mode=DebugModeState())

    toolbar.close()
    cache.set_zoom(3)

    assert toolbar.zoom_label.value == "100%"
