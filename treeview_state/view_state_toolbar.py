"""Notebook control strip for the current example's view state.

``ViewStateToolbar`` builds a small ``ipywidgets`` row:

- zoom-out / zoom-in buttons (step ``ZOOM_STEP``, marking interaction),
- a zoom percentage readout,
- a reset button calling ``reset_view()``,
- optionally, a debug-mode checkbox linked to a ``DebugModeState``.

The readout follows the cache through a ``ViewStateRef``, so it stays current
when the user switches examples or another control changes the zoom. Drawing
the tree is someone else's job.

Examples
--------
>>> from treeview_state import ViewStateCache, provide, VIEW_STATE_KEY  # doctest: +SKIP
>>> cache = ViewStateCache()  # doctest: +SKIP
>>> with provide(VIEW_STATE_KEY, cache):  # doctest: +SKIP
...     toolbar = ViewStateToolbar()
>>> toolbar.widget  # doctest: +SKIP
"""

from __future__ import annotations

from typing import Any, Optional

import ipywidgets as widgets
import traitlets

from .debug_mode import DebugModeState
from .view_state_cache import ViewStateCache
from .view_state_context import DEBUG_MODE_KEY, inject, use_view_state
from .ViewStateEvent import ViewStateEvent

ZOOM_STEP = 1.25


def format_zoom(zoom: float) -> str:
    """Return ``zoom`` as a whole percentage, e.g. ``1.25 -> "125%"``."""
    return f"{round(zoom * 100)}%"


class ViewStateToolbar:
    """Zoom/reset controls bound to a view-state cache.

    Parameters
    ----------
    cache : ViewStateCache, optional
        Cache to control. Defaults to the injected one; a missing injection
        raises ``NotProvidedError``.
    debug_mode : DebugModeState, optional
        Debug state for the checkbox. Defaults to the injected one if any;
        without it the checkbox is omitted.
    """

    def __init__(
        self,
        cache: Optional[ViewStateCache] = None,
        *,
        debug_mode: Optional[DebugModeState] = None,
    ) -> None:
        self._cache = cache if cache is not None else use_view_state()
        self._debug_mode = (
            debug_mode if debug_mode is not None else inject(DEBUG_MODE_KEY, default=None)
        )
        self._zoom_ref = self._cache.ref("zoom")

        button_layout = widgets.Layout(width="36px")
        self.zoom_out_button = widgets.Button(
            description="−", tooltip="Zoom out", layout=button_layout
        )
        self.zoom_in_button = widgets.Button(
            description="+", tooltip="Zoom in", layout=button_layout
        )
        self.reset_button = widgets.Button(description="Reset", tooltip="Reset view")
        self.zoom_label = widgets.HTML(value=format_zoom(self._zoom_ref.value))

        self.zoom_out_button.on_click(self._on_zoom_out)
        self.zoom_in_button.on_click(self._on_zoom_in)
        self.reset_button.on_click(self._on_reset)
        self._zoom_ref.observe(self._on_zoom_change)

        children: list[widgets.Widget] = [
            self.zoom_out_button,
            self.zoom_label,
            self.zoom_in_button,
            self.reset_button,
        ]
        self.debug_checkbox: Optional[widgets.Checkbox] = None
        self._debug_link: Optional[traitlets.link] = None
        if self._debug_mode is not None:
            self.debug_checkbox = widgets.Checkbox(
                value=self._debug_mode.enabled, description="Debug", indent=False
            )
            self._debug_link = traitlets.link(
                (self._debug_mode, "enabled"), (self.debug_checkbox, "value")
            )
            children.append(self.debug_checkbox)

        self.widget = widgets.HBox(children)

    @property
    def cache(self) -> ViewStateCache:
        return self._cache

    def _on_zoom_change(self, event: ViewStateEvent) -> None:
        self.zoom_label.value = format_zoom(event.new)

    def _zoom_by(self, factor: float) -> None:
        self._cache.set_zoom(self._cache.get_zoom() * factor)
        self._cache.mark_interaction()

    def _on_zoom_in(self, _button: Any) -> None:
        self._zoom_by(ZOOM_STEP)

    def _on_zoom_out(self, _button: Any) -> None:
        self._zoom_by(1.0 / ZOOM_STEP)

    def _on_reset(self, _button: Any) -> None:
        self._cache.reset_view()

    def close(self) -> None:
        """Detach from the cache and close all widgets."""
        self._zoom_ref.close()
        if self._debug_link is not None:
            self._debug_link.unlink()
            self._debug_link = None
        for child in list(self.widget.children):
            child.close()
        self.widget.close()
