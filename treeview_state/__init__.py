"""Top-level public API for the ``treeview_state`` package.

This module re-exports the view-state surface so UI code can import from a
single namespace, for example:

>>> from treeview_state import ViewStateCache, provide, VIEW_STATE_KEY  # doctest: +SKIP

It exposes the per-example cache and its reactive handles, the provide/inject
plumbing used to hand a cache to consumers, and the independent debug-mode
selection state.
"""

from .debug_mode import DebugModeState, EdgeSelection, NodeSelection, Selection
from .InputConvert import InputConvert, require_finite
from .view_state import (
    DEFAULT_ZOOM,
    ZOOM_MAX,
    ZOOM_MIN,
    PanOffset,
    ViewState,
    ViewStateSnapshot,
    clamp_zoom,
)
from .view_state_cache import (
    DEFAULT_CAPACITY,
    ReentrantMutationError,
    ViewStateCache,
    create_view_state_cache,
)
from .view_state_context import (
    DEBUG_MODE_KEY,
    VIEW_STATE_KEY,
    InjectionKey,
    NotProvidedError,
    inject,
    provide,
    use_debug_mode,
    use_view_state,
)
from .view_state_refs import ViewStateRef
from .view_state_toolbar import ZOOM_STEP, ViewStateToolbar, format_zoom
from .ViewStateEvent import ViewStateEvent
