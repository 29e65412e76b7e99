"""Bounded per-document view-state cache with LRU eviction.

Purpose
-------
``ViewStateCache`` remembers pan offset, zoom level and a "user has
interacted" flag independently for every tree example a user visits, while
bounding memory with least-recently-used eviction. Rendering code reads the
state either imperatively (``get_zoom()``) or through reactive handles
(``zoom_ref``) that re-evaluate when the current key or the addressed record
changes.

Concepts and structure
----------------------
The cache owns three pieces of state:

- ``_records``: ``key -> ViewState`` for every resident example,
- ``_ledger``: an ordered key set, least recently used first,
- ``current_key``: a read-only traitlets trait naming the active example.

The empty key is reserved. Selecting it creates nothing; every read and write
while it is current goes to a throwaway default record.

Architecture notes
------------------
- Each cache is an explicit instance. Consumers receive it through
  ``view_state_context.provide``/``inject`` or as a parameter; there is no
  module-level cache.
- All mutations run under a write guard. Observers are notified synchronously
  inside that guard, so a mutation started from an observer callback is
  rejected with ``ReentrantMutationError``.

Examples
--------
>>> cache = ViewStateCache(capacity=2)
>>> cache.select_key("binary-tree")
>>> cache.apply_pan_delta(10, 20)
>>> cache.set_zoom(8)
>>> cache.get_pan_offset(), cache.get_zoom()
(PanOffset(x=10.0, y=20.0), 4.0)

Logging
-------
This module uses the standard Python ``logging`` framework and is silent by
default. Selections and evictions are logged at DEBUG level.
"""

from __future__ import annotations

import logging
import weakref
from collections import OrderedDict
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Optional

import traitlets

from .InputConvert import InputConvert, require_finite
from .view_state import PanOffset, ViewState, ViewStateSnapshot
from .view_state_refs import ViewStateRef

# Module logger
# - Uses a NullHandler so importing this module never configures global logging.
# - Callers can enable logs via standard logging configuration.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

DEFAULT_CAPACITY = 50


class ReentrantMutationError(RuntimeError):
    """Raised when a view-state mutation starts while another one is running."""


class ViewStateCache(traitlets.HasTraits):
    """Own per-example view-state records, LRU order and the current key.

    Parameters
    ----------
    capacity : int, default=DEFAULT_CAPACITY
        Maximum number of resident records. Must be a positive integer.
    """

    current_key = traitlets.Unicode("", read_only=True)

    def __init__(self, *, capacity: int = DEFAULT_CAPACITY) -> None:
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 1:
            raise ValueError(f"capacity must be a positive integer, got {capacity!r}")
        super().__init__()
        self._capacity = capacity
        self._records: dict[str, ViewState] = {}
        self._ledger: OrderedDict[str, None] = OrderedDict()
        self._writing = False
        self._refs: weakref.WeakSet[ViewStateRef] = weakref.WeakSet()
        self._pan_offset_ref: Optional[ViewStateRef] = None
        self._zoom_ref: Optional[ViewStateRef] = None
        self._user_has_interacted_ref: Optional[ViewStateRef] = None

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def capacity(self) -> int:
        """Return the maximum number of resident records."""
        return self._capacity

    @property
    def is_writing(self) -> bool:
        """Return ``True`` while a mutation (and its notifications) is running."""
        return self._writing

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, key: object) -> bool:
        return key in self._records

    def keys(self) -> tuple[str, ...]:
        """Return resident keys, least recently used first."""
        return tuple(self._ledger)

    def snapshot(self, key: Optional[str] = None) -> ViewStateSnapshot:
        """Return a detached copy of the record for ``key`` without promoting it.

        ``key=None`` means the current key. Missing keys and the empty key yield
        a default snapshot.
        """
        target = self.current_key if key is None else key
        record = self._records.get(target)
        if record is None:
            return ViewState().snapshot(target)
        return record.snapshot(target)

    def __repr__(self) -> str:
        return (
            f"ViewStateCache(current_key={self.current_key!r}, "
            f"size={len(self._records)}, capacity={self._capacity})"
        )

    # ------------------------------------------------------------------
    # Key selection and eviction
    # ------------------------------------------------------------------

    @contextmanager
    def _write(self, operation: str) -> Iterator[None]:
        if self._writing:
            raise ReentrantMutationError(
                f"{operation}() was called while another view-state mutation "
                "was in progress (for example from an observer callback)."
            )
        self._writing = True
        try:
            yield
        except Exception:
            # An observer error can cut notification delivery short; resync every handle.
            for ref in list(self._refs):
                ref._resync()
            raise
        finally:
            self._writing = False

    def select_key(self, key: str) -> None:
        """Make ``key`` the current example.

        A non-empty key gets a default record if it has none, is promoted to
        most recently used, and then overflow is pruned. The empty key touches
        nothing. ``current_key`` observers fire last, once the record exists.
        """
        if not isinstance(key, str):
            raise TypeError(f"key must be a str, got {type(key).__name__}")
        with self._write("select_key"):
            if key:
                if key not in self._records:
                    self._records[key] = ViewState()
                    logger.debug("created view state for %r", key)
                self._ledger.pop(key, None)
                self._ledger[key] = None
                self._prune(protected=key)
            logger.debug("selected %r", key)
            self.set_trait("current_key", key)

    set_current_example = select_key

    def _prune(self, *, protected: str) -> list[str]:
        """Evict least recently used records until the ledger fits ``capacity``."""
        evicted: list[str] = []
        overflow = len(self._ledger) - self._capacity
        if overflow <= 0:
            return evicted

        for key in list(self._ledger):
            if overflow <= 0:
                break
            if key == protected:
                logger.warning(
                    "active key %r reached the eviction front; keeping it", key
                )
                continue
            del self._ledger[key]
            self._records.pop(key, None)
            evicted.append(key)
            overflow -= 1

        if evicted:
            logger.debug("evicted %d view state(s): %s", len(evicted), evicted)
        return evicted

    def _record_or_none(self, key: str) -> Optional[ViewState]:
        return self._records.get(key)

    def _current_record(self) -> ViewState:
        key = self.current_key
        if not key:
            return ViewState()
        return self._records[key]

    # ------------------------------------------------------------------
    # Mutations on the current record
    # ------------------------------------------------------------------

    def apply_pan_delta(self, dx: Any, dy: Any) -> None:
        """Add ``(dx, dy)`` to the current pan offset.

        Does not touch the interaction flag; callers mark interaction
        separately. Non-finite deltas raise ``ValueError``.
        """
        dx = require_finite(dx, "dx")
        dy = require_finite(dy, "dy")
        with self._write("apply_pan_delta"):
            record = self._current_record()
            x, y = record.pan_offset
            record.pan_offset = (x + dx, y + dy)

    def set_pan_offset(self, x: Any, y: Any) -> None:
        """Replace the current pan offset. Non-finite values raise ``ValueError``."""
        x = require_finite(x, "x")
        y = require_finite(y, "y")
        with self._write("set_pan_offset"):
            self._current_record().pan_offset = (x, y)

    def set_zoom(self, zoom: Any) -> None:
        """Set the current zoom, clamped to ``[ZOOM_MIN, ZOOM_MAX]``."""
        value = InputConvert(zoom)
        with self._write("set_zoom"):
            self._current_record().zoom = value

    def mark_interaction(self) -> None:
        with self._write("mark_interaction"):
            self._current_record().has_interacted = True

    def clear_interaction(self) -> None:
        """Clear the interaction flag, leaving pan and zoom untouched."""
        with self._write("clear_interaction"):
            self._current_record().has_interacted = False

    def reset_view(self) -> None:
        """Restore the current record to defaults; other records are unaffected."""
        with self._write("reset_view"):
            self._current_record().reset()

    # ------------------------------------------------------------------
    # Imperative reads
    # ------------------------------------------------------------------

    def get_pan_offset(self) -> PanOffset:
        return self._current_record().get_pan_offset()

    def get_zoom(self) -> float:
        return self._current_record().zoom

    def has_user_interacted(self) -> bool:
        return self._current_record().has_interacted

    # ------------------------------------------------------------------
    # Reactive reads
    # ------------------------------------------------------------------

    def ref(self, field: str) -> ViewStateRef:
        """Return a new reactive handle for ``field`` of the current record.

        The handle stays registered on this cache until its ``close()`` is
        called; close handles you no longer need.
        """
        return ViewStateRef(self, field)

    @property
    def pan_offset_ref(self) -> ViewStateRef:
        """Shared reactive handle for the current pan offset."""
        if self._pan_offset_ref is None:
            self._pan_offset_ref = self.ref("pan_offset")
        return self._pan_offset_ref

    @property
    def zoom_ref(self) -> ViewStateRef:
        """Shared reactive handle for the current zoom level."""
        if self._zoom_ref is None:
            self._zoom_ref = self.ref("zoom")
        return self._zoom_ref

    @property
    def user_has_interacted_ref(self) -> ViewStateRef:
        """Shared reactive handle for the current interaction flag."""
        if self._user_has_interacted_ref is None:
            self._user_has_interacted_ref = self.ref("has_interacted")
        return self._user_has_interacted_ref


def create_view_state_cache(*, capacity: int = DEFAULT_CAPACITY) -> ViewStateCache:
    """Return a new, empty, isolated cache with no current key."""
    return ViewStateCache(capacity=capacity)
