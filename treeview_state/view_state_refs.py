"""Reactive read handles over the current view-state record.

A ``ViewStateRef`` reads one field (``pan_offset``, ``zoom`` or
``has_interacted``) of whatever record the cache's current key addresses. It
re-evaluates exactly when

- the cache's ``current_key`` trait changes, or
- the addressed record's field changes (observed per field through traitlets).

Values are cached between invalidations so several reads in one synchronous
turn see the same snapshot.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Optional

from .view_state import VIEW_STATE_FIELDS, ViewState
from .ViewStateEvent import ViewStateEvent

if TYPE_CHECKING:
    from .view_state_cache import ViewStateCache

_GETTERS = {
    "pan_offset": "get_pan_offset",
    "zoom": "get_zoom",
    "has_interacted": "has_user_interacted",
}


class ViewStateRef:
    """Observable handle for one field of the cache's current record."""

    def __init__(self, cache: ViewStateCache, field: str) -> None:
        if field not in VIEW_STATE_FIELDS:
            raise ValueError(
                f"Unknown view-state field {field!r}; expected one of {VIEW_STATE_FIELDS}"
            )
        self._cache = cache
        self._field = field
        self._getter = getattr(cache, _GETTERS[field])
        self._callbacks: list[Callable[[ViewStateEvent], None]] = []
        self._record: Optional[ViewState] = None
        self._value: Any = None
        self._dirty = True
        self._closed = False

        cache.observe(self._on_key_change, names="current_key")
        cache._refs.add(self)
        self._bind_record()

    @property
    def field(self) -> str:
        return self._field

    @property
    def value(self) -> Any:
        """Return the field value for the current key, re-evaluating if invalidated."""
        if self._dirty or self._closed:
            self._value = self._getter()
            self._dirty = False
        return self._value

    @property
    def closed(self) -> bool:
        return self._closed

    def observe(self, callback: Callable[[ViewStateEvent], None], *, fire: bool = False) -> None:
        """Call ``callback`` with a ``ViewStateEvent`` whenever the value changes.

        Parameters
        ----------
        callback : callable
            Receives one ``ViewStateEvent``. Runs synchronously inside the
            mutation that caused it; it must not mutate the cache.
        fire : bool, default=False
            If True, immediately call ``callback`` once with ``old == new``.
        """
        if self._closed:
            raise RuntimeError("Cannot observe a closed ViewStateRef.")
        current = self.value
        self._callbacks.append(callback)
        if fire:
            callback(
                ViewStateEvent(
                    field=self._field,
                    key=self._cache.current_key,
                    old=current,
                    new=current,
                    ref=self,
                    raw=None,
                )
            )

    def unobserve(self, callback: Callable[[ViewStateEvent], None]) -> None:
        """Remove a callback registered with :meth:`observe`."""
        self._callbacks.remove(callback)

    def close(self) -> None:
        """Detach from the cache and the current record, dropping all callbacks."""
        if self._closed:
            return
        self._cache.unobserve(self._on_key_change, names="current_key")
        self._cache._refs.discard(self)
        if self._record is not None:
            self._record.unobserve(self._on_field_change, names=self._field)
            self._record = None
        self._callbacks.clear()
        self._closed = True

    def _bind_record(self) -> None:
        # The empty key has no resident record; reads fall back to a fresh default.
        if self._record is not None:
            self._record.unobserve(self._on_field_change, names=self._field)
        self._record = self._cache._record_or_none(self._cache.current_key)
        if self._record is not None:
            self._record.observe(self._on_field_change, names=self._field)

    def _resync(self) -> None:
        """Rebind to the current record and drop the cached value without notifying."""
        if self._closed:
            return
        self._bind_record()
        self._dirty = True

    def _on_key_change(self, change: Any) -> None:
        self._bind_record()
        self._invalidate(change)

    def _on_field_change(self, change: Any) -> None:
        self._invalidate(change)

    def _invalidate(self, raw: Any) -> None:
        if not self._callbacks:
            self._dirty = True
            return

        old = self.value
        self._dirty = True
        new = self.value
        if new == old:
            return

        event = ViewStateEvent(
            field=self._field,
            key=self._cache.current_key,
            old=old,
            new=new,
            ref=self,
            raw=raw,
        )
        for callback in list(self._callbacks):
            callback(event)

    def __repr__(self) -> str:
        state = "closed" if self._closed else f"key={self._cache.current_key!r}"
        return f"ViewStateRef(field={self._field!r}, {state})"
