"""Standardized view-state change event payloads.

This module defines ``ViewStateEvent``, the immutable structure emitted by
``ViewStateRef.observe`` whenever the value behind a reactive handle changes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from .view_state_refs import ViewStateRef


@dataclass(frozen=True)
class ViewStateEvent:
    """Normalized change event emitted by ViewStateRef observers.

    Parameters
    ----------
    field : str
        Record field the handle reads (``"pan_offset"``, ``"zoom"`` or
        ``"has_interacted"``).
    key : str
        Current document key at the time the new value was computed.
    old : Any
        The previously observed value.
    new : Any
        The re-evaluated value.
    ref : ViewStateRef
        Handle that produced the event.
    raw : Any, optional
        Raw traitlets change payload that triggered re-evaluation, or ``None``
        when synthesized (for example by ``observe(..., fire=True)``).

    Notes
    -----
    ``raw`` reflects the trigger, not the field: after a key switch it is the
    ``current_key`` change, not a record change. Consumers should prefer
    ``field``, ``key`` and ``new``.
    """
    field: str
    key: str
    old: Any
    new: Any
    ref: "ViewStateRef"
    raw: Any = None
