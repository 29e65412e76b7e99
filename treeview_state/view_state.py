"""Per-document view-state record.

Purpose
-------
This module defines ``ViewState``, the mutable pan/zoom/interaction record that
``ViewStateCache`` keeps for every tree example a user visits, plus the small
value types used to read it back (``PanOffset`` and ``ViewStateSnapshot``).

Notes
-----
Every field is a traitlets trait, so writing a single field on an existing
record is enough for observers to notice. Records are never swapped out to
signal a change.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, NamedTuple

import traitlets

ZOOM_MIN = 0.25
ZOOM_MAX = 4.0
DEFAULT_ZOOM = 1.0
DEFAULT_PAN_OFFSET = (0.0, 0.0)

VIEW_STATE_FIELDS = ("pan_offset", "zoom", "has_interacted")


class PanOffset(NamedTuple):
    """Pan offset in canvas units."""

    x: float
    y: float


def clamp_zoom(value: float) -> float:
    """Clamp ``value`` into ``[ZOOM_MIN, ZOOM_MAX]``.

    NaN is treated as below the minimum. Infinities clamp to the nearer bound.

    >>> clamp_zoom(0.1), clamp_zoom(5), clamp_zoom(1.5)
    (0.25, 4.0, 1.5)
    >>> clamp_zoom(float("nan"))
    0.25
    """
    if math.isnan(value):
        return ZOOM_MIN
    return max(ZOOM_MIN, min(ZOOM_MAX, float(value)))


@dataclass(frozen=True)
class ViewStateSnapshot:
    """Detached, immutable copy of one record.

    Parameters
    ----------
    key : str
        Document key the record belongs to (``""`` for the transient default).
    pan_offset : PanOffset
        Pan offset at capture time.
    zoom : float
        Zoom level at capture time.
    has_interacted : bool
        Whether the user had interacted with the view.
    """

    key: str
    pan_offset: PanOffset
    zoom: float
    has_interacted: bool

    def is_default(self) -> bool:
        """Return ``True`` when all fields hold their default values."""
        return (
            self.pan_offset == DEFAULT_PAN_OFFSET
            and self.zoom == DEFAULT_ZOOM
            and self.has_interacted is False
        )


class ViewState(traitlets.HasTraits):
    """Observable pan/zoom/interaction state for one tree example."""

    pan_offset = traitlets.Tuple(
        traitlets.Float(), traitlets.Float(), default_value=DEFAULT_PAN_OFFSET
    )
    zoom = traitlets.Float(DEFAULT_ZOOM)
    has_interacted = traitlets.Bool(False)

    @traitlets.validate("zoom")
    def _validate_zoom(self, proposal: Any) -> float:
        return clamp_zoom(proposal["value"])

    @traitlets.validate("pan_offset")
    def _validate_pan_offset(self, proposal: Any) -> tuple[float, float]:
        x, y = proposal["value"]
        if not (math.isfinite(x) and math.isfinite(y)):
            raise traitlets.TraitError(f"pan_offset must be finite, got {(x, y)!r}")
        return (float(x), float(y))

    def get_pan_offset(self) -> PanOffset:
        return PanOffset(*self.pan_offset)

    def reset(self) -> None:
        """Restore defaults; observers see each field change after all are applied."""
        with self.hold_trait_notifications():
            self.pan_offset = DEFAULT_PAN_OFFSET
            self.zoom = DEFAULT_ZOOM
            self.has_interacted = False

    def snapshot(self, key: str = "") -> ViewStateSnapshot:
        return ViewStateSnapshot(
            key=key,
            pan_offset=self.get_pan_offset(),
            zoom=self.zoom,
            has_interacted=self.has_interacted,
        )

    def __repr__(self) -> str:
        return (
            f"ViewState(pan_offset={self.pan_offset!r}, zoom={self.zoom!r}, "
            f"has_interacted={self.has_interacted!r})"
        )
