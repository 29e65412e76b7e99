"""Debug-mode toggle and single-slot node/edge selection.

The selection is a tagged value: ``NodeSelection`` (tag ``"node"``) or
``EdgeSelection`` (tag ``"edge"``). Selecting the same target twice clears the
selection; selecting anything while debug mode is off does nothing; turning
debug mode off clears the selection.

This state machine is independent of ``ViewStateCache``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, ClassVar, Union

import traitlets

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


@dataclass(frozen=True)
class NodeSelection:
    """A selected tree node."""

    kind: ClassVar[str] = "node"

    node_id: str

    def same_target(self, other: Any) -> bool:
        return isinstance(other, NodeSelection) and other.node_id == self.node_id


@dataclass(frozen=True)
class EdgeSelection:
    """A selected parent-child edge.

    ``child_index`` records the child's position among its siblings. It is
    carried along but does not take part in toggle-off matching.
    """

    kind: ClassVar[str] = "edge"

    parent_id: str
    child_id: str
    child_index: int

    def same_target(self, other: Any) -> bool:
        return (
            isinstance(other, EdgeSelection)
            and other.parent_id == self.parent_id
            and other.child_id == self.child_id
        )


Selection = Union[NodeSelection, EdgeSelection]


class DebugModeState(traitlets.HasTraits):
    """Own the debug-mode flag and the current selection.

    Parameters
    ----------
    enabled : bool, default=True
        Initial debug-mode state.
    """

    enabled = traitlets.Bool(True)
    selection = traitlets.Union(
        [traitlets.Instance(NodeSelection), traitlets.Instance(EdgeSelection)],
        default_value=None,
        allow_none=True,
    )

    def __init__(self, enabled: bool = True) -> None:
        super().__init__(enabled=bool(enabled))

    @traitlets.observe("enabled")
    def _clear_selection_when_disabled(self, change: Any) -> None:
        if not change["new"]:
            self.selection = None

    def set_debug_mode(self, enabled: bool) -> None:
        self.enabled = bool(enabled)

    def toggle_debug_mode(self) -> None:
        self.enabled = not self.enabled

    def _select(self, candidate: Selection) -> None:
        if not self.enabled:
            logger.debug("ignoring %r: debug mode is off", candidate)
            return
        if candidate.same_target(self.selection):
            self.selection = None
        else:
            self.selection = candidate

    def select_node(self, node_id: str) -> None:
        """Select ``node_id``, or clear the selection if it is already selected."""
        self._select(NodeSelection(node_id=node_id))

    def select_edge(self, parent_id: str, child_id: str, child_index: int) -> None:
        """Select an edge, or clear the selection if the same edge is selected."""
        self._select(
            EdgeSelection(parent_id=parent_id, child_id=child_id, child_index=child_index)
        )

    def clear_selection(self) -> None:
        self.selection = None

    def __repr__(self) -> str:
        return f"DebugModeState(enabled={self.enabled!r}, selection={self.selection!r})"
