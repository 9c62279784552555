"""Pointer gestures: select, drag, and long-press to grow a new bubble."""

import logging
from enum import Enum
from typing import Optional, Tuple, Callable

from bubblemap.model import Node, Edge
from bubblemap.scheduling import Scheduler
from bubblemap.simulation import Simulation

logger = logging.getLogger(__name__)


class InteractionState(Enum):
    """Pointer ownership state."""
    IDLE = "idle"
    DRAGGING = "dragging"


class InteractionController:
    """Turns pointer signals into simulation mutations.

    Only one bubble can be selected at a time. A pending long-press is keyed
    to a gesture token; `pointer_up` drops the token before cancelling the
    timer, so a late timer callback finds no matching token and does nothing.
    """

    def __init__(self, simulation: Simulation, scheduler: Scheduler):
        self.simulation = simulation
        self.scheduler = scheduler

        # Selection state
        self.selected: Optional[Node] = None
        self._offset_x = 0.0
        self._offset_y = 0.0

        # Long-press state
        self._gesture = 0
        self._pending_gesture: Optional[int] = None
        self._timer_handle: Optional[int] = None

        # Callbacks
        self.on_node_created: Optional[Callable[[Node, Edge], None]] = None

    @property
    def state(self) -> InteractionState:
        if self.selected is not None and self.selected.is_dragging:
            return InteractionState.DRAGGING
        return InteractionState.IDLE

    @property
    def long_press_pending(self) -> bool:
        return self._pending_gesture is not None

    def pointer_down(self, x: float, y: float) -> Optional[Node]:
        """Grab the bubble under the pointer and arm the long-press timer."""
        if self.selected is not None:
            # A press without a matching release; finish the old gesture first.
            self.pointer_up()

        node = self.simulation.node_at(x, y)
        if node is None:
            return None

        self.selected = node
        node.is_dragging = True
        node.stop()
        self._offset_x = x - node.x
        self._offset_y = y - node.y

        self._gesture += 1
        gesture = self._gesture
        self._pending_gesture = gesture
        self._timer_handle = self.scheduler.schedule_after(
            self.simulation.settings.long_press_ms,
            lambda: self._on_long_press_timer(gesture),
        )
        return node

    def pointer_move(self, x: float, y: float) -> bool:
        """Move the dragged bubble with the pointer. Returns True if one moved."""
        node = self.selected
        if node is None or not node.is_dragging:
            return False
        node.x = x - self._offset_x
        node.y = y - self._offset_y
        node.stop()
        return True

    def pointer_up(self):
        """Release the pointer: cancel the long-press and drop the selection."""
        self._cancel_long_press()
        if self.selected is not None:
            self.selected.is_dragging = False
        self.selected = None

    def long_press_elapsed(self) -> Optional[Tuple[Node, Edge]]:
        """Create a bubble connected to the selected one and end the gesture."""
        self._pending_gesture = None
        self._timer_handle = None

        parent = self.selected
        if parent is None:
            return None

        node, edge = self.simulation.add_connected_node(parent)
        parent.is_dragging = False
        self.selected = None
        logger.debug("Long-press on %s created %s", parent.label, node.label)

        if self.on_node_created:
            self.on_node_created(node, edge)
        return node, edge

    def _on_long_press_timer(self, gesture: int):
        if gesture != self._pending_gesture:
            return
        self.long_press_elapsed()

    def _cancel_long_press(self):
        handle = self._timer_handle
        if self._pending_gesture is not None:
            logger.debug("Long-press cancelled")
        self._pending_gesture = None
        self._timer_handle = None
        if handle is not None:
            self.scheduler.cancel(handle)
