"""Canvas widget that runs the bubble simulation and draws it every frame."""

import logging
from typing import Optional, Callable, Set

import gi

gi.require_version("Gtk", "4.0")
from gi.repository import Gtk, GLib

from bubblemap.config import PhysicsSettings
from bubblemap.interaction import InteractionController
from bubblemap.model import Node, Edge
from bubblemap.render import BubbleRenderer
from bubblemap.simulation import Simulation, SimulationSnapshot

logger = logging.getLogger(__name__)


class GLibScheduler:
    """Long-press timers on the GLib main loop."""

    def __init__(self):
        self._active: Set[int] = set()

    def schedule_after(self, delay_ms: int, callback: Callable[[], None]) -> int:
        source_id = 0

        def _fire():
            self._active.discard(source_id)
            callback()
            return GLib.SOURCE_REMOVE

        source_id = GLib.timeout_add(int(delay_ms), _fire)
        self._active.add(source_id)
        return source_id

    def cancel(self, handle: int) -> None:
        # Removing a source that already ran makes GLib warn
        if handle in self._active:
            self._active.discard(handle)
            GLib.source_remove(handle)


class BubbleCanvas(Gtk.DrawingArea):
    """Drawing area hosting a Simulation and its InteractionController."""

    def __init__(self, settings: Optional[PhysicsSettings] = None):
        super().__init__()

        self.simulation = Simulation(800, 600, settings=settings)
        self.controller = InteractionController(self.simulation, GLibScheduler())
        self.renderer = BubbleRenderer()
        self._tick_id: Optional[int] = None

        # Drag state (GestureDrag reports offsets from the press point)
        self._drag_start_x = 0.0
        self._drag_start_y = 0.0

        # Callbacks
        self.on_node_created: Optional[Callable[[Node, Edge], None]] = None
        self.controller.on_node_created = self._on_node_created

        # Setup widget
        self.set_draw_func(self._on_draw)
        self.set_focusable(True)
        self.set_hexpand(True)
        self.set_vexpand(True)
        self.connect("resize", self._on_resize)

        self._setup_event_controllers()
        self.start()

    def _setup_event_controllers(self):
        """Feed press/drag/release into the interaction controller."""
        drag_ctrl = Gtk.GestureDrag()
        drag_ctrl.set_button(1)  # Left mouse button
        drag_ctrl.connect("drag-begin", self._on_drag_begin)
        drag_ctrl.connect("drag-update", self._on_drag_update)
        drag_ctrl.connect("drag-end", self._on_drag_end)
        self.add_controller(drag_ctrl)

    # ==================== Frame loop ====================

    def start(self):
        if self._tick_id is None:
            self._tick_id = self.add_tick_callback(self._on_tick)

    def stop(self):
        if self._tick_id is not None:
            self.remove_tick_callback(self._tick_id)
            self._tick_id = None

    def _on_tick(self, widget, frame_clock) -> bool:
        self.simulation.step()
        self.queue_draw()
        return GLib.SOURCE_CONTINUE

    def _on_draw(self, area, cr, width, height):
        """Main drawing function."""
        self.renderer.draw(cr, self.simulation.snapshot())

    def _on_resize(self, area, width, height):
        margin = self.simulation.settings.margin
        if width > 2 * margin and height > 2 * margin:
            self.simulation.set_bounds(width, height)

    # ==================== Gestures ====================

    def _on_drag_begin(self, gesture, start_x, start_y):
        self.grab_focus()
        self._drag_start_x = start_x
        self._drag_start_y = start_y
        self.controller.pointer_down(start_x, start_y)

    def _on_drag_update(self, gesture, offset_x, offset_y):
        self.controller.pointer_move(self._drag_start_x + offset_x,
                                     self._drag_start_y + offset_y)

    def _on_drag_end(self, gesture, offset_x, offset_y):
        self.controller.pointer_up()

    def _on_node_created(self, node: Node, edge: Edge):
        if self.on_node_created:
            self.on_node_created(node, edge)

    # ==================== Commands ====================

    def add_bubble(self) -> Node:
        """Add an unconnected bubble at a random spot."""
        node = self.simulation.add_node()
        self.queue_draw()
        return node

    def snapshot(self) -> SimulationSnapshot:
        return self.simulation.snapshot()
