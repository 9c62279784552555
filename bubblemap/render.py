"""Cairo drawing of a simulation snapshot.

Shared by the on-screen canvas and the file exporter.
"""

import math
import time
from typing import Optional

import cairo

from bubblemap.simulation import SimulationSnapshot, NodeView, EdgeView


class BubbleRenderer:
    """Draws bubbles, springs and labels onto a cairo context."""

    COLORS = {
        'background': (0.925, 0.941, 0.945),    # #ecf0f1
        'bubble_light': (0.290, 0.702, 0.957),  # #4ab3f4
        'bubble_dark': (0.161, 0.502, 0.725),   # #2980b9
        'bubble_drag': (0.204, 0.596, 0.859),   # #3498db
        'edge': (0.161, 0.502, 0.725),          # #2980b9
        'label': (1.0, 1.0, 1.0),
        'shadow': (0.0, 0.0, 0.0),
    }

    ARROW_SIZE = 10
    EDGE_WIDTH = 2
    CURVE_AMPLITUDE = 20
    CURVE_PERIOD_MS = 300
    LABEL_FONT = "Arial"
    LABEL_SIZE = 14

    def __init__(self, animate_edges: bool = True):
        # Exports pass False so the curvature does not depend on wall time
        self.animate_edges = animate_edges

    def draw(self, cr, snapshot: SimulationSnapshot,
             now_ms: Optional[float] = None, background: bool = True):
        """Draw the whole scene."""
        cr.save()
        if background:
            cr.set_source_rgb(*self.COLORS['background'])
            cr.paint()

        if now_ms is None:
            now_ms = time.monotonic() * 1000
        curvature = 0.0
        if self.animate_edges:
            curvature = math.sin(now_ms / self.CURVE_PERIOD_MS) * self.CURVE_AMPLITUDE

        for edge in snapshot.edges:
            self._draw_edge(cr, edge, curvature)
        for node in snapshot.nodes:
            self._draw_bubble(cr, node)
        cr.restore()

    def _draw_edge(self, cr, edge: EdgeView, curvature: float):
        """Draw a curved spring with an arrow head touching the target rim."""
        dx = edge.x2 - edge.x1
        dy = edge.y2 - edge.y1
        distance = math.hypot(dx, dy)
        if distance == 0:
            return
        angle = math.atan2(dy, dx)

        mid_x = (edge.x1 + edge.x2) / 2
        mid_y = (edge.y1 + edge.y2) / 2
        perp_x = -dy / distance * curvature
        perp_y = dx / distance * curvature

        cr.save()
        cr.set_source_rgb(*self.COLORS['edge'])
        cr.set_line_width(self.EDGE_WIDTH)
        cr.move_to(edge.x1, edge.y1)
        # Cairo only has cubic curves; lift the quadratic control point
        ctrl_x, ctrl_y = mid_x + perp_x, mid_y + perp_y
        cr.curve_to(
            edge.x1 + 2 / 3 * (ctrl_x - edge.x1), edge.y1 + 2 / 3 * (ctrl_y - edge.y1),
            edge.x2 + 2 / 3 * (ctrl_x - edge.x2), edge.y2 + 2 / 3 * (ctrl_y - edge.y2),
            edge.x2, edge.y2,
        )
        cr.stroke()

        arrow_x = edge.x2 - edge.target_radius * math.cos(angle)
        arrow_y = edge.y2 - edge.target_radius * math.sin(angle)
        size = self.ARROW_SIZE
        cr.move_to(arrow_x, arrow_y)
        cr.line_to(arrow_x - size * math.cos(angle - math.pi / 6),
                   arrow_y - size * math.sin(angle - math.pi / 6))
        cr.line_to(arrow_x - size * math.cos(angle + math.pi / 6),
                   arrow_y - size * math.sin(angle + math.pi / 6))
        cr.close_path()
        cr.fill()
        cr.restore()

    def _draw_bubble(self, cr, node: NodeView):
        x, y, r = node.x, node.y, node.radius
        cr.save()

        # Shadow
        cr.arc(x + 2, y + 2, r, 0, 2 * math.pi)
        cr.set_source_rgba(*self.COLORS['shadow'], 0.1)
        cr.fill()

        # Body
        cr.arc(x, y, r, 0, 2 * math.pi)
        gradient = cairo.RadialGradient(x - r / 3, y - r / 3, 0, x, y, r)
        light = self.COLORS['bubble_drag'] if node.is_dragging else self.COLORS['bubble_light']
        gradient.add_color_stop_rgb(0, *light)
        gradient.add_color_stop_rgb(1, *self.COLORS['bubble_dark'])
        cr.set_source(gradient)
        cr.fill()

        # Label
        cr.set_source_rgb(*self.COLORS['label'])
        cr.select_font_face(self.LABEL_FONT, cairo.FONT_SLANT_NORMAL, cairo.FONT_WEIGHT_BOLD)
        cr.set_font_size(self.LABEL_SIZE)
        extents = cr.text_extents(node.label)
        cr.move_to(x - extents.width / 2 - extents.x_bearing, y + 4)
        cr.show_text(node.label)

        cr.restore()
