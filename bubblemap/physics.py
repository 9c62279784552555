"""Force, integration, boundary and collision rules for bubbles.

Each function mutates the nodes it is given in place. Time advances one
unit per call to `integrate_node` (explicit Euler, one frame per step).
"""

import math
from dataclasses import dataclass
from typing import Sequence, Tuple

from bubblemap.config import PhysicsSettings
from bubblemap.model import Node, Edge


@dataclass
class Bounds:
    """Containment rectangle [margin, width - margin] x [margin, height - margin]."""
    width: float
    height: float
    margin: float = 5.0

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Bounds must be positive, got {self.width}x{self.height}")
        if self.margin < 0:
            raise ValueError(f"Bounds margin must be >= 0, got {self.margin}")
        if self.width <= 2 * self.margin or self.height <= 2 * self.margin:
            raise ValueError(
                f"Bounds {self.width}x{self.height} leave no room inside margin {self.margin}"
            )


def apply_spring(edge: Edge, settings: PhysicsSettings) -> Tuple[float, float]:
    """Push the edge endpoints toward the rest length.

    Returns the (fx, fy) added to the source velocity; the target receives
    the negation. A zero-length edge applies nothing.
    """
    source, target = edge.source, edge.target
    dx = target.x - source.x
    dy = target.y - source.y
    dist = math.sqrt(dx * dx + dy * dy)
    if dist == 0:
        return 0.0, 0.0

    force = (dist - edge.rest_length) * settings.spring_strength
    fx = (dx / dist) * force
    fy = (dy / dist) * force

    if not source.is_dragging:
        source.vx += fx
        source.vy += fy
    if not target.is_dragging:
        target.vx -= fx
        target.vy -= fy
    return fx, fy


def _contain(pos: float, vel: float, r: float, size: float, margin: float,
             damping: float) -> Tuple[float, float]:
    # Too narrow to fit the node: park it on the axis center
    if size - 2 * margin < 2 * r:
        return size / 2, 0.0
    if pos - r < margin:
        return r + margin, abs(vel) * damping
    if pos + r > size - margin:
        return size - r - margin, -abs(vel) * damping
    return pos, vel


def apply_boundary(node: Node, bounds: Bounds, damping: float):
    """Clamp the node inside the bounds and bounce it inward with energy loss."""
    r = node.radius
    node.x, node.vx = _contain(node.x, node.vx, r, bounds.width, bounds.margin, damping)
    node.y, node.vy = _contain(node.y, node.vy, r, bounds.height, bounds.margin, damping)


def integrate_node(node: Node, bounds: Bounds, settings: PhysicsSettings):
    """Advance one free node by a single frame; dragged nodes are left alone."""
    if node.is_dragging:
        return

    node.vx *= settings.friction
    node.vy *= settings.friction

    # Stop very small movements
    if abs(node.vx) < settings.min_speed:
        node.vx = 0.0
    if abs(node.vy) < settings.min_speed:
        node.vy = 0.0

    node.x += node.vx
    node.y += node.vy

    apply_boundary(node, bounds, settings.boundary_damping)


def resolve_collisions(nodes: Sequence[Node], settings: PhysicsSettings) -> int:
    """Separate every overlapping pair through a velocity correction.

    Pairs are visited as (i, j) with i < j in sequence order. Dragged nodes
    still collide but never receive a correction. Returns the number of
    overlapping pairs found.
    """
    overlaps = 0
    count = len(nodes)
    for i in range(count):
        a = nodes[i]
        for j in range(i + 1, count):
            b = nodes[j]
            dx = b.x - a.x
            dy = b.y - a.y
            dist = math.sqrt(dx * dx + dy * dy)
            min_dist = a.radius + b.radius
            if dist >= min_dist:
                continue

            overlaps += 1
            # atan2(0, 0) == 0, so coincident centers split along +x
            angle = math.atan2(dy, dx)
            penetration = min_dist - dist
            cx = math.cos(angle) * penetration * settings.collision_damping
            cy = math.sin(angle) * penetration * settings.collision_damping

            if not a.is_dragging:
                a.vx -= cx
                a.vy -= cy
            if not b.is_dragging:
                b.vx += cx
                b.vy += cy
    return overlaps
