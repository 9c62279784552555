"""Simulation state: the bubbles, their springs and the per-frame tick."""

import logging
import math
import random
from dataclasses import dataclass
from typing import Optional, List, Tuple, Callable

from bubblemap.config import PhysicsSettings
from bubblemap.model import Node, Edge
from bubblemap.physics import Bounds, apply_spring, integrate_node, resolve_collisions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodeView:
    """Read-only copy of a node for renderers."""
    id: int
    x: float
    y: float
    radius: float
    label: str
    is_dragging: bool


@dataclass(frozen=True)
class EdgeView:
    """Read-only copy of an edge with its endpoint positions."""
    source_id: int
    target_id: int
    x1: float
    y1: float
    x2: float
    y2: float
    target_radius: float


@dataclass(frozen=True)
class SimulationSnapshot:
    nodes: Tuple[NodeView, ...]
    edges: Tuple[EdgeView, ...]
    width: float
    height: float

    @property
    def is_empty(self) -> bool:
        return not self.nodes


class Simulation:
    """Owns the node and edge collections and advances them one tick at a time.

    Everything runs on one thread: gesture handlers and `step` are never
    interleaved, so no locking is done here.
    """

    def __init__(self, width: float = 800, height: float = 600,
                 settings: Optional[PhysicsSettings] = None,
                 seed: Optional[int] = None):
        self.settings = settings or PhysicsSettings()
        self.bounds = Bounds(width, height, self.settings.margin)
        self.nodes: List[Node] = []
        self.edges: List[Edge] = []
        self.ticks = 0
        self._rng = random.Random(seed)

        # Callbacks
        self.on_structure_changed: Optional[Callable[[], None]] = None

    # ==================== Bounds ====================

    def set_bounds(self, width: float, height: float):
        """Resize the containment rectangle; the next tick uses it."""
        self.bounds = Bounds(width, height, self.settings.margin)
        logger.debug("Bounds set to %.0fx%.0f", width, height)

    # ==================== Creation ====================

    def _next_label(self) -> str:
        return f"Bubble {len(self.nodes) + 1}"

    def _append_node(self, x: float, y: float, radius: Optional[float]) -> Node:
        node = Node(x=x, y=y, label=self._next_label(),
                    radius=radius if radius is not None else self.settings.node_radius)
        self.nodes.append(node)
        return node

    def add_node(self, x: Optional[float] = None, y: Optional[float] = None,
                 radius: Optional[float] = None) -> Node:
        """Add an unconnected bubble.

        Without coordinates the bubble lands at a random spot inside the
        bounds shrunk by `spawn_padding`; if that leaves no room, anywhere
        inside the bounds.
        """
        if x is None or y is None:
            rx, ry = self._random_position()
            x = rx if x is None else x
            y = ry if y is None else y

        node = self._append_node(x, y, radius)
        logger.debug("Added %s (id=%d) at (%.1f, %.1f)", node.label, node.id, node.x, node.y)
        self._notify_changed()
        return node

    def _random_position(self) -> Tuple[float, float]:
        pad = self.settings.spawn_padding
        width, height = self.bounds.width, self.bounds.height
        if width - 2 * pad <= 0 or height - 2 * pad <= 0:
            pad = 0.0
        return (self._rng.random() * (width - 2 * pad) + pad,
                self._rng.random() * (height - 2 * pad) + pad)

    def add_edge(self, source: Node, target: Node,
                 rest_length: Optional[float] = None) -> Edge:
        """Connect two live nodes with a spring."""
        for node in (source, target):
            if not self.contains(node):
                raise ValueError(f"Node {node.id} is not part of this simulation")
        edge = Edge(source, target,
                    rest_length if rest_length is not None else self.settings.rest_length)
        self.edges.append(edge)
        logger.debug("Connected %s -> %s", source.label, target.label)
        self._notify_changed()
        return edge

    def add_connected_node(self, parent: Node,
                           angle: Optional[float] = None) -> Tuple[Node, Edge]:
        """Spawn a bubble `spawn_distance` away from `parent` and link parent -> new.

        `angle` is in radians; when omitted it is drawn from the seeded RNG.
        """
        if not self.contains(parent):
            raise ValueError(f"Node {parent.id} is not part of this simulation")
        if angle is None:
            angle = self._rng.random() * math.pi * 2

        distance = self.settings.spawn_distance
        node = self._append_node(parent.x + math.cos(angle) * distance,
                                 parent.y + math.sin(angle) * distance, None)
        edge = Edge(parent, node, self.settings.rest_length)
        self.edges.append(edge)
        logger.debug("Spawned %s from %s at angle %.2f", node.label, parent.label, angle)
        self._notify_changed()
        return node, edge

    # ==================== Queries ====================

    def contains(self, node: Node) -> bool:
        return any(n is node for n in self.nodes)

    def node_at(self, x: float, y: float) -> Optional[Node]:
        """Return the first node in creation order that contains the point."""
        for node in self.nodes:
            if node.contains_point(x, y):
                return node
        return None

    def snapshot(self) -> SimulationSnapshot:
        """Copy positions out for rendering or export."""
        nodes = tuple(
            NodeView(n.id, n.x, n.y, n.radius, n.label, n.is_dragging)
            for n in self.nodes
        )
        live = {n.id for n in self.nodes}
        edges = tuple(
            EdgeView(e.source.id, e.target.id,
                     e.source.x, e.source.y, e.target.x, e.target.y,
                     e.target.radius)
            for e in self.edges
            if e.source.id in live and e.target.id in live
        )
        return SimulationSnapshot(nodes, edges, self.bounds.width, self.bounds.height)

    # ==================== Tick ====================

    def step(self):
        """Run one frame: springs, then integration with boundaries, then collisions."""
        live = {n.id for n in self.nodes}
        for edge in self.edges:
            if edge.source.id in live and edge.target.id in live:
                apply_spring(edge, self.settings)

        for node in self.nodes:
            integrate_node(node, self.bounds, self.settings)

        resolve_collisions(self.nodes, self.settings)
        self.ticks += 1

    def run(self, ticks: int):
        for _ in range(ticks):
            self.step()

    def _notify_changed(self):
        if self.on_structure_changed:
            self.on_structure_changed()
