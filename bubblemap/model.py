"""Node and edge records for the bubble simulation."""

import itertools
import math
from dataclasses import dataclass, field

_node_ids = itertools.count(1)


@dataclass(eq=False)
class Node:
    """A draggable circular bubble."""
    x: float
    y: float
    label: str = ""
    radius: float = 30.0
    vx: float = 0.0
    vy: float = 0.0
    is_dragging: bool = False
    id: int = field(default_factory=lambda: next(_node_ids))

    def __post_init__(self):
        if self.radius <= 0:
            raise ValueError(f"Node radius must be positive, got {self.radius}")

    def contains_point(self, px: float, py: float) -> bool:
        """Check if a point is strictly inside this node."""
        return math.hypot(self.x - px, self.y - py) < self.radius

    def stop(self):
        self.vx = 0.0
        self.vy = 0.0


@dataclass(eq=False)
class Edge:
    """A directed spring from `source` to `target`.

    Edges reference nodes without owning them.
    """
    source: Node
    target: Node
    rest_length: float = 120.0

    def __post_init__(self):
        if self.source is self.target:
            raise ValueError(f"Edge cannot connect node {self.source.id} to itself")
        if self.rest_length < 0:
            raise ValueError(f"Edge rest length must be >= 0, got {self.rest_length}")

    def length(self) -> float:
        return math.hypot(self.target.x - self.source.x, self.target.y - self.source.y)
