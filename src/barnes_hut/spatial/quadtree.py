"""
Quadtree construction and mass aggregation for Barnes-Hut.

The quadtree recursively subdivides a rectangular world into quadrants.
Each leaf holds at most one body snapshot; once the tree is built, a
post-order pass stores the total mass and center of mass of every
subtree so distant clusters can stand in for their members.

Trees are built from scratch every tick and dropped afterwards. Each
node exclusively owns its four children; there are no back-references.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence

from ..config import DEFAULT_MAX_DEPTH
from ..types import Body, Point, Rect, RectLike, as_rect


@dataclass
class QuadTreeNode:
    """
    A node in the quadtree.

    Attributes:
        boundary: Region covered by this node
        depth: Distance from the root (root = 0)
        total_mass: Total mass of bodies in this subtree
        center_of_mass_x/y: Center of mass of bodies in this subtree
        bodies: Body snapshots held by a leaf. At most one, except in a
            leaf at the depth limit, which buckets every body reaching it.
        children: Four child quadrants [top-left, top-right, bottom-left,
            bottom-right] if internal, None if leaf
    """

    boundary: Rect
    depth: int = 0

    # Aggregated properties
    total_mass: float = 0.0
    center_of_mass_x: float = 0.0
    center_of_mass_y: float = 0.0

    # Content
    bodies: List[Body] = field(default_factory=list)
    children: Optional[List[QuadTreeNode]] = None

    def is_leaf(self) -> bool:
        """True if this node has no children."""
        return self.children is None

    def is_empty(self) -> bool:
        """True if this node is a leaf without bodies."""
        return self.children is None and not self.bodies

    @property
    def body(self) -> Optional[Body]:
        """The first body held by this leaf, if any."""
        return self.bodies[0] if self.bodies else None

    @property
    def center_of_mass(self) -> tuple[float, float]:
        return self.center_of_mass_x, self.center_of_mass_y

    def iter_nodes(self) -> Iterator[QuadTreeNode]:
        """Yield this node and all descendants, pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            if node.children is not None:
                stack.extend(reversed(node.children))


# -----------------------------------------------------------------------------
# Tree builder
# -----------------------------------------------------------------------------


def subdivide(node: QuadTreeNode) -> None:
    """Give a leaf four children that quarter its boundary."""
    node.children = [
        QuadTreeNode(quadrant, node.depth + 1) for quadrant in node.boundary.quadrants()
    ]


def insert(node: QuadTreeNode, body: Body, max_depth: int = DEFAULT_MAX_DEPTH) -> bool:
    """
    Insert a body snapshot into the subtree rooted at node.

    Bodies outside node.boundary are ignored. A leaf that already holds a
    body is subdivided and its body pushed down, unless the leaf sits at
    max_depth, in which case the body joins the leaf's bucket.

    Returns:
        True if the body was stored somewhere in the subtree
    """
    if not node.boundary.contains(body.x, body.y):
        return False

    _store(node, body, max_depth)
    return True


def _store(node: QuadTreeNode, body: Body, max_depth: int) -> None:
    """Store a body the node has already accepted."""
    if node.children is None:
        if not node.bodies or node.depth >= max_depth:
            node.bodies.append(body)
            return

        subdivide(node)
        existing = node.bodies
        node.bodies = []
        for saved in existing:
            _insert_into_children(node, saved, max_depth)

    _insert_into_children(node, body, max_depth)


def _insert_into_children(node: QuadTreeNode, body: Body, max_depth: int) -> None:
    # Every child gets the chance; its containment check picks the owner.
    if node.children is not None:
        stored = False
        for child in node.children:
            if insert(child, body, max_depth):
                stored = True

        if not stored:
            # Lost to rounding at a child edge; pick the side of the center
            east = body.x >= node.children[1].boundary.left
            south = body.y >= node.children[2].boundary.top
            index = (2 if south else 0) + (1 if east else 0)
            _store(node.children[index], body, max_depth)


# -----------------------------------------------------------------------------
# Mass aggregator
# -----------------------------------------------------------------------------


def aggregate(node: QuadTreeNode) -> None:
    """
    Compute total mass and center of mass for node and its descendants.

    Post-order: children are aggregated before their parent. Nodes without
    mass get a zero center of mass. Only total_mass and center_of_mass_x/y
    are written, so repeated calls on an unchanged tree are idempotent.
    """
    total_mass = 0.0
    weighted_x = 0.0
    weighted_y = 0.0

    if node.children is None:
        for body in node.bodies:
            total_mass += body.mass
            weighted_x += body.x * body.mass
            weighted_y += body.y * body.mass
    else:
        for child in node.children:
            aggregate(child)
            total_mass += child.total_mass
            weighted_x += child.center_of_mass_x * child.total_mass
            weighted_y += child.center_of_mass_y * child.total_mass

    node.total_mass = total_mass
    if total_mass > 0:
        if node.children is None and len(node.bodies) == 1:
            # Exact position, so self-interaction tests compare equal
            node.center_of_mass_x = node.bodies[0].x
            node.center_of_mass_y = node.bodies[0].y
        else:
            node.center_of_mass_x = weighted_x / total_mass
            node.center_of_mass_y = weighted_y / total_mass
    else:
        node.center_of_mass_x = 0.0
        node.center_of_mass_y = 0.0


class QuadTree:
    """
    Barnes-Hut quadtree over a fixed world boundary.

    Usage:
        tree = QuadTree(Rect(0, 0, 800, 800))
        for i, point in enumerate(points):
            tree.insert(point.snapshot(i))
        tree.compute_mass_distribution()

        ax, ay = accumulate_acceleration(tree.root, points[0], config)

    Bodies outside the boundary are dropped and counted in dropped_count.
    """

    def __init__(self, boundary: RectLike, max_depth: int = DEFAULT_MAX_DEPTH):
        """
        Initialize quadtree.

        Args:
            boundary: World rectangle as Rect or (left, top, width, height)
            max_depth: Deepest subdivision level
        """
        self.root = QuadTreeNode(as_rect(boundary))
        self.max_depth = max_depth
        self.body_count = 0
        self.dropped_count = 0

    @property
    def boundary(self) -> Rect:
        return self.root.boundary

    def insert(self, body: Body) -> bool:
        """Insert a body; returns False if it lies outside the boundary."""
        if insert(self.root, body, self.max_depth):
            self.body_count += 1
            return True
        self.dropped_count += 1
        return False

    def compute_mass_distribution(self) -> None:
        """Compute center of mass for all nodes (post-order traversal)."""
        aggregate(self.root)

    def nodes(self) -> Iterator[QuadTreeNode]:
        return self.root.iter_nodes()

    def node_count(self) -> int:
        return sum(1 for _ in self.root.iter_nodes())

    def depth(self) -> int:
        """Depth of the deepest node."""
        return max(node.depth for node in self.root.iter_nodes())

    @classmethod
    def from_points(
        cls,
        points: Sequence[Point],
        boundary: RectLike,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> QuadTree:
        """
        Build a quadtree from the current state of a point sequence.

        Each point is snapshotted with its sequence index; the mass
        distribution is computed before returning.
        """
        tree = cls(boundary, max_depth=max_depth)
        for i, point in enumerate(points):
            tree.insert(point.snapshot(i))
        tree.compute_mass_distribution()
        return tree


__all__ = ["QuadTree", "QuadTreeNode", "aggregate", "insert", "subdivide"]
