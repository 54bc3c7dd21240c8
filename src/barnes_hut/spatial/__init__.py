"""
Spatial data structures for efficient force calculations.

Provides the quadtree used for Barnes-Hut O(n log n) force approximation.
"""

from .quadtree import QuadTree, QuadTreeNode, aggregate, insert, subdivide

__all__ = ["QuadTree", "QuadTreeNode", "aggregate", "insert", "subdivide"]
