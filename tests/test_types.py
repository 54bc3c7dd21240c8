"""Tests for the shared types."""

import math

import numpy as np
import pytest

from barnes_hut.types import Body, EventType, Point, Rect, as_point, as_rect


class TestRect:
    """Tests for the Rect dataclass."""

    def test_rect_edges(self):
        """Test derived edges and center."""
        rect = Rect(10.0, 20.0, 100.0, 50.0)
        assert rect.right == 110.0
        assert rect.bottom == 70.0
        assert rect.center == (60.0, 45.0)

    def test_from_bounds(self):
        """Test building a rect from min/max bounds."""
        rect = Rect.from_bounds(-5, -5, 5, 15)
        assert rect == Rect(-5.0, -5.0, 10.0, 20.0)

    def test_contains_half_open(self):
        """Test containment includes the origin edges but not the far edges."""
        rect = Rect(0.0, 0.0, 800.0, 800.0)

        # Points inside
        assert rect.contains(0.0, 0.0)
        assert rect.contains(400.0, 400.0)
        assert rect.contains(799.999, 799.999)

        # Far edges belong to the neighbour
        assert not rect.contains(800.0, 400.0)
        assert not rect.contains(400.0, 800.0)

        # Points outside
        assert not rect.contains(-0.001, 400.0)
        assert not rect.contains(900.0, 900.0)

    def test_contains_rejects_nan(self):
        """Test that NaN coordinates are never contained."""
        rect = Rect(0.0, 0.0, 10.0, 10.0)
        assert not rect.contains(float("nan"), 5.0)

    def test_quadrant_order(self):
        """Test quadrants are top-left, top-right, bottom-left, bottom-right."""
        tl, tr, bl, br = Rect(0.0, 0.0, 100.0, 60.0).quadrants()
        assert tl == Rect(0.0, 0.0, 50.0, 30.0)
        assert tr == Rect(50.0, 0.0, 50.0, 30.0)
        assert bl == Rect(0.0, 30.0, 50.0, 30.0)
        assert br == Rect(50.0, 30.0, 50.0, 30.0)

    def test_quadrants_tile_parent(self):
        """Test every sampled point of the parent lies in exactly one quadrant."""
        rect = Rect(0.0, 0.0, 8.0, 8.0)
        quadrants = rect.quadrants()
        for x in np.arange(0.0, 8.0, 0.5):
            for y in np.arange(0.0, 8.0, 0.5):
                owners = [q for q in quadrants if q.contains(x, y)]
                assert len(owners) == 1

    @pytest.mark.parametrize(
        "rect",
        [Rect(0.3, 0.0, 0.7, 1.0), Rect(0.1, 0.1, 0.7, 0.9)],
    )
    def test_quadrants_tile_parent_at_far_edges(self, rect):
        """Test points just inside the right and bottom edges keep exactly one owner."""
        right = math.nextafter(rect.left + rect.width, -math.inf)
        bottom = math.nextafter(rect.top + rect.height, -math.inf)
        cx, cy = rect.center
        quadrants = rect.quadrants()

        for x, y in [(right, cy), (cx, bottom), (right, bottom), (rect.left, bottom)]:
            assert rect.contains(x, y)
            owners = [q for q in quadrants if q.contains(x, y)]
            assert len(owners) == 1

        _, tr, bl, br = quadrants
        assert tr.left + tr.width == rect.left + rect.width
        assert bl.top + bl.height == rect.top + rect.height
        assert br.right == rect.right
        assert br.bottom == rect.bottom

    def test_as_rect(self):
        """Test coercion from sequences."""
        assert as_rect((0, 0, 800, 800)) == Rect(0.0, 0.0, 800.0, 800.0)
        rect = Rect(1.0, 2.0, 3.0, 4.0)
        assert as_rect(rect) is rect


class TestPoint:
    """Tests for the Point dataclass."""

    def test_point_creation(self):
        """Test vectors are converted to float arrays."""
        point = Point(mass=2, position=(10, 20), velocity=[1, -1])
        assert point.mass == 2.0
        assert point.position.dtype == np.float64
        assert point.position.tolist() == [10.0, 20.0]
        assert point.velocity.tolist() == [1.0, -1.0]
        assert point.x == 10.0
        assert point.y == 20.0

    def test_point_default_velocity(self):
        """Test velocity defaults to zero and is not shared."""
        a = Point(1.0, (0.0, 0.0))
        b = Point(1.0, (1.0, 1.0))
        a.velocity += 1.0
        assert b.velocity.tolist() == [0.0, 0.0]

    def test_point_copies_input(self):
        """Test the point does not alias the caller's array."""
        source = np.array([1.0, 2.0])
        point = Point(1.0, source)
        point.position += 5.0
        assert source.tolist() == [1.0, 2.0]

    def test_snapshot(self):
        """Test snapshot freezes position and mass."""
        point = Point(3.0, (4.0, 5.0))
        body = point.snapshot(7)
        point.position += 1.0

        assert body == Body(4.0, 5.0, mass=3.0, index=7)

    def test_as_point_from_dict(self):
        """Test coercion from a dict."""
        point = as_point({"mass": 1.5, "position": (1, 2), "velocity": (0, 1)})
        assert point.mass == 1.5
        assert point.velocity.tolist() == [0.0, 1.0]


class TestBody:
    """Tests for the Body snapshot."""

    def test_body_defaults(self):
        """Test body default values."""
        body = Body(x=0.0, y=0.0)
        assert body.mass == 1.0
        assert body.index == -1

    def test_body_is_frozen(self):
        """Test snapshots cannot be modified."""
        body = Body(1.0, 2.0)
        with pytest.raises(AttributeError):
            body.x = 5.0  # type: ignore[misc]


def test_event_type_names():
    """Test event types resolve by name."""
    assert EventType["tick"] is EventType.tick
    assert [e.name for e in EventType] == ["start", "tick", "end"]
