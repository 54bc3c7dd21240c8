"""Tests for Barnes-Hut force evaluation."""

import math
import random

import pytest

from barnes_hut import Point, SimulationConfig
from barnes_hut.physics.gravity import (
    TraversalStats,
    accumulate_acceleration,
    direct_acceleration,
    direct_accelerations,
)
from barnes_hut.spatial.quadtree import QuadTree


def _random_points(n, seed, size=800.0):
    rng = random.Random(seed)
    return [
        Point(rng.uniform(0.5, 2.0), (rng.uniform(0, size), rng.uniform(0, size)))
        for _ in range(n)
    ]


class TestAccumulateAcceleration:
    """Tests for the tree walk."""

    def test_single_point_no_force(self):
        """Test that a point exerts no force on itself."""
        point = Point(1.0, (50.0, 50.0))
        tree = QuadTree.from_points([point], (0, 0, 100, 100))

        assert accumulate_acceleration(tree.root, point, SimulationConfig()) == (0.0, 0.0)

    def test_empty_tree_no_force(self):
        tree = QuadTree((0, 0, 100, 100))
        tree.compute_mass_distribution()
        point = Point(1.0, (50.0, 50.0))

        assert accumulate_acceleration(tree.root, point, SimulationConfig()) == (0.0, 0.0)

    def test_attractive_direction(self):
        """Test that gravity pulls points toward each other."""
        a = Point(1.0, (40.0, 50.0))
        b = Point(1.0, (60.0, 50.0))
        tree = QuadTree.from_points([a, b], (0, 0, 100, 100))
        config = SimulationConfig()

        ax, ay = accumulate_acceleration(tree.root, a, config)
        bx, by = accumulate_acceleration(tree.root, b, config)

        assert ax > 0  # Pulled right, towards b
        assert bx < 0  # Pulled left, towards a
        assert ay == 0.0
        assert by == 0.0

    def test_softened_magnitude(self):
        """Test the softened inverse-square magnitude for one source."""
        source = Point(2.0, (0.0, 0.0))
        target = Point(1.0, (30.0, 40.0))
        tree = QuadTree.from_points([source], (-100, -100, 200, 200))
        config = SimulationConfig(gravity_constant=0.5, softening=5.0)

        ax, ay = accumulate_acceleration(tree.root, target, config)

        dist = math.sqrt(50.0**2 + 5.0**2)
        magnitude = 0.5 * 2.0 / (dist**2 + 5.0**2)
        assert math.hypot(ax, ay) == pytest.approx(magnitude * 50.0 / dist)
        assert ax / ay == pytest.approx(30.0 / 40.0)

    def test_acceleration_independent_of_target_mass(self):
        source = Point(5.0, (10.0, 10.0))
        light = Point(0.1, (70.0, 30.0))
        heavy = Point(100.0, (70.0, 30.0))
        tree = QuadTree.from_points([source], (0, 0, 100, 100))
        config = SimulationConfig()

        assert accumulate_acceleration(tree.root, light, config) == pytest.approx(
            accumulate_acceleration(tree.root, heavy, config)
        )

    def test_symmetry(self):
        """Test two equal masses receive equal-magnitude accelerations."""
        a = Point(3.0, (120.0, 300.0))
        b = Point(3.0, (610.0, 75.0))
        tree = QuadTree.from_points([a, b], (0, 0, 800, 800))
        config = SimulationConfig()

        ax, ay = accumulate_acceleration(tree.root, a, config)
        bx, by = accumulate_acceleration(tree.root, b, config)

        assert math.hypot(ax, ay) == pytest.approx(math.hypot(bx, by))
        assert ax == pytest.approx(-bx)
        assert ay == pytest.approx(-by)

    def test_does_not_mutate_tree(self):
        points = _random_points(50, seed=1)
        tree = QuadTree.from_points(points, (0, 0, 800, 800))
        before = [(n.total_mass, n.center_of_mass, list(n.bodies)) for n in tree.nodes()]

        for point in points:
            accumulate_acceleration(tree.root, point, SimulationConfig())

        after = [(n.total_mass, n.center_of_mass, list(n.bodies)) for n in tree.nodes()]
        assert before == after

    def test_does_not_mutate_point(self):
        points = _random_points(10, seed=2)
        tree = QuadTree.from_points(points, (0, 0, 800, 800))
        target = points[0]

        accumulate_acceleration(tree.root, target, SimulationConfig())

        assert target.velocity.tolist() == [0.0, 0.0]

    def test_coincident_bucket_is_skipped_for_its_members(self):
        """Test coincident points do not attract each other."""
        points = [Point(1.0, (40.0, 40.0)), Point(1.0, (40.0, 40.0))]
        tree = QuadTree.from_points(points, (0, 0, 100, 100), max_depth=4)

        assert accumulate_acceleration(tree.root, points[0], SimulationConfig()) == (0.0, 0.0)


class TestOpeningAngle:
    """Tests for the theta criterion."""

    def test_theta_zero_matches_direct(self):
        """Test that theta=0 opens every internal node."""
        points = _random_points(40, seed=3)
        tree = QuadTree.from_points(points, (0, 0, 800, 800))
        config = SimulationConfig(theta=0.0)

        for i, point in enumerate(points):
            stats = TraversalStats()
            ax, ay = accumulate_acceleration(tree.root, point, config, stats)
            ex, ey = direct_acceleration(points, i, config)

            assert stats.approximate == 0
            assert stats.exact == len(points) - 1
            assert ax == pytest.approx(ex, rel=1e-9, abs=1e-15)
            assert ay == pytest.approx(ey, rel=1e-9, abs=1e-15)

    def test_default_theta_is_close_to_direct(self):
        points = _random_points(200, seed=4)
        tree = QuadTree.from_points(points, (0, 0, 800, 800))
        config = SimulationConfig()
        exact = direct_accelerations(points, config)

        error = 0.0
        scale = 0.0
        for point, (ex, ey) in zip(points, exact):
            ax, ay = accumulate_acceleration(tree.root, point, config)
            error += math.hypot(ax - ex, ay - ey)
            scale += math.hypot(ex, ey)

        assert error / scale < 0.05

    def test_large_theta_approximates(self):
        points = _random_points(200, seed=5)
        tree = QuadTree.from_points(points, (0, 0, 800, 800))
        stats = TraversalStats()

        for point in points:
            accumulate_acceleration(tree.root, point, SimulationConfig(theta=1.0), stats)

        assert stats.approximate > 0
        assert stats.exact < len(points) * (len(points) - 1)

    def test_monotonic_in_theta(self):
        """Test that smaller theta never reduces exact interactions."""
        points = _random_points(150, seed=6)
        tree = QuadTree.from_points(points, (0, 0, 800, 800))
        thetas = [2.0, 1.0, 0.75, 0.5, 0.25, 0.1, 0.0]

        for point in points[:20]:
            counts = []
            for theta in thetas:
                stats = TraversalStats()
                accumulate_acceleration(tree.root, point, SimulationConfig(theta=theta), stats)
                counts.append((stats.exact, stats.visited))

            for (exact_a, visited_a), (exact_b, visited_b) in zip(counts, counts[1:]):
                assert exact_b >= exact_a
                assert visited_b >= visited_a

    def test_stats_merge(self):
        total = TraversalStats(exact=1, approximate=2, visited=3)
        total.merge(TraversalStats(exact=10, approximate=20, visited=30))
        assert total == TraversalStats(exact=11, approximate=22, visited=33)


class TestDirectAcceleration:
    """Tests for the exhaustive reference."""

    def test_vectorised_matches_loop(self):
        points = _random_points(30, seed=7)
        config = SimulationConfig(gravity_constant=2.0, softening=3.0)
        matrix = direct_accelerations(points, config)

        assert matrix.shape == (30, 2)
        for i in range(len(points)):
            ax, ay = direct_acceleration(points, i, config)
            assert matrix[i, 0] == pytest.approx(ax, rel=1e-9, abs=1e-15)
            assert matrix[i, 1] == pytest.approx(ay, rel=1e-9, abs=1e-15)

    def test_empty(self):
        assert direct_accelerations([], SimulationConfig()).shape == (0, 2)

    def test_coincident_pairs_skipped(self):
        points = [Point(1.0, (5.0, 5.0)), Point(1.0, (5.0, 5.0))]
        matrix = direct_accelerations(points, SimulationConfig())

        assert matrix.tolist() == [[0.0, 0.0], [0.0, 0.0]]
        assert direct_acceleration(points, 0, SimulationConfig()) == (0.0, 0.0)
