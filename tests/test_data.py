"""
Unit tests for point validation, generation and TSPLIB loading.
"""

import math
import random
import tempfile
import unittest
from pathlib import Path

from lifeform_tsp.data import generate_points, load_instance, validate_points
from lifeform_tsp.exceptions import DatasetNotFoundError, InvalidConfigurationError, InvalidPointError
from lifeform_tsp.solvers.base import Point


SQUARE_TSP = """NAME : square4
TYPE : TSP
COMMENT : four corners of a square
DIMENSION : 4
EDGE_WEIGHT_TYPE : EUC_2D
NODE_COORD_SECTION
1 0 0
2 0 10
3 10 10
4 10 0
EOF
"""

SQUARE_OPT_TOUR = """NAME : square4.opt.tour
TYPE : TOUR
DIMENSION : 4
TOUR_SECTION
1
2
3
4
-1
EOF
"""


class TestValidatePoints(unittest.TestCase):
    """Boundary validation."""

    def test_pairs_become_points(self):
        points = validate_points([(1, 2), Point(3, 4, label="b")])
        self.assertEqual(points, (Point(1.0, 2.0), Point(3, 4, label="b")))

    def test_empty_rejected(self):
        with self.assertRaises(InvalidConfigurationError):
            validate_points([])

    def test_non_finite_rejected(self):
        with self.assertRaises(InvalidPointError) as ctx:
            validate_points([(0, 0), (1, 1), (math.inf, 2)])
        self.assertEqual(ctx.exception.details["index"], 2)

    def test_overflowing_extent_rejected(self):
        # Finite coordinates, but the distance between them overflows a float.
        with self.assertRaises(InvalidConfigurationError) as ctx:
            validate_points([(-1e308, 0), (1e308, 0)])
        self.assertEqual(ctx.exception.parameter, "points")

    def test_large_but_safe_extent_accepted(self):
        points = validate_points([(-1e150, 0), (1e150, 1e150), (0, -1e150)])
        self.assertEqual(len(points), 3)


class TestGeneratePoints(unittest.TestCase):
    """Random point sets."""

    def test_count_bounds_and_labels(self):
        points = generate_points(45, random.Random(1), width=200, height=100)
        self.assertEqual(len(points), 45)
        self.assertEqual(points[0].label, "1")
        self.assertEqual(points[-1].label, "45")
        for p in points:
            self.assertTrue(0 <= p.x <= 200)
            self.assertTrue(0 <= p.y <= 100)

    def test_seeded_generation_repeats(self):
        self.assertEqual(generate_points(10, random.Random(5)), generate_points(10, random.Random(5)))

    def test_count_must_be_positive(self):
        with self.assertRaises(InvalidConfigurationError):
            generate_points(0)


class TestLoadInstance(unittest.TestCase):
    """TSPLIB loading via tsplib95."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.root = Path(self.tmp.name)
        self.tsp_path = self.root / "square4.tsp"
        self.tsp_path.write_text(SQUARE_TSP)

    def tearDown(self):
        self.tmp.cleanup()

    def test_points_in_node_order(self):
        instance = load_instance(self.tsp_path)
        self.assertEqual(instance.name, "square4")
        self.assertEqual(len(instance.points), 4)
        self.assertEqual((instance.points[2].x, instance.points[2].y), (10.0, 10.0))
        self.assertEqual(instance.points[2].label, "3")
        self.assertIsNone(instance.optimum)

    def test_optimum_from_tour_file(self):
        (self.root / "square4.opt.tour").write_text(SQUARE_OPT_TOUR)
        instance = load_instance(str(self.tsp_path))
        self.assertAlmostEqual(instance.optimum, 40.0)

    def test_missing_file(self):
        with self.assertRaises(DatasetNotFoundError):
            load_instance(self.root / "missing.tsp")


if __name__ == "__main__":
    unittest.main()
