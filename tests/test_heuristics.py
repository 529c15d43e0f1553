"""
Unit tests for the greedy initializer.
"""

import random
import unittest

from lifeform_tsp.solvers.base import Point, build_graph, tour_length
from lifeform_tsp.solvers.heuristics import (
    GreedyInsertionSolver,
    cheapest_edge_insert,
    greedy_insertion_tour,
    initial_population,
    next_nearest,
)
from lifeform_tsp.solvers.lifeform import is_permutation


class TestNearestNeighbour(unittest.TestCase):
    """Nearest unvisited node selection."""

    def setUp(self):
        self.graph = build_graph([Point(0, 0), Point(1, 0), Point(-1, 0), Point(5, 5)])

    def test_picks_nearest(self):
        self.assertEqual(next_nearest(self.graph, [3, 1], 0), 1)

    def test_ties_follow_unvisited_order(self):
        self.assertEqual(next_nearest(self.graph, [1, 2], 0), 1)
        self.assertEqual(next_nearest(self.graph, [2, 1], 0), 2)


class TestCheapestEdgeInsert(unittest.TestCase):
    """Insertion after the first endpoint of the closest edge."""

    def setUp(self):
        self.points = [Point(0, 0), Point(10, 0), Point(5, 10), Point(5, -1), Point(1, 6)]
        self.graph = build_graph(self.points)

    def test_short_tour_appends(self):
        tour = [0]
        pos = cheapest_edge_insert(self.graph, tour, 2)
        self.assertEqual(tour, [0, 2])
        self.assertEqual(pos, 1)

    def test_inserts_inside_tour(self):
        tour = [0, 1, 2]
        pos = cheapest_edge_insert(self.graph, tour, 3)
        self.assertEqual(tour, [0, 3, 1, 2])
        self.assertEqual(pos, 1)

    def test_wraparound_edge(self):
        # (1, 6) lies next to the closing edge 2 -> 0.
        tour = [0, 1, 2]
        pos = cheapest_edge_insert(self.graph, tour, 4)
        self.assertEqual(tour, [0, 1, 2, 4])
        self.assertEqual(pos, 3)


class TestGreedyInsertionTour(unittest.TestCase):
    """Complete greedy construction."""

    def test_square_every_start_is_optimal(self):
        points = [Point(0, 0), Point(0, 10), Point(10, 10), Point(10, 0)]
        graph = build_graph(points)
        for start in range(4):
            tour = GreedyInsertionSolver(start).solve(graph)
            self.assertTrue(is_permutation(tour, range(4)))
            self.assertEqual(tour[0], start)
            self.assertAlmostEqual(tour_length(graph, tour), 40.0)

    def test_random_points_give_permutations(self):
        rng = random.Random(3)
        points = [Point(rng.uniform(0, 100), rng.uniform(0, 100)) for _ in range(25)]
        graph = build_graph(points)
        for start in (0, 7, 24):
            tour = greedy_insertion_tour(graph, start)
            self.assertTrue(is_permutation(tour, range(25)))

    def test_single_point(self):
        graph = build_graph([Point(4, 2)])
        self.assertEqual(greedy_insertion_tour(graph, 0), [0])


class TestInitialPopulation(unittest.TestCase):
    """One greedy lifeform per start node."""

    def test_size_and_lazy_cost(self):
        graph = build_graph([Point(i, (i * 7) % 5) for i in range(10)])
        population = initial_population(graph, 6)
        self.assertEqual(len(population), 6)
        self.assertEqual([lf.path[0] for lf in population], list(range(6)))
        for lifeform in population:
            self.assertIsNone(lifeform.cost)
            self.assertTrue(is_permutation(lifeform.path, range(10)))

    def test_size_capped_by_point_count(self):
        graph = build_graph([Point(0, 0), Point(1, 1), Point(2, 0)])
        self.assertEqual(len(initial_population(graph, 200)), 3)


if __name__ == "__main__":
    unittest.main()
