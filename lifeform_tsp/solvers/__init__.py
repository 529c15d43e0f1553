from .base import Point, Solver, Tour, build_graph, distance, node_point, point_segment_distance, tour_length
from .lifeform import LifeForm, crossover, is_permutation, three_way_mix, two_way_swap
from .heuristics import (
    GreedyInsertionSolver,
    cheapest_edge_insert,
    greedy_insertion_tour,
    initial_population,
    next_nearest,
)

__all__ = [
    "Point",
    "Solver",
    "Tour",
    "build_graph",
    "distance",
    "node_point",
    "point_segment_distance",
    "tour_length",
    "LifeForm",
    "crossover",
    "is_permutation",
    "three_way_mix",
    "two_way_swap",
    "GreedyInsertionSolver",
    "cheapest_edge_insert",
    "greedy_insertion_tour",
    "initial_population",
    "next_nearest",
]
