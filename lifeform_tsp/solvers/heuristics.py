from typing import List, Sequence

import networkx as nx

from .base import Solver, Tour, node_point, point_segment_distance
from .lifeform import LifeForm


def next_nearest(graph: nx.Graph, unvisited: Sequence[int], previous: int) -> int:
    # min() keeps the first of equally near nodes, so ties follow unvisited order.
    return min(unvisited, key=lambda node: graph[previous][node]["weight"])


def cheapest_edge_insert(graph: nx.Graph, tour: Tour, node: int) -> int:
    """
    Insert ``node`` right after the first endpoint of the closest edge of the closed partial
    tour and return the position it landed on.
    """
    if len(tour) < 2:
        tour.append(node)
        return len(tour) - 1
    p = node_point(graph, node)
    best_pos = 0
    best_dist = None
    for i in range(len(tour)):
        a = node_point(graph, tour[i])
        b = node_point(graph, tour[(i + 1) % len(tour)])
        d = point_segment_distance(p, a, b)
        if best_dist is None or d < best_dist:
            best_dist = d
            best_pos = i + 1
    tour.insert(best_pos, node)
    return best_pos


def greedy_insertion_tour(graph: nx.Graph, start: int) -> Tour:
    tour = [start]
    unvisited = [node for node in graph.nodes() if node != start]
    current = start
    while unvisited:
        nxt = next_nearest(graph, unvisited, current)
        cheapest_edge_insert(graph, tour, nxt)
        unvisited.remove(nxt)
        current = nxt
    return tour


class GreedyInsertionSolver(Solver):
    """Nearest-neighbour selection combined with closest-edge insertion from a fixed start node."""

    name = "greedy_insertion"

    def __init__(self, start: int):
        self.start = start

    def solve(self, graph: nx.Graph) -> Tour:
        return greedy_insertion_tour(graph, self.start)


def initial_population(graph: nx.Graph, size: int) -> List[LifeForm]:
    """One greedy tour per start node ``0 .. size-1``; costs are left unset."""
    starts = list(graph.nodes())[:size]
    return [LifeForm(path=GreedyInsertionSolver(start).solve(graph)) for start in starts]
