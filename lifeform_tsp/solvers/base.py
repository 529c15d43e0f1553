import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence

import networkx as nx


Tour = List[int]


@dataclass(frozen=True)
class Point:
    x: float
    y: float
    label: Optional[str] = None


def distance(p: Point, q: Point) -> float:
    return math.hypot(p.x - q.x, p.y - q.y)


def point_segment_distance(p: Point, a: Point, b: Point) -> float:
    """Distance from ``p`` to the closed segment ``a``-``b`` (projection clamped to the endpoints)."""
    dx = b.x - a.x
    dy = b.y - a.y
    seg_len_sq = dx * dx + dy * dy
    if seg_len_sq == 0.0:
        return distance(p, a)
    t = ((p.x - a.x) * dx + (p.y - a.y) * dy) / seg_len_sq
    t = max(0.0, min(1.0, t))
    return math.hypot(p.x - (a.x + t * dx), p.y - (a.y + t * dy))


def build_graph(points: Sequence[Point]) -> nx.Graph:
    """Complete graph over ``points``; node ``i`` is ``points[i]``, edges carry Euclidean ``weight``."""
    graph = nx.Graph()
    for i, p in enumerate(points):
        graph.add_node(i, point=p, pos=(p.x, p.y))
    for i in range(len(points)):
        for j in range(i + 1, len(points)):
            graph.add_edge(i, j, weight=distance(points[i], points[j]))
    return graph


def node_point(graph: nx.Graph, node: int) -> Point:
    return graph.nodes[node]["point"]


def tour_length(graph: nx.Graph, tour: Sequence[int]) -> float:
    n = len(tour)
    if n < 2:
        return 0.0
    dist = 0.0
    for i in range(n):
        a = tour[i]
        b = tour[(i + 1) % n]
        dist += graph[a][b]["weight"]
    return float(dist)


class Solver(ABC):
    name: str = "base"

    @abstractmethod
    def solve(self, graph: nx.Graph) -> Tour:
        raise NotImplementedError
