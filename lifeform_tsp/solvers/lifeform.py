import random
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

import networkx as nx

from .base import Tour, tour_length


@dataclass
class LifeForm:
    """A candidate tour; ``cost`` is ``None`` until the next evaluation pass computes it."""

    path: Tour
    cost: Optional[float] = None

    def evaluate(self, graph: nx.Graph) -> float:
        if self.cost is None:
            self.cost = tour_length(graph, self.path)
        return self.cost

    def crossover(self, other: "LifeForm", rng: random.Random, transfer_count: int = 2) -> "LifeForm":
        return crossover(self, other, rng, transfer_count)

    def mutate(self, rng: random.Random) -> "LifeForm":
        if rng.random() < 0.5:
            return two_way_swap(self, rng)
        return three_way_mix(self, rng)


def is_permutation(path: Sequence[int], nodes: Iterable[int]) -> bool:
    nodes = list(nodes)
    return len(path) == len(nodes) and sorted(path) == sorted(nodes)


def crossover(parent_x: LifeForm, parent_y: LifeForm, rng: random.Random, transfer_count: int = 2) -> LifeForm:
    """
    Copy ``transfer_count`` consecutive nodes of ``parent_x`` (wrapping around) from a random
    start, then append ``parent_y`` in its own order without those nodes.
    """
    path_x = parent_x.path
    n = len(path_x)
    if n == 0:
        return LifeForm(path=[])
    start = rng.randrange(n)
    transferred = [path_x[(start + k) % n] for k in range(min(transfer_count, n))]
    taken = set(transferred)
    child = transferred + [node for node in parent_y.path if node not in taken]
    return LifeForm(path=child)


def two_way_swap(target: LifeForm, rng: random.Random) -> LifeForm:
    path = target.path[:]
    n = len(path)
    if n == 0:
        return LifeForm(path=path)
    a = rng.randrange(n)
    b = (a + 1) % n
    path[a], path[b] = path[b], path[a]
    return LifeForm(path=path)


def three_way_mix(target: LifeForm, rng: random.Random) -> LifeForm:
    """Reassign the nodes at ``i``, ``i+1``, ``i+2`` (mod n) in a random order; identity is allowed."""
    path = target.path[:]
    n = len(path)
    if n == 0:
        return LifeForm(path=path)
    i = rng.randrange(n)
    positions = []
    for k in range(3):
        pos = (i + k) % n
        # Short tours wrap onto the same slot.
        if pos not in positions:
            positions.append(pos)
    nodes = [path[pos] for pos in positions]
    for pos, node in zip(positions, rng.sample(nodes, len(nodes))):
        path[pos] = node
    return LifeForm(path=path)
