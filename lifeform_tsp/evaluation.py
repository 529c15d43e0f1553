import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import networkx as nx
import numpy as np

from .exceptions import InvariantViolationError
from .solvers.base import Point, Tour, node_point
from .solvers.lifeform import LifeForm


@dataclass
class GenerationStats:
    generation: int
    average: float
    minimum: float
    maximum: float
    population_size: int


@dataclass
class ExperimentStats:
    """Per-generation series plus the best and worst lifeforms seen over the whole run."""

    averages: List[float] = field(default_factory=list)
    minimums: List[float] = field(default_factory=list)
    maximums: List[float] = field(default_factory=list)
    best: Optional[LifeForm] = None
    worst: Optional[LifeForm] = None

    def record(self, gen_stats: GenerationStats) -> None:
        self.averages.append(gen_stats.average)
        self.minimums.append(gen_stats.minimum)
        self.maximums.append(gen_stats.maximum)

    def observe_best(self, lifeform: LifeForm) -> None:
        if self.best is None or lifeform.cost < self.best.cost:
            self.best = lifeform

    def observe_worst(self, lifeform: LifeForm) -> None:
        if self.worst is None or lifeform.cost > self.worst.cost:
            self.worst = lifeform

    @property
    def experiment_average(self) -> float:
        if not self.averages:
            return 0.0
        return float(np.mean(self.averages))

    @property
    def experiment_dispersion(self) -> float:
        # Mean absolute successive difference of the generation averages; historically
        # reported as the experiment "std dev".
        if len(self.averages) < 2:
            return 0.0
        return float(np.mean(np.abs(np.diff(self.averages))))

    def chart_series(self) -> Tuple[List[int], List[int], List[int]]:
        """Average, best and worst series rounded to whole distance units."""
        return (
            [int(round(v)) for v in self.averages],
            [int(round(v)) for v in self.minimums],
            [int(round(v)) for v in self.maximums],
        )

    def chart_bounds(self, margin: float = 10.0) -> Tuple[int, int]:
        if self.best is None or self.worst is None:
            raise InvariantViolationError("no lifeform has been evaluated yet")
        return int(round(self.best.cost - margin)), int(round(self.worst.cost + margin))


def _checked_cost(graph: nx.Graph, lifeform: LifeForm) -> float:
    cost = lifeform.evaluate(graph)
    if not math.isfinite(cost) or cost < 0:
        raise InvariantViolationError("tour cost must be finite and non-negative", {"cost": cost})
    return cost


def evaluate_population(
    graph: nx.Graph, population: Sequence[LifeForm], stats: ExperimentStats, generation: int = 0
) -> GenerationStats:
    """
    Cache the cost of every unevaluated lifeform and summarise the generation.

    A new generation minimum that beats the global best replaces it; likewise for the maximum
    and the global worst.
    """
    if not population:
        raise InvariantViolationError("cannot evaluate an empty population")
    pop_min = None
    pop_max = None
    total = 0.0
    for lifeform in population:
        cost = _checked_cost(graph, lifeform)
        if pop_min is None or cost < pop_min:
            pop_min = cost
            stats.observe_best(lifeform)
        if pop_max is None or cost > pop_max:
            pop_max = cost
            stats.observe_worst(lifeform)
        total += cost
    return GenerationStats(
        generation=generation,
        average=total / len(population),
        minimum=pop_min,
        maximum=pop_max,
        population_size=len(population),
    )


def path_points(graph: nx.Graph, path: Tour) -> List[Point]:
    return [node_point(graph, node) for node in path]


@dataclass
class ExperimentResult:
    best_path: Tour
    best_tour: List[Point]
    best_cost: float
    worst_path: Tour
    worst_tour: List[Point]
    worst_cost: float
    stats: ExperimentStats
    population_size: int
    generations: int
    mutations_per_thousand: int
    cancelled: bool = False
    optimum: Optional[float] = None

    @property
    def averages(self) -> List[float]:
        return self.stats.averages

    @property
    def minimums(self) -> List[float]:
        return self.stats.minimums

    @property
    def maximums(self) -> List[float]:
        return self.stats.maximums

    @property
    def experiment_average(self) -> float:
        return self.stats.experiment_average

    @property
    def experiment_dispersion(self) -> float:
        return self.stats.experiment_dispersion

    @property
    def gap(self) -> float:
        if self.optimum is None or math.isclose(self.optimum, 0.0):
            return float("inf")
        return (self.best_cost - self.optimum) / self.optimum

    def properties(self) -> List[str]:
        lines = [
            f"Length of Experiment: {self.generations} cycles",
            f"Mutation Rate: approximately {self.mutations_per_thousand} mutations every thousand life forms",
            f"Population Size: {self.population_size}",
            f"Longest path: {_format_path(self.worst_tour)}",
            f"Longest path Cost: {self.worst_cost}",
            f"Experiment Average: {self.experiment_average}",
            f"Experiment Std Dev: {self.experiment_dispersion}",
        ]
        if self.optimum is not None:
            lines.append(f"Optimality gap: {self.gap:.2%}")
        if self.cancelled:
            lines.append("Experiment cancelled before the configured length")
        return lines


def _format_path(points: Sequence[Point]) -> str:
    return " -> ".join(p.label if p.label is not None else f"({p.x:g}, {p.y:g})" for p in points)
