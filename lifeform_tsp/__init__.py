"""
Genetic-algorithm optimizer for the Euclidean TSP: greedy-seeded population, stochastic culling,
crossover breeding and swap/mix mutations.
"""

from .evaluation import ExperimentResult, ExperimentStats, GenerationStats
from .evolutionary import EvolutionConfig, EvolutionarySearch, ExperimentState, run_experiment
from .solvers.base import Point

__all__ = [
    "data",
    "evaluation",
    "evolutionary",
    "EvolutionConfig",
    "EvolutionarySearch",
    "ExperimentResult",
    "ExperimentState",
    "ExperimentStats",
    "GenerationStats",
    "Point",
    "run_experiment",
]
