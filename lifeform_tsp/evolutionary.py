import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from .data import validate_points
from .evaluation import ExperimentResult, ExperimentStats, GenerationStats, evaluate_population, path_points
from .exceptions import InvalidConfigurationError, InvariantViolationError
from .solvers.base import Point, build_graph
from .solvers.heuristics import initial_population
from .solvers.lifeform import LifeForm, is_permutation


logger = logging.getLogger(__name__)


INTEGER_FIELDS = (
    "population_size",
    "generations",
    "mutations_per_thousand",
    "crossover_transfer_count",
    "cull_iteration_factor",
)


class ExperimentState(Enum):
    INITIALIZING = "initializing"
    RUNNING = "running"
    COMPLETED = "completed"


@dataclass
class EvolutionConfig:
    population_size: int = 200
    generations: int = 1200
    mutations_per_thousand: int = 150
    crossover_transfer_count: int = 2
    # Culling gives up on random draws after this many passes over the population.
    cull_iteration_factor: int = 10
    random_seed: Optional[int] = None

    def validate(self) -> "EvolutionConfig":
        for name in INTEGER_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidConfigurationError(name, value, "an integer")
        if self.population_size < 1:
            raise InvalidConfigurationError("population_size", self.population_size, ">= 1")
        if self.generations < 0:
            raise InvalidConfigurationError("generations", self.generations, ">= 0")
        if not 0 <= self.mutations_per_thousand <= 1000:
            raise InvalidConfigurationError("mutations_per_thousand", self.mutations_per_thousand, "[0, 1000]")
        if self.crossover_transfer_count < 1:
            raise InvalidConfigurationError("crossover_transfer_count", self.crossover_transfer_count, ">= 1")
        if self.cull_iteration_factor < 1:
            raise InvalidConfigurationError("cull_iteration_factor", self.cull_iteration_factor, ">= 1")
        return self


class EvolutionarySearch:
    """
    Generational GA over closed tours.

    Every generation runs evaluate -> record -> cull -> breed -> mutate. All random draws come
    from ``rng`` so a seeded run is fully reproducible.
    """

    def __init__(
        self,
        config: EvolutionConfig,
        points: Sequence[Point],
        rng: random.Random = None,
        optimum: Optional[float] = None,
    ):
        self.cfg = config.validate()
        self.points = validate_points(points)
        self.optimum = optimum
        self.rng = rng or random.Random(config.random_seed)
        self.state = ExperimentState.INITIALIZING
        self.population_size = min(config.population_size, len(self.points))
        if self.population_size < config.population_size:
            logger.debug(
                f"population_size {config.population_size} clamped to {self.population_size} (point count)"
            )
        self.graph = build_graph(self.points)
        self.population: List[LifeForm] = initial_population(self.graph, self.population_size)
        self.stats = ExperimentStats()
        self.generation = 0

    @property
    def cull_target(self) -> int:
        return max(1, self.population_size // 2)

    def _cost(self, lifeform: LifeForm) -> float:
        return lifeform.evaluate(self.graph)

    def _check_permutation(self, lifeform: LifeForm, origin: str) -> None:
        if not is_permutation(lifeform.path, self.graph.nodes()):
            raise InvariantViolationError(
                f"{origin} produced a tour that is not a permutation", {"path": lifeform.path}
            )

    def evaluate(self) -> GenerationStats:
        gen_stats = evaluate_population(self.graph, self.population, self.stats, self.generation)
        self.stats.record(gen_stats)
        return gen_stats

    def cull(self) -> int:
        """
        Shrink the population to ``cull_target`` by random draws, removing a draw whose cost is
        above the previous draw's. Returns the number of lifeforms removed.
        """
        population = self.population
        start_size = len(population)
        target = self.cull_target
        max_draws = self.cfg.cull_iteration_factor * start_size
        draws = 0
        cost_to_beat = None
        while len(population) > target and draws < max_draws:
            draws += 1
            idx = self.rng.randrange(len(population))
            cost = self._cost(population[idx])
            if cost_to_beat is None:
                cost_to_beat = cost
                continue
            if cost > cost_to_beat:
                del population[idx]
            cost_to_beat = cost
        if len(population) > target:
            logger.warning(
                f"gen {self.generation}: culling stopped after {draws} draws at size {len(population)}; "
                f"removing costliest lifeforms down to {target}"
            )
            while len(population) > target:
                worst_idx = max(range(len(population)), key=lambda i: self._cost(population[i]))
                del population[worst_idx]
        return start_size - len(population)

    def select_parents(self) -> Tuple[int, int]:
        """
        Approximate top-2 scan: start from slots 0 and 1, a cheaper candidate replaces X first and
        only otherwise Y.
        """
        population = self.population
        if len(population) < 2:
            raise InvariantViolationError(
                "breeding requires at least two lifeforms", {"population": len(population)}
            )
        x, y = 0, 1
        for idx, candidate in enumerate(population):
            if idx == x or idx == y:
                continue
            cost = self._cost(candidate)
            if cost < self._cost(population[x]):
                x = idx
                continue
            if cost < self._cost(population[y]):
                y = idx
        return x, y

    def breed(self) -> List[LifeForm]:
        population = self.population
        babies: List[LifeForm] = []
        if len(population) >= self.population_size:
            return babies
        # The population is not touched until all babies exist, so the parents stay the same.
        x, y = self.select_parents()
        parent_x, parent_y = population[x], population[y]
        while len(population) + len(babies) < self.population_size:
            baby = parent_x.crossover(parent_y, self.rng, self.cfg.crossover_transfer_count)
            self._check_permutation(baby, "crossover")
            babies.append(baby)
        population.extend(babies)
        return babies

    def mutate(self) -> int:
        """
        Mutate lifeforms in place with probability ``mutations_per_thousand`` / 1000. The lifeform
        holding the best cost seen so far in the pass is skipped.
        """
        running_best = None
        mutated = 0
        for i, lifeform in enumerate(self.population):
            cost = self._cost(lifeform)
            if running_best is None or cost < running_best:
                running_best = cost
                continue
            if self.rng.randint(1, 1000) < self.cfg.mutations_per_thousand:
                mutant = lifeform.mutate(self.rng)
                self._check_permutation(mutant, "mutation")
                self.population[i] = mutant
                mutated += 1
        return mutated

    def step(self) -> GenerationStats:
        gen_stats = self.evaluate()
        removed = self.cull()
        babies = self.breed()
        mutated = self.mutate()
        logger.debug(
            f"gen {self.generation}: avg={gen_stats.average:.2f} min={gen_stats.minimum:.2f} "
            f"max={gen_stats.maximum:.2f} culled={removed} bred={len(babies)} mutated={mutated}"
        )
        self.generation += 1
        return gen_stats

    def run(
        self,
        progress: Callable[[GenerationStats], None] = None,
        cancel=None,
    ) -> ExperimentResult:
        """
        Run the configured number of generations.

        ``progress`` is called with each generation's stats; ``cancel`` is any object with an
        ``is_set()`` method (e.g. ``threading.Event``). Both are consulted only between
        generations.
        """
        if self.state is ExperimentState.COMPLETED:
            raise InvariantViolationError("experiment already completed")
        self.state = ExperimentState.RUNNING
        logger.info(
            f"starting experiment: points={len(self.points)} population={self.population_size} "
            f"generations={self.cfg.generations}"
        )
        cancelled = False
        while self.generation < self.cfg.generations:
            if cancel is not None and cancel.is_set():
                logger.info(f"experiment cancelled at generation {self.generation}")
                cancelled = True
                break
            gen_stats = self.step()
            if progress is not None:
                progress(gen_stats)
        self.state = ExperimentState.COMPLETED
        result = self.result(cancelled=cancelled)
        logger.info(
            f"experiment finished after {self.generation} generations: "
            f"best={result.best_cost:.2f} worst={result.worst_cost:.2f}"
        )
        return result

    def result(self, cancelled: bool = False) -> ExperimentResult:
        stats = self.stats
        if stats.best is None or stats.worst is None:
            # No generation ran; fall back to the initial population.
            for lifeform in self.population:
                self._cost(lifeform)
                stats.observe_best(lifeform)
                stats.observe_worst(lifeform)
        return ExperimentResult(
            best_path=list(stats.best.path),
            best_tour=path_points(self.graph, stats.best.path),
            best_cost=stats.best.cost,
            worst_path=list(stats.worst.path),
            worst_tour=path_points(self.graph, stats.worst.path),
            worst_cost=stats.worst.cost,
            stats=stats,
            population_size=self.population_size,
            generations=self.generation,
            mutations_per_thousand=self.cfg.mutations_per_thousand,
            cancelled=cancelled,
            optimum=self.optimum,
        )


def run_experiment(
    points: Sequence[Point],
    config: EvolutionConfig = None,
    rng: random.Random = None,
    optimum: Optional[float] = None,
    progress: Callable[[GenerationStats], None] = None,
    cancel=None,
) -> ExperimentResult:
    search = EvolutionarySearch(config or EvolutionConfig(), points, rng=rng, optimum=optimum)
    return search.run(progress=progress, cancel=cancel)
