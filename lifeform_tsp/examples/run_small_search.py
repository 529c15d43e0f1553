import logging
import random

from lifeform_tsp.data import generate_points
from lifeform_tsp.evaluation import GenerationStats
from lifeform_tsp.evolutionary import EvolutionConfig, EvolutionarySearch
from lifeform_tsp.logger import setup_logger


def report(stats: GenerationStats) -> None:
    if stats.generation % 20 == 0:
        print(f"gen {stats.generation}: best={stats.minimum:.2f} avg={stats.average:.2f}")


def main():
    setup_logger("lifeform_tsp", level=logging.INFO)
    rng = random.Random(7)
    points = generate_points(45, rng)

    cfg = EvolutionConfig(population_size=40, generations=200)
    search = EvolutionarySearch(cfg, points, rng=rng)
    result = search.run(progress=report)
    for line in result.properties():
        print(line)


if __name__ == "__main__":
    main()
