import argparse
import logging
import random
import sys
import time
from typing import List, Optional

from lifeform_tsp.data import generate_points, load_instance
from lifeform_tsp.evaluation import ExperimentResult, GenerationStats
from lifeform_tsp.evolutionary import EvolutionConfig, EvolutionarySearch
from lifeform_tsp.exceptions import TSPException
from lifeform_tsp.logger import setup_logger


logger = logging.getLogger(__name__)


def _progress_printer(every: int):
    def report(gen_stats: GenerationStats) -> None:
        if every and gen_stats.generation % every == 0:
            logger.info(
                f"gen {gen_stats.generation}: avg={gen_stats.average:.2f} "
                f"best={gen_stats.minimum:.2f} worst={gen_stats.maximum:.2f}"
            )

    return report


def print_report(result: ExperimentResult, name: str) -> None:
    print(f"instance: {name}")
    print(f"best path cost: {result.best_cost:.4f}")
    print("best path: " + " ".join(p.label or f"({p.x:g},{p.y:g})" for p in result.best_tour))
    lower, upper = result.stats.chart_bounds()
    print(f"chart bounds: [{lower}, {upper}]")
    for line in result.properties():
        print(line)


def run(args) -> int:
    level = getattr(logging, args.log_level.upper())
    setup_logger("lifeform_tsp", log_file=args.log_file, level=level)
    t0 = time.perf_counter()
    optimum = None
    if args.tsp_file:
        instance = load_instance(args.tsp_file)
        points = instance.points
        optimum = instance.optimum
        name = instance.name
    else:
        points = generate_points(args.points, random.Random(args.seed))
        name = f"random-{args.points}"
    logger.info(f"loaded {len(points)} points ({name}) in {time.perf_counter() - t0:.2f}s")

    cfg = EvolutionConfig(
        population_size=args.population_size,
        generations=args.generations,
        mutations_per_thousand=args.mutations_per_thousand,
        crossover_transfer_count=args.transfer_count,
        random_seed=args.seed,
    )
    search = EvolutionarySearch(cfg, points, optimum=optimum)
    t_init = time.perf_counter()
    logger.info(f"greedy population of {search.population_size} built in {t_init - t0:.2f}s")
    try:
        result = search.run(progress=_progress_printer(args.report_every))
    except KeyboardInterrupt:
        logger.warning("interrupted")
        return 130
    logger.info(f"evolution took {time.perf_counter() - t_init:.2f}s")
    print_report(result, name)
    return 0


def build_parser() -> argparse.ArgumentParser:
    defaults = EvolutionConfig()
    parser = argparse.ArgumentParser(description="Genetic algorithm TSP optimizer")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Evolve tours for a TSPLIB file or random points")
    source = run_parser.add_mutually_exclusive_group()
    source.add_argument("--tsp-file", help="TSPLIB file with a NODE_COORD_SECTION")
    source.add_argument("--points", type=int, default=45, help="number of random points (default: 45)")
    run_parser.add_argument("--seed", type=int, default=None)
    run_parser.add_argument("--population-size", type=int, default=defaults.population_size)
    run_parser.add_argument("--generations", type=int, default=defaults.generations)
    run_parser.add_argument("--mutations-per-thousand", type=int, default=defaults.mutations_per_thousand)
    run_parser.add_argument("--transfer-count", type=int, default=defaults.crossover_transfer_count)
    run_parser.add_argument("--report-every", type=int, default=100, help="log every N generations (0: never)")
    run_parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    run_parser.add_argument("--log-file", default=None)
    run_parser.set_defaults(func=run)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except TSPException as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
