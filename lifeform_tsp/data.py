import logging
import math
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np
import tsplib95

from .exceptions import DatasetNotFoundError, InvalidConfigurationError, InvalidPointError
from .solvers.base import Point, distance


logger = logging.getLogger(__name__)

PointLike = Union[Point, Tuple[float, float]]


@dataclass
class Instance:
    name: str
    path: Path
    points: List[Point]
    optimum: Optional[float]


def validate_points(points: Iterable[PointLike]) -> Tuple[Point, ...]:
    """
    Coerce ``(x, y)`` pairs to Points and reject empty input, non-finite coordinates and point
    sets spread so wide that a tour length would overflow.
    """
    result = []
    for p in points:
        if not isinstance(p, Point):
            x, y = p
            p = Point(float(x), float(y))
        result.append(p)
    if not result:
        raise InvalidConfigurationError("points", 0, "at least one point")
    coords = np.array([(p.x, p.y) for p in result], dtype=float)
    bad = np.flatnonzero(~np.isfinite(coords).all(axis=1))
    if bad.size:
        idx = int(bad[0])
        raise InvalidPointError(idx, result[idx].x, result[idx].y)
    # Every edge is at most the bounding-box diagonal, so this bounds any closed tour.
    with np.errstate(over="ignore", invalid="ignore"):
        span = coords.max(axis=0) - coords.min(axis=0)
        longest_tour = len(result) * np.hypot(span[0], span[1])
    if not np.isfinite(longest_tour):
        raise InvalidConfigurationError("points", f"extent {span.tolist()}", "tour lengths that fit in a float")
    return tuple(result)


def generate_points(
    count: int, rng: random.Random = None, width: float = 1000.0, height: float = 800.0
) -> List[Point]:
    """Uniformly scattered, labelled points inside ``width`` x ``height``."""
    if count < 1:
        raise InvalidConfigurationError("count", count, ">= 1")
    rng = rng or random.Random()
    return [Point(rng.uniform(0, width), rng.uniform(0, height), label=str(i + 1)) for i in range(count)]


def _solution_candidates(path: Path) -> Iterable[Path]:
    yield path.with_suffix(".opt.tour")
    for ext in (".opt.tour", ".opt", ".tour"):
        yield path.parent / "solutions" / f"{path.stem}{ext}"


def _tour_cost(points: Sequence[Point]) -> float:
    n = len(points)
    if n < 2:
        return 0.0
    return float(sum(distance(points[i], points[(i + 1) % n]) for i in range(n)))


def _load_optimum(path: Path, by_node: dict) -> Optional[float]:
    for candidate in _solution_candidates(path):
        if not candidate.exists():
            continue
        try:
            tour_file = tsplib95.load(candidate)
            nodes = list(tour_file.tours[0])
            return _tour_cost([by_node[n] for n in nodes])
        except (KeyError, IndexError, ValueError) as exc:
            logger.warning(f"ignoring unreadable tour file {candidate}: {exc}")
            continue
    return None


def load_instance(path: Union[str, Path]) -> Instance:
    """Read NODE_COORD_SECTION of a TSPLIB file; the optimum comes from a sibling ``.opt.tour``."""
    path = Path(path)
    if not path.exists():
        raise DatasetNotFoundError(path)
    problem = tsplib95.load(path)
    coords = problem.node_coords
    if not coords:
        raise InvalidConfigurationError("node_coords", path.name, "a NODE_COORD_SECTION")
    by_node = {}
    for node in sorted(coords):
        x, y = coords[node][:2]
        by_node[node] = Point(float(x), float(y), label=str(node))
    points = list(validate_points(by_node.values()))
    optimum = _load_optimum(path, by_node)
    name = problem.name or path.stem
    logger.debug(f"loaded {name}: {len(points)} points, optimum={optimum}")
    return Instance(name=name, path=path, points=points, optimum=optimum)
