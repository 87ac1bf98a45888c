"""
Exhaustive mapping search.

Every point of the mapspace is visited in a fixed nesting order
(IndexFactorization outermost, DatatypeBypass innermost): illegal points
and mappings whose evaluation fails at any level are skipped, and the
lowest-energy mapping seen so far is kept. Ties keep the earlier mapping.

No pruning, no early exit, no parallelism: this is the reference baseline
against which guided strategies are compared.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, Sequence

from tqdm import tqdm

from simple_mapper.mapspace import MapSpace, MappingID, SEARCH_ORDER


logger = logging.getLogger(__name__)


def enumerate_coordinates(sizes: Sequence[int]) -> Iterator[tuple[int, ...]]:
    """
    Lazily walk the Cartesian product of range(size) for each size.

    The first dimension varies slowest. Unlike itertools.product, no input
    range is materialized, so sizes beyond 64 bits are fine.
    """
    if not sizes:
        yield ()
        return
    head, rest = sizes[0], sizes[1:]
    for value in range(head):
        for tail in enumerate_coordinates(rest):
            yield (value,) + tail


def enumerate_mapping_ids(mapspace: MapSpace) -> Iterator[MappingID]:
    """Yield a fresh MappingID for every point of the mapspace."""
    sizes = mapspace.all_sizes()
    for values in enumerate_coordinates(sizes):
        mapping_id = MappingID(sizes)
        for dim, value in zip(SEARCH_ORDER, values):
            mapping_id.set(dim, value)
        yield mapping_id


class BestTracker:
    """
    The best legal, successfully evaluated mapping seen so far.

    Either unset, or holds (mapping, metric, engine snapshot).
    """

    def __init__(self):
        self.mapping: Any = None
        self.metric: Optional[float] = None
        self.engine: Any = None

    @property
    def is_set(self) -> bool:
        return self.metric is not None

    def update(self, mapping, engine) -> bool:
        """
        Offer an evaluated candidate.

        Returns:
            True if the candidate replaced the best (strictly lower energy,
            or nothing recorded yet)
        """
        metric = engine.energy()
        if self.is_set and not metric < self.metric:
            return False
        self.mapping = mapping
        self.metric = metric
        self.engine = engine.snapshot()
        return True


@dataclass
class SearchStats:
    """Counters of one search run."""
    attempts: int = 0
    legal: int = 0
    valid: int = 0
    improvements: int = 0
    elapsed: float = 0.0

    def summary(self) -> str:
        return (
            f"{self.attempts} mappings visited, {self.legal} legal, "
            f"{self.valid} evaluated successfully, {self.improvements} improvements "
            f"({self.elapsed:.2f}s)"
        )


@dataclass
class SearchResult:
    best: BestTracker = field(default_factory=BestTracker)
    stats: SearchStats = field(default_factory=SearchStats)

    @property
    def found(self) -> bool:
        return self.best.is_set


def run_search(mapspace: MapSpace, engine, workload, progress: bool = False) -> SearchResult:
    """
    Run the exhaustive search.

    Args:
        mapspace: Space of candidate mappings
        engine: Cost model engine, already specced; reused every iteration
        workload: Workload passed to engine.evaluate()
        progress: Show a progress bar

    Returns:
        SearchResult with the best mapping (if any) and search counters
    """
    result = SearchResult()
    best, stats = result.best, result.stats

    total = mapspace.total_size()
    logger.info(f"Searching {total} mappings (sizes {mapspace.all_sizes()})")
    start = time.perf_counter()

    with tqdm(total=total, disable=not progress, unit="mapping") as bar:
        for mapping_id in enumerate_mapping_ids(mapspace):
            stats.attempts += 1
            bar.update(1)

            # The legal subset is sparse; an illegal ID is a skip, not an error.
            success, mapping = mapspace.construct_mapping(mapping_id)
            if not success:
                continue
            stats.legal += 1

            status_per_level = engine.evaluate(mapping, workload)
            if not all(status.success for status in status_per_level):
                continue
            stats.valid += 1

            if best.update(mapping, engine):
                stats.improvements += 1
                if progress:
                    bar.set_postfix(energy=f"{best.metric:.4g}")

    stats.elapsed = time.perf_counter() - start
    logger.info(f"Search complete: {stats.summary()}")
    return result
