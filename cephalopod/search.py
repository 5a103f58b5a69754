"""Memoized Search Engine for the Cephalopod Solver

This module enumerates every move sequence from a game state and aggregates
the results of the terminal states it reaches. A state is terminal when the
board is full or the depth bound is reached; its result is the board read as
a 9-digit number. Every other state aggregates the results of all its
successors modulo RESULT_MOD.

The implementation includes:
- A transposition table keyed by the packed state hash, so a (depth, board)
  pair reached through different move orders is computed once
- Modular reduction after every addition
- An optional process pool that splits the root successors across workers

Example:
    >>> engine = SearchEngine(max_depth=1)
    >>> engine.compute(GameState.init(Grid.empty()))
    111111111
"""

from __future__ import annotations
import logging
import time
from dataclasses import dataclass, field
from multiprocessing import Pool
from typing import Any, Dict, List, Optional

from .game import GameState
from .models import COMBINATIONS, CombinationTable

logger = logging.getLogger(__name__)

RESULT_MOD = 2 ** 30
MIN_PARALLEL_WORKERS = 2


class ResultCache:
    """Transposition table mapping state hashes to aggregated results.

    A disabled cache never stores anything, so every lookup misses and the
    whole tree is recomputed. Results are the same either way.

    Attributes:
        results: Stored aggregates by state hash
        enabled: Whether results are stored
        hits: Number of successful lookups
        misses: Number of failed lookups
    """

    def __init__(self, enabled: bool = True):
        self.results: Dict[int, int] = {}
        self.enabled = enabled
        self.hits = 0
        self.misses = 0

    def lookup(self, state_hash: int) -> Optional[int]:
        result = self.results.get(state_hash)
        if result is None:
            self.misses += 1
        else:
            self.hits += 1
        return result

    def store(self, state_hash: int, result: int) -> None:
        if self.enabled:
            self.results[state_hash] = result

    def clear(self) -> None:
        """Clear all entries and reset statistics."""
        self.results.clear()
        self.hits = 0
        self.misses = 0

    def stats(self) -> Dict[str, Any]:
        """Return size, hits, misses and hit rate (in percent)."""
        total = self.hits + self.misses
        return {
            "size": len(self.results),
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": (self.hits / total * 100) if total > 0 else 0.0,
        }

    def __len__(self) -> int:
        return len(self.results)

    def __contains__(self, state_hash: int) -> bool:
        return state_hash in self.results


@dataclass
class SearchEngine:
    """Depth-first enumeration of all move sequences with memoization.

    Attributes:
        max_depth: Depth at which states are scored instead of expanded
        cache: Transposition table shared by every recursive call
        combinations: Neighbour index subsets used to find captures
        nodes: Number of compute calls made so far
    """

    max_depth: int
    cache: Optional[ResultCache] = None
    combinations: CombinationTable = COMBINATIONS
    nodes: int = field(default=0, init=False)

    def __post_init__(self):
        if self.cache is None:
            self.cache = ResultCache()

    def compute(self, state: GameState) -> int:
        """Return the aggregated result of `state`.

        Args:
            state: State to evaluate

        Returns:
            Cached result on a hit; the board value for terminal states;
            otherwise the sum of all successor results modulo RESULT_MOD
        """
        self.nodes += 1
        state_hash = state.hash()

        cached_result = self.cache.lookup(state_hash)
        if cached_result is not None:
            return cached_result

        if state.depth == self.max_depth or state.is_final():
            result = state.result()
            self.cache.store(state_hash, result)
            return result

        result = 0
        for position in state.grid.free_cells():
            for next_state in state.play(position, self.combinations):
                result = (result + self.compute(next_state)) % RESULT_MOD

        self.cache.store(state_hash, result)
        return result

    def successors(self, state: GameState) -> List[GameState]:
        """All states one move after `state`, in enumeration order."""
        return [
            next_state
            for position in state.grid.free_cells()
            for next_state in state.play(position, self.combinations)
        ]


# Per-process worker state, set by the pool initializer
_worker_engine: Optional[SearchEngine] = None


def _worker_init(max_depth: int, use_cache: bool) -> None:
    """Create the search engine of a worker process.

    The engine and its cache live as long as the pool, so states shared by
    several root branches handled in the same worker are computed once.
    """
    global _worker_engine
    _worker_engine = SearchEngine(max_depth, ResultCache(enabled=use_cache))


def _worker_compute(state: GameState) -> int:
    return _worker_engine.compute(state)


@dataclass
class ParallelResult:
    """Aggregate of a parallel search.

    Attributes:
        result: Aggregated result modulo RESULT_MOD
        branches: Number of root successors distributed to workers
        workers: Number of worker processes used
        duration_seconds: Total wall-clock time
    """
    result: int
    branches: int
    workers: int
    duration_seconds: float


def parallel_compute(state: GameState, max_depth: int, workers: int,
                     use_cache: bool = True) -> ParallelResult:
    """Aggregate the result of `state` with the root successors spread over processes.

    Each worker keeps its own cache, so no state is shared between
    processes. The partial sums are combined modulo RESULT_MOD, which makes
    the result independent of how branches are assigned.

    Args:
        state: Root state
        max_depth: Depth bound of the search
        workers: Number of worker processes
        use_cache: Whether workers memoize results

    Returns:
        ParallelResult with the aggregate and run statistics
    """
    start_time = time.perf_counter()
    engine = SearchEngine(max_depth, ResultCache(enabled=use_cache))

    if workers < MIN_PARALLEL_WORKERS or state.depth == max_depth or state.is_final():
        logger.debug("Running sequential search (workers=%d)", workers)
        return ParallelResult(
            result=engine.compute(state),
            branches=0,
            workers=1,
            duration_seconds=time.perf_counter() - start_time,
        )

    branches = engine.successors(state)
    logger.info("Distributing %d root branches over %d workers", len(branches), workers)

    result = 0
    with Pool(processes=workers, initializer=_worker_init, initargs=(max_depth, use_cache)) as pool:
        for branch_result in pool.imap_unordered(_worker_compute, branches):
            result = (result + branch_result) % RESULT_MOD

    duration = time.perf_counter() - start_time
    logger.info("Parallel search finished in %.2fs", duration)

    return ParallelResult(
        result=result,
        branches=len(branches),
        workers=workers,
        duration_seconds=duration,
    )
