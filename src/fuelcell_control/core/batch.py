"""
Batch Evaluation

Runs a population of candidate configurations against one set of
simulation parameters, as an external optimizer does when scoring a
generation.

Features:
- Parallel execution (process pool by default, thread pool optional)
- Error isolation (an invalid candidate does not stop the batch)
- Progress tracking through a callback
- Optional caller-owned ResultCache for seeded, reproducible runs
"""

import logging
import time
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from fuelcell_control.config.models import (
    ControlParameters,
    FuelCellConfiguration,
    SimulationParameters,
)
from fuelcell_control.core.error_handling import coerce_model
from fuelcell_control.core.exceptions import ConfigurationError, ParameterError, is_recoverable
from fuelcell_control.core.simulation import SimulationResult, simulate_control_system
from fuelcell_control.utils.result_cache import ResultCache, make_cache_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Candidate:
    """One configuration/tuning pair to evaluate."""

    config: Union[FuelCellConfiguration, Dict[str, Any]]
    control: Union[ControlParameters, Dict[str, Any]]


@dataclass
class CandidateResult:
    """
    Outcome of one candidate.

    Attributes:
        index: Position of the candidate in the submitted population
        result: Simulation result, None when the run failed
        error: Failure message, None on success
        cached: True when the result came from the cache
    """

    index: int
    result: Optional[SimulationResult] = None
    error: Optional[str] = None
    cached: bool = False

    @property
    def succeeded(self) -> bool:
        return self.result is not None


@dataclass
class BatchResult:
    """
    Result of a batch evaluation, ordered like the submitted population.

    Attributes:
        candidates: Per-candidate outcomes
        successful_count: Number of successful runs
        failed_count: Number of failed runs
        cached_count: Number of results served from the cache
        batch_duration_seconds: Total wall time
    """

    candidates: List[CandidateResult]
    batch_duration_seconds: float = 0.0
    successful_count: int = 0
    failed_count: int = 0
    cached_count: int = 0

    def __post_init__(self):
        self.successful_count = sum(1 for c in self.candidates if c.succeeded)
        self.failed_count = len(self.candidates) - self.successful_count
        self.cached_count = sum(1 for c in self.candidates if c.cached)

    def fitness(self) -> List[Optional[Dict[str, float]]]:
        """Headline metrics per candidate (None for failed candidates)."""
        scores: List[Optional[Dict[str, float]]] = []
        for candidate in self.candidates:
            if candidate.result is None:
                scores.append(None)
                continue
            perf = candidate.result.performance
            scores.append(
                {
                    "average_power": perf.average_power,
                    "average_efficiency": perf.average_efficiency,
                    "stability_index": perf.stability_index,
                    "response_time": perf.response_time,
                }
            )
        return scores

    def get_errors(self) -> List[Tuple[int, str]]:
        return [(c.index, c.error) for c in self.candidates if c.error is not None]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_candidates": len(self.candidates),
            "successful_count": self.successful_count,
            "failed_count": self.failed_count,
            "cached_count": self.cached_count,
            "batch_duration_seconds": self.batch_duration_seconds,
        }


def _evaluate(
    index: int,
    candidate: Candidate,
    sim_params: SimulationParameters,
    continue_on_error: bool,
) -> CandidateResult:
    """Worker entry point; module level so process pools can pickle it."""
    try:
        result = simulate_control_system(candidate.config, candidate.control, sim_params)
    except Exception as e:
        if not (is_recoverable(e) or continue_on_error):
            raise
        logger.warning(f"Candidate {index} failed: {e}")
        return CandidateResult(index=index, error=str(e))
    return CandidateResult(index=index, result=result)


class BatchEvaluator:
    """
    Evaluates candidate populations in parallel.

    Args:
        max_workers: Max parallel workers (defaults to CPU count)
        use_processes: Use a process pool (True) or a thread pool (False)
        cache: Optional caller-owned cache; only consulted for seeded runs
    """

    def __init__(
        self,
        max_workers: Optional[int] = None,
        use_processes: bool = True,
        cache: Optional[ResultCache] = None,
    ):
        self.max_workers = max_workers
        self.use_processes = use_processes
        self.cache = cache

    def _executor(self) -> Executor:
        if self.use_processes:
            return ProcessPoolExecutor(max_workers=self.max_workers)
        return ThreadPoolExecutor(max_workers=self.max_workers)

    def _cache_key(self, candidate: Candidate, sim_params: SimulationParameters) -> Optional[str]:
        if self.cache is None or sim_params.seed is None:
            return None
        # Key on validated models so equivalent spellings of a candidate share an entry
        try:
            config = coerce_model(FuelCellConfiguration, candidate.config, ConfigurationError)
            control = coerce_model(ControlParameters, candidate.control, ConfigurationError)
        except ConfigurationError:
            return None
        return make_cache_key(config, control, sim_params)

    def evaluate(
        self,
        candidates: Sequence[Candidate],
        sim_params: Union[SimulationParameters, Dict[str, Any]],
        progress_callback: Optional[Callable[[int, int], None]] = None,
        continue_on_error: bool = True,
    ) -> BatchResult:
        """
        Simulate every candidate.

        Args:
            candidates: Population to evaluate
            sim_params: Shared simulation parameters
            progress_callback: Optional callback function(completed, total)
            continue_on_error: Also isolate unexpected errors, not only
                invalid candidates

        Returns:
            BatchResult ordered like ``candidates``

        Raises:
            ParameterError: If the shared simulation parameters are invalid
        """
        params = coerce_model(SimulationParameters, sim_params, ParameterError)
        start = time.perf_counter()
        total = len(candidates)
        outcomes: Dict[int, CandidateResult] = {}
        keys: Dict[int, str] = {}
        completed = 0

        logger.info(f"Starting batch evaluation: {total} candidates")

        pending: List[int] = []
        for index, candidate in enumerate(candidates):
            key = self._cache_key(candidate, params)
            cached = self.cache.get(key) if key is not None else None
            if cached is not None:
                outcomes[index] = CandidateResult(index=index, result=cached, cached=True)
                completed += 1
                if progress_callback:
                    progress_callback(completed, total)
                continue
            if key is not None:
                keys[index] = key
            pending.append(index)

        if pending:
            with self._executor() as executor:
                future_to_index = {
                    executor.submit(
                        _evaluate, index, candidates[index], params, continue_on_error
                    ): index
                    for index in pending
                }
                for future in as_completed(future_to_index):
                    outcome = future.result()
                    outcomes[outcome.index] = outcome
                    if outcome.result is not None and outcome.index in keys:
                        self.cache.put(keys[outcome.index], outcome.result)
                    completed += 1
                    if progress_callback:
                        progress_callback(completed, total)

        duration = time.perf_counter() - start
        batch = BatchResult(
            candidates=[outcomes[i] for i in range(total)],
            batch_duration_seconds=duration,
        )
        logger.info(
            f"Batch evaluation completed: {batch.successful_count}/{total} succeeded "
            f"in {duration:.2f}s ({batch.cached_count} cached)"
        )
        return batch
