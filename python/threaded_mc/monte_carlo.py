import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial

import numpy as np

from threaded_mc import deviates
from threaded_mc.accumulator import GlobalAccumulator
from threaded_mc.convergence import RelativeErrorPolicy
from threaded_mc.seeds import SeedMint

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    pass


@dataclass(frozen=True)
class RunParameters:
    relative_tolerance: float = 1e-2
    max_trials: int = 1_000_000
    batch_size: int = 500

    def validate(self):
        if not self.relative_tolerance > 0:
            raise ConfigurationError("rtol must be positive")
        if self.max_trials < 1:
            raise ConfigurationError("maxtrials must be positive")
        if self.batch_size < 1:
            raise ConfigurationError("nbatch must be positive")
        return self


@dataclass(frozen=True)
class MonteCarloResult:
    mean: float
    variance: float
    standard_error: float
    ntrials: int
    elapsed: float
    workers: int
    batches: tuple
    params: RunParameters


def available_workers():
    """CPUs this process may run on, falling back to the machine count."""
    if hasattr(os, "process_cpu_count"):
        return os.process_cpu_count() or 1
    if hasattr(os, "sched_getaffinity"):
        return len(os.sched_getaffinity(0)) or 1
    return os.cpu_count() or 1


def monte_carlo_worker(stream, accumulator, batch_size, trial=deviates.uniform_trial):
    """Run batches until a commit reports the run is done; return the batch count."""
    batches = 0
    done = False
    while not done:
        outcomes = trial(stream, batch_size)
        local_sum = float(np.sum(outcomes))
        local_sum2 = float(np.dot(outcomes, outcomes))
        done = accumulator.commit(local_sum, local_sum2, batch_size)
        batches += 1
    logger.debug("Worker stopped after %d batches", batches)
    return batches


def monte_carlo_operation(params, workers=None, generator="mt19937", trial=deviates.uniform_trial,
                          stream_factory=None, mint=None, policy=None):
    params.validate()
    num_workers = workers if workers is not None else available_workers()
    if num_workers < 1:
        raise ConfigurationError("workers must be positive")

    if stream_factory is None:
        stream_factory = partial(deviates.seed, kind=generator)
    if mint is None:
        mint = SeedMint()
    if policy is None:
        policy = RelativeErrorPolicy(params.relative_tolerance, params.max_trials)

    streams = [stream_factory(s) for s in mint.mint(num_workers)]
    accumulator = GlobalAccumulator(policy)

    start_time = time.time()
    with ThreadPoolExecutor(max_workers=num_workers) as executor:
        futures = [
            executor.submit(monte_carlo_worker, stream, accumulator, params.batch_size, trial)
            for stream in streams
        ]
        batches = tuple(future.result() for future in futures)
    elapsed = time.time() - start_time

    total = accumulator.snapshot()
    logger.info("Run finished: %d trials over %d batches on %d workers in %.3fs",
                total.ntrials, sum(batches), num_workers, elapsed)

    return MonteCarloResult(
        mean=total.mean,
        variance=total.variance,
        standard_error=total.standard_error,
        ntrials=total.ntrials,
        elapsed=elapsed,
        workers=num_workers,
        batches=batches,
        params=params,
    )
