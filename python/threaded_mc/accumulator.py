import math
import threading
from dataclasses import dataclass


@dataclass(frozen=True)
class Aggregate:
    sum_X: float = 0.0
    sum_X2: float = 0.0
    ntrials: int = 0

    @property
    def mean(self):
        return self.sum_X / self.ntrials

    @property
    def variance(self):
        mean = self.mean
        return max(self.sum_X2 / self.ntrials - mean * mean, 0.0)

    @property
    def standard_error(self):
        return math.sqrt(self.variance / self.ntrials)


def merge(aggregate, local_sum, local_sum2, batch_size):
    return Aggregate(
        sum_X=aggregate.sum_X + local_sum,
        sum_X2=aggregate.sum_X2 + local_sum2,
        ntrials=aggregate.ntrials + batch_size,
    )


class GlobalAccumulator:
    """Shared running totals plus the termination flag, behind one lock."""

    def __init__(self, policy):
        self.policy = policy
        self._lock = threading.Lock()
        self._aggregate = Aggregate()
        self._done = False
        self.batches = 0

    def commit(self, local_sum, local_sum2, batch_size):
        """Merge one batch and return whether the run should stop."""
        with self._lock:
            # Pre-merge check catches an aggregate that already converged
            done = self._done or self.policy(self._aggregate)
            self._aggregate = merge(self._aggregate, local_sum, local_sum2, batch_size)
            self.batches += 1
            done = done or self.policy(self._aggregate)
            if done:
                self._done = True
            return self._done

    @property
    def done(self):
        return self._done

    def snapshot(self):
        with self._lock:
            return self._aggregate
