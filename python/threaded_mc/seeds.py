import logging
import threading

import numpy as np

logger = logging.getLogger(__name__)

SEED_LIMIT = 2 ** 31


class EntropyExhaustedError(RuntimeError):
    pass


def system_entropy():
    """Entropy stream backed by OS randomness; not safe to call concurrently."""
    rng = np.random.default_rng()

    def draw_seed():
        return int(rng.integers(0, SEED_LIMIT))

    return draw_seed


class SeedMint:
    """Hands out one decorrelated seed per worker from a shared entropy stream."""

    def __init__(self, entropy=None):
        self.entropy = entropy if entropy is not None else system_entropy()
        self._lock = threading.Lock()

    def next_seed(self):
        with self._lock:
            try:
                value = self.entropy()
            except Exception as exc:
                raise EntropyExhaustedError(f"Entropy source failed: {exc}") from exc
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value < 0:
            raise EntropyExhaustedError(f"Entropy source returned unusable seed: {value!r}")
        return int(value)

    def mint(self, count):
        seeds = [self.next_seed() for _ in range(count)]
        logger.debug("Minted %d seeds", count)
        return seeds
