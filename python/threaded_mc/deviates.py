import numpy as np


class DeviateStream:
    """A private stream of uniform [0,1] deviates owned by one worker."""

    def draw(self):
        raise NotImplementedError

    def draw_batch(self, n):
        return np.fromiter((self.draw() for _ in range(n)), dtype=np.float64, count=n)


class MersenneStream(DeviateStream):
    def __init__(self, seed):
        self.rng = np.random.Generator(np.random.MT19937(seed))

    def draw(self):
        return float(self.rng.random())

    def draw_batch(self, n):
        # Generator.random releases the GIL for large n
        return self.rng.random(n)


# 32-bit linear congruential generator, Numerical Recipes constants
class LCGStream(DeviateStream):
    def __init__(self, seed):
        self.state = seed & 0xFFFFFFFF

    def draw(self):
        self.state = (self.state * 1664525 + 1013904223) & 0xFFFFFFFF
        return (self.state & 0x7FFFFFFF) / 0x7FFFFFFF


GENERATORS = {
    "mt19937": MersenneStream,
    "lcg": LCGStream,
}


def seed(value, kind="mt19937"):
    try:
        factory = GENERATORS[kind]
    except KeyError:
        raise ValueError(f"Unknown generator: {kind}") from None
    return factory(value)


def uniform_trial(stream, n):
    return stream.draw_batch(n)


def quarter_circle_trial(stream, n):
    # 4 * P(x^2 + y^2 <= 1) == pi
    x = stream.draw_batch(n)
    y = stream.draw_batch(n)
    return 4.0 * (x * x + y * y <= 1.0)


TRIALS = {
    "uniform": uniform_trial,
    "pi": quarter_circle_trial,
}
