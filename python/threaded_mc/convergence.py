def is_converged(sum_X, sum_X2, ntrials, relative_tolerance, max_trials):
    """True once the relative 1-sigma error is below tolerance or the cap is passed.

    A zero mean (or no trials yet) never satisfies the relative-error test,
    so such runs stop only on the trial cap.
    """
    if ntrials > max_trials:
        return True
    if ntrials <= 0:
        return False
    mean = sum_X / ntrials
    if mean == 0:
        return False
    mean_of_squares = sum_X2 / ntrials
    variance = mean_of_squares - mean * mean
    return variance / (mean * mean) / ntrials < relative_tolerance * relative_tolerance


class ConvergencePolicy:
    """Decides from an aggregate snapshot whether the run may stop."""

    def __call__(self, aggregate):
        raise NotImplementedError


class RelativeErrorPolicy(ConvergencePolicy):
    def __init__(self, relative_tolerance, max_trials):
        self.relative_tolerance = relative_tolerance
        self.max_trials = max_trials

    def __call__(self, aggregate):
        return is_converged(aggregate.sum_X, aggregate.sum_X2, aggregate.ntrials,
                            self.relative_tolerance, self.max_trials)


class FixedCountPolicy(ConvergencePolicy):
    def __init__(self, trials):
        self.trials = trials

    def __call__(self, aggregate):
        return aggregate.ntrials >= self.trials


class AnyPolicy(ConvergencePolicy):
    def __init__(self, *policies):
        if not policies:
            raise ValueError("AnyPolicy needs at least one policy")
        self.policies = policies

    def __call__(self, aggregate):
        return any(policy(aggregate) for policy in self.policies)
