"""Test aggregate merging and the locked commit protocol."""
import itertools
import threading

import pytest

from threaded_mc.accumulator import Aggregate, GlobalAccumulator, merge
from threaded_mc.convergence import FixedCountPolicy


CONTRIBUTIONS = [
    (0.1, 0.01, 5),
    (1e8, 1e16, 5),
    (3.3, 2.2, 5),
    (-1e8, 1e16, 5),
    (0.7, 0.49, 5),
]


class TestMerge:

    def test_merge_adds_fields(self):
        total = merge(Aggregate(1.0, 2.0, 5), 3.0, 4.0, 5)
        assert total == Aggregate(4.0, 6.0, 10)

    def test_merge_order_independent(self):
        """Any merge order yields the same count and sums up to rounding."""
        reference = Aggregate()
        for contribution in CONTRIBUTIONS:
            reference = merge(reference, *contribution)

        for order in itertools.permutations(CONTRIBUTIONS):
            total = Aggregate()
            for contribution in order:
                total = merge(total, *contribution)
            assert total.ntrials == reference.ntrials == 25
            assert total.sum_X == pytest.approx(reference.sum_X, abs=1e-6)
            assert total.sum_X2 == pytest.approx(reference.sum_X2, rel=1e-12)

    def test_derived_statistics(self):
        total = Aggregate(2.0, 2.0, 5)
        assert total.mean == pytest.approx(0.4)
        assert total.variance == pytest.approx(0.24)
        assert total.standard_error == pytest.approx((0.24 / 5) ** 0.5)

    def test_variance_clamped_at_zero(self):
        # constant 0.1 samples can round to a slightly negative raw variance
        total = Aggregate(0.1 * 3, 0.01 * 3, 3)
        assert total.variance >= 0.0
        assert total.standard_error >= 0.0


class TestGlobalAccumulator:

    def test_commit_sets_flag_after_post_merge_check(self):
        acc = GlobalAccumulator(FixedCountPolicy(10))
        assert not acc.commit(1.0, 1.0, 5)
        assert not acc.done
        assert acc.commit(1.0, 1.0, 5)
        assert acc.done
        assert acc.snapshot() == Aggregate(2.0, 2.0, 10)

    def test_pre_merge_check(self):
        """An aggregate already satisfying the policy stops the committer."""
        acc = GlobalAccumulator(lambda aggregate: aggregate.ntrials == 0)
        assert acc.commit(1.0, 1.0, 5)
        assert acc.snapshot().ntrials == 5

    def test_flag_never_resets(self):
        answers = iter([False, True, False, False, False, False])
        acc = GlobalAccumulator(lambda aggregate: next(answers))
        assert acc.commit(1.0, 1.0, 1)
        assert acc.commit(1.0, 1.0, 1)
        assert acc.done

    def test_commit_still_merges_when_done(self):
        acc = GlobalAccumulator(FixedCountPolicy(0))
        acc.commit(1.0, 1.0, 5)
        acc.commit(1.0, 1.0, 5)
        assert acc.snapshot().ntrials == 10
        assert acc.batches == 2

    def test_concurrent_commits_are_serialised(self):
        acc = GlobalAccumulator(FixedCountPolicy(10 ** 9))
        threads_count, commits, batch = 8, 500, 3

        def commit_many():
            for _ in range(commits):
                acc.commit(1.0, 2.0, batch)

        threads = [threading.Thread(target=commit_many) for _ in range(threads_count)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        total = acc.snapshot()
        assert total.ntrials == threads_count * commits * batch
        assert total.sum_X == threads_count * commits
        assert total.sum_X2 == 2 * threads_count * commits
        assert acc.batches == threads_count * commits
