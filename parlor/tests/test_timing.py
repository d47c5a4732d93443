"""
Tests for timing, scoring and randomness.
"""

from ..engine_core.random_source import RandomSource
from ..engine_core.timing import ManualClock, guess_points, round_expired, elapsed_seconds, utc_day

START = 1_700_000_000_000


class TestGuessPoints:
    def test_instant_guess(self):
        assert guess_points(START, START, 80) == 150

    def test_at_round_end(self):
        assert guess_points(START, START + 80_000, 80) == 100

    def test_after_round_end(self):
        assert guess_points(START, START + 200_000, 80) == 100

    def test_clock_skew_capped(self):
        assert guess_points(START, START - 5_000, 80) == 150

    def test_rounds_half_up(self):
        # 100 + 50 * 79/80 = 149.375
        assert guess_points(START, START + 1_000, 80) == 149
        # 100 + 50 * 0.75 = 137.5
        assert guess_points(START, START + 20_000, 80) == 138

    def test_monotonically_decreasing(self):
        points = [guess_points(START, START + ms, 80) for ms in range(0, 80_001, 500)]
        assert all(a >= b for a, b in zip(points, points[1:]))
        assert points[0] == 150
        assert points[-1] == 100


class TestRoundClock:
    def test_elapsed_seconds(self):
        assert elapsed_seconds(START, START + 1_500) == 1.5

    def test_round_expired(self):
        assert not round_expired(START, START + 79_999, 80)
        assert round_expired(START, START + 80_000, 80)

    def test_round_not_started(self):
        assert not round_expired(None, START, 80)

    def test_manual_clock(self):
        clock = ManualClock(start_ms=START)
        assert clock.advance(2.5) == START + 2_500
        clock.set(START)
        assert clock.now_ms() == START

    def test_utc_day(self):
        # 2023-11-14T22:13:20Z
        assert utc_day(START) == "2023-11-14"
        assert utc_day(START + 2 * 60 * 60 * 1000) == "2023-11-15"


class TestRandomSource:
    def test_seeded_is_repeatable(self):
        a = RandomSource(seed=7)
        b = RandomSource(seed=7)
        assert a.shuffled(range(20)) == b.shuffled(range(20))
        assert a.token("ABC", 10) == b.token("ABC", 10)

    def test_shuffled_is_permutation(self):
        rng = RandomSource(seed=1)
        assert sorted(rng.shuffled(range(25))) == list(range(25))

    def test_sample_distinct(self):
        rng = RandomSource(seed=3)
        picked = rng.sample(["a", "b", "c", "d"], 3)
        assert len(set(picked)) == 3
