import random

import pytest

from chatsync.services.retry_policy import BackoffPolicy, next_delay


class TestNextDelay:
    @pytest.mark.parametrize("attempt", [0, 1, 2, 3])
    def test_within_jitter_window(self, attempt):
        delay = next_delay(attempt, random.Random(attempt))

        assert 2**attempt <= delay < 2**attempt + 1

    def test_strictly_increasing_for_fixed_rng(self):
        rng = random.Random(42)
        delays = [next_delay(n, rng) for n in range(4)]

        assert delays == sorted(delays)
        assert len(set(delays)) == 4

    def test_base_scales_delay(self):
        class Zero(random.Random):
            def random(self):
                return 0.0

        assert next_delay(3, Zero(), base=0.5) == 4.0

    def test_negative_attempt_rejected(self):
        with pytest.raises(ValueError):
            next_delay(-1)


class TestBackoffPolicy:
    def test_delay_uses_base(self):
        class Half(random.Random):
            def random(self):
                return 0.5

        assert BackoffPolicy(base=2.0).delay(1, Half()) == 5.0

    def test_max_attempts_must_be_positive(self):
        with pytest.raises(ValueError):
            BackoffPolicy(max_attempts=0)
