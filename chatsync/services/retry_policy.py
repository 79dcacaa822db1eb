"""
Exponential backoff with jitter, kept free of I/O so timing is unit-testable.

delay(attempt) = base * 2**attempt + base * U[0, 1)

With base = 1s that is 1-2s, 2-3s, 4-5s, 8-9s for attempts 0..3. Because the
jitter is strictly below one base unit, delays strictly increase with the
attempt number whatever the random draws are.
"""

import random
from dataclasses import dataclass
from typing import Optional


def next_delay(attempt: int, rng: Optional[random.Random] = None, base: float = 1.0) -> float:
    """Seconds to wait after the given (0-based) failed attempt."""
    if attempt < 0:
        raise ValueError("attempt must be >= 0")
    jitter = (rng or random).random()
    return base * (2 ** attempt) + base * jitter


@dataclass(frozen=True)
class BackoffPolicy:
    max_attempts: int = 5
    base: float = 1.0

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")

    def delay(self, attempt: int, rng: Optional[random.Random] = None) -> float:
        return next_delay(attempt, rng, self.base)
