"""
Client transaction ID generation.
"""

import itertools
import random
import time
from typing import Callable, Optional


class TransactionIDGenerator:
    """
    Generates client transaction IDs (clTRID).

    IDs combine the clock reading, a per-generator sequence number and a
    random suffix, so they are unique within one process for correlation
    purposes. Pass a fixed clock and a seeded random source to get a
    reproducible sequence.

    Example:
        gen = TransactionIDGenerator(clock=lambda: 1700000000, rng=random.Random(1))
        gen()  # "epp-at-1700000000-000001-XXXX"
    """

    def __init__(
        self,
        prefix: str = "epp-at",
        clock: Callable[[], float] = time.time,
        rng: Optional[random.Random] = None,
    ):
        self.prefix = prefix
        self._clock = clock
        self._rng = rng or random.SystemRandom()
        self._sequence = itertools.count(1)

    def __call__(self) -> str:
        """Return a fresh transaction ID."""
        seconds = int(self._clock())
        seq = next(self._sequence)
        suffix = self._rng.randrange(0x10000)
        return f"{self.prefix}-{seconds}-{seq:06d}-{suffix:04X}"
