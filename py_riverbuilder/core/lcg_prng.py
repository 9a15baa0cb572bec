"""
Linear congruential PRNG used by the smoothed-noise variability function.

The constants (modulus 2^32, multiplier 1664525, increment 1) match the
RiverBuilder noise stream, so a run with a given seed yields the same noise
curves.
"""

import random
from typing import Optional

MODULUS = 4294967296  # 2^32
MULTIPLIER = 1664525
INCREMENT = 1


class LCGPRNG:
    """
    Linear congruential generator with centred output.

    Each call to random() advances the state and returns a value in
    [-0.5, 0.5).
    """

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize with an integer seed.

        Args:
            seed: Starting state. A fresh seed is drawn when omitted.
        """
        if seed is None:
            seed = random.getrandbits(32)
        self.seed = int(seed) % MODULUS
        self.state = self.seed
        self.call_count = 0

    def random(self) -> float:
        """Advance the state and return the next value in [-0.5, 0.5)."""
        self.call_count += 1
        self.state = (MULTIPLIER * self.state + INCREMENT) % MODULUS
        return self.state / MODULUS - 0.5
