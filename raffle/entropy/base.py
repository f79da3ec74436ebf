from __future__ import annotations

import abc

MIN_ENTROPY_BITS = 32
# Values are normalised through a double, whose mantissa holds 53 bits.
MAX_ENTROPY_BITS = 53


class EntropySource(abc.ABC):
    """Abstract provider of uniformly distributed unsigned integers."""

    @property
    @abc.abstractmethod
    def bits(self) -> int:
        """Width N of each value; values lie in ``[0, 2**N)``."""

    @abc.abstractmethod
    def next_value(self) -> int:
        """Return one unbiased unsigned ``bits``-wide integer.

        Implementations should raise
        :class:`raffle.errors.EntropySourceUnavailable` when the underlying
        facility cannot supply randomness.
        """
