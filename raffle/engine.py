from __future__ import annotations

import logging
import math
from typing import AbstractSet, List, Optional, Tuple

from .entropy import MAX_ENTROPY_BITS, MIN_ENTROPY_BITS, EntropySource, SystemEntropySource
from .errors import (
    DrawExhausted,
    EntropySourceUnavailable,
    InvalidQuantity,
    InvalidRange,
    NothingToDraw,
    ValidationError,
)
from .types import DrawRequest

DEFAULT_MAX_ATTEMPTS = 1_000_000
SCALED_ATTEMPT_FACTOR = 64
MIN_SCALED_ATTEMPTS = 1_000

SAMPLING_REJECTION = "rejection"
SAMPLING_POOL = "pool"
SAMPLING_STRATEGIES = (SAMPLING_REJECTION, SAMPLING_POOL)


def scaled_attempt_ceiling(size: int, already_drawn: int, count: int) -> int:
    """Return an attempt budget proportional to the expected rejection work.

    Drawing the ``i``-th new value while ``k`` of ``size`` are taken needs
    ``size / (size - k)`` attempts on average; the ceiling is that sum times
    :data:`SCALED_ATTEMPT_FACTOR`, never below :data:`MIN_SCALED_ATTEMPTS`.
    """
    expected = 0.0
    for offset in range(count):
        free = size - already_drawn - offset
        if free <= 0:
            break
        expected += size / free
    return max(MIN_SCALED_ATTEMPTS, math.ceil(expected * SCALED_ATTEMPT_FACTOR))


class DrawEngine:
    """Stateless engine producing unique, unbiased integers for a round.

    The engine keeps no history of its own. Every call receives the numbers
    already consumed in the session and returns only the new ones, so two
    sessions never interfere. Calls against the *same* session must be
    serialized by the caller.
    """

    def __init__(
        self,
        entropy: Optional[EntropySource] = None,
        *,
        max_attempts: Optional[int] = DEFAULT_MAX_ATTEMPTS,
        sampling: str = SAMPLING_REJECTION,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """Create an engine backed by ``entropy`` or the OS CSPRNG.

        ``max_attempts=None`` scales the ceiling to each request, and
        ``sampling="pool"`` draws without replacement.
        """
        if max_attempts is not None and max_attempts <= 0:
            raise ValueError("max_attempts must be positive")
        if sampling not in SAMPLING_STRATEGIES:
            raise ValueError(f"Unknown sampling strategy '{sampling}'")
        self._entropy = entropy or SystemEntropySource()
        if not MIN_ENTROPY_BITS <= self._entropy.bits <= MAX_ENTROPY_BITS:
            raise ValueError(
                f"entropy source width {self._entropy.bits} outside "
                f"[{MIN_ENTROPY_BITS}, {MAX_ENTROPY_BITS}] bits"
            )
        self._max_attempts = max_attempts
        self._sampling = sampling
        self._logger = logger or logging.getLogger("raffle.engine")

    @property
    def sampling(self) -> str:
        return self._sampling

    @staticmethod
    def validate(request: DrawRequest) -> None:
        """Raise `InvalidRange` or `InvalidQuantity` if ``request`` cannot start a round."""
        spec = request.range
        if spec.max <= spec.min:
            raise InvalidRange(f"max ({spec.max}) must be greater than min ({spec.min})")
        _check_quantity(request)

    @classmethod
    def is_valid(cls, request: DrawRequest) -> bool:
        try:
            cls.validate(request)
        except ValidationError:
            return False
        return True

    @staticmethod
    def count_to_draw(request: DrawRequest, excluded: AbstractSet[int]) -> int:
        remaining = request.quantity - len(excluded)
        if request.all_at_once:
            return remaining
        return 1 if remaining > 0 else 0

    def draw_uniform_int(self, min_value: int, max_value: int) -> int:
        """Return an integer in ``[min_value, max_value]`` without modulo bias.

        The raw value ``v`` is normalised to ``v / 2**N`` in ``[0, 1)`` and
        scaled by the range width, so every output covers an equal share of
        the source's value space up to a residual of ``range / 2**N``.
        """
        if max_value < min_value:
            raise InvalidRange(f"max ({max_value}) must not be below min ({min_value})")
        bits = self._entropy.bits
        try:
            value = self._entropy.next_value()
        except OSError as exc:
            raise EntropySourceUnavailable("Entropy source failed") from exc
        if not 0 <= value < (1 << bits):
            raise EntropySourceUnavailable(
                f"Entropy source returned {value}, outside {bits}-bit range"
            )
        fraction = value / (1 << bits)
        return math.floor(fraction * (max_value - min_value + 1)) + min_value

    def draw_batch(self, request: DrawRequest, excluded: AbstractSet[int]) -> Tuple[int, ...]:
        """Return the next numbers not in ``excluded``, in acceptance order.

        Raises `NothingToDraw` once the session holds ``quantity`` numbers and
        `DrawExhausted` if rejection sampling hits the attempt ceiling; a failed
        call never returns a partial batch.
        """
        spec = request.range
        if spec.size < 1:
            raise InvalidRange(f"max ({spec.max}) must not be below min ({spec.min})")
        _check_quantity(request)

        count = self.count_to_draw(request, excluded)
        if count <= 0:
            raise NothingToDraw(
                f"Quantity {request.quantity} already reached for this session"
            )

        # quantity <= size and count <= quantity - len(excluded), so at least
        # ``count`` unseen values always remain in the range.
        if self._sampling == SAMPLING_POOL:
            batch = self._draw_from_pool(request, excluded, count)
        else:
            batch = self._draw_with_rejection(request, excluded, count)
        return tuple(batch)

    def _draw_with_rejection(
        self,
        request: DrawRequest,
        excluded: AbstractSet[int],
        count: int,
    ) -> List[int]:
        spec = request.range
        ceiling = self._max_attempts
        if ceiling is None:
            taken = sum(1 for value in excluded if value in spec)
            ceiling = scaled_attempt_ceiling(spec.size, taken, count)

        seen = set(excluded)
        accepted: List[int] = []
        attempts = 0
        while len(accepted) < count:
            if attempts >= ceiling:
                self._logger.error(
                    "Draw ceiling of %s attempts hit in [%s, %s] with %s/%s numbers; "
                    "entropy source may be degenerate",
                    ceiling,
                    spec.min,
                    spec.max,
                    len(accepted),
                    count,
                )
                raise DrawExhausted(attempts, len(accepted), count)
            attempts += 1
            candidate = self.draw_uniform_int(spec.min, spec.max)
            if candidate in seen:
                continue
            seen.add(candidate)
            accepted.append(candidate)

        self._logger.debug(
            "Drew %s number(s) in %s attempt(s) from [%s, %s]",
            count,
            attempts,
            spec.min,
            spec.max,
        )
        return accepted

    def _draw_from_pool(
        self,
        request: DrawRequest,
        excluded: AbstractSet[int],
        count: int,
    ) -> List[int]:
        spec = request.range
        pool = [value for value in range(spec.min, spec.max + 1) if value not in excluded]
        accepted: List[int] = []
        for _ in range(count):
            index = self.draw_uniform_int(0, len(pool) - 1)
            # Swap-remove keeps each pick O(1).
            pool[index], pool[-1] = pool[-1], pool[index]
            accepted.append(pool.pop())

        self._logger.debug(
            "Drew %s number(s) from a pool of %s in [%s, %s]",
            count,
            len(pool) + count,
            spec.min,
            spec.max,
        )
        return accepted


def _check_quantity(request: DrawRequest) -> None:
    size = request.range.size
    if request.quantity <= 0:
        raise InvalidQuantity("quantity must be positive")
    if request.quantity > size:
        raise InvalidQuantity(
            f"quantity {request.quantity} exceeds the {size} numbers in the range"
        )


__all__ = [
    "DEFAULT_MAX_ATTEMPTS",
    "DrawEngine",
    "SAMPLING_POOL",
    "SAMPLING_REJECTION",
    "SAMPLING_STRATEGIES",
    "scaled_attempt_ceiling",
]
