from __future__ import annotations

import secrets

from ..errors import EntropySourceUnavailable
from .base import MAX_ENTROPY_BITS, MIN_ENTROPY_BITS, EntropySource


class SystemEntropySource(EntropySource):
    """Draw bits from the operating system CSPRNG via :mod:`secrets`."""

    def __init__(self, bits: int = MIN_ENTROPY_BITS) -> None:
        if not MIN_ENTROPY_BITS <= bits <= MAX_ENTROPY_BITS:
            raise ValueError(
                f"entropy width must be between {MIN_ENTROPY_BITS} and {MAX_ENTROPY_BITS} bits"
            )
        self._bits = bits

    @property
    def bits(self) -> int:
        return self._bits

    def next_value(self) -> int:
        try:
            return secrets.randbits(self._bits)
        except (OSError, NotImplementedError) as exc:
            raise EntropySourceUnavailable("System random source unavailable") from exc
