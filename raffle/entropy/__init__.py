from .base import MAX_ENTROPY_BITS, MIN_ENTROPY_BITS, EntropySource
from .system import SystemEntropySource

__all__ = [
    "MAX_ENTROPY_BITS",
    "MIN_ENTROPY_BITS",
    "EntropySource",
    "SystemEntropySource",
]
