from __future__ import annotations


class DrawError(Exception):
    """Base class for every failure raised by the draw engine."""


class ValidationError(DrawError, ValueError):
    """Configuration problem detected before any number is drawn."""


class InvalidRange(ValidationError):
    pass


class InvalidQuantity(ValidationError):
    pass


class EntropySourceUnavailable(DrawError, RuntimeError):
    """The secure random source failed; the draw must be aborted."""


class DrawExhausted(DrawError, RuntimeError):
    """The attempt ceiling tripped before enough unique values were found."""

    def __init__(self, attempts: int, drawn: int, needed: int) -> None:
        super().__init__(
            f"Gave up after {attempts} attempts with {drawn}/{needed} unique numbers drawn"
        )
        self.attempts = attempts
        self.drawn = drawn
        self.needed = needed


class NothingToDraw(DrawError):
    """Requested quantity already reached; the round is complete."""
