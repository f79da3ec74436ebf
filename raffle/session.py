from __future__ import annotations

import logging
import threading
from typing import FrozenSet, Iterable, List, Optional, Tuple

from .engine import DrawEngine
from .errors import NothingToDraw
from .types import DrawRequest, RoundState


class DrawSession:
    """Caller-owned history of the numbers drawn in one round."""

    def __init__(self) -> None:
        self._history: List[int] = []
        self._seen: set[int] = set()
        self._current: Tuple[int, ...] = ()

    @property
    def history(self) -> Tuple[int, ...]:
        return tuple(self._history)

    @property
    def current_draw(self) -> Tuple[int, ...]:
        """Numbers returned by the most recent batch."""
        return self._current

    @property
    def excluded(self) -> FrozenSet[int]:
        return frozenset(self._seen)

    def __len__(self) -> int:
        return len(self._history)

    def record(self, batch: Iterable[int]) -> None:
        numbers = tuple(batch)
        if len(set(numbers)) != len(numbers):
            raise ValueError("batch contains duplicate numbers")
        repeated = self._seen.intersection(numbers)
        if repeated:
            raise ValueError(f"numbers already drawn this session: {sorted(repeated)}")
        self._history.extend(numbers)
        self._seen.update(numbers)
        self._current = numbers

    def reset(self) -> None:
        self._history.clear()
        self._seen.clear()
        self._current = ()


class RaffleRound:
    """One round of draws, serializing engine calls against its session."""

    def __init__(
        self,
        request: DrawRequest,
        engine: Optional[DrawEngine] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._request = request
        self._engine = engine or DrawEngine()
        self._session = DrawSession()
        self._state = RoundState.IDLE
        self._lock = threading.Lock()
        self._logger = logger or logging.getLogger("raffle.round")

    @property
    def request(self) -> DrawRequest:
        return self._request

    @property
    def session(self) -> DrawSession:
        return self._session

    @property
    def state(self) -> RoundState:
        return self._state

    @property
    def remaining(self) -> int:
        return max(self._request.quantity - len(self._session), 0)

    @property
    def is_finished(self) -> bool:
        return self._state == RoundState.COMPLETE

    def start(self) -> None:
        """Validate the request and open a fresh session."""
        self._engine.validate(self._request)
        with self._lock:
            self._session.reset()
            self._state = RoundState.AWAITING_DRAW
        spec = self._request.range
        self._logger.info(
            "Round started: %s number(s) from [%s, %s], all_at_once=%s",
            self._request.quantity,
            spec.min,
            spec.max,
            self._request.all_at_once,
        )

    def draw(self) -> Tuple[int, ...]:
        with self._lock:
            if self._state == RoundState.IDLE:
                raise RuntimeError("Round has not been started")
            if self._state == RoundState.COMPLETE:
                raise NothingToDraw("Round already complete; reset to draw again")

            batch = self._engine.draw_batch(self._request, self._session.excluded)
            self._session.record(batch)
            if len(self._session) >= self._request.quantity:
                self._state = RoundState.COMPLETE
                self._logger.info("Round complete: %s", list(self._session.history))
            else:
                self._state = RoundState.PARTIAL
            return batch

    def draw_all(self) -> Tuple[int, ...]:
        """Keep drawing until the round completes and return the full history."""
        while not self.is_finished:
            self.draw()
        return self._session.history

    def reset(self) -> None:
        with self._lock:
            self._session.reset()
            self._state = RoundState.IDLE
