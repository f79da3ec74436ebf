from __future__ import annotations

import os
import pathlib
from dataclasses import dataclass, field, replace
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

from .engine import DEFAULT_MAX_ATTEMPTS, SAMPLING_REJECTION, SAMPLING_STRATEGIES
from .entropy import MIN_ENTROPY_BITS
from .types import DrawRequest


def _bool_from_env(key: str, default: bool = False) -> bool:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Invalid boolean for {key}: {value!r}")


def _int_from_env(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"Invalid integer for {key}: {value!r}") from exc


def _attempts_from_env(key: str, default: Optional[int]) -> Optional[int]:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    if value.strip().lower() == "auto":
        return None
    attempts = _int_from_env(key, 0)
    if attempts <= 0:
        raise ValueError(f"{key} must be positive or 'auto'")
    return attempts


@dataclass(frozen=True)
class EngineSettings:
    entropy_bits: int = MIN_ENTROPY_BITS
    max_attempts: Optional[int] = DEFAULT_MAX_ATTEMPTS
    sampling: str = SAMPLING_REJECTION


@dataclass(frozen=True)
class RaffleSettings:
    min_value: int = 1
    max_value: int = 100
    quantity: int = 1
    all_at_once: bool = False
    engine: EngineSettings = field(default_factory=EngineSettings)

    def copy(self, **updates) -> "RaffleSettings":
        return replace(self, **updates)

    def to_request(self) -> DrawRequest:
        return DrawRequest.of(self.min_value, self.max_value, self.quantity, self.all_at_once)


def load_from_environment() -> RaffleSettings:
    sampling = os.getenv("RAFFLE_SAMPLING", SAMPLING_REJECTION).strip().lower()
    if sampling not in SAMPLING_STRATEGIES:
        raise ValueError(f"Invalid RAFFLE_SAMPLING: {sampling!r}")

    engine = EngineSettings(
        entropy_bits=_int_from_env("RAFFLE_ENTROPY_BITS", MIN_ENTROPY_BITS),
        max_attempts=_attempts_from_env("RAFFLE_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS),
        sampling=sampling,
    )

    return RaffleSettings(
        min_value=_int_from_env("RAFFLE_MIN", 1),
        max_value=_int_from_env("RAFFLE_MAX", 100),
        quantity=_int_from_env("RAFFLE_QUANTITY", 1),
        all_at_once=_bool_from_env("RAFFLE_ALL_AT_ONCE", False),
        engine=engine,
    )


@lru_cache(maxsize=1)
def load_config(dotenv_path: Optional[str] = None) -> RaffleSettings:
    if dotenv_path:
        load_dotenv(dotenv_path)
    else:
        default_path = pathlib.Path(".env")
        if default_path.exists():
            load_dotenv(default_path)
    return load_from_environment()
