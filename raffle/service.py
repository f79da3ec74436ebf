from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from typing import List, Optional, Tuple

from .config import RaffleSettings, load_config
from .engine import SAMPLING_STRATEGIES, DrawEngine
from .entropy import SystemEntropySource
from .errors import DrawError, NothingToDraw
from .session import RaffleRound


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )


def build_engine(settings: RaffleSettings) -> DrawEngine:
    engine_settings = settings.engine
    return DrawEngine(
        SystemEntropySource(engine_settings.entropy_bits),
        max_attempts=engine_settings.max_attempts,
        sampling=engine_settings.sampling,
    )


def apply_overrides(settings: RaffleSettings, args: argparse.Namespace) -> RaffleSettings:
    updates = {}
    if args.min is not None:
        updates["min_value"] = args.min
    if args.max is not None:
        updates["max_value"] = args.max
    if args.quantity is not None:
        updates["quantity"] = args.quantity
    if args.all_at_once:
        updates["all_at_once"] = True
    if args.sampling is not None:
        updates["engine"] = replace(settings.engine, sampling=args.sampling)
    return settings.copy(**updates)


def run(args: argparse.Namespace) -> List[Tuple[int, ...]]:
    settings = apply_overrides(load_config(args.env_file), args)
    configure_logging(args.verbose)
    logger = logging.getLogger("raffle.service")

    raffle_round = RaffleRound(settings.to_request(), build_engine(settings))
    raffle_round.start()

    batches: List[Tuple[int, ...]] = []
    while True:
        try:
            batch = raffle_round.draw()
        except NothingToDraw:
            break
        batches.append(batch)
        print(f"Draw {len(batches)}: {', '.join(str(n) for n in batch)}")

    logger.info("Drawn numbers: %s", list(raffle_round.session.history))
    return batches


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Draw unique random numbers from a range")
    parser.add_argument("--env-file", type=str, default=None, help="Path to .env file with raffle settings")
    parser.add_argument("--min", type=int, default=None, help="Lowest eligible number (inclusive).")
    parser.add_argument("--max", type=int, default=None, help="Highest eligible number (inclusive).")
    parser.add_argument("--quantity", type=int, default=None, help="How many numbers to draw.")
    parser.add_argument(
        "--all-at-once", action="store_true", help="Draw every number in a single batch."
    )
    parser.add_argument(
        "--sampling",
        choices=SAMPLING_STRATEGIES,
        default=None,
        help="Sampling strategy (default from RAFFLE_SAMPLING or 'rejection').",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging (default INFO)."
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    try:
        run(args)
    except ValueError as exc:
        # Covers ValidationError and malformed RAFFLE_* values.
        print(f"Invalid raffle settings: {exc}", file=sys.stderr)
        return 2
    except DrawError as exc:
        logging.getLogger("raffle.service").error("Draw aborted: %s", exc)
        return 1
    except KeyboardInterrupt:
        print("Raffle stopped by user.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
