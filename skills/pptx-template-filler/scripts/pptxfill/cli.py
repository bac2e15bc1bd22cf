"""CLI orchestration for the template deck generator."""

from __future__ import annotations

import argparse
import logging
import os
import random
import traceback
from pathlib import Path
from typing import Optional, Sequence

from .api import generate_from_files
from .errors import OutlineValidationError

SEED_ENV_VAR = "PPTXFILL_SEED"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fill a PPTX template from a JSON outline")
    parser.add_argument("--template", required=True, help="Path to the .pptx template")
    parser.add_argument("--outline", required=True, help="Path to the JSON outline file")
    parser.add_argument(
        "--output",
        default=None,
        help="Output PPTX file path (default: <template dir>/output/<stem>_modified_<timestamp>.pptx)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help=f"Seed for template selection (default: ${SEED_ENV_VAR}, else random)",
    )
    parser.add_argument("--verbose", action="store_true", help="Log generation progress to stderr")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log every placeholder replacement and show full traceback for unexpected errors",
    )
    return parser


def _configure_logging(*, verbose: bool, debug: bool) -> None:
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _resolve_seed(seed: Optional[int]) -> Optional[int]:
    if seed is not None:
        return seed
    raw = os.environ.get(SEED_ENV_VAR, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise SystemExit(f"{SEED_ENV_VAR} must be an integer, got {raw!r}") from exc


def run_cli(argv: Optional[Sequence[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(verbose=args.verbose, debug=args.debug)

    seed = _resolve_seed(args.seed)
    rng = random.Random(seed) if seed is not None else None

    try:
        saved = generate_from_files(
            Path(args.template).resolve(),
            Path(args.outline).resolve(),
            Path(args.output).resolve() if args.output else None,
            rng=rng,
        )
    except OutlineValidationError as e:
        raise SystemExit(str(e)) from e
    except Exception as e:
        if args.debug:
            traceback.print_exc()
        raise SystemExit(f"Deck generation failed: {e}") from e

    print(saved)


def main() -> None:
    run_cli()
