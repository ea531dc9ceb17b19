#!/usr/bin/env python3
"""CLI entrypoint for the trading schedule evaluator.

Usage::

    python run_evaluation.py
    python run_evaluation.py --scenario data.in --submission data.out --variant strict
    python run_evaluation.py --scenario data.in --submission data.out --config config/strict.yaml

The scenario is loaded once, then the submission is replayed against it. The
result is printed as a single line on stdout, either ``Final score: <score>``
or ``Line <n>: <reason>``. The exit code is 0 on success, 1 when the submission
is rejected and 2 when an input file cannot be read.
"""

from __future__ import annotations

import argparse
import logging
import sys

from pydantic import TypeAdapter

from models.config import EvaluationConfig
from models.result import EvaluationResult, EvaluationSuccess
from replay.replayer import evaluate
from replay.scenario_loader import load_scenario

EXIT_OK = 0
EXIT_REJECTED = 1
EXIT_INPUT_ERROR = 2

_RESULT_ADAPTER = TypeAdapter(EvaluationResult)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Validate and score a trading schedule against a market scenario.",
    )
    parser.add_argument(
        "--scenario",
        default="data.in",
        type=str,
        help="Path to the scenario file (default: data.in).",
    )
    parser.add_argument(
        "--submission",
        default="data.out",
        type=str,
        help="Path to the submission file (default: data.out).",
    )
    parser.add_argument(
        "--variant",
        default="base",
        choices=["base", "strict"],
        help="Named evaluation profile (default: base). Ignored when --config is given.",
    )
    parser.add_argument(
        "--config",
        default=None,
        type=str,
        help="Path to a YAML evaluation config; overrides --variant.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full result as JSON instead of a single line.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING).",
    )
    return parser.parse_args(argv)


def _setup_logging(level: str) -> None:
    """Configure root logger; stdout is reserved for the result."""
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    _setup_logging(args.log_level)

    logger = logging.getLogger(__name__)

    try:
        if args.config is not None:
            logger.info("Loading config from '%s'...", args.config)
            config = EvaluationConfig.from_yaml(args.config)
        else:
            config = EvaluationConfig.for_variant(args.variant)
        scenario = load_scenario(args.scenario)
        result = evaluate(scenario, args.submission, config)
    except (OSError, ValueError) as exc:
        logger.error("Cannot evaluate: %s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    if args.json:
        print(_RESULT_ADAPTER.dump_json(result, indent=2).decode("utf-8"))
    else:
        print(result.message)

    return EXIT_OK if isinstance(result, EvaluationSuccess) else EXIT_REJECTED


if __name__ == "__main__":
    sys.exit(main())
