"""
Module: cli

Purpose:
    Command line entry point: generate a batch of abacus exercises and
    print them as display lines or JSON.

Key Functions:
    - build_parser(): argparse parser
    - config_from_args(): RuleConfig from parsed arguments (and config file)
    - main(): Entry point returning a process exit code

Used By:
    - abacus_trainer.__main__: python -m abacus_trainer
    - run_generator.py: Launcher script
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from abacus_trainer import __version__
from abacus_trainer.core.schemas import ConfigValidationError, load_rule_config_file
from abacus_trainer.generator import (
    GeneratorStrategy,
    MultiDigitConfig,
    RuleConfig,
    RuleKind,
    SessionConfig,
    SessionError,
    build_session,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="abacus-trainer",
        description="Generate abacus (soroban) arithmetic exercises",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--rule", "-r",
        choices=[kind.value for kind in RuleKind],
        default=RuleKind.SIMPLE.value,
        help="Rule to train (default: simple)",
    )
    parser.add_argument("--config", "-c", type=Path, help="Rule config JSON file")
    parser.add_argument("--digits", type=int, nargs="+", help="Selected move magnitudes (1-9)")
    parser.add_argument("--min-steps", type=int, help="Minimum steps per example")
    parser.add_argument("--max-steps", type=int, help="Maximum steps per example")
    parser.add_argument("--digit-count", type=int, help="Rods per example (1-9)")
    parser.add_argument("--combine-levels", action="store_true", default=None,
                        help="Allow answers narrower than the digit count")
    direction = parser.add_mutually_exclusive_group()
    direction.add_argument("--only-addition", action="store_true", default=None)
    direction.add_argument("--only-subtraction", action="store_true", default=None)
    parser.add_argument("--target", type=int, choices=[6, 7, 8, 9],
                        help="Bridging target for --rule bridging")
    parser.add_argument("--brothers-digits", type=int, nargs="+",
                        help="Brother magnitudes (1-4) for --rule brothers; 4 trains +1 as +5 -4")
    parser.add_argument(
        "--strategy",
        choices=[strategy.value for strategy in GeneratorStrategy],
        default=GeneratorStrategy.STEPWISE.value,
        help="stepwise (all rods per step) or number (whole numbers per step)",
    )
    parser.add_argument("--variable-widths", action="store_true",
                        help="Number strategy: allow narrower numbers after the first step")
    parser.add_argument("--count", "-n", type=int, default=5, help="Examples to generate")
    parser.add_argument("--seed", type=int, help="Random seed")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of text")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def config_from_args(args: argparse.Namespace) -> RuleConfig:
    """
    Build the rule config: rule defaults, then the config file, then flags.

    Raises:
        ConfigValidationError: If the config file is invalid
        ValueError: If the resulting configuration is invalid
    """
    params: Dict[str, Any] = {}
    if args.config:
        params.update(load_rule_config_file(args.config))

    overrides = {
        "selected_digits": args.digits,
        "min_steps": args.min_steps,
        "max_steps": args.max_steps,
        "digit_count": args.digit_count,
        "combine_levels": args.combine_levels,
        "only_addition": args.only_addition,
        "only_subtraction": args.only_subtraction,
        "brothers_digits": args.brothers_digits,
        "seed": args.seed,
    }
    params.update({key: value for key, value in overrides.items() if value is not None})
    for key in ("selected_digits", "brothers_digits"):
        if key in params:
            params[key] = tuple(params[key])

    kind = RuleKind(args.rule)
    if kind is RuleKind.BRIDGING:
        target = args.target or params.pop("target_number", None)
        if target is None:
            raise ValueError("--rule bridging requires --target or target_number in the config")
        params.pop("target_number", None)
        return RuleConfig.bridging(target, **params)
    if kind is RuleKind.BROTHERS:
        return RuleConfig.brothers(**params)
    return RuleConfig.from_dict(params)


def _print_text(lines: List[str], warnings: List[str]) -> None:
    for index, line in enumerate(lines, start=1):
        print(f"{index:>3}. {line}")
    for warning in warnings:
        print(f"warning: {warning}", file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        rule_config = config_from_args(args)
        multi_digit = None
        if args.strategy == GeneratorStrategy.NUMBER_WISE.value:
            multi_digit = MultiDigitConfig(
                max_digit_count=rule_config.digit_count,
                variable_digit_counts=args.variable_widths,
            )
        session = SessionConfig(
            rule_kind=args.rule,
            rule_config=rule_config,
            count=args.count,
            strategy=args.strategy,
            multi_digit=multi_digit,
        )
        result = build_session(session)
    except ConfigValidationError as e:
        location = f" at {e.path}" if e.path else ""
        logger.error(f"Invalid config{location}: {e}")
        return 1
    except (ValueError, SessionError) as e:
        logger.error(str(e))
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        _print_text(result.display_lines, list(result.warnings))
    return 0
