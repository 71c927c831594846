#!/usr/bin/env python3
"""
Propositional proof search CLI (prove)

Reads one line of the form ``assumption1,assumption2,.../conclusion`` from
the command line or stdin, searches for a natural-deduction proof and prints
the derivation.

Examples:
    prove "P,P>Q/Q"
    echo "PvQ,P>W,Q>W/W" | prove --max-lines 20
    prove --json "P>R,R>Q/P>Q"

Exit codes:
    0  proof found
    1  search ended without a proof (dead end, maximum lines, maximum iteration)
    2  malformed input or configuration
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv

from derivation.bounds import SearchSettings, SettingsError, load_settings
from derivation.proof import InputError, Proof
from derivation.search import SearchError
from formula.parser import ParseError

logger = logging.getLogger("prove")

# Front-end defaults are roomier than the library defaults.
CLI_MAX_LINE_LENGTH = 20
CLI_ITERATIONS = 100_000

EXIT_PROVED = 0
EXIT_NO_PROOF = 1
EXIT_BAD_INPUT = 2


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="prove",
        description="Search for a natural-deduction proof of a propositional argument.",
    )
    ap.add_argument(
        "statement",
        nargs="?",
        help="Assumptions separated by ',' then '/' then the conclusion, e.g. 'A,B>C/C'. "
        "Read from stdin when omitted.",
    )
    ap.add_argument("--config", help="YAML settings file (default: $PROVER_SETTINGS or config/prover.yaml)")
    ap.add_argument("--max-lines", type=int, help="Maximum proof length explored")
    ap.add_argument("--iterations", type=int, help="Maximum node expansions")
    ap.add_argument("--sub-max-lines", type=int, help="Maximum proof length inside vE/CP sub-searches")
    ap.add_argument("--sub-iterations", type=int, help="Node expansions allowed per sub-search")
    ap.add_argument(
        "--dedupe-states",
        action="store_true",
        default=None,
        help="Skip proof states whose formulas were already queued",
    )
    ap.add_argument("--json", action="store_true", help="Print the result as JSON")
    ap.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity")
    return ap


def resolve_settings(args: argparse.Namespace) -> SearchSettings:
    cli_defaults = SearchSettings(max_line_length=CLI_MAX_LINE_LENGTH, iterations=CLI_ITERATIONS)
    base = load_settings(args.config, base=cli_defaults)
    return base.replace(
        max_line_length=args.max_lines,
        iterations=args.iterations,
        sub_max_line_length=args.sub_max_lines,
        sub_iterations=args.sub_iterations,
        deduplicate_states=args.dedupe_states,
    )


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _read_statement(args: argparse.Namespace) -> str:
    if args.statement is not None:
        return args.statement
    print("Enter the propositional logic statement: ", file=sys.stderr)
    return sys.stdin.readline().strip()


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        settings = resolve_settings(args)
        proof = Proof.from_input(_read_statement(args), settings)
    except (InputError, ParseError, SettingsError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_BAD_INPUT

    logger.info("Searching with %s", settings.to_dict())
    try:
        proof.search()
    except SearchError as exc:
        if args.json:
            print(json.dumps(proof.to_dict(), indent=2))
        print(f"Did not find proof: {exc.state.label}", file=sys.stderr)
        return EXIT_NO_PROOF

    if args.json:
        print(json.dumps(proof.to_dict(), indent=2))
    else:
        print(proof.render())
    return EXIT_PROVED


if __name__ == "__main__":
    sys.exit(main())
