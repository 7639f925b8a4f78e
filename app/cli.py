"""
Net-worth projection — command line front end
=============================================

Subcommands:
  project   decode a scenario (or generate defaults), run the projection,
            print the summary and the yearly table, optionally write CSV
  defaults  print the generated default scenario as an envelope
  share     print the ``scenario=...`` query string for a scenario

Scenario tokens may be JSON, base64 JSON, ``@path`` to a file holding either,
or ``-`` for stdin.

Run: networth-projection project --seed 42 --real-dollars
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import pandas as pd

from codec import decode_scenario_report, encode_scenario, share_query, validate_params
from core.params import ScenarioParams
from engine.runner import run_projection
from reports.series import chart_frame, rows_to_frame
from reports.summary import summarize_projection
from scenarios.defaults import generate_default_params

logger = logging.getLogger(__name__)

TABLE_COLUMNS = [
    "year", "age", "stock_return_applied", "income", "total_expenses",
    "stocks_end", "cash_end", "real_estate_end", "mortgage_balance",
    "net_worth", "shortfall",
]


def _read_token(token: Optional[str]) -> Optional[str]:
    if token is None:
        return None
    if token == "-":
        return sys.stdin.read()
    if token.startswith("@"):
        return Path(token[1:]).read_text(encoding="utf-8")
    return token


def _load_params(args: argparse.Namespace) -> ScenarioParams:
    base = generate_default_params(seed=args.seed)
    raw = _read_token(getattr(args, "scenario", None))
    if raw is None:
        return base

    params, report = decode_scenario_report(raw, base=base)
    if not report.is_clean:
        print(report.summary(), file=sys.stderr)
    return params


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------

def cmd_project(args: argparse.Namespace) -> int:
    params = _load_params(args)

    validation = validate_params(params)
    for w in validation.warnings:
        logger.warning(w)
    if not validation.is_valid:
        for e in validation.errors:
            print(f"✗ {e}", file=sys.stderr)
        return 2

    rows = run_projection(params)
    summary = summarize_projection(params, rows)

    print(summary.to_dataframe().to_string(index=False))
    print()

    if args.real_dollars:
        table = chart_frame(rows, params, real_dollars=True)
    else:
        table = rows_to_frame(rows)[TABLE_COLUMNS]
    with pd.option_context("display.float_format", "{:,.0f}".format):
        print(table.to_string(index=False))

    if args.csv:
        rows_to_frame(rows).to_csv(args.csv, index=False)
        logger.info("Wrote %d rows to %s", len(rows), args.csv)
    return 0


def cmd_defaults(args: argparse.Namespace) -> int:
    params = generate_default_params(seed=args.seed)
    print(encode_scenario(params, binary_safe=args.binary_safe))
    return 0


def cmd_share(args: argparse.Namespace) -> int:
    params = _load_params(args)
    print(share_query(params))
    return 0


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="networth-projection",
        description="Deterministic household net-worth projection.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("project", help="Run the projection and print the yearly table.")
    p.add_argument("--scenario", help="Envelope as JSON, base64, @file or '-' for stdin.")
    p.add_argument("--seed", type=int, default=None, help="Seed for the generated defaults.")
    p.add_argument("--real-dollars", action="store_true", help="Deflate to start-year money.")
    p.add_argument("--csv", default=None, help="Write the full yearly table to this CSV path.")
    p.set_defaults(func=cmd_project)

    d = sub.add_parser("defaults", help="Print the generated default scenario envelope.")
    d.add_argument("--seed", type=int, default=None)
    d.add_argument("--binary-safe", action="store_true", help="Base64-encode the envelope.")
    d.set_defaults(func=cmd_defaults)

    s = sub.add_parser("share", help="Print a shareable scenario query string.")
    s.add_argument("--scenario", help="Envelope as JSON, base64, @file or '-' for stdin.")
    s.add_argument("--seed", type=int, default=None)
    s.set_defaults(func=cmd_share)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
