from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from chainlab.analysis import analyze_chains
from chainlab.catalog import load_chains
from chainlab.executors import default_executor
from chainlab.extract import strategy_for_schema
from chainlab.io import (
    print_results_table,
    write_results_csv,
    write_results_json,
    write_summary_json,
)
from chainlab.metrics import summarize
from chainlab.parser import SCHEMAS, read_events
from chainlab.validate import ConfigError, FormatError

_logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="chainlab", description="Call chain response-time analysis"
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    an = sub.add_parser("analyze", help="Compute BCRT/ACRT/WCRT per chain from an event log")
    an.add_argument("--chains", required=True, type=Path, help="Chain catalog (JSON)")
    an.add_argument("--log", required=True, type=Path, help="Event log")
    an.add_argument(
        "--schema",
        choices=sorted(SCHEMAS),
        default="callback",
        help="Event schema of the log producer (default: callback)",
    )
    an.add_argument("--workers", type=int, default=1)
    an.add_argument(
        "--out-results",
        required=False,
        type=Path,
        help="Write results to .csv or .json instead of printing a table",
    )
    an.add_argument("--out-summary", required=False, type=Path)
    verbosity = an.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true")
    verbosity.add_argument("-q", "--quiet", action="store_true")
    return p


def _configure_logging(*, verbose: bool, quiet: bool) -> None:
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    logging.basicConfig(
        level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr
    )


def _analyze(args: argparse.Namespace) -> int:
    schema = SCHEMAS[args.schema]
    chains = load_chains(args.chains)
    events = read_events(args.log, schema=schema)
    _logger.info("read %d chains and %d events", len(chains), len(events))

    analyses = analyze_chains(
        chains,
        events,
        strategy=strategy_for_schema(schema),
        executor=default_executor(args.workers),
    )
    results = [a.result for a in analyses if a.result is not None]

    if args.out_results is None:
        print_results_table(results, sys.stdout)
    elif args.out_results.suffix.lower() == ".json":
        write_results_json(args.out_results, results)
    else:
        write_results_csv(args.out_results, results)
    if args.out_summary:
        write_summary_json(args.out_summary, summarize(analyses))
    return 0


def main(argv: list[str] | None = None) -> int:
    p = _build_parser()
    args = p.parse_args(argv)

    if args.cmd == "analyze":
        _configure_logging(verbose=args.verbose, quiet=args.quiet)
        if args.workers < 1:
            p.error("--workers must be >= 1")
        try:
            return _analyze(args)
        except (FormatError, ConfigError, OSError) as e:
            _logger.error("%s", e)
            return 2

    raise AssertionError(f"Unhandled command: {args.cmd}")
