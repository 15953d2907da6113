#!/usr/bin/env python3
"""Inspect a RAPTOR trace against a stops table.

Prints one summary line per round (entries, located stops, gaps), or the
details of a single round as JSON.

Usage:
    python scripts/inspect_trace.py --stops stops.csv --trace raptor_output.txt
    python scripts/inspect_trace.py --stops stops.csv --trace raptor_output.txt --round 2
    python scripts/inspect_trace.py --stops stops.csv --trace raptor_output.txt --id-column StopOffset
"""

import argparse
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.trace_bc.query.round_query import QueryDiagnostics, RoundQueryEngine
from src.trace_bc.shared.domain.errors import ConfigError
from src.trace_bc.stop_table.tabular_store import TabularStore
from src.trace_bc.trace.infrastructure.services.trace_parser import parse_trace

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def read_text(path: Path) -> str:
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def print_summary(engine: RoundQueryEngine, trace) -> None:
    print(f"{'round':>5}  {'entries':>7}  {'located':>7}  {'gaps':>5}")
    for round_index in range(trace.rounds_number()):
        diagnostics = QueryDiagnostics()
        details = engine.details_of_round(trace, round_index, diagnostics)
        print(
            f"{round_index:>5}  {len(trace.entries(round_index)):>7}  "
            f"{len(details):>7}  {diagnostics.gap_count:>5}"
        )


def print_round(engine: RoundQueryEngine, trace, round_index: int) -> None:
    diagnostics = QueryDiagnostics()
    details = engine.details_of_round(trace, round_index, diagnostics)
    print(json.dumps({
        "round_index": round_index,
        "details": [d.to_dict() for d in details],
        "missing_stop_ids": diagnostics.missing_stop_ids(),
    }, indent=2, ensure_ascii=False))


def main():
    parser = argparse.ArgumentParser(description='Inspect a RAPTOR trace round by round')
    parser.add_argument('--stops', '-s', type=Path, required=True, help='Stops table file')
    parser.add_argument('--trace', '-t', type=Path, required=True, help='RAPTOR trace file')
    parser.add_argument('--round', '-r', type=int, help='Print the details of this round as JSON')
    parser.add_argument('--id-column', type=str, help='Stop identifier column (default: first column)')
    parser.add_argument('--delimiter', type=str, help='Stops table delimiter (default: detect)')
    args = parser.parse_args()

    try:
        store = TabularStore.build(read_text(args.stops), id_column=args.id_column, delimiter=args.delimiter)
    except ConfigError as e:
        logger.error(f"Cannot build stops table from {args.stops}: {e}")
        return 1

    trace = parse_trace(read_text(args.trace))
    for warning in trace.warnings:
        logger.warning(f"{args.trace}: {warning}")

    engine = RoundQueryEngine(store)
    logger.info(f"{store.row_count()} stops, {trace.rounds_number()} rounds")

    if args.round is None:
        print_summary(engine, trace)
    else:
        print_round(engine, trace, args.round)
    return 0


if __name__ == "__main__":
    sys.exit(main())
