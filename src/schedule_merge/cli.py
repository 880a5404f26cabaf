from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .config import DEFAULT_TRIM_OVERLAPS, LOGGER_NAME, POLICY_NAMES
from .engine import MergeEngine
from .errors import ScheduleMergeError
from .formatting import fmt_timeline
from .io_json import dump_timeline, dumps, load_schedule, timeline_to_dict


def _configure_logging(verbose: bool, quiet: bool) -> None:
    level = logging.DEBUG if verbose else logging.ERROR if quiet else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger(LOGGER_NAME).setLevel(level)


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(
        description="Merge prioritised, possibly overlapping events into a conflict-free timeline."
    )
    ap.add_argument("--input", required=True, help="Path to input JSON.")
    ap.add_argument(
        "--trim",
        action="store_true",
        default=DEFAULT_TRIM_OVERLAPS,
        help="Trim losing events to the sub-intervals they can still occupy (default: discard them).",
    )
    ap.add_argument("--output", help="Write the merged timeline as JSON to this path.")
    ap.add_argument("--explain", action="store_true", help="Print explain/evidence JSON.")
    verbosity = ap.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Log every merge step.")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log errors.")
    args = ap.parse_args(argv)

    _configure_logging(args.verbose, args.quiet)

    try:
        schedule = load_schedule(args.input)
        engine = MergeEngine(schedule, trim_overlaps=args.trim)
        timeline = engine.merge()
    except (OSError, ScheduleMergeError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    print("=== Merged timeline ===")
    print(f"Policy: {POLICY_NAMES[args.trim]}")
    print(f"Events in: {len(engine.pending)}  entries out: {len(timeline)}")
    for line in fmt_timeline(timeline):
        print(line)

    if args.output:
        dump_timeline(args.output, timeline_to_dict(timeline, engine.policy, engine.explain() if args.explain else None))

    if args.explain:
        print("\n=== Explain / Evidence ===")
        print(dumps(engine.explain()))

    return 0


if __name__ == "__main__":
    sys.exit(main())
