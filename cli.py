"""Command line entry point for the page replacement simulator.

Usage:
    page-replacement-sim -a lru -n 3 --pages "7,0,1,2,0,3,0,4"
    page-replacement-sim -a fifo --random 20 --max-page 9 --seed 1 --csv trace.csv
    page-replacement-sim --compare --pages "1 2 3 4 1 2 5 1 2 3 4 5"
"""
import argparse
import random
import sys

import config
from engine import ReplacementPolicy, compare, run
from utils import (
    export_trace_csv,
    generate_random_pages,
    parse_reference_string,
    validate_frame_count,
    validate_random_inputs,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="page-replacement-sim",
        description="Simulate page replacement algorithms over a page reference string.",
    )
    parser.add_argument("-a", "--algorithm", choices=ReplacementPolicy.ALL,
                        default=ReplacementPolicy.FIFO)
    parser.add_argument("-n", "--frames", type=int, default=config.DEFAULT_FRAMES,
                        help="number of physical frames")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--pages", type=str,
                        help="comma or space separated page numbers")
    source.add_argument("--random", type=int, metavar="LENGTH",
                        help="generate a random reference string of LENGTH pages")
    parser.add_argument("--max-page", type=int, default=config.DEFAULT_MAX_PAGE,
                        help="largest page number for --random")
    parser.add_argument("--seed", type=int, help="random seed for --random")
    parser.add_argument("--csv", type=str, metavar="PATH",
                        help="write the step trace as CSV to PATH")
    parser.add_argument("--compare", action="store_true",
                        help="run all algorithms and print a comparison table")
    return parser


def read_pages(args, parser):
    try:
        if args.pages is not None:
            pages = parse_reference_string(args.pages)
        else:
            validate_random_inputs(args.random, args.max_page)
            pages = generate_random_pages(args.random, args.max_page, random.Random(args.seed))
        validate_frame_count(args.frames)
    except ValueError as e:
        parser.error(str(e))
    return pages


def print_trace(result, out):
    print(f"{'Step':>4}  {'Page':>4}  {'Result':<6}  {'Frames':<30}  Action", file=out)
    for step in result.steps:
        frames = " ".join(str(p) for p in step.frames)
        print(f"{step.step_number:>4}  {step.page:>4}  {step.result:<6}  {frames:<30}  {step.action}",
              file=out)
    print(file=out)
    print(f"Algorithm:        {config.ALGORITHM_INFO[result.algorithm]['title']}", file=out)
    print(f"Total references: {result.total_references}", file=out)
    print(f"Page faults:      {result.total_faults}", file=out)
    print(f"Page hits:        {result.total_hits}", file=out)
    print(f"Hit ratio:        {result.hit_ratio:.1f}%", file=out)


def print_comparison(results, out):
    print(f"{'Algorithm':<22}  {'Faults':>6}  {'Hits':>6}  {'Hit ratio':>9}", file=out)
    for algorithm, result in results.items():
        title = config.ALGORITHM_INFO[algorithm]["title"]
        print(f"{title:<22}  {result.total_faults:>6}  {result.total_hits:>6}  {result.hit_ratio:>8.1f}%",
              file=out)


def main(argv=None, out=None):
    out = out or sys.stdout
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.compare and args.csv:
        parser.error("--csv writes a single trace and cannot be combined with --compare")
    pages = read_pages(args, parser)

    print("Reference string: " + ", ".join(str(p) for p in pages), file=out)
    print(file=out)

    if args.compare:
        print_comparison(compare(pages, args.frames), out)
        return 0

    result = run(args.algorithm, pages, args.frames)
    print_trace(result, out)

    if args.csv:
        with open(args.csv, "w", newline="", encoding="utf-8") as fh:
            fh.write(export_trace_csv(result))
        print(f"Trace written to {args.csv}", file=out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
