#!/usr/bin/env python3
"""
OS paging simulator command line.

    ossim -a fifo|lru|clock [-f num_frames] [-t tlb_entries] [-wt | -wb] <tracefile>
"""

import argparse
import logging
import sys
from typing import Dict, Iterable, List, Tuple

from plots import plot_comparison
from report import format_comparison, format_event, format_statistics
from tracefile import read_trace
from virtualsim import DEFAULT_NUM_FRAMES, POLICIES, MemoryAccessEngine, SimulatorConfig, WritePolicy


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ossim", description="Simulate paging with a TLB over a memory access trace.")
    parser.add_argument("-a", dest="algorithm", type=str.lower, default="fifo",
                        choices=[name.lower() for name in POLICIES],
                        help="page replacement algorithm (default: fifo)")
    parser.add_argument("-f", dest="num_frames", type=int, default=DEFAULT_NUM_FRAMES,
                        help="number of physical frames (default: %(default)s)")
    parser.add_argument("-t", dest="tlb_size", type=int, default=0,
                        help="number of TLB entries, 0 disables the TLB (default: 0)")
    write_group = parser.add_mutually_exclusive_group()
    write_group.add_argument("-wt", dest="write_policy", action="store_const",
                             const=WritePolicy.WRITE_THROUGH, help="write-through (default)")
    write_group.add_argument("-wb", dest="write_policy", action="store_const",
                             const=WritePolicy.WRITE_BACK, help="write-back")
    parser.set_defaults(write_policy=WritePolicy.WRITE_THROUGH)
    parser.add_argument("-q", "--quiet", action="store_true",
                        help="do not print every access")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="log skipped trace lines and evictions")
    parser.add_argument("--compare", action="store_true",
                        help="run every algorithm over the trace and print a summary")
    parser.add_argument("--plot", metavar="FILE",
                        help="with --compare, save a comparison chart to FILE")
    parser.add_argument("tracefile", help="trace of '<R|W> <hex address>' lines")
    return parser


def parse_config(args: argparse.Namespace) -> SimulatorConfig:
    """Turn parsed arguments into a validated config"""
    if args.num_frames <= 0:
        raise ValueError("Number of frames must be > 0")
    # Negative TLB sizes mean "no TLB"
    tlb_size = max(args.tlb_size, 0)
    return SimulatorConfig(algorithm=args.algorithm, num_frames=args.num_frames,
                           tlb_size=tlb_size, write_policy=args.write_policy)


def run_simulation(config: SimulatorConfig, accesses: Iterable[Tuple[str, int]],
                   quiet: bool = False) -> Dict:
    """Run one algorithm over the trace, printing each access unless quiet"""
    engine = MemoryAccessEngine(config)
    for event in engine.iter_trace(accesses):
        if not quiet:
            for line in format_event(event):
                print(line)
    return engine.get_statistics()


def compare_algorithms(config: SimulatorConfig,
                       accesses: List[Tuple[str, int]]) -> Dict[str, Dict]:
    """Run every algorithm with the same frames, TLB and write policy"""
    results = {}
    for name in POLICIES:
        alg_config = SimulatorConfig(algorithm=name, num_frames=config.num_frames,
                                     tlb_size=config.tlb_size, write_policy=config.write_policy)
        engine = MemoryAccessEngine(alg_config)
        engine.simulate_trace(accesses)
        results[name] = engine.get_statistics()
    return results


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.plot and not args.compare:
        parser.error("--plot requires --compare")
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    print("OS Simulator starting...")
    try:
        config = parse_config(args)
    except ValueError as e:
        print(e, file=sys.stderr)
        return 1

    try:
        trace_file = open(args.tracefile, 'r', errors='replace')
    except OSError as e:
        print(f"Error opening trace file: {e}", file=sys.stderr)
        return 1

    with trace_file:
        print(f"Reading trace file: {args.tracefile}")
        accesses = read_trace(trace_file, source=args.tracefile)
        try:
            if args.compare:
                results = compare_algorithms(config, list(accesses))
            else:
                stats = run_simulation(config, accesses, quiet=args.quiet)
        except MemoryError:
            print("Error allocating frame metadata", file=sys.stderr)
            return 1
        except OSError as e:
            print(f"Error reading trace file: {e}", file=sys.stderr)
            return 1

    print()
    if args.compare:
        for line in format_comparison(results):
            print(line)
        if args.plot:
            plot_comparison(results, args.plot, title=f"{args.tracefile} ({config.num_frames} frames)")
            print(f"\nGraph saved as '{args.plot}'")
    else:
        for line in format_statistics(stats):
            print(line)
    print("Simulation finished.")
    return 0


if __name__ == '__main__':
    sys.exit(main())
