# find_max_points.py
import os, json, argparse, logging

from tspbench import StrategyConfig, default_cases, run_capacity_benchmark
from tspbench.experiments import select_cases
from tspbench.logs import logger
from tspbench.report import format_table, to_records, write_csv
from tspbench.tsp import DEFAULT_SEED


def ensure(path: str) -> str:
    d = os.path.dirname(path)
    if d:
        os.makedirs(d, exist_ok=True)
    return path


def non_negative_int(text):
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError(f"timeout must be non-negative, got {value}")
    return value


def print_probe(probe):
    if probe.phase == "verify":
        print(f"  RESULT: max n={probe.n} in {probe.elapsed_sec * 1000:.2f}ms")
    else:
        print(f"  n={probe.n}: {probe.elapsed_sec * 1000:.2f}ms")


def build_parser():
    ap = argparse.ArgumentParser(
        description="Find the largest number of points each TSP algorithm handles within a time budget.")
    ap.add_argument("timeout", nargs="?", type=non_negative_int, default=30, help="seconds per run (default 30)")
    ap.add_argument("--only", action="append", default=[], metavar="NAME",
                    help="only algorithms whose name contains NAME (repeatable)")
    ap.add_argument("--seed", type=int, default=DEFAULT_SEED, help="instance generator seed")
    ap.add_argument("--json", default=None, help="also write the JSON records to this file")
    ap.add_argument("--csv", default=None, help="also write the results table to this CSV file")
    ap.add_argument("-v", "--verbose", action="store_true", help="log per-algorithm results")
    ap.add_argument("-q", "--quiet", action="store_true", help="do not print individual probes")
    return ap


def main(argv=None):
    args = build_parser().parse_args(argv)
    if args.verbose:
        logger.setLevel(logging.INFO)

    cases = select_cases(default_cases(StrategyConfig()), args.only)
    if not cases:
        print("No algorithm matches", args.only)
        return 1

    print(f"Finding maximum points for each algorithm within {args.timeout} seconds timeout\n")
    print("=" * 80)

    on_probe = None if args.quiet else print_probe
    current = {"name": None}

    def announce(probe):
        if probe.name != current["name"]:
            current["name"] = probe.name
            print(f"\nTesting {probe.name}...")
        on_probe(probe)

    def on_result(res):
        if res.error is not None:
            print(f"  ERROR: {res.error}")

    results = run_capacity_benchmark(cases, args.timeout, seed=args.seed,
                                     on_probe=announce if on_probe else None, on_result=on_result)

    print()
    print(format_table(results, args.timeout))
    records = to_records(results)
    print("\nJSON Results:")
    print(json.dumps(records, indent=2))

    if args.json:
        with open(ensure(args.json), "w") as f:
            json.dump(records, f, indent=2)
    if args.csv:
        write_csv(results, ensure(args.csv))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
