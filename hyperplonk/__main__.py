"""
Prover cost sweep:  python -m hyperplonk --variant both --min-log 2 --max-log 6

Each invocation samples its own circuit, challenges and setup from an
independent seed, so invocations can run in parallel (--jobs).
"""

import argparse
import logging
import random
import secrets
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor

from hyperplonk.prover import run
from hyperplonk.timer import Timer
from hyperplonk.variants import VARIANTS


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="hyperplonk", description="Simulate HyperPlonk prover cost."
    )
    parser.add_argument(
        "--variant", choices=[*VARIANTS, "both"], default="baseline"
    )
    parser.add_argument("--min-log", type=int, default=2, help="smallest log2 gate count")
    parser.add_argument("--max-log", type=int, default=4, help="largest log2 gate count")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument(
        "--jobs", type=int, default=1, help="independent invocations run in parallel"
    )
    parser.add_argument(
        "--workers", type=int, default=0, help="threads per invocation for batched sum-checks"
    )
    parser.add_argument("-v", "--verbose", action="count", default=0)
    args = parser.parse_args(argv)
    if args.min_log < 1 or args.max_log < args.min_log:
        parser.error("need 1 <= --min-log <= --max-log")
    return args


def bench(variant: str, log_size: int, seed: int, workers: int = 0):
    timer = Timer()
    if workers:
        with ThreadPoolExecutor(workers) as executor:
            proof = run(
                log_size, VARIANTS[variant], seed=seed, observer=timer, executor=executor
            )
    else:
        proof = run(log_size, VARIANTS[variant], seed=seed, observer=timer)
    sizes = {name: len(items) for name, items in proof.flatten().items()}
    return variant, log_size, timer.timings, sizes


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose > 1 else logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    variants = list(VARIANTS) if args.variant == "both" else [args.variant]
    seeds = random.Random(args.seed if args.seed is not None else secrets.randbits(64))
    tasks = [
        (variant, log_size, seeds.getrandbits(64), args.workers)
        for variant in variants
        for log_size in range(args.min_log, args.max_log + 1)
    ]

    if args.jobs > 1:
        with ProcessPoolExecutor(args.jobs) as pool:
            results = list(pool.map(bench, *zip(*tasks)))
    else:
        results = [bench(*task) for task in tasks]

    for variant, log_size, timings, sizes in results:
        print(f"== {variant}, 2^{log_size} gates")
        for label, seconds in timings.items():
            print(f"  {label:<20} {seconds:9.3f}s")
        print("  " + ", ".join(f"{name}={count}" for name, count in sizes.items()))


if __name__ == "__main__":
    main()
