# Copyright 2025 BrainX Ecosystem Limited. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================

"""CLI entry point for ranluxpp.

Usage:
    ranluxpp sample --seed S --skip P --count N --precision {single|double} [--output FILE.npy]
    ranluxpp benchmark --skip 24,2048 --count N --precision {single|double} [--output FILE.json]
    ranluxpp config [--set-skip P] [--clear]
"""

import argparse
import json
import sys
import time
from datetime import datetime, timezone
from typing import Dict, List, Optional

import numpy as np

__all__ = ['main']


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='ranluxpp',
        description='RANLUX++: a 576-bit LCG random number generator for scientific simulation.',
    )
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    sample = subparsers.add_parser('sample', help='Print or save uniform samples.')
    sample.add_argument('--seed', type=int, default=0, help='Unsigned 64-bit seed.')
    sample.add_argument('--skip', type=int, default=None, help='Skip exponent p (default: user config or 2048).')
    sample.add_argument('--count', type=int, default=10, help='Number of values.')
    sample.add_argument(
        '--precision',
        default='double',
        choices=['single', 'double'],
        help='Output precision.',
    )
    sample.add_argument('--jump', type=int, default=0, help='Jump ahead by this many steps before sampling.')
    sample.add_argument(
        '--primitive',
        action='store_true',
        default=False,
        help='Use the full-period primitive multiplier a^2048 + 13.',
    )
    sample.add_argument('--output', type=str, default=None, help='Write samples to this .npy file.')

    bench = subparsers.add_parser('benchmark', help='Measure bulk read throughput per skip exponent.')
    bench.add_argument(
        '--skip',
        default='24,2048',
        help='Comma-separated skip exponents to benchmark.',
    )
    bench.add_argument('--count', type=int, default=100_000, help='Values per timed read.')
    bench.add_argument(
        '--precision',
        default='double',
        choices=['single', 'double'],
        help='Precision of the timed reads.',
    )
    bench.add_argument('--n-warmup', type=int, default=2, help='Number of warmup runs.')
    bench.add_argument('--n-runs', type=int, default=10, help='Number of timed runs.')
    bench.add_argument('--output', type=str, default=None, help='Output file path for JSON results.')

    cfg = subparsers.add_parser('config', help='Show or change persisted defaults.')
    cfg.add_argument('--set-skip', type=int, default=None, help='Persist a default skip exponent.')
    cfg.add_argument('--clear', action='store_true', default=False, help='Delete all persisted defaults.')

    return parser


def _parse_skips(text: str) -> List[int]:
    """Parse a comma-separated list of skip exponents."""
    return [int(t) for t in text.split(',') if t.strip()]


def _read(generator, precision: str, count: int) -> np.ndarray:
    if precision == 'single':
        return generator.read_floats(count)
    return generator.read_doubles(count)


def _run_sample(args) -> int:
    """Run the sample command."""
    from ranluxpp import Ranluxpp
    from ranluxpp.config import get_default_skip

    p = get_default_skip() if args.skip is None else args.skip
    try:
        rng = Ranluxpp(seed=args.seed, p=p)
        if args.primitive:
            rng.select_primitive_multiplier()
        if args.jump:
            rng.jump(args.jump)
        values = _read(rng, args.precision, args.count)
    except (TypeError, ValueError) as e:
        print(f"ranluxpp: {e}", file=sys.stderr)
        return 2

    if args.output:
        np.save(args.output, values)
        print(f"{values.size} samples written to {args.output}")
    else:
        for v in values:
            print(repr(float(v)))
    return 0


def _time_reads(rng, precision: str, count: int, n_warmup: int, n_runs: int) -> Dict[str, float]:
    for _ in range(n_warmup):
        _read(rng, precision, count)
    times = []
    for _ in range(n_runs):
        t0 = time.perf_counter()
        _read(rng, precision, count)
        times.append(time.perf_counter() - t0)
    times = np.asarray(times)
    return {
        'mean_ms': float(times.mean() * 1000),
        'std_ms': float(times.std() * 1000),
        'min_ms': float(times.min() * 1000),
        'values_per_s': float(count / times.mean()),
    }


def _run_benchmark(args) -> int:
    """Run the benchmark command."""
    from ranluxpp import Ranluxpp

    try:
        skips = _parse_skips(args.skip)
    except ValueError:
        print(f"ranluxpp: invalid skip list '{args.skip}'.", file=sys.stderr)
        return 2
    if not skips:
        print("ranluxpp: no skip exponents given.", file=sys.stderr)
        return 1
    if args.n_runs < 1:
        print("ranluxpp: --n-runs must be at least 1.", file=sys.stderr)
        return 2

    print(f"RANLUX++ Benchmark: precision={args.precision}, count={args.count}, "
          f"n_warmup={args.n_warmup}, n_runs={args.n_runs}")
    print()

    header = f"{'Skip':>12} {'Setup (ms)':>12} {'Mean (ms)':>12} {'Std (ms)':>12} {'Min (ms)':>12} {'Mvalues/s':>12}"
    print(header)
    print("-" * len(header))

    results = []
    for p in skips:
        t0 = time.perf_counter()
        try:
            rng = Ranluxpp(seed=0, p=p)
        except ValueError as e:
            print(f"ranluxpp: {e}", file=sys.stderr)
            return 2
        setup_ms = (time.perf_counter() - t0) * 1000
        record = _time_reads(rng, args.precision, args.count, args.n_warmup, args.n_runs)
        record.update(skip=p, setup_ms=setup_ms)
        results.append(record)
        print(f"{p:>12} {setup_ms:>12.3f} {record['mean_ms']:>12.3f} {record['std_ms']:>12.3f} "
              f"{record['min_ms']:>12.3f} {record['values_per_s'] / 1e6:>12.3f}")

    print()

    if args.output:
        output_data = {
            'last_run': datetime.now(timezone.utc).isoformat(),
            'parameters': {
                'precision': args.precision,
                'count': args.count,
                'n_warmup': args.n_warmup,
                'n_runs': args.n_runs,
            },
            'results': results,
        }
        with open(args.output, 'w', encoding='utf-8') as f:
            json.dump(output_data, f, indent=2)
            f.write('\n')
        print(f"Results written to {args.output}")

    return 0


def _run_config(args) -> int:
    """Run the config command."""
    from ranluxpp.config import (
        clear_user_defaults,
        get_config_path,
        get_default_skip,
        set_default_skip,
    )

    if args.clear:
        clear_user_defaults()
        print(f"Cleared defaults at {get_config_path()}")
    if args.set_skip is not None:
        try:
            set_default_skip(args.set_skip)
        except ValueError as e:
            print(f"ranluxpp: {e}", file=sys.stderr)
            return 2
    print(f"config file: {get_config_path()}")
    print(f"default skip: {get_default_skip()}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success).
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == 'sample':
        return _run_sample(args)
    if args.command == 'benchmark':
        return _run_benchmark(args)
    if args.command == 'config':
        return _run_config(args)

    parser.print_help()
    return 1


if __name__ == '__main__':
    sys.exit(main())
