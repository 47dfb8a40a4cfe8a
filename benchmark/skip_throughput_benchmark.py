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

"""Bulk read throughput of RANLUX++ per skip exponent and precision.

Also compares serial and parallel extraction of batched states.

Run from the project root:
    python benchmark/skip_throughput_benchmark.py
"""

import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import ranluxpp
from utils import timeit, visualize

N_VALUES = 240_000
SKIPS = (24, 389, 2048)


def benchmark(parallel: bool):
    ranluxpp.set_numba_parallel(parallel)
    results = {}
    for p in SKIPS:
        for precision in ('single', 'double'):
            rng = ranluxpp.Ranluxpp(seed=0, p=p)
            read = rng.read_floats if precision == 'single' else rng.read_doubles
            times = timeit(lambda: read(N_VALUES))
            mvalues = N_VALUES / times.mean() / 1e6
            label = f'p={p},{precision},{"par" if parallel else "ser"}'
            results[label] = mvalues
            print(f'{label:<28} {times.mean() * 1000:10.3f} ms  {mvalues:8.3f} Mvalues/s')
    return results


if __name__ == '__main__':
    results = benchmark(parallel=False)
    results.update(benchmark(parallel=True))
    ranluxpp.set_numba_parallel(False)
    visualize(results, title='RANLUX++ bulk read throughput', filename='ranluxpp-throughput.png')
