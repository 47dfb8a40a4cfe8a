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

"""Estimate pi with independent RANLUX++ streams.

Each worker gets its own seed, so the streams start 2^96 draws apart and
never overlap.  A checkpoint taken halfway shows that restoring the state
reproduces the second half exactly.

Run from the project root:
    python examples/monte_carlo_pi.py
"""

import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import numpy as np

import ranluxpp

N_WORKERS = 4
N_POINTS = 200_000


def estimate(rng: ranluxpp.Ranluxpp, n: int) -> float:
    xy = rng.random((n, 2))
    inside = np.count_nonzero((xy ** 2).sum(axis=1) < 1.0)
    return 4.0 * inside / n


def main():
    estimates = []
    for worker in range(N_WORKERS):
        rng = ranluxpp.Ranluxpp(seed=worker, p=2048)
        first = estimate(rng, N_POINTS // 2)
        checkpoint = rng.state
        second = estimate(rng, N_POINTS // 2)

        rng.state = checkpoint
        assert estimate(rng, N_POINTS // 2) == second

        estimates.append((first + second) / 2)
        print(f'worker {worker}: pi ~ {estimates[-1]:.5f}')

    print(f'combined: pi ~ {np.mean(estimates):.5f} (error {abs(np.mean(estimates) - np.pi):.2e})')


if __name__ == '__main__':
    main()
