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

# -*- coding: utf-8 -*-

import time

import matplotlib.pyplot as plt
import numpy as np


def timeit(fn, n_warmup=2, n_runs=10):
    """Return the per-run wall times of ``fn()`` in seconds."""
    for _ in range(n_warmup):
        fn()
    times = []
    for _ in range(n_runs):
        t0 = time.perf_counter()
        fn()
        times.append(time.perf_counter() - t0)
    return np.asarray(times)


def visualize(results, title='Throughput', filename=None):
    """Bar chart of throughput in million values per second.

    ``results`` maps labels to throughput; labels ending in ``par`` are
    drawn in a second colour so serial and parallel runs can be compared.
    """
    labels = list(results.keys())
    values = np.asarray(list(results.values()))
    colors = ['tab:orange' if label.endswith('par') else 'tab:blue' for label in labels]

    fig, ax = plt.subplots(figsize=(max(6.0, 0.6 * len(labels)), 4.5))
    x = np.arange(len(labels))
    bars = ax.bar(x, values, 0.6, color=colors)

    ax.set_ylabel('Million values / s')
    ax.set_title(title)
    ax.set_xticks(x)
    ax.set_xticklabels(labels, rotation=45, ha='right')
    ax.set_ylim(0, values.max() * 1.15 if values.size else 1.0)
    ax.bar_label(bars, fmt='%.1f', padding=2)

    fig.tight_layout()
    if filename is not None:
        fig.savefig(filename)
    plt.show()
