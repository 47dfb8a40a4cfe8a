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

import operator

import numpy as np

from ._mulmod import identity_residue, mul9x9mod

__all__ = [
    'MULTIPLIER',
    'get_multiplier',
    'powmod',
    'multiplier_power',
]

# a = m - (m - 1) / 2^24, the LCG equivalent of the RANLUX subtract-with-borrow recurrence
MULTIPLIER = np.array(
    [
        0x0000000000000001, 0x0000000000000000, 0x0000000000000000,
        0xffff000001000000, 0xffffffffffffffff, 0xffffffffffffffff,
        0xffffffffffffffff, 0xffffffffffffffff, 0xfffffeffffffffff,
    ],
    dtype=np.uint64,
)
MULTIPLIER.flags.writeable = False


def get_multiplier() -> np.ndarray:
    """Return a writable copy of the base multiplier ``a``."""
    return MULTIPLIER.copy()


def powmod(x: np.ndarray, n: int) -> None:
    """In-place modular exponentiation ``x <- x^n mod m``.

    Left-to-right binary exponentiation: one squaring per bit of ``n`` and
    one extra multiplication per set bit, all through :func:`mul9x9mod`.

    Parameters
    ----------
    x : np.ndarray
        A ``(9,)`` ``uint64`` residue, overwritten with the result.
    n : int
        Non-negative exponent. ``n = 0`` gives the residue 1.

    Raises
    ------
    TypeError
        If ``n`` is not an integer.
    ValueError
        If ``n`` is negative.
    """
    n = operator.index(n)
    if n < 0:
        raise ValueError(f'The exponent must be non-negative, got {n}.')
    res = identity_residue()
    for i in range(n.bit_length() - 1, -1, -1):
        mul9x9mod(res, res)
        if (n >> i) & 1:
            mul9x9mod(res, x)
    x[:] = res


def multiplier_power(n: int) -> np.ndarray:
    """Return a fresh residue holding ``a^n mod m``."""
    x = get_multiplier()
    powmod(x, n)
    return x
