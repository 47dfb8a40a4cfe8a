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

"""
Numba kernels that turn 576-bit generator states into uniform variates.

A batch of states is a ``(k, 9)`` ``uint64`` array, one residue per row.
Two independent layouts are read out of every state:

* **single precision** -- 24 non-overlapping 24-bit fields, eight per
  192-bit group of three limbs, each scaled by ``2^-24``;
* **double precision** -- 11 non-overlapping 52-bit fields (the top four
  bits of the state are unused), each written as the mantissa of a double
  in ``[1, 2)`` and shifted down to ``[0, 1)``.

Both layouts emit fields in ascending significance, so the same state
always yields the same sequence.
"""

import numba
import numpy as np

from ._mulmod import NLIMBS
from .config import get_numba_parallel

__all__ = [
    'NFLOATS',
    'NDOUBLES',
    'unpack_floats',
    'unpack_doubles',
]

NFLOATS = 24
NDOUBLES = 11


def _unpack_floats_impl(states, out):
    m = np.uint64(0xFFFFFF)
    sc = np.float32(1.0 / 16777216.0)
    for s in numba.prange(states.shape[0]):
        for i in range(3):
            t0 = states[s, 3 * i]
            t1 = states[s, 3 * i + 1]
            t2 = states[s, 3 * i + 2]
            k = NFLOATS * s + 8 * i
            out[k] = np.float32(m & t0) * sc
            out[k + 1] = np.float32(m & (t0 >> np.uint64(24))) * sc
            out[k + 2] = np.float32(m & ((t0 >> np.uint64(48)) | (t1 << np.uint64(16)))) * sc
            out[k + 3] = np.float32(m & (t1 >> np.uint64(8))) * sc
            out[k + 4] = np.float32(m & (t1 >> np.uint64(32))) * sc
            out[k + 5] = np.float32(m & ((t1 >> np.uint64(56)) | (t2 << np.uint64(8)))) * sc
            out[k + 6] = np.float32(m & (t2 >> np.uint64(16))) * sc
            out[k + 7] = np.float32(m & (t2 >> np.uint64(40))) * sc


def _unpack_double_bits_impl(states, bits):
    one = np.uint64(0x3FF0000000000000)
    m = np.uint64(0x000FFFFFFFFFFFFF)
    for s in numba.prange(states.shape[0]):
        x0 = states[s, 0]
        x1 = states[s, 1]
        x2 = states[s, 2]
        x3 = states[s, 3]
        x4 = states[s, 4]
        x5 = states[s, 5]
        x6 = states[s, 6]
        x7 = states[s, 7]
        x8 = states[s, 8]
        k = NDOUBLES * s
        bits[k] = one | (m & x0)
        bits[k + 1] = one | (m & ((x0 >> np.uint64(52)) | (x1 << np.uint64(12))))
        bits[k + 2] = one | (m & ((x1 >> np.uint64(40)) | (x2 << np.uint64(24))))
        bits[k + 3] = one | (m & ((x2 >> np.uint64(28)) | (x3 << np.uint64(36))))
        bits[k + 4] = one | (m & ((x3 >> np.uint64(16)) | (x4 << np.uint64(48))))
        bits[k + 5] = one | (m & ((x4 >> np.uint64(4)) | (x5 << np.uint64(60))))
        bits[k + 6] = one | (m & ((x4 >> np.uint64(56)) | (x5 << np.uint64(8))))
        bits[k + 7] = one | (m & ((x5 >> np.uint64(44)) | (x6 << np.uint64(20))))
        bits[k + 8] = one | (m & ((x6 >> np.uint64(32)) | (x7 << np.uint64(32))))
        bits[k + 9] = one | (m & ((x7 >> np.uint64(20)) | (x8 << np.uint64(44))))
        bits[k + 10] = one | (m & (x8 >> np.uint64(8)))


_unpack_floats_serial = numba.njit(nogil=True)(_unpack_floats_impl)
_unpack_floats_parallel = numba.njit(nogil=True, parallel=True)(_unpack_floats_impl)
_unpack_double_bits_serial = numba.njit(nogil=True)(_unpack_double_bits_impl)
_unpack_double_bits_parallel = numba.njit(nogil=True, parallel=True)(_unpack_double_bits_impl)


def _as_state_batch(states) -> np.ndarray:
    return np.ascontiguousarray(states, dtype=np.uint64).reshape(-1, NLIMBS)


def unpack_floats(states, out: np.ndarray) -> np.ndarray:
    """Extract ``24 * k`` single-precision uniforms in ``[0, 1)`` from ``k`` states.

    Parameters
    ----------
    states : array_like
        A ``(9,)`` residue or a ``(k, 9)`` batch of residues.
    out : np.ndarray
        A one-dimensional ``float32`` array of length ``24 * k``.

    Returns
    -------
    out : np.ndarray
        The filled output array.
    """
    states = _as_state_batch(states)
    if get_numba_parallel():
        _unpack_floats_parallel(states, out)
    else:
        _unpack_floats_serial(states, out)
    return out


def unpack_doubles(states, out: np.ndarray) -> np.ndarray:
    """Extract ``11 * k`` double-precision uniforms in ``[0, 1)`` from ``k`` states.

    Each 52-bit field is ORed into the bit pattern of ``1.0`` and the result
    is read back as a ``float64`` through a bit view, giving a value in
    ``[1, 2)`` whose mantissa bits are all random.  Subtracting ``1.0`` is
    exact, so no division or rounding is involved.

    Parameters
    ----------
    states : array_like
        A ``(9,)`` residue or a ``(k, 9)`` batch of residues.
    out : np.ndarray
        A one-dimensional ``float64`` array of length ``11 * k``.

    Returns
    -------
    out : np.ndarray
        The filled output array.
    """
    states = _as_state_batch(states)
    bits = np.empty(states.shape[0] * NDOUBLES, dtype=np.uint64)
    if get_numba_parallel():
        _unpack_double_bits_parallel(states, bits)
    else:
        _unpack_double_bits_serial(states, bits)
    np.subtract(bits.view(np.float64), 1.0, out=out)
    return out
