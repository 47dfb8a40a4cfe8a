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
Residues modulo ``m = 2^576 - 2^240 + 1`` and their modular product.

A residue is a ``(9,)`` ``uint64`` array, least-significant limb first.
The product is computed on Python integers, which keeps the limb layout
an exchange format only: extraction kernels read the limbs, arithmetic
never touches them directly.
"""

import numpy as np

from ._error import ResidueRangeError

__all__ = [
    'NLIMBS',
    'MODULUS',
    'residue_to_int',
    'int_to_residue',
    'identity_residue',
    'check_residue',
    'mul9x9mod',
]

NLIMBS = 9
MODULUS = (1 << 576) - (1 << 240) + 1

_NBYTES = 8 * NLIMBS


def residue_to_int(x) -> int:
    """Return the integer value of the nine-limb residue ``x``."""
    limbs = np.ascontiguousarray(x, dtype='<u8')
    return int.from_bytes(limbs.tobytes(), 'little')


def int_to_residue(value: int) -> np.ndarray:
    """Pack an integer in ``[0, m)`` into a new ``(9,)`` ``uint64`` residue.

    Parameters
    ----------
    value : int
        The integer to pack.

    Returns
    -------
    residue : np.ndarray
        A fresh ``(9,)`` ``uint64`` array.

    Raises
    ------
    ResidueRangeError
        If ``value`` is negative or not below :data:`MODULUS`.
    """
    value = int(value)
    if not 0 <= value < MODULUS:
        raise ResidueRangeError(
            f'residue must lie in [0, m), got a {value.bit_length()}-bit value '
            f'{"< 0" if value < 0 else ">= m"}'
        )
    return np.frombuffer(value.to_bytes(_NBYTES, 'little'), dtype='<u8').astype(np.uint64)


def identity_residue() -> np.ndarray:
    """Return the residue equal to 1."""
    x = np.zeros(NLIMBS, dtype=np.uint64)
    x[0] = 1
    return x


def check_residue(x) -> np.ndarray:
    """Validate ``x`` as a residue and return it as a fresh ``uint64`` array.

    Accepts a Python integer or any array-like of nine non-negative limbs.

    Raises
    ------
    ResidueRangeError
        If ``x`` does not have nine limbs, a limb does not fit in 64 bits,
        or the value is not below :data:`MODULUS`.
    """
    if isinstance(x, (int, np.integer)):
        return int_to_residue(int(x))
    if isinstance(x, np.ndarray) and x.ndim != 1:
        raise ResidueRangeError(f'a residue has shape ({NLIMBS},), got {x.shape}')
    limbs = [int(v) for v in x]
    if len(limbs) != NLIMBS:
        raise ResidueRangeError(f'a residue has {NLIMBS} limbs, got {len(limbs)}')
    if any(v < 0 or v >> 64 for v in limbs):
        raise ResidueRangeError('every limb of a residue must fit in an unsigned 64-bit integer')
    return int_to_residue(sum(v << (64 * i) for i, v in enumerate(limbs)))


def mul9x9mod(x: np.ndarray, a: np.ndarray) -> None:
    """In-place modular product ``x <- x * a mod m``.

    Both operands must already satisfy ``0 <= value < m``; the result does
    too.  ``x`` and ``a`` may be the same array (squaring).
    """
    r = residue_to_int(x) * residue_to_int(a) % MODULUS
    x[:] = np.frombuffer(r.to_bytes(_NBYTES, 'little'), dtype='<u8')
