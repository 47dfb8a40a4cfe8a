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

import math
import operator
import warnings
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from ._error import StateError
from ._mulmod import (
    MODULUS,
    NLIMBS,
    check_residue,
    identity_residue,
    int_to_residue,
    mul9x9mod,
    residue_to_int,
)
from ._powmod import multiplier_power, powmod
from ._unpack import NDOUBLES, NFLOATS, unpack_doubles, unpack_floats
from .config import DEFAULT_SKIP

__all__ = [
    'Ranluxpp',
    'RanluxppState',
]

Size = Union[None, int, Sequence[int]]

# distinct seeds start 2^96 draws apart: (A^(2^48))^(2^48)
_SEED_STRIDE_LOG2 = 48
_PRIMITIVE_POWER = 2048
_PRIMITIVE_OFFSET = 13


def _check_uint64(value, name: str) -> int:
    value = operator.index(value)
    if not 0 <= value < 2 ** 64:
        raise ValueError(f'`{name}` must be an unsigned 64-bit integer, got {value}.')
    return value


def _check_output(n, out: Optional[np.ndarray], dtype) -> np.ndarray:
    n = operator.index(n)
    if n < 0:
        raise ValueError(f'The number of values to read must be non-negative, got {n}.')
    if out is None:
        return np.empty(n, dtype=dtype)
    if not isinstance(out, np.ndarray):
        raise TypeError(f'`out` must be a numpy.ndarray, got {type(out).__name__}.')
    if out.dtype != dtype or out.shape != (n,):
        raise ValueError(
            f'`out` must be a one-dimensional {np.dtype(dtype).name} array of length {n}, '
            f'got {out.dtype.name} with shape {out.shape}.'
        )
    return out


def _size_to_shape(size: Size) -> Tuple[int, ...]:
    if isinstance(size, (int, np.integer)):
        return (int(size),)
    return tuple(operator.index(s) for s in size)


def _check_cursor(pos, size: int, name: str) -> int:
    try:
        pos = operator.index(pos)
    except TypeError:
        raise StateError(f'{name} must be an integer, got {type(pos).__name__}.') from None
    if not 0 <= pos <= size:
        raise StateError(f'{name} must lie in [0, {size}], got {pos}.')
    return pos


def _warn_if_degenerate(p: int):
    if p == 0:
        warnings.warn(
            'ranluxpp: skip exponent p=0 sets the multiplier to 1, '
            'so every draw repeats the same state.',
            UserWarning,
            stacklevel=3,
        )


@dataclass(frozen=True)
class RanluxppState:
    """Complete, restorable snapshot of a :class:`Ranluxpp` generator.

    Attributes
    ----------
    x : int
        Current position in the sequence, a residue in ``[0, m)``.
    A : int
        Current multiplier, a residue in ``[0, m)``.
    float_pos : int
        Number of already consumed entries of ``floats`` (``24`` when empty).
    double_pos : int
        Number of already consumed entries of ``doubles`` (``11`` when empty).
    floats : tuple of float
        The 24 single-precision values of the last buffered extraction.
    doubles : tuple of float
        The 11 double-precision values of the last buffered extraction.
    """
    x: int
    A: int
    float_pos: int
    double_pos: int
    floats: Tuple[float, ...]
    doubles: Tuple[float, ...]


class Ranluxpp:
    """RANLUX++ pseudorandom number generator.

    A linear congruential generator ``x <- x * A mod m`` with
    ``m = 2^576 - 2^240 + 1`` and ``A = a^p``, where ``a`` is the LCG
    multiplier equivalent to the RANLUX subtract-with-borrow recurrence
    and ``p`` the skip exponent (decimation factor).  Every state yields
    24 single-precision or 11 double-precision uniforms in ``[0, 1)``.

    Parameters
    ----------
    seed : int, optional
        Unsigned 64-bit seed.  Distinct seeds start exactly ``2^96`` draws
        apart on the sequence generated by ``A``.  Defaults to ``0``.
    p : int, optional
        Unsigned 64-bit skip exponent: the number of steps of the underlying
        recurrence folded into one draw.  The cost per draw does not depend
        on ``p``; only the setup exponentiation grows with ``log2(p)``.
        Defaults to :data:`~ranluxpp.config.DEFAULT_SKIP` (2048).  The
        persisted user default is only consulted by the command line.

    See Also
    --------
    RanluxppState : Snapshot returned by :attr:`state`.

    Notes
    -----
    An instance is owned by a single thread.  Separate instances share no
    mutable state and can be used from separate threads.

    Output is independent of how it is batched: any sequence of
    :meth:`read_floats` calls returns the same values as one call of the
    total size, and likewise for :meth:`read_doubles`.

    Examples
    --------
    .. code-block:: python

        >>> import ranluxpp
        >>> rng = ranluxpp.Ranluxpp(seed=42, p=2048)
        >>> u = rng.read_doubles(1000)
        >>> rng.jump(10 ** 6)
        >>> v = rng.read_floats(24)
    """

    def __init__(self, seed: int = 0, p: int = DEFAULT_SKIP):
        p = _check_uint64(p, 'p')
        seed = _check_uint64(seed, 'seed')
        _warn_if_degenerate(p)

        self._x = identity_residue()
        self._A = multiplier_power(p)
        self._invalidate_buffers()
        self._init(seed)

    def _init(self, seed: int):
        a = self._A.copy()
        powmod(a, 1 << _SEED_STRIDE_LOG2)
        powmod(a, 1 << _SEED_STRIDE_LOG2)
        powmod(a, seed)
        mul9x9mod(self._x, a)

    def _invalidate_buffers(self):
        self._floats = np.zeros(NFLOATS, dtype=np.float32)
        self._doubles = np.zeros(NDOUBLES, dtype=np.float64)
        self._fpos = NFLOATS
        self._dpos = NDOUBLES

    def __repr__(self):
        return (
            f'{type(self).__name__}(float_pos={self._fpos}, double_pos={self._dpos}, '
            f'x=0x{residue_to_int(self._x):x})'
        )

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def x(self) -> np.ndarray:
        """A copy of the current state residue, a ``(9,)`` ``uint64`` array."""
        return self._x.copy()

    @property
    def multiplier(self) -> np.ndarray:
        """A copy of the current multiplier ``A``, a ``(9,)`` ``uint64`` array."""
        return self._A.copy()

    @property
    def state(self) -> RanluxppState:
        """Snapshot of the full generator state.

        Assigning a snapshot restores the generator exactly, including any
        buffered values not yet returned, so the output after restoring is
        identical to the output after taking the snapshot.

        Raises
        ------
        TypeError
            If the assigned value is not a :class:`RanluxppState`.
        ResidueRangeError
            If ``x`` or ``A`` is not a residue in ``[0, m)``.
        StateError
            If a cursor is not an integer in range or a buffer is malformed.
        """
        return RanluxppState(
            x=residue_to_int(self._x),
            A=residue_to_int(self._A),
            float_pos=self._fpos,
            double_pos=self._dpos,
            floats=tuple(float(v) for v in self._floats),
            doubles=tuple(float(v) for v in self._doubles),
        )

    @state.setter
    def state(self, value: RanluxppState):
        if not isinstance(value, RanluxppState):
            raise TypeError(f'Expected a RanluxppState, got {type(value).__name__}.')
        x = check_residue(value.x)
        A = check_residue(value.A)
        float_pos = _check_cursor(value.float_pos, NFLOATS, 'float_pos')
        double_pos = _check_cursor(value.double_pos, NDOUBLES, 'double_pos')
        floats = np.asarray(value.floats, dtype=np.float32)
        doubles = np.asarray(value.doubles, dtype=np.float64)
        if floats.shape != (NFLOATS,) or doubles.shape != (NDOUBLES,):
            raise StateError(
                f'Expected {NFLOATS} buffered floats and {NDOUBLES} buffered doubles, '
                f'got {floats.size} and {doubles.size}.'
            )
        # NaN fails both comparisons
        if not (np.all((floats >= 0) & (floats < 1)) and np.all((doubles >= 0) & (doubles < 1))):
            raise StateError('Buffered values must lie in [0, 1).')
        self._x = x
        self._A = A
        self._fpos = float_pos
        self._dpos = double_pos
        self._floats = floats
        self._doubles = doubles

    def copy(self) -> 'Ranluxpp':
        """Return an independent generator that produces the same future output."""
        other = object.__new__(type(self))
        other._x = self._x.copy()
        other._A = self._A.copy()
        other._floats = self._floats.copy()
        other._doubles = self._doubles.copy()
        other._fpos = self._fpos
        other._dpos = self._dpos
        return other

    # ------------------------------------------------------------------
    # Recurrence
    # ------------------------------------------------------------------

    def next_state(self):
        """Advance one draw: ``x <- x * A mod m``.

        Buffered values are left untouched.
        """
        mul9x9mod(self._x, self._A)

    def _next_states(self, k: int) -> np.ndarray:
        states = np.empty((k, NLIMBS), dtype=np.uint64)
        for row in states:
            self.next_state()
            row[:] = self._x
        return states

    def _read_batched(self, out: np.ndarray, buffer: np.ndarray, pos: int, unpack) -> int:
        batch = buffer.shape[0]
        n = out.shape[0]
        i = 0

        # leftovers of the previous extraction
        if pos < batch:
            i = min(batch - pos, n)
            out[:i] = buffer[pos:pos + i]
            pos += i

        # whole states go straight to the output
        nstates = (n - i) // batch
        if nstates:
            unpack(self._next_states(nstates), out[i:i + nstates * batch])
            i += nstates * batch

        # partial state is buffered, the rest is served by the next call
        if i < n:
            self.next_state()
            unpack(self._x, buffer)
            pos = n - i
            out[i:] = buffer[:pos]
        return pos

    def read_floats(self, n: int, out: Optional[np.ndarray] = None) -> np.ndarray:
        """Read ``n`` single-precision uniforms in ``[0, 1)``.

        Parameters
        ----------
        n : int
            Number of values. ``0`` returns an empty array and does not
            touch the generator.
        out : np.ndarray, optional
            Destination, a one-dimensional ``float32`` array of length ``n``.

        Returns
        -------
        out : np.ndarray
            The filled ``float32`` array.

        Raises
        ------
        ValueError
            If ``n`` is negative or ``out`` has the wrong dtype or shape.
        """
        out = _check_output(n, out, np.float32)
        self._fpos = self._read_batched(out, self._floats, self._fpos, unpack_floats)
        return out

    def read_doubles(self, n: int, out: Optional[np.ndarray] = None) -> np.ndarray:
        """Read ``n`` double-precision uniforms in ``[0, 1)``.

        Each value carries 52 random mantissa bits.

        Parameters
        ----------
        n : int
            Number of values. ``0`` returns an empty array and does not
            touch the generator.
        out : np.ndarray, optional
            Destination, a one-dimensional ``float64`` array of length ``n``.

        Returns
        -------
        out : np.ndarray
            The filled ``float64`` array.

        Raises
        ------
        ValueError
            If ``n`` is negative or ``out`` has the wrong dtype or shape.
        """
        out = _check_output(n, out, np.float64)
        self._dpos = self._read_batched(out, self._doubles, self._dpos, unpack_doubles)
        return out

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def seed(self, seed: int):
        """Restart the sequence of the current multiplier at ``seed``.

        Equivalent to constructing a new generator with the same ``A``.
        Buffered values are discarded.
        """
        seed = _check_uint64(seed, 'seed')
        self._x = identity_residue()
        self._invalidate_buffers()
        self._init(seed)

    def jump(self, n: int):
        """Move the position forward by ``n`` steps of the base multiplier ``a``.

        Computes ``x <- x * a^n mod m`` in ``O(log n)`` multiplications.  The
        step is always the base multiplier, independent of :meth:`set_skip`
        or :meth:`select_primitive_multiplier`.  Buffered values belong to
        the old position and are discarded, so the next read starts at the
        first state after the jump.

        Parameters
        ----------
        n : int
            Unsigned 64-bit number of steps.
        """
        n = _check_uint64(n, 'n')
        mul9x9mod(self._x, multiplier_power(n))
        self._invalidate_buffers()

    def set_skip(self, n: int):
        """Set the multiplier to ``A = a^n``, keeping the current position."""
        n = _check_uint64(n, 'n')
        _warn_if_degenerate(n)
        self._A = multiplier_power(n)

    def select_primitive_multiplier(self):
        """Set the multiplier to ``A = a^2048 + 13 mod m``.

        This ``A`` is a primitive element modulo ``m``, so the recurrence
        visits all ``m - 1`` non-zero residues before repeating.  The current
        position is kept.
        """
        base = residue_to_int(multiplier_power(_PRIMITIVE_POWER))
        self._A = int_to_residue((base + _PRIMITIVE_OFFSET) % MODULUS)

    # ------------------------------------------------------------------
    # Distributions
    # ------------------------------------------------------------------

    def random(self, size: Size = None, dtype=np.float64):
        """Uniform values in ``[0, 1)``.

        ``float32`` draws come from :meth:`read_floats`, ``float64`` draws
        from :meth:`read_doubles`.  ``size=None`` returns a Python float.
        """
        dtype = np.dtype(dtype)
        if dtype == np.float32:
            reader = self.read_floats
        elif dtype == np.float64:
            reader = self.read_doubles
        else:
            raise ValueError(f'dtype must be float32 or float64, got {dtype}.')
        if size is None:
            return float(reader(1)[0])
        shape = _size_to_shape(size)
        return reader(math.prod(shape)).reshape(shape)

    def uniform(self, low: float = 0.0, high: float = 1.0, size: Size = None, dtype=np.float64):
        """Uniform values in ``[low, high)``."""
        u = self.random(size, dtype)
        return u * (high - low) + low

    def normal(self, loc: float = 0.0, scale: float = 1.0, size: Size = None, epsilon: float = 1e-10):
        """Normal values ``N(loc, scale)`` by the Box-Muller transform on double draws."""
        shape = () if size is None else _size_to_shape(size)
        n = math.prod(shape)
        u = self.read_doubles(2 * n)
        u1 = np.maximum(u[0::2], epsilon)
        u2 = u[1::2]
        z = np.sqrt(-2.0 * np.log(u1)) * np.sin(2.0 * np.pi * u2)
        z = loc + scale * z
        if size is None:
            return float(z[0])
        return z.reshape(shape)

    def random_integers(self, low: int, high: int, size: Size = None):
        """Integers in ``[low, high]`` (inclusive) from 52-bit double mantissas.

        Raises
        ------
        ValueError
            If ``high < low``, a bound lies outside the ``int64`` range, or
            the range holds more than ``2^52`` values.
        """
        low = operator.index(low)
        high = operator.index(high)
        for bound in (low, high):
            if not -2 ** 63 <= bound < 2 ** 63:
                raise ValueError(f'Bounds must fit in a signed 64-bit integer, got {bound}.')
        span = high - low + 1
        if span <= 0:
            raise ValueError(f'high must not be smaller than low, got low={low}, high={high}.')
        if span > 2 ** 52:
            raise ValueError(f'The range [low, high] may hold at most 2^52 values, got {span}.')
        shape = () if size is None else _size_to_shape(size)
        mantissas = (self.read_doubles(math.prod(shape)) * 2.0 ** 52).astype(np.int64)
        values = low + mantissas % span
        if size is None:
            return int(values[0])
        return values.reshape(shape)
