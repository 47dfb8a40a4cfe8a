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
Bridges from a :class:`~ranluxpp.Ranluxpp` stream into JAX.

Draws are always produced on the host by the generator; these helpers
only move them into ``jax.Array`` form, either as uniform samples or as
typed PRNG keys that seed JAX's own counter-based generators.
"""

from typing import Sequence, Union

import jax
import jax.numpy as jnp
import numpy as np

from ._generator import Ranluxpp

__all__ = [
    'jax_random',
    'jax_keys',
]

# uint32 words of key data per JAX PRNG implementation
_KEY_WORDS = {
    'threefry2x32': 2,
    'rbg': 4,
    'unsafe_rbg': 4,
}


def jax_random(
    generator: Ranluxpp,
    shape: Union[int, Sequence[int]],
    dtype=jnp.float32,
) -> jax.Array:
    """Return a ``jax.Array`` of uniforms in ``[0, 1)`` drawn from ``generator``.

    Parameters
    ----------
    generator : Ranluxpp
        The source stream; it advances exactly as :meth:`Ranluxpp.random`.
    shape : int or sequence of int
        Output shape.
    dtype : dtype, optional
        ``float32`` (default) or ``float64``.  ``float64`` output requires
        ``jax.config.update('jax_enable_x64', True)``; otherwise JAX
        narrows it to ``float32``.

    Returns
    -------
    jax.Array
        The samples.
    """
    dtype = np.dtype(dtype)
    samples = generator.random(shape, dtype=dtype)
    return jnp.asarray(samples, dtype=dtype)


def jax_keys(generator: Ranluxpp, num: int, impl: str = 'threefry2x32') -> jax.Array:
    """Return ``num`` typed JAX PRNG keys whose key data come from ``generator``.

    Every ``uint32`` word of key data is the low half of the 52-bit mantissa
    of one double-precision draw.

    Parameters
    ----------
    generator : Ranluxpp
        The source stream.
    num : int
        Number of keys.
    impl : str, optional
        JAX PRNG implementation name: ``'threefry2x32'`` (default),
        ``'rbg'`` or ``'unsafe_rbg'``.

    Returns
    -------
    jax.Array
        A key array of shape ``(num,)``.

    Raises
    ------
    ValueError
        If ``impl`` is not a supported implementation or ``num`` is negative.

    Examples
    --------
    .. code-block:: python

        >>> import jax, ranluxpp
        >>> rng = ranluxpp.Ranluxpp(seed=7)
        >>> keys = ranluxpp.jax_keys(rng, 4)
        >>> x = jax.random.normal(keys[0], (3,))
    """
    if impl not in _KEY_WORDS:
        raise ValueError(f'Unsupported PRNG implementation {impl!r}; choose from {sorted(_KEY_WORDS)}.')
    if num < 0:
        raise ValueError(f'num must be non-negative, got {num}.')
    words = _KEY_WORDS[impl]
    mantissas = (generator.read_doubles(num * words) * 2.0 ** 52).astype(np.uint64)
    data = (mantissas & np.uint64(0xFFFFFFFF)).astype(np.uint32).reshape(num, words)
    return jax.random.wrap_key_data(jnp.asarray(data), impl=impl)
