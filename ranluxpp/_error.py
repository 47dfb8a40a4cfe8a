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


__all__ = [
    'ResidueRangeError',
    'StateError',
]


class ResidueRangeError(ValueError):
    """Raised when a value cannot be used as a residue modulo ``m = 2^576 - 2^240 + 1``.

    Every residue handled by ranluxpp is a ``(9,)`` ``uint64`` array whose
    integer value lies in ``[0, m)``.  The multiplication primitive relies on
    this bound and does not check it on the hot path, so it is enforced
    wherever a residue enters the package from the outside.

    Parameters
    ----------
    message : str
        A human-readable description of the offending value.

    See Also
    --------
    StateError : Raised for malformed generator checkpoints.

    Examples
    --------
    .. code-block:: python

        >>> from ranluxpp._mulmod import int_to_residue, MODULUS
        >>> int_to_residue(MODULUS)  # doctest: +SKIP
        Traceback (most recent call last):
            ...
        ranluxpp.ResidueRangeError: residue must lie in [0, m), got a 576-bit value >= m
    """
    __module__ = 'ranluxpp'


class StateError(ValueError):
    """Raised when a generator checkpoint cannot be restored.

    :attr:`~ranluxpp.Ranluxpp.state` accepts only a
    :class:`~ranluxpp.RanluxppState` whose cursors lie in their valid ranges
    (``[0, 24]`` for single precision, ``[0, 11]`` for double precision) and
    whose field buffers have the expected shapes.

    Parameters
    ----------
    message : str
        A human-readable description of the inconsistency.

    See Also
    --------
    ResidueRangeError : Raised when ``x`` or ``A`` is not a valid residue.
    """
    __module__ = 'ranluxpp'
