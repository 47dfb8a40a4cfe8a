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

__version__ = "0.1.0"

from ._error import ResidueRangeError, StateError
from ._generator import Ranluxpp, RanluxppState
from ._jax import jax_keys, jax_random
from ._mulmod import MODULUS, check_residue, int_to_residue, mul9x9mod, residue_to_int
from ._powmod import MULTIPLIER, multiplier_power, powmod
from ._unpack import unpack_doubles, unpack_floats
from .config import (
    clear_user_defaults,
    get_config_path,
    get_default_skip,
    get_numba_num_threads,
    get_numba_parallel,
    invalidate_cache,
    load_user_defaults,
    set_default_skip,
    set_numba_parallel,
)

__all__ = [

    # --- generator --- #
    'Ranluxpp',
    'RanluxppState',

    # --- modular arithmetic --- #
    'MODULUS',
    'MULTIPLIER',
    'mul9x9mod',
    'powmod',
    'multiplier_power',
    'residue_to_int',
    'int_to_residue',
    'check_residue',

    # --- field extraction --- #
    'unpack_floats',
    'unpack_doubles',

    # --- JAX interop --- #
    'jax_random',
    'jax_keys',

    # --- configuration --- #
    'get_default_skip',
    'set_default_skip',
    'load_user_defaults',
    'clear_user_defaults',
    'get_config_path',
    'invalidate_cache',
    'set_numba_parallel',
    'get_numba_parallel',
    'get_numba_num_threads',

    # --- errors --- #
    'ResidueRangeError',
    'StateError',

]
