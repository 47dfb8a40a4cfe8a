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

"""User-level configuration persistence for ranluxpp.

Stores command-line defaults (currently the skip exponent used by
``ranluxpp sample`` when ``--skip`` is omitted) in a JSON file at a
platform-appropriate location. :class:`~ranluxpp.Ranluxpp` itself never
reads this file. Supports atomic writes, schema versioning,
and cached loading.

Config locations:
    - Linux:   ~/.config/ranluxpp/defaults.json
    - macOS:   ~/Library/Application Support/ranluxpp/defaults.json
    - Windows: %APPDATA%/ranluxpp/defaults.json
"""

import json
import operator
import os
import platform
import tempfile
import warnings
from typing import Any, Dict, Optional

__all__ = [
    'DEFAULT_SKIP',
    'load_user_defaults',
    'save_user_defaults',
    'get_user_default',
    'set_user_default',
    'clear_user_defaults',
    'get_config_path',
    'invalidate_cache',
    'get_default_skip',
    'set_default_skip',
    'set_numba_parallel',
    'get_numba_parallel',
    'get_numba_num_threads',
]

DEFAULT_SKIP = 2048

_SCHEMA_VERSION = 1
_SUPPORTED_SCHEMA_VERSIONS = {1}
_cache: Optional[Dict[str, Any]] = None


def _empty_config() -> Dict[str, Any]:
    return {'schema_version': _SCHEMA_VERSION, 'defaults': {}}


def get_config_path() -> str:
    """Return the platform-appropriate path for the ranluxpp config file.

    Returns
    -------
    str
        Absolute path to the ``defaults.json`` configuration file.

    Notes
    -----
    The platform-specific base directories are:

    - **Windows**: ``%APPDATA%/ranluxpp/defaults.json`` (falls back to
      ``~/ranluxpp/defaults.json`` if ``APPDATA`` is not set).
    - **macOS**: ``~/Library/Application Support/ranluxpp/defaults.json``.
    - **Linux / other**: ``$XDG_CONFIG_HOME/ranluxpp/defaults.json`` (falls
      back to ``~/.config/ranluxpp/defaults.json`` if ``XDG_CONFIG_HOME`` is
      not set).
    """
    system = platform.system()
    if system == 'Windows':
        base = os.environ.get('APPDATA', os.path.expanduser('~'))
    elif system == 'Darwin':
        base = os.path.join(os.path.expanduser('~'), 'Library', 'Application Support')
    else:
        base = os.environ.get('XDG_CONFIG_HOME', os.path.join(os.path.expanduser('~'), '.config'))
    return os.path.join(base, 'ranluxpp', 'defaults.json')


def _read_config_file(path: str) -> Dict[str, Any]:
    """Read and validate the JSON configuration file.

    Returns an empty default structure if the file is missing, corrupted,
    or has an unsupported schema version.
    """
    if not os.path.isfile(path):
        return _empty_config()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        warnings.warn(
            f"ranluxpp: Corrupted config file at {path}: {e}. Using built-in defaults.",
            stacklevel=3,
        )
        return _empty_config()

    if not isinstance(data, dict):
        warnings.warn(
            f"ranluxpp: Corrupted config file at {path}: expected a JSON object, "
            f"got {type(data).__name__}. Using built-in defaults.",
            stacklevel=3,
        )
        return _empty_config()

    schema_ver = data.get('schema_version', 0)
    if (not isinstance(schema_ver, int) or isinstance(schema_ver, bool)
            or schema_ver not in _SUPPORTED_SCHEMA_VERSIONS):
        warnings.warn(
            f"ranluxpp: Config file schema version {schema_ver!r} is not supported "
            f"(supported: {_SUPPORTED_SCHEMA_VERSIONS}). Ignoring user defaults.",
            stacklevel=3,
        )
        return _empty_config()

    defaults = data.get('defaults', {})
    if not isinstance(defaults, dict):
        warnings.warn(
            f"ranluxpp: Corrupted config file at {path}: 'defaults' must be an object, "
            f"got {type(defaults).__name__}. Using built-in defaults.",
            stacklevel=3,
        )
        return _empty_config()
    data['defaults'] = defaults
    return data


def _write_config_file(path: str, data: Dict[str, Any]):
    """Atomically write the configuration dictionary to a JSON file.

    Uses a temporary file and ``os.replace`` so that the config file is
    never left in a partially written state.
    """
    config_dir = os.path.dirname(path)
    try:
        os.makedirs(config_dir, exist_ok=True)
    except OSError as e:
        warnings.warn(
            f"ranluxpp: Cannot create config directory {config_dir}: {e}. "
            f"Default persistence skipped.",
            stacklevel=3,
        )
        return

    try:
        fd, tmp_path = tempfile.mkstemp(dir=config_dir, suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, sort_keys=True)
                f.write('\n')
            os.replace(tmp_path, path)
        except BaseException:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise
    except OSError as e:
        warnings.warn(
            f"ranluxpp: Cannot write config file {path}: {e}. "
            f"Default persistence skipped.",
            stacklevel=3,
        )


def invalidate_cache():
    """Clear the in-memory configuration cache, forcing a re-read on next access.

    Useful after the config file has been modified by another process or by
    hand.

    See Also
    --------
    load_user_defaults : Load (and cache) user defaults from the config file.
    clear_user_defaults : Remove all user defaults and delete the config file.
    """
    global _cache
    _cache = None


def load_user_defaults() -> Dict[str, Any]:
    """Load user-configured generator defaults from the config file.

    Results are cached in memory; subsequent calls return the cached copy
    unless :func:`invalidate_cache` has been called.

    Returns
    -------
    dict of str to any
        The ``defaults`` section, e.g. ``{'skip': 2048}``. Empty if no
        defaults have been configured.

    Examples
    --------
    .. code-block:: python

        >>> import ranluxpp
        >>> ranluxpp.load_user_defaults()  # doctest: +SKIP
        {'skip': 389}
    """
    global _cache
    if _cache is not None:
        return _cache.get('defaults', {})

    _cache = _read_config_file(get_config_path())
    return _cache.get('defaults', {})


def save_user_defaults(defaults: Dict[str, Any]):
    """Merge ``defaults`` into the config file and write it atomically.

    Existing keys not present in ``defaults`` are kept. The in-memory cache
    is updated to reflect the new state.

    Parameters
    ----------
    defaults : dict of str to any
        JSON-serializable default values keyed by name.
    """
    global _cache
    path = get_config_path()
    existing = _read_config_file(path)
    existing_defaults = existing.get('defaults', {})
    existing_defaults.update(defaults)
    existing['defaults'] = existing_defaults
    existing['schema_version'] = _SCHEMA_VERSION
    _write_config_file(path, existing)
    _cache = existing


def get_user_default(name: str, default: Any = None) -> Any:
    """Return the persisted default called ``name``, or ``default`` if unset."""
    return load_user_defaults().get(name, default)


def set_user_default(name: str, value: Any):
    """Set and persist a single default value."""
    save_user_defaults({name: value})


def clear_user_defaults():
    """Remove all user defaults and delete the config file.

    A ``UserWarning`` is issued if the file cannot be deleted; the in-memory
    cache is cleared in any case.
    """
    global _cache
    path = get_config_path()
    try:
        if os.path.isfile(path):
            os.unlink(path)
    except OSError as e:
        warnings.warn(
            f"ranluxpp: Cannot delete config file {path}: {e}.",
            stacklevel=3,
        )
    _cache = None


def _check_skip(p) -> int:
    p = operator.index(p)
    if not 0 <= p < 2 ** 64:
        raise ValueError(f'The skip exponent must be an unsigned 64-bit integer, got {p}.')
    return p


def get_default_skip() -> int:
    """Return the skip exponent used by ``ranluxpp sample`` when ``--skip`` is omitted.

    Falls back to :data:`DEFAULT_SKIP` when no valid value is persisted.
    """
    value = get_user_default('skip')
    if value is None:
        return DEFAULT_SKIP
    try:
        return _check_skip(value)
    except (TypeError, ValueError):
        warnings.warn(
            f"ranluxpp: Ignoring invalid persisted skip exponent {value!r}. "
            f"Using {DEFAULT_SKIP}.",
            stacklevel=2,
        )
        return DEFAULT_SKIP


def set_default_skip(p: int):
    """Persist ``p`` as the default skip exponent.

    Raises
    ------
    TypeError
        If ``p`` is not an integer.
    ValueError
        If ``p`` is outside ``[0, 2^64)``.
    """
    set_user_default('skip', _check_skip(p))


_numba_parallel: bool = False
_numba_num_threads: Optional[int] = None


def set_numba_parallel(parallel: bool = True, num_threads: Optional[int] = None):
    """Enable or disable parallel extraction of batched generator states.

    When enabled, the bulk phase of :meth:`~ranluxpp.Ranluxpp.read_floats`
    and :meth:`~ranluxpp.Ranluxpp.read_doubles` unpacks its states with the
    ``parallel=True`` numba kernels. Output is identical either way.

    Parameters
    ----------
    parallel : bool, optional
        If ``True``, enable parallel mode. Defaults to ``True``.
    num_threads : int or None, optional
        Number of threads for Numba's thread pool. If ``None``, the Numba
        default is used.

    Notes
    -----
    Setting ``num_threads`` calls ``numba.set_num_threads``, which affects
    every Numba JIT-compiled function in the process.
    """
    global _numba_parallel, _numba_num_threads
    _numba_parallel = parallel
    _numba_num_threads = num_threads
    if num_threads is not None:
        import numba
        numba.set_num_threads(num_threads)


def get_numba_parallel() -> bool:
    """Return whether parallel extraction is currently enabled."""
    return _numba_parallel


def get_numba_num_threads() -> Optional[int]:
    """Return the configured Numba thread count, or ``None`` if unset."""
    return _numba_num_threads
