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

import dataclasses

import numpy as np
import pytest

from ranluxpp import config
from ranluxpp._error import ResidueRangeError, StateError
from ranluxpp._generator import Ranluxpp, RanluxppState
from ranluxpp._mulmod import MODULUS, residue_to_int
from ranluxpp._powmod import MULTIPLIER, multiplier_power
from ranluxpp._unpack_test import A_DOUBLE_FIELDS, A_FLOAT_FIELDS

A_INT = residue_to_int(MULTIPLIER)


def _concat_reads(rng, sizes, precision):
    read = rng.read_floats if precision == 'single' else rng.read_doubles
    return np.concatenate([read(n) for n in sizes])


class TestConstruction:
    def test_initial_cursors(self):
        rng = Ranluxpp(seed=3, p=24)
        state = rng.state
        assert state.float_pos == 24
        assert state.double_pos == 11

    def test_multiplier(self):
        rng = Ranluxpp(seed=0, p=389)
        assert residue_to_int(rng.multiplier) == pow(A_INT, 389, MODULUS)

    def test_seed_zero_starts_at_one(self):
        rng = Ranluxpp(seed=0, p=2048)
        assert residue_to_int(rng.x) == 1

    def test_seed_position(self):
        rng = Ranluxpp(seed=5, p=24)
        A = pow(A_INT, 24, MODULUS)
        assert residue_to_int(rng.x) == pow(A, 2 ** 96 * 5, MODULUS)

    def test_p_zero_warns(self):
        with pytest.warns(UserWarning, match='p=0'):
            Ranluxpp(seed=1, p=0)

    @pytest.mark.parametrize('seed', [-1, 2 ** 64])
    def test_seed_out_of_range(self, seed):
        with pytest.raises(ValueError):
            Ranluxpp(seed=seed, p=24)

    def test_p_out_of_range(self):
        with pytest.raises(ValueError):
            Ranluxpp(seed=0, p=-5)

    def test_seed_not_integer(self):
        with pytest.raises(TypeError):
            Ranluxpp(seed=1.5, p=24)

    def test_largest_seed(self):
        rng = Ranluxpp(seed=2 ** 64 - 1, p=1)
        assert 0 < residue_to_int(rng.x) < MODULUS

    def test_ignores_persisted_default_skip(self, tmp_path, monkeypatch):
        config_path = str(tmp_path / 'ranluxpp' / 'defaults.json')
        monkeypatch.setattr(config, 'get_config_path', lambda: config_path)
        config.invalidate_cache()
        try:
            before = Ranluxpp(seed=0).read_doubles(11)
            config.set_default_skip(24)
            rng = Ranluxpp(seed=0)
            np.testing.assert_array_equal(rng.multiplier, multiplier_power(config.DEFAULT_SKIP))
            np.testing.assert_array_equal(rng.read_doubles(11), before)
        finally:
            config.invalidate_cache()

    def test_builtin_default_skip(self):
        rng = Ranluxpp(seed=0)
        np.testing.assert_array_equal(rng.multiplier, multiplier_power(2048))


class TestGoldenValues:
    def test_seed1_p0_single(self):
        with pytest.warns(UserWarning):
            rng = Ranluxpp(seed=1, p=0)
        values = rng.read_floats(24)
        expected = np.zeros(24, dtype=np.float32)
        expected[0] = np.float32(2.0 ** -24)
        np.testing.assert_array_equal(values, expected)

    def test_seed0_p1_single(self):
        rng = Ranluxpp(seed=0, p=1)
        values = rng.read_floats(24)
        expected = np.ldexp(np.asarray(A_FLOAT_FIELDS, dtype=np.float64), -24).astype(np.float32)
        np.testing.assert_array_equal(values, expected)

    def test_seed0_p1_double(self):
        rng = Ranluxpp(seed=0, p=1)
        values = rng.read_doubles(11)
        expected = np.ldexp(np.asarray(A_DOUBLE_FIELDS, dtype=np.float64), -52)
        np.testing.assert_array_equal(values, expected)

    def test_seed0_p1_second_state(self):
        rng = Ranluxpp(seed=0, p=1)
        rng.read_floats(24)
        values = rng.read_floats(24)
        a2 = pow(A_INT, 2, MODULUS)
        fields = []
        for g in range(3):
            group = (a2 >> (192 * g)) & (2 ** 192 - 1)
            fields.extend((group >> (24 * j)) & 0xFFFFFF for j in range(8))
        np.testing.assert_array_equal(values.astype(np.float64), np.asarray(fields, dtype=np.float64) / 2.0 ** 24)


class TestDeterminism:
    @pytest.mark.parametrize('precision', ['single', 'double'])
    def test_same_seed_same_output(self, precision):
        sizes = [3, 50, 1, 24, 11, 7]
        r1 = _concat_reads(Ranluxpp(seed=42, p=2048), sizes, precision)
        r2 = _concat_reads(Ranluxpp(seed=42, p=2048), sizes, precision)
        np.testing.assert_array_equal(r1, r2)

    def test_different_seeds_differ(self):
        r1 = Ranluxpp(seed=1, p=24).read_doubles(22)
        r2 = Ranluxpp(seed=2, p=24).read_doubles(22)
        assert not np.array_equal(r1, r2)

    def test_interleaved_precisions(self):
        def run():
            rng = Ranluxpp(seed=9, p=24)
            return np.concatenate([
                rng.read_floats(5).astype(np.float64),
                rng.read_doubles(13),
                rng.read_floats(30).astype(np.float64),
                rng.read_doubles(4),
            ])

        np.testing.assert_array_equal(run(), run())


class TestRange:
    def test_floats(self):
        values = Ranluxpp(seed=11, p=2048).read_floats(24 * 200)
        assert values.dtype == np.float32
        assert np.all(values >= 0)
        assert np.all(values < 1)

    def test_doubles(self):
        values = Ranluxpp(seed=11, p=2048).read_doubles(11 * 200)
        assert values.dtype == np.float64
        assert np.all(values >= 0)
        assert np.all(values < 1)

    def test_statistical_mean_std(self):
        values = Ranluxpp(seed=123, p=2048).read_doubles(20000)
        assert 0.48 <= values.mean() <= 0.52
        assert 0.27 <= values.std() <= 0.31


class TestBatchingConsistency:
    @pytest.mark.parametrize(
        'sizes',
        [
            [100],
            [1, 99],
            [23, 77],
            [24, 76],
            [25, 75],
            [1, 23, 24, 5, 47],
            [0, 10, 0, 90],
            [11, 11, 11, 67],
        ],
    )
    @pytest.mark.parametrize('precision', ['single', 'double'])
    def test_split_equals_single_read(self, sizes, precision):
        assert sum(sizes) == 100
        whole = _concat_reads(Ranluxpp(seed=7, p=24), [100], precision)
        split = _concat_reads(Ranluxpp(seed=7, p=24), sizes, precision)
        np.testing.assert_array_equal(whole, split)

    def test_one_at_a_time(self):
        whole = Ranluxpp(seed=8, p=24).read_doubles(40)
        rng = Ranluxpp(seed=8, p=24)
        single = np.array([rng.read_doubles(1)[0] for _ in range(40)])
        np.testing.assert_array_equal(whole, single)

    def test_cursor_after_tail(self):
        rng = Ranluxpp(seed=8, p=24)
        rng.read_floats(30)
        assert rng.state.float_pos == 6
        rng.read_doubles(25)
        assert rng.state.double_pos == 3

    def test_bulk_phase_bypasses_buffer(self):
        rng = Ranluxpp(seed=8, p=24)
        rng.read_floats(48)
        assert rng.state.float_pos == 24

    def test_zero_read_is_noop(self):
        rng = Ranluxpp(seed=8, p=24)
        rng.read_floats(5)
        before = rng.state
        assert rng.read_floats(0).shape == (0,)
        assert rng.read_doubles(0).shape == (0,)
        assert rng.state == before


class TestOutputArgument:
    def test_fills_given_array(self):
        rng = Ranluxpp(seed=1, p=24)
        out = np.empty(30, dtype=np.float32)
        result = rng.read_floats(30, out)
        assert result is out
        np.testing.assert_array_equal(out, Ranluxpp(seed=1, p=24).read_floats(30))

    def test_wrong_dtype(self):
        with pytest.raises(ValueError):
            Ranluxpp(seed=1, p=24).read_floats(4, np.empty(4, dtype=np.float64))

    def test_wrong_length(self):
        with pytest.raises(ValueError):
            Ranluxpp(seed=1, p=24).read_doubles(4, np.empty(5, dtype=np.float64))

    def test_not_an_array(self):
        with pytest.raises(TypeError):
            Ranluxpp(seed=1, p=24).read_doubles(2, [0.0, 0.0])

    def test_negative_count(self):
        with pytest.raises(ValueError):
            Ranluxpp(seed=1, p=24).read_floats(-1)


# Small-modulus model of the seeding scheme: prime modulus 65537 with
# primitive root 3, and stride (2^4)^2 = 256 in place of (2^48)^2.
SMALL_MODULUS = 65537
SMALL_BASE = 3
SMALL_STRIDE_LOG2 = 4


def _small_seed_start(seed, p):
    A = pow(SMALL_BASE, p, SMALL_MODULUS)
    a = pow(pow(A, 1 << SMALL_STRIDE_LOG2, SMALL_MODULUS), 1 << SMALL_STRIDE_LOG2, SMALL_MODULUS)
    return A, pow(a, seed, SMALL_MODULUS)


def _small_orbit(seed, p, length):
    A, x = _small_seed_start(seed, p)
    points = []
    for _ in range(length):
        x = x * A % SMALL_MODULUS
        points.append(x)
    return points


class TestSeedSeparation:
    @pytest.mark.parametrize('p', [1, 24, 2048])
    def test_consecutive_seeds_are_2_96_draws_apart(self, p):
        s = 1000
        x_s = Ranluxpp(seed=s, p=p).state.x
        x_next = Ranluxpp(seed=s + 1, p=p).state.x
        A = pow(A_INT, p, MODULUS)
        assert x_next == x_s * pow(A, 2 ** 96, MODULUS) % MODULUS

    @pytest.mark.parametrize('p', [1, 3, 2049])
    def test_small_modulus_orbits_are_disjoint(self, p):
        stride = 1 << (2 * SMALL_STRIDE_LOG2)
        orbits = [_small_orbit(s, p, stride) for s in range(8)]
        points = set()
        for orbit in orbits:
            assert len(set(orbit)) == stride
            points.update(orbit)
        assert len(points) == 8 * stride

    @pytest.mark.parametrize('p', [1, 3, 2049])
    def test_small_modulus_orbit_ends_at_next_seed(self, p):
        stride = 1 << (2 * SMALL_STRIDE_LOG2)
        for s in range(4):
            assert _small_orbit(s, p, stride)[-1] == _small_seed_start(s + 1, p)[1]

    def test_two_jumps_compose(self):
        rng = Ranluxpp(seed=3, p=1)
        start = residue_to_int(rng.x)
        rng.jump(2 ** 48)
        rng.jump(2 ** 48)
        assert residue_to_int(rng.x) == start * pow(A_INT, 2 ** 49, MODULUS) % MODULUS

    def test_reseed_matches_constructor(self):
        rng = Ranluxpp(seed=3, p=24)
        rng.read_doubles(5)
        rng.read_floats(5)
        rng.seed(17)
        assert rng.state == Ranluxpp(seed=17, p=24).state
        np.testing.assert_array_equal(rng.read_doubles(30), Ranluxpp(seed=17, p=24).read_doubles(30))


class TestJump:
    @pytest.mark.parametrize('n', [0, 1, 7, 1000])
    def test_equals_repeated_advances(self, n):
        jumped = Ranluxpp(seed=5, p=1)
        jumped.jump(n)
        stepped = Ranluxpp(seed=5, p=1)
        for _ in range(n):
            stepped.next_state()
        np.testing.assert_array_equal(jumped.read_floats(24), stepped.read_floats(24))

    def test_uses_base_multiplier(self):
        rng = Ranluxpp(seed=0, p=2048)
        rng.jump(10)
        assert residue_to_int(rng.x) == pow(A_INT, 10, MODULUS)

    def test_keeps_multiplier(self):
        rng = Ranluxpp(seed=0, p=389)
        before = rng.multiplier
        rng.jump(12345)
        np.testing.assert_array_equal(rng.multiplier, before)

    def test_discards_buffered_values(self):
        rng = Ranluxpp(seed=2, p=24)
        rng.read_floats(5)
        rng.jump(0)
        assert rng.state.float_pos == 24
        assert rng.state.double_pos == 11

        reference = Ranluxpp(seed=2, p=24)
        reference.read_floats(24)
        np.testing.assert_array_equal(rng.read_floats(24), reference.read_floats(24))

    def test_snapshot_after_jump_has_empty_buffers(self):
        rng = Ranluxpp(seed=2, p=24)
        rng.read_floats(5)
        rng.read_doubles(5)
        rng.jump(3)
        state = rng.state
        assert state.floats == (0.0,) * 24
        assert state.doubles == (0.0,) * 11

        fresh = Ranluxpp(seed=2, p=24)
        fresh.next_state()
        fresh.next_state()
        fresh.jump(3)
        assert state == fresh.state

    def test_out_of_range(self):
        with pytest.raises(ValueError):
            Ranluxpp(seed=0, p=24).jump(2 ** 64)


class TestSetSkip:
    def test_sets_multiplier(self):
        rng = Ranluxpp(seed=0, p=24)
        rng.set_skip(389)
        assert residue_to_int(rng.multiplier) == pow(A_INT, 389, MODULUS)

    def test_keeps_position_and_buffers(self):
        rng = Ranluxpp(seed=4, p=24)
        first = rng.read_floats(5)
        x = rng.x
        rng.set_skip(2048)
        np.testing.assert_array_equal(rng.x, x)
        rest = rng.read_floats(19)

        reference = Ranluxpp(seed=4, p=24).read_floats(24)
        np.testing.assert_array_equal(np.concatenate([first, rest]), reference)

    def test_changes_future_trajectory(self):
        a = Ranluxpp(seed=4, p=24)
        b = Ranluxpp(seed=4, p=24)
        b.set_skip(48)
        assert not np.array_equal(a.read_doubles(11), b.read_doubles(11))

    def test_equivalent_to_construction(self):
        rng = Ranluxpp(seed=0, p=24)
        rng.set_skip(48)
        np.testing.assert_array_equal(rng.read_doubles(33), Ranluxpp(seed=0, p=48).read_doubles(33))

    def test_zero_warns(self):
        rng = Ranluxpp(seed=0, p=24)
        with pytest.warns(UserWarning):
            rng.set_skip(0)


class TestPrimitiveMultiplier:
    def test_value(self):
        rng = Ranluxpp(seed=0, p=24)
        rng.select_primitive_multiplier()
        expected = (pow(A_INT, 2048, MODULUS) + 13) % MODULUS
        assert residue_to_int(rng.multiplier) == expected

    def test_keeps_position(self):
        rng = Ranluxpp(seed=6, p=24)
        x = rng.x
        rng.select_primitive_multiplier()
        np.testing.assert_array_equal(rng.x, x)

    def test_output_follows_new_multiplier(self):
        rng = Ranluxpp(seed=0, p=24)
        rng.select_primitive_multiplier()
        values = rng.read_doubles(11)
        A = (pow(A_INT, 2048, MODULUS) + 13) % MODULUS
        mantissas = [(A >> (52 * j)) & (2 ** 52 - 1) for j in range(11)]
        np.testing.assert_array_equal(values, np.asarray(mantissas, dtype=np.float64) / 2.0 ** 52)


class TestState:
    def test_round_trip(self):
        rng = Ranluxpp(seed=10, p=24)
        rng.read_floats(5)
        rng.read_doubles(3)
        snapshot = rng.state
        expected = np.concatenate([rng.read_floats(50).astype(np.float64), rng.read_doubles(50)])

        other = Ranluxpp(seed=99, p=2048)
        other.state = snapshot
        got = np.concatenate([other.read_floats(50).astype(np.float64), other.read_doubles(50)])
        np.testing.assert_array_equal(got, expected)

    def test_snapshot_is_immutable(self):
        snapshot = Ranluxpp(seed=1, p=24).state
        with pytest.raises(dataclasses.FrozenInstanceError):
            snapshot.float_pos = 0

    def test_rejects_wrong_type(self):
        rng = Ranluxpp(seed=1, p=24)
        with pytest.raises(TypeError):
            rng.state = {'x': 1}

    def test_rejects_bad_residue(self):
        rng = Ranluxpp(seed=1, p=24)
        bad = dataclasses.replace(rng.state, x=MODULUS)
        with pytest.raises(ResidueRangeError):
            rng.state = bad

    def test_rejects_bad_cursor(self):
        rng = Ranluxpp(seed=1, p=24)
        with pytest.raises(StateError):
            rng.state = dataclasses.replace(rng.state, float_pos=25)
        with pytest.raises(StateError):
            rng.state = dataclasses.replace(rng.state, double_pos=-1)

    def test_rejects_bad_buffer(self):
        rng = Ranluxpp(seed=1, p=24)
        with pytest.raises(StateError):
            rng.state = dataclasses.replace(rng.state, floats=(0.5,) * 23)
        with pytest.raises(StateError):
            rng.state = dataclasses.replace(rng.state, doubles=(1.0,) * 11)

    def test_rejects_non_integer_cursor(self):
        rng = Ranluxpp(seed=1, p=24)
        with pytest.raises(StateError):
            rng.state = dataclasses.replace(rng.state, float_pos=3.0)
        with pytest.raises(StateError):
            rng.state = dataclasses.replace(rng.state, double_pos='2')

    def test_accepts_numpy_integer_cursor(self):
        rng = Ranluxpp(seed=1, p=24)
        rng.read_floats(3)
        snapshot = rng.state
        expected = rng.read_floats(30)
        rng.state = dataclasses.replace(snapshot, float_pos=np.int64(snapshot.float_pos))
        np.testing.assert_array_equal(rng.read_floats(30), expected)

    def test_rejects_nan_buffer(self):
        rng = Ranluxpp(seed=1, p=24)
        with pytest.raises(StateError):
            rng.state = dataclasses.replace(rng.state, floats=(float('nan'),) + (0.5,) * 23)
        with pytest.raises(StateError):
            rng.state = dataclasses.replace(rng.state, doubles=(0.5,) * 10 + (float('nan'),))

    def test_failed_restore_leaves_generator_untouched(self):
        rng = Ranluxpp(seed=1, p=24)
        before = rng.state
        with pytest.raises(StateError):
            rng.state = dataclasses.replace(before, float_pos=30)
        assert rng.state == before

    def test_isinstance(self):
        assert isinstance(Ranluxpp(seed=1, p=24).state, RanluxppState)


class TestCopy:
    def test_same_future(self):
        rng = Ranluxpp(seed=12, p=24)
        rng.read_floats(7)
        clone = rng.copy()
        np.testing.assert_array_equal(rng.read_floats(60), clone.read_floats(60))

    def test_independent(self):
        rng = Ranluxpp(seed=12, p=24)
        clone = rng.copy()
        clone.read_doubles(30)
        assert rng.state != clone.state


class TestDistributions:
    def test_random_scalar(self):
        v = Ranluxpp(seed=1, p=24).random()
        assert isinstance(v, float)
        assert 0.0 <= v < 1.0

    def test_random_shape_and_dtype(self):
        rng = Ranluxpp(seed=1, p=24)
        x = rng.random((3, 4), dtype=np.float32)
        assert x.shape == (3, 4)
        assert x.dtype == np.float32
        y = rng.random(5)
        assert y.shape == (5,)
        assert y.dtype == np.float64

    def test_random_matches_reader(self):
        x = Ranluxpp(seed=1, p=24).random((2, 11))
        np.testing.assert_array_equal(x.ravel(), Ranluxpp(seed=1, p=24).read_doubles(22))

    def test_random_bad_dtype(self):
        with pytest.raises(ValueError):
            Ranluxpp(seed=1, p=24).random(3, dtype=np.int32)

    def test_uniform_range(self):
        x = Ranluxpp(seed=2, p=24).uniform(-3.0, 5.0, size=1000)
        assert np.all(x >= -3.0)
        assert np.all(x < 5.0)

    def test_normal_statistics(self):
        z = Ranluxpp(seed=3, p=2048).normal(size=20000)
        assert -0.05 <= z.mean() <= 0.05
        assert 0.95 <= z.std() <= 1.05

    def test_normal_loc_scale(self):
        z = Ranluxpp(seed=3, p=2048).normal(100.0, 15.0, size=20000)
        assert 99.0 <= z.mean() <= 101.0
        assert 14.0 <= z.std() <= 16.0

    def test_normal_scalar(self):
        assert isinstance(Ranluxpp(seed=3, p=24).normal(), float)

    def test_random_integers_range(self):
        x = Ranluxpp(seed=4, p=24).random_integers(1, 6, size=600)
        assert x.min() >= 1
        assert x.max() <= 6
        assert set(np.unique(x)) == {1, 2, 3, 4, 5, 6}

    def test_random_integers_same_bounds(self):
        assert Ranluxpp(seed=4, p=24).random_integers(5, 5) == 5

    def test_random_integers_bad_bounds(self):
        with pytest.raises(ValueError):
            Ranluxpp(seed=4, p=24).random_integers(6, 1)

    def test_random_integers_outside_int64(self):
        rng = Ranluxpp(seed=4, p=24)
        with pytest.raises(ValueError, match='64-bit'):
            rng.random_integers(2 ** 63, 2 ** 63 + 5, size=3)
        with pytest.raises(ValueError, match='64-bit'):
            rng.random_integers(-2 ** 63 - 1, 0, size=3)

    def test_random_integers_near_int64_limits(self):
        rng = Ranluxpp(seed=4, p=24)
        top = rng.random_integers(2 ** 63 - 6, 2 ** 63 - 1, size=50)
        assert top.min() >= 2 ** 63 - 6
        bottom = rng.random_integers(-2 ** 63, -2 ** 63 + 5, size=50)
        assert bottom.max() <= -2 ** 63 + 5
