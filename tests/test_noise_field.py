import numpy as np

from noise_field import NoiseField


def _grid(n=40, extent=5.0):
    xs, ys = np.meshgrid(np.linspace(-extent, extent, n), np.linspace(-extent, extent, n))
    return xs.ravel(), ys.ravel()


def test_values_lie_in_unit_interval():
    field = NoiseField(seed=1)
    values = field.sample(*_grid(extent=300.0))
    assert values.min() >= 0.0
    assert values.max() <= 1.0


def test_field_is_not_flat():
    field = NoiseField(seed=1)
    values = field.sample(*_grid())
    assert values.std() > 0.01


def test_same_seed_same_values():
    xs, ys = _grid()
    a = NoiseField(seed=42).sample(xs, ys)
    b = NoiseField(seed=42).sample(xs, ys)
    np.testing.assert_array_equal(a, b)


def test_different_seeds_differ():
    xs, ys = _grid()
    a = NoiseField(seed=1).sample(xs, ys)
    b = NoiseField(seed=2).sample(xs, ys)
    assert not np.allclose(a, b)


def test_reseed_reproduces_field():
    xs, ys = _grid()
    field = NoiseField(seed=5)
    original = field.sample(xs, ys)
    field.reseed(6)
    assert not np.allclose(field.sample(xs, ys), original)
    field.reseed(5)
    np.testing.assert_array_equal(field.sample(xs, ys), original)


def test_value_matches_sample():
    field = NoiseField(seed=11)
    assert field.value(0.37, 1.25) == field.sample(np.array([0.37]), np.array([1.25]))[0]


def test_small_moves_give_small_changes():
    field = NoiseField(seed=3)
    xs, ys = _grid(extent=3.0)
    base = field.sample(xs, ys)
    shifted_x = field.sample(xs + 1e-4, ys)
    shifted_y = field.sample(xs, ys + 1e-4)
    assert np.max(np.abs(shifted_x - base)) < 1e-2
    assert np.max(np.abs(shifted_y - base)) < 1e-2


def test_accepts_python_lists():
    field = NoiseField(seed=3)
    values = field.sample([0.1, 0.2], [0.3, 0.4])
    assert values.shape == (2,)


def test_octaves_change_the_field():
    xs, ys = _grid()
    single = NoiseField(seed=8, octaves=1).sample(xs, ys)
    fractal = NoiseField(seed=8, octaves=4).sample(xs, ys)
    assert not np.allclose(single, fractal)


def test_configure_keeps_permutation():
    field = NoiseField(seed=8, octaves=1)
    single = field.value(3.3, 1.7)
    field.configure(4, 0.5)
    assert field.octaves == 4
    assert field.falloff == 0.5
    assert field.value(3.3, 1.7) != single
    field.configure(1, 0.5)
    assert field.value(3.3, 1.7) == single
