# noise_field.py
"""
Seedable 2D fractal Perlin noise that drives the flow field.

The field is a pure function of (x, y) and the seed. The seed only
selects the gradient permutation table, which is rebuilt by `reseed`.
Output values lie in [0, 1].
"""
import logging
import numpy as np
from numba import jit

from constants import NOISE_OCTAVES, NOISE_FALLOFF, PERMUTATION_SIZE

# --- Data Contracts ---
#
# class NoiseField:
#   - __init__(self, seed: int, octaves: int = 4, falloff: float = 0.5):
#     - Side Effects: Builds the permutation table for `seed`.
#
#   - value(self, x: float, y: float) -> float:
#     - Outputs: Noise value in [0, 1]. Same seed and inputs give the
#       same output.
#
#   - sample(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
#     - Vectorised `value`. Inputs are 1D arrays of equal length.
#     - Outputs: float64 array of the same length, values in [0, 1].
#
#   - reseed(self, seed: int) -> None:
#     - Side Effects: Rebuilds the permutation table.
#
#   - configure(self, octaves: int, falloff: float) -> None:
#     - Side Effects: Replaces the fractal settings; the permutation
#       table is kept.


@jit(nopython=True)
def _fade(t):
    # Quintic curve 6t^5 - 15t^4 + 10t^3, continuous to the second derivative.
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


@jit(nopython=True)
def _lerp(a, b, t):
    return a + t * (b - a)


@jit(nopython=True)
def _gradient_dot(h, x, y):
    """Dot product of (x, y) with one of eight lattice gradients."""
    h = h & 7
    if h == 0:
        return x + y
    elif h == 1:
        return -x + y
    elif h == 2:
        return x - y
    elif h == 3:
        return -x - y
    elif h == 4:
        return x
    elif h == 5:
        return -x
    elif h == 6:
        return y
    return -y


@jit(nopython=True)
def _perlin_2d(x, y, perm):
    """Single octave of gradient noise, roughly in [-1, 1]."""
    fx = np.floor(x)
    fy = np.floor(y)
    xi = int(fx) & 255
    yi = int(fy) & 255
    xf = x - fx
    yf = y - fy

    u = _fade(xf)
    v = _fade(yf)

    aa = perm[perm[xi] + yi]
    ab = perm[perm[xi] + yi + 1]
    ba = perm[perm[xi + 1] + yi]
    bb = perm[perm[xi + 1] + yi + 1]

    x1 = _lerp(_gradient_dot(aa, xf, yf), _gradient_dot(ba, xf - 1.0, yf), u)
    x2 = _lerp(_gradient_dot(ab, xf, yf - 1.0), _gradient_dot(bb, xf - 1.0, yf - 1.0), u)
    return _lerp(x1, x2, v)


@jit(nopython=True)
def _fractal_noise_numba(xs, ys, perm, octaves, falloff):
    """
    Numba-jitted fractal sum of Perlin octaves, mapped to [0, 1].

    Each octave doubles the frequency and scales the amplitude by
    `falloff`. The sum is normalised by the total amplitude.
    """
    count = xs.shape[0]
    out = np.empty(count, dtype=np.float64)
    for i in range(count):
        total = 0.0
        norm = 0.0
        amplitude = 1.0
        frequency = 1.0
        for _ in range(octaves):
            total += amplitude * _perlin_2d(xs[i] * frequency, ys[i] * frequency, perm)
            norm += amplitude
            amplitude *= falloff
            frequency *= 2.0
        value = 0.5 * (total / norm + 1.0)
        if value < 0.0:
            value = 0.0
        elif value > 1.0:
            value = 1.0
        out[i] = value
    return out


class NoiseField:
    """
    A deterministic, smooth scalar field over the plane.
    """
    def __init__(self, seed: int, octaves: int = NOISE_OCTAVES, falloff: float = NOISE_FALLOFF):
        self.configure(octaves, falloff)
        self.seed = None
        self.permutation = None
        self.reseed(seed)

    def configure(self, octaves: int, falloff: float) -> None:
        """Sets the octave count and amplitude falloff; takes effect on the next sample."""
        self.octaves = int(octaves)
        self.falloff = float(falloff)

    def reseed(self, seed: int) -> None:
        """Rebuilds the permutation table; the same seed reproduces the same field."""
        self.seed = int(seed)
        rng = np.random.default_rng(self.seed)
        table = rng.permutation(PERMUTATION_SIZE).astype(np.int64)
        # Duplicated so lattice lookups never need to wrap.
        self.permutation = np.concatenate((table, table))
        logging.debug(f"NoiseField reseeded with seed {self.seed}.")

    def sample(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        xs = np.ascontiguousarray(xs, dtype=np.float64)
        ys = np.ascontiguousarray(ys, dtype=np.float64)
        return _fractal_noise_numba(xs, ys, self.permutation, self.octaves, self.falloff)

    def value(self, x: float, y: float) -> float:
        return float(self.sample(np.array([x]), np.array([y]))[0])
