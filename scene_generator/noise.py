# scene_generator/noise.py

"""
================================================================================
NOISE GENERATION UTILITIES
================================================================================
This module provides functions for generating 2D Perlin noise on a regular
grid. It is designed to be a pure, stateless utility.

Data Contract:
---------------
- Inputs:
    - p: A pre-shuffled NumPy permutation table (int array of length 512).
    - x, y: NumPy arrays of sample coordinates (noise space).
    - octaves, persistence, lacunarity: Standard fractal noise parameters.
- Outputs:
    - A NumPy array of noise values normalized to the range [0, 1].
- Side Effects: None.
- Invariants: The shape of the output array matches the shape of input x and
  y. The same table and coordinates always produce bit-identical output.
================================================================================
"""

import numpy as np
from numba import njit

# Eight unit gradient directions: the four axes plus the four diagonals.
_DIAGONAL = 0.7071067811865476
_GRADIENT_VECTORS = np.array([
    [1.0, 0.0], [-1.0, 0.0], [0.0, 1.0], [0.0, -1.0],
    [_DIAGONAL, _DIAGONAL], [-_DIAGONAL, _DIAGONAL],
    [_DIAGONAL, -_DIAGONAL], [-_DIAGONAL, -_DIAGONAL],
])


def create_permutation_table(seed: int) -> np.ndarray:
    """
    Builds the doubled 512-entry permutation table used by perlin_noise_2d.
    The table is shuffled deterministically from the given seed.
    """
    p = np.arange(256, dtype=np.int64)
    rng = np.random.default_rng(seed)
    rng.shuffle(p)
    return np.concatenate([p, p])


@njit
def _lerp(a, b, x):
    "Linear interpolation."
    return a + x * (b - a)


@njit
def _fade(t):
    "6t^5 - 15t^4 + 10t^3"
    return t * t * t * (t * (t * 6 - 15) + 10)


@njit
def _gradient(h, x, y):
    """Dot product between the hashed gradient vector and the offset."""
    g = _GRADIENT_VECTORS[h % 8]
    return g[0] * x + g[1] * y


@njit
def _perlin_sample(p, x, y):
    """Single-octave Perlin noise at one point, roughly in [-1, 1]."""
    xi = int(np.floor(x))
    yi = int(np.floor(y))

    xf = x - xi
    yf = y - yi

    u = _fade(xf)
    v = _fade(yf)

    px0 = xi % 256
    px1 = (px0 + 1) % 256
    py0 = yi % 256
    py1 = (py0 + 1) % 256

    g00 = _gradient(p[p[px0] + py0], xf, yf)
    g01 = _gradient(p[p[px0] + py1], xf, yf - 1)
    g10 = _gradient(p[p[px1] + py0], xf - 1, yf)
    g11 = _gradient(p[p[px1] + py1], xf - 1, yf - 1)

    x1 = _lerp(g00, g10, u)
    x2 = _lerp(g01, g11, u)
    return _lerp(x1, x2, v)


@njit
def perlin_noise_2d(p, x, y, octaves=1, persistence=0.5, lacunarity=2.0):
    """
    Generate 2D fractal Perlin noise normalized to [0, 1].
    JIT-compiled with Numba; the explicit loops compile to machine code.
    """
    rows, cols = x.shape
    total_noise = np.zeros((rows, cols))

    # Dividing by the summed amplitudes keeps every octave count in [-1, 1].
    amplitude_sum = 0.0
    amplitude = 1.0
    for _ in range(octaves):
        amplitude_sum += amplitude
        amplitude *= persistence

    for i in range(rows):
        for j in range(cols):
            noise_val = 0.0
            amplitude = 1.0
            frequency = 1.0

            for _ in range(octaves):
                noise_val += _perlin_sample(p, x[i, j] * frequency, y[i, j] * frequency) * amplitude
                amplitude *= persistence
                frequency *= lacunarity

            normalized = (noise_val / amplitude_sum + 1.0) * 0.5
            total_noise[i, j] = min(max(normalized, 0.0), 1.0)

    return total_noise


def noise_grid(p: np.ndarray, resolution: int, frequency: float, offset: float,
               octaves: int = 1, persistence: float = 0.5, lacunarity: float = 2.0) -> np.ndarray:
    """
    Samples a square resolution x resolution grid of noise. Cell [z, x] is
    taken at noise coordinates (x * frequency + offset, z * frequency + offset).
    """
    steps = np.arange(resolution, dtype=np.float64) * frequency + offset
    x_coords, z_coords = np.meshgrid(steps, steps)
    return perlin_noise_2d(p, x_coords, z_coords, octaves, persistence, lacunarity)
