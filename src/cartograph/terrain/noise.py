"""Coherent noise sampling for terrain generation.

Wraps OpenSimplex gradient noise and provides fBm (fractal Brownian
motion) summation over it.
"""

import numpy as np
from numpy.typing import NDArray
from opensimplex import OpenSimplex

from .rng import U32_MASK


def wrap_seed(seed: int, offset: int = 0) -> int:
    """Offset a seed with unsigned 32-bit wraparound."""
    return (seed + offset) & U32_MASK


class NoiseSource:
    """Deterministic 2D coherent noise for a single seed.

    Samples are a pure function of (seed, x, y) in roughly [-1, 1].
    """

    def __init__(self, seed: int) -> None:
        self.seed = seed
        self._simplex = OpenSimplex(seed=seed)

    def sample(self, x: float, y: float) -> float:
        """Sample noise at (x, y)."""
        return self._simplex.noise2(x, y)

    def sample_grid(
        self,
        xs: NDArray[np.float64],
        ys: NDArray[np.float64],
    ) -> NDArray[np.float64]:
        """Sample noise on the grid spanned by xs and ys.

        Returns:
            Array of shape (len(ys), len(xs)).
        """
        return self._simplex.noise2array(xs, ys)


def fbm(
    source: NoiseSource,
    x: float,
    y: float,
    octaves: int,
    frequency: float,
    lacunarity: float = 2.0,
    gain: float = 0.5,
) -> float:
    """Sum octaves of noise at increasing frequencies.

    The raw sum is returned; callers normalize by the amplitude bound
    they expect.

    Args:
        source: Noise source to sample.
        x: Sample x coordinate.
        y: Sample y coordinate.
        octaves: Number of noise layers to sum.
        frequency: Frequency of the base (lowest) octave.
        lacunarity: Frequency multiplier between octaves.
        gain: Amplitude multiplier between octaves.

    Returns:
        Unnormalized fractal noise value.
    """
    total = 0.0
    amplitude = 1.0
    for _ in range(octaves):
        total += source.sample(x * frequency, y * frequency) * amplitude
        frequency *= lacunarity
        amplitude *= gain
    return total
