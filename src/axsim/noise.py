from __future__ import annotations

from typing import Optional

import numpy as np


class NoiseGenerator:
    """
    Zero-mean Gaussian radiometer noise, one independent deviate per bin.

    The generator owns its ``np.random.Generator``; nothing is drawn from
    numpy's global state.
    """

    def __init__(self, sigma: float, rng: Optional[np.random.Generator] = None):
        if not sigma >= 0:
            raise ValueError(f"sigma must be >= 0, got {sigma}")
        self.sigma = float(sigma)
        self.rng = rng if rng is not None else np.random.default_rng()

    def sample(self, sigma: Optional[float] = None) -> float:
        s = self.sigma if sigma is None else float(sigma)
        return float(self.rng.normal(0.0, s))

    def sample_bins(self, n_bins: int, sigma: Optional[float] = None) -> np.ndarray:
        s = self.sigma if sigma is None else float(sigma)
        return self.rng.normal(0.0, s, size=int(n_bins))
