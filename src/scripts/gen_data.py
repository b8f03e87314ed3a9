from __future__ import annotations

import numpy as np

from axsim.noise import NoiseGenerator
from axsim.physics import PhysicsContext
from axsim.scan import ScanConfiguration
from axsim.window import WindowBuilder, bins_per_window


def synth_window(f_true: float, start_freq: float, window_width: float = 50e-3, narrow: bool = False,
                 physics: PhysicsContext | None = None, rng=None):
    """
    Build one window [start_freq, start_freq + window_width) holding a signal at f_true.
    Returns the Window (signal, background, measured per bin).
    """
    if physics is None:
        physics = PhysicsContext()
    if rng is None:
        rng = np.random.default_rng(0)
    n_bins = bins_per_window(window_width, physics.bandwidth)
    builder = WindowBuilder(physics, n_bins, narrow=narrow)
    noise = NoiseGenerator(physics.sigma_noise, rng)
    return builder.build(0, 0, start_freq, start_freq + window_width, f_true, noise)


def small_config(scan_low: float = 749.9, scan_high: float = 750.1, num_trials: int = 2, **kw) -> ScanConfiguration:
    """A 100-step scan around 750 MHz, quick enough for tests."""
    return ScanConfiguration(scan_low=scan_low, scan_high=scan_high, num_trials=num_trials, **kw)


# Wide bins put the mode of the Doppler lineshape inside the first bin
def wide_bin_physics(bandwidth: float = 1e-3, **kw) -> PhysicsContext:
    return PhysicsContext(bandwidth=bandwidth, **kw)
