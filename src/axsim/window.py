"""
One scan step: a spectral window of fixed-width bins with signal, background
and measured (= signal + background) power per bin.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .errors import ConfigurationError
from .log import get_logger
from .noise import NoiseGenerator
from .physics import PhysicsContext
from .velocity import MaxwellBoltzmann, allocate, allocate_narrow

log = get_logger(__name__)

BIN_COUNT_TOLERANCE = 1e-6


def bins_per_window(window_width: float, bandwidth: float) -> int:
    """Number of bins in a window; the width must be a whole number of bins."""
    if not bandwidth > 0 or not window_width > 0:
        raise ConfigurationError("window_width and bandwidth must be > 0")
    ratio = window_width / bandwidth
    n = int(round(ratio))
    if n < 1 or abs(ratio - n) > BIN_COUNT_TOLERANCE:
        raise ConfigurationError(
            f"window_width={window_width} is not a whole number of {bandwidth} MHz bins ({ratio:.6f})"
        )
    return n


def bin_edges(start_freq: float, end_freq: float, n_bins: int) -> np.ndarray:
    return np.linspace(start_freq, end_freq, int(n_bins) + 1)


def _frozen(a: np.ndarray) -> np.ndarray:
    a = np.asarray(a, dtype=float)
    a.setflags(write=False)
    return a


@dataclass(frozen=True, eq=False)
class Window:
    trial_index: int
    step_index: int
    start_freq: float
    end_freq: float
    f_true: float
    edges: np.ndarray
    signal: np.ndarray
    background: np.ndarray
    measured: np.ndarray
    covers: bool = False        # start_freq <= f_true < end_freq
    total_power: float = 0.0    # lineshape power at f_true for this resonance
    residual: float = 1.0       # signal probability not placed in any bin

    @property
    def key(self):
        return (self.trial_index, self.step_index)

    @property
    def n_bins(self) -> int:
        return int(self.signal.size)

    @property
    def resonance_freq(self) -> float:
        return 0.5 * (self.start_freq + self.end_freq)

    @property
    def bin_centers(self) -> np.ndarray:
        return 0.5 * (self.edges[:-1] + self.edges[1:])

    @property
    def has_signal(self) -> bool:
        return bool(np.any(self.signal != 0.0))


class WindowBuilder:
    """
    Builds Windows for a fixed physics context and bin count.

    narrow=True puts all power in the bin holding f_true; otherwise the
    power is spread with the Maxwell-Boltzmann allocator. Windows lying
    entirely above f_true only get the Doppler tail when tail_windows=True.
    """

    def __init__(
        self,
        physics: PhysicsContext,
        n_bins: int,
        narrow: bool = False,
        tail_windows: bool = False,
        renormalize: bool = False,
        distribution: Optional[MaxwellBoltzmann] = None,
    ):
        self.physics = physics
        self.n_bins = int(n_bins)
        self.narrow = bool(narrow)
        self.tail_windows = bool(tail_windows)
        self.renormalize = bool(renormalize)
        self.distribution = distribution if distribution is not None else MaxwellBoltzmann(physics.v0)

    def build(
        self,
        trial_index: int,
        step_index: int,
        start_freq: float,
        end_freq: float,
        f_true: float,
        noise: NoiseGenerator,
    ) -> Window:
        edges = bin_edges(start_freq, end_freq, self.n_bins)
        resonance = 0.5 * (start_freq + end_freq)
        covers = bool(edges[0] <= f_true < edges[-1])
        log.debug("trial %d step %d: start:end frequencies = %.6f : %.6f, resonance = %.6f",
                  trial_index, step_index, start_freq, end_freq, resonance)

        signal = np.zeros(self.n_bins)
        total_power = 0.0
        residual = 1.0
        inject = covers or (self.tail_windows and not self.narrow and f_true < edges[0])
        if inject:
            if self.narrow:
                alloc = allocate_narrow(f_true, edges, resonance, self.physics)
            else:
                alloc = allocate(f_true, edges, resonance, self.physics,
                                 distribution=self.distribution, renormalize=self.renormalize)
            signal = alloc.power
            total_power = alloc.total_power
            residual = alloc.residual
            log.debug("power signal %.6g, start bin %s, sum of probability %.6f",
                      total_power, alloc.start_bin, alloc.allocated_fraction)

        # one draw per bin, also for windows that miss the signal
        background = noise.sample_bins(self.n_bins, self.physics.sigma_noise)
        measured = signal + background

        return Window(
            trial_index=int(trial_index),
            step_index=int(step_index),
            start_freq=float(start_freq),
            end_freq=float(end_freq),
            f_true=float(f_true),
            edges=_frozen(edges),
            signal=_frozen(signal),
            background=_frozen(background),
            measured=_frozen(measured),
            covers=covers,
            total_power=float(total_power),
            residual=float(residual),
        )
