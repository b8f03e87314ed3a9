"""
Doppler broadening of a narrow-band signal by the halo speed distribution.

- MaxwellBoltzmann: speed density with a fixed dispersion v0
- frequency_to_velocity: f -> v for the non-relativistic relation f = f_a (1 + v^2/c^2)
- allocate / allocate_narrow: spread the expected power of a signal at f_a over a window's bins
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
from scipy import integrate, stats

from .lineshape import response
from .physics import PhysicsContext


class MaxwellBoltzmann:
    """p(v) = 4 pi v^2 / (pi v0^2)^(3/2) * exp(-v^2 / v0^2), v >= 0."""

    def __init__(self, v0: float = 226.0):
        self.v0 = float(v0)
        # scipy's maxwell uses exp(-x^2 / 2a^2)
        self._dist = stats.maxwell(scale=self.v0 / np.sqrt(2.0))
        self._median = float(self._dist.median())

    def pdf(self, v):
        v = np.asarray(v, dtype=float)
        dens = 4.0 * np.pi * v ** 2 / (np.pi * self.v0 ** 2) ** 1.5 * np.exp(-(v ** 2) / self.v0 ** 2)
        return np.where(v >= 0.0, dens, 0.0)

    def mass(self, v_lo, v_hi):
        """Probability in [v_lo, v_hi]; the survival function is used in the upper tail."""
        lo = np.asarray(v_lo, dtype=float)
        hi = np.asarray(v_hi, dtype=float)
        tail = lo > self._median
        m = np.where(tail, self._dist.sf(lo) - self._dist.sf(hi), self._dist.cdf(hi) - self._dist.cdf(lo))
        return np.maximum(m, 0.0)

    def mass_quad(self, v_lo: float, v_hi: float) -> float:
        val, _err = integrate.quad(lambda v: float(self.pdf(v)), float(v_lo), float(v_hi), limit=200)
        return float(val)


def frequency_to_velocity(freq, f_axion: float, c: float):
    """Speed that shifts a signal at ``f_axion`` up to ``freq``; 0 at or below f_axion."""
    ratio = np.asarray(freq, dtype=float) / float(f_axion) - 1.0
    return c * np.sqrt(np.maximum(ratio, 0.0))


@dataclass
class Allocation:
    power: np.ndarray           # per-bin power (1e-22 W)
    probability: np.ndarray     # per-bin share of the speed distribution
    total_power: float          # power available at f_axion for this resonance
    start_bin: Optional[int]    # bin holding f_axion, None if outside the window

    @property
    def allocated_fraction(self) -> float:
        return float(self.probability.sum())

    @property
    def residual(self) -> float:
        """Probability mass that did not land in any bin of the window."""
        return max(0.0, 1.0 - self.allocated_fraction)


def find_start_bin(edges: np.ndarray, f_axion: float) -> Optional[int]:
    """Index i with edges[i] <= f_axion < edges[i+1], or None."""
    if f_axion < edges[0] or f_axion >= edges[-1]:
        return None
    return int(np.searchsorted(edges, f_axion, side="right") - 1)


def allocate(
    f_axion: float,
    edges: np.ndarray,
    resonance_freq: float,
    physics: PhysicsContext,
    distribution: Optional[MaxwellBoltzmann] = None,
    renormalize: bool = False,
) -> Allocation:
    """
    Distribute the signal power over bins [edges[i], edges[i+1]).

    Bins entirely below ``f_axion`` get nothing. The bin holding ``f_axion``
    is integrated from v=0 to the velocity of its upper edge; every bin
    above it from the velocity of its lower edge to that of its upper edge.
    Mass beyond the last edge is left out and shows up in ``residual``
    unless ``renormalize`` is set.
    """
    edges = np.asarray(edges, dtype=float)
    if distribution is None:
        distribution = MaxwellBoltzmann(physics.v0)
    total = response(resonance_freq, f_axion, physics)

    lo = np.maximum(edges[:-1], f_axion)
    hi = edges[1:]
    above = hi > f_axion
    v_lo = frequency_to_velocity(lo, f_axion, physics.c)
    v_hi = frequency_to_velocity(hi, f_axion, physics.c)
    prob = np.where(above, distribution.mass(v_lo, v_hi), 0.0)

    if renormalize and prob.sum() > 0.0:
        prob = prob / prob.sum()

    return Allocation(
        power=total * prob,
        probability=prob,
        total_power=float(total),
        start_bin=find_start_bin(edges, f_axion),
    )


def allocate_narrow(
    f_axion: float,
    edges: np.ndarray,
    resonance_freq: float,
    physics: PhysicsContext,
) -> Allocation:
    """All of the power in the single bin holding ``f_axion`` (no Doppler broadening)."""
    edges = np.asarray(edges, dtype=float)
    total = response(resonance_freq, f_axion, physics)
    prob = np.zeros(edges.size - 1)
    start = find_start_bin(edges, f_axion)
    if start is not None:
        prob[start] = 1.0
    return Allocation(power=total * prob, probability=prob, total_power=float(total), start_bin=start)
