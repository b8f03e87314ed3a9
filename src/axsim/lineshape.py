from __future__ import annotations

import numpy as np

from .physics import PhysicsContext


def response(resonance_freq, probe_freq, physics: PhysicsContext):
    """
    Expected signal power (1e-22 W) for a cavity tuned to ``resonance_freq``
    when the signal sits at ``probe_freq`` (both MHz).

    Lorentzian in the ratio probe/resonance with width set by QL, scaled by the
    mismatch factor (1-2*S11)/(1-S11) and the efficiency eta. Works on scalars
    and numpy arrays; it never drops to exactly zero away from resonance.
    """
    f0 = np.asarray(resonance_freq, dtype=float)
    f = np.asarray(probe_freq, dtype=float)
    detuning = f / f0 - 1.0
    power = (
        physics.baseline
        * (f0 / physics.reference_freq)
        * physics.coupling_factor
        / (1.0 + 4.0 * physics.QL ** 2 * detuning ** 2)
        * physics.eta
    )
    if np.ndim(power) == 0:
        return float(power)
    return power
