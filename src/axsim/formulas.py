"""
Closed-form haloscope estimates: axion-photon coupling, expected signal
power, noise fluctuation, coupling upper limit and signal-to-noise ratio.

These are plain functions of an explicit FormulaConstants value; the scan
simulator does not use them.
"""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np

KSVZ_G_GAMMA = -0.97


@dataclass(frozen=True)
class FormulaConstants:
    kB: float = 1.380649e-23        # J/K
    h: float = 6.626e-34            # J s
    hbarc: float = 197.327e-9       # eV m
    alpha: float = 1.0 / 137.036
    lam: float = 78e6               # QCD scale Lambda (eV)
    rho_dm: float = 0.45e15         # local dark matter density (eV/m^3)
    inverse_mu0_pi: float = 0.5e7   # 1 / (mu0 * pi)
    joule_to_ev: float = 1.0 / 1.6e-19


DEFAULT_CONSTANTS = FormulaConstants()


def _positive(**kw) -> None:
    for name, value in kw.items():
        if not value > 0:
            raise ValueError(f"{name} must be > 0, got {value}")


def g_agamma(ma_eV: float, g_gamma: float = KSVZ_G_GAMMA,
             constants: FormulaConstants = DEFAULT_CONSTANTS) -> float:
    """Axion-photon coupling (GeV^-1) for an axion of mass ``ma_eV``."""
    _positive(ma_eV=ma_eV)
    k = constants
    return float(abs(g_gamma) * k.alpha / np.pi / k.lam ** 2 * ma_eV * 1e9)


def ksvz_g_agamma(ma_eV: float) -> float:
    """Benchmark KSVZ coupling (GeV^-1), 0.39 * ma * 1e-9."""
    return 0.39 * ma_eV * 1e-9


def dfsz_g_agamma(ma_eV: float) -> float:
    """Benchmark DFSZ coupling (GeV^-1), (0.203 * 8/3 - 0.39) * ma * 1e-9."""
    return (0.203 * 8.0 / 3.0 - 0.39) * ma_eV * 1e-9


def axion_mass(f0: float, constants: FormulaConstants = DEFAULT_CONSTANTS) -> float:
    """Axion mass (eV) converting to a photon of frequency ``f0`` (Hz)."""
    _positive(f0=f0)
    return constants.h * f0 * constants.joule_to_ev


def _cavity_factor(f0, beta, B, V, C, QL, constants: FormulaConstants) -> float:
    k = constants
    return k.hbarc ** 3 * k.rho_dm * beta / (1.0 + beta) * f0 * k.inverse_mu0_pi * B * B * V * C * QL


def signal_power(
    f0: float = 5e9,
    beta: float = 1.0,
    B: float = 9.0,
    V: float = 1e-3,
    C: float = 0.5,
    QL: float = 50000.0,
    g_gamma: float = KSVZ_G_GAMMA,
    constants: FormulaConstants = DEFAULT_CONSTANTS,
) -> float:
    """
    Expected conversion power on resonance.

    f0 in Hz, beta the antenna coupling, B in tesla, V in m^3, C the mode
    form factor, QL the loaded quality factor.
    """
    _positive(f0=f0, V=V, QL=QL)
    k = constants
    g = g_gamma * k.alpha / np.pi / k.lam ** 2
    return float(g ** 2 * _cavity_factor(f0, beta, B, V, C, QL, k))


def noise_power(f0: float, Tsys: float = -1.0, constants: FormulaConstants = DEFAULT_CONSTANTS) -> float:
    """kB * Tsys, or one photon energy h * f0 when Tsys <= 0 (quantum limit)."""
    _positive(f0=f0)
    return constants.kB * Tsys if Tsys > 0 else constants.h * f0


def noise_sigma(
    f0: float = 5e9,
    Tsys: float = -1.0,
    bandwidth: float = 5e4,
    int_time: float = 3600.0,
    n_spectra: int = 0,
    constants: FormulaConstants = DEFAULT_CONSTANTS,
) -> float:
    """
    Radiometer fluctuation of the noise power.

    With ``n_spectra`` > 0 the spectra average as bandwidth / sqrt(N),
    otherwise the Dicke form sqrt(bandwidth / int_time) is used.
    """
    _positive(bandwidth=bandwidth)
    p = noise_power(f0, Tsys, constants)
    if n_spectra > 0:
        return float(p * bandwidth / np.sqrt(n_spectra))
    _positive(int_time=int_time)
    return float(p * np.sqrt(bandwidth / int_time))


def coupling_limit(
    significance: float = 1.645,
    f0: float = 5e9,
    Tsys: float = -1.0,
    beta: float = 1.0,
    B: float = 9.0,
    V: float = 1e-3,
    C: float = 0.5,
    QL: float = 50000.0,
    bandwidth: float = 5e4,
    int_time: float = 3600.0,
    n_spectra: int = 0,
    constants: FormulaConstants = DEFAULT_CONSTANTS,
) -> float:
    """Upper limit on g_agamma (GeV^-1) for a power excess of ``significance`` sigma."""
    _positive(f0=f0, V=V, QL=QL)
    sigma = noise_sigma(f0, Tsys, bandwidth, int_time, n_spectra, constants)
    upper_power = sigma * significance
    ma = axion_mass(f0, constants)
    factor = _cavity_factor(f0, beta, B, V, C, QL, constants) / ma ** 2
    return float(np.sqrt(upper_power / factor) * 1e9)


def snr(
    g_gamma: float = KSVZ_G_GAMMA,
    f0: float = 5e9,
    Tsys: float = -1.0,
    beta: float = 1.0,
    B: float = 9.0,
    V: float = 1e-3,
    C: float = 0.5,
    QL: float = 50000.0,
    constants: FormulaConstants = DEFAULT_CONSTANTS,
) -> float:
    """Signal power over the noise power (kB*Tsys or h*f0)."""
    return signal_power(f0, beta, B, V, C, QL, g_gamma, constants) / noise_power(f0, Tsys, constants)
