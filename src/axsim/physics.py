"""
Physical and instrument constants for a haloscope-style scan.

Powers are expressed in units of 1e-22 W, frequencies in MHz, speeds in km/s.
The context is passed explicitly to every component so that several
configurations can run side by side.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional

import numpy as np

from .errors import ConfigurationError


@dataclass(frozen=True)
class PhysicsContext:
    c: float = 3e5                  # speed of light (km/s)
    eta: float = 1.0                # signal transmission efficiency
    baseline: float = 3.0           # on-resonance signal power at reference_freq (1e-22 W)
    reference_freq: float = 750.0   # frequency the baseline power is quoted at (MHz)
    QL: float = 70000.0             # loaded quality factor
    S11: float = 0.0                # reflection (impedance mismatch) coefficient
    Tsys: float = 5.6               # system noise temperature (K)
    kB: float = 1.38e-1             # Boltzmann constant (1e-22 J/K)
    bandwidth: float = 125e-6       # bin width (MHz), 125 Hz
    n_spectra: int = 10000          # number of averaged spectra per window
    v0: float = 226.0               # halo velocity dispersion (km/s)

    @property
    def sigma_noise(self) -> float:
        """Radiometer noise per bin: kB * Tsys * bandwidth[Hz] / sqrt(N)."""
        return float(self.kB * self.Tsys * self.bandwidth * 1e6 / np.sqrt(self.n_spectra))

    @property
    def coupling_factor(self) -> float:
        return (1.0 - 2.0 * self.S11) / (1.0 - self.S11)

    def validate(self) -> "PhysicsContext":
        if not 0.0 <= self.S11 < 1.0:
            raise ConfigurationError(f"S11 should be between 0 and 1, got {self.S11}")
        if self.S11 > 0.5:
            raise ConfigurationError(
                f"S11={self.S11} gives a negative mismatch factor (1-2*S11)/(1-S11)"
            )
        positive = {"c": self.c, "QL": self.QL, "bandwidth": self.bandwidth,
                    "v0": self.v0, "reference_freq": self.reference_freq}
        for name, value in positive.items():
            if not value > 0:
                raise ConfigurationError(f"{name} must be > 0, got {value}")
        for name in ("eta", "baseline", "Tsys", "kB"):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} must be >= 0, got {getattr(self, name)}")
        if int(self.n_spectra) != self.n_spectra or self.n_spectra < 1:
            raise ConfigurationError(f"n_spectra must be a positive integer, got {self.n_spectra}")
        return self

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> "PhysicsContext":
        """Overlay ``d`` onto the defaults; unknown keys are a configuration error."""
        if d is None:
            return cls()
        return overlay_defaults(cls, d, "physics")


def _coerce(name: str, value: Any, default: Any) -> Any:
    """Convert ``value`` to the type of ``default`` (bool, int or float)."""
    if isinstance(default, bool):
        if not isinstance(value, bool):
            raise ConfigurationError(f"{name} must be true or false, got {value!r}")
        return value
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from None
    if isinstance(default, int):
        if not number.is_integer():
            raise ConfigurationError(f"{name} must be an integer, got {value!r}")
        return int(number)
    return number


def overlay_defaults(cls, d: Dict[str, Any], section: str):
    """Build ``cls`` from its defaults overlaid with ``d``, type-checking every value."""
    if not isinstance(d, dict):
        raise ConfigurationError(f"'{section}' must be a mapping, got {d!r}")
    defaults = asdict(cls())
    unknown = sorted(set(d) - {f.name for f in fields(cls)})
    if unknown:
        raise ConfigurationError(f"Unknown {section} parameters: {unknown}")
    values = {k: _coerce(f"{section}.{k}", v, defaults[k]) for k, v in d.items()}
    return cls(**{**defaults, **values})
