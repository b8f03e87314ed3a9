"""
axsim: grand-spectrum (stacked window) simulation of a haloscope axion search.

    from axsim import ScanConfiguration, run_scan
    result = run_scan(ScanConfiguration(scan_low=749, scan_high=751), seed=1)
"""
from .errors import ConfigurationError, NumericalIntegrationWarning, PersistenceError
from .lineshape import response
from .noise import NoiseGenerator
from .physics import PhysicsContext
from .scan import ScanConfiguration, ScanDriver, ScanResult, Trial, run_scan
from .sink import load_scan, save_scan
from .stack import grand_spectrum
from .velocity import Allocation, MaxwellBoltzmann, allocate, allocate_narrow, frequency_to_velocity
from .window import Window, WindowBuilder

__version__ = "0.1.0"

__all__ = [
    "Allocation",
    "ConfigurationError",
    "MaxwellBoltzmann",
    "NoiseGenerator",
    "NumericalIntegrationWarning",
    "PersistenceError",
    "PhysicsContext",
    "ScanConfiguration",
    "ScanDriver",
    "ScanResult",
    "Trial",
    "Window",
    "WindowBuilder",
    "allocate",
    "allocate_narrow",
    "frequency_to_velocity",
    "grand_spectrum",
    "load_scan",
    "response",
    "run_scan",
    "save_scan",
]
