"""Installable `scripts` package for test utilities."""
from .gen_data import small_config, synth_window, wide_bin_physics

__all__ = ["small_config", "synth_window", "wide_bin_physics"]
