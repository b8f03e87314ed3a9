import numpy as np
import pytest

from axsim.errors import ConfigurationError
from axsim.noise import NoiseGenerator
from axsim.physics import PhysicsContext
from axsim.window import WindowBuilder, bins_per_window
from scripts.gen_data import synth_window


def _build(f_true, start=750.0, width=50e-3, seed=0, **kw):
    phys = PhysicsContext()
    builder = WindowBuilder(phys, bins_per_window(width, phys.bandwidth), **kw)
    noise = NoiseGenerator(phys.sigma_noise, np.random.default_rng(seed))
    return builder.build(0, 3, start, start + width, f_true, noise)


def test_measured_is_signal_plus_background():
    for f in (750.0, 750.01234, 750.049, 750.2, 749.8):
        w = _build(f)
        assert np.array_equal(w.measured, w.signal + w.background)


def test_window_above_signal_frequency_misses():
    w = _build(750.06)
    assert not w.covers and not w.has_signal
    assert np.all(w.signal == 0.0)
    assert np.any(w.background != 0.0)


def test_signal_on_upper_edge_is_a_miss():
    w = _build(750.05)
    assert not w.covers
    assert np.all(w.signal == 0.0)


def test_window_entirely_above_signal():
    w = _build(749.999)
    assert not w.covers and np.all(w.signal == 0.0)
    tail = _build(749.999, tail_windows=True)
    assert tail.has_signal
    assert tail.residual > 0.0


def test_covering_window_carries_signal():
    w = _build(750.01)
    assert w.covers and w.has_signal
    assert np.isclose(w.signal.sum(), w.total_power * (1.0 - w.residual))
    assert np.isclose(w.resonance_freq, 750.025)


def test_narrow_window_single_bin():
    w = synth_window(750.0123, 750.0, narrow=True, rng=np.random.default_rng(5))
    nz = np.flatnonzero(w.signal)
    assert nz.size == 1
    assert w.edges[nz[0]] <= 750.0123 < w.edges[nz[0] + 1]


def test_window_layout_and_immutability():
    w = _build(750.01)
    assert w.n_bins == 400
    assert w.edges[0] == w.start_freq and w.edges[-1] == w.end_freq
    assert np.allclose(np.diff(w.edges), 125e-6)
    assert w.key == (0, 3)
    with pytest.raises(ValueError):
        w.signal[0] = 1.0


def test_bin_count_policy():
    assert bins_per_window(50e-3, 125e-6) == 400
    with pytest.raises(ConfigurationError):
        bins_per_window(50.06e-3, 125e-6)
    with pytest.raises(ConfigurationError):
        bins_per_window(50e-6, 125e-6)


def test_windows_compare_by_identity_and_hash():
    a = _build(750.01)
    b = _build(750.01)
    assert a == a and a != b
    assert len({a, b, a}) == 2
