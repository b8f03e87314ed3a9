import numpy as np

from axsim.lineshape import response
from axsim.physics import PhysicsContext


def test_peak_at_resonance_scales_with_frequency():
    phys = PhysicsContext()
    assert np.isclose(response(750.0, 750.0, phys), phys.baseline)
    assert np.isclose(response(1500.0, 1500.0, phys), 2.0 * phys.baseline)


def test_lorentzian_half_power_width():
    # 1 / (1 + 4 Q^2 x^2) = 1/2 at x = 1 / (2Q)
    phys = PhysicsContext(QL=70000.0)
    f0 = 750.0
    f_half = f0 * (1.0 + 1.0 / (2.0 * phys.QL))
    assert np.isclose(response(f0, f_half, phys), 0.5 * response(f0, f0, phys))


def test_far_from_resonance_small_but_nonzero():
    phys = PhysicsContext()
    p = response(750.0, 760.0, phys)
    assert 0.0 < p < 1e-3 * phys.baseline


def test_mismatch_and_efficiency_reduce_power():
    full = response(750.0, 750.0, PhysicsContext())
    mismatched = response(750.0, 750.0, PhysicsContext(S11=0.25))
    lossy = response(750.0, 750.0, PhysicsContext(eta=0.5))
    assert np.isclose(mismatched, full * (1 - 0.5) / (1 - 0.25))
    assert np.isclose(lossy, 0.5 * full)


def test_vectorized_over_probe_frequency():
    phys = PhysicsContext()
    f = np.linspace(749.99, 750.01, 11)
    p = response(750.0, f, phys)
    assert p.shape == f.shape
    assert np.argmax(p) == 5
    assert np.all((p > 0) & (p <= phys.baseline))
