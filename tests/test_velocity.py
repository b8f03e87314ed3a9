import numpy as np

from axsim.physics import PhysicsContext
from axsim.velocity import MaxwellBoltzmann, allocate, allocate_narrow, find_start_bin, frequency_to_velocity
from axsim.window import bin_edges
from scripts.gen_data import wide_bin_physics


def _edges(start=750.0, width=50e-3, bw=125e-6):
    return bin_edges(start, start + width, int(round(width / bw)))


def test_distribution_normalized_and_matches_quadrature():
    mb = MaxwellBoltzmann(226.0)
    assert np.isclose(mb.mass_quad(0.0, 2500.0), 1.0, atol=1e-8)
    for lo, hi in [(0.0, 100.0), (150.0, 400.0), (600.0, 900.0)]:
        assert np.isclose(mb.mass(lo, hi), mb.mass_quad(lo, hi), rtol=1e-7, atol=1e-12)


def test_frequency_to_velocity_no_nan_at_or_below_signal():
    v = frequency_to_velocity(np.array([749.9, 750.0, 750.0 + 750.0 / 9e10 * 226.0 ** 2]), 750.0, 3e5)
    assert np.all(np.isfinite(v))
    assert v[0] == 0.0 and v[1] == 0.0
    assert np.isclose(v[2], 226.0)


def test_signal_on_bin_edge_starts_there_with_valid_power():
    phys = PhysicsContext()
    edges = _edges()
    f = edges[40]
    alloc = allocate(f, edges, 750.025, phys)
    assert alloc.start_bin == 40
    assert np.all(np.isfinite(alloc.power)) and np.all(alloc.power >= 0)
    assert np.all(alloc.power[:40] == 0.0)
    assert alloc.power[40] > 0.0


def test_partial_start_bin():
    phys = PhysicsContext()
    edges = _edges()
    f = 0.5 * (edges[10] + edges[11])
    alloc = allocate(f, edges, 750.025, phys)
    assert find_start_bin(edges, f) == alloc.start_bin == 10
    assert np.all(alloc.power[:10] == 0.0)
    assert alloc.power[10] > 0.0


def test_full_window_allocates_nearly_everything():
    phys = PhysicsContext()
    edges = _edges()
    alloc = allocate(edges[0], edges, 750.025, phys)
    assert np.isclose(alloc.allocated_fraction, 1.0, atol=1e-9)
    assert np.isclose(alloc.power.sum(), alloc.total_power, rtol=1e-9)


def test_truncation_reported_not_hidden():
    phys = PhysicsContext()
    edges = _edges()
    f = edges[-2] + 25e-6
    alloc = allocate(f, edges, 750.025, phys)
    assert alloc.residual > 0.5
    assert np.isclose(alloc.allocated_fraction + alloc.residual, 1.0)

    renorm = allocate(f, edges, 750.025, phys, renormalize=True)
    assert np.isclose(renorm.probability.sum(), 1.0)
    assert np.isclose(renorm.residual, 0.0, atol=1e-12)


def test_power_non_increasing_away_from_signal_with_wide_bins():
    # 1 kHz bins: the lineshape mode (~200 Hz above f) falls inside the first bin
    phys = wide_bin_physics()
    edges = _edges(width=20e-3, bw=1e-3)
    alloc = allocate(edges[0], edges, 750.01, phys)
    p = alloc.power
    assert p[0] > p[1] > 0
    assert np.all(np.diff(p) <= 1e-12 * p[0])


def test_narrow_puts_everything_in_one_bin():
    phys = PhysicsContext()
    edges = _edges()
    f = edges[123] + 10e-6
    alloc = allocate_narrow(f, edges, 750.025, phys)
    assert np.count_nonzero(alloc.power) == 1
    assert alloc.power[123] == alloc.total_power


def test_signal_outside_window():
    phys = PhysicsContext()
    edges = _edges()
    assert find_start_bin(edges, edges[-1]) is None
    assert find_start_bin(edges, edges[0] - 1e-3) is None
    above = allocate(edges[-1] + 1e-3, edges, 750.025, phys)
    assert np.all(above.power == 0.0) and above.residual == 1.0
    assert np.count_nonzero(allocate_narrow(edges[0] - 1e-3, edges, 750.025, phys).power) == 0
