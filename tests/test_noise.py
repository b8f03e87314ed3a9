import numpy as np

from axsim.noise import NoiseGenerator
from axsim.physics import PhysicsContext


def test_sigma_noise_of_reference_setup():
    phys = PhysicsContext()
    assert np.isclose(phys.sigma_noise, 0.138 * 5.6 * 125.0 / 100.0)


def test_empirical_sigma_converges():
    sigma = PhysicsContext().sigma_noise
    gen = NoiseGenerator(sigma, np.random.default_rng(0))
    draws = np.concatenate([gen.sample_bins(400) for _ in range(500)])
    assert abs(draws.std() - sigma) / sigma < 0.01
    assert abs(draws.mean()) < 5 * sigma / np.sqrt(draws.size)


def test_adjacent_bins_uncorrelated():
    gen = NoiseGenerator(1.0, np.random.default_rng(1))
    x = gen.sample_bins(200_000)
    r = np.corrcoef(x[:-1], x[1:])[0, 1]
    assert abs(r) < 0.01


def test_seeded_draws_repeat():
    a = NoiseGenerator(0.5, np.random.default_rng(42))
    b = NoiseGenerator(0.5, np.random.default_rng(42))
    assert a.sample() == b.sample()
    assert np.array_equal(a.sample_bins(10), b.sample_bins(10))


def test_sample_uses_given_sigma():
    gen = NoiseGenerator(1.0, np.random.default_rng(3))
    x = np.array([gen.sample(0.1) for _ in range(20000)])
    assert abs(x.std() - 0.1) < 0.005
