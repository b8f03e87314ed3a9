import numpy as np
import pytest

from axsim.formulas import (
    FormulaConstants,
    axion_mass,
    coupling_limit,
    dfsz_g_agamma,
    g_agamma,
    ksvz_g_agamma,
    noise_power,
    noise_sigma,
    signal_power,
    snr,
)


def test_coupling_close_to_ksvz_benchmark():
    ma = 3.1e-6
    assert np.isclose(g_agamma(ma), ksvz_g_agamma(ma), rtol=0.1)
    assert dfsz_g_agamma(ma) < ksvz_g_agamma(ma)
    assert np.isclose(g_agamma(2 * ma) / g_agamma(ma), 2.0)


def test_axion_mass_of_750_mhz_photon():
    assert np.isclose(axion_mass(750e6), 6.626e-34 * 750e6 / 1.6e-19)


def test_signal_power_scaling():
    p = signal_power()
    assert p > 0
    assert np.isclose(signal_power(B=18.0) / p, 4.0)
    assert np.isclose(signal_power(QL=100000.0) / p, 2.0)
    assert np.isclose(signal_power(beta=2.0) / p, (2.0 / 3.0) / 0.5)


def test_noise_quantum_and_thermal_limits():
    c = FormulaConstants()
    assert np.isclose(noise_power(5e9), c.h * 5e9)
    assert np.isclose(noise_power(5e9, Tsys=1.0), c.kB)
    assert np.isclose(noise_sigma(5e9, bandwidth=5e4, int_time=3600.0), c.h * 5e9 * np.sqrt(5e4 / 3600.0))
    assert np.isclose(noise_sigma(5e9, bandwidth=5e4, n_spectra=100), c.h * 5e9 * 5e4 / 10.0)


def test_limit_scales_with_significance_and_time():
    base = coupling_limit(1.645)
    assert base > 0
    assert np.isclose(coupling_limit(4 * 1.645) / base, 2.0)
    # sigma ~ 1/sqrt(t) and g ~ sqrt(sigma)
    assert np.isclose(coupling_limit(1.645, int_time=16 * 3600.0) / base, 0.5)


def test_snr_is_signal_over_noise():
    assert np.isclose(snr(Tsys=0.5, QL=40000.0), signal_power(QL=40000.0) / noise_power(5e9, 0.5))


@pytest.mark.parametrize("kw", [dict(f0=0.0), dict(V=-1.0), dict(QL=0.0)])
def test_invalid_inputs(kw):
    with pytest.raises(ValueError):
        signal_power(**kw)
