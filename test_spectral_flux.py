"""
Tests for the volume, disc and energy-window flux integrators.
"""

import math

import numpy as np
import pytest

from conftest import ToySolarModel
from solaxflux.constants import SPECTRAL_FLUX_FACTOR, INTEGRATION_CONFIG
from solaxflux.errors import NumericalFailure, RangeError, IOFailure
from solaxflux.integrands import Process
from solaxflux.spectral_flux import (
    calculate_spectral_flux, calculate_spectral_flux_solar_disc, calculate_flux,
    integrated_flux_from_file, spectral_flux_integrand, SpectrumTable,
    calculate_spectral_flux_Primakoff, calculate_spectral_flux_element,
    calculate_spectral_flux_axionelectron, calculate_spectral_flux_all_ff,
)
from solaxflux.spectrum_utils import save_to_file, read_table

ERGS = [0.5, 1.0, 2.0, 4.0]


def primakoff_volume_flux(model, erg):
    # int_0^1 0.5*(r*erg/pi)^2 * g dr = g * erg^2 / (6 pi^2)
    return SPECTRAL_FLUX_FACTOR * model.scale * erg ** 2 / (6.0 * math.pi ** 2) * (model.r_hi ** 3 - model.r_lo ** 3)


def test_constant_integrand_reproduces_closed_form():
    model = ToySolarModel(r_lo=0.1, r_hi=0.9)
    c = 2.5e-30

    def constant(r, erg, model, isotope=None):
        return c

    table = calculate_spectral_flux(ERGS, model, constant)
    expected = c * (model.r_hi - model.r_lo) * SPECTRAL_FLUX_FACTOR
    np.testing.assert_allclose(table.flux, expected, rtol=1e-10)


def test_volume_flux_primakoff(toy_model):
    table = calculate_spectral_flux(ERGS, toy_model, Process.PRIMAKOFF)
    expected = [primakoff_volume_flux(toy_model, erg) for erg in ERGS]
    np.testing.assert_allclose(table.flux, expected, rtol=1e-8)
    assert len(table) == len(ERGS)
    assert len(table.flux_err) == len(table.flux)
    assert np.all(table.flux_err >= 0)


def test_volume_flux_is_deterministic(decaying_model):
    first = calculate_spectral_flux(ERGS, decaying_model, "weightedCompton")
    second = calculate_spectral_flux(ERGS, decaying_model, "weightedCompton")
    np.testing.assert_array_equal(first.flux, second.flux)
    np.testing.assert_array_equal(first.flux_err, second.flux_err)


def test_disc_converges_to_volume(toy_model):
    volume = calculate_spectral_flux([2.0], toy_model, Process.PRIMAKOFF).flux[0]
    disc = [calculate_spectral_flux_solar_disc([2.0], r_max, toy_model, Process.PRIMAKOFF).flux[0]
            for r_max in (0.3, 0.6, 0.9, 0.99, 1.0)]
    assert np.all(np.diff(disc) > 0)
    # constant rates: disc flux = volume flux * r_max^3
    np.testing.assert_allclose(disc, volume * np.array([0.3, 0.6, 0.9, 0.99, 1.0]) ** 3, rtol=1e-5)
    assert abs(disc[-1] - volume) <= 1e-5 * volume


def test_disc_radius_is_clamped(toy_model):
    inside = calculate_spectral_flux_solar_disc([1.0, 3.0], 1.0, toy_model)
    outside = calculate_spectral_flux_solar_disc([1.0, 3.0], 5.0, toy_model)
    np.testing.assert_array_equal(inside.flux, outside.flux)
    assert np.all(inside.flux_err >= 0)


def test_disc_flux_for_other_processes(decaying_model):
    volume = calculate_spectral_flux(ERGS, decaying_model, Process.ALL_FF).flux
    disc = calculate_spectral_flux_solar_disc(ERGS, 1.0, decaying_model, "all_ff").flux
    np.testing.assert_allclose(disc, volume, rtol=1e-5)


def test_save_spectrum(tmp_path, toy_model):
    fname = tmp_path / "disc.dat"
    table = calculate_spectral_flux_solar_disc(ERGS, 0.5, toy_model, saveas=str(fname))
    text = fname.read_text()
    assert text.startswith("# Spectral flux over full solar disc, r in [0.000000, 0.500000] R_sol")
    data = read_table(fname)
    assert data.shape == (len(ERGS), 3)
    np.testing.assert_allclose(data[:, 1], table.flux, rtol=1e-12)

    volume_file = tmp_path / "volume.dat"
    calculate_spectral_flux(ERGS, toy_model, saveas=str(volume_file))
    assert volume_file.read_text().startswith("# Spectral flux over full solar volume")


def test_save_to_unwritable_path_raises(tmp_path, toy_model):
    with pytest.raises(IOFailure):
        calculate_spectral_flux(ERGS, toy_model, saveas=str(tmp_path / "missing" / "x.dat"))


def test_non_finite_integrand_raises(toy_model):
    def broken(r, erg, model, isotope=None):
        return float("nan")

    with pytest.raises(NumericalFailure):
        calculate_spectral_flux([1.0], toy_model, broken)


def test_convenience_wrappers(decaying_model):
    volume = calculate_spectral_flux_Primakoff(ERGS, decaying_model)
    disc = calculate_spectral_flux_Primakoff(ERGS, decaying_model, r_max=1.0)
    np.testing.assert_allclose(disc.flux, volume.flux, rtol=1e-5)

    fe = calculate_spectral_flux_element(ERGS, "Fe", decaying_model)
    np.testing.assert_allclose(fe.flux, volume.flux, rtol=1e-10)

    electron = calculate_spectral_flux_axionelectron(ERGS, decaying_model)
    np.testing.assert_allclose(electron.flux, 5.0 * volume.flux, rtol=1e-10)
    ff = calculate_spectral_flux_all_ff(ERGS, decaying_model)
    np.testing.assert_allclose(ff.flux, 7.0 * volume.flux, rtol=1e-10)


def test_spectral_flux_integrand_matches_table(toy_model):
    value = spectral_flux_integrand(2.0, toy_model, Process.PRIMAKOFF)
    assert value == pytest.approx(primakoff_volume_flux(toy_model, 2.0), rel=1e-8)


def test_calculate_flux_window(toy_model):
    a, b = 1.0, 3.0
    # int_a^b 5 g E^2/(6 pi^2) dE for the combined axion-electron rate
    expected = (SPECTRAL_FLUX_FACTOR * 5.0 * toy_model.scale * (b ** 3 - a ** 3) / (18.0 * math.pi ** 2)
                * INTEGRATION_CONFIG.flux_window_rescaling)
    assert calculate_flux(a, b, toy_model) == pytest.approx(expected, rel=1e-6)


def write_spectrum(path, ergs, flux):
    save_to_file(str(path), (ergs, flux, np.zeros_like(flux)), "test spectrum\nColumns: energy, flux, error")
    return str(path)


def test_integrated_flux_from_file(tmp_path):
    ergs = np.linspace(0.1, 10.0, 100)
    fname = write_spectrum(tmp_path / "linear.dat", ergs, 3.0 * ergs)
    # linear interpolation of a linear function is exact
    expected = 1.5 * (8.0 ** 2 - 0.5 ** 2)
    assert integrated_flux_from_file(0.5, 8.0, fname) == pytest.approx(expected, rel=1e-8)
    assert integrated_flux_from_file(0.5, 8.0, fname, True) == pytest.approx(expected, rel=1e-8)


def test_integrated_flux_from_file_resolves_line(tmp_path):
    ergs = np.sort(np.concatenate([np.linspace(0.1, 10.0, 200), [6.63942 - 1e-4, 6.63942, 6.63942 + 1e-4]]))
    flux = np.where(np.isclose(ergs, 6.63942), 1.0e4, 1.0)
    fname = write_spectrum(tmp_path / "line.dat", ergs, flux)
    # triangle of height 1e4 - 1 and half width 1e-4 on top of a constant 1
    expected = (9.0 - 1.0) + (1.0e4 - 1.0) * 1e-4
    assert integrated_flux_from_file(1.0, 9.0, fname, True) == pytest.approx(expected, rel=1e-3)


def test_integrated_flux_from_file_range_errors(tmp_path):
    ergs = np.linspace(1.0, 10.0, 10)
    fname = write_spectrum(tmp_path / "short.dat", ergs, np.ones_like(ergs))
    with pytest.raises(RangeError, match="short.dat"):
        integrated_flux_from_file(0.5, 5.0, fname)
    with pytest.raises(RangeError):
        integrated_flux_from_file(2.0, 12.0, fname, True)


def test_integrated_flux_from_missing_file(tmp_path):
    with pytest.raises(IOFailure):
        integrated_flux_from_file(1.0, 2.0, str(tmp_path / "nothing.dat"))


def test_total_flux_is_trapezoid_over_energies():
    table = SpectrumTable(np.array([1.0, 2.0, 4.0]), np.array([1.0, 3.0, 1.0]), np.zeros(3))
    assert table.total_flux() == pytest.approx(0.5 * (1.0 + 3.0) + 0.5 * 2.0 * (3.0 + 1.0))
    single = SpectrumTable(np.array([1.0]), np.array([1.0]), np.zeros(1))
    assert math.isnan(single.total_flux())
