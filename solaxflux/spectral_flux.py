"""
Spectral and integrated solar axion fluxes.

This module integrates the production rates of a solar model over the
solar volume, or over a projected disc of the Sun, and over energy windows.
All fluxes are in axions / (cm^2 s keV) (spectra) or axions / (cm^2 s)
(integrated fluxes).

Key Functions
-------------
- calculate_spectral_flux: Spectrum over the full solar volume
- calculate_spectral_flux_solar_disc: Spectrum from a disc of radius r_max
- calculate_flux: Flux in an energy window, computed on the fly
- integrated_flux_from_file: Flux in an energy window from a saved spectrum
"""

from dataclasses import dataclass

import numpy as np
from scipy.integrate import quad

from .constants import (
    pi, SPECTRAL_FLUX_FACTOR, AXION_ELECTRON_PEAKS, LIBRARY_NAME, INTEGRATION_CONFIG
)
from .errors import NumericalFailure, RangeError
from .integrands import Process, get_rate, get_integrand
from .solar_model import as_isotope
from .spectrum_utils import save_to_file, OneDInterpolator

FLUX_COLUMNS = (
    "Columns: energy values [keV], axion flux [axions / cm^2 s keV], "
    "axion flux error estimate [axions / cm^2 s keV]"
)


@dataclass
class SpectrumTable:
    """Spectrum on an energy grid with quadrature error estimates.

    Attributes
    ----------
    energies : NDArray
        Energies in keV, strictly increasing
    flux : NDArray
        Differential flux at each energy
    flux_err : NDArray
        Non-negative error estimate of each flux value
    """
    energies: np.ndarray
    flux: np.ndarray
    flux_err: np.ndarray

    def __len__(self):
        return len(self.energies)

    def as_array(self):
        """Return the table as an (N, 3) array [energy, flux, flux_err]."""
        return np.column_stack((self.energies, self.flux, self.flux_err))

    def total_flux(self):
        """Trapezoid integral of the flux over the tabulated energies (axions / cm^2 s).

        NaN for tables with fewer than two energies.
        """
        if len(self) < 2:
            return float("nan")
        return float(np.sum(0.5 * np.diff(self.energies) * (self.flux[1:] + self.flux[:-1])))

    def save(self, path, comment):
        save_to_file(path, (self.energies, self.flux, self.flux_err), comment)


def _checked(func, what):
    """Wrap an integrand so that non-finite values abort the integration."""
    def wrapper(x):
        value = func(x)
        if not np.isfinite(value):
            raise NumericalFailure(f"Non-finite integrand in {what} at x = {x}: {value}")
        return value
    return wrapper


def _radius_integral(erg, model, integrand, isotope):
    """Raw integral of a volume integrand over [r_lo, r_hi] at fixed energy."""
    f = _checked(lambda r: integrand(r, erg, model, isotope), f"radius integral at {erg} keV")
    cfg = INTEGRATION_CONFIG
    return quad(f, model.r_lo, model.r_hi,
                epsabs=cfg.abs_prec, epsrel=cfg.rel_prec, limit=cfg.limit)


def calculate_spectral_flux(ergs, model, integrand=Process.PRIMAKOFF, isotope=None, saveas=""):
    """Spectral flux over the full solar volume.

    Parameters
    ----------
    ergs : array-like
        Energies (keV)
    model : solar model
        Provides the rates and the radius range [r_lo, r_hi]
    integrand : Process, str or callable
        Process to integrate, or an integrand ``f(r, erg, model, isotope)``
    isotope : Isotope or str, optional
        Element for element-resolved opacity contributions
    saveas : str
        If non-empty, the table is saved to this path

    Returns
    -------
    SpectrumTable
        Energies, fluxes and error estimates
    """
    func = get_integrand(integrand)
    isotope = as_isotope(isotope)
    ergs = np.asarray(ergs, dtype=float)
    results = np.zeros(len(ergs))
    errors = np.zeros(len(ergs))

    for i, erg in enumerate(ergs):
        integral, error = _radius_integral(erg, model, func, isotope)
        results[i] = SPECTRAL_FLUX_FACTOR * integral
        errors[i] = SPECTRAL_FLUX_FACTOR * error

    table = SpectrumTable(ergs, results, errors)
    if saveas != "":
        table.save(saveas, f"Spectral flux over full solar volume by {LIBRARY_NAME}.\n{FLUX_COLUMNS}")
    return table


def _line_of_sight_integral(rad, erg, r_max, model, rate, isotope):
    """Integral along the line of sight at impact parameter rad (one side of the tangent point).

    The factor rho/sqrt(rho^2 - rad^2) diverges at rho = rad. It is split as
    (rho - rad)^(-1/2) * rho/sqrt(rho + rad) and the first factor is used as
    an algebraic weight (QUADPACK QAWS).
    """
    if rad >= r_max:
        return 0.0
    prefactor = 0.5 * (erg / pi) ** 2

    def f(rho):
        return rho / np.sqrt(rho + rad) * prefactor * rate(erg, rho, model, isotope)

    cfg = INTEGRATION_CONFIG
    result, _ = quad(_checked(f, f"line-of-sight integral at {erg} keV"), rad, r_max,
                     weight="alg", wvar=(-0.5, 0.0),
                     epsabs=cfg.inner_prec_scale * cfg.abs_prec,
                     epsrel=cfg.inner_prec_scale * cfg.rel_prec,
                     limit=cfg.limit)
    return result


def calculate_spectral_flux_solar_disc(ergs, r_max, model, process=Process.PRIMAKOFF, isotope=None, saveas=""):
    """Spectral flux from the projected solar disc with impact parameter up to r_max.

    For each energy the flux is the nested integral
    int_{r_lo}^{r_max} d(rad) rad * int_{rad}^{r_max} d(rho) rho/sqrt(rho^2 - rad^2) * 0.5*(erg/pi)^2 * rate(erg, rho).

    Parameters
    ----------
    ergs : array-like
        Energies (keV)
    r_max : float
        Disc radius in solar radii; clamped to the model's r_hi
    model : solar model
    process : Process or str
        Process whose rate is integrated, fixed for the whole spectrum
    isotope : Isotope or str, optional
        Element for the single-element opacity process
    saveas : str
        If non-empty, the table is saved to this path

    Returns
    -------
    SpectrumTable
    """
    rate = get_rate(process)
    isotope = as_isotope(isotope)
    ergs = np.asarray(ergs, dtype=float)
    r_min = model.r_lo
    r_max = min(r_max, model.r_hi)
    results = np.zeros(len(ergs))
    errors = np.zeros(len(ergs))

    cfg = INTEGRATION_CONFIG
    for i, erg in enumerate(ergs):
        def rad_integrand(rad):
            return rad * _line_of_sight_integral(rad, erg, r_max, model, rate, isotope)

        integral, error = quad(rad_integrand, r_min, r_max,
                               epsabs=cfg.abs_prec, epsrel=cfg.rel_prec, limit=cfg.limit)
        results[i] = SPECTRAL_FLUX_FACTOR * integral
        errors[i] = SPECTRAL_FLUX_FACTOR * error

    table = SpectrumTable(ergs, results, errors)
    if saveas != "":
        comment = (f"Spectral flux over full solar disc, r in [{r_min:f}, {r_max:f}] R_sol "
                   f"by {LIBRARY_NAME}.\n{FLUX_COLUMNS}")
        table.save(saveas, comment)
    return table


def spectral_flux_integrand(erg, model, integrand=Process.AXION_ELECTRON, isotope=None):
    """Differential flux at a single energy (axions / cm^2 s keV)."""
    result, _ = _radius_integral(erg, model, get_integrand(integrand), as_isotope(isotope))
    return SPECTRAL_FLUX_FACTOR * result


def calculate_flux(lowerlimit, upperlimit, model, isotope=None, integrand=Process.AXION_ELECTRON):
    """Flux in the energy window [lowerlimit, upperlimit], computed on the fly.

    The result is multiplied by ``INTEGRATION_CONFIG.flux_window_rescaling``
    (1e20), a fixed convention that callers rely on.
    """
    func = get_integrand(integrand)
    isotope = as_isotope(isotope)
    cfg = INTEGRATION_CONFIG
    result, _ = quad(spectral_flux_integrand, lowerlimit, upperlimit, args=(model, func, isotope),
                     epsabs=cfg.abs_prec2, epsrel=cfg.rel_prec2, limit=cfg.limit2)
    return result * cfg.flux_window_rescaling


def integrated_flux_from_file(erg_min, erg_max, spectral_flux_file, includes_electron_interactions=False):
    """Integrate a tabulated spectrum over [erg_min, erg_max].

    Parameters
    ----------
    erg_min, erg_max : float
        Energy window (keV)
    spectral_flux_file : str
        Table with energies in the first and fluxes in the second column
    includes_electron_interactions : bool
        If True, the window is split at the axion-electron line energies
        inside it so the narrow peaks are resolved

    Returns
    -------
    float
        Integrated flux (axions / cm^2 s)

    Raises
    ------
    RangeError
        If the window exceeds the tabulated energy range
    """
    spectral_flux = OneDInterpolator(spectral_flux_file)
    if erg_min < spectral_flux.lower() or erg_max > spectral_flux.upper():
        raise RangeError(
            f"The integration boundaries [{erg_min}, {erg_max}] given to 'integrated_flux_from_file' "
            f"are incompatible with the min/max available energy [{spectral_flux.lower()}, "
            f"{spectral_flux.upper()}] in the file {spectral_flux_file}.")

    f = _checked(spectral_flux.interpolate, f"flux table {spectral_flux_file}")
    cfg = INTEGRATION_CONFIG
    if includes_electron_interactions:
        relevant_peaks = [peak for peak in AXION_ELECTRON_PEAKS if erg_min < peak < erg_max]
        result, _ = quad(f, erg_min, erg_max, points=relevant_peaks or None,
                         epsabs=cfg.abs_prec2, epsrel=cfg.rel_prec2, limit=cfg.limit)
    else:
        result, _ = quad(f, erg_min, erg_max,
                         epsabs=cfg.abs_prec2, epsrel=cfg.rel_prec2, limit=cfg.limit)
    return result


# Convenience versions for the individual processes

def _volume_or_disc(ergs, model, process, r_max, saveas, isotope=None):
    if r_max is None:
        return calculate_spectral_flux(ergs, model, process, isotope=isotope, saveas=saveas)
    return calculate_spectral_flux_solar_disc(ergs, r_max, model, process, isotope=isotope, saveas=saveas)


def calculate_spectral_flux_Primakoff(ergs, model, r_max=None, saveas=""):
    return _volume_or_disc(ergs, model, Process.PRIMAKOFF, r_max, saveas)


def calculate_spectral_flux_Compton(ergs, model, saveas=""):
    return calculate_spectral_flux(ergs, model, Process.COMPTON, saveas=saveas)


def calculate_spectral_flux_weightedCompton(ergs, model, saveas=""):
    return calculate_spectral_flux(ergs, model, Process.WEIGHTED_COMPTON, saveas=saveas)


def calculate_spectral_flux_element(ergs, element, model, saveas=""):
    return calculate_spectral_flux(ergs, model, Process.OPACITY_ELEMENT, isotope=element, saveas=saveas)


def calculate_spectral_flux_all_ff(ergs, model, saveas=""):
    return calculate_spectral_flux(ergs, model, Process.ALL_FF, saveas=saveas)


def calculate_spectral_flux_axionelectron(ergs, model, r_max=None, saveas=""):
    return _volume_or_disc(ergs, model, Process.AXION_ELECTRON, r_max, saveas)


def calculate_spectral_flux_opacity(ergs, model, saveas=""):
    return calculate_spectral_flux(ergs, model, Process.OPACITY, saveas=saveas)


__all__ = [
    'SpectrumTable',
    'calculate_spectral_flux',
    'calculate_spectral_flux_solar_disc',
    'spectral_flux_integrand',
    'calculate_flux',
    'integrated_flux_from_file',
    'calculate_spectral_flux_Primakoff',
    'calculate_spectral_flux_Compton',
    'calculate_spectral_flux_weightedCompton',
    'calculate_spectral_flux_element',
    'calculate_spectral_flux_all_ff',
    'calculate_spectral_flux_axionelectron',
    'calculate_spectral_flux_opacity',
]
