"""
Monte Carlo sampling of axion energies and production radii.

Samples are drawn by inversion: a spectrum is integrated into a normalized
cumulative distribution, whose inverse maps uniform random numbers onto
energies (or radii).

Key Functions
-------------
- cumulative_trapezoid_from_zero: Running trapezoid integral of a tabulated function
- build_inverse_cdf: Normalized cumulative distribution of a tabulated density
- InverseCDF: Inverse of a tabulated cumulative distribution
- AxionMCGenerator: Energy sampler for one (solar model, process, energy range) setup
- calculate_inverse_cdfs_from_solar_model: Radius and energy CDFs of the emission
- draw_mc_samples_from_file: Draw (energy, radius) pairs from saved CDFs
"""

import numpy as np
from numba import jit

from .constants import LIBRARY_NAME
from .errors import NumericalFailure
from .integrands import Process, get_integrand
from .solar_model import as_isotope
from .spectral_flux import calculate_spectral_flux_solar_disc
from .spectrum_utils import save_to_file, read_table


@jit(nopython=True, cache=True)
def _cumulative_trapezoid_core(x, y):
    cumulative = np.zeros(len(x))
    norm = 0.0
    # the first sample enters the first step as 0
    prev = 0.0
    for i in range(1, len(x)):
        norm += 0.5 * (x[i] - x[i - 1]) * (y[i] + prev)
        cumulative[i] = norm
        prev = y[i]
    return cumulative


def cumulative_trapezoid_from_zero(x, y):
    """Running trapezoid integral of y(x).

    The first entry is exactly 0 and the first sample's own value does not
    contribute to the cumulant: the first trapezoid is 0.5*(x[1] - x[0])*y[1].

    Parameters
    ----------
    x : array-like
        Increasing abscissae
    y : array-like
        Function values at x

    Returns
    -------
    NDArray
        Cumulative integral, same length as x
    """
    x = np.ascontiguousarray(x, dtype=float)
    y = np.ascontiguousarray(y, dtype=float)
    if x.shape != y.shape:
        raise ValueError(f"x and y must have the same shape, got {x.shape} and {y.shape}")
    return _cumulative_trapezoid_core(x, y)


def build_inverse_cdf(x, density):
    """Normalized cumulative distribution of a tabulated density.

    Parameters
    ----------
    x : array-like
        Increasing grid (energies or radii)
    density : array-like
        Non-negative density at x

    Returns
    -------
    cdf : NDArray
        Cumulative values at every x, from exactly 0 to exactly 1
    norm : float
        Total integral of the density

    Raises
    ------
    NumericalFailure
        If the density integrates to zero or a non-finite value
    """
    cumulative = cumulative_trapezoid_from_zero(x, density)
    norm = cumulative[-1] if len(cumulative) > 0 else 0.0
    if not np.isfinite(norm) or norm <= 0.0:
        raise NumericalFailure(f"Cannot normalize a distribution with total integral {norm}")
    return cumulative / norm, norm


class InverseCDF:
    """Piecewise linear inverse of a tabulated cumulative distribution.

    Plateaus of the cumulative table (zero density) are skipped: a
    probability u is mapped into the first segment whose upper end
    reaches u, so the inverse stays single valued.

    Parameters
    ----------
    cdf : array-like
        Non-decreasing cumulative probabilities
    x : array-like
        Grid on which the cumulative distribution is tabulated
    """

    def __init__(self, cdf, x):
        self.cdf = np.asarray(cdf, dtype=float)
        self.x = np.asarray(x, dtype=float)
        if self.cdf.shape != self.x.shape or self.cdf.size < 2:
            raise ValueError("Inverse CDF needs at least two (probability, value) pairs of equal length")
        if np.any(np.diff(self.cdf) < 0) or self.cdf[-1] <= self.cdf[0]:
            raise ValueError("Cumulative probabilities must be non-decreasing and not constant")

    def __call__(self, u):
        u = np.clip(np.asarray(u, dtype=float), self.cdf[0], self.cdf[-1])
        i = np.clip(np.searchsorted(self.cdf, u, side="left"), 1, len(self.cdf) - 1)
        c0, c1 = self.cdf[i - 1], self.cdf[i]
        width = c1 - c0
        frac = np.where(width > 0, (u - c0) / np.where(width > 0, width, 1.0), 0.0)
        value = self.x[i - 1] + frac * (self.x[i] - self.x[i - 1])
        return float(value) if np.ndim(value) == 0 else value

    def sample(self, num_samples, rng=None):
        """Draw num_samples values by inversion of uniform random numbers."""
        rng = np.random.default_rng(rng)
        return self(rng.uniform(0.0, 1.0, size=num_samples))


class AxionMCGenerator:
    """Sampler of axion energies from the spectrum of a solar model.

    The spectrum is computed on the grid omega_min + i*omega_delta,
    i = 0 ... int((omega_max - omega_min)/omega_delta) - 1, with the disc
    integrator (radius r_max if r_max < 1, else the full disc).

    Parameters
    ----------
    model : solar model
    process : Process or str
        Production process
    omega_min, omega_max, omega_delta : float
        Energy range and step (keV)
    r_max : float
        Disc radius in solar radii

    Attributes
    ----------
    inv_cdf_data_erg : NDArray
        Energy grid
    inv_cdf_data_x : NDArray
        Normalized cumulative flux on the grid
    integrated_norm : float
        Total flux over the grid (axions / cm^2 s)
    """

    def __init__(self, model, process, omega_min, omega_max, omega_delta, r_max=1.0):
        n_omega_vals = int((omega_max - omega_min) / omega_delta)
        ergs = omega_min + omega_delta * np.arange(n_omega_vals)
        disc_radius = r_max if r_max < 1.0 else 1.0
        spectrum = calculate_spectral_flux_solar_disc(ergs, disc_radius, model, process)
        self._init_from_spectrum(ergs, spectrum.flux)

    @classmethod
    def from_spectrum(cls, energies, fluxes):
        """Generator for an already tabulated spectrum."""
        generator = cls.__new__(cls)
        generator._init_from_spectrum(energies, fluxes)
        return generator

    @classmethod
    def from_file(cls, inv_cdf_file):
        """Generator from a table saved with ``save_inv_cdf_to_file``."""
        data = read_table(inv_cdf_file)
        generator = cls.__new__(cls)
        generator.inv_cdf_data_x = data[:, 0]
        generator.inv_cdf_data_erg = data[:, 1]
        generator.integrated_norm = float("nan")
        generator.init_inv_cdf_interpolator()
        return generator

    def _init_from_spectrum(self, energies, fluxes):
        energies = np.asarray(energies, dtype=float)
        cdf, norm = build_inverse_cdf(energies, fluxes)
        self.inv_cdf_data_erg = energies
        self.inv_cdf_data_x = cdf
        self.integrated_norm = norm
        self.init_inv_cdf_interpolator()

    def init_inv_cdf_interpolator(self):
        self.inv_cdf = InverseCDF(self.inv_cdf_data_x, self.inv_cdf_data_erg)

    def evaluate_inv_cdf(self, x):
        """Energy at which the cumulative probability reaches x."""
        return self.inv_cdf(x)

    def draw_axion_energies(self, n, rng=None):
        """Draw n axion energies (keV)."""
        return self.inv_cdf.sample(n, rng)

    def save_inv_cdf_to_file(self, path):
        comment = (f"Inverse CDF of the axion energy spectrum by {LIBRARY_NAME}.\n"
                   "Columns: cumulative probability, energy [keV]")
        save_to_file(path, (self.inv_cdf_data_x, self.inv_cdf_data_erg), comment)


def calculate_inverse_cdfs_from_solar_model(model, radii, energies, save_output_prefix,
                                            process=Process.PRIMAKOFF, isotope=None):
    """Tabulate the radius and energy distributions of the axion emission.

    The emission density dN/(dr dE) is taken as the volume integrand of the
    process. The radial distribution is its integral over the energies; for
    every radius the energy distribution is normalized separately.

    Couplings are not passed separately: they are folded into the model's
    rates. Both tables are normalized, so an overall coupling factor drops
    out; only the relative size of the rates matters.

    Parameters
    ----------
    model : solar model
    radii : array-like
        Increasing radii in [r_lo, r_hi] (solar radii)
    energies : array-like
        Increasing energies (keV)
    save_output_prefix : str
        Output files are <prefix>_radii.dat and <prefix>_energies.dat
    process : Process, str or callable
    isotope : Isotope or str, optional

    Returns
    -------
    radial_cdf : NDArray
        Normalized cumulative distribution at each radius
    energy_cdfs : NDArray
        Array of shape (len(energies), len(radii)); column j is the energy
        CDF at radii[j] (all zeros where nothing is emitted)
    """
    integrand = get_integrand(process)
    isotope = as_isotope(isotope)
    radii = np.asarray(radii, dtype=float)
    energies = np.asarray(energies, dtype=float)

    energy_cdfs = np.zeros((len(energies), len(radii)))
    radial_density = np.zeros(len(radii))
    for j, r in enumerate(radii):
        emission = np.array([integrand(r, erg, model, isotope) for erg in energies])
        cumulative = cumulative_trapezoid_from_zero(energies, emission)
        radial_density[j] = cumulative[-1]
        if cumulative[-1] > 0.0:
            energy_cdfs[:, j] = cumulative / cumulative[-1]

    radial_cdf, _ = build_inverse_cdf(radii, radial_density)

    save_to_file(
        f"{save_output_prefix}_radii.dat",
        (radii, radial_cdf, radial_density),
        f"Radial distribution of the axion emission by {LIBRARY_NAME}.\n"
        "Columns: radius [R_sol], cumulative probability, energy-integrated emission",
    )
    save_to_file(
        f"{save_output_prefix}_energies.dat",
        [energies] + [energy_cdfs[:, j] for j in range(len(radii))],
        f"Energy distributions of the axion emission by {LIBRARY_NAME}.\n"
        "Columns: energy [keV], cumulative probability at each radius of the _radii.dat file",
    )
    return radial_cdf, energy_cdfs


def draw_mc_samples_from_file(mc_file_prefix, n, rng=None):
    """Draw axion (energy, radius) pairs from files of ``calculate_inverse_cdfs_from_solar_model``.

    The radius is drawn from the radial distribution; the energy is then
    drawn from the energy distribution of the closest tabulated radius that
    emits axions.

    Returns
    -------
    NDArray
        Array of shape (n, 2) with columns [energy (keV), radius (R_sol)]
    """
    rng = np.random.default_rng(rng)
    radii_data = read_table(f"{mc_file_prefix}_radii.dat")
    energy_data = read_table(f"{mc_file_prefix}_energies.dat")
    radii, radial_cdf, radial_density = radii_data[:, 0], radii_data[:, 1], radii_data[:, 2]
    energies = energy_data[:, 0]
    energy_cdfs = energy_data[:, 1:]

    radius_sampler = InverseCDF(radial_cdf, radii)
    emitting = np.flatnonzero(radial_density > 0.0)
    energy_samplers = {}

    samples = np.zeros((n, 2))
    sampled_radii = radius_sampler.sample(n, rng)
    for i, r in enumerate(sampled_radii):
        j = emitting[np.argmin(np.abs(radii[emitting] - r))]
        if j not in energy_samplers:
            energy_samplers[j] = InverseCDF(energy_cdfs[:, j], energies)
        samples[i, 0] = energy_samplers[j](rng.uniform(0.0, 1.0))
        samples[i, 1] = r
    return samples


__all__ = [
    'cumulative_trapezoid_from_zero',
    'build_inverse_cdf',
    'InverseCDF',
    'AxionMCGenerator',
    'calculate_inverse_cdfs_from_solar_model',
    'draw_mc_samples_from_file',
]
