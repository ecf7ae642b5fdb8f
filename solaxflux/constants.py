"""
Physical constants and numerical settings used in solar axion flux calculations.
"""

import math
from dataclasses import dataclass

# Mathematical constant
pi = math.pi

# Fundamental constants
hbar = 6.582119569e-25  # Reduced Planck constant, GeV·second
keV2cm = 1.973269804e-8  # 1 keV^-1 in cm

# Astronomical constants
radius_sol = 6.957e8  # Solar radius, meters
distance_sol = 1.495978707e11  # Sun-Earth distance (1 AU), meters

# Converts the radius/energy integrals into axions / (cm^2 s keV):
# Rsol^3 [keV^-3] / (d^2 [cm^2] * hbar [keV s]). The 1/(2 pi^2) sits in the integrands.
SPECTRAL_FLUX_FACTOR = pow(radius_sol / (1.0e-2 * keV2cm), 3) / (
    pow(1.0e2 * distance_sol, 2) * (1.0e6 * hbar)
)

# Energies of the narrow axion-electron lines (keV), used as integration break points
AXION_ELECTRON_PEAKS = (
    0.653029, 0.779074, 0.920547, 0.956836, 1.02042, 1.05343, 1.3497, 1.40807,
    1.46949, 1.59487, 1.62314, 1.65075, 1.72461, 1.76286, 1.86037, 2.00007,
    2.45281, 2.61233, 3.12669, 3.30616, 3.88237, 4.08163, 5.64394, 5.76064,
    6.14217, 6.19863, 6.58874, 6.63942, 6.66482, 7.68441, 7.74104, 7.76785,
)

LIBRARY_NAME = "solaxflux"


@dataclass(frozen=True)
class IntegrationConfig:
    """Tolerances and subdivision budgets for all quadratures.

    Attributes
    ----------
    abs_prec, rel_prec : float
        Absolute/relative targets for radius integrals (volume and disc).
    limit : int
        Maximum number of subintervals for radius integrals.
    inner_prec_scale : float
        Factor applied to both targets of the line-of-sight integral.
    abs_prec2, rel_prec2 : float
        Targets for integrals over energy windows.
    limit2 : int
        Maximum number of subintervals for energy window integrals.
    flux_window_rescaling : float
        Fixed factor multiplying the result of ``calculate_flux``.
    """
    abs_prec: float = 0.0
    rel_prec: float = 1.0e-6
    limit: int = 10000
    inner_prec_scale: float = 0.1
    abs_prec2: float = 0.0
    rel_prec2: float = 1.0e-4
    limit2: int = 100000
    flux_window_rescaling: float = 1.0e20


INTEGRATION_CONFIG = IntegrationConfig()

__all__ = [
    # Basic constants
    'pi', 'hbar', 'keV2cm',
    # Astronomical constants
    'radius_sol', 'distance_sol',
    # Flux normalisation and line positions
    'SPECTRAL_FLUX_FACTOR', 'AXION_ELECTRON_PEAKS', 'LIBRARY_NAME',
    # Integration settings
    'IntegrationConfig', 'INTEGRATION_CONFIG',
]
