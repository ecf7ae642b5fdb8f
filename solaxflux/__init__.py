"""
Solar axion flux calculations.

This package contains modular components for:
- Physical constants and integration settings
- Solar model interface types
- Integrands of the axion production processes
- Spectral and integrated fluxes (full volume, solar disc, energy windows)
- Table persistence and interpolation
- Inverse-CDF construction and Monte Carlo sampling
- Utility tools (timing)
"""

from .constants import *
from .errors import *
from .solar_model import *
from .integrands import *
from .spectrum_utils import *
from .spectral_flux import *
from .sampling import *
from .tools import *

__all__ = [
    # Constants
    'pi', 'hbar', 'keV2cm', 'radius_sol', 'distance_sol',
    'SPECTRAL_FLUX_FACTOR', 'AXION_ELECTRON_PEAKS', 'LIBRARY_NAME',
    'IntegrationConfig', 'INTEGRATION_CONFIG',

    # Errors
    'SolaxfluxError', 'RangeError', 'NumericalFailure', 'IOFailure',

    # Solar model interface
    'OpacityCode', 'OP_ELEMENT_NAMES', 'LIGHT_ELEMENTS', 'Isotope', 'as_isotope',

    # Integrands
    'Process', 'geometric_weight', 'metal_element_names',
    'rate_Primakoff', 'rate_Compton', 'rate_weightedCompton',
    'rate_opacity_element', 'rate_opacity', 'rate_all_ff', 'rate_all_axionelectron',
    'integrand_Primakoff', 'integrand_Compton', 'integrand_weightedCompton',
    'integrand_opacity_element', 'integrand_opacity', 'integrand_all_ff',
    'integrand_all_axionelectron',
    'PROCESS_RATES', 'PROCESS_INTEGRANDS', 'get_rate', 'get_integrand',

    # Spectrum utilities
    'save_to_file', 'read_table', 'OneDInterpolator',

    # Spectral flux
    'SpectrumTable',
    'calculate_spectral_flux', 'calculate_spectral_flux_solar_disc',
    'spectral_flux_integrand', 'calculate_flux', 'integrated_flux_from_file',
    'calculate_spectral_flux_Primakoff', 'calculate_spectral_flux_Compton',
    'calculate_spectral_flux_weightedCompton', 'calculate_spectral_flux_element',
    'calculate_spectral_flux_all_ff', 'calculate_spectral_flux_axionelectron',
    'calculate_spectral_flux_opacity',

    # Sampling
    'cumulative_trapezoid_from_zero', 'build_inverse_cdf', 'InverseCDF',
    'AxionMCGenerator', 'calculate_inverse_cdfs_from_solar_model',
    'draw_mc_samples_from_file',

    # Utility tools
    'timer',
]
