"""
Integrands for the different contributions to the solar axion flux.

Each process has two forms:

- a rate function ``rate_X(erg, r, model, isotope=None)`` returning the
  production rate density at radius r (used on lines of sight by the disc
  integrator), and
- an integrand ``integrand_X(r, erg, model, isotope=None)`` which multiplies
  the rate by the geometric weight 0.5*(r*erg/pi)^2 (used by the volume
  integrator).

Together with the unit factor in ``constants`` the radius integral of an
integrand is in axions / (cm^2 s keV).

Key Functions
-------------
- get_rate: Look up the rate function of a process
- get_integrand: Look up the volume integrand of a process
- metal_element_names: Element names entering the aggregated metal opacity
"""

import math
from enum import Enum

from numba import jit

from .constants import pi
from .solar_model import OpacityCode, OP_ELEMENT_NAMES, LIGHT_ELEMENTS


class Process(Enum):
    """Axion production processes (or fixed combinations of them)."""
    PRIMAKOFF = "Primakoff"
    COMPTON = "Compton"
    WEIGHTED_COMPTON = "weightedCompton"
    OPACITY_ELEMENT = "opacity_element"
    OPACITY = "opacity"
    ALL_FF = "all_ff"
    AXION_ELECTRON = "axionelectron"


@jit(nopython=True, cache=True)
def geometric_weight(r, erg):
    """Common weight 0.5*(r*erg/pi)^2 of all volume integrands."""
    x = r * erg / pi
    return 0.5 * x * x


@jit(nopython=True, cache=True)
def _compton_detailed_balance(u):
    """Thermal correction 0.5*(1 - 1/(exp(u) - 1)) with u = erg/T."""
    return 0.5 * (1.0 - 1.0 / math.expm1(u))


def metal_element_names(names=OP_ELEMENT_NAMES):
    """Return the elements heavier than H and He from an opacity element table.

    Parameters
    ----------
    names : sequence of str
        Element table; must start with ``LIGHT_ELEMENTS``

    Returns
    -------
    tuple of str
        All remaining elements, in table order

    Raises
    ------
    ValueError
        If the table does not start with H and He
    """
    names = tuple(names)
    n_light = len(LIGHT_ELEMENTS)
    if names[:n_light] != LIGHT_ELEMENTS:
        raise ValueError(
            f"Element table must start with {LIGHT_ELEMENTS}, got {names[:n_light]}")
    return names[n_light:]


# Rate functions

def rate_Primakoff(erg, r, model, isotope=None):
    return model.Gamma_P_Primakoff(erg, r)


def rate_Compton(erg, r, model, isotope=None):
    return model.Gamma_P_Compton(erg, r)


def rate_weightedCompton(erg, r, model, isotope=None):
    if erg == 0:
        return 0.0
    u = erg / model.temperature_in_keV(r)
    return _compton_detailed_balance(u) * model.Gamma_P_Compton(erg, r)


def rate_opacity_element(erg, r, model, isotope=None):
    if isotope is None:
        raise ValueError("The single-element opacity contribution requires an isotope")
    return model.Gamma_P_opacity(erg, r, isotope.name())


def rate_opacity(erg, r, model, isotope=None):
    """Opacity contribution of all metals.

    For the OP dataset the rate is summed over the individual elements
    (H and He excluded); the other datasets only provide one aggregate rate.
    """
    if model.opcode == OpacityCode.OP:
        return sum(model.Gamma_P_opacity(erg, r, name) for name in metal_element_names())
    if model.opcode in (OpacityCode.OPAS, OpacityCode.LEDCOP, OpacityCode.ATOMIC):
        return model.Gamma_P_opacity(erg, r)
    raise ValueError(f"Unknown opacity dataset: {model.opcode!r}")


def rate_all_ff(erg, r, model, isotope=None):
    # free-free and electron-electron, as in arXiv:1310.0823
    return model.Gamma_P_ff(erg, r) + model.Gamma_P_ee(erg, r)


def rate_all_axionelectron(erg, r, model, isotope=None):
    return model.Gamma_P_all_electron(erg, r)


# Volume integrands

def integrand_Primakoff(r, erg, model, isotope=None):
    return geometric_weight(r, erg) * rate_Primakoff(erg, r, model)


def integrand_Compton(r, erg, model, isotope=None):
    return geometric_weight(r, erg) * rate_Compton(erg, r, model)


def integrand_weightedCompton(r, erg, model, isotope=None):
    if erg == 0:
        return 0.0
    return geometric_weight(r, erg) * rate_weightedCompton(erg, r, model)


def integrand_opacity_element(r, erg, model, isotope=None):
    return geometric_weight(r, erg) * rate_opacity_element(erg, r, model, isotope)


def integrand_opacity(r, erg, model, isotope=None):
    return geometric_weight(r, erg) * rate_opacity(erg, r, model)


def integrand_all_ff(r, erg, model, isotope=None):
    return geometric_weight(r, erg) * rate_all_ff(erg, r, model)


def integrand_all_axionelectron(r, erg, model, isotope=None):
    return geometric_weight(r, erg) * rate_all_axionelectron(erg, r, model)


PROCESS_RATES = {
    Process.PRIMAKOFF: rate_Primakoff,
    Process.COMPTON: rate_Compton,
    Process.WEIGHTED_COMPTON: rate_weightedCompton,
    Process.OPACITY_ELEMENT: rate_opacity_element,
    Process.OPACITY: rate_opacity,
    Process.ALL_FF: rate_all_ff,
    Process.AXION_ELECTRON: rate_all_axionelectron,
}

PROCESS_INTEGRANDS = {
    Process.PRIMAKOFF: integrand_Primakoff,
    Process.COMPTON: integrand_Compton,
    Process.WEIGHTED_COMPTON: integrand_weightedCompton,
    Process.OPACITY_ELEMENT: integrand_opacity_element,
    Process.OPACITY: integrand_opacity,
    Process.ALL_FF: integrand_all_ff,
    Process.AXION_ELECTRON: integrand_all_axionelectron,
}


def get_rate(process):
    """Rate function ``(erg, r, model, isotope=None)`` of a process.

    Parameters
    ----------
    process : Process or str
        Process or its name, e.g. ``"Primakoff"``
    """
    return PROCESS_RATES[Process(process)]


def get_integrand(integrand):
    """Volume integrand ``(r, erg, model, isotope=None)`` of a process.

    Callables are returned unchanged, so custom integrands with the same
    signature can be passed wherever a process is expected.
    """
    if callable(integrand):
        return integrand
    return PROCESS_INTEGRANDS[Process(integrand)]


__all__ = [
    'Process', 'geometric_weight', 'metal_element_names',
    'rate_Primakoff', 'rate_Compton', 'rate_weightedCompton',
    'rate_opacity_element', 'rate_opacity', 'rate_all_ff',
    'rate_all_axionelectron',
    'integrand_Primakoff', 'integrand_Compton', 'integrand_weightedCompton',
    'integrand_opacity_element', 'integrand_opacity', 'integrand_all_ff',
    'integrand_all_axionelectron',
    'PROCESS_RATES', 'PROCESS_INTEGRANDS', 'get_rate', 'get_integrand',
]
