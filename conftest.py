"""
Toy solar models shared by the tests.

The rates are simple closed-form functions, so the flux integrals can be
compared with analytic results.
"""

import math

import pytest

from solaxflux.solar_model import OpacityCode, OP_ELEMENT_NAMES


class ToySolarModel:
    """Solar model with radius-independent rates.

    Each rate is ``scale * exp(-erg / e_fold)`` (``e_fold=None`` means
    energy independent). Element opacities are 1 per element, the aggregate
    opacity is ``aggregate_opacity``.
    """

    def __init__(self, r_lo=0.0, r_hi=1.0, opcode=OpacityCode.OP, scale=1.0e-40,
                 e_fold=None, temperature=1.0, aggregate_opacity=7.0):
        self.r_lo = r_lo
        self.r_hi = r_hi
        self.opcode = opcode
        self.scale = scale
        self.e_fold = e_fold
        self.temperature = temperature
        self.aggregate_opacity = aggregate_opacity
        self.opacity_calls = []

    def _rate(self, erg):
        if self.e_fold is None:
            return self.scale
        return self.scale * math.exp(-erg / self.e_fold)

    def Gamma_P_Primakoff(self, erg, r):
        return self._rate(erg)

    def Gamma_P_Compton(self, erg, r):
        return 2.0 * self._rate(erg)

    def Gamma_P_opacity(self, erg, r, element=None):
        self.opacity_calls.append(element)
        if element is None:
            return self.aggregate_opacity * self._rate(erg)
        if element not in OP_ELEMENT_NAMES:
            raise KeyError(element)
        return self._rate(erg)

    def Gamma_P_ff(self, erg, r):
        return 3.0 * self._rate(erg)

    def Gamma_P_ee(self, erg, r):
        return 4.0 * self._rate(erg)

    def Gamma_P_all_electron(self, erg, r):
        return 5.0 * self._rate(erg)

    def temperature_in_keV(self, r):
        return self.temperature


@pytest.fixture
def toy_model():
    return ToySolarModel()


@pytest.fixture
def decaying_model():
    return ToySolarModel(e_fold=2.0)
