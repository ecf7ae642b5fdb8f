"""
Interface types shared with the solar model.

The solar model itself (profiles, opacity tables, rate calculations) is an
external collaborator. Any object exposing the following members can be
passed to the integrators:

- ``Gamma_P_Primakoff(erg, r)``, ``Gamma_P_Compton(erg, r)``,
  ``Gamma_P_opacity(erg, r[, element])``, ``Gamma_P_ff(erg, r)``,
  ``Gamma_P_ee(erg, r)``, ``Gamma_P_all_electron(erg, r)``
- ``temperature_in_keV(r)``
- ``r_lo``, ``r_hi`` (valid radius range in units of the solar radius)
- ``opcode`` (an ``OpacityCode``)

Energies are in keV throughout.
"""

from enum import Enum


class OpacityCode(Enum):
    """Opacity dataset a solar model was built from."""
    OP = "OP"
    OPAS = "OPAS"
    LEDCOP = "LEDCOP"
    ATOMIC = "ATOMIC"


# Element order of the OP opacity tables
OP_ELEMENT_NAMES = (
    "H", "He", "C", "N", "O", "Ne", "Na", "Mg", "Al",
    "Si", "S", "Ar", "Ca", "Cr", "Mn", "Fe", "Ni",
)

LIGHT_ELEMENTS = ("H", "He")


class Isotope:
    """Chemical element (and optionally mass number) for element-resolved rates.

    Parameters
    ----------
    element : str
        Element symbol, e.g. ``"Fe"``
    a_val : int, optional
        Mass number; 0 means natural abundance
    """

    def __init__(self, element, a_val=0):
        self.element = element
        self.a_val = a_val

    def name(self):
        """Element identifier used to select opacity contributions."""
        return self.element

    def __repr__(self):
        return f"Isotope({self.element!r}, {self.a_val})"

    def __eq__(self, other):
        if not isinstance(other, Isotope):
            return NotImplemented
        return (self.element, self.a_val) == (other.element, other.a_val)

    def __hash__(self):
        return hash((self.element, self.a_val))


def as_isotope(element):
    """Return ``element`` as an ``Isotope`` (strings are wrapped, None passes through)."""
    if element is None or isinstance(element, Isotope):
        return element
    return Isotope(str(element))


__all__ = [
    'OpacityCode', 'OP_ELEMENT_NAMES', 'LIGHT_ELEMENTS',
    'Isotope', 'as_isotope',
]
