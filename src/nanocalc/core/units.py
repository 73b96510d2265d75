"""Unit-tagged quantities and conversion utilities.

Lengths are carried in nanometers, temperatures in kelvin and energies in
electron volts. Each quantity is its own type: adding a ``Nanometer`` to a
``Kelvin`` raises :class:`UnitMismatchError` before any arithmetic happens.
Conversions between compatible units are explicit methods.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import TypeVar

from nanocalc.core.constants import (
    C_NM_S,
    EV_TO_J,
    HC_EV_NM,
    J_TO_EV,
    K_B,
    M_TO_NM,
    NM_TO_M,
    NM_TO_UM,
    UM_TO_NM,
    ZERO_CELSIUS_K,
)
from nanocalc.core.errors import UnitMismatchError

Q = TypeVar("Q", bound="Quantity")


def _check_number(value: object, what: str) -> float:
    if isinstance(value, Quantity):
        raise UnitMismatchError(f"{what} expects a plain number, got {type(value).__name__}")
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise TypeError(f"{what} expects a real number, got {type(value).__name__}")
    return float(value)


@dataclass(frozen=True)
class Quantity:
    """A real scalar tagged with a physical unit."""

    value: float

    unit = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", _check_number(self.value, type(self).__name__))

    def _same_unit(self, other: object) -> None:
        if type(other) is not type(self):
            other_name = type(other).__name__
            raise UnitMismatchError(
                f"Cannot combine {type(self).__name__} with {other_name}"
            )

    def __add__(self: Q, other: Q) -> Q:
        self._same_unit(other)
        return type(self)(self.value + other.value)

    def __sub__(self: Q, other: Q) -> Q:
        self._same_unit(other)
        return type(self)(self.value - other.value)

    def __mul__(self: Q, factor: float) -> Q:
        return type(self)(self.value * _check_number(factor, "Scaling"))

    __rmul__ = __mul__

    def __truediv__(self, other):  # type: ignore[no-untyped-def]
        if isinstance(other, Quantity):
            self._same_unit(other)
            return self.value / other.value
        return type(self)(self.value / _check_number(other, "Scaling"))

    def __neg__(self: Q) -> Q:
        return type(self)(-self.value)

    def __lt__(self, other: object) -> bool:
        self._same_unit(other)
        return self.value < other.value  # type: ignore[attr-defined]

    def __le__(self, other: object) -> bool:
        self._same_unit(other)
        return self.value <= other.value  # type: ignore[attr-defined]

    def __gt__(self, other: object) -> bool:
        self._same_unit(other)
        return self.value > other.value  # type: ignore[attr-defined]

    def __ge__(self, other: object) -> bool:
        self._same_unit(other)
        return self.value >= other.value  # type: ignore[attr-defined]

    def __str__(self) -> str:
        return f"{self.value:g} {self.unit}"


class Nanometer(Quantity):
    """Length in nanometers."""

    unit = "nm"

    @classmethod
    def from_meters(cls, value: float) -> Nanometer:
        return cls(value * M_TO_NM)

    @classmethod
    def from_micrometers(cls, value: float) -> Nanometer:
        return cls(value * UM_TO_NM)

    def to_meters(self) -> float:
        return self.value * NM_TO_M

    def to_micrometers(self) -> float:
        return self.value * NM_TO_UM

    def photon_energy(self) -> ElectronVolt:
        """Energy of a photon with this vacuum wavelength."""
        return ElectronVolt(HC_EV_NM / self.value)

    def frequency_hz(self) -> float:
        """Frequency of light with this vacuum wavelength."""
        return C_NM_S / self.value


class Kelvin(Quantity):
    """Absolute temperature in kelvin."""

    unit = "K"

    @classmethod
    def from_celsius(cls, value: float) -> Kelvin:
        return cls(value + ZERO_CELSIUS_K)

    def to_celsius(self) -> float:
        return self.value - ZERO_CELSIUS_K

    def thermal_energy(self) -> ElectronVolt:
        """k_B T expressed in electron volts."""
        return ElectronVolt(K_B * self.value * J_TO_EV)


class ElectronVolt(Quantity):
    """Energy in electron volts."""

    unit = "eV"

    @classmethod
    def from_joules(cls, value: float) -> ElectronVolt:
        return cls(value * J_TO_EV)

    def to_joules(self) -> float:
        return self.value * EV_TO_J

    def wavelength(self) -> Nanometer:
        """Vacuum wavelength of a photon with this energy."""
        return Nanometer(HC_EV_NM / self.value)


class RefractiveIndex(Quantity):
    """Real, dimensionless refractive index (e.g. of a non-absorbing medium)."""

    unit = ""

    def __str__(self) -> str:
        return f"{self.value:.4f}"


@dataclass(frozen=True)
class ComplexRefractiveIndex:
    """Complex refractive index ``n + ik``; ``k >= 0`` for absorbing media."""

    real: float
    imag: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "real", _check_number(self.real, "ComplexRefractiveIndex.real"))
        object.__setattr__(self, "imag", _check_number(self.imag, "ComplexRefractiveIndex.imag"))

    @classmethod
    def from_complex(cls, value: complex) -> ComplexRefractiveIndex:
        value = complex(value)
        return cls(value.real, value.imag)

    def to_complex(self) -> complex:
        return complex(self.real, self.imag)

    def to_permittivity(self) -> complex:
        """Relative permittivity ``(n + ik)**2``."""
        n = self.to_complex()
        return n * n

    def relative_to(self, medium: RefractiveIndex) -> complex:
        """Relative index ``m = n_particle / n_medium``."""
        if not isinstance(medium, RefractiveIndex):
            raise UnitMismatchError(
                f"Relative index needs a RefractiveIndex, got {type(medium).__name__}"
            )
        return self.to_complex() / medium.value

    def __str__(self) -> str:
        return f"{self.real:.4f} + {self.imag:.4f}i"


def as_quantity(cls: type[Q], value: object, name: str) -> Q:
    """Coerce ``value`` to ``cls``.

    Plain numbers are tagged with ``cls``; quantities of another unit raise
    :class:`UnitMismatchError`.
    """
    if isinstance(value, cls):
        return value
    if isinstance(value, Quantity):
        raise UnitMismatchError(
            f"{name} expects {cls.__name__}, got {type(value).__name__}"
        )
    return cls(_check_number(value, name))


def as_complex_index(value: object, name: str) -> ComplexRefractiveIndex:
    """Coerce a complex number or (n, k) pair to :class:`ComplexRefractiveIndex`."""
    if isinstance(value, ComplexRefractiveIndex):
        return value
    if isinstance(value, Quantity):
        raise UnitMismatchError(
            f"{name} expects ComplexRefractiveIndex, got {type(value).__name__}"
        )
    if isinstance(value, tuple) and len(value) == 2:
        return ComplexRefractiveIndex(*value)
    if isinstance(value, numbers.Complex) and not isinstance(value, bool):
        return ComplexRefractiveIndex.from_complex(complex(value))
    raise TypeError(f"{name} expects a complex refractive index, got {type(value).__name__}")


def nm_to_um(value: float | int) -> float:
    """Convert nanometers to micrometers."""
    return float(value) * NM_TO_UM


def um_to_nm(value: float | int) -> float:
    """Convert micrometers to nanometers."""
    return float(value) * UM_TO_NM


def nm_to_m(value: float | int) -> float:
    """Convert nanometers to meters."""
    return float(value) * NM_TO_M


def m_to_nm(value: float | int) -> float:
    """Convert meters to nanometers."""
    return float(value) * M_TO_NM


__all__ = [
    "Quantity",
    "Nanometer",
    "Kelvin",
    "ElectronVolt",
    "RefractiveIndex",
    "ComplexRefractiveIndex",
    "as_quantity",
    "as_complex_index",
    "nm_to_um",
    "um_to_nm",
    "nm_to_m",
    "m_to_nm",
]
