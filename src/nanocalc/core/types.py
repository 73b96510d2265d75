"""Request and result types shared by the models and the compute engine.

Everything here is immutable. Requests compare and hash by value so the
engine can use them directly as cache keys.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any

from nanocalc.core.units import (
    ComplexRefractiveIndex,
    Nanometer,
    RefractiveIndex,
    as_complex_index,
    as_quantity,
)


@dataclass(frozen=True)
class ParticleGeometry:
    """Homogeneous sphere."""

    radius: Nanometer

    def __post_init__(self) -> None:
        object.__setattr__(self, "radius", as_quantity(Nanometer, self.radius, "radius"))

    @property
    def diameter(self) -> Nanometer:
        return self.radius * 2.0

    @property
    def geometric_cross_section(self) -> float:
        """Projected area ``pi r^2`` in nm^2."""
        return math.pi * self.radius.value**2


@dataclass(frozen=True)
class CalculationRequest:
    """Single optical evaluation: one sphere at one wavelength.

    Attributes:
        radius: Particle radius
        wavelength: Vacuum wavelength of the incident light
        particle_index: Complex refractive index of the particle
        medium_index: Real refractive index of the embedding medium
    """

    radius: Nanometer
    wavelength: Nanometer
    particle_index: ComplexRefractiveIndex
    medium_index: RefractiveIndex = RefractiveIndex(1.0)

    def __post_init__(self) -> None:
        object.__setattr__(self, "radius", as_quantity(Nanometer, self.radius, "radius"))
        object.__setattr__(
            self, "wavelength", as_quantity(Nanometer, self.wavelength, "wavelength")
        )
        object.__setattr__(
            self, "particle_index", as_complex_index(self.particle_index, "particle_index")
        )
        object.__setattr__(
            self,
            "medium_index",
            as_quantity(RefractiveIndex, self.medium_index, "medium_index"),
        )

    @property
    def geometry(self) -> ParticleGeometry:
        return ParticleGeometry(self.radius)

    @property
    def size_parameter(self) -> float:
        """``x = 2 pi r / lambda``."""
        return 2.0 * math.pi * self.radius.value / self.wavelength.value

    @property
    def relative_index(self) -> complex:
        """``m = n_particle / n_medium``."""
        return self.particle_index.relative_to(self.medium_index)

    def with_wavelength(self, wavelength: Nanometer | float) -> CalculationRequest:
        return replace(self, wavelength=as_quantity(Nanometer, wavelength, "wavelength"))


@dataclass(frozen=True)
class SpectrumRequest:
    """A request template evaluated over an ordered sequence of wavelengths."""

    template: CalculationRequest
    wavelengths: tuple[float, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "wavelengths", as_wavelength_tuple(self.wavelengths))

    def __len__(self) -> int:
        return len(self.wavelengths)

    def requests(self) -> list[CalculationRequest]:
        return [self.template.with_wavelength(w) for w in self.wavelengths]


@dataclass(frozen=True)
class ResultMetadata:
    """Provenance of an optical result.

    ``converged`` is False when the series used every available term without
    meeting the truncation criterion; such results carry a warning.
    """

    size_parameter: float
    number_of_terms_used: int
    converged: bool
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class OpticalResult:
    """Efficiencies (dimensionless) and cross sections (nm^2) of a sphere."""

    wavelength: float
    q_sca: float
    q_abs: float
    q_ext: float
    c_sca: float
    c_abs: float
    c_ext: float
    metadata: ResultMetadata

    def conservation_error(self) -> float:
        """``|Q_ext - (Q_sca + Q_abs)|``, zero up to rounding."""
        return abs(self.q_ext - (self.q_sca + self.q_abs))

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["metadata"]["warnings"] = list(self.metadata.warnings)
        return data


class ConfinementRegime(str, Enum):
    """Quantum confinement regime, by particle radius over exciton Bohr radius."""

    WEAK = "weak"
    INTERMEDIATE = "intermediate"
    STRONG = "strong"


@dataclass(frozen=True)
class ThermalResult:
    """Size-reduced thermal conductivity of a particle.

    Attributes:
        diameter: Particle diameter in nm
        temperature: Temperature in K
        kappa_eff: Effective conductivity in W/(m K)
        kappa_bulk: Bulk conductivity at this temperature in W/(m K)
        reduction_factor: kappa_eff / kappa_bulk
        mean_free_path: Bulk carrier mean free path in nm
        size_to_mfp_ratio: diameter / mean_free_path
        dominant_mechanism: "boundary" or "intrinsic" scattering
    """

    diameter: float
    temperature: float
    kappa_eff: float
    kappa_bulk: float
    reduction_factor: float
    mean_free_path: float
    size_to_mfp_ratio: float
    dominant_mechanism: str
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class ElectronicResult:
    """Size-dependent bandgap of a semiconductor nanocrystal (energies in eV)."""

    diameter: float
    bandgap: float
    bulk_bandgap: float
    confinement_energy: float
    coulomb_correction: float
    bohr_radius: float
    regime: ConfinementRegime
    warnings: tuple[str, ...] = ()


def as_wavelength_tuple(wavelengths: Sequence[float | Nanometer]) -> tuple[float, ...]:
    """Normalize a wavelength sequence to plain nanometer floats."""
    return tuple(as_quantity(Nanometer, w, "wavelength").value for w in wavelengths)


__all__ = [
    "ParticleGeometry",
    "CalculationRequest",
    "SpectrumRequest",
    "ResultMetadata",
    "OpticalResult",
    "ConfinementRegime",
    "ThermalResult",
    "ElectronicResult",
    "as_wavelength_tuple",
]
